"""Tests for the cove.config module."""

from pathlib import Path

import pytest

from cove.config import DEFAULT_DATA_DIR, Settings, default_sources, load_settings
from cove.indices import DuplicatePolicy
from cove.models import Metric


class TestLoadSettings:
    def test_defaults(self) -> None:
        assert load_settings({}) == Settings()
        assert Settings().data_dir == Path(DEFAULT_DATA_DIR)

    def test_overrides(self) -> None:
        s = load_settings(
            {"COVE_DATA_DIR": "/srv/jhu", "COVE_ON_DUPLICATE": "FAIL", "COVE_HOST": "0.0.0.0", "COVE_PORT": "9000"}
        )
        assert s == Settings(data_dir=Path("/srv/jhu"), on_duplicate=DuplicatePolicy.FAIL, host="0.0.0.0", port=9000)

    def test_bad_policy(self) -> None:
        with pytest.raises(ValueError, match="COVE_ON_DUPLICATE"):
            load_settings({"COVE_ON_DUPLICATE": "merge"})

    def test_bad_port(self) -> None:
        with pytest.raises(ValueError, match="COVE_PORT"):
            load_settings({"COVE_PORT": "http"})


class TestDefaultSources:
    def test_order_and_paths(self, tmp_path: Path) -> None:
        sources = default_sources(tmp_path)
        assert [s.metric for s in sources] == [Metric.CONFIRMED, Metric.DEATHS, Metric.RECOVERED]
        assert sources[1].path == tmp_path / "time_series_19-covid-Deaths.csv"

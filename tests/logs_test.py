"""Tests for the cove.logs module."""

import logging

import pytest

from cove import logs


class TestConfigureLogging:
    @pytest.fixture
    def calls(self, monkeypatch: pytest.MonkeyPatch):
        seen = []
        monkeypatch.setattr(logging, "basicConfig", lambda **kw: seen.append(kw))
        return seen

    def test_plain_when_no_color(self, calls, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("NO_COLOR", "1")
        logs.configure_logging(verbose=True)
        assert calls[0]["level"] == logging.DEBUG
        assert "handlers" not in calls[0]

    def test_colored_on_tty(self, calls, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.setattr(logs, "_use_color", lambda: True)
        logs.configure_logging(verbose=False)
        assert calls[0]["level"] == logging.INFO
        (handler,) = calls[0]["handlers"]
        assert handler.formatter.log_colors["ERROR"] == "bold_red"

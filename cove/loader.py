"""
Source loader (wide table -> Observation stream)
================================================

This module reads one JHU-style time-series table and turns each row
into `Observation` records.

Key ideas:
- We try multiple possible column names because the upstream exports vary
  (`Country/Region` vs `Country_Region`, `Long` vs `Long_`).
- Geocoordinates and any other non-date columns are dropped.
- An empty Province/State means "the whole country" and becomes `ALL_REGIONS`.
- A source that cannot be read contributes nothing; a malformed count is fatal.
"""

from __future__ import annotations
from datetime import date
from typing import Any, Dict, Iterator, List, Mapping, Optional
import logging
import re
import zipfile

import pandas as pd
from openpyxl.utils.exceptions import InvalidFileException

from .dates import canonical, is_date_key, to_key
from .errors import BuildError
from .models import ALL_REGIONS, Metric, Observation, SourceSpec

logger = logging.getLogger(__name__)

COUNTRY_COLUMNS = ("Country/Region", "Country_Region", "Country")
REGION_COLUMNS = ("Province/State", "Province_State", "Province")

_COUNT_RE = re.compile(r"^(\d+)(?:\.0*)?$")


def _to_str(x: Any) -> str:
    if x is None or (not isinstance(x, str) and pd.isna(x)):
        return ""
    return str(x).strip()


def _norm(s: str) -> str:
    return re.sub(r"[^a-z0-9]+", "", str(s).lower())


def _col(columns: List[str], *names: str) -> Optional[str]:
    """Return the first column matching one of `names` (exact, then normalized)."""
    for n in names:
        if n in columns:
            return n
    norm_map = {_norm(c): c for c in columns}
    for n in names:
        nn = _norm(n)
        if nn in norm_map:
            return norm_map[nn]
    return None


def _column_label(c: Any) -> str:
    # Spreadsheet readers may hand back real dates for header cells.
    if isinstance(c, date):
        return to_key(c)
    return str(c).strip()


def _to_count(raw: str, where: str) -> int:
    m = _COUNT_RE.match(raw)
    if not m:
        raise BuildError(f"malformed count {raw!r} at {where}")
    return int(m.group(1))


def normalize_row(
    row: Mapping[str, Any],
    metric: Metric,
    source: str = "<row>",
    country_col: str = COUNTRY_COLUMNS[0],
    region_col: str = REGION_COLUMNS[0],
) -> Iterator[Observation]:
    """Yield one Observation per date column holding a value.

    `row` maps column label -> cell. Identity columns are consumed,
    geocoordinates and other non-date columns are ignored.

    Raises:
        BuildError: a date cell holds something that is not a non-negative integer.
    """
    country = _to_str(row.get(country_col))
    region = _to_str(row.get(region_col)) or ALL_REGIONS
    if not country:
        logger.warning("%s: skipping row without a country", source)
        return

    for label, cell in row.items():
        if label in (country_col, region_col) or not is_date_key(label):
            continue
        raw = _to_str(cell)
        if not raw:
            continue
        where = f"{source} [{country}/{region} {label}]"
        yield Observation(
            country=country,
            region=region,
            date=canonical(label),
            metric=metric,
            count=_to_count(raw, where),
        )


def read_table(path) -> pd.DataFrame:
    """Read a CSV or Excel table with every cell kept as text."""
    suffix = str(path).lower()
    if suffix.endswith((".xlsx", ".xlsm")):
        df = pd.read_excel(path, engine="openpyxl", dtype=str)
    else:
        df = pd.read_csv(path, dtype=str, keep_default_na=False)
    df.rename(columns={c: _column_label(c) for c in df.columns}, inplace=True)
    return df.fillna("")


def load_source(spec: SourceSpec) -> List[Observation]:
    """Read one source and return its observations.

    A missing or unreadable table (or one without identity columns) is
    logged and yields an empty list, so one bad file does not stop startup.
    """
    try:
        df = read_table(spec.path)
    except (
        OSError,
        ValueError,
        pd.errors.ParserError,
        pd.errors.EmptyDataError,
        zipfile.BadZipFile,
        InvalidFileException,
    ) as e:
        logger.warning("source %s unreadable, skipping: %s", spec.path, e)
        return []

    columns = list(df.columns)
    country_col = _col(columns, *COUNTRY_COLUMNS)
    region_col = _col(columns, *REGION_COLUMNS)
    if country_col is None or region_col is None:
        logger.warning("source %s lacks country/region columns, skipping", spec.path)
        return []

    skipped = [c for c in columns if c not in (country_col, region_col) and not is_date_key(c)]
    if skipped:
        logger.debug("source %s: dropping non-date columns %s", spec.path, skipped)

    seen: Dict[str, str] = {}
    for c in columns:
        if c in (country_col, region_col) or not is_date_key(c):
            continue
        key = canonical(c)
        if key in seen:
            logger.warning(
                "source %s: columns %r and %r both map to date %s",
                spec.path, seen[key], c, key,
            )
        else:
            seen[key] = c

    out: List[Observation] = []
    source = str(spec.path)
    for row in df.to_dict("records"):
        out.extend(normalize_row(row, spec.metric, source, country_col, region_col))
    return out

"""
Query parameters
================

Every query has four parts: country, region, date and an optional metric.
Each of the first three is parsed into one of three shapes:

- `Wildcard()`        "all" or empty: do not filter at this level
- `Aggregate()`       "total": the country-wide figure
- `Literal(value)`    anything else: match this key

Downstream code dispatches on the shape, never on raw strings.

Validation happens here too, before any traversal:
a `total` country together with a specific region is contradictory and is
rejected with `InvalidRegionConstraint`.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Union

from .errors import InvalidRegionConstraint, QueryError
from .models import Metric

WILDCARD = "all"
AGGREGATE = "total"


@dataclass(frozen=True)
class Wildcard:
    pass


@dataclass(frozen=True)
class Aggregate:
    pass


@dataclass(frozen=True)
class Literal:
    value: str


Param = Union[Wildcard, Aggregate, Literal]


@dataclass(frozen=True)
class QuerySpec:
    """A validated query. `date` literals are still in the external MMddyyyy form."""
    country: Param
    region: Param
    date: Param
    metric: Optional[Metric] = None


def parse_param(raw: Optional[str]) -> Param:
    s = (raw or "").strip()
    folded = s.casefold()
    if folded in ("", WILDCARD):
        return Wildcard()
    if folded == AGGREGATE:
        return Aggregate()
    return Literal(s)


def parse_metric(raw: Union[None, str, Metric]) -> Optional[Metric]:
    if raw is None or isinstance(raw, Metric):
        return raw
    s = raw.strip()
    if s.casefold() in ("", WILDCARD):
        return None
    try:
        return Metric.parse(s)
    except ValueError as e:
        raise QueryError(str(e)) from None


def validate(
    country: Optional[str],
    region: Optional[str],
    date: Optional[str],
    metric: Union[None, str, Metric] = None,
) -> QuerySpec:
    """Parse raw parameters and check cross-parameter constraints.

    Raises:
        InvalidRegionConstraint: country is `total` and region names a specific region.
        QueryError: unknown metric name.
    """
    spec = QuerySpec(
        country=parse_param(country),
        region=parse_param(region),
        date=parse_param(date),
        metric=parse_metric(metric),
    )
    if isinstance(spec.country, Aggregate) and isinstance(spec.region, Literal):
        raise InvalidRegionConstraint()
    return spec

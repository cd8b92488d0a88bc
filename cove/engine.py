"""
Core engine (COVE)
==================

This is the heart of the project. COVE works like a tiny read-only
analytics engine:

1) Load sources -> Observation records
2) Build the hierarchical index once, then freeze it
3) Per query: validate parameters, translate the date, filter the tree

The filter is a four-level depth-first projection. Matching happens before
descending, so a point query only touches one country and region. On the way
back up, empty date, region and country nodes are dropped, so a result
never contains an empty branch. An unmatched query yields `{}`.

The index is never mutated by a query; every result is a new dict.
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Union

from . import dates
from .indices import CountryNode, DateNode, DuplicatePolicy, HierarchicalIndex, RegionNode, build_index
from .models import ALL_REGIONS, Metric, SourceSpec
from .query_lang import Aggregate, Literal, Param, QuerySpec, Wildcard, validate

ResultTree = Dict[str, Dict[str, Dict[str, Dict[str, int]]]]


# ---------------- Per-level matching ----------------
def _match_countries(idx: HierarchicalIndex, p: Param) -> Iterable[Tuple[str, CountryNode]]:
    if isinstance(p, Literal):
        return idx.match_countries(p.value)
    # Wildcard and Aggregate both span every country; Aggregate narrows regions.
    return idx.countries()


def _match_regions(cnode: CountryNode, country: Param, region: Param) -> Iterable[Tuple[str, RegionNode]]:
    if isinstance(country, Aggregate) or isinstance(region, Aggregate):
        node = cnode.region(ALL_REGIONS)
        return [(ALL_REGIONS, node)] if node is not None else []
    if isinstance(region, Literal):
        return cnode.match_regions(region.value)
    return cnode.items()


def _match_dates(rnode: RegionNode, p: Param) -> Iterable[Tuple[str, DateNode]]:
    if isinstance(p, Wildcard):
        return rnode.items()
    node = rnode.date(p.value)
    return [(p.value, node)] if node is not None else []


def _latest_counts(rnode: RegionNode, metric: Optional[Metric]) -> Dict[str, Dict[str, int]]:
    """Each metric at its own most recent date; a metric may stop before the others."""
    days: Dict[str, Dict[str, int]] = {}
    for m in (Metric if metric is None else (metric,)):
        key = rnode.latest(m)
        if key is not None:
            days.setdefault(key, {})[m.value] = rnode.date(key).get(m)
    return days


def _project_metrics(dnode: DateNode, metric: Optional[Metric]) -> Dict[str, int]:
    if metric is None:
        return {m.value: n for m, n in dnode.items()}
    n = dnode.get(metric)
    return {} if n is None else {metric.value: n}


def filter_index(idx: HierarchicalIndex, spec: QuerySpec) -> ResultTree:
    """Project the index onto `spec` and prune empty branches bottom-up.

    `spec.date`, when a Literal, must already be an index key (see `dates.encode`).
    """
    result: ResultTree = {}
    for c, cnode in _match_countries(idx, spec.country):
        regions: Dict[str, Dict[str, Dict[str, int]]] = {}
        for r, rnode in _match_regions(cnode, spec.country, spec.region):
            if isinstance(spec.date, Aggregate):
                days = _latest_counts(rnode, spec.metric)
            else:
                days = {}
                for d, dnode in _match_dates(rnode, spec.date):
                    counts = _project_metrics(dnode, spec.metric)
                    if counts:
                        days[d] = counts
            if days:
                regions[r] = days
        if regions:
            result[c] = regions
    return result


def query(
    idx: HierarchicalIndex,
    country: Optional[str] = "all",
    region: Optional[str] = "all",
    date: Optional[str] = "all",
    metric: Union[None, str, Metric] = None,
) -> ResultTree:
    """Validate, translate the date, and filter.

    Raises:
        InvalidRegionConstraint: `total` country with a specific region.
        InvalidDateFormat: date is not `all`, `total` or MMddyyyy.
        QueryError: unknown metric.
    """
    spec = validate(country, region, date, metric)
    if isinstance(spec.date, Literal):
        spec = replace(spec, date=Literal(dates.encode(spec.date.value)))
    return filter_index(idx, spec)


@dataclass(frozen=True)
class Cove:
    """COVID Observation Engine.

    Owns one immutable index and answers queries against it. Safe to share
    between threads: nothing here writes after construction.
    """
    index: HierarchicalIndex
    sources: Tuple[SourceSpec, ...] = field(default=())

    @classmethod
    def from_sources(
        cls,
        sources: Sequence[SourceSpec],
        policy: DuplicatePolicy = DuplicatePolicy.OVERWRITE,
    ) -> "Cove":
        return cls(index=build_index(sources, policy), sources=tuple(sources))

    def query(
        self,
        country: Optional[str] = "all",
        region: Optional[str] = "all",
        date: Optional[str] = "all",
        metric: Union[None, str, Metric] = None,
    ) -> ResultTree:
        return query(self.index, country, region, date, metric)

    def stats(self) -> Dict[str, int]:
        regions = sum(len(cnode) for _, cnode in self.index.countries())
        return {
            "countries": len(self.index),
            "regions": regions,
            "observations": self.index.observation_count(),
        }

    def values(self, level: str, country: Optional[str] = None, prefix: str = "") -> List[str]:
        """Sorted distinct keys at one level (`country`, `region` or `date`)."""
        level = level.lower()
        if level == "country":
            vals = [c for c, _ in self.index.countries()]
        elif level in ("region", "date"):
            if not country:
                raise ValueError(f"values {level} needs a country")
            cnodes = [n for _, n in self.index.match_countries(country)]
            if level == "region":
                vals = sorted({r for n in cnodes for r, _ in n.items()})
            else:
                keys = {d for n in cnodes for _, rnode in n.items() for d, _ in rnode.items()}
                return [d for d in sorted(keys, key=dates.decode) if d.startswith(prefix)]
        else:
            raise ValueError("values level must be: country | region | date")
        p = prefix.casefold()
        return sorted(v for v in vals if v.casefold().startswith(p))

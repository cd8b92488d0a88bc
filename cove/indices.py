"""
Hierarchical index (Country -> Region -> Date -> Metric -> Count)
=================================================================

COVE merges the three wide tables (confirmed, deaths, recovered) into one
four-level tree. The sources are ingested in order against the same
country/region/date keys, so each date node ends up holding all three
metrics for that (country, region, date).

Example:
- `idx.country("US").region("all").date("3/12/20").get(Metric.DEATHS)`

Country and region names keep their original spelling for storage and are
matched case-insensitively. Date keys are the source header labels and are
matched exactly.

The tree is built once and then frozen: every level is swapped for a
read-only mapping, so concurrent readers never observe a write.
"""

from __future__ import annotations
from enum import Enum
from types import MappingProxyType
from typing import Callable, Dict, Iterable, Iterator, List, Optional, Tuple
import logging

from . import dates
from .errors import BuildError
from .loader import load_source
from .models import Metric, Observation, SourceSpec

logger = logging.getLogger(__name__)


class DuplicatePolicy(str, Enum):
    """What to do when two sources supply the same (country, region, date, metric)."""
    OVERWRITE = "overwrite"
    FAIL = "fail"


class DateNode:
    """Metric -> count for one (country, region, date)."""

    def __init__(self) -> None:
        self._counts: Dict[Metric, int] = {}

    def get(self, metric: Metric) -> Optional[int]:
        return self._counts.get(metric)

    def items(self) -> Iterable[Tuple[Metric, int]]:
        return self._counts.items()

    def __len__(self) -> int:
        return len(self._counts)

    def _set(self, metric: Metric, count: int) -> None:
        self._counts[metric] = count

    def _freeze(self) -> None:
        self._counts = MappingProxyType(self._counts)


class RegionNode:
    """Date key -> DateNode for one (country, region)."""

    def __init__(self) -> None:
        self._dates: Dict[str, DateNode] = {}
        self._latest: Dict[Optional[Metric], str] = {}

    def date(self, key: str) -> Optional[DateNode]:
        return self._dates.get(key)

    def latest(self, metric: Optional[Metric] = None) -> Optional[str]:
        """Most recent date holding `metric` (any metric when None)."""
        return self._latest.get(metric)

    def items(self) -> Iterable[Tuple[str, DateNode]]:
        return self._dates.items()

    def __len__(self) -> int:
        return len(self._dates)

    def _date_or_create(self, key: str) -> DateNode:
        node = self._dates.get(key)
        if node is None:
            node = self._dates[key] = DateNode()
        return node

    def _freeze(self) -> None:
        for node in self._dates.values():
            node._freeze()
        # Counts are cumulative, so each metric's most recent date is its running total.
        latest: Dict[Optional[Metric], str] = {}
        for key in sorted(self._dates, key=dates.decode):
            latest[None] = key
            for m, _ in self._dates[key].items():
                latest[m] = key
        self._latest = MappingProxyType(latest)
        self._dates = MappingProxyType(self._dates)


class _Branch:
    """A level keyed by case-preserving names with case-insensitive matching."""

    def __init__(self) -> None:
        self._children: Dict[str, object] = {}
        self._folded: Dict[str, List[str]] = {}

    def __len__(self) -> int:
        return len(self._children)

    def _lookup(self, key: str):
        return self._children.get(key)

    def _match(self, name: str) -> List[Tuple[str, object]]:
        keys = self._folded.get(name.casefold(), ())
        return [(k, self._children[k]) for k in keys]

    def _child_or_create(self, key: str, factory: Callable[[], object]):
        node = self._children.get(key)
        if node is None:
            node = self._children[key] = factory()
            self._folded.setdefault(key.casefold(), []).append(key)
        return node

    def _freeze_level(self) -> None:
        self._children = MappingProxyType(self._children)
        self._folded = MappingProxyType({k: tuple(v) for k, v in self._folded.items()})


class CountryNode(_Branch):
    """Region name -> RegionNode for one country."""

    def region(self, name: str) -> Optional[RegionNode]:
        """Exact lookup (use `match_regions` for case-insensitive matching)."""
        return self._lookup(name)

    def match_regions(self, name: str) -> List[Tuple[str, RegionNode]]:
        return self._match(name)

    def items(self) -> Iterable[Tuple[str, RegionNode]]:
        return self._children.items()

    def _freeze(self) -> None:
        for node in self._children.values():
            node._freeze()
        self._freeze_level()


class HierarchicalIndex(_Branch):
    """Country name -> CountryNode. Built by `build_index`, read-only afterwards."""

    def __init__(self) -> None:
        super().__init__()
        self.frozen = False

    # ---------------- Lookup ----------------
    def country(self, name: str) -> Optional[CountryNode]:
        return self._lookup(name)

    def match_countries(self, name: str) -> List[Tuple[str, CountryNode]]:
        return self._match(name)

    def countries(self) -> Iterable[Tuple[str, CountryNode]]:
        return self._children.items()

    def observation_count(self) -> int:
        return sum(1 for _ in self.iter_observations())

    def iter_observations(self) -> Iterator[Observation]:
        for c, cnode in self.countries():
            for r, rnode in cnode.items():
                for d, dnode in rnode.items():
                    for m, n in dnode.items():
                        yield Observation(country=c, region=r, date=d, metric=m, count=n)

    def to_dict(self) -> Dict[str, Dict[str, Dict[str, Dict[str, int]]]]:
        """Plain nested-dict copy of the whole tree (metric names as strings)."""
        return {
            c: {
                r: {d: {m.value: n for m, n in dnode.items()} for d, dnode in rnode.items()}
                for r, rnode in cnode.items()
            }
            for c, cnode in self.countries()
        }

    # ---------------- Build ----------------
    def upsert(self, obs: Observation, policy: DuplicatePolicy = DuplicatePolicy.OVERWRITE) -> None:
        """Insert one observation, creating country/region/date nodes as needed."""
        if self.frozen:
            raise RuntimeError("index is frozen; build a new index instead of mutating")
        cnode = self._child_or_create(obs.country, CountryNode)
        rnode = cnode._child_or_create(obs.region, RegionNode)
        dnode = rnode._date_or_create(obs.date)
        if policy is DuplicatePolicy.FAIL and dnode.get(obs.metric) is not None:
            raise BuildError(
                f"duplicate {obs.metric.value} value for "
                f"{obs.country}/{obs.region} on {obs.date}"
            )
        dnode._set(obs.metric, obs.count)

    def freeze(self) -> "HierarchicalIndex":
        if not self.frozen:
            for node in self._children.values():
                node._freeze()
            self._freeze_level()
            self.frozen = True
        return self


def build_index(
    sources: Iterable[SourceSpec],
    policy: DuplicatePolicy = DuplicatePolicy.OVERWRITE,
    loader: Optional[Callable[[SourceSpec], List[Observation]]] = None,
) -> HierarchicalIndex:
    """Build the frozen index from sources, in the order given.

    Returns:
        HierarchicalIndex with every level non-empty.

    Raises:
        BuildError: malformed count, or a duplicate key under `DuplicatePolicy.FAIL`.
    """
    if loader is None:
        loader = load_source

    idx = HierarchicalIndex()
    for spec in sources:
        observations = loader(spec)
        for obs in observations:
            idx.upsert(obs, policy)
        logger.info("loaded %d %s observations from %s", len(observations), spec.metric.value, spec.path)
    idx.freeze()
    logger.info("index ready: %d countries", len(idx))
    return idx
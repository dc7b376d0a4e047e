"""Exact-cover search: partition a tile multiset into valid melds.

The search always anchors on the smallest remaining tile (canonical order is
value, then color, wildcards last) and tries every meld that could contain it.
Interchangeable tiles are explored once, and failed remainders are remembered
by their interchangeability multiset, so branching follows tile *types*
rather than raw tile count.
"""

from __future__ import annotations

import logging
import time
from collections import Counter
from dataclasses import dataclass
from itertools import combinations
from typing import Dict, Iterable, Iterator, List, Optional, Set, Tuple

from .errors import SearchBudgetExceeded
from .meld import MAX_GROUP_SIZE, MIN_MELD_SIZE, Meld, group_check, run_check
from .rules import Ruleset
from .tiles import MAX_VALUE, Tile

logger = logging.getLogger(__name__)

PoolKey = Tuple[Tuple[str, int], ...]


@dataclass(frozen=True)
class SearchBudget:
    max_nodes: Optional[int] = 200_000
    max_seconds: Optional[float] = None

    @classmethod
    def from_ruleset(cls, ruleset: Ruleset) -> "SearchBudget":
        return cls(max_nodes=ruleset.solver_max_nodes, max_seconds=ruleset.solver_max_seconds)


def _pool_key(pool: List[Tile]) -> PoolKey:
    return tuple(tile.type_key() for tile in pool)


def _without(pool: List[Tile], used: Iterable[Tile]) -> List[Tile]:
    pending = Counter(tile.id for tile in used)
    rest = []
    for tile in pool:
        if pending[tile.id]:
            pending[tile.id] -= 1
            continue
        rest.append(tile)
    return rest


def _group_candidates(anchor: Tile, pool: List[Tile]) -> Iterator[List[Tile]]:
    others = [t for t in pool[1:] if t.is_wildcard or t.value == anchor.value]
    seen: Set[Tuple] = set()
    for extra in range(MIN_MELD_SIZE - 1, MAX_GROUP_SIZE):
        for combo in combinations(others, extra):
            tiles = [anchor, *combo]
            key = tuple(sorted(t.type_key() for t in tiles))
            if key in seen:
                continue
            seen.add(key)
            if group_check(tiles)[0]:
                yield tiles


def _extend_run(
    seq: List[Tile], pool: List[Tile], next_value: int, results: List[List[Tile]], seen: Set[Tuple]
) -> None:
    if len(seq) >= MIN_MELD_SIZE:
        key = tuple(sorted(t.type_key() for t in seq))
        if key not in seen and run_check(seq)[0]:
            seen.add(key)
            results.append(list(seq))
    if len(seq) >= MAX_VALUE:
        return

    # past the top, a wildcard stands for a value below the anchor
    representatives: Dict[Tuple[str, int], Tile] = {}
    for tile in pool:
        if tile.is_wildcard or (next_value <= MAX_VALUE and tile.value == next_value):
            representatives.setdefault(tile.type_key(), tile)

    for tile in representatives.values():
        rest = [t for t in pool if t.id != tile.id]
        _extend_run(seq + [tile], rest, next_value + 1, results, seen)


def _run_candidates(anchor: Tile, pool: List[Tile]) -> List[List[Tile]]:
    same_color = [t for t in pool[1:] if t.is_wildcard or t.color == anchor.color]
    results: List[List[Tile]] = []
    _extend_run([anchor], same_color, anchor.value + 1, results, set())
    return results


class _Search:
    def __init__(self, budget: SearchBudget) -> None:
        self.budget = budget
        self.nodes = 0
        self.started = time.monotonic()
        self.failed: Set[PoolKey] = set()

    def elapsed(self) -> float:
        return time.monotonic() - self.started

    def _tick(self) -> None:
        self.nodes += 1
        if self.budget.max_nodes is not None and self.nodes > self.budget.max_nodes:
            raise SearchBudgetExceeded(self.nodes, self.elapsed())
        if self.budget.max_seconds is not None and self.elapsed() > self.budget.max_seconds:
            raise SearchBudgetExceeded(self.nodes, self.elapsed())

    def backtrack(self, pool: List[Tile]) -> Optional[List[Meld]]:
        if not pool:
            return []
        key = _pool_key(pool)
        if key in self.failed:
            return None
        self._tick()

        anchor = pool[0]
        if anchor.is_wildcard:
            # only wildcards are left
            if len(pool) >= MIN_MELD_SIZE:
                return [Meld(pool)]
            self.failed.add(key)
            return None

        candidates = list(_group_candidates(anchor, pool))
        candidates.extend(_run_candidates(anchor, pool))
        for tiles in candidates:
            rest = self.backtrack(_without(pool, tiles))
            if rest is not None:
                return [Meld(tiles)] + rest

        self.failed.add(key)
        return None


def solve(tiles: Iterable[Tile], budget: Optional[SearchBudget] = None) -> Optional[List[Meld]]:
    """Return melds using every tile exactly once, or None if no partition exists.

    Raises SearchBudgetExceeded when the budget runs out before the search
    has either found a partition or exhausted every branch.
    """
    pool = sorted(tiles, key=lambda t: t.sort_key())
    if not pool:
        return []
    if len(pool) < MIN_MELD_SIZE:
        return None

    search = _Search(budget or SearchBudget())
    try:
        result = search.backtrack(pool)
    except SearchBudgetExceeded:
        logger.debug("solver gave up on %d tiles after %d nodes", len(pool), search.nodes)
        raise
    logger.debug(
        "solver %s %d tiles in %d nodes (%.3fs)",
        "partitioned" if result is not None else "rejected",
        len(pool),
        search.nodes,
        search.elapsed(),
    )
    return result


def can_partition(tiles: Iterable[Tile], budget: Optional[SearchBudget] = None) -> bool:
    return solve(tiles, budget) is not None

from __future__ import annotations

from collections import Counter
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Tuple

from .tiles import MAX_VALUE, MIN_VALUE, Tile

MIN_MELD_SIZE = 3
MAX_GROUP_SIZE = 4


class MeldKind(str, Enum):
    GROUP = "GROUP"
    RUN = "RUN"
    INVALID = "INVALID"


def _split_wildcards(tiles: Iterable[Tile]) -> Tuple[List[Tile], int]:
    numbers: List[Tile] = []
    wildcards = 0
    for tile in tiles:
        if tile.is_wildcard:
            wildcards += 1
        else:
            numbers.append(tile)
    return numbers, wildcards


def group_check(tiles: List[Tile]) -> Tuple[bool, str]:
    if len(tiles) < MIN_MELD_SIZE:
        return False, "meld too short"
    if len(tiles) > MAX_GROUP_SIZE:
        return False, f"group must have at most {MAX_GROUP_SIZE} tiles"
    numbers, _ = _split_wildcards(tiles)
    if not numbers:
        return True, ""
    value = numbers[0].value
    colors = set()
    for tile in numbers:
        if tile.value != value:
            return False, "group must share value"
        if tile.color in colors:
            return False, "group colors must be distinct"
        colors.add(tile.color)
    return True, ""


def run_check(tiles: List[Tile]) -> Tuple[bool, str]:
    if len(tiles) < MIN_MELD_SIZE:
        return False, "meld too short"
    numbers, wildcards = _split_wildcards(tiles)
    if not numbers:
        return True, ""
    if len({tile.color for tile in numbers}) != 1:
        return False, "run must have same color"
    ordered = sorted(tile.value for tile in numbers)
    for current, nxt in zip(ordered, ordered[1:]):
        gap = nxt - current - 1
        if gap < 0:
            return False, "run must not duplicate value"
        if gap > wildcards:
            return False, "not enough wildcards to bridge gap"
        wildcards -= gap
    room = (ordered[0] - MIN_VALUE) + (MAX_VALUE - ordered[-1])
    if wildcards > room:
        return False, "run exceeds value range"
    return True, ""


class Meld:
    """Ordered tiles on the table; the kind is derived from the tiles each time."""

    def __init__(self, tiles: Optional[Iterable[Tile]] = None) -> None:
        self._tiles: List[Tile] = list(tiles or [])

    def tiles(self) -> List[Tile]:
        return list(self._tiles)

    def __len__(self) -> int:
        return len(self._tiles)

    def __iter__(self):
        return iter(self._tiles)

    def __repr__(self) -> str:
        return f"Meld([{', '.join(str(t) for t in self._tiles)}])"

    def add_tile(self, tile: Tile) -> None:
        self._tiles.append(tile)

    def remove_tile(self, tile_id: str) -> Optional[Tile]:
        for idx, tile in enumerate(self._tiles):
            if tile.id == tile_id:
                return self._tiles.pop(idx)
        return None

    def copy(self) -> "Meld":
        return Meld(self._tiles)

    def is_valid(self) -> Tuple[bool, str]:
        ok, group_reason = group_check(self._tiles)
        if ok:
            return True, ""
        ok, run_reason = run_check(self._tiles)
        if ok:
            return True, ""
        if group_reason == run_reason:
            return False, run_reason
        return False, f"{group_reason}; {run_reason}"

    def validate(self) -> bool:
        return self.is_valid()[0]

    def classify(self) -> MeldKind:
        if group_check(self._tiles)[0]:
            return MeldKind.GROUP
        if run_check(self._tiles)[0]:
            return MeldKind.RUN
        return MeldKind.INVALID

    def points(self) -> int:
        return sum(tile.value for tile in self._tiles if not tile.is_wildcard)

    def signature(self) -> Tuple:
        counts = Counter(tile.type_key() for tile in self._tiles)
        return tuple(sorted(counts.items()))

    def to_dict(self) -> List[Dict[str, Any]]:
        return [tile.to_dict() for tile in self._tiles]

    @classmethod
    def from_dict(cls, data: Iterable[Dict[str, Any]]) -> "Meld":
        return cls(Tile.from_dict(item) for item in data)

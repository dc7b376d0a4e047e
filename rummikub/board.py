from __future__ import annotations

import hashlib
from typing import Any, Dict, Iterable, List, Optional, Tuple

from .meld import Meld
from .tiles import Tile


class Board:
    """The shared table. Copies its melds; tiles are shared by identity."""

    def __init__(self, melds: Optional[Iterable[Meld]] = None) -> None:
        self.melds: List[Meld] = [meld.copy() for meld in (melds or [])]

    def __repr__(self) -> str:
        return f"Board({self.melds!r})"

    def __len__(self) -> int:
        return len(self.melds)

    def clone(self) -> "Board":
        return Board(self.melds)

    def add_meld(self, meld: Meld) -> None:
        self.melds.append(meld)

    def is_valid(self) -> bool:
        return all(meld.validate() for meld in self.melds)

    def invalid_melds(self) -> List[Tuple[int, str]]:
        problems = []
        for idx, meld in enumerate(self.melds):
            ok, reason = meld.is_valid()
            if not ok:
                problems.append((idx, reason))
        return problems

    def all_tiles(self) -> List[Tile]:
        return [tile for meld in self.melds for tile in meld.tiles()]

    def tile_ids(self) -> List[str]:
        return [tile.id for tile in self.all_tiles()]

    def has_duplicate_tiles(self) -> bool:
        ids = self.tile_ids()
        return len(ids) != len(set(ids))

    def canonical_key(self) -> Tuple:
        keys = []
        for meld in self.melds:
            keys.append(tuple(sorted(tile.id for tile in meld.tiles())))
        return tuple(sorted(keys))

    def stable_hash(self) -> str:
        return hashlib.sha256(repr(self.canonical_key()).encode("utf-8")).hexdigest()

    @classmethod
    def from_solution(cls, melds: Iterable[Meld]) -> "Board":
        return cls(melds)

    def to_dict(self) -> List[List[Dict[str, Any]]]:
        return [meld.to_dict() for meld in self.melds]

    @classmethod
    def from_dict(cls, data: Iterable[Iterable[Dict[str, Any]]]) -> "Board":
        return cls(Meld.from_dict(meld) for meld in data)

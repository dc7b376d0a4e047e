from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional, Tuple

from .board import Board
from .tiles import Tile


class MoveKind(str, Enum):
    DRAW = "DRAW"
    PLAY = "PLAY"


@dataclass(frozen=True)
class PlayPayload:
    new_board: Board
    tiles_from_hand: Tuple[Tile, ...]


@dataclass(frozen=True)
class Move:
    kind: MoveKind
    payload: Optional[PlayPayload] = None

    @staticmethod
    def draw() -> "Move":
        return Move(MoveKind.DRAW)

    @staticmethod
    def play(new_board: Board, tiles_from_hand: Iterable[Tile]) -> "Move":
        return Move(MoveKind.PLAY, PlayPayload(new_board, tuple(tiles_from_hand)))

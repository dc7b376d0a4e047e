"""Player collaborator contract.

Strategies (greedy, lookahead, UI bridges) implement one of these and live
outside the core. The engine hands each call its own board snapshot and a
copy of the player's hand; only the engine mutates game state.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List

from .board import Board
from .move import Move
from .tiles import Tile


class Player(ABC):
    def __init__(self, player_id: str) -> None:
        self.player_id = player_id

    @abstractmethod
    def propose_turn(self, board: Board, hand: List[Tile]) -> Move:
        ...


class AsyncPlayer(ABC):
    """A player whose proposal is awaited, e.g. pending on human input.

    The engine defines no timeout; wrap the wait (asyncio.wait_for) at the
    call site if one is needed.
    """

    def __init__(self, player_id: str) -> None:
        self.player_id = player_id

    @abstractmethod
    async def propose_turn(self, board: Board, hand: List[Tile]) -> Move:
        ...

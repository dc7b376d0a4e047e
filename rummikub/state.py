from __future__ import annotations

import hashlib
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from .board import Board
from .rules import Ruleset
from .tiles import Tile


@dataclass
class GameEvent:
    player: str
    move_kind: str
    payload: dict


@dataclass
class GameState:
    ruleset: Ruleset
    player_ids: List[str]
    board: Board
    hands: Dict[str, List[Tile]]
    draw_pile: List[Tile]
    initial_meld_done: Dict[str, bool]
    current_player: int = 0
    turn_number: int = 0
    event_log: List[GameEvent] = field(default_factory=list)
    winner: Optional[str] = None

    @property
    def current_player_id(self) -> str:
        return self.player_ids[self.current_player]

    @property
    def is_over(self) -> bool:
        return self.winner is not None

    def copy(self) -> "GameState":
        return GameState(
            ruleset=self.ruleset,
            player_ids=list(self.player_ids),
            board=self.board.clone(),
            hands={pid: list(hand) for pid, hand in self.hands.items()},
            draw_pile=list(self.draw_pile),
            initial_meld_done=dict(self.initial_meld_done),
            current_player=self.current_player,
            turn_number=self.turn_number,
            event_log=list(self.event_log),
            winner=self.winner,
        )

    def state_key(self) -> Tuple:
        return (
            self.current_player,
            self.turn_number,
            tuple(tuple(sorted(t.id for t in self.hands[pid])) for pid in self.player_ids),
            tuple(t.id for t in self.draw_pile),
            self.board.canonical_key(),
            tuple(self.initial_meld_done[pid] for pid in self.player_ids),
            self.winner,
        )

    def stable_hash(self) -> str:
        return hashlib.sha256(repr(self.state_key()).encode("utf-8")).hexdigest()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "board": self.board.to_dict(),
            "hands": {pid: [t.to_dict() for t in self.hands[pid]] for pid in self.player_ids},
            "drawPile": [t.to_dict() for t in self.draw_pile],
            "currentPlayerIndex": self.current_player,
            "openingMeldCompleted": {pid: self.initial_meld_done[pid] for pid in self.player_ids},
            "terminal": self.is_over,
            "winnerId": self.winner,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any], ruleset: Ruleset | None = None) -> "GameState":
        player_ids = list(data["hands"])
        terminal = data.get("terminal", False)
        winner = data.get("winnerId")
        if terminal and winner is None:
            raise ValueError("terminal state requires a winner")
        return cls(
            ruleset=ruleset or Ruleset(),
            player_ids=player_ids,
            board=Board.from_dict(data["board"]),
            hands={pid: [Tile.from_dict(t) for t in data["hands"][pid]] for pid in player_ids},
            draw_pile=[Tile.from_dict(t) for t in data["drawPile"]],
            initial_meld_done={pid: bool(data["openingMeldCompleted"].get(pid, False)) for pid in player_ids},
            current_player=data["currentPlayerIndex"],
            winner=winner if terminal else None,
        )


def _validate_players(player_ids: Sequence[str]) -> None:
    if not player_ids:
        raise ValueError("at least one player is required")
    if len(set(player_ids)) != len(player_ids):
        raise ValueError("player ids must be unique")


def new_game(player_ids: Sequence[str], draw_pile: Iterable[Tile], ruleset: Ruleset | None = None) -> GameState:
    """Deal from the end of an already shuffled pile and start at player 0."""
    ruleset = ruleset or Ruleset()
    _validate_players(player_ids)
    pile = list(draw_pile)
    hands: Dict[str, List[Tile]] = {pid: [] for pid in player_ids}
    for _ in range(ruleset.initial_hand_size):
        for pid in player_ids:
            if pile:
                hands[pid].append(pile.pop())
    return GameState(
        ruleset=ruleset,
        player_ids=list(player_ids),
        board=Board(),
        hands=hands,
        draw_pile=pile,
        initial_meld_done={pid: False for pid in player_ids},
    )

"""Rummikub rule engine core: tiles, melds, the partition solver and turn handling."""

from .board import Board
from .engine import (
    EnginePhase,
    TurnEngine,
    TurnOutcome,
    TurnStatus,
    apply_move,
    is_legal_move,
    opening_points,
    replay_event_log,
)
from .errors import GameFinished, MalformedTile, RummikubError, SearchBudgetExceeded, TurnInProgress
from .meld import Meld, MeldKind
from .move import Move, MoveKind, PlayPayload
from .players import AsyncPlayer, Player
from .rules import Ruleset
from .solver import SearchBudget, can_partition, solve
from .state import GameEvent, GameState, new_game
from .tiles import Color, Tile

__all__ = [
    "Board",
    "Color",
    "Tile",
    "Meld",
    "MeldKind",
    "Ruleset",
    "GameState",
    "GameEvent",
    "Move",
    "MoveKind",
    "PlayPayload",
    "Player",
    "AsyncPlayer",
    "TurnEngine",
    "TurnOutcome",
    "TurnStatus",
    "EnginePhase",
    "SearchBudget",
    "RummikubError",
    "MalformedTile",
    "SearchBudgetExceeded",
    "GameFinished",
    "TurnInProgress",
    "new_game",
    "apply_move",
    "is_legal_move",
    "opening_points",
    "replay_event_log",
    "solve",
    "can_partition",
]

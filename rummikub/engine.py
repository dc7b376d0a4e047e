from __future__ import annotations

import inspect
import logging
from collections import Counter
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Union

from .board import Board
from .errors import GameFinished, TurnInProgress
from .meld import Meld
from .move import Move, MoveKind, PlayPayload
from .players import AsyncPlayer, Player
from .state import GameEvent, GameState
from .tiles import Tile

logger = logging.getLogger(__name__)


class TurnStatus(str, Enum):
    DREW = "DREW"
    COMMITTED = "COMMITTED"
    REJECTED = "REJECTED"


@dataclass(frozen=True)
class TurnOutcome:
    player_id: str
    status: TurnStatus
    reason: str = ""
    tiles_drawn: Tuple[Tile, ...] = ()


def opening_points(tiles: Iterable[Tile]) -> int:
    # wildcards score nothing toward the opening threshold
    return Meld(tiles).points()


def _check_conservation(old_board: Board, payload: PlayPayload) -> Tuple[bool, str]:
    expected = Counter(old_board.tile_ids())
    expected.update(tile.id for tile in payload.tiles_from_hand)
    if Counter(payload.new_board.tile_ids()) != expected:
        return False, "board tiles must match previous board plus played tiles"
    return True, ""


def _well_formed_play(move: Move) -> bool:
    payload = move.payload
    if move.kind != MoveKind.PLAY or not isinstance(payload, PlayPayload):
        return False
    if not isinstance(payload.new_board, Board):
        return False
    if not isinstance(payload.tiles_from_hand, (tuple, list)):
        return False
    if not all(isinstance(meld, Meld) for meld in payload.new_board.melds):
        return False
    tiles = [t for meld in payload.new_board.melds for t in meld.tiles()] + list(payload.tiles_from_hand)
    return all(isinstance(t, Tile) for t in tiles)


def is_legal_move(state: GameState, move: Move) -> Tuple[bool, str]:
    if state.is_over:
        return False, "game already finished"

    if not isinstance(move, Move):
        return False, "invalid move payload"

    if move.kind == MoveKind.DRAW:
        return True, ""

    if not _well_formed_play(move):
        return False, "invalid move payload"

    payload: PlayPayload = move.payload
    problems = payload.new_board.invalid_melds()
    if problems:
        idx, reason = problems[0]
        return False, f"invalid meld {idx}: {reason}"
    if payload.new_board.has_duplicate_tiles():
        return False, "board uses the same tile twice"

    in_hand = Counter(tile.id for tile in state.hands[state.current_player_id])
    claimed = Counter(tile.id for tile in payload.tiles_from_hand)
    if any(in_hand[tile_id] < count for tile_id, count in claimed.items()):
        return False, "cannot play tiles not in hand"

    if not payload.tiles_from_hand:
        return False, "play must use at least one tile from hand"

    if state.ruleset.enforce_tile_conservation:
        ok, reason = _check_conservation(state.board, payload)
        if not ok:
            return False, reason

    if not state.initial_meld_done[state.current_player_id]:
        points = opening_points(payload.tiles_from_hand)
        minimum = state.ruleset.initial_meld_min_points
        if points < minimum:
            return False, f"initial meld must score at least {minimum} (got {points})"

    return True, ""


def _draw_tiles(state: GameState, count: int) -> Tuple[Tile, ...]:
    hand = state.hands[state.current_player_id]
    drawn = []
    for _ in range(count):
        if not state.draw_pile:
            break
        tile = state.draw_pile.pop()
        hand.append(tile)
        drawn.append(tile)
    return tuple(drawn)


def _end_turn(state: GameState) -> None:
    state.turn_number += 1
    if not state.is_over:
        state.current_player = (state.current_player + 1) % len(state.player_ids)


def _apply_draw(state: GameState) -> TurnOutcome:
    player_id = state.current_player_id
    drawn = _draw_tiles(state, 1)
    state.event_log.append(
        GameEvent(player=player_id, move_kind=MoveKind.DRAW.value, payload={"tiles": [t.id for t in drawn]})
    )
    return TurnOutcome(player_id, TurnStatus.DREW, "" if drawn else "draw pile is empty", drawn)


def _play_event_payload(payload: PlayPayload) -> dict:
    return {
        "board": payload.new_board.to_dict(),
        "tiles_from_hand": [t.to_dict() for t in payload.tiles_from_hand],
    }


def _apply_play(state: GameState, payload: PlayPayload) -> TurnOutcome:
    player_id = state.current_player_id
    hand = state.hands[player_id]
    for tile in payload.tiles_from_hand:
        for idx, held in enumerate(hand):
            if held.id == tile.id:
                del hand[idx]
                break
    state.board = payload.new_board.clone()
    state.initial_meld_done[player_id] = True
    event = _play_event_payload(payload)
    event["status"] = TurnStatus.COMMITTED.value
    state.event_log.append(GameEvent(player=player_id, move_kind=MoveKind.PLAY.value, payload=event))
    logger.debug("player %s committed %d tiles", player_id, len(payload.tiles_from_hand))
    if not hand:
        state.winner = player_id
        logger.info("player %s emptied their hand and wins", player_id)
    return TurnOutcome(player_id, TurnStatus.COMMITTED)


def _reject_play(state: GameState, move: Move, reason: str) -> TurnOutcome:
    player_id = state.current_player_id
    drawn = _draw_tiles(state, state.ruleset.penalty_draw)
    event = _play_event_payload(move.payload) if isinstance(move, Move) and _well_formed_play(move) else {}
    event.update(status=TurnStatus.REJECTED.value, reason=reason, penalty=[t.id for t in drawn])
    state.event_log.append(GameEvent(player=player_id, move_kind=MoveKind.PLAY.value, payload=event))
    logger.info("rejected play from %s: %s (penalty %d tiles)", player_id, reason, len(drawn))
    return TurnOutcome(player_id, TurnStatus.REJECTED, reason, drawn)


def apply_move(state: GameState, move: Move) -> Tuple[GameState, TurnOutcome]:
    """Resolve one turn on a copy of ``state``.

    Illegal plays are not errors: the board stays as it was, the player takes
    the penalty draw, and the outcome carries the reason. Only a finished game
    raises.
    """
    if state.is_over:
        raise GameFinished(f"game already won by {state.winner}")

    new_state = state.copy()
    if isinstance(move, Move) and move.kind == MoveKind.DRAW:
        outcome = _apply_draw(new_state)
    else:
        legal, reason = is_legal_move(state, move)
        if legal and move.payload is not None:
            outcome = _apply_play(new_state, move.payload)
        else:
            outcome = _reject_play(new_state, move, reason)
    _end_turn(new_state)
    return new_state, outcome


def replay_event_log(initial_state: GameState, events: List[GameEvent]) -> GameState:
    state = initial_state.copy()
    for event in events:
        if event.move_kind == MoveKind.DRAW.value:
            move = Move.draw()
        elif event.move_kind == MoveKind.PLAY.value:
            move = Move.play(
                new_board=Board.from_dict(event.payload.get("board", [])),
                tiles_from_hand=[Tile.from_dict(t) for t in event.payload.get("tiles_from_hand", [])],
            )
        else:
            raise ValueError(f"Unknown event kind {event.move_kind}")
        state, _ = apply_move(state, move)
    return state


class EnginePhase(str, Enum):
    AWAITING_PROPOSAL = "AWAITING_PROPOSAL"
    EVALUATING = "EVALUATING"
    GAME_OVER = "GAME_OVER"


AnyPlayer = Union[Player, AsyncPlayer]


class TurnEngine:
    """Runs turns one at a time against a set of player collaborators.

    Asking the current player for a proposal is the only suspension point.
    A second request while one is outstanding raises TurnInProgress; if an
    outstanding wait is cancelled the turn stays with the same player.
    """

    def __init__(self, state: GameState, players: Sequence[AnyPlayer]) -> None:
        self.players: Dict[str, AnyPlayer] = {p.player_id: p for p in players}
        if sorted(self.players) != sorted(state.player_ids):
            raise ValueError("players must match the game's player ids")
        self.state = state
        self.history: List[TurnOutcome] = []
        self.phase = EnginePhase.GAME_OVER if state.is_over else EnginePhase.AWAITING_PROPOSAL
        self._outstanding = False

    @property
    def winner(self) -> Optional[str]:
        return self.state.winner

    def _request(self) -> Tuple[AnyPlayer, Board, List[Tile]]:
        if self._outstanding:
            raise TurnInProgress(f"proposal from {self.state.current_player_id} still pending")
        player_id = self.state.current_player_id
        return self.players[player_id], self.state.board.clone(), list(self.state.hands[player_id])

    def _resolve(self, move: Move) -> TurnOutcome:
        self.phase = EnginePhase.EVALUATING
        try:
            self.state, outcome = apply_move(self.state, move)
            self.history.append(outcome)
        finally:
            self.phase = EnginePhase.GAME_OVER if self.state.is_over else EnginePhase.AWAITING_PROPOSAL
        return outcome

    def play_turn(self) -> Optional[TurnOutcome]:
        if self.phase == EnginePhase.GAME_OVER:
            return None
        player, board, hand = self._request()
        self._outstanding = True
        try:
            move = player.propose_turn(board, hand)
            if inspect.isawaitable(move):
                if inspect.iscoroutine(move):
                    move.close()
                raise TypeError(f"player {player.player_id} is asynchronous; use play_turn_async")
        finally:
            self._outstanding = False
        return self._resolve(move)

    async def play_turn_async(self) -> Optional[TurnOutcome]:
        if self.phase == EnginePhase.GAME_OVER:
            return None
        player, board, hand = self._request()
        self._outstanding = True
        try:
            move = player.propose_turn(board, hand)
            if inspect.isawaitable(move):
                move = await move
        finally:
            self._outstanding = False
        return self._resolve(move)

    def run(self, max_turns: int) -> Optional[str]:
        for _ in range(max_turns):
            if self.play_turn() is None:
                break
        return self.winner

    async def run_async(self, max_turns: int) -> Optional[str]:
        for _ in range(max_turns):
            if await self.play_turn_async() is None:
                break
        return self.winner

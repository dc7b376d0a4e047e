from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Ruleset:
    initial_hand_size: int = 14
    initial_meld_min_points: int = 30
    penalty_draw: int = 3
    # off: claimed tiles missing from the new board leave the game
    enforce_tile_conservation: bool = False
    solver_max_nodes: Optional[int] = 200_000
    solver_max_seconds: Optional[float] = None

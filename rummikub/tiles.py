from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Tuple

from .errors import MalformedTile

MIN_VALUE = 1
MAX_VALUE = 13


class Color(str, Enum):
    BLACK = "BLACK"
    RED = "RED"
    BLUE = "BLUE"
    ORANGE = "ORANGE"
    WILDCARD = "WILDCARD"


_COLOR_ORDER = {color: idx for idx, color in enumerate(Color)}


def _new_id() -> str:
    return uuid.uuid4().hex


@dataclass(frozen=True)
class Tile:
    color: Color
    value: int
    is_wildcard: bool = False
    id: str = field(default_factory=_new_id)

    def __post_init__(self) -> None:
        if self.is_wildcard:
            object.__setattr__(self, "color", Color.WILDCARD)
            object.__setattr__(self, "value", 0)
            return
        if not isinstance(self.color, Color):
            try:
                object.__setattr__(self, "color", Color(self.color))
            except ValueError as exc:
                raise MalformedTile(f"unknown color {self.color!r}") from exc
        if self.color == Color.WILDCARD:
            raise MalformedTile("wildcard color requires is_wildcard")
        if not isinstance(self.value, int) or not MIN_VALUE <= self.value <= MAX_VALUE:
            raise MalformedTile(f"tile value must be in [{MIN_VALUE}, {MAX_VALUE}], got {self.value!r}")

    @classmethod
    def number(cls, color: Color | str, value: int) -> "Tile":
        return cls(color, value)

    @classmethod
    def wildcard(cls) -> "Tile":
        return cls(Color.WILDCARD, 0, is_wildcard=True)

    def equals(self, other: "Tile") -> bool:
        if self.is_wildcard and other.is_wildcard:
            return True
        return not self.is_wildcard and not other.is_wildcard and (
            self.color == other.color and self.value == other.value
        )

    def clone(self) -> "Tile":
        return Tile(self.color, self.value, self.is_wildcard)

    def type_key(self) -> Tuple[str, int]:
        if self.is_wildcard:
            return (Color.WILDCARD.value, 0)
        return (self.color.value, self.value)

    def sort_key(self) -> Tuple[int, int, int]:
        if self.is_wildcard:
            return (1, 0, 0)
        return (0, self.value, _COLOR_ORDER[self.color])

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "color": self.color.value, "value": self.value}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Tile":
        color = data["color"]
        if color == Color.WILDCARD.value:
            return cls(Color.WILDCARD, 0, is_wildcard=True, id=data["id"])
        return cls(color, data["value"], id=data["id"])

    def __str__(self) -> str:
        if self.is_wildcard:
            return "Wildcard"
        return f"{self.color.value.title()}-{self.value}"

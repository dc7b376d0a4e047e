import pathlib
import sys

import pytest

ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from rummikub.errors import MalformedTile
from rummikub.tiles import Color, Tile


@pytest.mark.parametrize("value", [0, 14, -3])
def test_number_tile_rejects_out_of_range_value(value):
    with pytest.raises(MalformedTile):
        Tile.number(Color.RED, value)


def test_malformed_tile_is_a_value_error():
    with pytest.raises(ValueError):
        Tile.number(Color.BLUE, 99)


def test_number_tile_cannot_use_wildcard_color():
    with pytest.raises(MalformedTile):
        Tile(Color.WILDCARD, 5)


def test_string_color_is_coerced():
    tile = Tile.number("ORANGE", 13)
    assert tile.color is Color.ORANGE
    assert not tile.is_wildcard


def test_interchangeable_tiles_are_not_identical():
    a = Tile.number(Color.RED, 5)
    b = Tile.number(Color.RED, 5)
    assert a.equals(b)
    assert a != b
    assert a.id != b.id
    assert not a.equals(Tile.number(Color.BLUE, 5))


def test_wildcards_are_always_interchangeable():
    a, b = Tile.wildcard(), Tile.wildcard()
    assert a.equals(b)
    assert a.color is Color.WILDCARD
    assert not a.equals(Tile.number(Color.RED, 1))
    assert not Tile.number(Color.RED, 1).equals(a)


def test_clone_gets_fresh_identity():
    tile = Tile.number(Color.BLACK, 7)
    copy = tile.clone()
    assert copy.equals(tile)
    assert copy.id != tile.id
    assert Tile.wildcard().clone().is_wildcard


def test_sort_key_orders_value_then_color_wildcards_last():
    tiles = [
        Tile.wildcard(),
        Tile.number(Color.BLUE, 2),
        Tile.number(Color.BLACK, 9),
        Tile.number(Color.BLACK, 2),
    ]
    ordered = sorted(tiles, key=lambda t: t.sort_key())
    assert [str(t) for t in ordered] == ["Black-2", "Blue-2", "Black-9", "Wildcard"]


def test_external_representation():
    tile = Tile.number(Color.RED, 4)
    data = tile.to_dict()
    assert data == {"id": tile.id, "color": "RED", "value": 4}
    assert Tile.from_dict(data) == tile

    joker = Tile.wildcard()
    assert joker.to_dict()["color"] == "WILDCARD"
    restored = Tile.from_dict(joker.to_dict())
    assert restored.is_wildcard
    assert restored.id == joker.id


def test_wildcard_value_is_normalized():
    joker = Tile(Color.RED, 7, is_wildcard=True)
    assert joker.value == 0
    assert joker.color is Color.WILDCARD
    assert Tile.from_dict(joker.to_dict()) == joker

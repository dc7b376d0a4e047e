import pathlib
import sys

import pytest

ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from rummikub.meld import Meld, MeldKind
from rummikub.tiles import Color, Tile


def t(color, value):
    return Tile.number(color, value)


def wild():
    return Tile.wildcard()


def run(color, *values):
    return [t(color, v) for v in values]


def test_group_of_three_and_four_colors():
    three = Meld([t(Color.RED, 5), t(Color.BLUE, 5), t(Color.BLACK, 5)])
    four = Meld([t(c, 9) for c in (Color.RED, Color.BLUE, Color.BLACK, Color.ORANGE)])
    assert three.classify() == MeldKind.GROUP
    assert four.classify() == MeldKind.GROUP
    assert three.validate() and four.validate()


def test_group_rejects_repeated_color():
    meld = Meld([t(Color.RED, 5), t(Color.RED, 5), t(Color.BLUE, 5)])
    ok, reason = meld.is_valid()
    assert not ok
    assert "distinct" in reason
    assert meld.classify() == MeldKind.INVALID


def test_group_rejects_mismatched_value_and_oversize():
    assert not Meld([t(Color.RED, 5), t(Color.BLUE, 6), t(Color.BLACK, 5)]).validate()
    five = [t(c, 3) for c in (Color.RED, Color.BLUE, Color.BLACK, Color.ORANGE)] + [wild()]
    assert Meld(five).classify() == MeldKind.INVALID


def test_group_with_wildcard_fills_color_slot():
    meld = Meld([t(Color.RED, 11), wild(), t(Color.ORANGE, 11), wild()])
    assert meld.classify() == MeldKind.GROUP


def test_short_meld_is_invalid():
    meld = Meld(run(Color.RED, 1, 2))
    ok, reason = meld.is_valid()
    assert not ok
    assert reason == "meld too short"
    assert meld.classify() == MeldKind.INVALID


def test_run_is_order_independent():
    meld = Meld(run(Color.BLUE, 7, 5, 6, 8))
    assert meld.classify() == MeldKind.RUN


def test_run_rejects_mixed_colors_and_duplicates():
    assert not Meld([t(Color.RED, 1), t(Color.BLUE, 2), t(Color.RED, 3)]).validate()
    assert not Meld(run(Color.RED, 5, 5, 6)).validate()


def test_run_wildcard_bridges_gap():
    assert Meld([t(Color.RED, 5), t(Color.RED, 7), wild()]).classify() == MeldKind.RUN
    assert Meld([t(Color.RED, 3), t(Color.RED, 6), wild(), wild()]).validate()
    assert not Meld([t(Color.RED, 3), t(Color.RED, 7), wild(), wild()]).validate()


def test_run_leftover_wildcards_respect_value_range():
    assert Meld([t(Color.RED, 12), t(Color.RED, 13), wild()]).validate()
    assert Meld([t(Color.RED, 1), t(Color.RED, 2), wild(), wild()]).validate()
    full = run(Color.ORANGE, *range(1, 14))
    assert Meld(full).classify() == MeldKind.RUN
    assert not Meld(full + [wild()]).validate()
    assert not Meld([t(Color.RED, 1), t(Color.RED, 13), wild()]).validate()


@pytest.mark.parametrize("count,kind", [(3, MeldKind.GROUP), (4, MeldKind.GROUP), (5, MeldKind.RUN)])
def test_all_wildcard_melds(count, kind):
    assert Meld([wild() for _ in range(count)]).classify() == kind


def test_add_and_remove_tile():
    tiles = run(Color.BLACK, 4, 5)
    meld = Meld(tiles)
    extra = t(Color.BLACK, 6)
    meld.add_tile(extra)
    assert meld.validate()
    assert meld.remove_tile(extra.id) is extra
    assert meld.remove_tile("missing") is None
    assert len(meld) == 2


def test_tiles_returns_a_copy():
    meld = Meld(run(Color.RED, 1, 2, 3))
    meld.tiles().clear()
    assert len(meld.tiles()) == 3


def test_points_ignore_wildcards():
    assert Meld([t(Color.RED, 10), t(Color.RED, 11), wild()]).points() == 21


def test_signature_ignores_identity_and_order():
    a = Meld(run(Color.RED, 1, 2, 3))
    b = Meld(run(Color.RED, 3, 1, 2))
    assert a.signature() == b.signature()

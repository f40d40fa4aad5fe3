import pathlib
import sys

import pytest

ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from rummikub.errors import FailureKind, MoveError
from rummikub.tiles import COLORS, TileInfo, parse_tile_key, tile_attributes, tile_key


def test_catalog_bands_and_scores():
    assert tile_attributes(0) == TileInfo("blue", 1)
    assert tile_attributes(12) == TileInfo("blue", 13)
    assert tile_attributes(13) == TileInfo("blue", 1)
    assert tile_attributes(26) == TileInfo("red", 1)
    assert tile_attributes(60) == TileInfo("black", 9)
    assert tile_attributes(103) == TileInfo("orange", 13)

    for color in COLORS:
        band = [t for t in range(104) if tile_attributes(t).color == color]
        assert len(band) == 26
        assert sorted(tile_attributes(t).score for t in band) == sorted(list(range(1, 14)) * 2)


def test_jokers_have_no_score():
    for tile in (104, 105):
        info = tile_attributes(tile)
        assert info.is_joker()
        assert info.score == 0


def test_catalog_is_deterministic():
    assert [tile_attributes(t) for t in range(106)] == [tile_attributes(t) for t in range(106)]


@pytest.mark.parametrize("tile", [-1, 106, 1000])
def test_illegal_index_is_rejected(tile):
    with pytest.raises(MoveError) as exc:
        tile_attributes(tile)
    assert exc.value.kind == FailureKind.ILLEGAL_TILE_INDEX


def test_tile_keys():
    assert tile_key(28) == "tile28"
    assert parse_tile_key("tile28") == 28
    with pytest.raises(MoveError):
        parse_tile_key("board")

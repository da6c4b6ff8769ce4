import numpy as np
import pytest

from delve.environment import tile_types
from delve.environment.tile_types import TileTypeID


def test_every_tile_type_has_properties():
    ids = np.array([list(TileTypeID)], dtype=np.uint8)
    glyphs = tile_types.get_glyph_map(ids)
    assert glyphs.shape == ids.shape
    assert len({int(g) for g in glyphs[0]}) == len(TileTypeID)


def test_wall_is_id_zero():
    assert TileTypeID.WALL == 0


def test_walkability():
    ids = np.array(list(TileTypeID), dtype=np.uint8)
    flags = tile_types.get_walkable_map(ids)
    walkable = {TileTypeID(int(t)) for t, ok in zip(ids, flags, strict=True) if ok}
    assert TileTypeID.WALL not in walkable
    assert TileTypeID.DEEP_WATER not in walkable
    assert TileTypeID.STALACTITE not in walkable
    assert TileTypeID.STALAGMITE not in walkable
    assert {
        TileTypeID.FLOOR,
        TileTypeID.WOOD_FLOOR,
        TileTypeID.DOWN_STAIRS,
        TileTypeID.ROAD,
        TileTypeID.GRASS,
        TileTypeID.SHALLOW_WATER,
        TileTypeID.GRAVEL,
        TileTypeID.BRIDGE,
    } <= walkable


def test_move_costs():
    assert tile_types.get_move_cost(TileTypeID.FLOOR) == pytest.approx(1.0)
    assert tile_types.get_move_cost(TileTypeID.ROAD) == pytest.approx(0.8)
    assert tile_types.get_move_cost(TileTypeID.GRASS) == pytest.approx(1.1)
    assert tile_types.get_move_cost(TileTypeID.SHALLOW_WATER) == pytest.approx(1.2)


def test_deep_water_is_transparent_but_blocking():
    tiles = np.array([[TileTypeID.DEEP_WATER, TileTypeID.WALL]], dtype=np.uint8)
    assert tile_types.get_transparent_map(tiles).tolist() == [[True, False]]
    assert tile_types.get_walkable_map(tiles).tolist() == [[False, False]]


def test_glyph_map():
    tiles = np.array([[TileTypeID.WALL, TileTypeID.FLOOR]], dtype=np.uint8)
    glyphs = tile_types.get_glyph_map(tiles)
    assert [chr(g) for g in glyphs[0]] == ["#", "."]


def test_register_out_of_order_is_rejected():
    data = tile_types.make_tile_type_data(
        walkable=True, transparent=True, display_name="Duplicate", glyph="?"
    )
    with pytest.raises(ValueError):
        tile_types.register_tile_type(TileTypeID.FLOOR, data)

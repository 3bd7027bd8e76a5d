import math

import pytest

from platformer.geometry import (
    AABB,
    PLAYER_HALF_DEPTH,
    PLAYER_HALF_WIDTH,
    PLAYER_HEIGHT,
    Stage,
    StageBlock,
    Vec3,
    player_aabb,
    probe_ground_y,
)

GROUND_EPS = 0.06


def floor_block(top, kind=0, x=0.0, z=0.0):
    # A 2x2x2 box whose top face sits at ``top``.
    return StageBlock(position=Vec3(x, top - 1.0, z), size=Vec3(2.0, 2.0, 2.0), kind=kind)


def test_vec3_arithmetic_and_iteration():
    a = Vec3(1.0, 2.0, 3.0)
    b = Vec3(4.0, 5.0, 6.0)
    assert (a + b) - b == a
    assert -a + a == Vec3()
    assert list(a * 2.0) == [2.0, 4.0, 6.0]
    assert 2.0 * a == a * 2.0


def test_vec3_dot_and_cross_axes():
    x = Vec3(1.0, 0.0, 0.0)
    y = Vec3(0.0, 1.0, 0.0)
    z = Vec3(0.0, 0.0, 1.0)
    assert x.cross(y) == z
    assert y.cross(z) == x
    assert x.dot(y) == 0.0
    a = Vec3(1.0, -2.0, 3.0)
    b = Vec3(0.5, 4.0, -1.0)
    c = a.cross(b)
    assert c.dot(a) == pytest.approx(0.0)
    assert c.dot(b) == pytest.approx(0.0)


def test_vec3_normalized():
    v = Vec3(3.0, -4.0, 12.0)
    n = v.normalized()
    assert n.length() == pytest.approx(1.0)
    assert n.dot(v) == pytest.approx(v.length())
    assert Vec3().normalized() == Vec3()


def test_aabb_overlap_and_touching():
    a = AABB(Vec3(0, 0, 0), Vec3(1, 1, 1))
    b = AABB(Vec3(0.5, 0.5, 0.5), Vec3(2, 2, 2))
    touching = AABB(Vec3(1, 0, 0), Vec3(2, 1, 1))
    assert a.overlaps(b) and b.overlaps(a)
    assert not a.overlaps(touching)
    assert a.center == Vec3(0.5, 0.5, 0.5)


def test_player_aabb_dimensions():
    p = Vec3(1.0, 2.0, 3.0)
    box = player_aabb(p)
    assert box.min == Vec3(p.x - PLAYER_HALF_WIDTH, p.y, p.z - PLAYER_HALF_DEPTH)
    assert box.max.y - box.min.y == pytest.approx(PLAYER_HEIGHT)
    assert box.max.x - box.min.x == pytest.approx(2 * PLAYER_HALF_WIDTH)
    assert PLAYER_HEIGHT == 0.9


def test_stage_block_aabb_follows_position_and_size():
    block = floor_block(1.0)
    box = block.aabb
    assert box.max.y == pytest.approx(1.0)
    assert box.center == block.position


def test_probe_finds_floor_within_eps():
    stage = Stage([floor_block(1.0)])
    assert probe_ground_y(stage, Vec3(0.0, 1.03, 0.0), GROUND_EPS) == pytest.approx(1.0)


def test_probe_allows_small_penetration():
    stage = Stage([floor_block(1.0)])
    assert probe_ground_y(stage, Vec3(0.0, 0.999, 0.0), GROUND_EPS) == pytest.approx(1.0)
    assert probe_ground_y(stage, Vec3(0.0, 0.9, 0.0), GROUND_EPS) is None


def test_probe_none_when_too_high_or_off_side():
    stage = Stage([floor_block(1.0)])
    assert probe_ground_y(stage, Vec3(0.0, 1.5, 0.0), GROUND_EPS) is None
    assert probe_ground_y(stage, Vec3(5.0, 1.0, 0.0), GROUND_EPS) is None


def test_probe_picks_highest_block():
    stage = Stage([floor_block(1.0), floor_block(1.04, x=0.5)])
    assert probe_ground_y(stage, Vec3(0.0, 1.05, 0.0), GROUND_EPS) == pytest.approx(1.04)


def test_hide_block_removes_it_from_play():
    stage = Stage([floor_block(1.0, kind=10)])
    before = stage[0].aabb
    stage.hide_block(0)
    after = stage[0].aabb
    assert after.max.x - after.min.x == pytest.approx(0.0)
    assert after.center.y < before.center.y
    assert not after.overlaps(player_aabb(Vec3(0.0, 0.5, 0.0)))
    assert probe_ground_y(stage, Vec3(0.0, 1.0, 0.0), GROUND_EPS) is None


def test_hide_block_out_of_range_is_ignored():
    stage = Stage([floor_block(1.0)])
    stage.hide_block(5)
    stage.hide_block(-1)
    assert len(stage) == 1
    assert stage[0].aabb.max.y == pytest.approx(1.0)
    assert not math.isnan(stage[0].aabb.min.y)
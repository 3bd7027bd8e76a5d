import math

import numpy as np
import pytest

from platformer.action import ActionId
from platformer.geometry import HIDE_DROP, Stage, StageBlock, Vec3, player_aabb
from platformer.player import (
    PLAYER_SCALE,
    VIS_LAND_FORWARD_FIX,
    Player,
    PlayerInput,
    PlayerTuning,
)

DT = 1.0 / 60.0


def floor_stage(*extra):
    floor = StageBlock(position=Vec3(0.0, -0.5, 0.0), size=Vec3(20.0, 1.0, 20.0))
    return Stage([floor, *extra])


def run(player, frames, inp=None):
    for _ in range(frames):
        player.update(DT, Vec3(0.0, 0.0, 1.0), inp)


def test_standing_on_floor_stays_grounded():
    player = Player(Vec3(0.0, 0.0, 0.0), Vec3(0.0, 0.0, 1.0), floor_stage())
    run(player, 10)
    assert player.grounded
    assert player.position.y == pytest.approx(0.0)
    assert player.velocity.y == pytest.approx(0.0)


def test_falling_reaches_terminal_velocity():
    player = Player(Vec3(0.0, 50.0, 0.0), Vec3(0.0, 0.0, 1.0), Stage())
    run(player, 300)
    assert not player.grounded
    assert player.velocity.y == pytest.approx(player.tuning.terminal_fall)
    assert player.position.y < 50.0


def test_jump_sets_jump_speed_and_lands_again():
    player = Player(Vec3(), Vec3(0.0, 0.0, 1.0), floor_stage())
    run(player, 2)
    player.update(DT, Vec3(0.0, 0.0, 1.0), PlayerInput(jump=True))
    assert not player.grounded
    assert player.velocity.y == pytest.approx(player.action_params.jump_speed_y)
    assert player.action.id is ActionId.AIR
    run(player, 240)
    assert player.grounded
    assert player.position.y == pytest.approx(0.0)


def max_height(hold_frames):
    player = Player(Vec3(), Vec3(0.0, 0.0, 1.0), floor_stage())
    run(player, 2)
    best = 0.0
    for frame in range(200):
        player.update(DT, Vec3(0.0, 0.0, 1.0), PlayerInput(jump=frame < hold_frames))
        best = max(best, player.position.y)
    return best


def test_holding_jump_goes_higher_than_tapping():
    assert max_height(40) > max_height(1)


def test_head_hit_breaks_breakable_block():
    brick = StageBlock(position=Vec3(0.0, 1.3, 0.0), size=Vec3(1.0, 0.2, 1.0), kind=10)
    stage = floor_stage(brick)
    player = Player(Vec3(), Vec3(0.0, 0.0, 1.0), stage)
    run(player, 2)
    run(player, 60, PlayerInput(jump=True))
    assert brick.position_offset.y == pytest.approx(-HIDE_DROP)
    assert brick.size_offset == -brick.size


def test_head_hit_on_solid_block_stops_rise():
    ceiling = StageBlock(position=Vec3(0.0, 1.3, 0.0), size=Vec3(1.0, 0.2, 1.0), kind=0)
    stage = floor_stage(ceiling)
    player = Player(Vec3(), Vec3(0.0, 0.0, 1.0), stage)
    run(player, 2)
    for _ in range(60):
        player.update(DT, Vec3(0.0, 0.0, 1.0), PlayerInput(jump=True))
        assert player.aabb().max.y <= ceiling.aabb.min.y + 1e-6
    assert ceiling.position_offset.y == 0.0


def test_walking_forward_moves_along_camera_front():
    player = Player(Vec3(), Vec3(0.0, 0.0, 1.0), floor_stage())
    run(player, 60, PlayerInput(move_y=1.0))
    assert player.position.z > 0.5
    assert player.position.x == pytest.approx(0.0, abs=1e-9)
    assert player.front.z == pytest.approx(1.0)


def test_wall_pushes_player_back():
    wall = StageBlock(position=Vec3(1.0, 1.0, 0.0), size=Vec3(1.0, 2.0, 10.0))
    player = Player(Vec3(), Vec3(0.0, 0.0, 1.0), floor_stage(wall))
    for _ in range(120):
        player.update(DT, Vec3(0.0, 0.0, 1.0), PlayerInput(move_x=1.0))
        assert player.aabb().max.x <= wall.aabb.min.x + 1e-6
    assert player.aabb().max.x == pytest.approx(wall.aabb.min.x, abs=1e-3)


def test_crouch_blocks_movement():
    player = Player(Vec3(), Vec3(0.0, 0.0, 1.0), floor_stage())
    run(player, 30, PlayerInput(crouch=True, move_y=1.0))
    assert player.action.id is ActionId.CROUCH
    assert player.position.x == pytest.approx(0.0)
    assert player.position.z == pytest.approx(0.0)


def test_spin_turns_model_and_ends():
    player = Player(Vec3(), Vec3(0.0, 0.0, 1.0), floor_stage())
    run(player, 2)
    player.update(DT, Vec3(0.0, 0.0, 1.0), PlayerInput(spin=True))
    assert player.action.id is ActionId.SPIN
    assert player.spin_yaw < 0.0
    run(player, 60)
    assert player.action.id is ActionId.GROUND
    assert player.spin_yaw == 0.0


def test_input_override_replaces_frame_input():
    player = Player(Vec3(), Vec3(0.0, 0.0, 1.0), floor_stage())
    player.set_input_override(True, PlayerInput(move_y=1.0))
    assert player.input_override_enabled
    run(player, 30, PlayerInput(move_y=-1.0))
    assert player.position.z > 0.0


def test_neutral_override_ignores_input():
    player = Player(Vec3(), Vec3(0.0, 0.0, 1.0), floor_stage())
    player.set_input_override(True, None)
    run(player, 30, PlayerInput(move_y=1.0))
    assert player.position.z == pytest.approx(0.0)
    player.set_input_override(False, None)
    assert not player.input_override_enabled


def test_teleport_sets_position_and_resets_velocity():
    player = Player(Vec3(0.0, 10.0, 0.0), Vec3(0.0, 0.0, 1.0), Stage())
    run(player, 10)
    target = Vec3(3.0, 4.0, 5.0)
    player.teleport(target, True)
    assert player.position == target
    assert player.velocity == Vec3()


def test_teleport_can_keep_velocity():
    player = Player(Vec3(0.0, 10.0, 0.0), Vec3(0.0, 0.0, 1.0), Stage())
    run(player, 10)
    before = player.velocity
    player.teleport(Vec3(1.0, 1.0, 1.0), False)
    assert player.velocity == before


def test_reset_tuning_restores_defaults():
    player = Player(Vec3(), Vec3(0.0, 0.0, 1.0))
    player.tuning.gravity = 99.0
    player.reset_tuning()
    assert player.tuning == PlayerTuning()


def test_aabb_matches_position():
    player = Player(Vec3(1.0, 2.0, 3.0), Vec3(0.0, 0.0, 1.0))
    assert player.aabb() == player_aabb(Vec3(1.0, 2.0, 3.0))


def test_front_is_normalized_on_creation():
    player = Player(Vec3(), Vec3(3.0, 0.0, 4.0))
    assert player.front.length() == pytest.approx(1.0)


@pytest.mark.parametrize("depth", [True, False])
def test_world_matrix_scale_and_translation(depth):
    position = Vec3(1.0, 2.0, 3.0)
    player = Player(position, Vec3(0.0, 0.0, 1.0))
    world = player.world_matrix(depth)
    assert np.allclose(world[3, :3], [position.x, position.y, position.z])
    for row in world[:3, :3]:
        assert np.linalg.norm(row) == pytest.approx(PLAYER_SCALE)


def test_world_matrix_depth_differs_from_draw():
    player = Player(Vec3(), Vec3(0.0, 0.0, 1.0))
    assert not np.allclose(player.world_matrix(True), player.world_matrix(False))


def test_landing_shifts_drawn_model_back():
    player = Player(Vec3(), Vec3(0.0, 0.0, 1.0), floor_stage())
    run(player, 2)
    player.update(DT, Vec3(0.0, 0.0, 1.0), PlayerInput(jump=True))
    for _ in range(240):
        player.update(DT, Vec3(0.0, 0.0, 1.0), PlayerInput())
        if player.grounded:
            break
    assert player.grounded
    expected = player.position + player.front * VIS_LAND_FORWARD_FIX
    world = player.world_matrix(False)
    assert np.allclose(world[3, :3], [expected.x, expected.y, expected.z])
    assert math.isclose(player.visual_offset(), VIS_LAND_FORWARD_FIX)
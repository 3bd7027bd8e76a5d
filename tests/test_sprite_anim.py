import pytest

from platformer.sprite_anim import (
    PATTERN_CAPACITY,
    PLAYER_CAPACITY,
    FrameRect,
    SpriteAnimator,
)


def _animator_with(pattern_max=4, h=4, spp=0.5, looped=True):
    anim = SpriteAnimator()
    pid = anim.register_pattern(7, pattern_max, h, spp, (32, 32), (0, 96), looped)
    return anim, anim.create_player(pid)


def test_register_uses_consecutive_slots():
    anim = SpriteAnimator()
    first = anim.register_pattern(1, 8, 8, 0.1, (32, 32), (0, 96), True)
    second = anim.register_pattern(1, 13, 13, 0.1, (32, 32), (0, 32), True)
    assert (first, second) == (0, 1)


def test_pattern_capacity_is_enforced():
    anim = SpriteAnimator()
    ids = [anim.register_pattern(0, 1, 1, 0.1, (1, 1), (0, 0)) for _ in range(PATTERN_CAPACITY)]
    assert ids == list(range(PATTERN_CAPACITY))
    with pytest.raises(RuntimeError):
        anim.register_pattern(0, 1, 1, 0.1, (1, 1), (0, 0))


def test_player_capacity_is_enforced():
    anim = SpriteAnimator()
    pid = anim.register_pattern(0, 1, 1, 0.1, (1, 1), (0, 0))
    ids = [anim.create_player(pid) for _ in range(PLAYER_CAPACITY)]
    assert ids[-1] == PLAYER_CAPACITY - 1
    with pytest.raises(RuntimeError):
        anim.create_player(pid)


def test_new_player_shows_first_frame():
    anim, player = _animator_with()
    assert anim.frame_rect(player) == FrameRect(7, 0, 96, 32, 32)
    assert anim.is_stopped(player) is False


def test_frame_advances_one_update_after_duration_reached():
    anim, player = _animator_with(spp=0.5)
    anim.update(0.5)
    assert anim.frame_rect(player).x == 0
    anim.update(0.5)
    assert anim.frame_rect(player).x == 32


def test_looping_pattern_wraps_to_first_frame():
    anim, player = _animator_with(pattern_max=2, h=2, spp=0.5)
    xs = []
    for _ in range(4):
        anim.update(0.5)
        xs.append(anim.frame_rect(player).x)
    assert xs == [0, 32, 0, 32]


def test_non_looping_pattern_holds_last_frame():
    anim, player = _animator_with(pattern_max=2, h=2, spp=0.5, looped=False)
    for _ in range(6):
        anim.update(0.5)
    assert anim.frame_rect(player).x == 32
    assert anim.is_stopped(player) is False


def test_frames_wrap_onto_next_row():
    anim, player = _animator_with(pattern_max=4, h=2, spp=0.5)
    for _ in range(3):
        anim.update(0.5)
    rect = anim.frame_rect(player)
    assert (rect.x, rect.y) == (0, 96 + 32)


def test_destroyed_slot_is_reused_and_unreadable():
    anim, player = _animator_with()
    anim.destroy_player(player)
    with pytest.raises(ValueError):
        anim.frame_rect(player)
    pid = anim.register_pattern(3, 1, 1, 0.1, (8, 8), (0, 0))
    assert anim.create_player(pid) == player


def test_zero_columns_rejected():
    with pytest.raises(ValueError):
        SpriteAnimator().register_pattern(0, 4, 0, 0.1, (16, 16), (0, 0))


def test_player_for_unknown_pattern_rejected():
    with pytest.raises(ValueError):
        SpriteAnimator().create_player(5)
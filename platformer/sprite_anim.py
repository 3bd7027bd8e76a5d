"""Sprite-sheet animation patterns and their players."""

from __future__ import annotations

from dataclasses import dataclass

PATTERN_CAPACITY = 128
PLAYER_CAPACITY = 256


@dataclass
class AnimPattern:
    """A run of frames laid out on a sprite sheet."""

    texture_id: int
    pattern_max: int
    h_pattern_max: int
    seconds_per_pattern: float
    pattern_size: tuple[int, int]
    start_position: tuple[int, int]
    is_looped: bool = True


@dataclass
class AnimPlayer:
    """Playback state of one running animation."""

    pattern_id: int
    pattern_num: int = 0
    accumulated_time: float = 0.0
    is_stopped: bool = False


@dataclass(frozen=True)
class FrameRect:
    """The texel rectangle of the current frame on its texture."""

    texture_id: int
    x: int
    y: int
    width: int
    height: int


def _first_free(slots: list) -> int | None:
    return next((i for i, slot in enumerate(slots) if slot is None), None)


class SpriteAnimator:
    """Fixed-capacity registry of animation patterns and players."""

    def __init__(self) -> None:
        self._patterns: list[AnimPattern | None] = [None] * PATTERN_CAPACITY
        self._players: list[AnimPlayer | None] = [None] * PLAYER_CAPACITY

    def register_pattern(
        self,
        texture_id: int,
        pattern_max: int,
        h_pattern_max: int,
        seconds_per_pattern: float,
        pattern_size: tuple[int, int],
        start_position: tuple[int, int],
        is_looped: bool = True,
    ) -> int:
        """Store a pattern in the first free slot and return its id."""
        if h_pattern_max <= 0:
            raise ValueError(f"h_pattern_max must be positive, got {h_pattern_max}")
        slot = _first_free(self._patterns)
        if slot is None:
            raise RuntimeError("no free animation pattern slot")
        self._patterns[slot] = AnimPattern(
            texture_id=texture_id,
            pattern_max=pattern_max,
            h_pattern_max=h_pattern_max,
            seconds_per_pattern=seconds_per_pattern,
            pattern_size=tuple(pattern_size),
            start_position=tuple(start_position),
            is_looped=is_looped,
        )
        return slot

    def _pattern(self, pattern_id: int) -> AnimPattern:
        if not 0 <= pattern_id < PATTERN_CAPACITY or self._patterns[pattern_id] is None:
            raise ValueError(f"no animation pattern with id {pattern_id}")
        return self._patterns[pattern_id]

    def _player(self, player_id: int) -> AnimPlayer:
        if not 0 <= player_id < PLAYER_CAPACITY or self._players[player_id] is None:
            raise ValueError(f"no animation player with id {player_id}")
        return self._players[player_id]

    def create_player(self, pattern_id: int) -> int:
        """Start playing a pattern from its first frame; return the player id."""
        self._pattern(pattern_id)
        slot = _first_free(self._players)
        if slot is None:
            raise RuntimeError("no free animation player slot")
        self._players[slot] = AnimPlayer(pattern_id=pattern_id)
        return slot

    def destroy_player(self, player_id: int) -> None:
        """Free a player slot."""
        if not 0 <= player_id < PLAYER_CAPACITY:
            raise ValueError(f"no animation player with id {player_id}")
        self._players[player_id] = None

    def is_stopped(self, player_id: int) -> bool:
        return self._player(player_id).is_stopped

    def update(self, elapsed: float) -> None:
        """Advance every active player by ``elapsed`` seconds.

        A frame advances when the time accumulated before this call has
        reached the pattern's frame duration.
        """
        for player in self._players:
            if player is None:
                continue
            pattern = self._patterns[player.pattern_id]
            if player.accumulated_time >= pattern.seconds_per_pattern:
                player.pattern_num += 1
                if player.pattern_num >= pattern.pattern_max:
                    player.pattern_num = 0 if pattern.is_looped else pattern.pattern_max - 1
                player.accumulated_time -= pattern.seconds_per_pattern
            player.accumulated_time += elapsed

    def frame_rect(self, player_id: int) -> FrameRect:
        """Where on the sprite sheet the player's current frame lies."""
        player = self._player(player_id)
        pattern = self._patterns[player.pattern_id]
        width, height = pattern.pattern_size
        sx, sy = pattern.start_position
        column = player.pattern_num % pattern.h_pattern_max
        row = player.pattern_num // pattern.h_pattern_max
        return FrameRect(
            texture_id=pattern.texture_id,
            x=sx + width * column,
            y=sy + height * row,
            width=width,
            height=height,
        )
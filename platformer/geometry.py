"""Vector, box and stage geometry shared by the player physics."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Iterator

PLAYER_HALF_WIDTH = 0.25
PLAYER_HALF_DEPTH = 0.25
PLAYER_HEIGHT = 0.9

GROUND_TOLERANCE_BELOW = 0.002
HIDE_DROP = 10000.0


@dataclass(frozen=True)
class Vec3:
    """Immutable three-component vector."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def __add__(self, other: Vec3) -> Vec3:
        return Vec3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: Vec3) -> Vec3:
        return Vec3(self.x - other.x, self.y - other.y, self.z - other.z)

    def __mul__(self, scale: float) -> Vec3:
        return Vec3(self.x * scale, self.y * scale, self.z * scale)

    __rmul__ = __mul__

    def __neg__(self) -> Vec3:
        return Vec3(-self.x, -self.y, -self.z)

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y
        yield self.z

    def length(self) -> float:
        return math.sqrt(self.dot(self))

    def normalized(self) -> Vec3:
        """Unit vector in the same direction; the zero vector stays zero."""
        length = self.length()
        if length == 0.0:
            return Vec3()
        return self * (1.0 / length)

    def dot(self, other: Vec3) -> float:
        return self.x * other.x + self.y * other.y + self.z * other.z

    def cross(self, other: Vec3) -> Vec3:
        return Vec3(
            self.y * other.z - self.z * other.y,
            self.z * other.x - self.x * other.z,
            self.x * other.y - self.y * other.x,
        )


@dataclass(frozen=True)
class AABB:
    """Axis-aligned bounding box."""

    min: Vec3
    max: Vec3

    def overlaps(self, other: AABB) -> bool:
        """True when the boxes share a volume (touching faces do not count)."""
        return (
            self.min.x < other.max.x
            and self.max.x > other.min.x
            and self.min.y < other.max.y
            and self.max.y > other.min.y
            and self.min.z < other.max.z
            and self.max.z > other.min.z
        )

    @property
    def center(self) -> Vec3:
        return (self.min + self.max) * 0.5


@dataclass
class StageBlock:
    """A box on the stage, centred on ``position`` with extents ``size``.

    The offsets are runtime adjustments applied on top of the authored values.
    """

    position: Vec3
    size: Vec3
    kind: int = 0
    position_offset: Vec3 = field(default_factory=Vec3)
    size_offset: Vec3 = field(default_factory=Vec3)

    @property
    def aabb(self) -> AABB:
        centre = self.position + self.position_offset
        half = (self.size + self.size_offset) * 0.5
        return AABB(centre - half, centre + half)


class Stage:
    """The collection of blocks the player collides with."""

    def __init__(self, blocks: list[StageBlock] | None = None) -> None:
        self.blocks: list[StageBlock] = list(blocks or [])

    def __len__(self) -> int:
        return len(self.blocks)

    def __iter__(self) -> Iterator[StageBlock]:
        return iter(self.blocks)

    def __getitem__(self, index: int) -> StageBlock:
        return self.blocks[index]

    def hide_block(self, index: int) -> None:
        """Shrink a block to nothing and move it far below, removing it from play.

        An index outside the stage is ignored.
        """
        if not 0 <= index < len(self.blocks):
            return
        block = self.blocks[index]
        offset = block.position_offset
        block.position_offset = Vec3(offset.x, offset.y - HIDE_DROP, offset.z)
        block.size_offset = -block.size


def player_aabb(position: Vec3) -> AABB:
    """The player's box with its feet at ``position``."""
    return AABB(
        Vec3(position.x - PLAYER_HALF_WIDTH, position.y, position.z - PLAYER_HALF_DEPTH),
        Vec3(
            position.x + PLAYER_HALF_WIDTH,
            position.y + PLAYER_HEIGHT,
            position.z + PLAYER_HALF_DEPTH,
        ),
    )


def probe_ground_y(stage: Stage, position: Vec3, eps: float) -> float | None:
    """Top of the highest block the feet rest on within ``eps``, or None."""
    player = player_aabb(position)
    best: float | None = None
    for block in stage:
        box = block.aabb
        if (
            player.max.x <= box.min.x
            or player.min.x >= box.max.x
            or player.max.z <= box.min.z
            or player.min.z >= box.max.z
        ):
            continue
        dy = player.min.y - box.max.y
        if -GROUND_TOLERANCE_BELOW <= dy <= eps:
            if best is None or box.max.y > best:
                best = box.max.y
    return best
"""Screen-space sprite quads: vertices, texture coordinates and transforms."""

from __future__ import annotations

import math
from dataclasses import dataclass, field

import numpy as np

Color = tuple[float, float, float, float]

WHITE: Color = (1.0, 1.0, 1.0, 1.0)
VERTEX_COUNT = 4

_FULL_UVS = ((0.0, 0.0), (1.0, 0.0), (0.0, 1.0), (1.0, 1.0))


@dataclass(frozen=True)
class SpriteVertex:
    """One corner of a sprite quad."""

    position: tuple[float, float, float]
    color: Color
    uv: tuple[float, float]


@dataclass(eq=False)
class SpriteQuad:
    """Four vertices drawn as a triangle strip, plus a world transform.

    Vertices run top-left, top-right, bottom-left, bottom-right. The world
    matrix uses row vectors: a point ``p`` maps to ``[x, y, z, 1] @ world``.
    """

    vertices: tuple[SpriteVertex, SpriteVertex, SpriteVertex, SpriteVertex]
    world: np.ndarray = field(default_factory=lambda: np.identity(4))

    def transformed_positions(self) -> list[tuple[float, float, float]]:
        """Vertex positions after the world transform."""
        points = np.array([(*v.position, 1.0) for v in self.vertices]) @ self.world
        return [tuple(float(c) for c in row[:3]) for row in points]


def _corners(dx: float, dy: float, dw: float, dh: float) -> list[tuple[float, float, float]]:
    return [
        (dx, dy, 0.0),
        (dx + dw, dy, 0.0),
        (dx, dy + dh, 0.0),
        (dx + dw, dy + dh, 0.0),
    ]


def _cut_uvs(
    px: int, py: int, pw: int, ph: int, texture_width: float, texture_height: float
) -> list[tuple[float, float]]:
    if texture_width <= 0 or texture_height <= 0:
        raise ValueError(
            f"texture size must be positive, got {texture_width}x{texture_height}"
        )
    tw = float(texture_width)
    th = float(texture_height)
    u0, v0 = px / tw, py / th
    u1, v1 = (px + pw) / tw, (py + ph) / th
    return [(u0, v0), (u1, v0), (u0, v1), (u1, v1)]


def _build(positions, uvs, color: Color) -> tuple[SpriteVertex, ...]:
    return tuple(
        SpriteVertex(position=pos, color=tuple(color), uv=uv)
        for pos, uv in zip(positions, uvs)
    )


def full_texture_quad(
    dx: float, dy: float, width: float, height: float, color: Color = WHITE
) -> SpriteQuad:
    """A quad at top-left ``(dx, dy)`` showing the whole texture at the given size."""
    return SpriteQuad(_build(_corners(dx, dy, width, height), _FULL_UVS, color))


def cut_quad(
    dx: float,
    dy: float,
    dw: float,
    dh: float,
    px: int,
    py: int,
    pw: int,
    ph: int,
    texture_width: float,
    texture_height: float,
    color: Color = WHITE,
) -> SpriteQuad:
    """A quad showing the ``pw`` x ``ph`` texel region at ``(px, py)``."""
    uvs = _cut_uvs(px, py, pw, ph, texture_width, texture_height)
    return SpriteQuad(_build(_corners(dx, dy, dw, dh), uvs, color))


def _scaling(sx: float, sy: float, sz: float) -> np.ndarray:
    return np.diag([sx, sy, sz, 1.0])


def _rotation_z(angle: float) -> np.ndarray:
    c, s = math.cos(angle), math.sin(angle)
    return np.array(
        [
            [c, s, 0.0, 0.0],
            [-s, c, 0.0, 0.0],
            [0.0, 0.0, 1.0, 0.0],
            [0.0, 0.0, 0.0, 1.0],
        ]
    )


def _translation(tx: float, ty: float, tz: float) -> np.ndarray:
    m = np.identity(4)
    m[3, :3] = (tx, ty, tz)
    return m


def rotated_quad(
    dx: float,
    dy: float,
    dw: float,
    dh: float,
    px: int,
    py: int,
    pw: int,
    ph: int,
    angle: float,
    texture_width: float,
    texture_height: float,
    color: Color = WHITE,
) -> SpriteQuad:
    """A unit quad centred on the origin, scaled, rotated by ``angle`` radians
    about Z and moved so its centre sits at ``(dx, dy)``."""
    uvs = _cut_uvs(px, py, pw, ph, texture_width, texture_height)
    positions = [
        (-0.5, -0.5, 0.0),
        (0.5, -0.5, 0.0),
        (-0.5, 0.5, 0.0),
        (0.5, 0.5, 0.0),
    ]
    world = _scaling(dw, dh, 1.0) @ _rotation_z(angle) @ _translation(dx, dy, 0.0)
    return SpriteQuad(_build(positions, uvs, color), world)


def orthographic_projection(screen_width: float, screen_height: float) -> np.ndarray:
    """Left-handed off-centre orthographic matrix with the origin at the top-left
    of the screen, y growing downwards and depth in [0, 1]."""
    if screen_width <= 0 or screen_height <= 0:
        raise ValueError(
            f"screen size must be positive, got {screen_width}x{screen_height}"
        )
    left, right = 0.0, float(screen_width)
    bottom, top = float(screen_height), 0.0
    near, far = 0.0, 1.0
    rw = 1.0 / (right - left)
    rh = 1.0 / (top - bottom)
    depth = 1.0 / (far - near)
    return np.array(
        [
            [2.0 * rw, 0.0, 0.0, 0.0],
            [0.0, 2.0 * rh, 0.0, 0.0],
            [0.0, 0.0, depth, 0.0],
            [-(left + right) * rw, -(top + bottom) * rh, -depth * near, 1.0],
        ]
    )
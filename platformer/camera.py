"""Third-person follow camera with a free-flying debug mode."""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from platformer.geometry import Vec3

MOVE_SPEED = 4.0
ROTATION_SPEED = math.radians(30.0)
TARGET_OFFSET_Y = 1.25
STICK_DEADZONE = 0.2
STICK_YAW_SENSITIVITY = math.radians(90.0)
BASE_OFFSET = Vec3(0.0, 4.0, -5.0)
FOV_Y = 1.0
NEAR_Z = 0.1
FAR_Z = 1000.0

_WORLD_UP = Vec3(0.0, 1.0, 0.0)
_HORIZONTAL = Vec3(1.0, 0.0, 1.0)


@dataclass
class CameraInput:
    """Buttons and stick values the camera reads each frame."""

    toggle_held: bool = False
    stick_x: float = 0.0
    rotate_up: bool = False
    rotate_down: bool = False
    rotate_left: bool = False
    rotate_right: bool = False
    move_forward: bool = False
    move_backward: bool = False
    move_left: bool = False
    move_right: bool = False
    move_up: bool = False
    move_down: bool = False


def _rotate(v: Vec3, axis: Vec3, angle: float) -> Vec3:
    """Rotate ``v`` about ``axis`` by ``angle`` radians (left-handed convention)."""
    k = axis.normalized()
    c, s = math.cos(angle), math.sin(angle)
    return v * c + k.cross(v) * s + k * (k.dot(v) * (1.0 - c))


def _hadamard(a: Vec3, b: Vec3) -> Vec3:
    return Vec3(a.x * b.x, a.y * b.y, a.z * b.z)


class PlayerCamera:
    """Camera that orbits behind the player, or flies freely when toggled."""

    def __init__(self) -> None:
        self.position = Vec3()
        self.front = Vec3(0.0, 0.0, 1.0)
        self.up = Vec3(0.0, 1.0, 0.0)
        self.right = Vec3(1.0, 0.0, 0.0)
        self.target = self.position + self.front
        self.key_camera_enabled = False
        self.yaw = 0.0
        self._prev_toggle = False

    def update(self, elapsed: float, player_position: Vec3, inp: CameraInput | None = None) -> None:
        """Advance the camera by ``elapsed`` seconds."""
        inp = inp or CameraInput()

        toggled_on = toggled_off = False
        if inp.toggle_held and not self._prev_toggle:
            self.key_camera_enabled = not self.key_camera_enabled
            toggled_on = self.key_camera_enabled
            toggled_off = not self.key_camera_enabled
        self._prev_toggle = inp.toggle_held

        if toggled_on:
            right = _WORLD_UP.cross(self.front).normalized()
            self.up = self.front.cross(right).normalized()
            self.right = right
        elif toggled_off:
            offset = self.position - player_position
            self.yaw = math.atan2(-offset.x, -offset.z)

        if self.key_camera_enabled:
            self._update_free(elapsed, inp)
        else:
            self._update_follow(elapsed, player_position, inp)

    def _update_follow(self, elapsed: float, player: Vec3, inp: CameraInput) -> None:
        stick_x = inp.stick_x
        if abs(stick_x) < STICK_DEADZONE:
            stick_x = 0.0
        self.yaw += stick_x * STICK_YAW_SENSITIVITY * elapsed

        position = player + _rotate(BASE_OFFSET, _WORLD_UP, self.yaw)
        look_target = player + Vec3(0.0, TARGET_OFFSET_Y, 0.0)
        self.position = position
        self.front = (look_target - position).normalized()
        self.up = _WORLD_UP
        self.right = _WORLD_UP.cross(self.front).normalized()
        self.target = look_target

    def _update_free(self, elapsed: float, inp: CameraInput) -> None:
        front, up, right = self.front, self.up, self.right
        step = ROTATION_SPEED * elapsed

        for pressed, sign in ((inp.rotate_down, 1.0), (inp.rotate_up, -1.0)):
            if pressed:
                front = _rotate(front, right, sign * step).normalized()
                up = _rotate(up, right, sign * step).normalized()
                right = up.cross(front).normalized()
        for pressed, sign in ((inp.rotate_left, -1.0), (inp.rotate_right, 1.0)):
            if pressed:
                front = _rotate(front, up, sign * step).normalized()
                right = _rotate(right, up, sign * step).normalized()
                up = front.cross(right).normalized()

        distance = MOVE_SPEED * elapsed
        position = self.position
        if inp.move_forward:
            position += _hadamard(front, _HORIZONTAL).normalized() * distance
        if inp.move_backward:
            position += _hadamard(-front, _HORIZONTAL).normalized() * distance
        if inp.move_left:
            position += -right * distance
        if inp.move_right:
            position += right * distance
        if inp.move_up:
            position += Vec3(0.0, 1.0, 0.0) * distance
        if inp.move_down:
            position += Vec3(0.0, -1.0, 0.0) * distance

        self.position = position
        self.front, self.up, self.right = front, up, right
        self.target = position + front

    def view_matrix(self) -> np.ndarray:
        """Left-handed look-at matrix for row vectors."""
        eye = self.position
        z = (self.target - eye).normalized()
        x = self.up.cross(z).normalized()
        y = z.cross(x)
        return np.array(
            [
                [x.x, y.x, z.x, 0.0],
                [x.y, y.y, z.y, 0.0],
                [x.z, y.z, z.z, 0.0],
                [-x.dot(eye), -y.dot(eye), -z.dot(eye), 1.0],
            ]
        )

    def perspective_matrix(self, aspect: float) -> np.ndarray:
        """Left-handed perspective matrix for the given width/height ratio."""
        if aspect <= 0:
            raise ValueError(f"aspect ratio must be positive, got {aspect}")
        y_scale = 1.0 / math.tan(FOV_Y * 0.5)
        x_scale = y_scale / aspect
        depth = FAR_Z / (FAR_Z - NEAR_Z)
        return np.array(
            [
                [x_scale, 0.0, 0.0, 0.0],
                [0.0, y_scale, 0.0, 0.0],
                [0.0, 0.0, depth, 1.0],
                [0.0, 0.0, -depth * NEAR_Z, 0.0],
            ]
        )
"""Player physics: movement, jumps, spin, crouch jumps and block collision."""

from __future__ import annotations

import math
from dataclasses import dataclass, replace

import numpy as np

from platformer.action import (
    ActionId,
    ActionInput,
    ActionParams,
    ActionSensors,
    ActionState,
    update_action,
)
from platformer.geometry import AABB, Stage, Vec3, player_aabb, probe_ground_y

PLAYER_SCALE = 14.0
PLAYER_DRAW_Y_OFFSET = 0.0

GROUND_EPS = 0.06
GROUND_PROBE_MAX_VEL_Y = 0.01
BREAKABLE_KIND = 10
SPIN_EXPAND_XZ = 0.4
SPIN_AABB_LIFT = 0.2
COLLISION_PASSES = 4

DOUBLE_JUMP_SPEED_MULT = 1.224744871
DOUBLE_JUMP_WINDOW = 0.14
JUMP_BUFFER_TIME = 0.12

CROUCH_FORWARD_JUMP_INPUT_MIN = 0.20
CROUCH_FORWARD_JUMP_FORWARD_DOT = math.cos(math.radians(60.0))
CROUCH_FORWARD_JUMP_Y_MULT = 0.9
CROUCH_FORWARD_JUMP_SPEED_XZ = 6.5
CROUCH_FORWARD_JUMP_ACCEL_TIME = 0.5
CROUCH_FORWARD_JUMP_AIR_CONTROL_SCALE = 0.04
CROUCH_FORWARD_JUMP_INPUT_SPEED = 1.0
CROUCH_FORWARD_JUMP_LAND_MOVE_LOCK = 0.18

WALK_MAX = 1.0
DASH1_MAX = 2.0
DASH2_MAX = 3.0
BRAKE_TIME = 0.30
BRAKE_FRICTION = 25.0
DASH2_STAGE1_DIST = 1.0
AIR_SPEED_MAX = 1.6
AIR_ACCEL_SCALE = 0.35
IDLE_SPEED_MAX = 0.05

VAR_JUMP_HOLD_WEAK = 0.20
VAR_JUMP_HOLD_STRONG = 0.40
VAR_JUMP_MID_RATIO = 0.80
VAR_JUMP_WEAK_RATIO = 0.55
VAR_JUMP_EPS = 1.0e-4

VISUAL_SPIN_TIME = 0.5
LAND_SHOW_TIME = 0.45

VIS_JUMP_FORWARD_FIX = -3.0
VIS_LAND_FORWARD_FIX = -1.0
VIS_CROUCH_FORWARD_JUMP_FIX = -0.5

_EPS = 1.0e-6
_UP = Vec3(0.0, 1.0, 0.0)
_DEFAULT_FRONT = Vec3(0.0, 0.0, 1.0)


@dataclass
class PlayerInput:
    """Stick and buttons for one frame: move_x is left(-1)/right(+1), move_y back/forward."""

    move_x: float = 0.0
    move_y: float = 0.0
    jump: bool = False
    dash: bool = False
    spin: bool = False
    crouch: bool = False


@dataclass
class PlayerTuning:
    """Physics tuning values."""

    jump_impulse: float = 18.0
    gravity: float = 10.0
    terminal_fall: float = -7.0
    move_accel: float = 1000.0 / 40.0
    friction: float = 10.0
    rot_speed: float = 2.0 * math.pi


def _xz(v: Vec3) -> Vec3:
    return Vec3(v.x, 0.0, v.z)


def _with_y(v: Vec3, y: float) -> Vec3:
    return Vec3(v.x, y, v.z)


def _with_xz(v: Vec3, xz: Vec3) -> Vec3:
    return Vec3(xz.x, v.y, xz.z)


def _approach(current: Vec3, desired: Vec3, max_delta: float) -> Vec3:
    delta = desired - current
    length = delta.length()
    if length > max_delta and length > _EPS:
        return current + delta * (max_delta / length)
    return desired


def _rotate_y(v: Vec3, angle: float) -> Vec3:
    c, s = math.cos(angle), math.sin(angle)
    return Vec3(v.x * c + v.z * s, v.y, -v.x * s + v.z * c)


def _camera_basis(camera_front: Vec3) -> tuple[Vec3, Vec3]:
    front = _xz(camera_front)
    if front.dot(front) < _EPS:
        front = _DEFAULT_FRONT
    front = front.normalized()
    right = _UP.cross(front).normalized()
    return front, right


def _rotation_x(angle: float) -> np.ndarray:
    c, s = math.cos(angle), math.sin(angle)
    return np.array(
        [[1.0, 0.0, 0.0, 0.0], [0.0, c, s, 0.0], [0.0, -s, c, 0.0], [0.0, 0.0, 0.0, 1.0]]
    )


def _rotation_y(angle: float) -> np.ndarray:
    c, s = math.cos(angle), math.sin(angle)
    return np.array(
        [[c, 0.0, -s, 0.0], [0.0, 1.0, 0.0, 0.0], [s, 0.0, c, 0.0], [0.0, 0.0, 0.0, 1.0]]
    )


class Player:
    """The controllable character and its per-frame simulation."""

    def __init__(
        self,
        position: Vec3 = Vec3(),
        front: Vec3 = _DEFAULT_FRONT,
        stage: Stage | None = None,
    ) -> None:
        self.stage = stage if stage is not None else Stage()
        self.position = position
        self.front = front.normalized()
        self.velocity = Vec3()
        self.grounded = False
        self.tuning = PlayerTuning()
        self.action = ActionState()
        self.action_params = ActionParams()

        self._override_enabled = False
        self._override_input = PlayerInput()

        self._brake_timer = 0.0
        self._dash2_accel_dist = 0.0

        self._var_jump_active = False
        self._var_jump_hold = 0.0
        self._var_jump_start_speed = 0.0
        self._var_jump_cut_applied = False

        self.vis_fix_jump = False
        self.vis_fix_land = False
        self.vis_fix_crouch_forward_jump = False

        self._air_from_ground_jump = False
        self._double_jump_window = 0.0
        self._prev_jump_input = False
        self._jump_buffer = 0.0

        self.spin_yaw = 0.0

        self.crouch_forward_jump_active = False
        self._crouch_forward_jump_dir = _DEFAULT_FRONT
        self._crouch_jump_move_lock = 0.0

        self._prev_grounded = True
        self._play_land = False
        self._land_t = 0.0
        self._play_jump = False
        self._jump_t = 0.0
        self._play_double_jump = False
        self._double_jump_t = 0.0
        self._prev_spin = False
        self.idle_time = 0.0
        self._was_idle = False
        self._spin_vis_t = 0.0
        self._crouch_t = 0.0
        self._prev_crouch = False
        self._crouch_forward_jump_t = 0.0
        self._play_crouch_forward_jump = False

    @property
    def input_override_enabled(self) -> bool:
        return self._override_enabled

    def set_input_override(self, enable: bool, inp: PlayerInput | None = None) -> None:
        """Feed input from outside; ``None`` means neutral input."""
        self._override_enabled = enable
        self._override_input = replace(inp) if inp is not None else PlayerInput()

    def teleport(self, position: Vec3, reset_velocity: bool = True) -> None:
        self.position = position
        if reset_velocity:
            self.velocity = Vec3()

    def reset_tuning(self) -> None:
        self.tuning = PlayerTuning()

    def aabb(self) -> AABB:
        return player_aabb(self.position)

    def _probe(self, position: Vec3) -> float | None:
        return probe_ground_y(self.stage, position, GROUND_EPS)

    def update(
        self,
        elapsed: float,
        camera_front: Vec3 | None = None,
        inp: PlayerInput | None = None,
    ) -> None:
        """Advance the simulation by ``elapsed`` seconds."""
        dt = float(elapsed)
        camera_front = camera_front if camera_front is not None else _DEFAULT_FRONT
        tune = self.tuning
        params = self.action_params

        if self._crouch_jump_move_lock > 0.0:
            self._crouch_jump_move_lock = max(0.0, self._crouch_jump_move_lock - dt)

        double_jump_fired = False
        position = self.position
        velocity = self.velocity

        prev_ground = False
        if velocity.y <= GROUND_PROBE_MAX_VEL_Y:
            ground_y = self._probe(position)
            if ground_y is not None:
                prev_ground = True
                position = _with_y(position, ground_y)
                if velocity.y < 0.0:
                    velocity = _with_y(velocity, 0.0)

        if self._override_enabled:
            inp = replace(self._override_input)
        else:
            inp = replace(inp) if inp is not None else PlayerInput()

        if self._crouch_jump_move_lock > 0.0 and prev_ground:
            inp.move_x = inp.move_y = 0.0

        prev_action_id = self.action.id
        raw_x, raw_y = inp.move_x, inp.move_y

        jump_trg = inp.jump and not self._prev_jump_input
        self._prev_jump_input = inp.jump
        if jump_trg:
            self._jump_buffer = JUMP_BUFFER_TIME
        else:
            self._jump_buffer = max(0.0, self._jump_buffer - dt)
        if self._double_jump_window > 0.0:
            self._double_jump_window = max(0.0, self._double_jump_window - dt)

        ao = update_action(
            self.action,
            params,
            ActionInput(
                move_x=inp.move_x,
                move_y=inp.move_y,
                jump_held=inp.jump,
                dash_held=inp.dash,
                spin_held=inp.spin,
                crouch_held=inp.crouch,
            ),
            ActionSensors(on_ground=prev_ground, vel_y=velocity.y),
            dt,
        )

        is_spin = self.action.id is ActionId.SPIN
        if is_spin and not self._prev_spin and self.crouch_forward_jump_active:
            self.crouch_forward_jump_active = False
            velocity = Vec3(0.0, velocity.y, 0.0)

        cam_front, cam_right = _camera_basis(camera_front)

        crouch_dir = Vec3()
        has_crouch_dir = False
        forward_dot = -1.0
        if raw_x * raw_x + raw_y * raw_y > CROUCH_FORWARD_JUMP_INPUT_MIN**2:
            direction = cam_right * raw_x + cam_front * raw_y
            if direction.dot(direction) > _EPS:
                crouch_dir = direction.normalized()
                has_crouch_dir = True
                forward_dot = self.front.normalized().dot(crouch_dir)

        crouch_jump_trg = (
            prev_action_id is ActionId.CROUCH
            and prev_ground
            and jump_trg
            and has_crouch_dir
            and forward_dot >= CROUCH_FORWARD_JUMP_FORWARD_DOT
        )

        is_crouch = ao.id is ActionId.CROUCH
        if is_crouch:
            inp.move_x = inp.move_y = 0.0
            if prev_ground:
                velocity = Vec3(0.0, velocity.y, 0.0)
            self._brake_timer = 0.0
            self._dash2_accel_dist = 0.0

        move_accel = tune.move_accel * ao.move_speed_scale
        air_control_scale = (
            CROUCH_FORWARD_JUMP_AIR_CONTROL_SCALE if self.crouch_forward_jump_active else 1.0
        )

        self.grounded = False

        if ao.override_velocity:
            velocity = Vec3(*ao.velocity)
        else:
            if ao.request_jump and prev_ground:
                do_double = self._double_jump_window > 0.0 and not crouch_jump_trg
                jump_y = ao.jump_speed_y * (DOUBLE_JUMP_SPEED_MULT if do_double else 1.0)
                if crouch_jump_trg:
                    jump_y = ao.jump_speed_y * CROUCH_FORWARD_JUMP_Y_MULT
                    velocity = _with_y(velocity, jump_y)
                    self.front = crouch_dir.normalized()
                    self._crouch_forward_jump_dir = crouch_dir.normalized()
                    self.crouch_forward_jump_active = True
                else:
                    velocity = _with_y(velocity, jump_y)
                    self.crouch_forward_jump_active = False

                if do_double:
                    self._double_jump_window = 0.0
                    double_jump_fired = True
                self._air_from_ground_jump = True

                if crouch_jump_trg:
                    self._var_jump_active = False
                    self._var_jump_hold = 0.0
                    self._var_jump_start_speed = 0.0
                    self._var_jump_cut_applied = True
                else:
                    self._start_var_jump(jump_y)

            if ao.add_vel_y:
                velocity = _with_y(velocity, velocity.y + ao.vel_y_delta)

            if not prev_ground and not ao.override_vel_y:
                velocity = _with_y(velocity, velocity.y - tune.gravity * dt)
                if tune.terminal_fall < 0.0 and velocity.y < tune.terminal_fall:
                    velocity = _with_y(velocity, tune.terminal_fall)

                is_spin = self.action.id is ActionId.SPIN
                spin_started = is_spin and not self._prev_spin
                if spin_started and self.crouch_forward_jump_active:
                    self.crouch_forward_jump_active = False
                    velocity = Vec3(0.0, velocity.y, 0.0)
                if is_spin:
                    vy = velocity.y + tune.gravity * dt
                    if spin_started and vy < 0.0:
                        vy = 0.0
                    lift_duration = max(_EPS, params.spin_air_lift_duration)
                    if self.action.timer <= lift_duration:
                        vy += params.spin_air_lift_impulse_y / lift_duration * dt
                    velocity = _with_y(velocity, vy)
                self._prev_spin = is_spin

            if ao.override_vel_y:
                velocity = _with_y(velocity, ao.vel_y)

        if self.action.id is ActionId.SPIN:
            self.spin_yaw -= (2.0 * math.pi / params.spin_time) * dt
        else:
            self.spin_yaw = 0.0

        is_air_like = self.action.id is ActionId.AIR or (
            not prev_ground and self.action.id is ActionId.SPIN
        )

        if not is_crouch:
            velocity = self._apply_move_input(
                inp, velocity, cam_front, cam_right, is_air_like, move_accel, air_control_scale, dt
            )
            self._track_idle(inp, velocity, prev_ground, ao.id, dt)

        fric = tune.friction
        if is_air_like:
            fric = 0.0
        if inp.move_x * inp.move_x + inp.move_y * inp.move_y > _EPS:
            fric *= 0.15
        if self._brake_timer > 0.0:
            fric = 0.0
        vel_xz = _xz(velocity)
        velocity = _with_xz(velocity, vel_xz + (-vel_xz) * (fric * dt))

        if self._var_jump_active and not ao.override_velocity and not ao.override_vel_y:
            velocity = self._apply_variable_jump(inp.jump, velocity, dt)

        position = position + velocity * dt

        if self.action.id is ActionId.SPIN:
            self._spin_break_blocks(position)

        position, velocity = self._resolve_collisions(position, velocity)

        if not self.grounded and velocity.y <= GROUND_PROBE_MAX_VEL_Y:
            ground_y = self._probe(position)
            if ground_y is not None:
                self.grounded = True
                position = _with_y(position, ground_y)
                velocity = _with_y(velocity, 0.0)

        if not self._prev_grounded and self.grounded:
            if self._air_from_ground_jump:
                self._double_jump_window = DOUBLE_JUMP_WINDOW
                self._air_from_ground_jump = False
            if self.crouch_forward_jump_active:
                self._crouch_jump_move_lock = max(
                    self._crouch_jump_move_lock, CROUCH_FORWARD_JUMP_LAND_MOVE_LOCK
                )
                velocity = Vec3(0.0, velocity.y, 0.0)
                self._brake_timer = 0.0
                self._dash2_accel_dist = 0.0

        if self.grounded and self._double_jump_window > 0.0 and self._jump_buffer > 0.0:
            jump_y = params.jump_speed_y * DOUBLE_JUMP_SPEED_MULT
            velocity = _with_y(velocity, jump_y)
            self.grounded = False
            self._double_jump_window = 0.0
            self._jump_buffer = 0.0
            self._air_from_ground_jump = True
            self._start_var_jump(jump_y)
            double_jump_fired = True

        if self.grounded:
            self._var_jump_active = False
            self._var_jump_hold = 0.0
            self._var_jump_start_speed = 0.0
            self._var_jump_cut_applied = False
            self.crouch_forward_jump_active = False

        self._update_animation_state(
            dt, ao.request_jump, prev_ground, crouch_jump_trg, double_jump_fired
        )

        self.position = position
        self.velocity = velocity

    def _start_var_jump(self, jump_y: float) -> None:
        self._var_jump_active = True
        self._var_jump_hold = 0.0
        self._var_jump_start_speed = jump_y
        self._var_jump_cut_applied = False

    def _apply_move_input(
        self,
        inp: PlayerInput,
        velocity: Vec3,
        cam_front: Vec3,
        cam_right: Vec3,
        is_air_like: bool,
        move_accel: float,
        air_control_scale: float,
        dt: float,
    ) -> Vec3:
        direction = cam_right * inp.move_x + cam_front * inp.move_y
        has_move_dir = direction.dot(direction) > _EPS

        if not has_move_dir:
            if is_air_like and self.crouch_forward_jump_active:
                desired = self._crouch_forward_jump_dir.normalized() * CROUCH_FORWARD_JUMP_SPEED_XZ
                accel = CROUCH_FORWARD_JUMP_SPEED_XZ / max(_EPS, CROUCH_FORWARD_JUMP_ACCEL_TIME)
                velocity = _with_xz(velocity, _approach(_xz(velocity), desired, accel * dt))
            return velocity

        direction = direction.normalized()
        mag_sq = inp.move_x * inp.move_x + inp.move_y * inp.move_y
        mag = 1.0 if mag_sq >= 1.0 else (math.sqrt(mag_sq) if mag_sq > 0.0 else 0.0)

        vel_xz = _xz(velocity)
        speed_xz = vel_xz.length()

        if self.action.id is not ActionId.AIR:
            if self._brake_timer <= 0.0 and mag > 1.0e-3 and speed_xz > 0.2:
                if (vel_xz * (1.0 / speed_xz)).dot(direction) <= -0.5:
                    self._brake_timer = BRAKE_TIME
                    self._dash2_accel_dist = 0.0
        else:
            self._brake_timer = 0.0

        if self._play_land:
            return velocity

        if not is_air_like:
            if self._brake_timer > 0.0:
                self._brake_timer -= dt
                vel_xz = vel_xz + (-vel_xz) * (BRAKE_FRICTION * dt)
                if self._brake_timer <= 0.0:
                    vel_xz = Vec3()
                return _with_xz(velocity, vel_xz)

            if mag >= 0.75 and speed_xz > 0.05:
                self._dash2_accel_dist += speed_xz * dt
            else:
                self._dash2_accel_dist = 0.0

            if mag < 0.5:
                desired_speed = WALK_MAX * (mag / 0.5)
            elif mag < 0.75:
                t = (mag - 0.5) / 0.25
                desired_speed = WALK_MAX + (DASH1_MAX - WALK_MAX) * t
            elif self._dash2_accel_dist < DASH2_STAGE1_DIST:
                desired_speed = DASH1_MAX
            else:
                t = (mag - 0.75) / 0.25
                desired_speed = DASH1_MAX + (DASH2_MAX - DASH1_MAX) * t

            dot = min(1.0, max(-1.0, self.front.dot(direction)))
            angle = math.acos(dot)
            rot_step = self.tuning.rot_speed * dt
            new_front = direction
            if angle >= rot_step:
                sign = -1.0 if self.front.cross(direction).y < 0.0 else 1.0
                new_front = _rotate_y(self.front, sign * rot_step)
            self.front = new_front.normalized()

            vel_xz = _approach(vel_xz, direction * desired_speed, move_accel * dt)
            return _with_xz(velocity, vel_xz)

        self._brake_timer = 0.0
        self._dash2_accel_dist = 0.0
        if self.crouch_forward_jump_active:
            desired = self._crouch_forward_jump_dir.normalized() * CROUCH_FORWARD_JUMP_SPEED_XZ
            desired = desired + direction * (CROUCH_FORWARD_JUMP_INPUT_SPEED * mag)
            accel = CROUCH_FORWARD_JUMP_SPEED_XZ / max(_EPS, CROUCH_FORWARD_JUMP_ACCEL_TIME)
            vel_xz = _approach(vel_xz, desired, accel * dt)
        else:
            desired = direction * (AIR_SPEED_MAX * mag)
            max_delta = move_accel * AIR_ACCEL_SCALE * air_control_scale * dt
            vel_xz = _approach(vel_xz, desired, max_delta)
        return _with_xz(velocity, vel_xz)

    def _track_idle(
        self, inp: PlayerInput, velocity: Vec3, prev_ground: bool, action_id: ActionId, dt: float
    ) -> None:
        idle_now = (
            inp.move_x * inp.move_x + inp.move_y * inp.move_y <= _EPS
            and prev_ground
            and _xz(velocity).length() <= IDLE_SPEED_MAX
            and self._brake_timer <= 0.0
            and action_id is ActionId.GROUND
        )
        if idle_now:
            if not self._was_idle:
                self.idle_time = 0.0
            self._was_idle = True
            self._dash2_accel_dist = 0.0
            self.idle_time += dt
        else:
            self._was_idle = False
            self.idle_time = 0.0

    def _apply_variable_jump(self, jump_held: bool, velocity: Vec3, dt: float) -> Vec3:
        if not self._var_jump_cut_applied:
            if jump_held:
                self._var_jump_hold = min(VAR_JUMP_HOLD_STRONG, self._var_jump_hold + dt)
            else:
                if self._var_jump_hold < VAR_JUMP_HOLD_STRONG - VAR_JUMP_EPS:
                    ratio = (
                        VAR_JUMP_WEAK_RATIO
                        if self._var_jump_hold < VAR_JUMP_HOLD_WEAK
                        else VAR_JUMP_MID_RATIO
                    )
                    cut_speed = self._var_jump_start_speed * ratio
                    if velocity.y > 0.0 and velocity.y > cut_speed:
                        velocity = _with_y(velocity, cut_speed)
                self._var_jump_cut_applied = True
        if velocity.y <= 0.0:
            self._var_jump_active = False
        return velocity

    def _spin_break_blocks(self, position: Vec3) -> None:
        box = player_aabb(position)
        spin_box = AABB(
            Vec3(box.min.x - SPIN_EXPAND_XZ, box.min.y + SPIN_AABB_LIFT, box.min.z - SPIN_EXPAND_XZ),
            Vec3(box.max.x + SPIN_EXPAND_XZ, box.max.y, box.max.z + SPIN_EXPAND_XZ),
        )
        for index, block in enumerate(self.stage):
            if block.kind == BREAKABLE_KIND and spin_box.overlaps(block.aabb):
                self.stage.hide_block(index)
                break

    def _resolve_collisions(self, position: Vec3, velocity: Vec3) -> tuple[Vec3, Vec3]:
        for _ in range(COLLISION_PASSES):
            any_hit = False
            removed_block = False
            for index, block in enumerate(self.stage):
                player = player_aabb(position)
                box = block.aabb
                if not box.overlaps(player):
                    continue
                ox = min(player.max.x, box.max.x) - max(player.min.x, box.min.x)
                oy = min(player.max.y, box.max.y) - max(player.min.y, box.min.y)
                oz = min(player.max.z, box.max.z) - max(player.min.z, box.min.z)
                if ox <= 0 or oy <= 0 or oz <= 0:
                    continue
                pc, bc = player.center, box.center

                if ox <= oy and ox <= oz:
                    sign = -1.0 if pc.x < bc.x else 1.0
                    position = Vec3(position.x + sign * ox, position.y, position.z)
                    velocity = Vec3(0.0, velocity.y, velocity.z)
                elif oy <= ox and oy <= oz:
                    sign = -1.0 if pc.y < bc.y else 1.0
                    position = _with_y(position, position.y + sign * oy)
                    if sign > 0.0 and velocity.y <= 0.0:
                        self.grounded = True
                    if sign < 0.0 and velocity.y > 0.0 and block.kind == BREAKABLE_KIND:
                        self.stage.hide_block(index)
                        removed_block = True
                        any_hit = True
                        velocity = _with_y(velocity, 0.0)
                        break
                    velocity = _with_y(velocity, 0.0)
                else:
                    sign = -1.0 if pc.z < bc.z else 1.0
                    position = Vec3(position.x, position.y, position.z + sign * oz)
                    velocity = Vec3(velocity.x, velocity.y, 0.0)
                any_hit = True

            if removed_block:
                continue
            if not any_hit:
                break
        return position, velocity

    def _clear_visual_fix(self) -> None:
        self.vis_fix_land = False
        self.vis_fix_jump = False
        self.vis_fix_crouch_forward_jump = False

    def _update_animation_state(
        self,
        dt: float,
        request_jump: bool,
        prev_ground: bool,
        crouch_jump_trg: bool,
        double_jump_fired: bool,
    ) -> None:
        grounded = self.grounded
        if self.action.id is ActionId.SPIN:
            self._prev_crouch = False
            self._crouch_t = 0.0
            self._spin_vis_t += dt
            self.spin_yaw -= (2.0 * math.pi / VISUAL_SPIN_TIME) * dt
            self._clear_visual_fix()
        elif self.action.id is ActionId.CROUCH:
            if not self._prev_crouch:
                self._crouch_t = 0.0
            self._crouch_t += dt
            self._clear_visual_fix()
            self._prev_crouch = True
        else:
            self._prev_crouch = False
            self._crouch_t = 0.0
            self._spin_vis_t = 0.0
            self.spin_yaw = 0.0
            if crouch_jump_trg:
                self._play_crouch_forward_jump = True
                self._crouch_forward_jump_t = 0.0
            if grounded:
                self._play_crouch_forward_jump = False
                self._crouch_forward_jump_t = 0.0
            if not self._prev_grounded and grounded:
                self._play_land = True
                self._land_t = 0.0
            if request_jump and prev_ground and not crouch_jump_trg:
                self._play_jump = True
                self._jump_t = 0.0
            if double_jump_fired:
                self._play_double_jump = True
                self._double_jump_t = 0.0
                self._play_jump = False
            if not grounded:
                self._play_jump = True

            crouch_jump_frame = land_frame = jump_frame = False
            if (
                self._play_crouch_forward_jump
                and self.crouch_forward_jump_active
                and not grounded
            ):
                crouch_jump_frame = True
                self._crouch_forward_jump_t += dt
                self._play_land = False
                self._play_jump = False
                self._play_double_jump = False
            elif self._play_land:
                land_frame = True
                self._land_t += dt
                if self._land_t >= LAND_SHOW_TIME:
                    self._play_land = False
                self._play_jump = False
            else:
                if grounded:
                    self._play_jump = False
                if self._play_jump:
                    jump_frame = True
                    self._jump_t += dt

            self.vis_fix_land = land_frame
            self.vis_fix_jump = jump_frame or crouch_jump_frame
            self.vis_fix_crouch_forward_jump = crouch_jump_frame

        self._prev_grounded = grounded

    def visual_offset(self) -> float:
        """Distance along the facing direction the model is drawn shifted by."""
        if self.vis_fix_land:
            return VIS_LAND_FORWARD_FIX
        if self.vis_fix_crouch_forward_jump:
            return VIS_CROUCH_FORWARD_JUMP_FIX
        if self.vis_fix_jump:
            return VIS_JUMP_FORWARD_FIX
        return 0.0

    def world_matrix(self, depth: bool = False) -> np.ndarray:
        """Model world matrix (row vectors); ``depth`` omits the model's upright tilt."""
        angle = -math.atan2(self.front.z, self.front.x) + math.radians(270.0) + self.spin_yaw
        rotation = _rotation_y(angle)
        if not depth:
            rotation = _rotation_x(math.radians(90.0)) @ rotation

        position = self.position
        fix = self.visual_offset()
        if fix != 0.0:
            position = position + self.front.normalized() * fix

        translation = np.identity(4)
        translation[3, :3] = (position.x, position.y + PLAYER_DRAW_Y_OFFSET, position.z)
        scale = np.diag([PLAYER_SCALE, PLAYER_SCALE, PLAYER_SCALE, 1.0])
        return scale @ rotation @ translation
"""High-level player action state machine (ground, air, spin, crouch)."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field, fields

_MIN_DURATION = 1.0e-6


class ActionId(enum.Enum):
    """What the player is currently doing."""

    GROUND = enum.auto()
    AIR = enum.auto()
    SPIN = enum.auto()
    CROUCH = enum.auto()


@dataclass
class ActionInput:
    """Input already converted for the action system."""

    move_x: float = 0.0
    move_y: float = 0.0
    jump_held: bool = False
    dash_held: bool = False
    spin_held: bool = False
    crouch_held: bool = False


@dataclass
class ActionSensors:
    """Contact information the action system needs."""

    on_ground: bool = False
    vel_y: float = 0.0


@dataclass
class ActionParams:
    """Tuning parameters for actions."""

    spin_time: float = 0.50
    spin_cooldown: float = 0.80
    spin_air_delay_after_jump: float = 0.20
    spin_air_lift_impulse_y: float = 4.5
    spin_air_lift_duration: float = 0.5
    crouch_speed_scale: float = 0.45
    jump_speed_y: float = 7.0

    @property
    def spin_lift_accel(self) -> float:
        """Upward acceleration that adds up to the lift impulse over its duration."""
        return self.spin_air_lift_impulse_y / max(_MIN_DURATION, self.spin_air_lift_duration)


@dataclass
class ActionState:
    """Persistent state of the action system."""

    id: ActionId = ActionId.GROUND
    timer: float = 0.0
    spin_cooldown_timer: float = 0.0
    spin_air_delay_timer: float = 0.0
    prev_jump: bool = False
    prev_spin: bool = False
    prev_crouch: bool = False
    prev_before_spin: ActionId = ActionId.GROUND

    def reset(self) -> None:
        """Return every field to its initial value."""
        for f in fields(self):
            setattr(self, f.name, f.default)

    def _change(self, next_id: ActionId) -> None:
        self.id = next_id
        self.timer = 0.0


@dataclass
class ActionOutput:
    """What the physics side should apply this frame."""

    id: ActionId = ActionId.GROUND
    move_speed_scale: float = 1.0
    request_jump: bool = False
    jump_speed_y: float = 0.0
    add_vel_y: bool = False
    vel_y_delta: float = 0.0
    override_vel_y: bool = False
    vel_y: float = 0.0
    override_velocity: bool = False
    velocity: tuple[float, float, float] = field(default=(0.0, 0.0, 0.0))


def update_action(
    state: ActionState,
    params: ActionParams,
    inp: ActionInput,
    sensors: ActionSensors,
    dt: float,
) -> ActionOutput:
    """Advance the state machine by ``dt`` seconds and return this frame's output."""
    state.timer += dt
    if state.spin_cooldown_timer > 0.0:
        state.spin_cooldown_timer = max(0.0, state.spin_cooldown_timer - dt)
    if state.spin_air_delay_timer > 0.0:
        state.spin_air_delay_timer = max(0.0, state.spin_air_delay_timer - dt)

    started_spin = False

    jump_trg = inp.jump_held and not state.prev_jump
    spin_trg = inp.spin_held and not state.prev_spin

    state.prev_jump = inp.jump_held
    state.prev_spin = inp.spin_held
    state.prev_crouch = inp.crouch_held

    out = ActionOutput(id=state.id)
    on_ground = sensors.on_ground

    def start_jump() -> None:
        out.request_jump = True
        out.jump_speed_y = params.jump_speed_y
        state.spin_air_delay_timer = params.spin_air_delay_after_jump
        state._change(ActionId.AIR)

    def settle() -> ActionId:
        return ActionId.GROUND if on_ground else ActionId.AIR

    current = state.id
    if current is ActionId.GROUND:
        if spin_trg and state.spin_cooldown_timer <= 0.0:
            started_spin = True
            state.prev_before_spin = ActionId.GROUND
            state._change(ActionId.SPIN)
        elif inp.crouch_held and on_ground:
            state._change(ActionId.CROUCH)
        elif jump_trg:
            start_jump()
        elif not on_ground:
            state._change(ActionId.AIR)

    elif current is ActionId.AIR:
        if (
            spin_trg
            and state.spin_cooldown_timer <= 0.0
            and state.spin_air_delay_timer <= 0.0
        ):
            started_spin = True
            state.prev_before_spin = ActionId.AIR
            state._change(ActionId.SPIN)
        if on_ground:
            state._change(ActionId.GROUND)

    elif current is ActionId.SPIN:
        out.move_speed_scale = 0.90
        if state.prev_before_spin is ActionId.AIR and not on_ground:
            vy = sensors.vel_y
            if state.timer <= params.spin_air_lift_duration:
                vy += params.spin_lift_accel * dt
            out.override_vel_y = True
            out.vel_y = vy
        if state.timer >= params.spin_time:
            state.spin_cooldown_timer = params.spin_cooldown
            state._change(settle())

    elif current is ActionId.CROUCH:
        out.move_speed_scale = 0.0
        if jump_trg:
            start_jump()
        if not inp.crouch_held:
            state._change(settle())
        if not on_ground:
            state._change(ActionId.AIR)

    # The spin case is not reached on the frame a spin starts, so apply the
    # air-spin vertical control once here.
    if (
        started_spin
        and state.id is ActionId.SPIN
        and state.prev_before_spin is ActionId.AIR
        and not on_ground
    ):
        vy = min(sensors.vel_y, 0.0)
        vy += params.spin_lift_accel * dt
        out.override_vel_y = True
        out.vel_y = vy

    out.id = state.id
    return out
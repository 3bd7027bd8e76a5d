# platformer

Game logic for a 3D platformer, written in plain Python and not tied to any
engine. The package works out positions, velocities, transform matrices and
texture coordinates. Your renderer and input layer use those values.

## Modules

- `platformer.action` holds the high-level player state machine. `ActionId`
  has the states `GROUND`, `AIR`, `SPIN` and `CROUCH`.
  `update_action(state, params, inp, sensors, dt)` moves an `ActionState` on by
  one frame and returns an `ActionOutput`. The output carries:
  - jump requests
  - a movement speed scale
  - vertical velocity overrides during an air spin

  `ActionParams` holds the timings and speeds. `ActionState.reset()` returns the
  state to its starting values.
- `platformer.geometry` provides the shared geometry types:
  - `Vec3`, an immutable vector with `length`, `normalized`, `dot` and `cross`
  - `AABB`, with `overlaps` and `center`
  - `StageBlock` and `Stage`. `Stage.hide_block` removes a block from play.
  - `player_aabb(position)`, the player's collision box
  - `probe_ground_y(stage, position, eps)`, which finds the floor under the feet
- `platformer.player` provides `Player`, which simulates the character one
  frame at a time with `update(elapsed, camera_front, inp)`. It covers:
  - walking and two dash stages
  - braking on sharp turns and friction
  - jumps whose height depends on how long the jump button is held
  - a higher jump timed on landing
  - a forward jump from a crouch
  - spin lift in the air
  - breakable blocks (kind `10`), destroyed by a spin or a head hit
  - pushing the player out of stage blocks

  `PlayerInput` and `PlayerTuning` set the input and feel of the player.
  `set_input_override`, `teleport`, `reset_tuning`, `aabb` and
  `world_matrix(depth)` complete the interface.
- `platformer.camera` provides `PlayerCamera`. By default it follows behind the
  player, and a horizontal stick value (`CameraInput.stick_x`) orbits it.
  Toggling `CameraInput.toggle_held` switches to a free-fly mode. It provides
  `view_matrix()` and `perspective_matrix(aspect)`. Both are left-handed and use
  row vectors.
- `platformer.mouse` provides `Mouse`, which tracks buttons, position and wheel
  from window messages (`Message`) through `process_message`, and from raw
  relative reports through `process_raw_input`. It supports `PositionMode`
  `ABSOLUTE` and `RELATIVE`. Mode switches and wheel resets are queued and take
  effect on the next processed message.
- `platformer.sprite` builds screen-space quads (`SpriteQuad` of four
  `SpriteVertex`) with these functions:
  - `full_texture_quad`, which shows the whole texture
  - `cut_quad`, which shows a texel region
  - `rotated_quad`, which shows a rotated texel region

  `orthographic_projection(screen_width, screen_height)` gives a matrix with
  the origin at the top-left of the screen.
- `platformer.sprite_anim` provides `SpriteAnimator`, which registers
  sprite-sheet patterns (up to 128) and runs players (up to 256). Its methods
  are `update(elapsed)` and `frame_rect(player_id)`. `frame_rect` returns the
  `FrameRect` of a player's current frame.

## Installing

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Examples

```python
from platformer.action import ActionInput, ActionParams, ActionSensors, ActionState, update_action

state = ActionState()
params = ActionParams()

out = update_action(state, params, ActionInput(jump_held=True), ActionSensors(on_ground=True), 1 / 60)
print(out.id, out.request_jump, out.jump_speed_y)  # ActionId.AIR True 7.0
```

```python
from platformer.geometry import Stage, StageBlock, Vec3
from platformer.player import Player, PlayerInput

stage = Stage([StageBlock(position=Vec3(0.0, -0.5, 0.0), size=Vec3(10.0, 1.0, 10.0))])
player = Player(Vec3(0.0, 0.0, 0.0), stage=stage)
for _ in range(60):
    player.update(1 / 60, inp=PlayerInput(move_y=1.0))
print(player.position, player.grounded)
```

```python
from platformer.sprite_anim import SpriteAnimator

anim = SpriteAnimator()
pattern = anim.register_pattern(0, 8, 4, 0.1, (32, 32), (0, 96), True)
player = anim.create_player(pattern)
anim.update(0.25)
print(anim.frame_rect(player))
```

## What it does not do

- It draws nothing and loads no models, textures or shaders. Matrices, quads
  and frame rectangles are handed to whatever renderer you use.
- It reads no devices. The caller supplies keyboard and gamepad state as
  `PlayerInput` and `CameraInput`. The caller also feeds mouse messages into
  `Mouse`.
- `Mouse` keeps its own record of the cursor: `cursor_display_count`,
  `cursor_clipped` and `cursor_position`. It does not change the operating
  system's cursor.
- The player keeps its animation timers and visual offsets. It does not pick or
  play skeletal animation clips.
- It loads no stage files. Build a `Stage` from `StageBlock` values yourself.
- It has no command-line program or game loop.
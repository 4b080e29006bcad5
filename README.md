# wheeldrive

Motion control building blocks for a two-wheel drive in which each wheel is a
brushless DC motor with a quadrature encoder.

- `wheeldrive.s_curve`: a jerk-limited S-curve interpolator. It advances one
  sampling period per call. Moves can be chained with a non-zero end velocity,
  and a move can be stopped part-way through.
- `wheeldrive.pid`: a PID velocity controller whose output is clamped.
- `wheeldrive.encoder`: turns a wrapping 16-bit counter into velocity (rpm) and
  position (rad).
- `wheeldrive.motor`: a BLDC motor model driven through a PWM channel plus
  direction and brake lines.
- `wheeldrive.motion`: a per-wheel controller that runs velocity, position and
  halt commands from a bounded queue.
- `wheeldrive.firmware`: command channels, a command handler that reports full
  buffers, a connection monitor, and the periodic two-wheel motion step.
- `wheeldrive.protocol` and `wheeldrive.wire`: the message types and their
  compact binary encoding.
- `wheeldrive.command_parser`, `wheeldrive.mode_switch`, `wheeldrive.graph` and
  `wheeldrive.tuning`: helpers for tuning. They parse position command scripts,
  switch control modes by way of standstill, and keep a rolling window of
  profile samples.
- `wheeldrive.units`: converts between rpm and rad/s.

## Installation

```
pip install .
```

With the test dependencies:

```
pip install ".[test]"
pytest
```

## The sample profile command

```
wheeldrive-profile
```

The command interpolates a sample move and plots it with matplotlib. The move has
these settings:

- displacement -10;
- start velocity 1;
- maximum velocity 5;
- limits of 10 for velocity, 10 for acceleration and 30 for jerk;
- a 1 ms sampling time.

Each step is written as one tab-separated line holding position, velocity,
acceleration, jerk, the three deceleration phase times and the deceleration
distance.

Options:

- `--record FILE` sets where the per-step record goes. The default is
  `record.txt`.
- `--save IMAGE` saves the plot to an image file instead of showing it.

## Using the library

### Units

```python
from wheeldrive.units import rpm_to_rad_s, rad_s_to_rpm

rpm_to_rad_s(60.0)          # about 6.283 rad/s
rad_s_to_rpm(6.283185307)   # about 60.0 rpm
```

### S-curve interpolation

```python
from wheeldrive.s_curve import SCurveInterpolator, InterpolationStatus
from wheeldrive.profile_demo import run_profile

intp = SCurveInterpolator(vel_limit=10.0, acc_limit=10.0, jerk_limit=30.0,
                          sampling_time=0.001)
intp.set_target(pos_offset=0.0, displacement=-10.0, vel_start=1.0,
                vel_end=0.0, vel_max_magnitude=5.0)

for time, out in run_profile(intp):
    print(time, out.pos, out.vel, out.acc, out.jerk)

assert intp.status is InterpolationStatus.DONE
```

How the interpolator behaves:

- `interpolate()` advances one step.
- `output` gives an `InterpolationOutput` that carries the real sign of the
  motion.
- `status` reports `DONE` or `BUSY`.
- `set_target` ignores a zero displacement or a zero maximum velocity.
- The maximum velocity is capped at `vel_limit`. Acceleration and jerk are
  derived from it and capped at their own limits.
- `stop()` decelerates from the current state to rest.
- `write_record(file)` writes the tab-separated line that the profile command
  uses.

### Velocity control

```python
from wheeldrive.pid import Pid

pid = Pid(kp=0.00006, ki=0.00124, kd=0.000000728, output_limit=1.0)
pid.set_target_velocity(500.0)   # rpm
effort = pid.run(480.0, 0.005)   # measured rpm, period in seconds
```

The effort always lies within `[-output_limit, output_limit]`. The latest error
is available as `pid.error`.

### A simulated wheel

```python
from wheeldrive.encoder import Encoder
from wheeldrive.firmware import CommandChannel, motion_step
from wheeldrive.motion import Motion
from wheeldrive.motor import BldcMotor, OutputPin, PwmChannel
from wheeldrive.pid import Pid
from wheeldrive.protocol import VelocityCommand
from wheeldrive.s_curve import SCurveInterpolator

def make_wheel(channel):
    motor = BldcMotor(Encoder(lambda: 0), PwmChannel(), OutputPin(), OutputPin(),
                      Pid(0.00006, 0.00124, 0.000000728, 1.0), 0.005)
    return Motion(SCurveInterpolator(418.9, 4189.0, 41888.0, 0.005), motor, channel)

left_channel, right_channel = CommandChannel(), CommandChannel()
left, right = make_wheel(left_channel), make_wheel(right_channel)

left_channel.try_publish(VelocityCommand(300.0))
left_status, right_status = motion_step(left, right)
```

Components of the simulation:

- `Encoder` calls its counter function once per update.
- `OutputPin` keeps the level it was last driven to in `is_high`, and every level
  in `history`.
- `PwmChannel.duty_percent` holds the last duty. The output is active low, and a
  zero target velocity engages the brake.

How the controller handles commands:

- A `Motion` takes at most one command per period from its source into a queue
  of `MOTION_CMD_QUEUE_SIZE` (32) entries.
- A `Halt` clears that queue.
- A position command waits until the previous motion is ready.
- A completed halt leaves the wheel in `ControlMode.STAND_STILL`.

### Command handling and link supervision

- `CommandChannel` is a bounded FIFO. Its default capacity is `CHANNEL_SIZE`, 48.
- `CommandHandler.handle(motor_id, command)` forwards a command and raises
  `BufferFullError` when it cannot be queued. A position command is also refused
  while the motor's own queue is full.
- `ConnectionMonitor.record(timed_out)` publishes `Halt` to both channels the
  first time a publish times out after a successful one. It returns `True` when
  it does so.

### Wire format

```python
from wheeldrive.protocol import MotorId, PositionCommand
from wheeldrive.wire import encode_set_motor_command, decode_set_motor_command

data = encode_set_motor_command(MotorId.LEFT, PositionCommand(1.5, 100.0, 0.0))
motor_id, command = decode_set_motor_command(data)
```

The encoding follows fixed rules:

- Enum variants are written as varint indices.
- Floats are little-endian 32-bit values, so values round to single precision.
- Tuples are written field after field.

The available pairs are:

- `encode_set_motor_command` / `decode_set_motor_command`;
- `encode_command_result` / `decode_command_result`. Decoding a result raises the
  `BufferFullError` it carries.
- `encode_motor_data` / `decode_motor_data`;
- `encode_mpu6050_data` / `decode_mpu6050_data`.

Malformed or trailing bytes raise `DecodeError`.

### Position command scripts

Commands are written as `(displacement, vel_max[, vel_end])` and separated by
`;`. A trailing `;` is allowed. A missing `vel_end` is 0.

```python
from wheeldrive.command_parser import CommandParser, parse_position_commands, ParseError

commands = parse_position_commands("(10, 500, 200); (5, 300)")

parser = CommandParser()
parser.parse("(1.5, 100, 0);")
first = parser.pop_command()   # None once the queue is empty
```

Invalid text raises `ParseError`, which gives the failing `position`. A failed
`parse` leaves the queued commands unchanged.

### Mode switching and plotting

`ModeSwitch(timeout_s=6.0)` switches the drive to a requested mode:

1. `ignite(mode)` starts the switch. It first brings the drive to standstill and
   then asks for `mode`.
2. Call `process(motor_data)` each cycle. It returns the mode to command.
3. If a step times out, `process` raises `ModeSwitchError`. It keeps raising
   until `reset()` is called, and `reset()` sets the output to standstill.

`DataGraph(window_size=600)` keeps recent `ProfileData` samples:

- It records only after `toggle_updates()` has turned recording on.
- Once the window is full, each new sample drops the oldest one.
- `series(ProfileDataType.INTP_VEL)` returns `(index, value)` points.
- `ProfileData.from_motor_data` builds a sample from a `MotorProcessData`.

## What is not included

The package does not provide:

- a USB or other transport, and no host client that talks to a real board;
- a graphical tuning application;
- hardware access: timers, GPIO, PWM and the IMU are not driven.

The motor, pins and encoder counter are plain Python objects. Commands and data
are encoded to bytes by `wheeldrive.wire`, and carrying those bytes is left to
the caller.
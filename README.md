# r51vehicle

This package tracks state on the Nissan R51 vehicle CAN bus and sends control
commands back to it. It decodes bus frames into typed state events. It encodes
climate and body settings commands as CAN frames. It also holds the filtering
and routing rules for frames and events that pass between the bus, the
processing logic and a J1939 network.

## Installation

```
pip install r51vehicle
```

The package has no runtime dependencies. To run the test suite:

```
pip install "r51vehicle[test]"
pytest
```

## Concepts

All state and control logic lives in nodes, which subclass
`r51vehicle.core.Node`. A node has three hooks:

- `init()` starts any start-up exchange with the vehicle.
- `handle(msg)` takes an incoming `CANFrame` or `Event`.
- `emit()` is called on every loop iteration.

Each hook returns the messages the node yields, as CAN frames or events. The
returned objects are copies, so the caller may keep or change them.

Time comes from a `Clock`, which uses the monotonic system timer. In tests,
use `FakeClock` and move it with `set()` or `advance()`. `Ticker` uses the
clock to drive periodic state broadcasts. A node built with `tick_ms=0`
broadcasts only on change or on request. Pin access goes through a `GPIO`
object. `FakeGPIO` keeps pin modes and levels in dictionaries.

A controller asks a node for its state by sending
`RequestCommand(subsystem, event_id)`. An `event_id` of `0xFF` requests every
state of that subsystem.

## Modules

| Module | Contents |
| --- | --- |
| `r51vehicle.core` | `Event`, `CANFrame`, `J1939Message`, `message_type`, `get_bit`/`set_bit`/`flip_bit`, `RequestCommand`, `Clock`, `FakeClock`, `Ticker`, `ConfigStore`, `MemoryConfigStore`, `Node` |
| `r51vehicle.climate` | `Climate`: reads the 0x54A and 0x54B state frames, drives the 0x540 and 0x541 control frames |
| `r51vehicle.climate_events` | `ClimateTempState`, `ClimateAirflowState`, `ClimateSystemState` and `ClimateEvent` ids |
| `r51vehicle.climate_frames` | `ClimateSystemControlFrame`, `ClimateFanControlFrame` |
| `r51vehicle.ecm` | `EngineTempState`: coolant temperature from 0x551 |
| `r51vehicle.ipdm` | `IPDM`: lights, defrost and A/C compressor power state from 0x625 |
| `r51vehicle.bcm` | `Illum` (dash lights from headlamp state), `Defrost` (momentary pin drive), `TirePressure` (0x385, with tire position swap saved to a `ConfigStore`) |
| `r51vehicle.settings` | `Settings`: reads and updates BCM body settings over 0x71E and 0x71F |
| `r51vehicle.settings_sequence` | The request/response sequences that `Settings` uses, plus `response_id`, `fill_request` and `match_state` |
| `r51vehicle.momentary_output` | `MomentaryOutput`, `OutputMode`, `GPIO`, `FakeGPIO` |
| `r51vehicle.audio` | Audio state and command events |
| `r51vehicle.screen` | Screen page and power events |
| `r51vehicle.routing` | Vehicle read and write filters, `HardwareFilter` sets, pipe forwarding rules for the bridge, controller and standalone setups, and J1939 event routing |

## Examples

Decode an IPDM power frame:

```python
from r51vehicle.core import CANFrame, FakeClock
from r51vehicle.ipdm import IPDM

ipdm = IPDM(clock=FakeClock())
for event in ipdm.handle(CANFrame(0x625, bytes([0x01, 0x10, 0, 0, 0, 0]))):
    print(event)
```

The state has changed, so the node yields a `POWER_STATE` event. In that
event the high-beam bit and the defrost bit are set.

Send climate commands:

```python
from r51vehicle.climate import Climate
from r51vehicle.climate_events import ClimateEvent
from r51vehicle.core import Event, FakeClock, SubSystem

clock = FakeClock(1)
climate = Climate(clock=clock)
clock.advance(400)
frames = climate.emit()          # control frames leave their init state
frames = climate.handle(Event(SubSystem.CLIMATE, ClimateEvent.TOGGLE_AC_CMD))
```

`handle` returns the updated 0x540 control frame, which is ready to write to
the bus. `emit` then sends both control frames every 200 ms.

Route an event from a controller:

```python
from r51vehicle.core import Event, SubSystem
from r51vehicle.routing import controller_route

controller_route(Event(SubSystem.CLIMATE, 0x10))  # -> 0x18, the bridge address
```

## What this package does not do

- It does not talk to CAN, J1939, serial or GPIO hardware. You read frames from
  your own interface, pass them to `handle`, and write the returned frames back
  yourself. The only `GPIO` implementation it provides is `FakeGPIO`.
- It has no per-ECU configuration profiles such as pin numbers, buffer sizes,
  bus speeds or J1939 names. Pass these values to the constructors yourself.
- It has no command-line program and no main loop. You call each node's hooks
  from your own loop.
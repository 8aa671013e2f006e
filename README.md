# gravsim

gravsim is a real-time gravity simulator. Bodies attract one another under
Newtonian gravity with a small relativistic correction. The result is drawn in
an interactive window built on pygame. The terminal you start the program from
becomes a command console, and you can use it to inspect and change the
simulation while it runs.

At start-up the simulator loads a scaled model of the solar system: the Sun,
the eight planets and the Moon, lined up along the negative x axis. Distances
and velocities are multiplied by `gravsim.values.SCALE`. Masses are multiplied
by its cube, so gravity behaves as it would at full scale. Radii are enlarged
by `RADIUS_SCALE` so that the bodies stay visible. One week of simulated time
passes each second.

## Installation

```
pip install .
```

To install the test dependencies and run the tests:

```
pip install ".[test]"
pytest
```

## Running

```
gravsim
```

This opens a 1600×900 window and starts the physics thread, which runs at 100
ticks per second. It also starts the console thread. The view is redrawn at
the window's target framerate, 60 by default. Each body is a sphere mesh. The
triangles are shaded towards the body whose luminosity is exactly 1.0, and
they are painted from back to front.

The program ends when you close the window or type `quit` in the console.

### Window controls

| Input               | Action                                                                  |
|---------------------|-------------------------------------------------------------------------|
| `w` / `s`           | move forward / back, or move closer / further when locked to a body     |
| `a` / `d`           | strafe left / right (ignored while locked)                              |
| Space / Left Ctrl   | move up / down (ignored while locked)                                   |
| Arrow keys          | turn the camera                                                         |
| Mouse click         | capture the mouse for mouse-look                                        |
| Escape              | release the mouse                                                       |
| Mouse wheel         | scrolling down halves the movement speed; scrolling up doubles it       |

### Console commands

```
help                list the commands
add                 add a new body (asks for each value in turn)
clear               remove all bodies
get [what] [name]   print bodies, a body, the camera or a setting
lock <body>         make the camera follow a body, five radii away
pause               stop the simulation clock
resume / unpause    restart the simulation clock
remove <name>       remove a body
set [what] ...      change a body, the camera or a setting
unlock              free the camera
quit                end the program
```

If you leave out part of a `get` or `set` command, the console asks for the
missing part.

- `get` accepts `bodies`, `body <name>`, `camera`, `cScaling`,
  `gravityScaling`, `isPaused`, `targetFramerate`, `tickSpeed` and
  `timeScaling`.
- `set` accepts `cScaling`, `gravityScaling`, `targetFramerate`, `tickSpeed`
  and `timeScaling`. Each takes one value.
- `set body <name> <property> <values...>` accepts these properties:
  `coordinates`, `directionalVelocities`, `velocity` (rescales the current
  velocity vector), `radius`, `mass`, `luminosity` and `color`.
- `set camera <property> <values...>` accepts `coordinates`, `angles`,
  `moveSpeed`, `rotationSpeed` and `sensitivity`.

Entered coordinates, velocities and masses are multiplied by `SCALE`. Radii
are multiplied by `SCALE` and by `RADIUS_SCALE`. Luminosity and colour
channels must lie between 0 and 1.

Here is an example session:

```
get body earth
set body earth radius 6371000
set timeScaling 86400
lock jupiter
```

## Using it as a library

The simulation core does not need a window:

```python
from gravsim.body import Body
from gravsim.main import spawn_solar_system
from gravsim.universe import Universe
from gravsim.values import RADIUS_SCALE, SCALE

universe = Universe()
spawn_solar_system(universe, SCALE, RADIUS_SCALE, 0.1)
universe.add_body(Body(name="probe", x=-120.0, y_vel=3e-5))
universe.time_scaling = 86400
universe.calculate_tick()
print(universe.bodies["probe"])
```

The main modules are:

- `gravsim.universe.Universe` holds the bodies by name. It also holds
  `tick_speed`, `time_scaling`, `gravity_scaling` and `c_scaling`. Invalid
  settings raise `SimulationError`.
- `gravsim.main.physics_loop(universe, stop)` ticks a universe until a
  `threading.Event` is set.
- `gravsim.window.Window` holds the camera. `build_frame` turns a universe
  into mesh, lighting and matrix data (`Frame`).
- `gravsim.console.Console` runs the text commands against any pair of text
  streams.

## Limitations

- Bodies pass through one another. `check_collision` can tell whether two
  bodies touch, but the tick does not merge them or make them bounce.
- Spin angles are advanced each tick, but no torques act on them.
- No simulation state can be saved or loaded. Each run starts from the
  built-in solar-system model.
- `gravsim` takes no command-line options apart from `--help`.
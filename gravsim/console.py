"""Interactive text commands for inspecting and changing a running simulation."""

from __future__ import annotations

import math
import re
import select
import sys
import threading
from collections.abc import Callable, Sequence
from typing import TextIO

from .body import Body
from .universe import SimulationError, Universe
from .values import RADIUS_SCALE, SCALE
from .window import Window

_POLL_INTERVAL = 0.050

_NUMBER = re.compile(
    r"\s*([+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf(?:inity)?|nan))",
    re.IGNORECASE,
)

_HELP = (
    "List of commands:\n"
    "add - add a new body (further prompts)\n"
    "clear - remove all bodies\n"
    "get - print values of objects or settings\n"
    "lock [body] - lock the camera relative to a body\n"
    "pause - pause universe\n"
    "quit - end program\n"
    "remove [name] - remove a body\n"
    "resume - unpause universe\n"
    "set - change values of objects or settings (further prompts)\n"
    "unlock - unbind camera from body it is locked to\n"
)

_GET_CHOICES = (
    "choices: "
    "bodies\n"
    "body [name]\n"
    "camera\n"
    "cScaling\n"
    "gravityScaling\n"
    "isPaused\n"
    "targetFramerate\n"
    "tickSpeed\n"
    "timeScaling\n"
    "input selection: "
)

_SET_CHOICES = (
    "choices:\n"
    "body [name]\n"
    "camera\n"
    "cScaling [value]\n"
    "gravityScaling [value]\n"
    "targetFramerate [value]\n"
    "tickSpeed [value]\n"
    "timeScaling [value]\n"
    "input selection: "
)

_BODY_PROPERTIES = (
    "properties:\n"
    "coordinates (x, y, z)\n"
    "directionalVelocities (xVel, yVel, zVel)\n"
    "velocity\n"
    "radius\n"
    "mass\n"
    "luminosity\n"
    "color (r, g, b)\n"
    "input selection: "
)

_CAMERA_PROPERTIES = (
    "properties:\n"
    "coordinates (x, y, z)\n"
    "angles (xVel, yVel, zVel)\n"
    "moveSpeed\n"
    "rotationSpeed\n"
    "sensitivity\n"
    "input selection: "
)


class CommandError(Exception):
    """Raised when a console command cannot be carried out."""


def split_arguments(text: str) -> list[str]:
    """Split a line on single spaces, stopping at the first line break.

    Consecutive spaces yield empty arguments; an empty line yields ``[""]``.
    """
    line = re.split(r"[\r\n]", text, maxsplit=1)[0]
    return line.split(" ")


def _parse_float(text: str) -> float:
    """Read the leading number of ``text``, ignoring anything after it."""
    match = _NUMBER.match(text)
    if match is None:
        raise CommandError("Failed conversion.")
    return float(match.group(1))


def _count_error(found: int, expected: int, expected_high: int | None = None) -> CommandError:
    if expected_high is None:
        wanted = str(expected)
    else:
        wanted = f"{expected} to {expected_high}"
    return CommandError(f"Invalid argument count. Found: {found}, Expected: {wanted}")


def _expect_count(args: Sequence[str], expected: int) -> None:
    if len(args) != expected:
        raise _count_error(len(args), expected)


def _fmt(value: float) -> str:
    return f"{value:g}"


class Console:
    """Reads commands from a text stream and applies them to a universe and window."""

    def __init__(
        self,
        universe: Universe,
        window: Window,
        stdin: TextIO | None = None,
        stdout: TextIO | None = None,
    ) -> None:
        self.universe = universe
        self.window = window
        self._in = stdin if stdin is not None else sys.stdin
        self._out = stdout if stdout is not None else sys.stdout
        self.quit_event = threading.Event()
        self._commands: dict[str, Callable[[Sequence[str]], None]] = {
            "help": self._help,
            "add": self._add,
            "clear": self._clear,
            "get": self._get,
            "lock": self._lock,
            "pause": self._pause,
            "quit": self._quit,
            "remove": self._remove,
            "resume": self._resume,
            "unpause": self._resume,
            "set": self._set,
            "unlock": self._unlock,
        }

    # I/O helpers

    def _write(self, text: str) -> None:
        self._out.write(text)
        self._out.flush()

    def _prompt(self, text: str) -> str:
        self._write(text)
        return self._in.readline().rstrip("\r\n")

    def _prompt_floats(self, text: str, count: int, scale: float = 1.0) -> list[float]:
        values = split_arguments(self._prompt(text))
        _expect_count(values, count)
        return [_parse_float(value) * scale for value in values]

    # command dispatch

    def run_command(self, args: Sequence[str]) -> None:
        """Carry out one command; raises CommandError with the reason on failure."""
        if not args:
            raise CommandError("command not recognized")
        handler = self._commands.get(args[0])
        if handler is None:
            raise CommandError("command not recognized")
        handler(args)

    def _help(self, args: Sequence[str]) -> None:
        _expect_count(args, 1)
        self._write(_HELP)

    def _add(self, args: Sequence[str]) -> None:
        _expect_count(args, 1)
        try:
            self.add_body()
        except CommandError as err:
            raise CommandError(f"{err}\nAborting command.") from err

    def _clear(self, args: Sequence[str]) -> None:
        _expect_count(args, 1)
        self.universe.clear_bodies()

    def _get(self, args: Sequence[str]) -> None:
        if len(args) > 3:
            raise _count_error(len(args), 1, 3)
        try:
            self.get(args)
        except CommandError as err:
            raise CommandError(f"{err}\nAborting command.") from err

    def _lock(self, args: Sequence[str]) -> None:
        _expect_count(args, 2)
        body = self.universe.bodies.get(args[1])
        if body is None:
            raise CommandError("Cannot lock camera to this body")
        try:
            self.window.lock_camera(args[1], body)
        except ValueError as err:
            raise CommandError("Cannot lock camera to this body") from err
        self._write("locked\n")

    def _pause(self, args: Sequence[str]) -> None:
        _expect_count(args, 1)
        self._write("paused\n" if self.universe.pause() else "already paused\n")

    def _quit(self, args: Sequence[str]) -> None:
        _expect_count(args, 1)
        self.quit_event.set()

    def _remove(self, args: Sequence[str]) -> None:
        _expect_count(args, 2)
        try:
            self.universe.remove_body(args[1])
        except SimulationError:
            pass

    def _resume(self, args: Sequence[str]) -> None:
        _expect_count(args, 1)
        self._write("resumed\n" if self.universe.unpause() else "already running\n")

    def _set(self, args: Sequence[str]) -> None:
        if len(args) > 7:
            raise _count_error(len(args), 1, 6)
        try:
            self.set(args)
        except CommandError as err:
            raise CommandError(f"{err}\naborting command") from err

    def _unlock(self, args: Sequence[str]) -> None:
        _expect_count(args, 1)
        try:
            self.window.unlock_camera()
        except ValueError as err:
            raise CommandError("camera not locked") from err
        self._write("camera unlocked\n")

    # add

    def add_body(self) -> Body:
        """Prompt for every property of a new body and add it to the universe."""
        name = self._prompt("Enter body name: ")
        x, y, z = self._prompt_floats("Enter x, y, and z coordinates: ", 3, SCALE)
        x_vel, y_vel, z_vel = self._prompt_floats(
            "Enter x, y, and z velocities: ", 3, SCALE
        )
        radius = _parse_float(self._prompt("Enter radius: ")) * SCALE * RADIUS_SCALE
        mass = _parse_float(self._prompt("Enter mass: ")) * SCALE
        luminosity = _parse_float(self._prompt("Enter luminosity (0.0 to 1.0): "))
        if not 0.0 <= luminosity <= 1.0:
            raise CommandError("Out of range.")
        red, green, blue = self._prompt_floats("Enter rgb values (0.0 to 1.0): ", 3)
        if not all(0.0 <= channel <= 1.0 for channel in (red, green, blue)):
            raise CommandError("Out of range.")

        body = Body(
            name=name,
            x=x,
            y=y,
            z=z,
            x_vel=x_vel,
            y_vel=y_vel,
            z_vel=z_vel,
            radius=radius,
            mass=mass,
            luminosity=luminosity,
            red=red,
            green=green,
            blue=blue,
        )
        try:
            added = self.universe.add_body(body)
        except SimulationError as err:
            raise CommandError(str(err)) from err
        if added:
            self._write(f"Added body: {name}\n")
        else:
            self._write(f"Body already exists: {name}\n")
        return body

    # get

    def get(self, args: Sequence[str]) -> None:
        """Print a body, the camera or a setting, prompting for what is missing."""
        selection = list(args)
        if len(selection) == 1:
            selection.extend(split_arguments(self._prompt(_GET_CHOICES)))
        key = selection[1]
        universe = self.universe

        if key == "bodies":
            self._write("".join(f"{name}\n" for name in universe.bodies))
        elif key == "body":
            _expect_count(selection, 3)
            body = universe.bodies.get(selection[2])
            if body is None:
                raise CommandError(f"no body named {selection[2]!r}")
            self._write_body(body)
        elif key == "camera":
            self._write_camera()
        elif key == "cScaling":
            self._write(f"cScaling = {_fmt(universe.c_scaling)}\n")
        elif key == "gravityScaling":
            self._write(f"gravityScaling = {_fmt(universe.gravity_scaling)}\n")
        elif key == "isPaused":
            self._write(f"isPaused = {int(universe.paused)}\n")
        elif key == "targetFramerate":
            self._write(f"targetFramerate = {_fmt(self.window.ticker.tick_speed)}\n")
        elif key == "tickSpeed":
            self._write(f"tickSpeed = {_fmt(universe.tick_speed)}\n")
        elif key == "timeScaling":
            self._write(f"timeScaling = {_fmt(universe.time_scaling)}\n")
        else:
            raise CommandError(f"unrecognized: {key}")

    def _write_body(self, body: Body) -> None:
        x_vel, y_vel, z_vel = (v / SCALE for v in (body.x_vel, body.y_vel, body.z_vel))
        self._write(
            f"Body: {body.name}\n"
            f"Coordinates: {_fmt(body.x / SCALE)} {_fmt(body.y / SCALE)} {_fmt(body.z / SCALE)}\n"
            f"Directional Velocities: {_fmt(x_vel)} {_fmt(y_vel)} {_fmt(z_vel)}\n"
            f"Velocity: {_fmt(math.sqrt(x_vel * x_vel + y_vel * y_vel + z_vel * z_vel))}\n"
            f"Radius: {_fmt(body.radius / SCALE / RADIUS_SCALE)}\n"
            f"Mass: {_fmt(body.mass / SCALE)}\n"
            f"Luminosity: {_fmt(body.luminosity)}\n"
            f"Color: {_fmt(body.red)} {_fmt(body.green)} {_fmt(body.blue)}\n"
        )

    def _write_camera(self) -> None:
        camera = self.window.camera
        text = (
            "Camera:\n"
            f"Coordinates: {_fmt(camera.x / SCALE)} {_fmt(camera.y / SCALE)} {_fmt(camera.z / SCALE)}\n"
            f"Angles: theta:{_fmt(camera.theta)} phi:{_fmt(camera.phi)} psi:{_fmt(camera.psi)}\n"
            f"Movement Speed: {_fmt(camera.speed / SCALE)}\n"
            f"Rotation Speed: {_fmt(camera.rotation_speed)}\n"
            f"Sensitivity: {_fmt(camera.sensitivity)}\n"
        )
        if camera.locked:
            text += (
                f"Locked Body: {camera.body_name}\n"
                f"Distance: {_fmt(camera.body_distance)}\n"
            )
        self._write(text)

    # set

    def set(self, args: Sequence[str]) -> None:
        """Change a body, the camera or a setting, prompting for what is missing."""
        selection = list(args)
        if len(selection) == 1:
            selection.extend(split_arguments(self._prompt(_SET_CHOICES)))
        key = selection[1]

        if key == "body":
            self._set_body(selection)
            return
        if key == "camera":
            self._set_camera(selection)
            return
        if len(selection) > 3:
            raise CommandError("too many arguments")

        text = self._prompt("input value: ") if len(selection) == 2 else selection[2]
        value = _parse_float(text)

        universe = self.universe
        try:
            if key == "cScaling":
                universe.c_scaling = value
            elif key == "gravityScaling":
                universe.gravity_scaling = value
            elif key == "targetFramerate":
                self.window.ticker.tick_speed = value
            elif key == "tickSpeed":
                universe.tick_speed = value
            elif key == "timeScaling":
                universe.time_scaling = value
            else:
                raise CommandError(f"unrecognized: {key}")
        except ValueError as err:
            raise CommandError(str(err)) from err

    def _set_body(self, selection: list[str]) -> None:
        if len(selection) == 2:
            selection.append(self._prompt("body name: "))
        body = self.universe.bodies.get(selection[2])
        if body is None:
            raise CommandError(f"no body named {selection[2]!r}")
        if len(selection) == 3:
            selection.append(self._prompt(_BODY_PROPERTIES))
        if len(selection) == 4:
            selection.extend(
                split_arguments(self._prompt("input value(s) (separate with spaces): "))
            )

        prop = selection[3]
        values = selection[4:]
        if prop == "coordinates":
            _expect_count(selection, 7)
            body.x, body.y, body.z = (_parse_float(v) * SCALE for v in values)
        elif prop == "directionalVelocities":
            _expect_count(selection, 7)
            body.x_vel, body.y_vel, body.z_vel = (_parse_float(v) * SCALE for v in values)
        elif prop == "velocity":
            _expect_count(selection, 5)
            velocity = _parse_float(values[0]) * SCALE
            current = math.sqrt(
                body.x_vel * body.x_vel + body.y_vel * body.y_vel + body.z_vel * body.z_vel
            )
            if current == 0.0:
                raise CommandError("cannot scale a body that is at rest")
            ratio = velocity / current
            body.x_vel *= ratio
            body.y_vel *= ratio
            body.z_vel *= ratio
        elif prop == "radius":
            _expect_count(selection, 5)
            body.radius = _parse_float(values[0]) * SCALE * RADIUS_SCALE
        elif prop == "mass":
            _expect_count(selection, 5)
            body.mass = _parse_float(values[0]) * SCALE
        elif prop == "luminosity":
            _expect_count(selection, 5)
            luminosity = _parse_float(values[0])
            if not 0.0 <= luminosity <= 1.0:
                raise CommandError("out of range")
            body.luminosity = luminosity
        elif prop == "color":
            _expect_count(selection, 7)
            red, green, blue = (_parse_float(v) for v in values)
            if not all(0.0 <= channel <= 1.0 for channel in (red, green, blue)):
                raise CommandError("out of range")
            body.red, body.green, body.blue = red, green, blue
        else:
            raise CommandError(f"unknown property: {prop}")

    def _set_camera(self, selection: list[str]) -> None:
        if len(selection) == 2:
            selection.append(self._prompt(_CAMERA_PROPERTIES))
        if len(selection) == 3:
            selection.extend(
                split_arguments(self._prompt("input value(s) (separate with spaces):"))
            )

        prop = selection[2]
        values = selection[3:]
        window = self.window
        try:
            if prop == "coordinates":
                _expect_count(selection, 6)
                x, y, z = (_parse_float(v) * SCALE for v in values)
                window.set_camera_position(x, y, z)
            elif prop == "angles":
                _expect_count(selection, 6)
                theta, phi, psi = (_parse_float(v) for v in values)
                window.set_camera_angle(theta, phi, psi)
            elif prop == "moveSpeed":
                _expect_count(selection, 4)
                window.camera_speed = _parse_float(values[0]) * SCALE
            elif prop == "rotationSpeed":
                _expect_count(selection, 4)
                window.camera_rotation_speed = _parse_float(values[0])
            elif prop == "sensitivity":
                _expect_count(selection, 4)
                window.camera_sensitivity = _parse_float(values[0])
            else:
                raise CommandError(f"unknown property: {prop}")
        except ValueError as err:
            raise CommandError(str(err)) from err

    # loop

    def _input_ready(self, timeout: float) -> bool:
        try:
            fd = self._in.fileno()
        except (AttributeError, OSError, ValueError):
            return True
        try:
            ready, _, _ = select.select([fd], [], [], timeout)
        except (OSError, ValueError):
            return True
        return bool(ready)

    def run(self, stop: threading.Event) -> None:
        """Read and run commands until ``stop`` is set, quit is entered or input ends."""
        while not stop.is_set() and not self.quit_event.is_set():
            if not self._input_ready(_POLL_INTERVAL):
                continue
            line = self._in.readline()
            if line == "":
                break
            try:
                self.run_command(split_arguments(line))
            except CommandError as err:
                self._write(f"{err}\n")
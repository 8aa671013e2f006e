"""Entry point: physics thread, console thread and the interactive viewer."""

from __future__ import annotations

import argparse
import math
import os
import threading
import time
from collections.abc import Sequence

os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")

import pygame  # noqa: E402

from .body import Body  # noqa: E402
from .console import Console  # noqa: E402
from .ticker import Ticker  # noqa: E402
from .universe import Universe  # noqa: E402
from .values import (  # noqa: E402
    C,
    EARTH_DISTANCE,
    EARTH_MASS,
    EARTH_RADIUS,
    EARTH_VELOCITY,
    JUPITER_DISTANCE,
    JUPITER_MASS,
    JUPITER_RADIUS,
    JUPITER_VELOCITY,
    MARS_DISTANCE,
    MARS_MASS,
    MARS_RADIUS,
    MARS_VELOCITY,
    MERCURY_DISTANCE,
    MERCURY_MASS,
    MERCURY_RADIUS,
    MERCURY_VELOCITY,
    MOON_DISTANCE,
    MOON_MASS,
    MOON_RADIUS,
    MOON_VELOCITY,
    NEPTUNE_DISTANCE,
    NEPTUNE_MASS,
    NEPTUNE_RADIUS,
    NEPTUNE_VELOCITY,
    RADIUS_SCALE,
    SATURN_DISTANCE,
    SATURN_MASS,
    SATURN_RADIUS,
    SATURN_VELOCITY,
    SCALE,
    SQRT2O2,
    SUN_DISTANCE,
    SUN_MASS,
    SUN_RADIUS,
    SUN_VELOCITY,
    URANUS_DISTANCE,
    URANUS_MASS,
    URANUS_RADIUS,
    URANUS_VELOCITY,
    VENUS_DISTANCE,
    VENUS_MASS,
    VENUS_RADIUS,
    VENUS_VELOCITY,
)
from .window import Frame, Window  # noqa: E402

_PHYSICS_TICK_SPEED = 100.0
_INPUT_TICK_SPEED = 100.0
_RENDER_TICK_SPEED = 60.0
_PLANET_LUMINOSITY = 0.2
_MIN_W = 0.1

# name, radius, mass, distance, velocity, colour
_PLANETS = (
    ("mercury", MERCURY_RADIUS, MERCURY_MASS, MERCURY_DISTANCE, MERCURY_VELOCITY, (0.8, 0.8, 0.8)),
    ("venus", VENUS_RADIUS, VENUS_MASS, VENUS_DISTANCE, VENUS_VELOCITY, (0.82, 0.57, 0.21)),
    ("earth", EARTH_RADIUS, EARTH_MASS, EARTH_DISTANCE, EARTH_VELOCITY, (0.2, 0.24, 0.55)),
    (
        "luna",
        MOON_RADIUS,
        MOON_MASS,
        EARTH_DISTANCE + MOON_DISTANCE,
        EARTH_VELOCITY + MOON_VELOCITY,
        (0.8, 0.8, 0.8),
    ),
    ("mars", MARS_RADIUS, MARS_MASS, MARS_DISTANCE, MARS_VELOCITY, (0.82, 0.54, 0.39)),
    ("jupiter", JUPITER_RADIUS, JUPITER_MASS, JUPITER_DISTANCE, JUPITER_VELOCITY, (0.67, 0.52, 0.42)),
    ("saturn", SATURN_RADIUS, SATURN_MASS, SATURN_DISTANCE, SATURN_VELOCITY, (0.93, 0.74, 0.51)),
    ("uranus", URANUS_RADIUS, URANUS_MASS, URANUS_DISTANCE, URANUS_VELOCITY, (0.85, 0.99, 0.99)),
    ("neptune", NEPTUNE_RADIUS, NEPTUNE_MASS, NEPTUNE_DISTANCE, NEPTUNE_VELOCITY, (0.27, 0.44, 0.99)),
)


def spawn_solar_system(
    universe: Universe,
    scale_value: float,
    radius_scale: float,
    sun_radius_scale: float,
) -> None:
    """Add the Sun, the planets and the Moon, lined up along the negative x axis.

    Distances and velocities are multiplied by ``scale_value`` and masses by
    its cube, so gravity behaves as at full scale.
    """
    universe.c_scaling = scale_value
    mass_scaling = scale_value**3
    universe.add_body(
        Body(
            name="sol",
            radius=SUN_RADIUS * scale_value * radius_scale * sun_radius_scale,
            mass=SUN_MASS * mass_scaling,
            x=-SUN_DISTANCE * scale_value,
            y_vel=SUN_VELOCITY * scale_value,
            luminosity=1.0,
        )
    )
    for name, radius, mass, distance, velocity, (red, green, blue) in _PLANETS:
        universe.add_body(
            Body(
                name=name,
                radius=radius * scale_value * radius_scale,
                mass=mass * mass_scaling,
                x=-distance * scale_value,
                y_vel=velocity * scale_value,
                luminosity=_PLANET_LUMINOSITY,
                red=red,
                green=green,
                blue=blue,
            )
        )


def physics_loop(universe: Universe, stop: threading.Event) -> None:
    """Tick the universe at a fixed rate until ``stop`` is set."""
    universe.tick_speed = _PHYSICS_TICK_SPEED
    ticker = universe.ticker
    while True:
        ticker.tick_start()
        if not universe.paused:
            universe.calculate_tick()
        if stop.is_set():
            break
        ticker.tick_end_and_sleep()


class Controls:
    """Keyboard and mouse state that steers the camera."""

    def __init__(self) -> None:
        self.keys: set[int] = set()
        self.mouse_captured = False

    def key_down(self, key: int) -> None:
        """Record a pressed key; Escape releases the mouse."""
        self.keys.add(key)
        if key == pygame.K_ESCAPE:
            self.mouse_captured = False

    def key_up(self, key: int) -> None:
        """Record a released key."""
        self.keys.discard(key)

    def mouse_wheel(self, window: Window, y: float) -> None:
        """Scrolling down halves the camera speed, anything else doubles it."""
        if y < 0:
            window.camera_speed = window.camera_speed / 2.0
        else:
            window.camera_speed = window.camera_speed * 2.0

    def mouse_motion(self, window: Window, xrel: float, yrel: float) -> None:
        """Turn the camera by mouse movement while the mouse is captured."""
        if not self.mouse_captured:
            return
        sensitivity = window.camera_sensitivity
        window.change_camera_angle(-xrel * sensitivity, yrel * sensitivity, 0.0)

    def apply(self, window: Window, tick_speed: float) -> None:
        """Move and turn the camera for one tick of held keys."""
        tick_move = window.camera_speed / tick_speed
        tick_rotate = window.camera_rotation_speed / tick_speed
        locked = window.camera_locked
        sideways = pygame.K_a in self.keys or pygame.K_d in self.keys
        lengthways = pygame.K_w in self.keys or pygame.K_s in self.keys
        along = SQRT2O2 * tick_move if sideways else tick_move
        across = SQRT2O2 * tick_move if lengthways else tick_move

        for key in self.keys:
            if key == pygame.K_w:
                if locked:
                    window.change_camera_body_distance(-tick_move)
                else:
                    window.move_camera(along, 0.0, 0.0)
            elif key == pygame.K_s:
                if locked:
                    window.change_camera_body_distance(tick_move)
                else:
                    window.move_camera(-along, 0.0, 0.0)
            elif key == pygame.K_a:
                if not locked:
                    window.move_camera(0.0, -across, 0.0)
            elif key == pygame.K_d:
                if not locked:
                    window.move_camera(0.0, across, 0.0)
            elif key == pygame.K_SPACE:
                if not locked:
                    window.move_camera(0.0, 0.0, tick_move)
            elif key == pygame.K_LCTRL:
                if not locked:
                    window.move_camera(0.0, 0.0, -tick_move)
            elif key == pygame.K_UP:
                window.change_camera_angle(0.0, -tick_rotate, 0.0)
            elif key == pygame.K_DOWN:
                window.change_camera_angle(0.0, tick_rotate, 0.0)
            elif key == pygame.K_LEFT:
                window.change_camera_angle(tick_rotate, 0.0, 0.0)
            elif key == pygame.K_RIGHT:
                window.change_camera_angle(-tick_rotate, 0.0, 0.0)


def _matmul(a, b):
    return tuple(
        tuple(sum(a[i][k] * b[k][j] for k in range(4)) for j in range(4))
        for i in range(4)
    )


def _shade(vertex, light) -> tuple[float, float, float]:
    x, y, z = vertex[0:3]
    lx, ly, lz = light[0] - x, light[1] - y, light[2] - z
    length = math.sqrt(lx * lx + ly * ly + lz * lz)
    nx, ny, nz = vertex[9:12]
    diffuse = (nx * lx + ny * ly + nz * lz) / length if length > 0.0 else 0.0
    brightness = max(vertex[8], min(1.0, diffuse))
    return (vertex[3] * brightness, vertex[4] * brightness, vertex[5] * brightness)


def render_frame(surface: pygame.Surface, window: Window, universe: Universe) -> Frame:
    """Draw the current view of ``universe`` onto ``surface`` and return the frame."""
    frame = window.build_frame(universe)
    surface.fill((0, 0, 0))
    width, height = surface.get_size()
    matrix = _matmul(frame.projection, frame.view)

    projected = []
    for vertex in frame.vertices:
        x, y, z = vertex[0:3]
        clip = [row[0] * x + row[1] * y + row[2] * z + row[3] for row in matrix]
        w = clip[3]
        if w <= _MIN_W:
            projected.append(None)
            continue
        sx = (clip[0] / w + 1.0) * 0.5 * width
        sy = (1.0 - clip[1] / w) * 0.5 * height
        projected.append((sx, sy, w, _shade(vertex, frame.light_position)))

    visible = []
    for a, b, c in frame.triangles:
        corners = (projected[a], projected[b], projected[c])
        if any(corner is None for corner in corners):
            continue
        xs = [corner[0] for corner in corners]
        ys = [corner[1] for corner in corners]
        if max(xs) < 0 or min(xs) > width or max(ys) < 0 or min(ys) > height:
            continue
        depth = sum(corner[2] for corner in corners) / 3.0
        color = tuple(
            max(0, min(255, int(sum(corner[3][i] for corner in corners) / 3.0 * 255)))
            for i in range(3)
        )
        visible.append((depth, [(corner[0], corner[1]) for corner in corners], color))

    visible.sort(key=lambda item: item[0], reverse=True)
    for _, points, color in visible:
        pygame.draw.polygon(surface, color, points)
    return frame


def _handle_events(controls: Controls, window: Window) -> bool:
    """Process pending events; returns False when the window is closed."""
    running = True
    for event in pygame.event.get():
        if event.type == pygame.QUIT:
            print("main called quit")
            running = False
        elif event.type == pygame.KEYDOWN:
            controls.key_down(event.key)
        elif event.type == pygame.KEYUP:
            controls.key_up(event.key)
        elif event.type == pygame.MOUSEMOTION:
            controls.mouse_motion(window, event.rel[0], event.rel[1])
        elif event.type == pygame.MOUSEBUTTONDOWN and event.button in (1, 2, 3):
            controls.mouse_captured = True
        elif event.type == pygame.MOUSEWHEEL:
            controls.mouse_wheel(window, event.y)
    pygame.event.set_grab(controls.mouse_captured)
    pygame.mouse.set_visible(not controls.mouse_captured)
    return running


def main(argv: Sequence[str] | None = None) -> int:
    """Open the viewer, start the physics and console threads and run until quit."""
    parser = argparse.ArgumentParser(
        prog="gravsim", description="Interactive N-body gravity simulator."
    )
    parser.parse_args(argv)

    universe = Universe()
    window = Window()
    window.ticker.tick_speed = _RENDER_TICK_SPEED
    ticker = Ticker(_INPUT_TICK_SPEED)

    pygame.init()
    try:
        pygame.display.set_mode(
            (window.horizontal_resolution, window.vertical_resolution)
        )
    except pygame.error as err:
        print(f"failed to create window: {err}")
        pygame.quit()
        return -1
    pygame.display.set_caption("gravity-simulator")

    window.set_camera_position(-100.0, -100.0, 0.0)
    universe.time_scaling = 86400 * 7
    universe.gravity_scaling = 1
    spawn_solar_system(universe, SCALE, RADIUS_SCALE, 0.1)
    window.camera_speed = C * SCALE * 1000
    window.camera_rotation_speed = 120.0
    window.camera_sensitivity = 0.1

    stop = threading.Event()
    console = Console(universe, window)
    physics = threading.Thread(target=physics_loop, args=(universe, stop), daemon=True)
    console_thread = threading.Thread(target=console.run, args=(stop,), daemon=True)
    physics.start()
    console_thread.start()

    controls = Controls()
    last_render = 0.0
    try:
        while True:
            ticker.tick_start()
            if not _handle_events(controls, window):
                break
            controls.apply(window, ticker.tick_speed)
            now = time.perf_counter()
            if now - last_render >= 1.0 / window.ticker.tick_speed:
                render_frame(pygame.display.get_surface(), window, universe)
                pygame.display.flip()
                last_render = now
            if console.quit_event.is_set():
                print("console called quit")
                break
            ticker.tick_end_and_sleep()
    finally:
        stop.set()
        physics.join()
        console_thread.join(timeout=1.0)
        pygame.quit()
    return 0
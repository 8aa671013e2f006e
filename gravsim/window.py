"""Camera control and frame geometry for viewing a universe."""

from __future__ import annotations

import dataclasses
import math
import threading
from dataclasses import dataclass, field

from .body import Body
from .camera import Camera
from .ticker import Ticker
from .universe import Universe

Vector = tuple[float, float, float]
Matrix = tuple[tuple[float, ...], ...]

_STACKS = 45
_SECTORS = 45
_NEAR_PLANE = 0.1
_FAR_PLANE = 1000.0
_UP: Vector = (0.0, 0.0, 1.0)


def _sub(a: Vector, b: Vector) -> Vector:
    return (a[0] - b[0], a[1] - b[1], a[2] - b[2])


def _dot(a: Vector, b: Vector) -> float:
    return a[0] * b[0] + a[1] * b[1] + a[2] * b[2]


def _cross(a: Vector, b: Vector) -> Vector:
    return (
        a[1] * b[2] - a[2] * b[1],
        a[2] * b[0] - a[0] * b[2],
        a[0] * b[1] - a[1] * b[0],
    )


def _normalize(v: Vector) -> Vector:
    length = math.sqrt(_dot(v, v))
    if length == 0.0:
        return (math.nan, math.nan, math.nan)
    return (v[0] / length, v[1] / length, v[2] / length)


def angle_to_vector(theta: float, phi: float, psi: float = 0.0) -> Vector:
    """Unit direction for horizontal angle ``theta`` and polar angle ``phi`` (degrees).

    ``psi`` (spin) does not change the direction.
    """
    r_theta = math.radians(theta)
    r_phi = math.radians(phi)
    return (
        math.cos(r_theta) * math.sin(r_phi),
        math.sin(r_theta) * math.sin(r_phi),
        math.cos(r_phi),
    )


def sphere_mesh(
    body: Body, index_offset: int = 0
) -> tuple[list[tuple[float, ...]], list[tuple[int, int, int]]]:
    """Build a UV-sphere for ``body``.

    Each vertex is a 12-tuple: position (3), colour (3), texture (2),
    minimum brightness (1) and normal (3). The poles carry the inverted
    colour. Triangle indices are shifted by ``index_offset``.
    """
    stack_angle = 180.0 / _STACKS
    sector_angle = 360.0 / _SECTORS
    radius = body.radius
    color = (body.red, body.green, body.blue)
    inverted = (1.0 - body.red, 1.0 - body.green, 1.0 - body.blue)
    extra = (0.0, 0.0, body.luminosity)

    vertices: list[tuple[float, ...]] = [
        (body.x, body.y, body.z + radius, *inverted, *extra, 0.0, 0.0, 1.0)
    ]
    for stack in range(1, _STACKS):
        polar = math.radians(stack * stack_angle)
        dzn = math.cos(polar)
        ring = math.sin(polar)
        for sector in range(_SECTORS):
            azimuth = math.radians(sector * sector_angle + body.theta)
            dxn = ring * math.cos(azimuth)
            dyn = ring * math.sin(azimuth)
            vertices.append(
                (
                    body.x + radius * dxn,
                    body.y + radius * dyn,
                    body.z + radius * dzn,
                    *color,
                    *extra,
                    dxn,
                    dyn,
                    dzn,
                )
            )
    vertices.append(
        (body.x, body.y, body.z - radius, *inverted, *extra, 0.0, 0.0, -1.0)
    )

    sectors = range(1, _SECTORS + 1)
    triangles: list[tuple[int, int, int]] = [
        (0, j, j % _SECTORS + 1) for j in sectors
    ]
    for ring_index in range(_STACKS - 1):
        row = _SECTORS * ring_index
        if ring_index > 0:
            triangles.extend(
                (j + row, j % _SECTORS + 1 + row, j % _SECTORS + 1 + row - _SECTORS)
                for j in sectors
            )
        if ring_index < _STACKS - 2:
            triangles.extend(
                (j + row, j % _SECTORS + 1 + row, j + _SECTORS + row)
                for j in sectors
            )
    start = (_STACKS - 2) * _SECTORS + 1
    end = (_STACKS - 1) * _SECTORS
    triangles.extend(
        (end + 1, j, start + j % _SECTORS) for j in range(start, end + 1)
    )

    if index_offset:
        triangles = [
            (a + index_offset, b + index_offset, c + index_offset)
            for a, b, c in triangles
        ]
    return vertices, triangles


def look_at(eye: Vector, center: Vector, up: Vector) -> Matrix:
    """Right-handed view matrix, row-major, for column vectors."""
    f = _normalize(_sub(center, eye))
    s = _normalize(_cross(f, up))
    u = _cross(s, f)
    return (
        (s[0], s[1], s[2], -_dot(s, eye)),
        (u[0], u[1], u[2], -_dot(u, eye)),
        (-f[0], -f[1], -f[2], _dot(f, eye)),
        (0.0, 0.0, 0.0, 1.0),
    )


def perspective(fov: float, aspect: float, near: float, far: float) -> Matrix:
    """Right-handed perspective projection to depth -1..1, row-major.

    ``fov`` is the vertical field of view in radians.
    """
    if aspect == 0.0:
        raise ValueError("aspect ratio must not be zero")
    if near == far:
        raise ValueError("near and far planes must differ")
    tan_half = math.tan(fov / 2.0)
    if tan_half == 0.0:
        raise ValueError("field of view must not be zero")
    depth = far - near
    return (
        (1.0 / (aspect * tan_half), 0.0, 0.0, 0.0),
        (0.0, 1.0 / tan_half, 0.0, 0.0),
        (0.0, 0.0, -(far + near) / depth, -(2.0 * far * near) / depth),
        (0.0, 0.0, -1.0, 0.0),
    )


@dataclass
class Frame:
    """Everything needed to draw one view of the universe."""

    vertices: list[tuple[float, ...]] = field(default_factory=list)
    triangles: list[tuple[int, int, int]] = field(default_factory=list)
    light_position: Vector = (0.0, 0.0, 0.0)
    camera_position: Vector = (0.0, 0.0, 0.0)
    camera_front: Vector = (1.0, 0.0, 0.0)
    view: Matrix = ()
    projection: Matrix = ()


class Window:
    """Holds the camera and turns a universe into frame geometry."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._camera = Camera()
        self.horizontal_resolution = 1600
        self.vertical_resolution = 900
        self.fov = 75.0
        self.ticker = Ticker()

    @property
    def camera(self) -> Camera:
        """A snapshot of the camera state."""
        with self._lock:
            return dataclasses.replace(self._camera)

    @property
    def camera_locked(self) -> bool:
        """Whether the camera follows a body."""
        return self._camera.locked

    @property
    def camera_speed(self) -> float:
        """Movement speed in m/s."""
        return self._camera.speed

    @camera_speed.setter
    def camera_speed(self, value: float) -> None:
        if value < 0.0:
            raise ValueError(f"camera speed must not be negative, got {value}")
        with self._lock:
            self._camera.speed = float(value)

    @property
    def camera_rotation_speed(self) -> float:
        """Rotation speed in degrees/s."""
        return self._camera.rotation_speed

    @camera_rotation_speed.setter
    def camera_rotation_speed(self, value: float) -> None:
        if value < 0.0:
            raise ValueError(f"rotation speed must not be negative, got {value}")
        with self._lock:
            self._camera.rotation_speed = float(value)

    @property
    def camera_sensitivity(self) -> float:
        """Mouse sensitivity in degrees per pixel."""
        return self._camera.sensitivity

    @camera_sensitivity.setter
    def camera_sensitivity(self, value: float) -> None:
        if value < 0.0:
            raise ValueError(f"sensitivity must not be negative, got {value}")
        with self._lock:
            self._camera.sensitivity = float(value)

    def set_camera_position(self, x: float, y: float, z: float) -> None:
        """Place the camera."""
        with self._lock:
            self._camera.x, self._camera.y, self._camera.z = x, y, z

    def set_camera_angle(self, theta: float, phi: float, psi: float) -> None:
        """Orient the camera; each angle is wrapped into (-360, 360)."""
        with self._lock:
            self._camera.theta = math.fmod(theta, 360.0)
            self._camera.phi = math.fmod(phi, 360.0)
            self._camera.psi = math.fmod(psi, 360.0)

    def change_camera_position(self, x: float, y: float, z: float) -> None:
        """Shift the camera along the world axes."""
        with self._lock:
            self._camera.x += x
            self._camera.y += y
            self._camera.z += z

    def change_camera_angle(self, theta: float, phi: float, psi: float) -> None:
        """Turn the camera; the polar angle stays within (0, 180)."""
        with self._lock:
            camera = self._camera
            camera.theta = math.fmod(camera.theta + theta, 360.0)
            new_phi = camera.phi + phi
            if new_phi > 180:
                camera.phi = 179.9
            elif new_phi < 0:
                camera.phi = 0.1
            else:
                camera.phi = new_phi
            camera.psi = math.fmod(camera.psi + psi, 360.0)

    def move_camera(self, forward: float, right: float, up: float) -> None:
        """Move relative to the camera's horizontal heading."""
        with self._lock:
            heading = math.radians(self._camera.theta)
            cos_h = math.cos(heading)
            sin_h = math.sin(heading)
            self._camera.x += forward * cos_h + right * sin_h
            self._camera.y += forward * sin_h - right * cos_h
            self._camera.z += up

    def lock_camera(self, body_name: str, body: Body | None = None) -> None:
        """Follow the named body, five radii away when ``body`` is given."""
        if body_name == "":
            raise ValueError("body name must not be empty")
        with self._lock:
            self._camera.body_name = body_name
            if body is not None:
                self._camera.body_distance = body.radius * 5

    def unlock_camera(self) -> None:
        """Stop following a body."""
        with self._lock:
            if not self._camera.locked:
                raise ValueError("camera not locked")
            self._camera.body_name = ""

    def set_camera_body_distance(self, distance: float) -> None:
        """Set the distance kept from a followed body."""
        if distance < 0:
            raise ValueError(f"distance must not be negative, got {distance}")
        with self._lock:
            self._camera.body_distance = distance

    def change_camera_body_distance(self, forward: float) -> None:
        """Change the follow distance, never below zero."""
        with self._lock:
            self._camera.body_distance = max(
                0.0, self._camera.body_distance + forward
            )

    def build_frame(self, universe: Universe) -> Frame:
        """Gather meshes, lighting and matrices for the current view.

        A followed body moves the camera to trail it along the view direction.
        """
        bodies = universe.bodies
        with self._lock:
            camera = self._camera
            front = angle_to_vector(camera.theta, camera.phi, camera.psi)
            position: Vector = (camera.x, camera.y, camera.z)
            light: Vector = (0.0, 0.0, 0.0)
            vertices: list[tuple[float, ...]] = []
            triangles: list[tuple[int, int, int]] = []
            for name, body in bodies.items():
                mesh_vertices, mesh_triangles = sphere_mesh(body, len(vertices))
                vertices.extend(mesh_vertices)
                triangles.extend(mesh_triangles)
                if body.luminosity == 1.0:
                    light = (body.x, body.y, body.z)
                if name == camera.body_name:
                    distance = camera.body_distance
                    position = (
                        body.x - front[0] * distance,
                        body.y - front[1] * distance,
                        body.z - front[2] * distance,
                    )
                    camera.x, camera.y, camera.z = position

        center = (position[0] + front[0], position[1] + front[1], position[2] + front[2])
        view = look_at(position, center, _UP)
        projection = perspective(
            math.radians(self.fov),
            self.horizontal_resolution / self.vertical_resolution,
            _NEAR_PLANE,
            _FAR_PLANE,
        )
        return Frame(
            vertices=vertices,
            triangles=triangles,
            light_position=light,
            camera_position=position,
            camera_front=front,
            view=view,
            projection=projection,
        )
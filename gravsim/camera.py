"""The viewer's camera state."""

from dataclasses import dataclass


@dataclass
class Camera:
    """Position in m, angles in degrees, speeds in m/s and degrees/s."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    theta: float = 90.0
    phi: float = 90.0
    psi: float = 0.0
    speed: float = 1.0
    rotation_speed: float = 1.0
    sensitivity: float = 1.0
    body_name: str = ""
    body_distance: float = 0.0

    @property
    def locked(self) -> bool:
        """Whether the camera follows a body."""
        return self.body_name != ""
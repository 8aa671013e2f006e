"""A massive, spherical body in the simulated universe."""

from dataclasses import dataclass


@dataclass
class Body:
    """Position in m, velocities in m/s, angles in degrees, radius in m, mass in kg."""

    name: str = ""
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    x_vel: float = 0.0
    y_vel: float = 0.0
    z_vel: float = 0.0
    theta: float = 0.0
    phi: float = 0.0
    psi: float = 0.0
    theta_vel: float = 0.0
    phi_vel: float = 0.0
    psi_vel: float = 0.0
    radius: float = 0.0
    mass: float = 0.0
    luminosity: float = 0.1
    red: float = 1.0
    green: float = 1.0
    blue: float = 1.0
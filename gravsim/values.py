"""Physical constants, simulation scales and solar-system reference data (SI units)."""

# Simulation scales
SCALE = 1e-9
RADIUS_SCALE = 100.0

# Fundamental constants
C = 299792458.0
E = 2.7182818285
G = 6.6743e-11
STANDARD_GRAVITY = 9.80665
PI = 3.1415926536
SQRT2 = 1.41421356237

G2OC2 = 2 * G / (C * C)
SQRT2O2 = 0.70710678118

# Sun
SUN_RADIUS = 695700000.0
SUN_MASS = 1.9885e30
SUN_DISTANCE = 0.0
SUN_VELOCITY = 0.0

# Mercury
MERCURY_RADIUS = 2439.7e3
MERCURY_MASS = 3.3011e23
MERCURY_DISTANCE = 57.91e9
MERCURY_VELOCITY = 47.36e3

# Venus
VENUS_RADIUS = 6051800.0
VENUS_MASS = 4.8675e24
VENUS_DISTANCE = 108.21e9
VENUS_VELOCITY = 35.02e3

# Earth
EARTH_RADIUS = 6371.0e3
EARTH_MASS = 5.972168e24
EARTH_DISTANCE = 149.598023e9
EARTH_VELOCITY = 29.7827e3

# Moon (distance and velocity relative to the Earth)
MOON_RADIUS = 1737.4e3
MOON_MASS = 7.346e22
MOON_DISTANCE = 384399.0e3
MOON_VELOCITY = 1.022e3

# Mars
MARS_RADIUS = 3389.5e3
MARS_MASS = 6.4171e23
MARS_DISTANCE = 227.939366e9
MARS_VELOCITY = 24.07e3

# Jupiter
JUPITER_RADIUS = 69911.0e3
JUPITER_MASS = 1.8982e27
JUPITER_DISTANCE = 778.479e9
JUPITER_VELOCITY = 13.06e3

# Saturn
SATURN_RADIUS = 58232.0e3
SATURN_MASS = 5.6834e26
SATURN_DISTANCE = 1433.53e9
SATURN_VELOCITY = 9.68e3

# Uranus
URANUS_RADIUS = 25362.0e3
URANUS_MASS = 8.681e25
URANUS_DISTANCE = 2870.972e9
URANUS_VELOCITY = 6.8e3

# Neptune
NEPTUNE_RADIUS = 24622.0e3
NEPTUNE_MASS = 1.02409e26
NEPTUNE_DISTANCE = 4.5e12
NEPTUNE_VELOCITY = 5.43e3
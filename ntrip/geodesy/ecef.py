"""Geodetic <-> ECEF conversion on the WGS84 ellipsoid.

Geodetic coordinates are (latitude, longitude) in decimal degrees plus the
height above the ellipsoid in metres. ECEF (Earth-Centered, Earth-Fixed)
coordinates are Cartesian X/Y/Z in metres with the origin at the Earth's
centre, Z through the north pole and X through the prime meridian.

The inverse transform uses Bowring's closed-form approximation rather than an
iterative solution. For points near the Earth's surface it agrees with the
exact solution to well below a millimetre.
"""

import math

# --- WGS84 ellipsoid ------------------------------------------------------------

SEMI_MAJOR_AXIS = 6378137.0  # a, metres
FLATTENING = 1.0 / 298.257223563  # f
SEMI_MINOR_AXIS = SEMI_MAJOR_AXIS * (1.0 - FLATTENING)  # b, metres

_A_SQUARED = SEMI_MAJOR_AXIS**2
_B_SQUARED = SEMI_MINOR_AXIS**2

# First and second eccentricity, squared
_E_SQUARED = (_A_SQUARED - _B_SQUARED) / _A_SQUARED
_E_PRIME_SQUARED = (_A_SQUARED - _B_SQUARED) / _B_SQUARED


def _prime_vertical_radius(latitude_radians: float) -> float:
    """Radius of curvature in the prime vertical, N(latitude)."""
    sin_latitude = math.sin(latitude_radians)
    return SEMI_MAJOR_AXIS / math.sqrt(1.0 - _E_SQUARED * sin_latitude * sin_latitude)


def geodetic_to_ecef(
    latitude: float,
    longitude: float,
    altitude: float = 0.0,
) -> tuple[float, float, float]:
    """Convert WGS84 geodetic coordinates to ECEF.

    Args:
        latitude: Latitude in decimal degrees, positive north.
        longitude: Longitude in decimal degrees, positive east.
        altitude: Height above the ellipsoid in metres.

    Returns:
        ``(x, y, z)`` in metres.

    Example:
        >>> geodetic_to_ecef(0.0, 0.0, 0.0)
        (6378137.0, 0.0, 0.0)
    """
    phi = math.radians(latitude)
    lam = math.radians(longitude)
    n = _prime_vertical_radius(phi)

    x = (n + altitude) * math.cos(phi) * math.cos(lam)
    y = (n + altitude) * math.cos(phi) * math.sin(lam)
    z = (_B_SQUARED / _A_SQUARED * n + altitude) * math.sin(phi)
    return x, y, z


def ecef_to_geodetic(x: float, y: float, z: float) -> tuple[float, float, float]:
    """Convert ECEF coordinates to WGS84 geodetic coordinates.

    ``atan(y / x)`` only covers half a circle, so the longitude is moved into
    the correct quadrant from the signs of ``x`` and ``y``.

    Inputs on the Z axis (``x == 0``) are degenerate and are not guarded:
    the division raises ``ZeroDivisionError``. Callers must pass a real
    position.

    Args:
        x: ECEF X in metres.
        y: ECEF Y in metres.
        z: ECEF Z in metres.

    Returns:
        ``(latitude, longitude, altitude)`` with angles in decimal degrees
        and altitude in metres above the ellipsoid.
    """
    p = math.sqrt(x * x + y * y)
    theta = math.atan(z * SEMI_MAJOR_AXIS / (p * SEMI_MINOR_AXIS))
    sin_theta = math.sin(theta)
    cos_theta = math.cos(theta)

    numerator = z + _E_PRIME_SQUARED * SEMI_MINOR_AXIS * sin_theta**3
    denominator = p - _E_SQUARED * SEMI_MAJOR_AXIS * cos_theta**3
    phi = math.atan(numerator / denominator)

    lam = math.atan(y / x)
    if x < 0 and y < 0:
        lam -= math.pi
    if x < 0 and y > 0:
        lam += math.pi

    altitude = p / math.cos(phi) - _prime_vertical_radius(phi)
    return math.degrees(phi), math.degrees(lam), altitude

"""WGS84 geodetic and ECEF coordinate transforms."""

from ntrip.geodesy.ecef import ecef_to_geodetic, geodetic_to_ecef

__all__ = ["ecef_to_geodetic", "geodetic_to_ecef"]

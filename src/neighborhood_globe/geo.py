"""Globe geometry: lat/lon projection and airport cluster layout."""

from __future__ import annotations

import math

import numpy as np

from neighborhood_globe.models import Vec3

GLOBE_RADIUS = 1.0
MARKER_RADIUS = 1.001  # just above the globe texture
OUTLINE_RADIUS = 1.008
CLUSTER_SPREAD = 0.01

_WORLD_X = np.array([1.0, 0.0, 0.0])
_WORLD_Z = np.array([0.0, 0.0, 1.0])


def project(lat: float, lon: float, radius: float = MARKER_RADIUS) -> Vec3:
    """Convert latitude/longitude in degrees to a point on a sphere.

    Uses the polar angle phi = 90 - lat and azimuth theta = lon + 180, which
    lines longitude 0 up with the seam of an equirectangular earth texture.
    Out-of-range input is not clamped.
    """
    phi = math.radians(90 - lat)
    theta = math.radians(lon + 180)
    return (
        -radius * math.sin(phi) * math.cos(theta),
        radius * math.cos(phi),
        radius * math.sin(phi) * math.sin(theta),
    )


def _tangent_frame(normal: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    """Orthonormal (u, v) spanning the tangent plane at *normal*.

    u follows world X and v follows world Z wherever those project cleanly,
    so at the poles this is the plain x/z plane.
    """
    u = _WORLD_X - normal * np.dot(_WORLD_X, normal)
    if np.linalg.norm(u) < 1e-6:
        u = _WORLD_Z - normal * np.dot(_WORLD_Z, normal)
    u = u / np.linalg.norm(u)
    v = np.cross(u, normal)
    return u, v


def offset_position(
    base: Vec3,
    index: int,
    total: int,
    spread: float = CLUSTER_SPREAD,
) -> Vec3:
    """Position of member *index* of a cluster of *total* around *base*.

    Members sit evenly on a circle of radius *spread* in the tangent plane
    at *base*, then are pulled back onto the unit sphere.
    """
    if total <= 1:
        return base

    pos = np.asarray(base, dtype=np.float64)
    length = np.linalg.norm(pos)
    if length == 0.0 or not np.isfinite(length):
        raise ValueError(f"Cannot offset around degenerate base position {base!r}")

    normal = pos / length
    u, v = _tangent_frame(normal)
    angle = (index / total) * 2 * math.pi
    offset = math.cos(angle) * spread * u + math.sin(angle) * spread * v

    final = pos + offset
    final = final / np.linalg.norm(final)
    return (float(final[0]), float(final[1]), float(final[2]))


def offset_positions(
    base: Vec3,
    count: int,
    spread: float = CLUSTER_SPREAD,
) -> list[Vec3]:
    """Lay out *count* non-overlapping positions around *base*."""
    if count <= 1:
        return [base]
    return [offset_position(base, i, count, spread) for i in range(count)]


def angular_distance(a: Vec3, b: Vec3) -> float:
    """Angle in radians between two position vectors."""
    va = np.asarray(a, dtype=np.float64)
    vb = np.asarray(b, dtype=np.float64)
    cos_angle = np.dot(va, vb) / (np.linalg.norm(va) * np.linalg.norm(vb))
    return float(np.arccos(np.clip(cos_angle, -1.0, 1.0)))


def unproject(position: Vec3) -> tuple[float, float]:
    """Inverse of project(): (lat, lon) in degrees of a position vector."""
    x, y, z = position
    r = math.sqrt(x * x + y * y + z * z)
    if r == 0.0:
        raise ValueError("Cannot unproject the origin")
    lat = 90.0 - math.degrees(math.acos(max(-1.0, min(1.0, y / r))))
    lon = math.degrees(math.atan2(z, -x)) - 180.0
    if lon < -180.0:
        lon += 360.0
    return lat, lon

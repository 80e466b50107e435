"""
Finger geometry: per-finger curl and direction from 3D hand joints.
"""
import math
from typing import Any, List, Sequence

import numpy as np

from .templates import Curl
from .types import Finger, FingerGeometry, HandGeometry, Joint, Vector

# Cumulative turning angle of a finger chain at which curl saturates at 1.
# 180 degrees means the tip segment points back along the base segment.
MAX_FLEXION_DEG = 180.0

_EPS = 1e-9
_ZERO: Vector = (0.0, 0.0, 0.0)

# Image-plane direction names, y grows downward.
_DIRECTION_NAMES = [
    ("Horizontal Right", 0.0),
    ("Diagonal Down Right", 45.0),
    ("Vertical Down", 90.0),
    ("Diagonal Down Left", 135.0),
    ("Horizontal Left", 180.0),
    ("Diagonal Up Left", 225.0),
    ("Vertical Up", 270.0),
    ("Diagonal Up Right", 315.0),
]


def _as_array(points: Sequence[Any]) -> np.ndarray:
    return np.array([Joint.from_any(p).as_tuple() for p in points], dtype=float)


def _unit_segments(chain: np.ndarray) -> List[np.ndarray]:
    """Unit vectors of consecutive segments, skipping zero-length ones."""
    segments = []
    for seg in np.diff(chain, axis=0):
        length = np.linalg.norm(seg)
        if length > _EPS:
            segments.append(seg / length)
    return segments


def finger_curl(points: Sequence[Any]) -> float:
    """
    Curl of a finger joint chain in [0, 1].

    Sums the angles between consecutive segments (the chain's total turning)
    and maps it linearly onto [0, MAX_FLEXION_DEG], clamped.

    Args:
        points: Joints of one finger, base to tip

    Returns:
        0.0 for a straight chain, 1.0 for a chain folded back on itself
    """
    segments = _unit_segments(_as_array(points)) if len(points) >= 2 else []
    total = 0.0
    for a, b in zip(segments, segments[1:]):
        cosine = float(np.clip(np.dot(a, b), -1.0, 1.0))
        total += math.degrees(math.acos(cosine))
    return min(1.0, max(0.0, total / MAX_FLEXION_DEG))


def finger_direction(points: Sequence[Any]) -> Vector:
    """
    Unit vector from the base joint to the tip joint.

    Falls back to the mean of the segment directions when base and tip
    coincide, and to the zero vector when every segment is degenerate.
    """
    if len(points) < 2:
        return _ZERO
    chain = _as_array(points)
    vec = chain[-1] - chain[0]
    norm = np.linalg.norm(vec)
    if norm <= _EPS:
        segments = _unit_segments(chain)
        if not segments:
            return _ZERO
        vec = np.mean(segments, axis=0)
        norm = np.linalg.norm(vec)
        if norm <= _EPS:
            return _ZERO
    unit = vec / norm
    return (float(unit[0]), float(unit[1]), float(unit[2]))


def extract_geometry(joints: Sequence[Any]) -> HandGeometry:
    """
    Compute curl and direction for all five fingers of one hand.

    Args:
        joints: 21 hand joints in MediaPipe order. Entries may be Joint,
            landmark objects, mappings or sequences. Missing joints are
            treated as coincident with the origin.

    Returns:
        Mapping from Finger to FingerGeometry
    """
    coerced = [Joint.from_any(j) for j in joints]
    geometry: HandGeometry = {}
    for finger in Finger:
        chain = [coerced[i] if i < len(coerced) else Joint(0.0, 0.0) for i in finger.joints]
        geometry[finger] = FingerGeometry(
            curl=finger_curl(chain),
            direction=finger_direction(chain),
        )
    return geometry


def angle_between(a: Vector, b: Vector) -> float:
    """Angle in degrees between two vectors, 180 if either is zero."""
    va, vb = np.asarray(a, dtype=float), np.asarray(b, dtype=float)
    na, nb = np.linalg.norm(va), np.linalg.norm(vb)
    if na <= _EPS or nb <= _EPS:
        return 180.0
    cosine = float(np.clip(np.dot(va, vb) / (na * nb), -1.0, 1.0))
    return math.degrees(math.acos(cosine))


def describe_direction(direction: Vector) -> str:
    """Nearest of the eight named image-plane directions."""
    dx, dy = direction[0], direction[1]
    if math.hypot(dx, dy) <= _EPS:
        return "None"
    heading = math.degrees(math.atan2(dy, dx)) % 360.0
    name, _ = min(
        _DIRECTION_NAMES,
        key=lambda item: min(abs(heading - item[1]), 360.0 - abs(heading - item[1])),
    )
    return name


def describe_curl(curl: float) -> str:
    """Nearest named curl range, e.g. "Half Curl"."""
    def distance(named: Curl) -> float:
        return max(named.low - curl, 0.0, curl - named.high)

    nearest = min(Curl, key=distance)
    return nearest.name.replace("_", " ").title()

"""
Type definitions for hand gesture recognition system.
"""
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Protocol, Tuple, runtime_checkable


Vector = Tuple[float, float, float]

WRIST = 0


class Finger(Enum):
    """The five fingers, each mapped to its base..tip joint indices."""
    THUMB = (1, 2, 3, 4)
    INDEX = (5, 6, 7, 8)
    MIDDLE = (9, 10, 11, 12)
    RING = (13, 14, 15, 16)
    PINKY = (17, 18, 19, 20)

    @property
    def joints(self) -> Tuple[int, int, int, int]:
        return self.value

    @property
    def label(self) -> str:
        return self.name.lower()

    @classmethod
    def parse(cls, name: str) -> "Finger":
        try:
            return cls[name.strip().upper()]
        except KeyError:
            raise ValueError(f"Unknown finger: {name!r}") from None


NUM_JOINTS = 21


class Handedness(Enum):
    """Left or right hand classification."""
    LEFT = "left"
    RIGHT = "right"

    @classmethod
    def parse(cls, label: str) -> "Handedness":
        """Map a detector label such as "Left" or "right" to the enum."""
        try:
            return cls(label.strip().lower())
        except ValueError:
            raise ValueError(f"Unknown handedness: {label!r}") from None


def _coord(value: Any) -> float:
    try:
        result = float(value)
    except (TypeError, ValueError):
        return 0.0
    return result if math.isfinite(result) else 0.0


@dataclass(frozen=True)
class Joint:
    """A 3D point in model space. z is 0 when the source has no depth."""
    x: float
    y: float
    z: float = 0.0

    @classmethod
    def from_any(cls, entry: Any) -> "Joint":
        """
        Coerce a landmark-like entry into a Joint.

        Accepts objects with x/y[/z] attributes, mappings with "x"/"y"[/"z"]
        keys, or sequences of two or three numbers. A None entry, and any
        coordinate that is missing, None, non-numeric or not finite,
        becomes 0.
        """
        if isinstance(entry, Joint):
            return entry
        if entry is None:
            return cls(0.0, 0.0)
        if isinstance(entry, Mapping):
            x, y, z = entry.get("x", 0.0), entry.get("y", 0.0), entry.get("z")
        elif hasattr(entry, "x") and hasattr(entry, "y"):
            x, y, z = entry.x, entry.y, getattr(entry, "z", None)
        elif isinstance(entry, (list, tuple)) and len(entry) >= 2:
            x, y = entry[0], entry[1]
            z = entry[2] if len(entry) >= 3 else None
        else:
            raise ValueError(f"Unsupported landmark format: {entry!r}")
        return cls(_coord(x), _coord(y), _coord(z))

    def as_tuple(self) -> Vector:
        return (self.x, self.y, self.z)


@dataclass
class HandObservation:
    """One detected hand in one frame."""
    handedness: Handedness
    joints: Tuple[Joint, ...]
    keypoints: Tuple[Tuple[float, float], ...] = ()  # image pixels, for drawing
    score: Optional[float] = None


@dataclass(frozen=True)
class FingerGeometry:
    """Curl (0 = straight, 1 = folded back) and unit direction of one finger."""
    curl: float
    direction: Vector


HandGeometry = Dict[Finger, FingerGeometry]


@dataclass(frozen=True)
class MatchResult:
    """Score of one gesture template against one hand."""
    name: str
    score: float


@dataclass
class HandEstimate:
    """Everything computed for one hand in one frame."""
    handedness: Handedness
    geometry: HandGeometry
    matches: List[MatchResult] = field(default_factory=list)
    best: Optional[MatchResult] = None


@runtime_checkable
class FrameSource(Protocol):
    """Supplies video frames."""

    async def read(self) -> Any:
        """Return the next frame."""
        ...


@runtime_checkable
class LandmarkSource(Protocol):
    """Per-frame hand landmark estimation."""

    async def estimate(self, frame: Any, flip_horizontal: bool = True) -> List[HandObservation]:
        """Return one observation per detected hand (possibly none)."""
        ...


@runtime_checkable
class GestureDisplay(Protocol):
    """Abstract protocol for surfaces that show recognition results."""

    def clear(self) -> None:
        """Clear the overlay and both gesture regions."""
        ...

    def draw_point(self, x: float, y: float, radius: int, color: str) -> None:
        """Draw one joint."""
        ...

    def show_gesture(self, handedness: Handedness, name: Optional[str]) -> None:
        """Show the chosen gesture for a hand, or clear it when None."""
        ...

    def show_debug(self, handedness: Handedness, geometry: HandGeometry) -> None:
        """Show per-finger curl and direction values."""
        ...

    def render(self, frame: Any) -> bool:
        """Present the frame. Returns False when the user asked to quit."""
        ...

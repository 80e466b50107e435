"""
Gesture templates: named per-finger curl and direction constraints.

Templates are immutable records built once at startup, either from the
built-in defaults or from the ``gestures`` section of the config file.
"""
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from .errors import TemplateError
from .types import Finger, Vector


class Curl(Enum):
    """Named curl ranges (low, high) on the [0, 1] curl scale."""
    NO_CURL = (0.0, 0.15)
    HALF_CURL = (0.35, 0.65)
    FULL_CURL = (0.85, 1.0)

    @property
    def low(self) -> float:
        return self.value[0]

    @property
    def high(self) -> float:
        return self.value[1]


class Direction(Enum):
    """Named unit directions in image space (y grows downward)."""
    VERTICAL_UP = (0.0, -1.0, 0.0)
    VERTICAL_DOWN = (0.0, 1.0, 0.0)
    HORIZONTAL_LEFT = (-1.0, 0.0, 0.0)
    HORIZONTAL_RIGHT = (1.0, 0.0, 0.0)
    DIAGONAL_UP_LEFT = (-math.sqrt(0.5), -math.sqrt(0.5), 0.0)
    DIAGONAL_UP_RIGHT = (math.sqrt(0.5), -math.sqrt(0.5), 0.0)
    DIAGONAL_DOWN_LEFT = (-math.sqrt(0.5), math.sqrt(0.5), 0.0)
    DIAGONAL_DOWN_RIGHT = (math.sqrt(0.5), math.sqrt(0.5), 0.0)

    @property
    def vector(self) -> Vector:
        return self.value


DEFAULT_CURL_FALLOFF = 0.25
DEFAULT_DIRECTION_TOLERANCE = 45.0


@dataclass(frozen=True)
class CurlOption:
    """One acceptable curl range and how much a hit on it is worth."""
    low: float
    high: float
    weight: float = 1.0

    def __post_init__(self):
        if not (0.0 <= self.low <= self.high <= 1.0):
            raise TemplateError(f"Invalid curl range: {self.low}..{self.high}")
        _check_weight(self.weight)

    @classmethod
    def named(cls, curl: Curl, weight: float = 1.0) -> "CurlOption":
        return cls(curl.low, curl.high, weight)


@dataclass(frozen=True)
class CurlConstraint:
    """
    Acceptable curl for one finger.

    Closeness to an option is 1 inside its range and falls linearly to 0 at
    ``falloff`` outside it. The finger's sub-score is the best
    ``weight * closeness`` over all options.
    """
    options: Tuple[CurlOption, ...]
    falloff: float = DEFAULT_CURL_FALLOFF

    def __post_init__(self):
        if not self.options:
            raise TemplateError("Curl constraint needs at least one option")
        if self.falloff <= 0.0:
            raise TemplateError(f"Curl falloff must be positive, got {self.falloff}")


@dataclass(frozen=True)
class DirectionConstraint:
    """
    Acceptable pointing direction for one finger.

    Closeness is 1 within ``tolerance_deg`` of the target and falls linearly
    to 0 at twice the tolerance.
    """
    target: Vector
    tolerance_deg: float = DEFAULT_DIRECTION_TOLERANCE
    weight: float = 1.0

    def __post_init__(self):
        if not (0.0 < self.tolerance_deg <= 180.0):
            raise TemplateError(f"Direction tolerance must be in (0, 180], got {self.tolerance_deg}")
        if math.sqrt(sum(c * c for c in self.target)) <= 1e-9:
            raise TemplateError("Direction target must be a non-zero vector")
        _check_weight(self.weight)


@dataclass(frozen=True)
class FingerCriteria:
    """Constraints declared for one finger. Either part may be absent."""
    curl: Optional[CurlConstraint] = None
    direction: Optional[DirectionConstraint] = None


@dataclass(frozen=True)
class GestureTemplate:
    """A named hand pose."""
    name: str
    criteria: Tuple[Tuple[Finger, FingerCriteria], ...] = field(default_factory=tuple)

    def __post_init__(self):
        if not self.name:
            raise TemplateError("Gesture template needs a name")
        if self.constraint_count == 0:
            raise TemplateError(f"Gesture template {self.name!r} declares no constraints")

    @property
    def constraint_count(self) -> int:
        return sum(
            (c.curl is not None) + (c.direction is not None) for _, c in self.criteria
        )


def _check_weight(weight: float) -> None:
    if not (0.0 < weight <= 1.0):
        raise TemplateError(f"Weight must be in (0, 1], got {weight}")


def gesture(name: str, **fingers: FingerCriteria) -> GestureTemplate:
    """Build a template from keyword finger criteria, e.g. ``index=...``."""
    criteria = []
    for finger_name, crit in fingers.items():
        try:
            finger = Finger.parse(finger_name)
        except ValueError as e:
            raise TemplateError(str(e)) from None
        criteria.append((finger, crit))
    return GestureTemplate(name=name, criteria=tuple(criteria))


def curl(*curls: Curl, falloff: float = DEFAULT_CURL_FALLOFF) -> CurlConstraint:
    return CurlConstraint(tuple(CurlOption.named(c) for c in curls), falloff)


_FULL = FingerCriteria(curl=curl(Curl.FULL_CURL))

DEFAULT_TEMPLATES: Tuple[GestureTemplate, ...] = (
    gesture(
        "index_pointer",
        index=FingerCriteria(curl=curl(Curl.NO_CURL)),
        middle=_FULL,
        ring=_FULL,
        pinky=_FULL,
    ),
    gesture(
        "index_click",
        index=FingerCriteria(curl=curl(Curl.HALF_CURL)),
        middle=_FULL,
        ring=_FULL,
        pinky=_FULL,
    ),
)


# --- config parsing ---

def _parse_curl_option(spec: Any) -> CurlOption:
    if isinstance(spec, str):
        return CurlOption.named(_lookup(Curl, spec))
    if isinstance(spec, Mapping):
        weight = float(spec.get("weight", 1.0))
        if "range" in spec:
            low, high = spec["range"]
            return CurlOption(float(low), float(high), weight)
        if "curl" in spec:
            return CurlOption.named(_lookup(Curl, spec["curl"]), weight)
    raise TemplateError(f"Invalid curl option: {spec!r}")


def _parse_direction(spec: Any) -> DirectionConstraint:
    if isinstance(spec, str):
        return DirectionConstraint(_lookup(Direction, spec).vector)
    if isinstance(spec, Mapping) and "target" in spec:
        target = spec["target"]
        if isinstance(target, str):
            vector = _lookup(Direction, target).vector
        else:
            values = [float(v) for v in target]
            vector = tuple((values + [0.0, 0.0, 0.0])[:3])
        return DirectionConstraint(
            target=vector,
            tolerance_deg=float(spec.get("tolerance", DEFAULT_DIRECTION_TOLERANCE)),
            weight=float(spec.get("weight", 1.0)),
        )
    raise TemplateError(f"Invalid direction constraint: {spec!r}")


def _lookup(enum_cls, name: str):
    try:
        return enum_cls[str(name).strip().upper()]
    except KeyError:
        raise TemplateError(f"Unknown {enum_cls.__name__.lower()} name: {name!r}") from None


def _parse_finger(spec: Mapping[str, Any]) -> FingerCriteria:
    curl_spec = spec.get("curl")
    curl_constraint = None
    if curl_spec is not None:
        raw = curl_spec if isinstance(curl_spec, list) else [curl_spec]
        curl_constraint = CurlConstraint(
            tuple(_parse_curl_option(o) for o in raw),
            float(spec.get("curl_falloff", DEFAULT_CURL_FALLOFF)),
        )
    dir_spec = spec.get("direction")
    direction = _parse_direction(dir_spec) if dir_spec is not None else None
    return FingerCriteria(curl=curl_constraint, direction=direction)


def build_templates(entries: Iterable[Mapping[str, Any]]) -> Tuple[GestureTemplate, ...]:
    """
    Build templates from config declarations.

    Each entry looks like::

        name: index_pointer
        fingers:
          index: {curl: no_curl, direction: vertical_up}
          middle: {curl: full_curl}

    Returns:
        Templates in declaration order
    """
    templates: List[GestureTemplate] = []
    seen: Dict[str, int] = {}
    for entry in entries:
        if not isinstance(entry, Mapping) or "name" not in entry:
            raise TemplateError(f"Gesture entry needs a name: {entry!r}")
        name = str(entry["name"])
        if name in seen:
            raise TemplateError(f"Duplicate gesture name: {name!r}")
        seen[name] = len(templates)
        fingers = entry.get("fingers") or {}
        if not isinstance(fingers, Mapping):
            raise TemplateError(f"Gesture {name!r}: 'fingers' must be a mapping")
        criteria = []
        for finger_name, finger_spec in fingers.items():
            try:
                finger = Finger.parse(str(finger_name))
            except ValueError as e:
                raise TemplateError(f"Gesture {name!r}: {e}") from None
            criteria.append((finger, _parse_finger(finger_spec or {})))
        templates.append(GestureTemplate(name=name, criteria=tuple(criteria)))
    return tuple(templates)

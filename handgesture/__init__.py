"""
Hand Gesture Recognition System

Reads webcam frames, detects hand landmarks using MediaPipe, reduces each hand
to per-finger curl and direction, and matches it against gesture templates.
"""

__version__ = "0.1.0"

from .types import Finger, Handedness, Joint, HandObservation, FingerGeometry, MatchResult, GestureDisplay
from .config import load_config, Cfg
from .geometry import extract_geometry, finger_curl, finger_direction
from .templates import GestureTemplate, DEFAULT_TEMPLATES, build_templates
from .gestures import GestureEstimator, best_match, DEFAULT_THRESHOLD
from .display_mock import MockDisplay
from .loop import FrameLoop

__all__ = [
    "Finger",
    "Handedness",
    "Joint",
    "HandObservation",
    "FingerGeometry",
    "MatchResult",
    "GestureDisplay",
    "load_config",
    "Cfg",
    "extract_geometry",
    "finger_curl",
    "finger_direction",
    "GestureTemplate",
    "DEFAULT_TEMPLATES",
    "build_templates",
    "GestureEstimator",
    "best_match",
    "DEFAULT_THRESHOLD",
    "MockDisplay",
    "FrameLoop",
]

"""
Mock display implementation for testing the recognition loop.
"""
import logging
from typing import Any, Dict, List, Optional, Tuple

from .types import HandGeometry, Handedness

logger = logging.getLogger(__name__)


class MockDisplay:
    """Mock display that records and logs what it is asked to show."""

    def __init__(self):
        """Initialize the mock display."""
        self.gestures: Dict[Handedness, Optional[str]] = {h: None for h in Handedness}
        self.history: List[Tuple[Handedness, Optional[str]]] = []
        self.points: List[Tuple[float, float, int, str]] = []
        self.debug: Dict[Handedness, HandGeometry] = {}
        self.clear_count = 0
        self.render_count = 0

    def clear(self) -> None:
        """Clear both gesture regions and the point overlay."""
        self.clear_count += 1
        self.points.clear()
        for hand in Handedness:
            self.gestures[hand] = None

    def draw_point(self, x: float, y: float, radius: int, color: str) -> None:
        self.points.append((x, y, radius, color))

    def show_gesture(self, handedness: Handedness, name: Optional[str]) -> None:
        """Record the gesture shown for a hand."""
        self.gestures[handedness] = name
        self.history.append((handedness, name))
        if name is not None:
            logger.info(f"[MockDisplay] {handedness.value}: {name}")

    def show_debug(self, handedness: Handedness, geometry: HandGeometry) -> None:
        self.debug[handedness] = dict(geometry)

    def render(self, frame: Any) -> bool:
        self.render_count += 1
        return True


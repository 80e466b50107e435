"""
OpenCV overlay window showing landmarks and recognised gestures per hand.
"""
import logging
from typing import Any, Dict, Optional, Tuple

import cv2
import numpy as np

from .errors import DisplayError
from .geometry import describe_curl, describe_direction
from .types import Finger, HandGeometry, Handedness

logger = logging.getLogger(__name__)

# Named colors in BGR order.
COLORS_BGR: Dict[str, Tuple[int, int, int]] = {
    "red": (0, 0, 255),
    "blue": (255, 0, 0),
    "yellow": (0, 255, 255),
    "green": (0, 255, 0),
    "pink": (203, 192, 255),
    "white": (255, 255, 255),
}


class OpenCVDisplay:
    """
    Draws onto each frame and shows it in a window.

    Each handedness has its own text region and debug table, so left and
    right hands never overwrite each other.
    """

    def __init__(self, window_name: str, size: Tuple[int, int], show_debug: bool = False):
        """
        Initialize the display window.

        Args:
            window_name: Title of the OpenCV window
            size: (width, height) of the overlay
            show_debug: Draw per-finger curl/direction tables
        """
        self.window_name = window_name
        self.width, self.height = size
        self.show_debug_table = show_debug
        self._points = []
        self._gestures: Dict[Handedness, Optional[str]] = {h: None for h in Handedness}
        self._debug: Dict[Handedness, HandGeometry] = {}
        try:
            cv2.namedWindow(self.window_name, cv2.WINDOW_NORMAL)
            cv2.resizeWindow(self.window_name, self.width, self.height)
        except cv2.error as e:
            raise DisplayError(f"Cannot create window {window_name!r}: {e}") from e

    def clear(self) -> None:
        self._points = []
        self._gestures = {h: None for h in Handedness}
        self._debug = {}

    def draw_point(self, x: float, y: float, radius: int, color: str) -> None:
        self._points.append((int(x), int(y), radius, COLORS_BGR.get(color, COLORS_BGR["white"])))

    def show_gesture(self, handedness: Handedness, name: Optional[str]) -> None:
        self._gestures[handedness] = name

    def show_debug(self, handedness: Handedness, geometry: HandGeometry) -> None:
        self._debug[handedness] = geometry

    def render(self, frame: Any) -> bool:
        """Draw the overlay onto the frame and show it. False means quit."""
        if frame is None:
            frame = np.zeros((self.height, self.width, 3), dtype=np.uint8)
        for x, y, radius, color in self._points:
            cv2.circle(frame, (x, y), radius, color, -1)

        # Right hand region on the left of the mirrored view, left hand on the right
        regions = {Handedness.RIGHT: 10, Handedness.LEFT: frame.shape[1] // 2 + 10}
        for hand, x0 in regions.items():
            label = self._gestures.get(hand) or ""
            cv2.putText(frame, f"{hand.value}: {label}", (x0, 30),
                        cv2.FONT_HERSHEY_SIMPLEX, 0.7, (0, 255, 0) if label else (255, 255, 255), 2)
            if self.show_debug_table and hand in self._debug:
                self._draw_debug(frame, self._debug[hand], x0)

        cv2.putText(frame, "Press 'q' to quit", (10, frame.shape[0] - 20),
                    cv2.FONT_HERSHEY_SIMPLEX, 0.5, (255, 255, 255), 1)
        cv2.imshow(self.window_name, frame)
        return (cv2.waitKey(1) & 0xFF) != ord('q')

    def _draw_debug(self, frame: np.ndarray, geometry: HandGeometry, x0: int) -> None:
        for row, finger in enumerate(Finger):
            geo = geometry.get(finger)
            if geo is None:
                continue
            text = (f"{finger.label:<6} {describe_curl(geo.curl)} ({geo.curl:.2f}) "
                    f"{describe_direction(geo.direction)}")
            cv2.putText(frame, text, (x0, 60 + row * 18),
                        cv2.FONT_HERSHEY_SIMPLEX, 0.4, (255, 255, 255), 1)

    def close(self) -> None:
        cv2.destroyWindow(self.window_name)

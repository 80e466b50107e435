"""
Fixed-cadence recognition loop: frame -> landmarks -> geometry -> gesture -> display.
"""
import asyncio
import logging
from typing import List, Optional

from .gestures import DEFAULT_THRESHOLD, GestureEstimator
from .types import (
    WRIST,
    Finger,
    FrameSource,
    GestureDisplay,
    HandEstimate,
    HandObservation,
    LandmarkSource,
)

logger = logging.getLogger(__name__)

FINGER_COLORS = {
    Finger.THUMB: "red",
    Finger.INDEX: "blue",
    Finger.MIDDLE: "yellow",
    Finger.RING: "green",
    Finger.PINKY: "pink",
}
_JOINT_COLORS = {idx: FINGER_COLORS[f] for f in Finger for idx in f.joints}


def joint_color(index: int) -> str:
    """Color name for a joint index; the wrist and unknown joints are white."""
    if index == WRIST:
        return "white"
    return _JOINT_COLORS.get(index, "white")


class FrameLoop:
    """
    Runs one recognition cycle at a time on a fixed interval.

    Cycles never overlap. After a cycle completes the loop waits the full
    interval before the next one, so a slow cycle delays the next rather
    than skipping or queueing it. A failing frame or hand is logged and
    skipped; ``failures`` counts the cycles that hit one.
    """

    def __init__(self, frames: FrameSource, source: LandmarkSource, estimator: GestureEstimator,
                 display: GestureDisplay, fps: float, threshold: float = DEFAULT_THRESHOLD,
                 flip_horizontal: bool = True, show_landmarks: bool = True,
                 show_debug: bool = False, point_radius: int = 3):
        """Initialize the loop. Call start() to begin scheduling cycles."""
        if fps <= 0:
            raise ValueError(f"fps must be positive, got {fps}")
        self.frames = frames
        self.source = source
        self.estimator = estimator
        self.display = display
        self.interval = 1.0 / fps
        self.threshold = threshold
        self.flip_horizontal = flip_horizontal
        self.show_landmarks = show_landmarks
        self.show_debug = show_debug
        self.point_radius = point_radius

        self.cycles = 0
        self.failures = 0
        self.last_estimates: List[HandEstimate] = []
        self._task: Optional[asyncio.Task] = None
        self._stop_event: Optional[asyncio.Event] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> asyncio.Task:
        """Schedule the loop on the running event loop."""
        if self.running:
            raise RuntimeError("Frame loop already running")
        self._stop_event = asyncio.Event()
        self._task = asyncio.create_task(self._run(), name="frame-loop")
        logger.info(f"▶️  Starting predictions every {self.interval * 1000:.1f}ms")
        return self._task

    def stop(self) -> None:
        """
        Ask the loop to stop after the current cycle.

        An in-flight landmark call is not interrupted; the loop just does not
        schedule another cycle.
        """
        if self._stop_event is not None:
            self._stop_event.set()

    async def wait(self) -> None:
        """Wait until the loop has finished."""
        if self._task is not None:
            await self._task

    async def _run(self) -> None:
        while not self._stop_event.is_set():
            keep_going = await self.run_cycle()
            if not keep_going:
                logger.info("Display closed, stopping frame loop")
                break
            try:
                await asyncio.wait_for(self._stop_event.wait(), timeout=self.interval)
            except asyncio.TimeoutError:
                pass
        logger.info(f"⏹️  Frame loop stopped after {self.cycles} cycles ({self.failures} failed)")

    async def run_cycle(self) -> bool:
        """
        Run one complete cycle.

        Returns:
            False when the display asked to quit, True otherwise
        """
        self.cycles += 1
        self.display.clear()
        try:
            frame = await self.frames.read()
            hands = await self.source.estimate(frame, flip_horizontal=self.flip_horizontal)
        except Exception as e:
            self.failures += 1
            logger.warning(f"Frame {self.cycles} skipped: {e}", exc_info=True)
            self.last_estimates = []
            return True

        estimates = []
        failed = False
        for hand in hands:
            try:
                estimates.append(self._process_hand(hand))
            except Exception as e:
                failed = True
                logger.warning(f"Frame {self.cycles}: hand skipped: {e}", exc_info=True)
        self.last_estimates = estimates

        try:
            keep_going = self.display.render(frame)
        except Exception as e:
            failed = True
            keep_going = True
            logger.warning(f"Frame {self.cycles} not rendered: {e}", exc_info=True)
        if failed:
            self.failures += 1
        return keep_going

    def _process_hand(self, hand: HandObservation) -> HandEstimate:
        if self.show_landmarks:
            for idx, (x, y) in enumerate(hand.keypoints):
                self.display.draw_point(x, y, self.point_radius, joint_color(idx))

        estimate = self.estimator.estimate_hand(hand, self.threshold)
        name = estimate.best.name if estimate.best is not None else None
        self.display.show_gesture(hand.handedness, name)
        if self.show_debug:
            self.display.show_debug(hand.handedness, estimate.geometry)
        if name is not None:
            logger.debug(f"{hand.handedness.value}: {name} ({estimate.best.score:.3f})")
        return estimate

"""
Synthetic hands with controlled finger curl, for tests and camera-less demos.
"""
import asyncio
import itertools
import math
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

import numpy as np

from .types import Finger, Handedness, HandObservation, Joint, NUM_JOINTS

# Finger base offsets from the wrist for a right hand, palm facing the camera.
_BASES: Dict[Finger, Tuple[float, float]] = {
    Finger.THUMB: (-0.30, -0.15),
    Finger.INDEX: (-0.15, -0.50),
    Finger.MIDDLE: (0.00, -0.52),
    Finger.RING: (0.15, -0.50),
    Finger.PINKY: (0.30, -0.45),
}
SEGMENT_LENGTH = 0.15

OPEN_HAND = {finger: 0.0 for finger in Finger}
FIST = {finger: 1.0 for finger in Finger}
POINTER = {Finger.THUMB: 1.0, Finger.INDEX: 0.0, Finger.MIDDLE: 1.0, Finger.RING: 1.0, Finger.PINKY: 1.0}
CLICK = {**POINTER, Finger.INDEX: 0.5}


def _finger_chain(base: np.ndarray, curl: float) -> List[np.ndarray]:
    """Four joints starting straight up, turning curl * 180 degrees toward the palm."""
    total = math.radians(180.0 * curl)
    headings = (0.0, total / 2.0, total)
    chain = [base]
    for phi in headings:
        step = np.array([0.0, -math.cos(phi), -math.sin(phi)]) * SEGMENT_LENGTH
        chain.append(chain[-1] + step)
    return chain


def make_hand(
    curls: Mapping[Finger, float],
    handedness: Handedness = Handedness.RIGHT,
    scale: float = 1.0,
    origin: Sequence[float] = (0.0, 0.0, 0.0),
    frame_size: Tuple[int, int] = (640, 480),
) -> HandObservation:
    """
    Build a 21-joint hand with every finger pointing up in image space.

    Args:
        curls: Curl per finger in [0, 1]; fingers left out are straight
        handedness: Left hands are mirrored in x
        scale: Uniform scale applied to all joints
        origin: Wrist position
        frame_size: (width, height) used to place the 2D keypoints

    Returns:
        HandObservation with 3D joints and pixel keypoints
    """
    mirror = -1.0 if handedness is Handedness.LEFT else 1.0
    joints = [np.zeros(3)] * NUM_JOINTS
    for finger in Finger:
        bx, by = _BASES[finger]
        base = np.array([bx * mirror, by, 0.0])
        for idx, point in zip(finger.joints, _finger_chain(base, curls.get(finger, 0.0))):
            joints[idx] = point

    offset = np.asarray(origin, dtype=float)
    scaled = [p * scale + offset for p in joints]
    width, height = frame_size
    keypoints = tuple(
        (width / 2.0 + p[0] * height * 0.5, height * 0.85 + p[1] * height * 0.5)
        for p in joints
    )
    return HandObservation(
        handedness=handedness,
        joints=tuple(Joint(float(p[0]), float(p[1]), float(p[2])) for p in scaled),
        keypoints=keypoints,
    )


class SyntheticLandmarkSource:
    """
    Replays a fixed cycle of synthetic poses.

    Implements both FrameSource and LandmarkSource so the frame loop can run
    without a camera or a model.
    """

    def __init__(self, poses: Optional[Iterable[Sequence[Tuple[Handedness, Mapping[Finger, float]]]]] = None,
                 frame_size: Tuple[int, int] = (640, 480), frames_per_pose: int = 30):
        """Initialize the source with per-frame lists of (handedness, curls)."""
        if poses is None:
            poses = [
                [(Handedness.RIGHT, POINTER)],
                [(Handedness.RIGHT, CLICK), (Handedness.LEFT, POINTER)],
                [(Handedness.RIGHT, FIST)],
                [],
            ]
        self.poses = list(poses)
        self.frame_size = frame_size
        self.frames_per_pose = max(1, frames_per_pose)
        self._frames = itertools.count()
        self.calls = 0

    async def read(self) -> np.ndarray:
        width, height = self.frame_size
        return np.zeros((height, width, 3), dtype=np.uint8)

    async def estimate(self, frame, flip_horizontal: bool = True) -> List[HandObservation]:
        self.calls += 1
        await asyncio.sleep(0)
        if not self.poses:
            return []
        index = (next(self._frames) // self.frames_per_pose) % len(self.poses)
        return [
            make_hand(curls, handedness=handedness, frame_size=self.frame_size)
            for handedness, curls in self.poses[index]
        ]

"""
Hand landmark detection using MediaPipe, and camera capture.
"""
import asyncio
import logging
from typing import List, Optional

import cv2
import mediapipe as mp
import numpy as np

from .errors import CameraError
from .types import Handedness, HandObservation, Joint

logger = logging.getLogger(__name__)


class HandsTracker:
    """Hand landmark tracker using MediaPipe Hands."""

    def __init__(self, max_num_hands: int = 2, min_detection_conf: float = 0.6,
                 min_tracking_conf: float = 0.6, model_complexity: int = 1):
        """
        Initialize the hands tracker.

        Args:
            max_num_hands: Maximum number of hands to detect
            min_detection_conf: Minimum confidence for hand detection
            min_tracking_conf: Minimum confidence for hand tracking
            model_complexity: 0 (lite) or 1 (full) landmark model
        """
        self.mp_hands = mp.solutions.hands
        self.hands = self.mp_hands.Hands(
            static_image_mode=False,
            max_num_hands=max_num_hands,
            model_complexity=model_complexity,
            min_detection_confidence=min_detection_conf,
            min_tracking_confidence=min_tracking_conf
        )

    async def estimate(self, frame: np.ndarray, flip_horizontal: bool = True) -> List[HandObservation]:
        """
        Detect hands in a BGR frame.

        With flip_horizontal the frame is mirrored in place first, so the
        caller renders the same selfie view the keypoints refer to.

        Returns:
            One HandObservation per detected hand. Joints are the 3D world
            landmarks when MediaPipe provides them, otherwise the normalized
            image landmarks.
        """
        if flip_horizontal:
            frame[:] = cv2.flip(frame, 1)
        frame_rgb = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)

        # MediaPipe inference blocks; keep the event loop responsive
        results = await asyncio.to_thread(self.hands.process, frame_rgb)

        observations: List[HandObservation] = []
        if not results.multi_hand_landmarks:
            return observations

        height, width = frame.shape[:2]
        world = results.multi_hand_world_landmarks or []
        for i, hand_landmarks in enumerate(results.multi_hand_landmarks):
            classification = results.multi_handedness[i].classification[0]
            try:
                handedness = Handedness.parse(classification.label)
            except ValueError:
                logger.warning(f"Skipping hand with unknown handedness {classification.label!r}")
                continue

            source = world[i].landmark if i < len(world) else hand_landmarks.landmark
            observations.append(HandObservation(
                handedness=handedness,
                joints=tuple(Joint.from_any(lm) for lm in source),
                keypoints=tuple((lm.x * width, lm.y * height) for lm in hand_landmarks.landmark),
                score=float(classification.score),
            ))
        return observations

    def close(self) -> None:
        self.hands.close()


class CameraSource:
    """OpenCV webcam capture."""

    def __init__(self, index: int, width: int, height: int, fps: int):
        """Open the camera with the requested resolution and frame rate."""
        self.cap = cv2.VideoCapture(index)
        self.cap.set(cv2.CAP_PROP_FRAME_WIDTH, width)
        self.cap.set(cv2.CAP_PROP_FRAME_HEIGHT, height)
        self.cap.set(cv2.CAP_PROP_FPS, fps)

        if not self.cap.isOpened():
            raise CameraError(f"Failed to open camera {index}")
        logger.info(f"📷 Camera {index} opened at {width}x{height} @ {fps}fps")

    async def read(self) -> Optional[np.ndarray]:
        ok, frame = await asyncio.to_thread(self.cap.read)
        if not ok:
            raise CameraError("Failed to read frame from camera")
        return frame

    def release(self) -> None:
        if self.cap.isOpened():
            self.cap.release()

    def __del__(self):
        """Cleanup resources."""
        if hasattr(self, 'cap') and self.cap.isOpened():
            self.cap.release()

"""
Main application for hand gesture recognition.
"""
import argparse
import asyncio
import logging
import sys
from typing import Optional

from .config import load_config
from .display_mock import MockDisplay
from .errors import GestureError
from .gestures import GestureEstimator
from .loop import FrameLoop

logger = logging.getLogger(__name__)


class GestureRecognitionApp:
    """Main application class for hand gesture recognition."""

    def __init__(self, config_path: Optional[str] = None, synthetic: bool = False,
                 headless: bool = False, show_debug: Optional[bool] = None):
        """
        Initialize the application with configuration.

        Any failure here (bad config, camera unavailable, no display) is
        fatal: the frame loop is never started.
        """
        self.config = load_config(config_path)
        self.estimator = GestureEstimator(self.config.gestures)
        logger.info(f"✅ Loaded {len(self.estimator.templates)} gestures: "
                    f"{', '.join(t.name for t in self.estimator.templates)}")

        self.camera = None
        self.tracker = None
        self.display = None
        try:
            self._setup(synthetic, headless, show_debug)
        except Exception:
            self.close()
            raise

    def _setup(self, synthetic: bool, headless: bool, show_debug: Optional[bool]):
        cam = self.config.camera
        if synthetic:
            from .synthetic import SyntheticLandmarkSource
            source = SyntheticLandmarkSource(frame_size=(cam.width, cam.height), frames_per_pose=cam.fps)
            frames = source
            logger.info("🧪 Using synthetic hands, no camera")
        else:
            from .landmarks import CameraSource, HandsTracker
            mp_cfg = self.config.mediapipe
            self.camera = CameraSource(cam.index, cam.width, cam.height, cam.fps)
            self.tracker = HandsTracker(
                max_num_hands=mp_cfg.max_num_hands,
                min_detection_conf=mp_cfg.min_detection_confidence,
                min_tracking_conf=mp_cfg.min_tracking_confidence,
                model_complexity=mp_cfg.model_complexity
            )
            logger.info("✅ MediaPipe hands model loaded")
            source, frames = self.tracker, self.camera

        if show_debug is None:
            show_debug = self.config.display.show_debug
        if headless:
            self.display = MockDisplay()
        else:
            from .display import OpenCVDisplay
            self.display = OpenCVDisplay(self.config.display.window_name, (cam.width, cam.height),
                                         show_debug=show_debug)

        self.loop = FrameLoop(
            frames=frames,
            source=source,
            estimator=self.estimator,
            display=self.display,
            fps=cam.fps,
            threshold=self.config.recognition.threshold,
            flip_horizontal=self.config.recognition.flip_horizontal,
            show_landmarks=self.config.display.show_landmarks,
            show_debug=show_debug,
            point_radius=self.config.display.point_radius
        )

    async def run(self):
        """Run the frame loop until the window is closed or the task is cancelled."""
        logger.info(f"Starting {self.config.display.window_name}")
        self.loop.start()
        try:
            await self.loop.wait()
        finally:
            self.loop.stop()
            self.close()

    def close(self):
        """Cleanup resources."""
        if self.camera is not None:
            self.camera.release()
        if self.tracker is not None:
            self.tracker.close()
        if self.display is not None and hasattr(self.display, "close"):
            self.display.close()


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Webcam hand gesture recognition")
    parser.add_argument("--config", help="Path to a YAML config file (default: config.default.yaml)")
    parser.add_argument("--synthetic", action="store_true",
                        help="Replay synthetic hands instead of using the camera")
    parser.add_argument("--headless", action="store_true",
                        help="Log gestures instead of opening a window")
    parser.add_argument("--debug", action="store_true", help="Show per-finger curl/direction values")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log every match")
    return parser.parse_args(argv)


async def run_app(args: argparse.Namespace) -> int:
    try:
        app = GestureRecognitionApp(
            config_path=args.config,
            synthetic=args.synthetic,
            headless=args.headless,
            show_debug=True if args.debug else None
        )
    except (GestureError, FileNotFoundError) as e:
        logger.error(f"❌ Startup failed: {e}")
        return 1

    await app.run()
    return 0


def main(argv=None) -> int:
    """Entry point for the application."""
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )
    try:
        return asyncio.run(run_app(args))
    except KeyboardInterrupt:
        logger.info("Application interrupted by user")
        return 0


if __name__ == "__main__":
    sys.exit(main())

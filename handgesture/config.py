"""
Configuration management for hand gesture recognition system.
"""
import yaml
from pathlib import Path
from typing import Optional, Dict, Any, Tuple
from dataclasses import dataclass

from .errors import ConfigError
from .templates import DEFAULT_TEMPLATES, GestureTemplate, build_templates


@dataclass
class CameraConfig:
    """Camera configuration settings."""
    index: int
    width: int
    height: int
    fps: int


@dataclass
class MediaPipeConfig:
    """MediaPipe Hands configuration settings."""
    max_num_hands: int
    min_detection_confidence: float
    min_tracking_confidence: float
    model_complexity: int


@dataclass
class RecognitionConfig:
    """Gesture matching configuration."""
    threshold: float  # fraction of the maximum attainable score (1.0)
    flip_horizontal: bool


@dataclass
class DisplayConfig:
    """Display configuration settings."""
    show_landmarks: bool
    show_debug: bool
    point_radius: int
    window_name: str


@dataclass
class Cfg:
    """Main configuration class."""
    camera: CameraConfig
    mediapipe: MediaPipeConfig
    recognition: RecognitionConfig
    display: DisplayConfig
    gestures: Tuple[GestureTemplate, ...]

    @property
    def frame_interval(self) -> float:
        """Seconds between frame cycles."""
        return 1.0 / self.camera.fps


def load_config(path: Optional[str] = None) -> Cfg:
    """
    Load configuration from YAML file.

    Args:
        path: Path to config file. If None, uses config.default.yaml

    Returns:
        Configuration object with all settings
    """
    if path is None:
        # Use default config file in project root
        project_root = Path(__file__).parent.parent
        path = project_root / "config.default.yaml"

    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, 'r') as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Config file {config_path} must contain a mapping")
    return _dict_to_config(data)


def _dict_to_config(data: Dict[str, Any]) -> Cfg:
    """Convert dictionary to configuration object."""
    try:
        camera_data = data['camera']
        camera = CameraConfig(
            index=int(camera_data['index']),
            width=int(camera_data['width']),
            height=int(camera_data['height']),
            fps=int(camera_data['fps'])
        )

        mp_data = data['mediapipe']
        mediapipe = MediaPipeConfig(
            max_num_hands=int(mp_data['max_num_hands']),
            min_detection_confidence=float(mp_data['min_detection_confidence']),
            min_tracking_confidence=float(mp_data['min_tracking_confidence']),
            model_complexity=int(mp_data.get('model_complexity', 1))
        )

        rec_data = data['recognition']
        recognition = RecognitionConfig(
            threshold=float(rec_data['threshold']),
            flip_horizontal=bool(rec_data.get('flip_horizontal', True))
        )

        display_data = data['display']
        display = DisplayConfig(
            show_landmarks=bool(display_data['show_landmarks']),
            show_debug=bool(display_data.get('show_debug', False)),
            point_radius=int(display_data.get('point_radius', 3)),
            window_name=str(display_data['window_name'])
        )
    except KeyError as e:
        raise ConfigError(f"Missing config key: {e}") from e
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid config value: {e}") from e

    gesture_entries = data.get('gestures')
    gestures = build_templates(gesture_entries) if gesture_entries else DEFAULT_TEMPLATES

    cfg = Cfg(
        camera=camera,
        mediapipe=mediapipe,
        recognition=recognition,
        display=display,
        gestures=gestures
    )
    _validate(cfg)
    return cfg


def _validate(cfg: Cfg) -> None:
    if cfg.camera.fps <= 0:
        raise ConfigError(f"camera.fps must be positive, got {cfg.camera.fps}")
    if cfg.camera.width <= 0 or cfg.camera.height <= 0:
        raise ConfigError("camera.width and camera.height must be positive")
    if not (0.0 <= cfg.recognition.threshold <= 1.0):
        raise ConfigError(
            f"recognition.threshold is a fraction of the maximum score and must be in [0, 1], "
            f"got {cfg.recognition.threshold}"
        )
    if cfg.mediapipe.max_num_hands < 1:
        raise ConfigError("mediapipe.max_num_hands must be at least 1")
    if not cfg.gestures:
        raise ConfigError("At least one gesture template is required")

"""
Exceptions raised by the gesture recognition system.
"""


class GestureError(Exception):
    """Base class for all handgesture errors."""


class ConfigError(GestureError):
    """Configuration file has missing or invalid values."""


class TemplateError(ConfigError):
    """A gesture template declaration is invalid."""


class CameraError(GestureError):
    """The camera could not be opened or stopped delivering frames."""


class DisplayError(GestureError):
    """The display surface could not be created."""

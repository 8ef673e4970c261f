"""Rain-aware route planning and playback."""

__version__ = "0.1.0"

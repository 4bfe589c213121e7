"""VisionMates participation and interaction backend."""

__version__ = "0.1.0"

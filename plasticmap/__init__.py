"""Image-based plastic pollution severity scoring."""

__version__ = "0.1.0"

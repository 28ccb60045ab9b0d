"""Line configuration completeness engine."""

__version__ = "0.1.0"

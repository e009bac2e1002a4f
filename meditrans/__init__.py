"""Doctor/patient medical translation chat."""

__version__ = "1.0.0"

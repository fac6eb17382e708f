"""Personal task board: Flask API over MongoDB with cookie JWT sessions."""

__version__ = "0.1.0"

"""URL shortening service: six character keys for long URLs."""

__version__ = "0.1.0"

"""Search front-end over Reddit's public read API."""

__version__ = "0.1.0"

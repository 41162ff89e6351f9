"""p4-bridge - HTTP bridge between a browser dashboard and the Perforce CLI."""

__version__ = "0.1.0"

"""Live state tracking for relayed chess broadcast rounds."""

__version__ = "0.1.0"

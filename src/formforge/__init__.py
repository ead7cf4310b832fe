"""formforge - versioned form configuration builder."""

__version__ = "0.1.0"

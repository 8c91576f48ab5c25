"""TaskGlitch: in-memory sales task tracker with derived performance metrics."""

__version__ = "0.1.0"

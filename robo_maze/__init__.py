"""Grid robot navigation: trap-free route planning and step-by-step movement."""

__version__ = "0.1.0"

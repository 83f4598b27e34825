"""VibeFlow: project visualization and AI jury service."""

__version__ = "0.1.0"

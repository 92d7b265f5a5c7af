"""Signaling relay for peer-to-peer audio/video calls."""

__version__ = "1.0.0"

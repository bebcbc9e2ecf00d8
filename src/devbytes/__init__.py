"""Offline cache for the DevBytes video playlist."""

__version__ = "0.1.0"

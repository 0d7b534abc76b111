"""Gramasetu voice assistant: voice agent client and chat relay backend."""

__version__ = "0.3.0"

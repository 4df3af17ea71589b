"""Baseline Flightdeck: scan a source tree for web-platform feature usage."""

from ._version import __version__

__all__ = ["__version__"]

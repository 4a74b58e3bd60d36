"""Game Saver - shared game account catalog with time-boxed account leasing."""

from ._version import __version__


__all__ = ["__version__"]

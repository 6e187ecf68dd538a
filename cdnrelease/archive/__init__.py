"""
Archive module for version snapshots.

An archive is the immutable, version-keyed copy of an environment's two
versioned files, recorded in the environment's registry.
"""

from .archive import ArchiveManager

__all__ = ["ArchiveManager"]

"""Independent entry points that rewrite environment state: restore and reset."""

from .restore import RestoreManager
from .reset import ResetManager

__all__ = ["RestoreManager", "ResetManager"]

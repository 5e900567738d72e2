"""Quiz generation and tutoring chat built around a single session state."""

from __future__ import annotations

__all__ = ["__version__"]

__version__ = "0.1.0"

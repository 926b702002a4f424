"""Decomoji diff manifest generator.

Walks the release tags of a git history and writes one JSON manifest per
version describing which decomoji images were added, updated, deleted or
renamed, for consumption by the decomoji finder.
"""

__version__ = "1.0.0"
__author__ = "Decomoji Team"

__all__ = []

"""Processing layer - Note-level post-processing.

This layer prepares recorded notes for playback and export:
- Silence compaction (clamp long gaps between notes)
"""

from .compact import SilenceCompactor, CompactionStats

__all__ = [
    "SilenceCompactor",
    "CompactionStats",
]

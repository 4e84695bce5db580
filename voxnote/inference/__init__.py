"""Inference layer - Musical understanding of detected pitches.

This layer maps raw semitones onto musical structure:
- Scale quantization (snap to the nearest in-scale pitch class)
- Diatonic harmonization (scale triad on each degree)
"""

from .harmonizer import ScaleChord, snap_to_scale, chord_for

__all__ = [
    "ScaleChord",
    "snap_to_scale",
    "chord_for",
]

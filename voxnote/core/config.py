"""Engine configuration."""

from dataclasses import dataclass, replace

from .constants import (
    DEFAULT_GLIDE,
    DEFAULT_MIC_BOOST,
    DEFAULT_SENSITIVITY,
    MIN_NOTE_DURATION,
)
from .scales import ScaleType


@dataclass(frozen=True)
class EngineConfig:
    """Control settings published to the polling loop.

    Attributes:
        sensitivity: Boosted input RMS above which the gate opens (default: 0.015)
        mic_boost: Gain applied to the input before the gate RMS (default: 3.0)
        scale: Scale detected pitches are snapped to (default: MAJOR)
        harmonize: Also sound the scale triad of each note (default: True)
        bend: Forward fractional pitch as detune cents (default: True)
        glide: Portamento in seconds; 0 releases voices before each retrigger
        min_note_duration: Recorded notes shorter than this are dropped (default: 0.05)
    """

    sensitivity: float = DEFAULT_SENSITIVITY
    mic_boost: float = DEFAULT_MIC_BOOST
    scale: ScaleType = ScaleType.MAJOR
    harmonize: bool = True
    bend: bool = True
    glide: float = DEFAULT_GLIDE
    min_note_duration: float = MIN_NOTE_DURATION

    def __post_init__(self):
        for name in ("sensitivity", "mic_boost", "glide", "min_note_duration"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be non-negative, got {getattr(self, name)}")
        if not isinstance(self.scale, ScaleType):
            raise ValueError(f"scale must be a ScaleType, got {self.scale!r}")

    def with_changes(self, **changes) -> "EngineConfig":
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)

"""Core types and constants for voxnote."""

from .note import (
    RecordedNote,
    freq_to_midi,
    freq_to_midi_float,
    is_valid_midi,
    midi_to_freq,
    midi_to_note_name,
    note_name_to_midi,
    round_midi,
)
from .scales import ScaleType, SCALE_OFFSETS
from .config import EngineConfig
from .session import Session
from .constants import (
    PITCH_NAMES,
    DEFAULT_SR,
    DEFAULT_FRAME_SIZE,
    POLL_INTERVAL,
    MIN_NOTE_DURATION,
    GAP_MAX,
)

__all__ = [
    "RecordedNote",
    "Session",
    "ScaleType",
    "SCALE_OFFSETS",
    "EngineConfig",
    "freq_to_midi",
    "freq_to_midi_float",
    "is_valid_midi",
    "midi_to_freq",
    "midi_to_note_name",
    "note_name_to_midi",
    "round_midi",
    "PITCH_NAMES",
    "DEFAULT_SR",
    "DEFAULT_FRAME_SIZE",
    "POLL_INTERVAL",
    "MIN_NOTE_DURATION",
    "GAP_MAX",
]

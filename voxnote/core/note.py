"""RecordedNote data class and pitch conversions."""

from dataclasses import dataclass
from typing import Any, Dict

import librosa
from librosa.util.exceptions import ParameterError
import numpy as np

from .constants import A4_FREQ, A4_MIDI, MIDI_MAX, MIDI_MIN, PITCH_NAMES


def freq_to_midi_float(freq: float) -> float:
    """Convert frequency (Hz) to a fractional MIDI pitch (A4 = 440Hz = 69)."""
    if not freq > 0:
        raise ValueError(f"Frequency must be positive, got {freq}")
    return float(12 * np.log2(freq / A4_FREQ) + A4_MIDI)


def round_midi(midi_float: float) -> int:
    """Round a fractional MIDI pitch to the nearest semitone, halves up."""
    return int(np.floor(midi_float + 0.5))


def freq_to_midi(freq: float) -> int:
    """Convert frequency (Hz) to the nearest MIDI pitch."""
    return round_midi(freq_to_midi_float(freq))


def midi_to_freq(midi: float) -> float:
    """Convert MIDI pitch to frequency (Hz)."""
    return A4_FREQ * (2 ** ((midi - A4_MIDI) / 12.0))


def is_valid_midi(midi: int) -> bool:
    """Whether a MIDI number has a note name."""
    return MIDI_MIN <= midi <= MIDI_MAX


def midi_to_note_name(midi: int) -> str:
    """Get note name (e.g., 'C4', 'A#3') for a MIDI pitch.

    Raises:
        ValueError: If midi is outside 0-127
    """
    if not is_valid_midi(midi):
        raise ValueError(f"MIDI pitch out of range: {midi}")
    octave = (midi // 12) - 1
    return f"{PITCH_NAMES[midi % 12]}{octave}"


def note_name_to_midi(name: str) -> int:
    """Parse a note name (e.g., 'C#4') into a MIDI pitch.

    Raises:
        ValueError: If the name cannot be parsed
    """
    try:
        midi = librosa.note_to_midi(name, round_midi=True)
    except ParameterError as e:
        raise ValueError(f"Invalid note name: {name!r}") from e
    return int(midi)


@dataclass(frozen=True)
class RecordedNote:
    """A note captured while recording a performance."""

    note_name: str  # Pitch class + octave, e.g. "C#4"
    time: float  # Seconds from recording start
    duration: float  # Seconds

    @property
    def end(self) -> float:
        """Note end time in seconds."""
        return self.time + self.duration

    @property
    def pitch(self) -> int:
        """MIDI pitch of the note."""
        return note_name_to_midi(self.note_name)

    def to_dict(self) -> Dict[str, Any]:
        return {"note": self.note_name, "time": self.time, "duration": self.duration}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RecordedNote":
        return cls(
            note_name=str(data["note"]),
            time=float(data["time"]),
            duration=float(data["duration"]),
        )

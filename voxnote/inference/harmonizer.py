"""Scale quantization and diatonic harmonization.

Snaps detected semitones to a scale and builds the triad that sits on each
scale degree (root, third and fifth counted in scale steps, so the chord
quality follows the scale rather than a fixed interval pattern).
"""

from dataclasses import dataclass
from typing import Tuple

from ..core import PITCH_NAMES, ScaleType, midi_to_note_name


@dataclass(frozen=True)
class ScaleChord:
    """A chord derived from a scale degree."""

    notes: Tuple[int, ...]  # MIDI pitches, root first
    name: str  # e.g. "CMaj", "Amin", or the bare root name

    @property
    def root(self) -> int:
        return self.notes[0]

    @property
    def is_triad(self) -> bool:
        return len(self.notes) == 3

    @property
    def note_names(self) -> Tuple[str, ...]:
        """Note names of the chord tones."""
        return tuple(midi_to_note_name(m) for m in self.notes)


def snap_to_scale(midi: int, scale: ScaleType) -> int:
    """
    Snap a MIDI pitch to the nearest pitch class of a scale.

    The search stays inside the pitch's own octave. On a tie the lower
    pitch class wins.

    Args:
        midi: MIDI pitch
        scale: Target scale

    Returns:
        MIDI pitch whose pitch class belongs to the scale
    """
    if scale is ScaleType.CHROMATIC:
        return midi

    pitch_class = midi % 12
    octave = midi // 12
    closest = min(scale.offsets, key=lambda offset: abs(offset - pitch_class))
    return octave * 12 + closest


def chord_for(midi: int, scale: ScaleType) -> ScaleChord:
    """
    Build the scale triad rooted on a MIDI pitch.

    Args:
        midi: Root MIDI pitch, expected to be in the scale
        scale: Scale providing the chord tones

    Returns:
        ScaleChord with root, third and fifth, or only the root when the
        pitch class is not part of the scale
    """
    pitch_class = midi % 12
    root_name = PITCH_NAMES[pitch_class]

    if scale is ScaleType.CHROMATIC:
        return ScaleChord(notes=(midi, midi + 4, midi + 7), name=f"{root_name}Maj")

    offsets = scale.offsets
    if pitch_class not in offsets:
        return ScaleChord(notes=(midi,), name=root_name)

    degree = offsets.index(pitch_class)
    octave = midi // 12

    def note_at(steps: int) -> int:
        index = degree + steps
        return (octave + index // len(offsets)) * 12 + offsets[index % len(offsets)]

    third_interval = (offsets[(degree + 2) % len(offsets)] - pitch_class) % 12
    quality = "min" if third_interval == 3 else "Maj"

    return ScaleChord(notes=(midi, note_at(2), note_at(4)), name=f"{root_name}{quality}")

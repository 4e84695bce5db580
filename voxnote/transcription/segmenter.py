"""Note segmentation - turn per-tick pitch estimates into note events.

The segmenter is a two-state machine (silent / sounding) driven once per
polling tick:

- silent -> sounding when the gate is open and a quantized pitch appears
- sounding -> sounding when the quantized pitch changes (retrigger)
- sounding -> silent when the gate closes or no pitch is detected

While recording, every finished note is appended to the note list unless
it is shorter than the minimum note duration.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

import numpy as np

from ..core import (
    EngineConfig,
    RecordedNote,
    is_valid_midi,
    midi_to_note_name,
    round_midi,
)
from ..inference import chord_for, snap_to_scale

logger = logging.getLogger(__name__)


class WorkstationMode(Enum):
    """What the workstation does with the live input."""

    IDLE = "IDLE"  # input ignored
    MIDI = "MIDI"  # input drives the synth
    VOICE = "VOICE"  # input passed through, no detection
    RECORD = "RECORD"  # input drives the synth and is recorded

    @property
    def detects(self) -> bool:
        """Whether pitch detection runs in this mode."""
        return self in (WorkstationMode.MIDI, WorkstationMode.RECORD)


class EventType(Enum):
    """Kinds of decisions sent to the synth."""

    NOTE_ON = "note_on"
    RELEASE = "release"  # release every sounding voice
    DETUNE = "detune"


@dataclass(frozen=True)
class NoteEvent:
    """A synth decision produced by the segmenter."""

    type: EventType
    time: float
    note: Optional[str] = None  # lead voice
    chord_notes: Tuple[str, ...] = ()  # harmony voices
    chord: Optional[str] = None  # chord name, e.g. "CMaj"
    cents: float = 0.0  # DETUNE only


@dataclass(frozen=True)
class ActiveNote:
    """A recorded note that has started but not ended."""

    note_name: str
    time: float  # seconds from recording start


@dataclass
class EngineState:
    """Mutable state owned by the polling loop."""

    mode: WorkstationMode = WorkstationMode.IDLE
    last_midi: Optional[int] = None
    active_note: Optional[ActiveNote] = None
    notes: List[RecordedNote] = field(default_factory=list)
    recording_start: float = 0.0
    chord_name: Optional[str] = None
    chord_notes: Tuple[str, ...] = ()

    @property
    def recording(self) -> bool:
        return self.mode is WorkstationMode.RECORD

    @property
    def sounding(self) -> bool:
        return self.last_midi is not None


class NoteSegmenter:
    """Segment a stream of pitch estimates into note-on/release events."""

    def __init__(self, config: Optional[EngineConfig] = None):
        """
        Initialize NoteSegmenter.

        Args:
            config: Optional EngineConfig, defaults are used if omitted
        """
        self.config = config if config is not None else EngineConfig()
        self.state = EngineState()

    def apply_config(self, config: EngineConfig) -> None:
        """Replace the active configuration."""
        self.config = config

    @property
    def notes(self) -> List[RecordedNote]:
        """Notes recorded so far."""
        return list(self.state.notes)

    def process(
        self,
        midi_float: Optional[float],
        gate_open: bool,
        now: float,
    ) -> List[NoteEvent]:
        """
        Advance the state machine by one tick.

        Args:
            midi_float: Detected fractional MIDI pitch, None if no pitch
            gate_open: Whether the input level and mode allow detection
            now: Current time in seconds

        Returns:
            Events to send to the synth, in order
        """
        midi = self._quantize(midi_float) if gate_open else None

        if midi is None:
            if self.state.sounding:
                return self.release(now)
            return []

        events = []
        if self.config.bend:
            rounded = round_midi(midi_float)
            events.append(
                NoteEvent(EventType.DETUNE, now, cents=(midi_float - rounded) * 100.0)
            )
        if midi != self.state.last_midi:
            events.extend(self._trigger(midi, now))
        return events

    def release(self, now: float) -> List[NoteEvent]:
        """Release all voices and close the recorded note, if any."""
        if not self.state.sounding:
            return []
        if self.state.recording:
            self._close_active_note(now)
        event = self._release_event(now)
        self.state.last_midi = None
        self.state.chord_name = None
        self.state.chord_notes = ()
        return [event]

    def set_mode(self, mode: WorkstationMode) -> None:
        """
        Switch between IDLE, MIDI and VOICE.

        Raises:
            ValueError: For RECORD or while recording; use
                start_recording()/stop_recording() instead
        """
        if mode is WorkstationMode.RECORD:
            raise ValueError("Use start_recording() to enter RECORD mode")
        if self.state.recording:
            raise ValueError("Stop recording before changing mode")
        self.state.mode = mode

    def start_recording(self, now: float) -> List[NoteEvent]:
        """
        Enter RECORD mode with an empty note list.

        Returns:
            Release events for voices that were still sounding
        """
        if self.state.recording:
            raise ValueError("Already recording")
        events = self.release(now)
        self.state.notes = []
        self.state.active_note = None
        self.state.recording_start = now
        self.state.mode = WorkstationMode.RECORD
        logger.debug("Recording started at %.3f", now)
        return events

    def stop_recording(self, now: float) -> List[RecordedNote]:
        """
        Leave RECORD mode and hand over the recorded notes.

        A note still sounding is closed at `now` and kept if long enough.
        """
        if not self.state.recording:
            raise ValueError("Not recording")
        self._close_active_note(now)
        self.state.mode = WorkstationMode.IDLE
        notes = list(self.state.notes)
        logger.debug("Recording stopped with %d notes", len(notes))
        return notes

    def _quantize(self, midi_float: Optional[float]) -> Optional[int]:
        """Round and snap a detected pitch, None if it has no note name."""
        if midi_float is None or not np.isfinite(midi_float):
            return None
        midi = snap_to_scale(round_midi(midi_float), self.config.scale)
        if not is_valid_midi(midi):
            return None
        return midi

    def _trigger(self, midi: int, now: float) -> List[NoteEvent]:
        """Start a new note, ending the previous one."""
        events = []
        if self.state.recording:
            self._close_active_note(now)

        # Without portamento the old voices must stop before the new attack
        if self.config.glide == 0 and self.state.sounding:
            events.append(self._release_event(now))

        note_name = midi_to_note_name(midi)
        chord_name = None
        chord_notes: Tuple[str, ...] = ()
        if self.config.harmonize:
            chord = chord_for(midi, self.config.scale)
            chord_name = chord.name
            chord_notes = tuple(
                midi_to_note_name(m) for m in chord.notes if is_valid_midi(m)
            )

        events.append(
            NoteEvent(
                EventType.NOTE_ON,
                now,
                note=note_name,
                chord_notes=chord_notes,
                chord=chord_name,
            )
        )
        logger.debug("Note on %s (%s) at %.3f", note_name, chord_name, now)

        self.state.last_midi = midi
        self.state.chord_name = chord_name
        self.state.chord_notes = chord_notes
        if self.state.recording:
            self.state.active_note = ActiveNote(note_name, now - self.state.recording_start)
        return events

    def _release_event(self, now: float) -> NoteEvent:
        return NoteEvent(
            EventType.RELEASE,
            now,
            note=midi_to_note_name(self.state.last_midi),
            chord_notes=self.state.chord_notes,
            chord=self.state.chord_name,
        )

    def _close_active_note(self, now: float) -> None:
        """End the active recorded note, dropping it if too short."""
        active = self.state.active_note
        if active is None:
            return
        self.state.active_note = None
        duration = now - self.state.recording_start - active.time
        if duration >= self.config.min_note_duration:
            self.state.notes.append(RecordedNote(active.note_name, active.time, duration))
        else:
            logger.debug("Dropped transient %s (%.3fs)", active.note_name, duration)

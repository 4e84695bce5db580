"""MIDI export of recorded sessions."""

from pathlib import Path
from typing import List, Optional

import pretty_midi

from ..core import RecordedNote, ScaleType, Session, is_valid_midi
from ..inference import chord_for


class MIDIExporter:
    """Export recorded notes to MIDI format, with optional harmony track."""

    def __init__(
        self,
        tempo: float = 120.0,
        instrument_program: int = 0,
        chord_program: int = 48,
        velocity: int = 100,
        chord_velocity: int = 60,
    ):
        """
        Initialize MIDIExporter.

        Args:
            tempo: Tempo in BPM
            instrument_program: MIDI program number for the lead (0-127)
            chord_program: MIDI program number for the harmony (0-127)
            velocity: Velocity of lead notes
            chord_velocity: Velocity of harmony notes
        """
        self.tempo = tempo
        self.instrument_program = instrument_program
        self.chord_program = chord_program
        self.velocity = velocity
        self.chord_velocity = chord_velocity

    def export(
        self,
        notes: List[RecordedNote],
        output_path: str,
        harmony_scale: Optional[ScaleType] = None,
    ) -> None:
        """
        Export notes to MIDI file.

        Args:
            notes: Recorded notes
            output_path: Path to output MIDI file
            harmony_scale: If given, add the scale triad of every note
                on a second instrument
        """
        midi = self.notes_to_pretty_midi(notes, harmony_scale)

        # Ensure output directory exists
        Path(output_path).parent.mkdir(parents=True, exist_ok=True)

        midi.write(str(output_path))

    def export_session(
        self,
        session: Session,
        output_path: str,
        skip_silences: bool = False,
        harmonize: bool = True,
    ) -> None:
        """Export a session the way it is played back."""
        notes = session.playback_notes(skip_silences=skip_silences)
        self.export(notes, output_path, session.scale if harmonize else None)

    def notes_to_pretty_midi(
        self,
        notes: List[RecordedNote],
        harmony_scale: Optional[ScaleType] = None,
    ) -> pretty_midi.PrettyMIDI:
        """Convert notes to PrettyMIDI object without saving."""
        midi = pretty_midi.PrettyMIDI(initial_tempo=self.tempo)

        lead = pretty_midi.Instrument(program=self.instrument_program, name="Lead")
        chords = pretty_midi.Instrument(program=self.chord_program, name="Harmony")

        for note in notes:
            pitch = note.pitch
            lead.notes.append(
                pretty_midi.Note(
                    velocity=self.velocity,
                    pitch=pitch,
                    start=note.time,
                    end=note.end,
                )
            )
            if harmony_scale is None:
                continue
            for chord_pitch in chord_for(pitch, harmony_scale).notes:
                if not is_valid_midi(chord_pitch):
                    continue
                chords.notes.append(
                    pretty_midi.Note(
                        velocity=self.chord_velocity,
                        pitch=chord_pitch,
                        start=note.time,
                        end=note.end,
                    )
                )

        midi.instruments.append(lead)
        if harmony_scale is not None:
            midi.instruments.append(chords)
        return midi

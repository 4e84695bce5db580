"""Tests for MIDI export."""

import pretty_midi
import pytest

from voxnote.core import RecordedNote, ScaleType, Session
from voxnote.output import MIDIExporter


@pytest.fixture
def notes():
    return [
        RecordedNote("C4", 0.0, 0.5),
        RecordedNote("A4", 0.5, 0.5),
        RecordedNote("E4", 3.0, 1.0),
    ]


class TestMIDIExporter:
    """Test writing recorded notes to MIDI files."""

    def test_lead_only(self, notes):
        midi = MIDIExporter().notes_to_pretty_midi(notes)
        assert len(midi.instruments) == 1
        lead = midi.instruments[0]
        assert [n.pitch for n in lead.notes] == [60, 69, 64]
        assert lead.notes[2].start == pytest.approx(3.0)
        assert lead.notes[2].end == pytest.approx(4.0)

    def test_harmony_track(self, notes):
        midi = MIDIExporter().notes_to_pretty_midi(notes, harmony_scale=ScaleType.MAJOR)
        assert [i.name for i in midi.instruments] == ["Lead", "Harmony"]
        harmony = midi.instruments[1]
        assert len(harmony.notes) == 9
        first_chord = sorted(n.pitch for n in harmony.notes if n.start == 0.0)
        assert first_chord == [60, 64, 67]

    def test_export_writes_file(self, notes, tmp_path):
        path = tmp_path / "out" / "take.mid"
        MIDIExporter(tempo=100).export(notes, str(path))

        assert path.exists()
        loaded = pretty_midi.PrettyMIDI(str(path))
        pitches = [n.pitch for i in loaded.instruments for n in i.notes]
        assert sorted(pitches) == [60, 64, 69]

    def test_export_session_skips_silences(self, notes, tmp_path):
        session = Session.create(notes, scale=ScaleType.MAJOR)
        path = tmp_path / "take.mid"
        MIDIExporter().export_session(session, str(path), skip_silences=True, harmonize=False)

        loaded = pretty_midi.PrettyMIDI(str(path))
        assert len(loaded.instruments) == 1
        starts = sorted(n.start for n in loaded.instruments[0].notes)
        assert starts[-1] == pytest.approx(1.3, abs=0.01)

    def test_empty_export(self, tmp_path):
        path = tmp_path / "empty.mid"
        MIDIExporter().export([], str(path))
        assert path.exists()

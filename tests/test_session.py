"""Tests for recorded notes and session persistence."""

import json

import pytest

from voxnote.core import RecordedNote, ScaleType, Session


class TestRecordedNote:
    """Test the RecordedNote data class."""

    def test_end_and_pitch(self):
        note = RecordedNote("A4", 1.0, 0.5)
        assert note.end == 1.5
        assert note.pitch == 69

    def test_dict_keys(self):
        note = RecordedNote("C#4", 0.25, 0.75)
        assert note.to_dict() == {"note": "C#4", "time": 0.25, "duration": 0.75}
        assert RecordedNote.from_dict(note.to_dict()) == note


class TestSession:
    """Test session creation and JSON files."""

    @pytest.fixture
    def session(self):
        notes = [RecordedNote("C4", 0.0, 0.5), RecordedNote("G4", 4.0, 1.0)]
        return Session.create(notes, bpm=96.0, scale=ScaleType.BLUES)

    def test_create(self, session):
        assert len(session.id) == 9
        assert session.timestamp > 0
        assert session.instrument_id == "concert-grand"
        assert session.duration == 5.0

    def test_ids_are_unique(self):
        assert Session.create([]).id != Session.create([]).id

    def test_json_shape(self, session):
        data = session.to_dict()
        assert set(data) == {"id", "timestamp", "midiNotes", "instrumentId", "bpm", "scale"}
        assert data["scale"] == "BLUES"
        assert data["midiNotes"][1] == {"note": "G4", "time": 4.0, "duration": 1.0}

    def test_save_and_load(self, session, tmp_path):
        path = tmp_path / "take.json"
        session.save(path)

        assert json.loads(path.read_text())["id"] == session.id
        loaded = Session.load(path)
        assert loaded == session

    def test_load_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            Session.load(tmp_path / "missing.json")

    def test_load_unknown_scale(self):
        with pytest.raises(ValueError):
            Session.from_dict({"id": "x", "scale": "DORIAN"})

    def test_from_dict_defaults(self):
        session = Session.from_dict({"id": "abc"})
        assert session.notes == []
        assert session.scale is ScaleType.MAJOR
        assert session.bpm == 120.0

    def test_playback_notes(self, session):
        assert session.playback_notes() == session.notes
        compacted = session.playback_notes(skip_silences=True)
        assert compacted[1].time == pytest.approx(0.8)
        assert session.notes[1].time == 4.0

    def test_playback_notes_custom_gap(self, session):
        compacted = session.playback_notes(skip_silences=True, max_gap=1.0)
        assert compacted[1].time == pytest.approx(1.5)


class TestScaleType:
    """Test scale lookup."""

    def test_from_name_case_insensitive(self):
        assert ScaleType.from_name("minor") is ScaleType.MINOR
        assert ScaleType.from_name(" Pentatonic ") is ScaleType.PENTATONIC

    def test_offsets(self):
        assert ScaleType.MAJOR.offsets == (0, 2, 4, 5, 7, 9, 11)
        assert len(ScaleType.CHROMATIC.offsets) == 12

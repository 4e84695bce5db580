"""Tests for the voxnote command-line interface."""

import numpy as np
import pytest
import soundfile as sf
from typer.testing import CliRunner

from voxnote.cli import app
from voxnote.core import RecordedNote, ScaleType, Session

runner = CliRunner()


@pytest.fixture
def session_file(tmp_path):
    notes = [RecordedNote("C4", 1.0, 0.5), RecordedNote("E4", 4.0, 0.5)]
    session = Session.create(notes, scale=ScaleType.MAJOR)
    path = tmp_path / "session.json"
    session.save(path)
    return path


class TestChordCommand:
    """Test `voxnote chord`."""

    def test_in_scale_note(self):
        result = runner.invoke(app, ["chord", "A4"])
        assert result.exit_code == 0
        assert "Amin" in result.output

    def test_snapped_note(self):
        result = runner.invoke(app, ["chord", "C#4", "--scale", "major"])
        assert result.exit_code == 0
        assert "C4" in result.output
        assert "CMaj" in result.output

    def test_minor_scale(self):
        result = runner.invoke(app, ["chord", "C4", "--scale", "MINOR"])
        assert result.exit_code == 0
        assert "Cmin" in result.output

    def test_invalid_note(self):
        result = runner.invoke(app, ["chord", "nonsense"])
        assert result.exit_code == 1


class TestScalesCommand:
    def test_lists_all_scales(self):
        result = runner.invoke(app, ["scales"])
        assert result.exit_code == 0
        for scale in ScaleType:
            assert scale.value in result.output


class TestSessionCommands:
    """Test `voxnote compact` and `voxnote export`."""

    def test_compact(self, session_file, tmp_path):
        out = tmp_path / "compact.json"
        result = runner.invoke(app, ["compact", str(session_file), "-o", str(out)])

        assert result.exit_code == 0
        compacted = Session.load(out)
        assert [n.time for n in compacted.notes] == pytest.approx([0.0, 0.8])

    def test_compact_missing_file(self, tmp_path):
        result = runner.invoke(app, ["compact", str(tmp_path / "missing.json")])
        assert result.exit_code == 1

    def test_compact_invalid_gap(self, session_file):
        result = runner.invoke(app, ["compact", str(session_file), "--max-gap", "-1"])
        assert result.exit_code == 1

    def test_export(self, session_file, tmp_path):
        out = tmp_path / "take.mid"
        result = runner.invoke(
            app, ["export", str(session_file), "-o", str(out), "--skip-silences"]
        )
        assert result.exit_code == 0
        assert out.exists()

    def test_export_invalid_session(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text('{"timestamp": 1}')
        result = runner.invoke(app, ["export", str(path), "-o", str(tmp_path / "x.mid")])
        assert result.exit_code == 1


class TestTranscribeCommand:
    """Test `voxnote transcribe` on a synthetic recording."""

    @pytest.fixture
    def tone_file(self, tmp_path):
        sr = 22050
        silence = np.zeros(sr // 2)
        tone = 0.5 * np.sin(2 * np.pi * 440.0 * np.arange(sr) / sr)
        path = tmp_path / "tone.wav"
        sf.write(str(path), np.concatenate([silence, tone, silence]), sr)
        return path

    def test_transcribe_single_tone(self, tone_file, tmp_path):
        session_path = tmp_path / "take.json"
        midi_path = tmp_path / "take.mid"
        result = runner.invoke(
            app,
            [
                "transcribe",
                str(tone_file),
                "-o",
                str(session_path),
                "--midi",
                str(midi_path),
            ],
        )

        assert result.exit_code == 0, result.output
        session = Session.load(session_path)
        assert [n.note_name for n in session.notes] == ["A4"]
        assert session.notes[0].time == pytest.approx(0.5, abs=0.1)
        assert session.notes[0].duration == pytest.approx(1.0, abs=0.1)
        assert midi_path.exists()

    def test_transcribe_missing_file(self, tmp_path):
        result = runner.invoke(app, ["transcribe", str(tmp_path / "missing.wav")])
        assert result.exit_code == 1

    def test_transcribe_undecodable_file(self, tmp_path):
        path = tmp_path / "broken.wav"
        path.write_bytes(b"RIFF\x00\x01garbage" * 16)
        result = runner.invoke(app, ["transcribe", str(path)])
        assert result.exit_code == 1
        assert "Could not decode" in result.output

"""Tests for audio frames, file loading and microphone buffering."""

import numpy as np
import pytest
import soundfile as sf

from voxnote.input import AudioFrame, AudioLoader, MicrophoneSource


class TestAudioFrame:
    """Test the AudioFrame container."""

    def test_rms_and_gain(self):
        frame = AudioFrame(np.full(100, 0.5), 1000)
        assert frame.rms() == pytest.approx(0.5)
        assert frame.rms(gain=2.0) == pytest.approx(1.0)
        assert frame.duration == pytest.approx(0.1)
        assert len(frame) == 100

    def test_samples_are_copied_and_read_only(self):
        samples = np.zeros(16)
        frame = AudioFrame(samples, 8000)
        samples[0] = 1.0
        assert frame.samples[0] == 0.0
        with pytest.raises(ValueError):
            frame.samples[0] = 1.0

    def test_invalid_frames(self):
        with pytest.raises(ValueError):
            AudioFrame(np.zeros(16), 0)
        with pytest.raises(ValueError):
            AudioFrame(np.zeros(0), 8000)
        with pytest.raises(ValueError):
            AudioFrame(np.zeros((2, 8)), 8000)


class TestAudioLoader:
    """Test loading files and slicing them into frames."""

    def test_frames_follow_polling_cadence(self):
        loader = AudioLoader(frame_size=1024, poll_interval=0.04)
        audio = np.zeros(22050)
        frames = list(loader.frames(audio, 22050))

        hop = loader.hop_length(22050)
        assert hop == 882
        assert len(frames) == 1 + (22050 - 1024) // hop
        assert all(len(f) == 1024 for f in frames)
        assert frames[0].time == pytest.approx(1024 / 22050)
        assert frames[1].time - frames[0].time == pytest.approx(hop / 22050)

    def test_short_audio_is_padded(self):
        loader = AudioLoader(frame_size=1024)
        with pytest.warns(UserWarning, match="zero-padded"):
            frames = list(loader.frames(np.ones(100), 22050))
        assert len(frames) == 1
        assert len(frames[0]) == 1024

    def test_load_wav(self, tmp_path):
        sr = 22050
        audio = 0.5 * np.sin(2 * np.pi * 440 * np.arange(sr) / sr)
        path = tmp_path / "tone.wav"
        sf.write(str(path), audio, sr)

        loader = AudioLoader(target_sr=sr)
        loaded, loaded_sr = loader.load(str(path))
        assert loaded_sr == sr
        assert loader.get_duration(loaded, loaded_sr) == pytest.approx(1.0, abs=0.01)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            AudioLoader().load(str(tmp_path / "missing.wav"))

    def test_unsupported_format(self, tmp_path):
        path = tmp_path / "notes.txt"
        path.write_text("not audio")
        with pytest.raises(ValueError, match="Unsupported format"):
            AudioLoader().load(str(path))

    def test_normalize(self):
        loader = AudioLoader(normalize=True)
        assert np.abs(loader._normalize(np.array([0.1, -0.25]))).max() == pytest.approx(1.0)

    def test_undecodable_file(self, tmp_path):
        path = tmp_path / "broken.wav"
        path.write_bytes(b"RIFF\x00\x01garbage" * 16)
        with pytest.raises(ValueError, match="Could not decode"):
            AudioLoader().load(str(path))

    def test_invalid_frame_size(self):
        with pytest.raises(ValueError):
            AudioLoader(frame_size=0)


class TestMicrophoneSource:
    """Test the rolling capture buffer without audio hardware."""

    def test_push_keeps_latest_samples(self):
        source = MicrophoneSource(sample_rate=8000, frame_size=8, clock=lambda: 1.5)
        source.push(np.arange(5, dtype=float))
        frame = source.push(np.arange(5, 10, dtype=float))

        assert list(frame.samples) == [2, 3, 4, 5, 6, 7, 8, 9]
        assert frame.time == 1.5
        assert frame.sample_rate == 8000

    def test_push_oversized_block(self):
        source = MicrophoneSource(sample_rate=8000, frame_size=4)
        frame = source.push(np.arange(10, dtype=float))
        assert list(frame.samples) == [6, 7, 8, 9]

    def test_frames_are_independent(self):
        source = MicrophoneSource(sample_rate=8000, frame_size=4)
        first = source.push(np.ones(4))
        source.push(np.zeros(4))
        assert list(first.samples) == [1, 1, 1, 1]

    def test_block_size_from_poll_interval(self):
        source = MicrophoneSource(sample_rate=44100, poll_interval=0.03)
        assert source.block_size == 1323
        assert not source.is_open

    def test_read_drains_backlog(self):
        """A late reader gets the newest samples and leaves nothing queued."""
        source = MicrophoneSource(sample_rate=8000, frame_size=6)
        for start in (0, 4, 8):
            block = np.arange(start, start + 4, dtype=np.float32).reshape(-1, 1)
            source._on_audio(block, 4, None, None)

        frame = source.read(timeout=0.1)
        assert list(frame.samples) == [6, 7, 8, 9, 10, 11]
        assert source._blocks.empty()
        assert source.read(timeout=0.01) is None

    def test_backlog_is_bounded(self):
        """A full backlog drops the oldest block and keeps the newest."""
        source = MicrophoneSource(sample_rate=8000, frame_size=2, max_pending=3)
        for value in range(10):
            source._on_audio(np.full((2, 1), value, dtype=np.float32), 2, None, None)

        assert source._blocks.qsize() == 3
        assert source.dropped_blocks == 7
        frame = source.read(timeout=0.1)
        assert list(frame.samples) == [9, 9]

    def test_invalid_max_pending(self):
        with pytest.raises(ValueError):
            MicrophoneSource(max_pending=0)

    def test_context_manager_closes_stream(self):
        class FakeStream:
            stopped = closed = False

            def stop(self):
                self.stopped = True

            def close(self):
                self.closed = True

        stream = FakeStream()
        source = MicrophoneSource()
        source._stream = stream
        with source as entered:
            assert entered is source
            assert source.is_open
        assert not source.is_open
        assert stream.stopped and stream.closed

"""Audio file loading and slicing into polling frames."""

import warnings
from pathlib import Path
from typing import Iterator, Optional, Tuple

import audioread
import librosa
import numpy as np

from ..core.constants import DEFAULT_FRAME_SIZE, DEFAULT_SR, POLL_INTERVAL
from .frame import AudioFrame


class AudioLoader:
    """Load recordings and replay them as a stream of AudioFrames."""

    SUPPORTED_FORMATS = {".wav", ".mp3", ".flac", ".ogg", ".m4a", ".mp4"}

    def __init__(
        self,
        target_sr: int = DEFAULT_SR,
        frame_size: int = DEFAULT_FRAME_SIZE,
        poll_interval: float = POLL_INTERVAL,
        normalize: bool = False,
    ):
        """
        Initialize AudioLoader.

        Args:
            target_sr: Target sample rate for resampling
            frame_size: Samples per analysis frame
            poll_interval: Seconds between consecutive frames
            normalize: Peak-normalize audio after loading if True
        """
        if frame_size <= 0 or poll_interval <= 0:
            raise ValueError("frame_size and poll_interval must be positive")
        self.target_sr = target_sr
        self.frame_size = frame_size
        self.poll_interval = poll_interval
        self.normalize = normalize

    def load(self, path: str) -> Tuple[np.ndarray, int]:
        """
        Load audio file as mono.

        Args:
            path: Path to audio file

        Returns:
            Tuple of (audio array, sample rate)

        Raises:
            ValueError: If file format not supported or cannot be decoded
            FileNotFoundError: If file doesn't exist
        """
        path = Path(path)

        if not path.exists():
            raise FileNotFoundError(f"Audio file not found: {path}")

        if path.suffix.lower() not in self.SUPPORTED_FORMATS:
            raise ValueError(
                f"Unsupported format: {path.suffix}. "
                f"Supported: {self.SUPPORTED_FORMATS}"
            )

        # librosa handles decoding, resampling and mono conversion
        try:
            audio, sr = librosa.load(str(path), sr=self.target_sr, mono=True)
        except (RuntimeError, EOFError, audioread.exceptions.DecodeError) as e:
            raise ValueError(f"Could not decode audio file {path}: {e}") from e

        if self.normalize:
            audio = self._normalize(audio)

        return audio, sr

    def _normalize(self, audio: np.ndarray) -> np.ndarray:
        """Normalize audio to [-1, 1] range using peak normalization."""
        peak = np.abs(audio).max()
        if peak > 0:
            audio = audio / peak
        return audio

    def hop_length(self, sr: int) -> int:
        """Samples between frame starts at the polling cadence."""
        return max(1, int(round(self.poll_interval * sr)))

    def frames(self, audio: np.ndarray, sr: int) -> Iterator[AudioFrame]:
        """
        Slice audio into the frames a live loop would have seen.

        Each frame holds the frame_size samples preceding its tick and is
        stamped with the tick time (the end of the window).

        Args:
            audio: Mono audio array
            sr: Sample rate

        Yields:
            AudioFrame per polling tick
        """
        audio = np.asarray(audio, dtype=np.float64)
        if len(audio) < self.frame_size:
            warnings.warn(
                f"Audio shorter than one frame ({len(audio)} samples), zero-padded"
            )
            audio = librosa.util.fix_length(audio, size=self.frame_size)

        hop = self.hop_length(sr)
        windows = librosa.util.frame(audio, frame_length=self.frame_size, hop_length=hop)

        for i in range(windows.shape[-1]):
            end = i * hop + self.frame_size
            yield AudioFrame(samples=windows[:, i], sample_rate=sr, time=end / sr)

    def get_duration(self, audio: np.ndarray, sr: Optional[int] = None) -> float:
        """Get duration in seconds."""
        sr = sr or self.target_sr
        return len(audio) / sr

"""AudioFrame - one polling tick worth of input samples."""

from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class AudioFrame:
    """A fixed-length block of mono samples captured at one tick."""

    samples: np.ndarray  # float samples in [-1, 1]
    sample_rate: int  # Hz
    time: float = 0.0  # Capture time in seconds

    def __post_init__(self):
        if self.sample_rate <= 0:
            raise ValueError(f"Sample rate must be positive, got {self.sample_rate}")
        samples = np.array(self.samples, dtype=np.float64)
        if samples.ndim != 1 or samples.size == 0:
            raise ValueError("AudioFrame needs a non-empty 1-D sample buffer")
        samples.setflags(write=False)
        object.__setattr__(self, "samples", samples)

    def __len__(self) -> int:
        return len(self.samples)

    @property
    def duration(self) -> float:
        """Frame length in seconds."""
        return len(self.samples) / self.sample_rate

    def rms(self, gain: float = 1.0) -> float:
        """RMS level of the frame after applying gain."""
        return float(np.sqrt(np.mean((self.samples * gain) ** 2)))

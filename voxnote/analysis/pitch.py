"""Single-frame fundamental frequency estimation by autocorrelation."""

from dataclasses import dataclass
from typing import Optional

import librosa
import numpy as np

from ..core.constants import CENTER_CLIP, MIN_PEAK_RATIO, PEAK_TOLERANCE, SILENCE_RMS
from ..input.frame import AudioFrame

_EPS = 1e-12


@dataclass
class EstimatorConfig:
    """Configuration for PitchEstimator.

    Attributes:
        remove_dc: Subtract the frame mean before analysis (default: True)
        silence_rms: Frames quieter than this RMS have no pitch (default: 0.01)
        center_clip: Normalized magnitude below which samples are zeroed
            before correlation, 0 disables clipping (default: 0.2)
        min_peak_ratio: Minimum ratio of the strongest correlation peak to the
            zero-lag energy, 0 accepts any peak (default: 0.3)
        peak_tolerance: The first normalized correlation peak reaching this
            fraction of the best one is taken as the period, so a peak at
            twice the period cannot halve the estimate (default: 0.9)
    """

    remove_dc: bool = True
    silence_rms: float = SILENCE_RMS
    center_clip: float = CENTER_CLIP
    min_peak_ratio: float = MIN_PEAK_RATIO
    peak_tolerance: float = PEAK_TOLERANCE

    def __post_init__(self):
        if not 0.0 <= self.center_clip < 1.0:
            raise ValueError(f"center_clip must be in [0, 1), got {self.center_clip}")
        if self.silence_rms < 0 or self.min_peak_ratio < 0:
            raise ValueError("silence_rms and min_peak_ratio must be non-negative")
        if not 0.0 < self.peak_tolerance <= 1.0:
            raise ValueError(f"peak_tolerance must be in (0, 1], got {self.peak_tolerance}")


class PitchEstimator:
    """Estimate the fundamental frequency of one audio frame.

    Stateless: every call depends only on the frame passed in.
    """

    def __init__(self, config: Optional[EstimatorConfig] = None):
        """
        Initialize PitchEstimator.

        Args:
            config: Optional EstimatorConfig, defaults are used if omitted
        """
        self.config = config if config is not None else EstimatorConfig()

    def estimate(self, frame: AudioFrame) -> Optional[float]:
        """
        Estimate the fundamental frequency of a frame.

        Args:
            frame: Audio frame to analyze

        Returns:
            Frequency in Hz, or None when the frame is silent, noisy,
            or has no reliable periodicity
        """
        return self.estimate_samples(frame.samples, frame.sample_rate)

    def estimate_samples(self, samples: np.ndarray, sr: int) -> Optional[float]:
        """Estimate the fundamental frequency of a raw sample buffer."""
        if sr <= 0:
            raise ValueError(f"Sample rate must be positive, got {sr}")
        x = np.asarray(samples, dtype=np.float64)
        if x.size < 3:
            return None

        if self.config.remove_dc:
            x = x - np.mean(x)

        # Noise gate
        rms = np.sqrt(np.mean(x**2))
        if rms < self.config.silence_rms:
            return None

        peak = np.max(np.abs(x))
        if peak < _EPS:
            return None
        x = x / peak

        if self.config.center_clip > 0:
            x = np.where(np.abs(x) < self.config.center_clip, 0.0, x)

        correlation = librosa.autocorrelate(x)
        lag = self._find_period(x, correlation)
        if lag is None:
            return None

        return sr / lag

    def _find_period(self, x: np.ndarray, correlation: np.ndarray) -> Optional[float]:
        """
        Locate the fundamental period in an autocorrelation function.

        The strongest raw peak decides whether the frame is periodic at all.
        The period itself is read from the normalized correlation, taking
        the first peak close enough to the best one.

        Returns:
            Fractional lag in samples, or None if no reliable peak exists
        """
        energy = correlation[0]
        if energy <= _EPS:
            return None

        # Skip the zero-lag peak and its falling edge
        rising = np.flatnonzero(correlation[:-1] <= correlation[1:])
        if rising.size == 0:
            return None
        start = int(rising[0])

        maxpos = start + int(np.argmax(correlation[start:]))
        maxval = correlation[maxpos]
        if maxpos == 0 or maxval / energy < self.config.min_peak_ratio:
            return None

        nsdf = self._normalize_correlation(x, correlation)

        # The raw peak sits a little early for long periods; search a bit past it
        end = min(len(nsdf) - 1, maxpos + maxpos // 4 + 2)
        lags = np.arange(max(start, 1), end)
        is_peak = (nsdf[lags] >= nsdf[lags - 1]) & (nsdf[lags] >= nsdf[lags + 1])
        peaks = lags[is_peak]
        if peaks.size == 0:
            return self._interpolate_peak(correlation, maxpos)

        best = np.max(nsdf[peaks])
        if best <= 0:
            return self._interpolate_peak(correlation, maxpos)
        threshold = self.config.peak_tolerance * best
        pos = int(peaks[np.argmax(nsdf[peaks] >= threshold)])
        return self._interpolate_peak(nsdf, pos)

    @staticmethod
    def _normalize_correlation(x: np.ndarray, correlation: np.ndarray) -> np.ndarray:
        """
        Divide each lag by the energy of the samples that overlap at it.

        A periodic signal scores 1.0 at its period whatever the lag, so long
        periods are not pulled toward shorter lags.
        """
        n = len(correlation)
        cumulative = np.cumsum(x[:n] ** 2)
        lags = np.arange(n)
        head = cumulative[n - 1 - lags]
        tail = cumulative[-1] - np.concatenate(([0.0], cumulative[:-1]))
        overlap = head + tail
        return np.where(overlap > _EPS, 2.0 * correlation / np.maximum(overlap, _EPS), 0.0)

    @staticmethod
    def _interpolate_peak(correlation: np.ndarray, pos: int) -> Optional[float]:
        """Refine an integer peak lag with parabolic interpolation."""
        lag = float(pos)
        if 0 < pos < len(correlation) - 1:
            x1, x2, x3 = correlation[pos - 1], correlation[pos], correlation[pos + 1]
            a = (x1 + x3 - 2 * x2) / 2
            b = (x3 - x1) / 2
            if a != 0:
                lag = lag - b / (2 * a)
        if lag <= 0:
            return None
        return lag

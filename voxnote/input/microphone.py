"""Live microphone input as a stream of AudioFrames."""

import logging
import queue
import time
from typing import Callable, Iterator, Optional

import numpy as np

from ..core.constants import DEFAULT_FRAME_SIZE, DEFAULT_SR, POLL_INTERVAL
from .frame import AudioFrame

logger = logging.getLogger(__name__)


class MicrophoneSource:
    """Capture audio from an input device, one frame per polling tick.

    Every tick yields the most recent frame_size samples, so consecutive
    frames overlap the way an analyser buffer does. Blocks the consumer has
    not read yet are held in a bounded backlog; when it is full the oldest
    block is dropped, and a slow reader catches up on its next read.
    """

    def __init__(
        self,
        sample_rate: int = DEFAULT_SR,
        frame_size: int = DEFAULT_FRAME_SIZE,
        poll_interval: float = POLL_INTERVAL,
        device: Optional[int] = None,
        max_pending: int = 64,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize MicrophoneSource.

        Args:
            sample_rate: Capture sample rate in Hz
            frame_size: Samples per yielded frame
            poll_interval: Seconds between yielded frames
            device: Input device index, None for the system default
            max_pending: Most captured blocks held before the oldest is dropped
            clock: Time source used to stamp frames
        """
        if max_pending <= 0:
            raise ValueError(f"max_pending must be positive, got {max_pending}")
        self.sample_rate = sample_rate
        self.frame_size = frame_size
        self.block_size = max(1, int(round(poll_interval * sample_rate)))
        self.device = device
        self._clock = clock
        self._blocks: "queue.Queue[np.ndarray]" = queue.Queue(maxsize=max_pending)
        self.dropped_blocks = 0
        self._buffer = np.zeros(frame_size, dtype=np.float64)
        self._stream = None

    @property
    def is_open(self) -> bool:
        return self._stream is not None

    def open(self) -> None:
        """Start capturing.

        Raises:
            RuntimeError: If sounddevice or PortAudio is unavailable
        """
        if self._stream is not None:
            return
        try:
            import sounddevice as sd
        except (ImportError, OSError) as e:
            raise RuntimeError(
                "Live input needs sounddevice and PortAudio. Run: pip install sounddevice"
            ) from e

        self._stream = sd.InputStream(
            samplerate=self.sample_rate,
            blocksize=self.block_size,
            device=self.device,
            channels=1,
            dtype="float32",
            callback=self._on_audio,
        )
        self._stream.start()
        logger.debug("Opened input device %s at %d Hz", self.device, self.sample_rate)

    def close(self) -> None:
        """Stop capturing."""
        if self._stream is None:
            return
        self._stream.stop()
        self._stream.close()
        self._stream = None

    def __enter__(self) -> "MicrophoneSource":
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _on_audio(self, indata, frames, time_info, status) -> None:
        if status:
            logger.warning("Audio input status: %s", status)
        block = np.array(indata[:, 0], dtype=np.float64)
        try:
            self._blocks.put_nowait(block)
        except queue.Full:
            try:
                self._blocks.get_nowait()
            except queue.Empty:
                pass
            self.dropped_blocks += 1
            if self.dropped_blocks == 1 or self.dropped_blocks % 100 == 0:
                logger.warning("Input backlog full, dropped %d blocks", self.dropped_blocks)
            self._blocks.put_nowait(block)

    def push(self, block: np.ndarray) -> AudioFrame:
        """Append a block of samples and return the current frame."""
        block = np.asarray(block, dtype=np.float64)[-self.frame_size:]
        self._buffer = np.concatenate([self._buffer[len(block):], block])
        return AudioFrame(samples=self._buffer, sample_rate=self.sample_rate, time=self._clock())

    def read(self, timeout: Optional[float] = 1.0) -> Optional[AudioFrame]:
        """
        Wait for captured audio and return the newest frame.

        Every block waiting in the backlog is consumed, so a reader that
        fell behind gets the latest audio rather than a stale frame.

        Args:
            timeout: Seconds to wait for the first block, None waits forever

        Returns:
            AudioFrame, or None if nothing arrived before the timeout
        """
        try:
            blocks = [self._blocks.get(timeout=timeout)]
        except queue.Empty:
            return None
        while True:
            try:
                blocks.append(self._blocks.get_nowait())
            except queue.Empty:
                break
        return self.push(np.concatenate(blocks))

    def __iter__(self) -> Iterator[AudioFrame]:
        while self.is_open:
            frame = self.read()
            if frame is not None:
                yield frame

"""Transcription engine - the polling loop that owns all live state.

Each tick takes one audio frame, decides whether the input gate is open,
estimates the pitch and advances the note segmenter. Configuration
changes coming from another thread are queued with submit_config() and
applied at the start of the next tick, so the loop is the only writer of
its state.
"""

import logging
import queue
import threading
import time
from typing import Callable, Iterable, List, Optional

from ..analysis import PitchEstimator
from ..core import EngineConfig, RecordedNote, freq_to_midi_float
from ..input.frame import AudioFrame
from .segmenter import EngineState, NoteEvent, NoteSegmenter, WorkstationMode

logger = logging.getLogger(__name__)

EventListener = Callable[[NoteEvent], None]


class TranscriptionEngine:
    """Drive pitch estimation and note segmentation from audio frames."""

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        estimator: Optional[PitchEstimator] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize TranscriptionEngine.

        Args:
            config: Initial EngineConfig
            estimator: PitchEstimator to use (default settings if omitted)
            clock: Time source used when no explicit time is given
        """
        self.segmenter = NoteSegmenter(config)
        self.estimator = estimator if estimator is not None else PitchEstimator()
        self._clock = clock
        self._pending: "queue.SimpleQueue[EngineConfig]" = queue.SimpleQueue()
        self._listeners: List[EventListener] = []
        self._stop = threading.Event()

        # Last measurements, for meters and displays
        self.level = 0.0
        self.frequency: Optional[float] = None

    @property
    def config(self) -> EngineConfig:
        return self.segmenter.config

    @property
    def state(self) -> EngineState:
        return self.segmenter.state

    @property
    def mode(self) -> WorkstationMode:
        return self.segmenter.state.mode

    def add_listener(self, listener: EventListener) -> None:
        """Register a callable that receives every emitted event."""
        self._listeners.append(listener)

    def remove_listener(self, listener: EventListener) -> None:
        self._listeners.remove(listener)

    # === Configuration ===

    def apply_config(self, config: EngineConfig) -> None:
        """Apply a configuration immediately. Call from the loop thread only."""
        self.segmenter.apply_config(config)

    def submit_config(self, config: EngineConfig) -> None:
        """Publish a configuration from any thread; applied on the next tick."""
        self._pending.put(config)

    def _apply_pending(self) -> None:
        latest = None
        while True:
            try:
                latest = self._pending.get_nowait()
            except queue.Empty:
                break
        if latest is not None:
            self.apply_config(latest)

    # === Modes and recording ===

    def set_mode(self, mode: WorkstationMode) -> None:
        """Switch between IDLE, MIDI and VOICE."""
        self.segmenter.set_mode(mode)

    def start_recording(self, now: Optional[float] = None) -> None:
        """Start a new recording."""
        now = self._clock() if now is None else now
        self._dispatch(self.segmenter.start_recording(now))

    def stop_recording(self, now: Optional[float] = None) -> List[RecordedNote]:
        """Stop recording and return the recorded notes."""
        now = self._clock() if now is None else now
        return self.segmenter.stop_recording(now)

    def release(self, now: Optional[float] = None) -> None:
        """Silence every voice."""
        now = self._clock() if now is None else now
        self._dispatch(self.segmenter.release(now))

    # === Polling loop ===

    def tick(self, frame: AudioFrame, now: Optional[float] = None) -> List[NoteEvent]:
        """
        Process one frame.

        Args:
            frame: Audio frame for this tick
            now: Tick time in seconds (default: the frame's capture time)

        Returns:
            Events emitted during this tick
        """
        self._apply_pending()
        now = frame.time if now is None else now
        config = self.config

        self.level = frame.rms(gain=config.mic_boost)
        gate_open = self.level > config.sensitivity and self.mode.detects

        self.frequency = None
        midi_float = None
        if gate_open:
            self.frequency = self.estimator.estimate(frame)
            if self.frequency is not None:
                midi_float = freq_to_midi_float(self.frequency)

        events = self.segmenter.process(midi_float, gate_open, now)
        self._dispatch(events)
        return events

    def run(self, frames: Iterable[AudioFrame]) -> int:
        """
        Run the loop over a frame source until it ends or stop() is called.

        Returns:
            Number of frames processed
        """
        self._stop.clear()
        count = 0
        for frame in frames:
            if self._stop.is_set():
                break
            self.tick(frame)
            count += 1
        return count

    def stop(self) -> None:
        """Ask run() to return after the current tick. Thread-safe."""
        self._stop.set()

    def _dispatch(self, events: List[NoteEvent]) -> None:
        for event in events:
            for listener in self._listeners:
                listener(event)

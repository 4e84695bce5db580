"""Transcription layer - Live note detection from audio frames.

This layer converts a stream of frames into note events:
- Note segmentation (onsets, offsets, retriggers, recording)
- The polling engine that owns segmentation state
"""

from .segmenter import (
    NoteSegmenter,
    NoteEvent,
    EventType,
    EngineState,
    ActiveNote,
    WorkstationMode,
)
from .engine import TranscriptionEngine

__all__ = [
    "NoteSegmenter",
    "NoteEvent",
    "EventType",
    "EngineState",
    "ActiveNote",
    "WorkstationMode",
    "TranscriptionEngine",
]

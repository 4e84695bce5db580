"""voxnote - Live voice and instrument to note transcription.

Architecture Layers:
    1. input/         - Audio frame sources (files, microphone)
    2. analysis/      - Pitch estimation (autocorrelation)
    3. inference/     - Scale snapping and diatonic harmonization
    4. transcription/ - Note segmentation and the polling engine
    5. processing/    - Note post-processing (silence compaction)
    6. output/        - Export (MIDI)
"""

__version__ = "0.1.0"

# Core types
from .core import EngineConfig, RecordedNote, ScaleType, Session

# Input layer
from .input import AudioFrame, AudioLoader, MicrophoneSource

# Analysis layer
from .analysis import PitchEstimator, EstimatorConfig

# Inference layer
from .inference import ScaleChord, snap_to_scale, chord_for

# Transcription layer
from .transcription import (
    NoteSegmenter,
    NoteEvent,
    EventType,
    WorkstationMode,
    TranscriptionEngine,
)

# Processing layer
from .processing import SilenceCompactor

# Output layer
from .output import MIDIExporter

__all__ = [
    # Core
    "EngineConfig",
    "RecordedNote",
    "ScaleType",
    "Session",
    # Input
    "AudioFrame",
    "AudioLoader",
    "MicrophoneSource",
    # Analysis
    "PitchEstimator",
    "EstimatorConfig",
    # Inference
    "ScaleChord",
    "snap_to_scale",
    "chord_for",
    # Transcription
    "NoteSegmenter",
    "NoteEvent",
    "EventType",
    "WorkstationMode",
    "TranscriptionEngine",
    # Processing
    "SilenceCompactor",
    # Output
    "MIDIExporter",
]

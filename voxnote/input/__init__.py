"""Input layer - Audio frame sources.

This layer delivers one AudioFrame per polling tick:
- AudioLoader replays decoded files
- MicrophoneSource captures live input
"""

from .frame import AudioFrame
from .loader import AudioLoader
from .microphone import MicrophoneSource

__all__ = [
    "AudioFrame",
    "AudioLoader",
    "MicrophoneSource",
]

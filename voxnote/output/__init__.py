"""Output layer - Export to other formats.

This layer handles exporting recorded sessions to:
- MIDI files (lead plus optional harmony track)
"""

from .midi import MIDIExporter

__all__ = [
    "MIDIExporter",
]

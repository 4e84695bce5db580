"""Recorded session - a note list plus the settings it was played with."""

import json
import time
import uuid
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from .constants import DEFAULT_TEMPO
from .note import RecordedNote
from .scales import ScaleType


@dataclass
class Session:
    """A recorded performance."""

    id: str
    timestamp: float  # Epoch milliseconds
    notes: List[RecordedNote] = field(default_factory=list)
    instrument_id: str = "concert-grand"
    bpm: float = DEFAULT_TEMPO
    scale: ScaleType = ScaleType.MAJOR

    @classmethod
    def create(
        cls,
        notes: List[RecordedNote],
        instrument_id: str = "concert-grand",
        bpm: float = DEFAULT_TEMPO,
        scale: ScaleType = ScaleType.MAJOR,
    ) -> "Session":
        """Create a new session stamped with a fresh id and the current time."""
        return cls(
            id=uuid.uuid4().hex[:9],
            timestamp=time.time() * 1000.0,
            notes=list(notes),
            instrument_id=instrument_id,
            bpm=bpm,
            scale=scale,
        )

    @property
    def duration(self) -> float:
        """End time of the last note in seconds."""
        return max((n.end for n in self.notes), default=0.0)

    def playback_notes(self, skip_silences: bool = False, max_gap: Optional[float] = None) -> List[RecordedNote]:
        """Notes prepared for playback, optionally with long silences removed."""
        if not skip_silences:
            return list(self.notes)
        from ..processing import SilenceCompactor

        compactor = SilenceCompactor() if max_gap is None else SilenceCompactor(max_gap=max_gap)
        return compactor.compact(self.notes)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "timestamp": self.timestamp,
            "midiNotes": [n.to_dict() for n in self.notes],
            "instrumentId": self.instrument_id,
            "bpm": self.bpm,
            "scale": self.scale.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Session":
        return cls(
            id=str(data["id"]),
            timestamp=float(data.get("timestamp", 0.0)),
            notes=[RecordedNote.from_dict(n) for n in data.get("midiNotes", [])],
            instrument_id=data.get("instrumentId", "concert-grand"),
            bpm=float(data.get("bpm", DEFAULT_TEMPO)),
            scale=ScaleType.from_name(data.get("scale", "MAJOR")),
        )

    def save(self, path: Path) -> None:
        """Write the session as JSON."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(self.to_dict(), indent=2))

    @classmethod
    def load(cls, path: Path) -> "Session":
        """Read a session written by save()."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Session file not found: {path}")
        return cls.from_dict(json.loads(path.read_text()))

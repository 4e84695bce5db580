"""Silence compaction - Remove dead air between recorded notes."""

from dataclasses import dataclass, replace
from typing import List, Tuple, Union

from ..core import GAP_MAX, RecordedNote


@dataclass
class CompactionStats:
    """Statistics from a compaction pass."""

    original_span: float = 0.0
    compacted_span: float = 0.0
    gaps_clamped: int = 0

    @property
    def removed_silence(self) -> float:
        """Seconds of silence removed."""
        return self.original_span - self.compacted_span


class SilenceCompactor:
    """Shorten long gaps between notes while keeping note order and lengths."""

    def __init__(self, max_gap: float = GAP_MAX):
        """
        Initialize SilenceCompactor.

        Args:
            max_gap: Longest silence kept between consecutive notes, in seconds
        """
        if max_gap < 0:
            raise ValueError(f"max_gap must be non-negative, got {max_gap}")
        self.max_gap = max_gap

    def compact(
        self,
        notes: List[RecordedNote],
        return_stats: bool = False,
    ) -> Union[List[RecordedNote], Tuple[List[RecordedNote], CompactionStats]]:
        """
        Rewrite note start times so no gap exceeds max_gap.

        The first note is moved to time 0. Pitches and durations are kept.

        Args:
            notes: Notes to compact, in any order
            return_stats: Whether to return compaction statistics

        Returns:
            New list sorted by start time, optionally with statistics
        """
        stats = CompactionStats()
        ordered = sorted(notes, key=lambda n: n.time)

        if not ordered:
            if return_stats:
                return [], stats
            return []

        first = ordered[0]
        time_offset = first.time
        last_note_end = first.duration
        compacted = [replace(first, time=0.0)]

        for note in ordered[1:]:
            gap = (note.time - time_offset) - last_note_end
            if gap > self.max_gap:
                time_offset += gap - self.max_gap
                stats.gaps_clamped += 1
            start = note.time - time_offset
            last_note_end = start + note.duration
            compacted.append(replace(note, time=start))

        stats.original_span = max(n.end for n in ordered) - first.time
        stats.compacted_span = max(n.end for n in compacted)

        if return_stats:
            return compacted, stats
        return compacted

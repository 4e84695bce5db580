"""Scale types and their pitch-class offsets."""

from enum import Enum
from typing import Tuple


class ScaleType(Enum):
    """Scales available for pitch quantization."""

    MAJOR = "MAJOR"
    MINOR = "MINOR"
    PENTATONIC = "PENTATONIC"
    BLUES = "BLUES"
    CHROMATIC = "CHROMATIC"

    @property
    def offsets(self) -> Tuple[int, ...]:
        """Pitch classes (0-11) of the scale, ascending."""
        return SCALE_OFFSETS[self]

    @classmethod
    def from_name(cls, name: str) -> "ScaleType":
        """Look up a scale by case-insensitive name."""
        try:
            return cls[name.strip().upper()]
        except KeyError:
            valid = ", ".join(s.value for s in cls)
            raise ValueError(f"Unknown scale: {name!r}. Valid: {valid}") from None


SCALE_OFFSETS = {
    ScaleType.MAJOR: (0, 2, 4, 5, 7, 9, 11),
    ScaleType.MINOR: (0, 2, 3, 5, 7, 8, 10),
    ScaleType.PENTATONIC: (0, 2, 4, 7, 9),
    ScaleType.BLUES: (0, 3, 5, 6, 7, 10),
    ScaleType.CHROMATIC: tuple(range(12)),
}

"""Core data types for coordinate liftover."""

from dataclasses import dataclass, field
from typing import Dict, List, Any


@dataclass(frozen=True)
class CoordinateInterval:
    """Interval on a named chromosome (start and end inclusive)."""
    name: str
    start: int
    end: int


def validate_interval(interval: CoordinateInterval) -> None:
    """
    Validate interval data integrity.

    Args:
        interval: CoordinateInterval to validate

    Raises:
        ValueError: If validation fails
    """
    if not interval.name:
        raise ValueError("Chromosome name must not be empty")
    if interval.start > interval.end:
        raise ValueError(f"Start coordinate {interval.start} must be <= end {interval.end}")


@dataclass(frozen=True)
class AnnotatedCoordinate:
    """
    Interval with strand, coordinate system and assembly metadata.

    Used for both sides of a Mapping. Wraps a CoordinateInterval and
    exposes its fields through properties.
    """
    interval: CoordinateInterval
    strand: int
    coord_system: str
    assembly: str

    def __post_init__(self) -> None:
        if isinstance(self.strand, bool) or not isinstance(self.strand, int):
            raise ValueError(f"Invalid strand: {self.strand!r}")
        if self.strand not in (1, -1):
            raise ValueError(f"Invalid strand: {self.strand}")

    @property
    def name(self) -> str:
        return self.interval.name

    @property
    def start(self) -> int:
        return self.interval.start

    @property
    def end(self) -> int:
        return self.interval.end

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "start": self.start,
            "end": self.end,
            "strand": self.strand,
            "coord_system": self.coord_system,
            "assembly": self.assembly
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AnnotatedCoordinate":
        return cls(
            interval=CoordinateInterval(str(data["name"]), int(data["start"]), int(data["end"])),
            strand=int(data["strand"]),
            coord_system=data["coord_system"],
            assembly=data["assembly"]
        )


@dataclass(frozen=True)
class TargetRegion:
    """Region on the target assembly as reported by a mapping provider."""
    name: str
    start: int
    end: int
    strand: int
    coord_system: str
    coord_system_version: str


@dataclass(frozen=True)
class Segment:
    """
    One contiguous piece of a projection.

    Offsets are 0-based and relative to the start of the queried interval.
    """
    source_offset_start: int
    source_offset_end: int
    target: TargetRegion


@dataclass(frozen=True)
class Mapping:
    """Correspondence between a source sub-range and its target region."""
    original: AnnotatedCoordinate
    mapped: AnnotatedCoordinate

    def to_dict(self) -> Dict[str, Any]:
        return {
            "original": self.original.to_dict(),
            "mapped": self.mapped.to_dict()
        }


MappingBatch = List[Mapping]


@dataclass
class ValidationResult:
    """Result of validation operation."""
    is_valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    details: Dict[str, Any] = field(default_factory=dict)

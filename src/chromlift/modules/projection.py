"""Turn provider segments into original/mapped coordinate pairs."""

from typing import List, Sequence

from chromlift.core.types import (
    AnnotatedCoordinate, CoordinateInterval, Mapping, Segment
)


def project_segments(
    interval: CoordinateInterval,
    source_region: AnnotatedCoordinate,
    segments: Sequence[Segment]
) -> List[Mapping]:
    """
    Build one Mapping per segment, in segment order.

    The original side takes its name, strand, coordinate system and assembly
    from ``source_region`` (the queried region) and its bounds from the
    segment offsets applied to ``interval.start``. The mapped side is copied
    from the segment's target region.

    Args:
        interval: Queried interval
        source_region: Provider's view of the queried region
        segments: Segments returned by the provider for ``interval``

    Returns:
        List of mappings, empty when the interval did not map

    Example:
        >>> # chr1:1000-2000 with one segment at offsets 0..999
        >>> project_segments(interval, region, [segment])[0].original.end
        1999
    """
    mappings = []
    for segment in segments:
        original = AnnotatedCoordinate(
            interval=CoordinateInterval(
                source_region.name,
                interval.start + segment.source_offset_start,
                interval.start + segment.source_offset_end
            ),
            strand=source_region.strand,
            coord_system=source_region.coord_system,
            assembly=source_region.assembly
        )

        target = segment.target
        mapped = AnnotatedCoordinate(
            interval=CoordinateInterval(target.name, target.start, target.end),
            strand=target.strand,
            coord_system=target.coord_system,
            assembly=target.coord_system_version
        )

        mappings.append(Mapping(original=original, mapped=mapped))

    return mappings

"""Input interval loading from command-line triples and BED-like files."""

import gzip
import logging
from pathlib import Path
from typing import List, Optional, Sequence, Union

from chromlift.core.types import CoordinateInterval, validate_interval
from chromlift.core.exceptions import InputError


logger = logging.getLogger(__name__)

HEADER_PREFIXES = ("#", "track", "browser")


def interval_from_triple(
    name: str,
    start: Union[str, int],
    end: Union[str, int],
    line_number: Optional[int] = None,
    source: Optional[str] = None
) -> CoordinateInterval:
    """
    Build a validated interval from raw tokens.

    Args:
        name: Chromosome name
        start: Start coordinate (inclusive)
        end: End coordinate (inclusive)
        line_number: Line the tokens came from, for error messages
        source: File the tokens came from, for error messages

    Returns:
        CoordinateInterval

    Raises:
        InputError: Non-numeric coordinates, start > end or empty name
    """
    name = str(name).strip()
    try:
        start_pos = int(start)
        end_pos = int(end)
    except (TypeError, ValueError):
        raise InputError(
            f"Start and end must be integers, got {start!r} and {end!r}",
            line_number=line_number, source=source
        )

    interval = CoordinateInterval(name, start_pos, end_pos)
    try:
        validate_interval(interval)
    except ValueError as e:
        raise InputError(str(e), line_number=line_number, source=source)

    return interval


def read_interval_file(input_file: Union[str, Path]) -> List[CoordinateInterval]:
    """
    Read intervals from a whitespace-delimited file with three or more columns.

    Blank lines, comments and track/browser header lines are skipped.
    Columns after the third are ignored. Files ending in .gz are decompressed.

    Args:
        input_file: Path to the interval file

    Returns:
        Intervals in file order

    Raises:
        InputError: Missing file or malformed row
    """
    input_file = Path(input_file)
    if not input_file.exists():
        raise InputError(f"Input file does not exist: {input_file}")

    opener = gzip.open if input_file.suffix == ".gz" else open
    intervals = []

    with opener(input_file, 'rt') as f:
        for line_num, line in enumerate(f, 1):
            line = line.strip()

            if not line or line.startswith(HEADER_PREFIXES):
                continue

            parts = line.split()
            if len(parts) < 3:
                raise InputError(
                    f"Expected at least 3 columns, found {len(parts)}",
                    line_number=line_num, source=str(input_file)
                )

            intervals.append(interval_from_triple(
                parts[0], parts[1], parts[2], line_number=line_num, source=str(input_file)
            ))

    logger.info(f"Read {len(intervals)} intervals from {input_file}")
    return intervals


def load_intervals(
    region: Optional[Sequence[str]] = None,
    input_file: Optional[Union[str, Path]] = None
) -> List[CoordinateInterval]:
    """
    Load the input batch from exactly one source.

    Args:
        region: (chromosome, start, end) tokens from the command line
        input_file: BED-like interval file

    Returns:
        List of intervals

    Raises:
        InputError: No source, both sources, or malformed input
    """
    if region and input_file:
        raise InputError("Give either a region or an input file, not both")
    if input_file:
        return read_interval_file(input_file)
    if region:
        if len(region) != 3:
            raise InputError(f"A region needs CHROM START END, got {len(region)} values")
        return [interval_from_triple(*region)]
    raise InputError("No input: give CHROM START END or --input-file")

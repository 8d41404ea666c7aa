"""Output generation for lifted mappings."""

import json
import logging
import os
import sys
import tempfile
from pathlib import Path
from typing import List, Optional, Union

from chromlift.core.types import AnnotatedCoordinate, Mapping
from chromlift.core.exceptions import FormatError


logger = logging.getLogger(__name__)

SUPPORTED_FORMATS = ("json", "bed")


def validate_output_format(output_format: str) -> str:
    """
    Normalize and check an output format identifier.

    Args:
        output_format: Format name, case-insensitive

    Returns:
        Lower-case format name

    Raises:
        FormatError: Unknown format
    """
    normalized = (output_format or "").strip().lower()
    if normalized not in SUPPORTED_FORMATS:
        raise FormatError(
            f"Unsupported output format: {output_format!r} "
            f"(choose from {', '.join(SUPPORTED_FORMATS)})",
            output_format=output_format
        )
    return normalized


def format_json(mappings: List[Mapping], indent: Optional[int] = 2) -> str:
    """Serialize mappings as one JSON array of original/mapped records."""
    return json.dumps([mapping.to_dict() for mapping in mappings], indent=indent)


def format_bed(mappings: List[Mapping]) -> str:
    """One space-delimited line per mapping with the mapped side only."""
    return "".join(
        f"{m.mapped.name} {m.mapped.start} {m.mapped.end}\n" for m in mappings
    )


def parse_json(text: str) -> List[Mapping]:
    """
    Read mappings back from JSON output.

    Raises:
        FormatError: Text is not a list of original/mapped records
    """
    try:
        records = json.loads(text)
        return [
            Mapping(
                original=AnnotatedCoordinate.from_dict(record["original"]),
                mapped=AnnotatedCoordinate.from_dict(record["mapped"])
            )
            for record in records
        ]
    except (json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
        raise FormatError(f"Cannot read mappings from JSON: {e}", output_format="json")


def render_mappings(mappings: List[Mapping], output_format: str, indent: Optional[int] = 2) -> str:
    output_format = validate_output_format(output_format)
    if output_format == "json":
        return format_json(mappings, indent=indent) + "\n"
    return format_bed(mappings)


def _umask() -> int:
    mask = os.umask(0)
    os.umask(mask)
    return mask


def write_mappings(
    mappings: List[Mapping],
    output_format: str,
    output_path: Optional[Union[str, Path]] = None,
    indent: Optional[int] = 2
) -> None:
    """
    Write mappings to a file or standard output.

    Files are written to a temporary sibling and renamed into place, so a
    failed write leaves no partial output.

    Args:
        mappings: Complete mapping batch
        output_format: "json" or "bed"
        output_path: Destination file, standard output when None
        indent: JSON indentation
    """
    text = render_mappings(mappings, output_format, indent=indent)

    if output_path is None:
        sys.stdout.write(text)
        sys.stdout.flush()
        return

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(dir=output_path.parent, prefix=f".{output_path.name}.")
    try:
        with os.fdopen(fd, 'w') as f:
            f.write(text)
        # mkstemp creates 0600 files; apply the mode a plain open() would give
        os.chmod(tmp_name, 0o666 & ~_umask())
        os.replace(tmp_name, output_path)
    except OSError:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise

    logger.info(f"Wrote {len(mappings)} mappings to {output_path}")

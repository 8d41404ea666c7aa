"""Shared fixtures for chromlift tests."""

import logging
from typing import Dict, List, Optional

import pytest

from chromlift.core.types import (
    AnnotatedCoordinate, CoordinateInterval, Segment, TargetRegion
)
from chromlift.core.exceptions import ProviderError
from chromlift.modules.provider import AssemblyMappingProvider


class FakeProvider(AssemblyMappingProvider):
    """In-memory provider returning canned segments per interval."""

    def __init__(self, segments: Dict[CoordinateInterval, List[Segment]],
                 fail_on: Optional[CoordinateInterval] = None) -> None:
        self.segments = segments
        self.fail_on = fail_on
        self.calls: List[CoordinateInterval] = []
        self.closed = False

    def fetch_region(self, interval, assembly):
        return AnnotatedCoordinate(interval, 1, "chromosome", assembly)

    def project(self, interval, source_assembly, target_assembly):
        self.calls.append(interval)
        if interval == self.fail_on:
            raise ProviderError("service unavailable")
        return self.segments.get(interval, [])

    def close(self):
        self.closed = True


def make_segment(offset_start: int, offset_end: int, name: str = "1",
                 start: int = 5000, end: int = 5999, strand: int = 1,
                 assembly: str = "GRCh38") -> Segment:
    return Segment(
        source_offset_start=offset_start,
        source_offset_end=offset_end,
        target=TargetRegion(name, start, end, strand, "chromosome", assembly)
    )


@pytest.fixture
def interval():
    return CoordinateInterval("chr1", 1000, 2000)


@pytest.fixture
def source_region(interval):
    return AnnotatedCoordinate(interval, 1, "chromosome", "GRCh37")


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Undo setup_logging so caplog sees package records."""
    yield
    package_logger = logging.getLogger("chromlift")
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()
    package_logger.setLevel(logging.NOTSET)
    package_logger.propagate = True

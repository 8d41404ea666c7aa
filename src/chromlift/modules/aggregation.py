"""Sequential liftover of a batch of intervals."""

import logging
from typing import Dict, Iterable, List, Optional

from chromlift.core.types import CoordinateInterval, Mapping
from chromlift.core.exceptions import ProviderError
from chromlift.modules.provider import AssemblyMappingProvider
from chromlift.modules.projection import project_segments


class MappingAggregator:
    """
    Drive the provider and projector over a batch of intervals.

    Intervals are processed one at a time in input order and their mappings
    are concatenated. A provider failure on any interval aborts the batch.

    Args:
        provider: Connected mapping provider, shared by every call
        source_assembly: Assembly of the input coordinates
        target_assembly: Assembly to project onto
        logger: Logger for progress messages (module logger by default)
    """

    def __init__(
        self,
        provider: AssemblyMappingProvider,
        source_assembly: str,
        target_assembly: str,
        logger: Optional[logging.Logger] = None
    ) -> None:
        self.provider = provider
        self.source_assembly = source_assembly
        self.target_assembly = target_assembly
        self.logger = logger or logging.getLogger(__name__)
        self._summary = self._empty_summary()

    @staticmethod
    def _empty_summary() -> Dict[str, int]:
        return {
            "n_intervals": 0,
            "n_mappings": 0,
            "n_unmapped": 0,
            "n_split": 0
        }

    @property
    def summary(self) -> Dict[str, int]:
        """Counts from the last completed run."""
        return dict(self._summary)

    def aggregate(self, intervals: Iterable[CoordinateInterval]) -> List[Mapping]:
        """
        Lift every interval and return the flattened mappings.

        Args:
            intervals: Input intervals, in the order results should appear

        Returns:
            Mappings of interval 0, then interval 1, and so on

        Raises:
            ProviderError: Any provider call failed; no partial result is returned
        """
        results: List[Mapping] = []
        summary = self._empty_summary()

        for interval in intervals:
            label = f"{interval.name}:{interval.start}-{interval.end}"
            self.logger.debug(
                f"Projecting {label} from {self.source_assembly} to {self.target_assembly}"
            )

            try:
                source_region = self.provider.fetch_region(interval, self.source_assembly)
                segments = self.provider.project(
                    interval, self.source_assembly, self.target_assembly
                )
            except ProviderError as e:
                if e.interval is None:
                    e.interval = interval
                self.logger.debug(f"Projection of {label} failed, aborting batch")
                raise

            mappings = project_segments(interval, source_region, segments)

            summary["n_intervals"] += 1
            if not mappings:
                summary["n_unmapped"] += 1
                self.logger.warning(f"{label} does not map to {self.target_assembly}")
            elif len(mappings) > 1:
                summary["n_split"] += 1
                self.logger.debug(f"{label} split into {len(mappings)} segments")

            results.extend(mappings)

        summary["n_mappings"] = len(results)
        self._summary = summary
        self.logger.info(
            f"Lifted {summary['n_intervals']} intervals into {summary['n_mappings']} mappings "
            f"({summary['n_unmapped']} unmapped, {summary['n_split']} split)"
        )
        return results

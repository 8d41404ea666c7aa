"""Assembly mapping providers.

A provider owns all network access. The run creates exactly one provider
through ``connect`` and passes it by reference to the aggregation stage.
"""

import logging
import math
import time
from abc import ABC, abstractmethod
from typing import Dict, List, Any, Optional

import requests

from chromlift.core.types import AnnotatedCoordinate, CoordinateInterval, Segment, TargetRegion
from chromlift.core.exceptions import ConfigurationError, ProviderError


logger = logging.getLogger(__name__)

DEFAULT_SERVER = "https://rest.ensembl.org"
MAX_RATE_LIMIT_WAIT = 60.0


class AssemblyMappingProvider(ABC):
    """Source of coordinate projections between assemblies."""

    @abstractmethod
    def fetch_region(self, interval: CoordinateInterval, assembly: str) -> AnnotatedCoordinate:
        """Return the source region object for ``interval`` on ``assembly``."""

    @abstractmethod
    def project(
        self,
        interval: CoordinateInterval,
        source_assembly: str,
        target_assembly: str
    ) -> List[Segment]:
        """Return the segments of ``interval`` projected onto ``target_assembly``."""

    def close(self) -> None:
        """Release any held resources."""

    def __enter__(self) -> "AssemblyMappingProvider":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


class EnsemblRestProvider(AssemblyMappingProvider):
    """
    Provider backed by the Ensembl REST ``/map`` endpoint.

    Args:
        server: Base URL of the REST service
        species: Species name or alias understood by the service
        coord_system: Coordinate system of queried regions
        target_coord_system: Coordinate system to project onto
        timeout: Per-request timeout in seconds, None waits indefinitely
        session: Optional pre-built requests session
    """

    def __init__(
        self,
        server: str = DEFAULT_SERVER,
        species: str = "human",
        coord_system: str = "chromosome",
        target_coord_system: str = "chromosome",
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None
    ) -> None:
        self.server = server.rstrip("/")
        self.species = species
        self.coord_system = coord_system
        self.target_coord_system = target_coord_system
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({"Content-Type": "application/json"})

    def fetch_region(self, interval: CoordinateInterval, assembly: str) -> AnnotatedCoordinate:
        # Queried regions are always forward strand on the configured coordinate system
        return AnnotatedCoordinate(
            interval=interval,
            strand=1,
            coord_system=self.coord_system,
            assembly=assembly
        )

    def project(
        self,
        interval: CoordinateInterval,
        source_assembly: str,
        target_assembly: str
    ) -> List[Segment]:
        region = f"{interval.name}:{interval.start}..{interval.end}:1"
        url = f"{self.server}/map/{self.species}/{source_assembly}/{region}/{target_assembly}"
        logger.debug(f"Requesting projection: {url}")

        params = {
            "coord_system": self.coord_system,
            "target_coord_system": self.target_coord_system
        }
        data = self._get_json(url, interval, params=params)

        mappings = data.get("mappings") if isinstance(data, dict) else None
        if not isinstance(mappings, list):
            raise ProviderError(
                f"Malformed response for {region}: missing 'mappings'", interval=interval
            )

        return [self._parse_segment(entry, interval) for entry in mappings]

    def ping(self) -> None:
        """Check that the service answers, raising ProviderError otherwise."""
        data = self._get_json(f"{self.server}/info/ping")
        if not isinstance(data, dict) or not data.get("ping"):
            raise ProviderError(f"Service at {self.server} did not answer ping")

    def close(self) -> None:
        self.session.close()

    def _get_json(
        self,
        url: str,
        interval: Optional[CoordinateInterval] = None,
        params: Optional[Dict[str, str]] = None
    ) -> Any:
        """GET ``url`` and decode JSON, waiting once if rate limited."""
        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
            if response.status_code == 429:
                wait = _retry_after(response)
                logger.warning(f"Rate limited by {self.server}, retrying in {wait:.1f}s")
                time.sleep(wait)
                response = self.session.get(url, params=params, timeout=self.timeout)
        except requests.RequestException as e:
            raise ProviderError(f"Request to {self.server} failed: {e}", interval=interval)

        if not response.ok:
            raise ProviderError(
                f"{self.server} returned HTTP {response.status_code}: {_error_message(response)}",
                interval=interval,
                status_code=response.status_code
            )

        try:
            return response.json()
        except ValueError as e:
            raise ProviderError(f"Invalid JSON from {self.server}: {e}", interval=interval)

    @staticmethod
    def _parse_segment(entry: Dict[str, Any], interval: CoordinateInterval) -> Segment:
        try:
            original = entry["original"]
            mapped = entry["mapped"]
            target = TargetRegion(
                name=str(mapped["seq_region_name"]),
                start=int(mapped["start"]),
                end=int(mapped["end"]),
                strand=int(mapped["strand"]),
                coord_system=mapped["coord_system"],
                coord_system_version=mapped["assembly"]
            )
            return Segment(
                source_offset_start=int(original["start"]) - interval.start,
                source_offset_end=int(original["end"]) - interval.start,
                target=target
            )
        except (KeyError, TypeError, ValueError) as e:
            raise ProviderError(f"Malformed mapping entry {entry!r}: {e}", interval=interval)


def _retry_after(response: requests.Response) -> float:
    try:
        wait = float(response.headers.get("Retry-After", 1))
    except ValueError:
        wait = 1.0
    if not math.isfinite(wait):
        wait = 1.0
    return min(max(wait, 0.0), MAX_RATE_LIMIT_WAIT)


def _error_message(response: requests.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        return response.reason or response.text
    if isinstance(data, dict) and data.get("error"):
        return data["error"]
    return response.reason


def connect(config: Dict[str, Any]) -> EnsemblRestProvider:
    """
    Create the provider session for a run.

    Args:
        config: Full configuration dictionary

    Returns:
        Connected provider

    Raises:
        ConfigurationError: Missing server or species
        ProviderError: Service unreachable
    """
    provider_config = config.get("provider", {})
    server = provider_config.get("server") or DEFAULT_SERVER
    species = provider_config.get("species")

    if not server.startswith(("http://", "https://")):
        raise ConfigurationError(f"Provider server must be an http(s) URL, got: {server}")
    if not species:
        raise ConfigurationError("Provider species must be set")

    provider = EnsemblRestProvider(
        server=server,
        species=species,
        coord_system=provider_config.get("coord_system", "chromosome"),
        target_coord_system=provider_config.get("target_coord_system", "chromosome"),
        timeout=provider_config.get("timeout")
    )

    if provider_config.get("check_connection", True):
        logger.info(f"Connecting to {server}")
        try:
            provider.ping()
        except ProviderError:
            provider.close()
            raise

    return provider

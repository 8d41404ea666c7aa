"""Main liftover orchestration module."""

import logging
import time
from pathlib import Path
from typing import Dict, Any, Union, Optional, Sequence, List

from chromlift.core.types import Mapping
from chromlift.core.exceptions import ConfigurationError
from chromlift.utils.config import validate_configuration_schema
from chromlift.modules.intervals import load_intervals
from chromlift.modules.provider import AssemblyMappingProvider, connect
from chromlift.modules.aggregation import MappingAggregator
from chromlift.modules.output import validate_output_format, write_mappings


def run_liftover_pipeline(
    config: Dict[str, Any],
    region: Optional[Sequence[str]] = None,
    input_file: Optional[Union[str, Path]] = None,
    output_path: Optional[Union[str, Path]] = None,
    provider: Optional[AssemblyMappingProvider] = None,
    logger: Optional[logging.Logger] = None
) -> Dict[str, Any]:
    """
    Lift a batch of intervals and write the result.

    Configuration and input problems are reported before the provider is
    contacted. Output is only written once every interval has been lifted.

    Args:
        config: Complete configuration dictionary
        region: (chromosome, start, end) tokens for a single interval
        input_file: BED-like file of intervals
        output_path: Destination file, standard output when None
        provider: Already connected provider; one is created from config otherwise
        logger: Logger for progress messages

    Returns:
        Dictionary containing run results and metadata
    """
    logger = logger or logging.getLogger(__name__)

    validation_result = validate_configuration_schema(config)
    if not validation_result.is_valid:
        raise ConfigurationError(f"Configuration validation failed: {validation_result.errors}")
    for warning in validation_result.warnings:
        logger.warning(warning)

    output_config = config.get("output", {})
    output_format = validate_output_format(output_config.get("format", "json"))

    source_assembly = config.get("assembly", {}).get("source")
    target_assembly = config.get("assembly", {}).get("target")
    if not source_assembly or not target_assembly:
        raise ConfigurationError("Both source and target assemblies must be set")

    intervals = load_intervals(region=region, input_file=input_file)
    logger.info(f"Lifting {len(intervals)} intervals from {source_assembly} to {target_assembly}")

    start_time = time.time()
    owns_provider = provider is None
    if owns_provider:
        provider = connect(config)

    try:
        aggregator = MappingAggregator(
            provider=provider,
            source_assembly=source_assembly,
            target_assembly=target_assembly,
            logger=logger
        )
        mappings: List[Mapping] = aggregator.aggregate(intervals)
    finally:
        if owns_provider:
            provider.close()

    write_mappings(
        mappings,
        output_format,
        output_path=output_path,
        indent=output_config.get("indent", 2)
    )

    end_time = time.time()
    results = {
        "source_assembly": source_assembly,
        "target_assembly": target_assembly,
        "output_format": output_format,
        "output_path": str(output_path) if output_path else None,
        "runtime_seconds": end_time - start_time,
        "mappings": mappings
    }
    results.update(aggregator.summary)
    return results


def setup_logging(
    level: str,
    log_file: Optional[Path] = None,
    name: str = "chromlift"
) -> logging.Logger:
    """
    Configure and return the package logger.

    Messages go to standard error and, when given, to ``log_file``.

    Args:
        level: Logging level
        log_file: Optional log file path
        name: Logger name

    Returns:
        Configured logger
    """
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, level.upper()))
    logger.propagate = False

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    handlers = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file))
    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger

"""Command-line interface for chromlift."""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from chromlift import __version__
from chromlift.utils.config import (
    load_configuration, create_default_configuration, save_configuration, LOG_LEVELS
)
from chromlift.core.exceptions import ConfigurationError, LiftoverError


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the chromlift CLI."""
    parser = argparse.ArgumentParser(
        prog='chromlift',
        description='chromlift: convert genomic coordinates between reference assemblies',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Single region, JSON to stdout
  chromlift 10 25000 30000 --from GRCh37 --to GRCh38

  # BED file in, BED file out
  chromlift --input-file regions.bed --format bed --output lifted.bed

  # Generate config template
  chromlift --init-config chromlift.yaml
        """.strip()
    )

    parser.add_argument('region', nargs='*', metavar='CHROM START END',
                        help='Chromosome, start and end of a single region')

    special_group = parser.add_argument_group('Special modes')
    special_group.add_argument('--init-config', type=Path, metavar='FILE',
                               help='Create default configuration file and exit')

    input_group = parser.add_argument_group('Input/output')
    input_group.add_argument('--input-file', '-i', type=Path, metavar='FILE',
                             help='Whitespace-delimited file of regions (BED-like, 3+ columns)')
    input_group.add_argument('--output', '-o', type=Path, metavar='FILE',
                             help='Output file (default: standard output)')
    input_group.add_argument('--format', '-f', dest='output_format', metavar='FORMAT',
                             help='Output format: json or bed (default: json)')

    assembly_group = parser.add_argument_group('Assemblies')
    assembly_group.add_argument('--from', dest='source_assembly', metavar='ASSEMBLY',
                                help='Assembly of the input coordinates (default: GRCh37)')
    assembly_group.add_argument('--to', dest='target_assembly', metavar='ASSEMBLY',
                                help='Assembly to convert to (default: GRCh38)')

    provider_group = parser.add_argument_group('Mapping service')
    provider_group.add_argument('--server', metavar='URL',
                                help='REST server (default: https://rest.ensembl.org)')
    provider_group.add_argument('--species', metavar='NAME',
                                help='Species name or alias (default: human)')
    provider_group.add_argument('--coord-system', metavar='NAME',
                                help='Coordinate system of input regions (default: chromosome)')
    provider_group.add_argument('--target-coord-system', metavar='NAME',
                                help='Coordinate system to project onto (default: chromosome)')
    provider_group.add_argument('--timeout', type=float, metavar='SECONDS',
                                help='Per-request timeout (default: none)')
    provider_group.add_argument('--no-check-connection', dest='check_connection',
                                action='store_false', default=None,
                                help='Do not ping the server before lifting')

    core_group = parser.add_argument_group('Core options')
    core_group.add_argument('--config', '-c', type=Path,
                            help='Configuration file (YAML or JSON)')
    core_group.add_argument('--log-level', choices=LOG_LEVELS,
                            help='Logging verbosity level (default: INFO)')
    core_group.add_argument('--log-file', type=Path, metavar='FILE',
                            help='Also write log messages to FILE')
    verbosity = core_group.add_mutually_exclusive_group()
    verbosity.add_argument('--verbose', '-v', action='store_true',
                           help='Enable verbose logging')
    verbosity.add_argument('--quiet', '-q', action='store_true',
                           help='Only log errors')

    parser.add_argument('--version', action='version', version=f'chromlift {__version__}')

    return parser


def cli(argv: Optional[List[str]] = None) -> None:
    """Main CLI entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    try:
        if args.init_config:
            _handle_init_config(args.init_config)
            return

        if args.region and len(args.region) != 3:
            parser.error("a region needs exactly three values: CHROM START END")

        if args.config:
            config = load_configuration(args.config)
        else:
            config = create_default_configuration()

        _apply_cli_overrides(config, {
            'source_assembly': args.source_assembly,
            'target_assembly': args.target_assembly,
            'server': args.server,
            'species': args.species,
            'coord_system': args.coord_system,
            'target_coord_system': args.target_coord_system,
            'timeout': args.timeout,
            'check_connection': args.check_connection,
            'output_format': args.output_format,
            'log_level': _log_level(args),
            'log_file': args.log_file
        })

        from chromlift.pipeline import run_liftover_pipeline, setup_logging

        logging_config = config.get("logging", {})
        logger = setup_logging(
            logging_config.get("level", "INFO"),
            logging_config.get("file")
        )
        logger.debug(f"Configuration: {config}")

        results = run_liftover_pipeline(
            config=config,
            region=args.region or None,
            input_file=args.input_file,
            output_path=args.output,
            logger=logger
        )

        if args.output:
            logger.info(f"Results written to {args.output}")
        logger.debug(f"Finished in {results['runtime_seconds']:.2f}s")

    except (LiftoverError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


def _log_level(args: argparse.Namespace) -> Optional[str]:
    if args.verbose:
        return "DEBUG"
    if args.quiet:
        return "ERROR"
    return args.log_level


def _handle_init_config(output_path: Path) -> None:
    """Handle --init-config mode."""
    config = create_default_configuration()
    save_configuration(config, output_path)
    print(f"Created default configuration: {output_path}")


def _apply_cli_overrides(config: dict, cli_params: dict) -> None:
    """Apply CLI parameter overrides to configuration."""

    # Assemblies
    if cli_params['source_assembly'] is not None:
        config.setdefault('assembly', {})['source'] = cli_params['source_assembly']
    if cli_params['target_assembly'] is not None:
        config.setdefault('assembly', {})['target'] = cli_params['target_assembly']

    # Mapping service
    for key in ['server', 'species', 'coord_system', 'target_coord_system', 'timeout', 'check_connection']:
        if cli_params[key] is not None:
            config.setdefault('provider', {})[key] = cli_params[key]

    # Output
    if cli_params['output_format'] is not None:
        config.setdefault('output', {})['format'] = cli_params['output_format']

    # Logging
    if cli_params['log_level'] is not None:
        config.setdefault('logging', {})['level'] = cli_params['log_level']
    if cli_params['log_file'] is not None:
        config.setdefault('logging', {})['file'] = str(cli_params['log_file'])

    if not config.get('assembly', {}).get('source') or not config.get('assembly', {}).get('target'):
        raise ConfigurationError("Both source and target assemblies must be set")


if __name__ == '__main__':
    cli()

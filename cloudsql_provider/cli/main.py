"""
Main CLI module with argument parsing and command execution.

The orchestrator invokes the provider through this entry point: it passes a read
request (a JSON or YAML document, or flags) and consumes the JSON written to stdout.
Logs go to stderr or a log file, never to stdout.
"""
import argparse
import os
import sys
from typing import Any, Dict, List, Optional, Sequence, Tuple

import yaml

from cloudsql_provider.application.database import ReadDatabaseRequest, ReadDatabasesRequest
from cloudsql_provider.cli.formatters import format_output
from cloudsql_provider.domain.core.exceptions import DomainException, ValidationError
from cloudsql_provider.domain.database.exceptions import DataSourceNotFoundError
from cloudsql_provider.infrastructure.exceptions import InfrastructureError
from cloudsql_provider.infrastructure.logging.logger import get_logger, setup_logging

FORMATS = ['json', 'yaml', 'table', 'list']


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with resource-action structure."""
    parser = argparse.ArgumentParser(
        prog=os.path.basename(sys.argv[0]) if sys.argv and sys.argv[0] else "cloudsql-provider",
        description="Open Cloud SQL Provider - Cloud SQL data sources for infrastructure orchestrators",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s databases read --input request.json
  %(prog)s databases read --project my-project --instance main-db
  %(prog)s databases read --instance main-db --include 'name=.*[0-9]' --exclude 'name=.*2'
  %(prog)s database read --instance main-db --name app
  %(prog)s config show --format yaml
        """
    )

    # Global options
    parser.add_argument('--config', help='Configuration file path')
    parser.add_argument('--log-level', choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
                        help='Set logging level')
    parser.add_argument('--format', choices=FORMATS, default='json', help='Output format')
    parser.add_argument('--output', help='Output file (default: stdout)')
    parser.add_argument('--version', action='version', version='%(prog)s 1.0.0')

    subparsers = parser.add_subparsers(dest='resource', help='Available resources')

    # Databases resource
    databases_parser = subparsers.add_parser('databases', help='Databases of a Cloud SQL instance')
    databases_subparsers = databases_parser.add_subparsers(dest='action', help='Databases actions')

    databases_read = databases_subparsers.add_parser('read', help='Read the databases data source')
    databases_read.add_argument('--input', help="Request document (JSON or YAML), '-' for stdin")
    databases_read.add_argument('--project', help='Project of the instance')
    databases_read.add_argument('--instance', help='Cloud SQL instance name')
    databases_read.add_argument('--include', action='append', default=[], metavar='FIELD=REGEX',
                                help='Keep databases whose FIELD matches REGEX (repeatable)')
    databases_read.add_argument('--exclude', action='append', default=[], metavar='FIELD=REGEX',
                                help='Drop databases whose FIELD matches REGEX (repeatable)')
    databases_read.add_argument('--format', choices=FORMATS, default=argparse.SUPPRESS, help='Output format')

    # Database resource
    database_parser = subparsers.add_parser('database', help='A single Cloud SQL database')
    database_subparsers = database_parser.add_subparsers(dest='action', help='Database actions')

    database_read = database_subparsers.add_parser('read', help='Read the database data source')
    database_read.add_argument('--input', help="Request document (JSON or YAML), '-' for stdin")
    database_read.add_argument('--project', help='Project of the instance')
    database_read.add_argument('--instance', help='Cloud SQL instance name')
    database_read.add_argument('--name', help='Database name')
    database_read.add_argument('--format', choices=FORMATS, default=argparse.SUPPRESS, help='Output format')

    # Config resource
    config_parser = subparsers.add_parser('config', help='Configuration management')
    config_subparsers = config_parser.add_subparsers(dest='action', help='Config actions')

    config_show = config_subparsers.add_parser('show', help='Show effective configuration')
    config_show.add_argument('--format', choices=FORMATS, default=argparse.SUPPRESS, help='Output format')

    return parser


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    return build_parser().parse_args(argv)


def load_input(path: str) -> Dict[str, Any]:
    """Load a request document from a file, or from stdin when path is '-'."""
    try:
        if path == '-':
            data = yaml.safe_load(sys.stdin.read())
        else:
            with open(path, 'r') as f:
                data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ValidationError(f"Failed to read request from {path}: {str(e)}")

    if not isinstance(data, dict):
        raise ValidationError(f"Request in {path} must be an object")
    return data


def parse_filter_flags(includes: List[str], excludes: List[str]) -> List[Dict[str, Any]]:
    """
    Group FIELD=REGEX flags into filter blocks, one per field.

    Blocks are ordered by the first time their field appears, includes first.
    """
    blocks: Dict[str, Dict[str, Any]] = {}
    for flags, key in ((includes, 'values'), (excludes, 'exclude_values')):
        for flag in flags:
            field, sep, pattern = flag.partition('=')
            if not sep or not field:
                raise ValidationError(f"Filter flag must look like FIELD=REGEX: {flag!r}")
            block = blocks.setdefault(field, {'name': field, 'values': [], 'exclude_values': []})
            block[key].append(pattern)
    return list(blocks.values())


def _request_payload(args: argparse.Namespace, keys: Tuple[str, ...]) -> Dict[str, Any]:
    payload = load_input(args.input) if args.input else {}
    for key in keys:
        value = getattr(args, key, None)
        if value:
            payload[key] = value
    return payload


def execute_command(args: argparse.Namespace, app) -> Dict[str, Any]:
    """Execute the command selected by resource and action."""
    handler_key = (args.resource, args.action)

    if handler_key == ('databases', 'read'):
        payload = _request_payload(args, ('project', 'instance'))
        flag_filters = parse_filter_flags(args.include, args.exclude)
        if flag_filters:
            payload['filters'] = list(payload.get('filters') or payload.get('filter') or []) + flag_filters
            payload.pop('filter', None)
        request = ReadDatabasesRequest.from_payload(payload)
        return app.database_service.read_databases(request).model_dump()

    if handler_key == ('database', 'read'):
        payload = _request_payload(args, ('project', 'instance', 'name'))
        request = ReadDatabaseRequest.from_payload(payload)
        return app.database_service.read_database(request).model_dump()

    if handler_key == ('config', 'show'):
        return app.config_manager.get_config()

    raise ValidationError(f"Unknown command: {args.resource} {args.action}")


def _write(formatted_output: str, output_path: Optional[str]) -> None:
    if output_path:
        with open(output_path, 'w') as f:
            f.write(formatted_output)
    else:
        print(formatted_output)


def main(argv: Optional[Sequence[str]] = None, app=None) -> int:
    """
    Main CLI entry point.

    Returns:
        Process exit status: 0 on success or when the data source is absent,
        1 on any error, 2 on usage errors
    """
    args = parse_args(argv)
    logger = get_logger(__name__)

    if not args.resource or not getattr(args, 'action', None):
        build_parser().print_usage(sys.stderr)
        return 2

    output_format = args.format or 'json'
    try:
        if app is None:
            # Defaults until the configuration is loaded; stdout is reserved for results.
            setup_logging()
            from cloudsql_provider.bootstrap import create_application
            overrides = {'logging': {'level': args.log_level}} if args.log_level else None
            app = create_application(args.config, overrides=overrides)

        result = execute_command(args, app)
        status = 0
    except DataSourceNotFoundError as e:
        logger.warning("Data source is absent", reason=str(e))
        result = {'id': None, 'missing': True, 'message': str(e)}
        status = 0
    except (DomainException, InfrastructureError) as e:
        logger.error("Read failed", error_type=type(e).__name__, error=str(e))
        result = {'error': type(e).__name__, 'message': str(e)}
        status = 1

    _write(format_output(result, output_format), args.output)
    return status


def run() -> None:
    """Console script entry point."""
    sys.exit(main())


if __name__ == '__main__':
    run()

"""CLI for docu-aggregator."""

import argparse
import logging
import os
import sys

from docu_aggregator.config import ConfigError, load_config
from docu_aggregator.domain.enums import BuildImportStatus
from docu_aggregator.domain.errors import MarshalError, ResourceNotFoundError
from docu_aggregator.domain.models import BuildIdentifier, BuildImportSummary
from docu_aggregator.importer import BuildImporter


def _format_summary(summary: BuildImportSummary) -> str:
    stats = summary.statistics
    line = (
        f"  {summary.identifier.branch_name}/{summary.identifier.build_name}: {summary.status.value}"
        f" ({stats.number_of_use_cases} use cases, {stats.number_of_successful_scenarios} successful,"
        f" {stats.number_of_failed_scenarios} failed scenarios)"
    )
    if summary.status_message:
        line += f"\n    {summary.status_message}"
    return line


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='docu-aggregator', description='Scenario documentation build aggregator')
    parser.add_argument('--verbose', '-v', action='store_true', help='Enable debug logging')
    subparsers = parser.add_subparsers(dest='command')

    def add_common(sub):
        sub.add_argument('docs', help='Documentation data directory')
        sub.add_argument('--config', help='JSON config file (custom object tabs, pretty printing)')
        sub.add_argument('--no-pretty', action='store_true', help='Disable pretty printing')

    # aggregate command
    aggregate_parser = subparsers.add_parser('aggregate', help='Aggregate one build')
    add_common(aggregate_parser)
    aggregate_parser.add_argument('branch', help='Branch name')
    aggregate_parser.add_argument('build', help='Build name')
    aggregate_parser.add_argument('--force', action='store_true', help='Aggregate even if data is current')

    # import-all command
    import_parser = subparsers.add_parser('import-all', help='Aggregate all unprocessed or outdated builds')
    add_common(import_parser)

    # status command
    status_parser = subparsers.add_parser('status', help='Show the import status of all builds')
    add_common(status_parser)

    # remove command
    remove_parser = subparsers.add_parser('remove', help='Remove aggregated data of one build')
    add_common(remove_parser)
    remove_parser.add_argument('branch', help='Branch name')
    remove_parser.add_argument('build', help='Build name')

    return parser


def main(argv=None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )

    if not args.command:
        parser.print_help()
        return 0

    if not os.path.isdir(args.docs):
        print(f"Error: {args.docs} not found", file=sys.stderr)
        return 1

    try:
        config = load_config(args.docs, args.config)
        if args.no_pretty:
            config.pretty = False
        importer = BuildImporter(config)

        if args.command == 'aggregate':
            print(f"Aggregating {args.branch}/{args.build}...")
            summary = importer.import_build(BuildIdentifier(args.branch, args.build), force=args.force)
            print(_format_summary(summary))
            return 1 if summary.status is BuildImportStatus.FAILED else 0

        if args.command == 'import-all':
            imported = importer.import_all()
            print(f"Imported {len(imported)} builds")
            for summary in imported:
                print(_format_summary(summary))
            return 1 if any(s.status is BuildImportStatus.FAILED for s in imported) else 0

        if args.command == 'status':
            for summary in importer.update_build_summaries():
                print(_format_summary(summary))
            return 0

        if args.command == 'remove':
            summary = importer.remove_build(BuildIdentifier(args.branch, args.build))
            print(f"Removed aggregated data of {summary.identifier}")
            return 0

    except (ConfigError, ResourceNotFoundError, MarshalError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    parser.print_help()
    return 0


if __name__ == '__main__':
    sys.exit(main())

"""asset-tool: find unused images and App Store compliance issues in iOS projects.

Usage: asset-tool <command> <root> [options]

Commands:
  audit        unused images and the full compliance report
  unused       unused images only
  compliance   compliance report only (all rule families)
  <rule>       one compliance rule family, e.g. `asset-tool interlacing .`

Rules are auto-discovered from asset_checker/rules/.
Each rule module's docstring is its documentation.
Run `asset-tool help <rule>` for full module docs.

Environment variables / .env loading:
  OS environment variables are always used first.
  ASSET_TOOL_* keys not set there are read from a .env file, found by walking
  up from the current directory to the nearest .git boundary.
  Use --env-file to override the .env location explicitly.
"""

import argparse
import logging
import sys
from dataclasses import replace

from asset_checker import registry
from asset_checker.core.config import ConfigError, load_config
from asset_checker.core.engine import analyze
from asset_checker.core.env import load_env
from asset_checker.core.report import ALL_SECTIONS, COMPLIANCE, UNUSED, format_json, format_text
from asset_checker.core.types import AnalysisReport

_REPORT_COMMANDS = {
    'audit': ('Unused images plus the full compliance report', ALL_SECTIONS),
    'unused': ('List images no source file references', (UNUSED,)),
    'compliance': ('Run every compliance rule and print the score', (COMPLIANCE,)),
}


def _short_help(name: str) -> str:
    doc = (registry.module_for(name).__doc__ or '').strip()
    return doc.splitlines()[0] if doc else registry.get(name).help


def _add_common_options(p: argparse.ArgumentParser) -> None:
    p.add_argument('root', help='Project directory to scan')
    p.add_argument('-j', '--json', action='store_true', help='Output JSON instead of text')
    p.add_argument('-c', '--config', metavar='PATH', help='JSON config file (default: $ASSET_TOOL_CONFIG)')
    p.add_argument('-w', '--workers', type=int, metavar='N', help='Worker threads (default: 8)')
    p.add_argument('-v', '--verbose', action='store_true', help='Debug logging to stderr')
    p.add_argument(
        '--fail-under',
        type=int,
        default=None,
        metavar='N',
        help='Exit 1 if the compliance score is below N (CI gating)',
    )
    p.add_argument('--fail-on-unused', action='store_true', help='Exit 1 if any image is unused (CI gating)')


def _build_parser() -> argparse.ArgumentParser:
    rules = registry.all_rules()

    epilog = (
        'Examples:\n'
        '  asset-tool audit ./MyApp\n'
        '  asset-tool unused ./MyApp --json\n'
        '  asset-tool compliance ./MyApp --fail-under=80\n'
        '  asset-tool interlacing ./MyApp\n'
        '  asset-tool audit ./MyApp --config asset-tool.json -w 4\n'
        '  asset-tool help catalog\n'
        '\n'
        'Env vars (set in .env or environment):\n'
        '  ASSET_TOOL_CONFIG   path to a JSON config file\n'
        '  ASSET_TOOL_WORKERS  worker thread count\n'
    )
    parser = argparse.ArgumentParser(
        prog='asset-tool',
        description='Find unused images and App Store compliance issues in iOS projects.',
        epilog=epilog,
        formatter_class=argparse.RawTextHelpFormatter,
    )
    # Global --env-file option before subcommand
    parser.add_argument(
        '--env-file',
        metavar='PATH',
        default=None,
        help='Path to .env file (default: walk up from cwd to .git boundary)',
    )
    sub = parser.add_subparsers(dest='command', help='Command to run')

    for name, (short_help, _sections) in _REPORT_COMMANDS.items():
        _add_common_options(sub.add_parser(name, help=short_help))

    # One subcommand per rule, help from the module docstring
    for name in rules:
        _add_common_options(sub.add_parser(name, help=_short_help(name)))

    help_parser = sub.add_parser('help', help='Print full docs for a rule')
    help_parser.add_argument('topic', nargs='?', help='Rule name')

    return parser


def _print_help(topic: str | None) -> None:
    """Print full module docstring for a rule."""
    rules = registry.all_rules()

    if topic is None:
        print('Available rules:\n')
        for name in rules:
            print(f'  {name:<16} {_short_help(name)}')
        print('\nRun: asset-tool help <rule> for full docs.')
        return

    if topic not in rules:
        print(f'Unknown rule: {topic}', file=sys.stderr)
        print(f'Available: {", ".join(rules)}', file=sys.stderr)
        sys.exit(1)

    doc = (registry.module_for(topic).__doc__ or '').strip()
    if not doc:
        print(f'(No module docs for {topic!r})')
        return
    print(doc)


def _check_fail_under(report: AnalysisReport, threshold: int) -> bool:
    """Return True if the compliance score is below threshold."""
    score = report.compliance.score
    if score < threshold:
        print(f'\nFAIL: compliance score {score} is below {threshold}', file=sys.stderr)
        return True
    return False


def _check_fail_on_unused(report: AnalysisReport) -> bool:
    unused = report.usage.unused
    if unused:
        print(f'\nFAIL: {len(unused)} unused image(s)', file=sys.stderr)
        return True
    return False


def main() -> None:
    parser = _build_parser()
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if getattr(args, 'verbose', False) else logging.WARNING,
        format='%(levelname)s %(name)s: %(message)s',
        stream=sys.stderr,
    )

    # Load .env before anything else; OS env vars always win
    env_path = load_env(env_file=getattr(args, 'env_file', None))
    if env_path:
        print(f'asset-tool: loaded {env_path}', file=sys.stderr)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    if args.command == 'help':
        _print_help(getattr(args, 'topic', None))
        return

    try:
        config = load_config(args.config)
        if args.workers is not None:
            if args.workers < 1:
                raise ConfigError('--workers: expected a positive integer')
            config = replace(config, workers=args.workers)
    except ConfigError as exc:
        print(f'Error: {exc}', file=sys.stderr)
        sys.exit(1)

    try:
        report = analyze(args.root, config)
    except NotADirectoryError as exc:
        print(f'Error: {exc}', file=sys.stderr)
        sys.exit(1)

    if args.command in _REPORT_COMMANDS:
        sections = _REPORT_COMMANDS[args.command][1]
        families = tuple(rule.family for rule in registry.all_rules().values())
    else:
        sections = (COMPLIANCE,)
        families = (registry.get(args.command).family,)

    if args.json:
        print(format_json(report, sections, families))
    else:
        print(format_text(report, sections, families))

    # CI gates: after output so the report is visible even on failure
    failed = False
    if args.fail_under is not None and _check_fail_under(report, args.fail_under):
        failed = True
    if args.fail_on_unused and _check_fail_on_unused(report):
        failed = True
    if failed:
        sys.exit(1)


if __name__ == '__main__':
    main()

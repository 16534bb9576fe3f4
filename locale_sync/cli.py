"""Command-line interface for locale-sync."""

import sys
import argparse
from pathlib import Path

from dotenv import load_dotenv

from .__version__ import __version__
from .utils.colors import Colors
from .utils.config import (
    Config,
    CONFIG_FILENAME,
    PROVIDER_MODELS,
    ConfigValidationError,
    create_default_config,
)
from .utils.logging import configure_logging, get_logger
from .core.documents import LocaleStore
from .core.errors import BackendError, HistoryError, LoadError
from .core.history import GitHistory
from .features.translator import BatchTranslator
from .features.sync import LocaleSync


def load_and_validate_config(args, validate: bool = True) -> Config:
    """
    Build the run configuration: YAML file, then environment, then CLI flags.

    Args:
        args: Parsed command-line arguments
        validate: Whether to validate the config

    Returns:
        Loaded Config object

    Raises:
        ConfigValidationError: If validation fails with errors
    """
    config_path = Path(args.config) if getattr(args, 'config', None) else None
    config = Config.from_file(config_path)

    load_dotenv()
    config.apply_environment(provider=getattr(args, 'provider', None))

    if getattr(args, 'dir', None):
        config.locales.directory = args.dir
    if getattr(args, 'source_language', None):
        config.locales.source_language = args.source_language
    if getattr(args, 'source_file', None):
        config.locales.source_file = args.source_file
    if getattr(args, 'test', False):
        config.translation.test_mode = True
    if getattr(args, 'batch_size', None) is not None:
        config.translation.batch_size = args.batch_size
    if getattr(args, 'model', None):
        config.translation.model = args.model
    if getattr(args, 'revision', None):
        config.history.revision = args.revision
    if getattr(args, 'backup', False):
        config.sync.backup = True

    if validate:
        errors, warnings = config.validate()

        if getattr(args, 'verbose', False):
            for warning in warnings:
                print(f"{Colors.warning('⚠️')}  Config warning: {warning}")

        if errors:
            print(f"{Colors.error('❌')} Configuration errors:")
            for error in errors:
                print(f"   • {error}")
            raise ConfigValidationError(errors)

    return config


def cmd_init(args):
    """Initialize configuration file."""
    config_path = Path.cwd() / CONFIG_FILENAME

    if config_path.exists() and not args.force:
        print(f"{Colors.error('❌')} Config already exists: {config_path}")
        print(f"   Use --force to overwrite")
        return 1

    config = create_default_config(args.provider)
    config.save(config_path)

    print(f"{Colors.success('✅')} Created: {config_path}")
    print(f"\n{Colors.bold('Next steps:')}")
    print(f"1. Edit {CONFIG_FILENAME} to point at your locale directory")
    print(f"2. Put AI_API_KEY (or OPENAI_API_KEY / ANTHROPIC_API_KEY) in .env")
    print(f"3. Run: locale-sync sync --dry-run")

    return 0


def cmd_sync(args):
    """Synchronize all locale files with the base-language file."""
    configure_logging(
        verbose=args.verbose,
        quiet=args.quiet,
        log_file=Path(args.log_file) if args.log_file else None
    )

    try:
        config = load_and_validate_config(args)
    except ConfigValidationError:
        return 1

    locale_dir = config.locale_dir
    if not locale_dir.is_dir():
        print(f"{Colors.error('❌')} Locale directory not found: {locale_dir}")
        return 1

    try:
        translator = BatchTranslator(
            config.translation,
            source_lang=config.locales.source_language
        )
    except BackendError as e:
        print(f"{Colors.error('❌')} {e}")
        get_logger().hint("Set AI_API_KEY or use --test to run without a backend")
        return 1

    syncer = LocaleSync(
        store=LocaleStore(locale_dir),
        history=GitHistory(config.history.revision),
        translator=translator,
        source_lang=config.locales.source_language,
        source_file=config.locales.source_file,
        backup=config.sync.backup
    )

    try:
        summary = syncer.sync_all(languages=args.lang, dry_run=args.dry_run)
    except (LoadError, HistoryError) as e:
        print(f"{Colors.error('❌')} {e}")
        return 1

    if args.lang:
        found = {r.language for r in summary.results}
        for lang in args.lang:
            if lang not in found:
                print(f"{Colors.warning('⚠️')}  Language not found: {lang}")

    if not args.quiet:
        syncer.print_summary(summary, verbose=args.verbose)

    if args.output:
        output_path = Path(args.output)
        format = args.format or output_path.suffix.lstrip('.') or 'json'
        if format not in ('json', 'md'):
            print(f"{Colors.error('❌')} Unknown report format: {format}")
            return 1
        syncer.export_report(summary, output_path, format=format)

    if args.ci and summary.total_failures > 0:
        print(f"\n{Colors.error('❌')} {summary.total_failures} keys could not be translated")
        return 1

    return 0


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog='locale-sync',
        description='Keep JSON locale files in sync with a base-language file',
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    # init command
    init_parser = subparsers.add_parser('init', help='Initialize configuration file')
    init_parser.add_argument('--provider', choices=list(PROVIDER_MODELS), default='openai',
                             help='Translation provider (default: openai)')
    init_parser.add_argument('--force', action='store_true', help='Overwrite existing config')

    # sync command
    sync_parser = subparsers.add_parser('sync', help='Translate changed and missing keys into every locale')
    sync_parser.add_argument('--dir', '-d', help='Directory containing locale files (default: locales)')
    sync_parser.add_argument('--source-language', '-s', help='Source language code (default: en)')
    sync_parser.add_argument('--source-file', '-f', help='Source language file name (default: en.json)')
    sync_parser.add_argument('--test', '-t', action='store_true',
                             help='Test mode: prefix values with [TEST] instead of calling a backend')
    sync_parser.add_argument('--batch-size', type=int, metavar='N',
                             help='Keys per translation request (default: 25)')
    sync_parser.add_argument('--provider', choices=list(PROVIDER_MODELS), help='Translation provider')
    sync_parser.add_argument('--model', help='Model name (default: provider default)')
    sync_parser.add_argument('--revision', metavar='REV',
                             help='Git revision to compare against (default: HEAD^)')
    sync_parser.add_argument('--lang', '-l', metavar='CODE', action='append',
                             help='Sync only this language (repeatable)')
    sync_parser.add_argument('--dry-run', action='store_true', help='Preview only')
    sync_parser.add_argument('--backup', action='store_true', help='Back up locale files before writing')
    sync_parser.add_argument('--config', '-c', metavar='PATH', help=f'Config file (default: ./{CONFIG_FILENAME})')
    sync_parser.add_argument('--output', '-o', metavar='PATH', help='Export sync report to file')
    sync_parser.add_argument('--format', choices=['json', 'md'], help='Report format')
    sync_parser.add_argument('--ci', action='store_true', help='CI/CD mode: exit 1 on translation failures')
    sync_parser.add_argument('--verbose', '-v', action='store_true', help='Show detailed output')
    sync_parser.add_argument('--quiet', '-q', action='store_true', help='Only show warnings and errors')
    sync_parser.add_argument('--log-file', metavar='PATH', help='Also write the log to this file')

    args = parser.parse_args(argv)

    if args.command == 'init':
        return cmd_init(args)
    elif args.command == 'sync':
        return cmd_sync(args)
    else:
        parser.print_help()
        return 0


if __name__ == '__main__':
    sys.exit(main())

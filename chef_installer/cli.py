# Path and File Name : /opt/chef-installer/chef_installer/cli.py
# Author: nXxBku0CKFAJCBN3X1g3bQk7OxYQylg8CMw1iGsq7gU
# Details of functionality of this file: Command line entry point - install, load-config, save-config, list-nodes and export-hints commands

"""
Chef Installer CLI.

Commands:
  install        Install Chef Client from an MSI and configure its service
  load-config    Print a client.rb as JSON (defaults when absent)
  save-config    Write fields into a client.rb (--append or --overwrite)
  list-nodes     Run knife node list
  export-hints   Write azure.json from captured role-instance metadata
"""

import argparse
import json
import logging
import sys
from typing import List, Optional

import jsonschema

from .config.client_config import ConfigDocument, SaveMode, load_config, save_config
from .hints.azure_hints import export_hints, file_provider
from .installer import ChefClientInstaller
from .inventory.knife import list_nodes
from .log_setup import setup_logging
from .process import ProcessFailedError
from .settings import SettingsError, load_settings

logger = logging.getLogger(__name__)


def _parse_assignment(text: str):
    name, sep, value = text.partition('=')
    if not sep or not name:
        raise argparse.ArgumentTypeError(f"Expected NAME=VALUE, got {text!r}")
    return name, value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='chef-installer', description='Chef Client installer and configuration tool')
    parser.add_argument('--settings', default=None, help='YAML settings file (default: $CHEF_INSTALLER_SETTINGS)')
    parser.add_argument('--log-level', default=None, help='Logging level (default: from settings, INFO)')
    parser.add_argument('--log-file', default=None, help='Also log to this file')

    subparsers = parser.add_subparsers(dest='command', required=True)

    install = subparsers.add_parser('install', help='Install Chef Client from an MSI package')
    install.add_argument('--msi', required=True, help='Path to the Chef Client MSI')

    load = subparsers.add_parser('load-config', help='Print client.rb fields as JSON')
    load.add_argument('--path', default=None, help='client.rb to read (default: defaults only)')

    save = subparsers.add_parser('save-config', help='Write fields into a client.rb')
    save.add_argument('--path', default=None, help='Destination client.rb (default: settings config_path)')
    save.add_argument('--from', dest='source', default=None, help='Start from this client.rb instead of defaults')
    save.add_argument('--set', dest='assignments', action='append', default=[], type=_parse_assignment,
                      metavar='NAME=VALUE', help='Field to set (repeatable)')
    mode = save.add_mutually_exclusive_group()
    mode.add_argument('--append', action='store_true', help='Merge into the existing file')
    mode.add_argument('--overwrite', action='store_true', help='Replace the existing file')

    nodes = subparsers.add_parser('list-nodes', help='List Chef Server nodes via knife')
    nodes.add_argument('--config', default=None, help='knife/client config file')

    hints = subparsers.add_parser('export-hints', help='Write Ohai azure.json hints')
    hints.add_argument('--metadata', required=True, help='Captured role-instance metadata (YAML or JSON)')
    hints.add_argument('--output-dir', default=None, help='Hints directory (default: settings hints_dir)')

    return parser


def _run_command(args: argparse.Namespace, settings) -> None:
    if args.command == 'install':
        result = ChefClientInstaller(settings).install(args.msi)
        print(f"✓ Chef Client installed to {result.install_dir}")
        print(f"  Add to PATH: {result.bin_dir}")

    elif args.command == 'load-config':
        document = load_config(args.path)
        print(json.dumps({
            'fields': document.fields,
            'additional_fields': document.additional_fields,
        }, indent=2))

    elif args.command == 'save-config':
        document = load_config(args.source) if args.source else ConfigDocument()
        for name, value in args.assignments:
            document.set(name, value)
        mode = SaveMode.APPEND if args.append else SaveMode.OVERWRITE if args.overwrite else None
        path = save_config(document, args.path or settings.config_path, mode)
        print(f"✓ Configuration written to: {path}")

    elif args.command == 'list-nodes':
        sys.stdout.write(list_nodes(args.config, knife=settings.knife_path))

    elif args.command == 'export-hints':
        path = export_hints(args.output_dir or settings.hints_dir, file_provider(args.metadata))
        print(f"✓ Hints written to: {path}")


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = load_settings(args.settings)
    except SettingsError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    setup_logging(args.log_level or settings.log_level, args.log_file)

    try:
        _run_command(args, settings)
    except (ProcessFailedError, OSError, ValueError, jsonschema.ValidationError) as e:
        logger.debug("Command failed", exc_info=True)
        print(f"ERROR: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())

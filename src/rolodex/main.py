"""Rolodex entry point."""

import argparse
import logging
import os
import sys
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

from .cli import run_cli
from .config import DEFAULT_CONFIG_PATH, apply_env_overrides, load_config, save_config


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rolodex",
        description="Personal contact book",
    )
    parser.add_argument(
        "--path",
        type=Path,
        help="Contacts JSON file (overrides config and ROLODEX_CONTACTS_PATH)",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Config file (default: ~/.rolodex/config.json)",
    )
    parser.add_argument(
        "--require-email",
        action="store_true",
        help="Reject contacts without an email address",
    )
    parser.add_argument(
        "--no-event-log",
        action="store_true",
        help="Do not write the JSONL event log",
    )
    parser.add_argument(
        "--save-config",
        action="store_true",
        help="Write the resulting settings to the config file and exit",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """Main entry point."""
    load_dotenv(find_dotenv(usecwd=True))

    args = _build_parser().parse_args(sys.argv[1:] if argv is None else argv)

    debug = os.getenv("ROLODEX_DEBUG", "").lower() in ("1", "true", "yes")
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    config = apply_env_overrides(load_config(args.config))
    if args.path:
        config.contacts_path = args.path.expanduser()
    if args.require_email:
        config.email_required = True
    if args.no_event_log:
        config.event_log = False

    if args.save_config:
        config_path = args.config or DEFAULT_CONFIG_PATH
        save_config(config, config_path)
        print(f"Settings saved to {config_path}")
        return

    run_cli(config)


if __name__ == "__main__":
    main()

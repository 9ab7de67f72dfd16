#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/cleanstate/cli.py
"""Command-line interface for cleanstate.

A developer tool for inspecting and managing persisted editor state.

Environment Variable Support
----------------------------
Settings not given on the command line fall back to ``CLEANSTATE_<FIELD>``
environment variables and then to a discovered configuration file.

Examples
--------
Print the canonical form of an exported editor state::

    $ cleanstate canonicalize state.json --indent 2

Persist an editor state the way a session would::

    $ cleanstate save state.json --storage-dir ./.cleanstate

Show what is currently persisted, with syntax highlighting::

    $ cleanstate show --rich

Clear storage::

    $ cleanstate clear

"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Optional, Sequence

from cleanstate.ast.serialization import ast_to_json, json_to_document
from cleanstate.config import SessionConfig, load_config
from cleanstate.constants import STORAGE_CLEARED_MESSAGE
from cleanstate.exceptions import DeserializationError, ValidationError
from cleanstate.logging_utils import configure_logging
from cleanstate.persistence.controller import PersistenceController
from cleanstate.persistence.scheduler import ManualScheduler
from cleanstate.session import create_session
from cleanstate.storage.file import FileStore
from cleanstate.transforms.pipeline import CanonicalizationPipeline

EXIT_SUCCESS = 0
EXIT_INPUT_ERROR = 1
EXIT_VALIDATION_ERROR = 2


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="cleanstate",
        description="Canonicalize, persist and inspect rich-text editor state without comment annotations.",
    )
    parser.add_argument("--config", help="Path to a configuration file (TOML, YAML or JSON)")
    parser.add_argument("--storage-dir", help="Directory of the file store")
    parser.add_argument("--key", help="Storage key of the persisted slot")
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level",
    )
    parser.add_argument("--log-file", help="Also write log output to this file")
    parser.add_argument("--trace", action="store_true", help="Include timestamps and logger names in log output")

    subparsers = parser.add_subparsers(dest="command", required=True)

    canon = subparsers.add_parser("canonicalize", help="Print the canonical form of an editor state file")
    canon.add_argument("input", help="Editor state JSON file, or '-' for stdin")
    canon.add_argument("--out", help="Write the result to this file instead of stdout")
    canon.add_argument("--indent", type=int, default=None, help="Indentation of the JSON output")
    canon.add_argument("--rich", action="store_true", help="Syntax-highlight the output")

    save = subparsers.add_parser("save", help="Canonicalize an editor state file and persist it")
    save.add_argument("input", help="Editor state JSON file, or '-' for stdin")

    show = subparsers.add_parser("show", help="Print the persisted document")
    show.add_argument("--indent", type=int, default=2, help="Indentation of the JSON output")
    show.add_argument("--rich", action="store_true", help="Syntax-highlight the output")

    subparsers.add_parser("clear", help="Remove the persisted document")

    return parser


def _read_input(source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    return Path(source).read_text(encoding="utf-8")


def _emit(text: str, use_rich: bool = False, out: Optional[str] = None) -> None:
    if out:
        Path(out).write_text(text + "\n", encoding="utf-8")
        return
    if use_rich:
        from rich.console import Console
        from rich.syntax import Syntax

        Console().print(Syntax(text, "json", word_wrap=True))
        return
    print(text)


def _error(message: str) -> None:
    print(f"Error: {message}", file=sys.stderr)


def _controller(config: SessionConfig) -> PersistenceController:
    return PersistenceController.from_config(config, FileStore(config.storage_dir), scheduler=ManualScheduler())


def _cmd_canonicalize(args: argparse.Namespace, config: SessionConfig) -> int:
    try:
        root = json_to_document(_read_input(args.input), strict_mode=config.strict_deserialization)
    except (OSError, DeserializationError) as e:
        _error(str(e))
        return EXIT_INPUT_ERROR

    _emit(CanonicalizationPipeline(indent=args.indent).to_json(root), use_rich=args.rich, out=args.out)
    return EXIT_SUCCESS


def _cmd_save(args: argparse.Namespace, config: SessionConfig) -> int:
    try:
        root = json_to_document(_read_input(args.input), strict_mode=config.strict_deserialization)
    except (OSError, DeserializationError) as e:
        _error(str(e))
        return EXIT_INPUT_ERROR

    controller = _controller(config)
    if not controller.save(root):
        _error(f"Could not write to {config.storage_dir}")
        return EXIT_INPUT_ERROR
    print(f"Saved canonical state under '{config.storage_key}'")
    return EXIT_SUCCESS


def _cmd_show(args: argparse.Namespace, config: SessionConfig) -> int:
    root = _controller(config).load()
    if root is None:
        print("Nothing persisted.")
        return EXIT_SUCCESS
    _emit(ast_to_json(root, indent=args.indent), use_rich=args.rich)
    return EXIT_SUCCESS


def _cmd_clear(args: argparse.Namespace, config: SessionConfig) -> int:
    session = create_session(config, store=FileStore(config.storage_dir), scheduler=ManualScheduler())
    message = session.clear_storage()
    print(message)
    return EXIT_SUCCESS if message == STORAGE_CLEARED_MESSAGE else EXIT_INPUT_ERROR


_COMMANDS = {
    "canonicalize": _cmd_canonicalize,
    "save": _cmd_save,
    "show": _cmd_show,
    "clear": _cmd_clear,
}


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the CLI.

    Parameters
    ----------
    argv : sequence of str or None, default = None
        Arguments without the program name; ``sys.argv[1:]`` when None

    Returns
    -------
    int
        Process exit code

    """
    parser = create_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config(
            args.config,
            storage_key=args.key,
            storage_dir=args.storage_dir,
            log_level=args.log_level,
        )
    except ValidationError as e:
        _error(e.message)
        return EXIT_VALIDATION_ERROR

    configure_logging(config.log_level, log_file=args.log_file, trace_mode=args.trace)
    return _COMMANDS[args.command](args, config)


__all__ = ["main", "create_parser", "EXIT_SUCCESS", "EXIT_INPUT_ERROR", "EXIT_VALIDATION_ERROR"]

"""
CKV CLI - Command-line interface for .ckv configuration files.

Commands:
  ckv get      - Print the value of a key
  ckv set      - Set a key (rewrites the file, or prints with --stdout)
  ckv remove   - Remove a key (rewrites the file, or prints with --stdout)
  ckv keys     - List keys in file order
  ckv dump     - Print every entry in canonical form
  ckv validate - Check that a file parses
  ckv convert  - Convert to/from JSON
  ckv view     - Browse a file in the terminal (TUI)

The file comes from -f/--file, or the CKV_FILE environment variable.
Log level comes from -v/--verbose, or the CKV_LOG_LEVEL environment variable.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

from ckv.errors import CKVError, CKVSyntaxError


def _resolve_file(args: argparse.Namespace) -> str:
    path = args.file or os.environ.get("CKV_FILE", "")
    if not path:
        print("Error: No file given. Use -f FILE or set CKV_FILE.", file=sys.stderr)
        sys.exit(1)
    return path


def cmd_get(args: argparse.Namespace) -> None:
    """Print the value of a key."""
    from ckv.document import CKVDocument

    with CKVDocument(_resolve_file(args)) as doc:
        print(doc.get_value(args.key))


def cmd_set(args: argparse.Namespace) -> None:
    """Set the value of a key."""
    from ckv.document import CKVDocument

    if args.value is not None:
        value = args.value
    elif not sys.stdin.isatty():
        value = sys.stdin.read()
        # One trailing newline comes from echo/heredocs, not from the value
        if value.endswith("\n"):
            value = value[:-1]
    else:
        print("Error: Provide the value as an argument or via stdin", file=sys.stderr)
        sys.exit(1)

    path = _resolve_file(args)
    with CKVDocument(path) as doc:
        if args.stdout:
            doc.set_value(args.key, value, sys.stdout)
        else:
            table = doc.set_value(args.key, value)
            print(f"Set {args.key} in {path} ({len(table)} keys)")


def cmd_remove(args: argparse.Namespace) -> None:
    """Remove a key."""
    from ckv.document import CKVDocument

    path = _resolve_file(args)
    with CKVDocument(path) as doc:
        if args.stdout:
            doc.remove_key(args.key, sys.stdout)
        else:
            table = doc.remove_key(args.key)
            print(f"Removed {args.key} from {path} ({len(table)} keys left)")


def cmd_keys(args: argparse.Namespace) -> None:
    """List keys in file order."""
    from ckv.document import CKVDocument

    with CKVDocument(_resolve_file(args)) as doc:
        for key in doc.import_all():
            print(key)


def cmd_dump(args: argparse.Namespace) -> None:
    """Print every entry in the form the writer produces."""
    from ckv.document import CKVDocument
    from ckv.writer import CKVWriter

    with CKVDocument(_resolve_file(args)) as doc:
        CKVWriter.render(doc.import_all(), sys.stdout)


def cmd_validate(args: argparse.Namespace) -> None:
    """Validate a .ckv file."""
    from ckv.reader import CKVReader

    path = _resolve_file(args)
    try:
        with CKVReader.open(path) as reader:
            entries = reader.entries()
    except CKVSyntaxError as e:
        print(f"FAIL: {path}: {e}")
        sys.exit(1)

    distinct = len({key for key, _ in entries})
    print(f"OK: {path} is valid CKV ({distinct} keys)")
    if distinct != len(entries):
        print(f"    {len(entries) - distinct} duplicate definition(s) ignored")


def cmd_convert(args: argparse.Namespace) -> None:
    """Convert to/from JSON."""
    from ckv.converters import convert_from, convert_to
    from ckv.reader import CKVReader
    from ckv.writer import CKVWriter

    if args.direction == "to":
        path = _resolve_file(args)
        table = CKVReader.read(path)
        result = convert_to(table, args.format)
        if args.output:
            Path(args.output).write_text(result + "\n", encoding="utf-8")
            print(f"Converted {path} -> {args.output}")
        else:
            print(result)
        return

    if not args.input:
        print("Error: convert from needs an input file", file=sys.stderr)
        sys.exit(1)
    input_path = Path(args.input)
    if not input_path.is_file():
        print(f"Error: File not found: {args.input}", file=sys.stderr)
        sys.exit(1)
    table = convert_from(input_path.read_text(encoding="utf-8"), args.format)
    output = args.output or args.file or os.environ.get("CKV_FILE") or input_path.stem + ".ckv"
    nbytes = CKVWriter.write(table, output)
    print(f"Converted {args.input} -> {output} ({nbytes} bytes)")


def cmd_view(args: argparse.Namespace) -> None:
    """Browse a .ckv file in the terminal."""
    path = _resolve_file(args)
    try:
        from ckv.tui.viewer import run_viewer
    except ImportError:
        print(
            "TUI viewer requires the 'textual' package.\n"
            "Install it with: pip install \"ckv[tui]\"",
            file=sys.stderr,
        )
        sys.exit(1)
    run_viewer(path)


def _configure_logging(verbose: bool) -> None:
    if verbose:
        level = logging.DEBUG
    else:
        name = os.environ.get("CKV_LOG_LEVEL", "WARNING").upper()
        level = getattr(logging, name, None)
        if not isinstance(level, int):
            level = logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="ckv",
        description="CKV - human-editable key/value configuration files.",
    )
    from ckv import __version__
    parser.add_argument("--version", action="version", version=f"ckv {__version__}")
    parser.add_argument("-f", "--file", help="Path to .ckv file (default: $CKV_FILE)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command")

    # get
    p_get = sub.add_parser("get", help="Print the value of a key")
    p_get.add_argument("key", help="Key to look up")

    # set
    p_set = sub.add_parser("set", help="Set the value of a key")
    p_set.add_argument("key", help="Key to set")
    p_set.add_argument("value", nargs="?", default=None, help="New value (default: stdin)")
    p_set.add_argument("--stdout", action="store_true", help="Print the result instead of rewriting the file")

    # remove
    p_remove = sub.add_parser("remove", help="Remove a key")
    p_remove.add_argument("key", help="Key to remove")
    p_remove.add_argument("--stdout", action="store_true", help="Print the result instead of rewriting the file")

    # keys
    sub.add_parser("keys", help="List keys in file order")

    # dump
    sub.add_parser("dump", help="Print every entry in canonical form")

    # validate
    sub.add_parser("validate", help="Check that a file parses")

    # convert
    p_convert = sub.add_parser("convert", help="Convert to/from JSON")
    p_convert.add_argument("direction", choices=["to", "from"], help="Conversion direction")
    p_convert.add_argument("format", choices=["json"], help="Other format")
    p_convert.add_argument("input", nargs="?", default=None, help="Input file (for 'from')")
    p_convert.add_argument("-o", "--output", help="Output file path")

    # view
    sub.add_parser("view", help="Browse a .ckv file (TUI)")

    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    if not args.command:
        print("CKV - human-editable key/value configuration files\n")
        print("Usage:")
        print("  ckv -f settings.ckv get EDITOR")
        print("  ckv -f settings.ckv set EDITOR vim")
        print("  echo \"multi\\nline\" | ckv -f settings.ckv set GREETING")
        print("  ckv -f settings.ckv remove EDITOR")
        print("  ckv -f settings.ckv keys")
        print("  ckv -f settings.ckv validate")
        print("  ckv -f settings.ckv convert to json -o settings.json")
        print("  ckv -f settings.ckv convert from json settings.json")
        print("  ckv -f settings.ckv view")
        print()
        print("Run 'ckv <command> --help' for details on any command.")
        sys.exit(0)

    commands = {
        "get": cmd_get,
        "set": cmd_set,
        "remove": cmd_remove,
        "keys": cmd_keys,
        "dump": cmd_dump,
        "validate": cmd_validate,
        "convert": cmd_convert,
        "view": cmd_view,
    }

    try:
        commands[args.command](args)
    except (CKVError, ValueError) as e:
        # ValueError: size limits, bad JSON
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()

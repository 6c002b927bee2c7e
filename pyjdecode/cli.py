#!/usr/bin/env python3
"""
Command-line interface for pyjdecode - Java class file constant pool decoder.
"""

import argparse
import logging
import os
import sys
import zipfile
import zlib
from pathlib import Path

from .classreader import ClassPath, read_class_file
from .errors import ClassFormatError
from .render import dump_pool, printable


def _fail(message: str):
    print(f"Error: {message}", file=sys.stderr)
    sys.exit(1)


def _load(source_file: str, args):
    path = Path(source_file)
    if not path.exists():
        _fail(f"File not found: {source_file}")
    try:
        return read_class_file(path, strict=args.strict)
    except (ClassFormatError, OSError) as e:
        _fail(f"decoding {source_file}: {e}")


def name_command(args):
    """Print the class signature declared by each class file."""
    for source_file in args.files:
        with _load(source_file, args) as class_file:
            if len(args.files) > 1:
                print(f"{source_file}: {printable(class_file.signature)}")
            else:
                print(printable(class_file.signature))


def dump_command(args):
    """Print header fields and every constant pool entry of a class file."""
    with _load(args.file, args) as class_file:
        major, minor = class_file.version
        pool = class_file.constant_pool
        print(f"magic number: {class_file.magic:X}")
        print(f"minor version: {minor}")
        print(f"major version: {major}")
        print(f"constant pool size: {len(pool)}")
        for line in dump_pool(pool):
            print(line)
        print(f"access flags: {int(class_file.access_flags):X}")
        print(f"class name: {printable(class_file.name)}")
        if not args.quiet:
            print(f"class signature: {printable(class_file.signature)}")


def find_command(args):
    """Locate a class on a class path and print its signature."""
    with ClassPath() as classpath:
        for entry in args.classpath.split(os.pathsep):
            if entry:
                try:
                    classpath.add_path(entry)
                except (ValueError, OSError) as e:
                    _fail(str(e))

        try:
            class_file = classpath.find_class(args.name, strict=args.strict)
        except (ClassFormatError, zipfile.BadZipFile, zlib.error) as e:
            _fail(f"decoding {args.name}: {e}")
        if class_file is None:
            _fail(f"Class not found: {args.name}")

        with class_file:
            print(printable(class_file.signature))


def main(argv=None):
    """Main entry point for pyjdecode CLI."""
    parser = argparse.ArgumentParser(
        prog="pyjdecode",
        description="Decode Java class file constant pools and class names",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Reject files whose magic number is not 0xCAFEBABE",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log decoder events to stderr",
    )
    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Omit the class signature line from dump output",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    name_parser = subparsers.add_parser(
        "name",
        help="Print the class signature declared by each file",
    )
    name_parser.add_argument(
        "files",
        nargs="+",
        help="Class files to decode",
    )
    name_parser.set_defaults(func=name_command)

    dump_parser = subparsers.add_parser(
        "dump",
        help="Print the header and constant pool of a class file",
    )
    dump_parser.add_argument(
        "file",
        help="Class file to decode",
    )
    dump_parser.set_defaults(func=dump_command)

    find_parser = subparsers.add_parser(
        "find",
        help="Locate a class by internal name on a class path",
    )
    find_parser.add_argument(
        "name",
        help="Internal class name, e.g. java/lang/String",
    )
    find_parser.add_argument(
        "-cp", "--classpath",
        required=True,
        help="Class path entries (separated by the OS path separator: directories, .jar or .zip files)",
    )
    find_parser.set_defaults(func=find_command)

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    args.func(args)


if __name__ == "__main__":
    main()

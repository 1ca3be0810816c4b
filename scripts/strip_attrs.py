#!/usr/bin/env python3
"""Strip an attribute (FormerlySerializedAs by default) from all .cs files.

Once every serialized asset has been re-saved under the new field names, the
FormerlySerializedAs markers left on renamed fields are dead weight. This walks
the given files and directories and removes them, keeping the other attributes
on the same line, trailing comments and the file's newline style intact.

Usage:
    python scripts/strip_attrs.py [--dry-run] [--attribute=Name ...] [--keep-blank-lines] [PATH ...]
"""

from __future__ import annotations

import sys
from collections.abc import Iterator
from pathlib import Path

from attrstrip import DEFAULT_ATTRIBUTE, check_attribute_name, rewrite


def iter_scripts(path: Path) -> Iterator[Path]:
    """Yield the C# scripts at or below `path`."""
    if path.is_file():
        if path.suffix.lower() == ".cs":
            yield path
    elif path.is_dir():
        yield from sorted(p for p in path.rglob("*") if p.is_file() and p.suffix.lower() == ".cs")


def strip_file(
    path: Path,
    attributes: list[str],
    dry_run: bool = False,
    collapse_blank_lines: bool = True,
) -> int:
    # Bytes in and out so CRLF files and stray non-UTF-8 bytes survive untouched
    text = path.read_bytes().decode("utf-8", errors="surrogateescape")
    total = 0
    for attribute in attributes:
        text, count = rewrite(text, attribute, collapse_blank_lines=collapse_blank_lines)
        total += count
    if total > 0 and not dry_run:
        path.write_bytes(text.encode("utf-8", errors="surrogateescape"))
    return total


def parse_args(argv: list[str]) -> tuple[list[str], list[Path], bool, bool]:
    dry_run = False
    collapse = True
    attributes: list[str] = []
    paths: list[Path] = []

    args = iter(argv)
    for arg in args:
        if arg == "--dry-run":
            dry_run = True
        elif arg == "--keep-blank-lines":
            collapse = False
        elif arg.startswith("--attribute="):
            attributes.append(arg.split("=", 1)[1])
        elif arg == "--attribute":
            value = next(args, None)
            if value is None:
                print("--attribute needs a value")
                raise SystemExit(1)
            attributes.append(value)
        elif arg.startswith("--"):
            print(f"Unknown option {arg}")
            raise SystemExit(1)
        else:
            paths.append(Path(arg))

    return attributes or [DEFAULT_ATTRIBUTE], paths or [Path(".")], dry_run, collapse


def main() -> None:
    attributes, paths, dry_run, collapse = parse_args(sys.argv[1:])
    for attribute in attributes:
        try:
            check_attribute_name(attribute)
        except ValueError as exc:
            print(exc)
            raise SystemExit(1) from exc
    names = ", ".join(attributes)

    total_files = 0
    total_attrs = 0

    for path in paths:
        if not path.exists():
            print(f"Path {path} not found")
            raise SystemExit(1)

        scripts = list(iter_scripts(path))
        if not scripts and path.is_dir():
            print(f"No C# scripts found in {path}")
            continue

        for script in scripts:
            count = strip_file(script, attributes, dry_run, collapse)
            total_files += 1
            total_attrs += count
            if count and dry_run:
                print(f"  {script}: {count} attributes")

    if not total_files:
        return

    if total_attrs:
        action = "Would remove" if dry_run else "Removed"
        print(f"Processed {total_files} script(s). {action} {total_attrs} {names} attributes.")
    else:
        print(f"Processed {total_files} script(s). No {names} attributes found.")


if __name__ == "__main__":
    main()

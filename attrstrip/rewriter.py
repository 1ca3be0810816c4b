"""Remove one named attribute from bracketed attribute lists in source text.

Attribute lists look like ``[Header("Stats"), FormerlySerializedAs("hp")]``,
optionally followed by a same-line ``// comment``. The target attribute is
dropped from every list it appears in; lists that lose their last entry
disappear entirely, while their trailing comment stays where it was.

Lists without the target come back byte-for-byte, so rewriting a
version-controlled file only touches the lines that actually change.

Usage:
    from attrstrip import rewrite

    new_text, removed = rewrite(text, "FormerlySerializedAs")
"""

from __future__ import annotations

import re
from bisect import bisect_left
from dataclasses import dataclass
from typing import NamedTuple

# Matches an attribute list and whatever trails it on the same line:
#   group 1: the list body up to the first closing bracket
#   group 2: horizontal whitespace after the closing bracket
#   group 3: a `//` comment running to end of line (optional)
SPAN_PATTERN = re.compile(r"\[([^\]]*)\]([ \t]*)(//[^\r\n]*)?")

# `field:`, `property:` etc. at the start of a list, but not `global::`
TARGET_SPECIFIER = re.compile(r"\s*([A-Za-z_]\w*)\s*:(?!:)")

TOKEN_PATTERN = re.compile(
    r"\s*((?:global::)?[A-Za-z_]\w*(?:\s*\.\s*[A-Za-z_]\w*)*)\s*(\(.*\))?\s*",
    re.DOTALL,
)

ATTRIBUTE_NAME = re.compile(r"(?:global::)?[A-Za-z_]\w*(?:\.[A-Za-z_]\w*)*")

LINE_PATTERN = re.compile(r"[^\r\n]*(?:\r\n|\r|\n)|[^\r\n]+\Z")


class RewriteResult(NamedTuple):
    content: str
    removed: int


def _short_name(name: str) -> str:
    """Reduce `global::Ns.FooAttribute` to `Foo`."""
    name = re.split(r"\.|::", re.sub(r"\s+", "", name))[-1]
    if name.endswith("Attribute") and len(name) > len("Attribute"):
        name = name[: -len("Attribute")]
    return name


@dataclass(frozen=True)
class AttributeToken:
    text: str

    @property
    def name(self) -> str | None:
        match = TOKEN_PATTERN.fullmatch(self.text)
        return match.group(1) if match else None

    def matches(self, attribute: str) -> bool:
        name = self.name
        return name is not None and _short_name(name) == _short_name(attribute)


def split_attributes(body: str) -> list[str] | None:
    """Split a list body on top-level commas.

    Commas inside parentheses or quoted literals don't count. Backslash escapes
    apply except in verbatim @"..." strings, where "" is the escaped quote.
    Returns None when the parentheses or quotes don't balance, or when a `[`
    appears outside a literal.
    """
    parts: list[str] = []
    depth = 0
    quote = None
    verbatim = False
    start = 0
    i = 0
    while i < len(body):
        ch = body[i]
        if quote:
            if verbatim:
                if ch == quote:
                    if body[i + 1:i + 2] == quote:
                        i += 1
                    else:
                        quote = None
            elif ch == "\\":
                i += 1
            elif ch == quote:
                quote = None
        elif ch in "\"'":
            quote = ch
            verbatim = ch == '"' and body[:i].endswith(("@", "@$"))
        elif ch == "[":
            return None
        elif ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
            if depth < 0:
                return None
        elif ch == "," and depth == 0:
            parts.append(body[start:i])
            start = i + 1
        i += 1
    if depth or quote:
        return None
    parts.append(body[start:])
    return parts


@dataclass(frozen=True)
class AttributeListSpan:
    body: str
    trailing_space: str
    comment: str
    specifier: str | None
    tokens: tuple[AttributeToken, ...] | None

    @classmethod
    def from_match(cls, match: re.Match[str]) -> AttributeListSpan:
        body = match.group(1)
        specifier = None
        entries = body
        spec_match = TARGET_SPECIFIER.match(body)
        if spec_match:
            specifier = spec_match.group(1)
            entries = body[spec_match.end():]
        parts = split_attributes(entries)
        tokens = None if parts is None else tuple(AttributeToken(p) for p in parts)
        return cls(body, match.group(2), match.group(3) or "", specifier, tokens)

    def without(self, attribute: str) -> tuple[str | None, int]:
        """Return (replacement text, removed count) for this span.

        The replacement is None when the span does not contain the attribute
        and must be emitted unchanged.
        """
        if self.tokens is None:
            return None, 0
        kept = [t for t in self.tokens if not t.matches(attribute)]
        removed = len(self.tokens) - len(kept)
        if not removed:
            return None, 0

        remaining = [t.text.strip() for t in kept if t.text.strip()]
        if not remaining:
            return self.comment, removed

        joined = ", ".join(remaining)
        if self.specifier:
            joined = f"{self.specifier}: {joined}"
        return f"[{joined}]{self.trailing_space}{self.comment}", removed


def _collapse_emptied_lines(text: str, removal_points: list[int]) -> str:
    """Reduce each run of blank lines holding an emptied line to one line break."""
    lines = LINE_PATTERN.findall(text)
    emptied: set[int] = set()
    offset = 0
    for index, line in enumerate(lines):
        content = line.rstrip("\r\n")
        end = offset + len(content)
        pos = bisect_left(removal_points, offset)
        if not content.strip() and pos < len(removal_points) and removal_points[pos] <= end:
            emptied.add(index)
        offset += len(line)

    if not emptied:
        return text

    out: list[str] = []
    run: list[int] = []

    def flush() -> None:
        if any(i in emptied for i in run):
            first = lines[run[0]]
            out.append(first[len(first.rstrip("\r\n")):] if run[0] in emptied else first)
        else:
            out.extend(lines[i] for i in run)
        run.clear()

    for index, line in enumerate(lines):
        if line.strip():
            flush()
            out.append(line)
        else:
            run.append(index)
    flush()
    return "".join(out)


def check_attribute_name(attribute: str) -> str:
    if not isinstance(attribute, str) or not ATTRIBUTE_NAME.fullmatch(attribute):
        raise ValueError(f"Not an attribute name: {attribute!r}")
    return attribute


def rewrite(content: str, attribute: str, *, collapse_blank_lines: bool = True) -> RewriteResult:
    """Strip `attribute` from every attribute list in `content`.

    Returns the new text and the number of attribute entries removed. Text
    with nothing to remove is returned as the same string object.
    """
    check_attribute_name(attribute)

    pieces: list[str] = []
    removal_points: list[int] = []
    length = 0
    last = 0
    total = 0

    for match in SPAN_PATTERN.finditer(content):
        replacement, removed = AttributeListSpan.from_match(match).without(attribute)
        if not removed:
            continue
        total += removed
        before = content[last:match.start()]
        pieces.append(before)
        length += len(before)
        if not replacement:
            removal_points.append(length)
        pieces.append(replacement)
        length += len(replacement)
        last = match.end()

    if not total:
        return RewriteResult(content, 0)

    pieces.append(content[last:])
    new_content = "".join(pieces)
    if collapse_blank_lines and removal_points:
        new_content = _collapse_emptied_lines(new_content, removal_points)
    return RewriteResult(new_content, total)

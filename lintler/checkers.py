"""Heuristic syntax checkers for tagged markup, bracket notation and delimited records.

Three independent checkers, one per supported file kind:
  1. check_markup   — open-tag stack, mismatched/unclosed tags, bare '&'
  2. check_brackets — curly/square nesting counters over the whole file
  3. check_records  — comma field counts against the first line, control chars

Each checker is a single forward pass that stops at the first violation and
returns a CheckResult. None of them raise for bad content or unreadable paths;
an open failure becomes a FileOpenError result.

These are NOT conformant parsers: no quoting, no comments, no entities beyond
'&amp;', no multi-line values.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Iterable, Iterator, Optional

# ─── Constants ──────────────────────────────────────────────────────────────

# Single-byte decoding: every byte becomes exactly one character.
ENCODING = "latin-1"

# "<", optional "/", alphanumeric name, anything up to ">"
TAG_PATTERN = re.compile(r"<(/?)([a-zA-Z0-9]+)([^>]*)>")
BARE_AMPERSAND = re.compile(r"&(?!amp;)")

# Control characters below 0x20 that records may legitimately contain.
ALLOWED_CONTROL = frozenset("\t\r\n")

FIELD_DELIMITER = ","

# Error kinds
FILE_OPEN_ERROR = "FileOpenError"
MISMATCHED_CLOSE = "MismatchedClose"
UNCLOSED_TAGS = "UnclosedTags"
UNESCAPED_AMPERSAND = "UnescapedAmpersand"
NESTED_ANGLE_BRACKET = "NestedAngleBracket"
STRAY_ANGLE_BRACKET = "StrayAngleBracket"
UNBALANCED_BRACKETS = "UnbalancedBrackets"
INVALID_CONTROL_CHAR = "InvalidControlChar"
INCONSISTENT_COLUMN_COUNT = "InconsistentColumnCount"
UNSUPPORTED_EXTENSION = "UnsupportedExtension"


# ─── Results ────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class CheckError:
    """First violation found in a file."""
    kind: str
    message: str
    line: Optional[int] = None

    def __str__(self) -> str:
        return f"Error: {self.message}"

    def to_dict(self) -> dict:
        return {"kind": self.kind, "message": self.message, "line": self.line}


@dataclass(frozen=True)
class CheckResult:
    ok: bool
    error: Optional[CheckError] = None

    def __bool__(self) -> bool:
        return self.ok


PASSED = CheckResult(ok=True)


def _fail(kind: str, message: str, line: Optional[int] = None) -> CheckResult:
    return CheckResult(ok=False, error=CheckError(kind, message, line))


def _open_failure(label: str, path: str) -> CheckResult:
    return _fail(FILE_OPEN_ERROR, f"Could not open {label} file: {path}")


def _read_failure(label: str, path: str) -> CheckResult:
    return _fail(FILE_OPEN_ERROR, f"Could not read {label} file: {path}")


def _strip_newline(line: str) -> str:
    return line[:-1] if line.endswith("\n") else line


# ─── Tag tokenizer ──────────────────────────────────────────────────────────

@dataclass(frozen=True)
class TagToken:
    name: str
    closing: bool
    start: int
    end: int
    attrs: str = ""

    @property
    def raw_name(self) -> str:
        """Name as written, with the leading '/' for closing tags."""
        return f"/{self.name}" if self.closing else self.name


def iter_tags(line: str) -> Iterator[TagToken]:
    """Yield the tag tokens of one line, left to right.

    The name is the leading run of ASCII letters/digits after '<' or '</';
    the rest up to '>' is attrs, so '<ns:item>' is tag 'ns'. Brackets not
    followed by a name ('<?xml', '<!--', '< a>') are skipped as text.
    Self-closing tags are not special: '<br/>' is an opening 'br' tag
    whose trailing '/' lands in attrs.
    """
    for m in TAG_PATTERN.finditer(line):
        yield TagToken(
            name=m.group(2),
            closing=bool(m.group(1)),
            start=m.start(),
            end=m.end(),
            attrs=m.group(3),
        )


def find_bare_ampersand(line: str) -> int:
    """Offset of the first '&' not followed by 'amp;', or -1."""
    m = BARE_AMPERSAND.search(line)
    return m.start() if m else -1


def scan_angle_brackets(line: str, lineno: int) -> Optional[CheckError]:
    """Per-line '<'/'>' alternation check (opt-in strict markup mode)."""
    inside_tag = False
    for ch in line:
        if ch == "<":
            if inside_tag:
                return CheckError(NESTED_ANGLE_BRACKET,
                                  f"Nested '<' found inside a tag, line: {lineno}", lineno)
            inside_tag = True
        elif ch == ">":
            if not inside_tag:
                return CheckError(STRAY_ANGLE_BRACKET,
                                  f"Invalid character '>' found in text content, line: {lineno}",
                                  lineno)
            inside_tag = False
    return None


# ─── Markup checker ─────────────────────────────────────────────────────────

def check_markup(path: str, *, angle_brackets: bool = False) -> CheckResult:
    """Validate tag nesting and ampersand escaping, line by line."""
    try:
        f = open(path, encoding=ENCODING, newline="\n")
    except OSError:
        return _open_failure("XML", path)

    try:
        with f:
            return _scan_markup(f, path, angle_brackets)
    except OSError:
        return _read_failure("XML", path)


def _scan_markup(lines: Iterable[str], path: str, angle_brackets: bool) -> CheckResult:
    open_tags: list[str] = []
    for lineno, raw in enumerate(lines, 1):
        line = _strip_newline(raw)

        for tag in iter_tags(line):
            if tag.closing:
                if not open_tags or open_tags[-1] != tag.name:
                    return _fail(MISMATCHED_CLOSE,
                                 f"Mismatched closing tag: {tag.raw_name}, line: {lineno}",
                                 lineno)
                open_tags.pop()
            else:
                open_tags.append(tag.name)

        if find_bare_ampersand(line) >= 0:
            return _fail(UNESCAPED_AMPERSAND,
                         f"Invalid character '&' found without proper escaping, line: {lineno}",
                         lineno)

        if angle_brackets:
            err = scan_angle_brackets(line, lineno)
            if err is not None:
                return CheckResult(ok=False, error=err)

    if open_tags:
        return _fail(UNCLOSED_TAGS, f"Unclosed tags in XML file: {path}")
    return PASSED


# ─── Bracket checker ────────────────────────────────────────────────────────

def check_brackets(path: str) -> CheckResult:
    """Validate that '{}' and '[]' never close more than they open."""
    try:
        f = open(path, encoding=ENCODING, newline="\n")
    except OSError:
        return _open_failure("JSON", path)
    try:
        with f:
            content = f.read()
    except OSError:
        return _read_failure("JSON", path)

    curly = 0
    square = 0
    lineno = 1
    for ch in content:
        if ch == "{":
            curly += 1
        elif ch == "}":
            curly -= 1
        elif ch == "[":
            square += 1
        elif ch == "]":
            square -= 1
        elif ch == "\n":
            lineno += 1

        if curly < 0 or square < 0:
            return _fail(UNBALANCED_BRACKETS,
                         f"Unbalanced brackets in JSON file, line {lineno}: {path}",
                         lineno)

    if curly != 0 or square != 0:
        return _fail(UNBALANCED_BRACKETS, f"Unbalanced brackets in JSON file: {path}")
    return PASSED


# ─── Record checker ─────────────────────────────────────────────────────────

def count_fields(line: str) -> int:
    # Quoted delimiters are not respected.
    return line.count(FIELD_DELIMITER) + 1


def has_control_char(text: str) -> bool:
    return any(ord(ch) < 32 and ch not in ALLOWED_CONTROL for ch in text)


def check_records(path: str) -> CheckResult:
    """Validate control characters and a constant field count per line."""
    try:
        f = open(path, encoding=ENCODING, newline="\n")
    except OSError:
        return _open_failure("CSV", path)

    try:
        with f:
            return _scan_records(f, path)
    except OSError:
        return _read_failure("CSV", path)


def _scan_records(lines: Iterable[str], path: str) -> CheckResult:
    baseline: Optional[int] = None
    for lineno, raw in enumerate(lines, 1):
        line = _strip_newline(raw)

        if has_control_char(line):
            return _fail(INVALID_CONTROL_CHAR,
                         f"Invalid character in CSV file: {path}, line {lineno}",
                         lineno)

        columns = count_fields(line)
        if baseline is None:
            baseline = columns
        elif columns != baseline:
            return _fail(INCONSISTENT_COLUMN_COUNT,
                         f"Inconsistent column count in CSV file: {path}, line {lineno}",
                         lineno)

    return PASSED


# ─── Registry ───────────────────────────────────────────────────────────────

CHECKERS: dict[str, Callable[..., CheckResult]] = {
    "xml": check_markup,
    "json": check_brackets,
    "csv": check_records,
}

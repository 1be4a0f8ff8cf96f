"""Line counting for package source trees.

Counts code lines: lines with at least one character outside comments.
Blank lines and comment-only lines (doc comments included) do not count.

Adding a language:
  1. Add a LanguageSpec entry to LANGUAGES below.
  2. That's it. LineCounter picks it up by extension.
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional

from ..exceptions import LineCountError
from ..logging_config import get_logger
from .models import LocReport

logger = get_logger(__name__)


@dataclass(frozen=True)
class LanguageSpec:
    """Comment and string syntax for one language.

    ``char_literals`` and ``raw_strings`` enable Rust's ``'x'`` character
    literals and ``r#"..."#`` raw strings.
    """

    name: str
    extensions: tuple[str, ...]
    line_comments: tuple[str, ...] = ()
    block_comment: Optional[tuple[str, str]] = None
    nested_blocks: bool = False
    string_quotes: tuple[str, ...] = ('"',)
    char_literals: bool = False
    raw_strings: bool = False


# 'x', '\n', '\'', '\x7f', '\u{1F600}'; lifetimes such as 'a never match
_CHAR_LITERAL = re.compile(r"'(?:[^'\\]|\\(?:u\{[0-9a-fA-F_]{1,6}\}|x[0-9a-fA-F]{2}|.))'")
# r"...", r#"..."#, br##"..."##
_RAW_STRING_START = re.compile(r'b?r(#*)"')

_C_STYLE = dict(line_comments=("//",), block_comment=("/*", "*/"))

LANGUAGES: dict[str, LanguageSpec] = {
    "rust": LanguageSpec(
        name="rust",
        extensions=(".rs",),
        nested_blocks=True,
        char_literals=True,
        raw_strings=True,
        **_C_STYLE,
    ),
    "c": LanguageSpec(name="c", extensions=(".c", ".h"), string_quotes=('"', "'"), **_C_STYLE),
    "cpp": LanguageSpec(
        name="cpp",
        extensions=(".cc", ".cpp", ".cxx", ".hh", ".hpp", ".hxx"),
        string_quotes=('"', "'"),
        **_C_STYLE,
    ),
    "javascript": LanguageSpec(
        name="javascript",
        extensions=(".js", ".mjs", ".ts"),
        string_quotes=('"', "'", "`"),
        **_C_STYLE,
    ),
    "python": LanguageSpec(
        name="python", extensions=(".py",), line_comments=("#",), string_quotes=('"', "'")
    ),
    "shell": LanguageSpec(
        name="shell", extensions=(".sh", ".bash"), line_comments=("#",), string_quotes=('"', "'")
    ),
    "toml": LanguageSpec(
        name="toml", extensions=(".toml",), line_comments=("#",), string_quotes=('"', "'")
    ),
    "yaml": LanguageSpec(
        name="yaml", extensions=(".yml", ".yaml"), line_comments=("#",), string_quotes=('"', "'")
    ),
}

_BY_EXTENSION: dict[str, LanguageSpec] = {
    ext: spec for spec in LANGUAGES.values() for ext in spec.extensions
}


def language_for(path: Path) -> Optional[LanguageSpec]:
    return _BY_EXTENSION.get(path.suffix.lower())


def count_code_lines(text: str, spec: LanguageSpec) -> int:
    """Count lines of ``text`` holding code, per ``spec``'s comment syntax.

    Strings are tracked so that comment markers inside literals are not
    mistaken for comments; a string spanning lines counts on every line.
    Raw strings end at their closing delimiter with no escape processing.
    """
    count = 0
    depth = 0  # block comment nesting
    quote: Optional[str] = None  # closing delimiter of the open string
    raw = False

    for line in text.splitlines():
        has_code = quote is not None and line.strip() != ""
        i = 0
        n = len(line)
        while i < n:
            ch = line[i]
            if depth:
                start, end = spec.block_comment  # type: ignore[misc]
                if line.startswith(end, i):
                    depth -= 1
                    i += len(end)
                elif spec.nested_blocks and line.startswith(start, i):
                    depth += 1
                    i += len(start)
                else:
                    i += 1
                continue
            if quote is not None:
                if raw:
                    close = line.find(quote, i)
                    if close < 0:
                        break
                    i = close + len(quote)
                    quote = None
                    raw = False
                    continue
                if ch == "\\":
                    i += 2
                    continue
                if ch == quote:
                    quote = None
                i += 1
                continue
            if ch.isspace():
                i += 1
                continue
            if any(line.startswith(marker, i) for marker in spec.line_comments):
                break
            if spec.block_comment and line.startswith(spec.block_comment[0], i):
                depth += 1
                i += len(spec.block_comment[0])
                continue
            has_code = True
            if spec.raw_strings and ch in "br" and not _is_ident_char(line, i - 1):
                match = _RAW_STRING_START.match(line, i)
                if match:
                    quote = '"' + match.group(1)
                    raw = True
                    i = match.end()
                    continue
            if spec.char_literals and ch == "'":
                match = _CHAR_LITERAL.match(line, i)
                if match:
                    i = match.end()
                    continue
            if ch in spec.string_quotes:
                quote = ch
            i += 1
        if has_code:
            count += 1
        # Only block comments and multi-line strings carry across lines
        if quote is not None and not raw and quote not in ('"', "`"):
            quote = None

    return count


def _is_ident_char(line: str, i: int) -> bool:
    return i >= 0 and (line[i].isalnum() or line[i] == "_")


class LineCounter:
    """Counts code lines under a directory.

    Args:
        primary_language: Language reported as ``language_loc``.
        excluded_dirs: Directory names never descended into (build output).
        count_hidden: Include dot-files and dot-directories.
    """

    def __init__(
        self,
        primary_language: str = "rust",
        excluded_dirs: Iterable[str] = ("target",),
        count_hidden: bool = True,
    ):
        if primary_language not in LANGUAGES:
            raise ValueError(f"Unknown language: {primary_language}")
        self.primary_language = primary_language
        self.excluded_dirs = frozenset(excluded_dirs)
        self.count_hidden = count_hidden

    def count(self, source_dir: Path) -> LocReport:
        """Count code lines in every recognised file under ``source_dir``.

        A directory with no recognised files yields a zero report.

        Raises:
            LineCountError: If the directory is missing or a file can't be read.
        """
        source_dir = Path(source_dir)
        if not source_dir.is_dir():
            raise LineCountError(source_dir, "not a directory")

        total = 0
        primary = 0
        files = 0
        for path in self._iter_files(source_dir):
            spec = language_for(path)
            if spec is None:
                continue
            try:
                text = path.read_text(encoding="utf-8", errors="replace")
            except OSError as e:
                raise LineCountError(path, str(e)) from e
            lines = count_code_lines(text, spec)
            files += 1
            total += lines
            if spec.name == self.primary_language:
                primary += lines

        logger.debug("Counted %d files in %s: %d lines (%d %s)",
                      files, source_dir, total, primary, self.primary_language)
        return LocReport(total_loc=total, language_loc=primary)

    def _iter_files(self, root: Path):
        def _raise(err: OSError) -> None:
            raise LineCountError(Path(err.filename or root), err.strerror or str(err))

        for dirpath, dirnames, filenames in os.walk(root, onerror=_raise):
            dirnames[:] = sorted(
                d for d in dirnames
                if d not in self.excluded_dirs and (self.count_hidden or not d.startswith("."))
            )
            for name in sorted(filenames):
                if not self.count_hidden and name.startswith("."):
                    continue
                yield Path(dirpath) / name

"""Character-level helpers shared by the segmenter and statement parsers.

Nothing here tokenizes the whole language. The helpers only know enough
to step over whitespace, identifier-like words, quoted string literals
and comments, which is all pragma/import extraction needs.
"""

from __future__ import annotations

from typing import Iterator

from solidity_analyzer.core.types import CommentPolicy

QUOTES = frozenset("\"'")


def is_word_char(ch: str) -> bool:
    return ch.isalnum() or ch == "_" or ch == "$"


def word_end(text: str, i: int) -> int:
    """Return the index just past the run of word characters starting at ``i``."""
    n = len(text)
    while i < n and is_word_char(text[i]):
        i += 1
    return i


def skip_whitespace(text: str, i: int) -> int:
    n = len(text)
    while i < n and text[i].isspace():
        i += 1
    return i


def scan_string(text: str, start: int) -> tuple[int, bool]:
    """Step over the string literal opened by the quote at ``start``.

    Returns ``(end, terminated)`` where ``end`` is the index just past the
    closing quote. A literal cannot span a raw newline; an unterminated one
    stops at the newline (or end of text) with ``terminated=False``.
    """
    quote = text[start]
    n = len(text)
    i = start + 1
    while i < n:
        ch = text[i]
        if ch == "\\":
            i += 2
            continue
        if ch == quote:
            return i + 1, True
        if ch == "\n":
            return i, False
        i += 1
    return n, False


def read_string(text: str, start: int) -> str | None:
    """Return the raw content of the literal at ``start``, without quotes.

    ``None`` when the literal is unterminated.
    """
    end, terminated = scan_string(text, start)
    if not terminated:
        return None
    return text[start + 1:end - 1]


def _comments(source: str) -> Iterator[tuple[int, int, int, int]]:
    """Yield ``(start, body_start, body_end, end)`` for each comment.

    ``start:end`` covers the whole comment including its markers. A line
    comment ends before its newline; an unclosed block comment runs to the
    end of ``source``. Comment markers inside string literals are skipped.
    """
    n = len(source)
    i = 0
    while i < n:
        ch = source[i]
        if ch in QUOTES:
            i, _ = scan_string(source, i)
            continue
        if ch != "/" or i + 1 >= n or source[i + 1] not in "/*":
            i += 1
            continue

        if source[i + 1] == "/":
            end = source.find("\n", i + 2)
            if end == -1:
                end = n
            body_end = end
        else:
            close = source.find("*/", i + 2)
            if close == -1:
                body_end = end = n
            else:
                body_end, end = close, close + 2

        yield i, i + 2, body_end, end
        i = end


def _balance_braces(body: str) -> str:
    """Blank the braces of ``body`` that have no partner inside it."""
    unmatched: list[int] = []
    opened: list[int] = []
    n = len(body)
    i = 0
    while i < n:
        ch = body[i]
        if ch in QUOTES:
            i, _ = scan_string(body, i)
            continue
        if ch == "{":
            opened.append(i)
        elif ch == "}":
            if opened:
                opened.pop()
            else:
                unmatched.append(i)
        i += 1

    unmatched.extend(opened)
    if not unmatched:
        return body
    chars = list(body)
    for pos in unmatched:
        chars[pos] = " "
    return "".join(chars)


def mask_comments(source: str, policy: CommentPolicy = CommentPolicy.SKIP) -> str:
    """Blank out comments while keeping every offset of ``source`` intact.

    With ``CommentPolicy.SKIP`` the whole comment becomes spaces (newlines
    are kept). With ``CommentPolicy.SCAN`` the ``//``, ``/*`` and ``*/``
    markers are blanked, so commented-out code stays visible. Braces with
    no partner inside the same comment are blanked too, so prose such as
    ``/* see {Foo */`` cannot open a block that outlives the comment.
    Comment markers inside string literals are left alone.
    """
    chunks: list[str] = []
    flushed = 0
    for start, body_start, body_end, end in _comments(source):
        body = source[body_start:body_end]
        if policy is CommentPolicy.SKIP:
            body = "".join("\n" if c == "\n" else " " for c in body)
        else:
            body = _balance_braces(body)
        chunks.append(source[flushed:start])
        chunks.append("  " + body + " " * (end - body_end))
        flushed = end

    if not chunks:
        return source
    chunks.append(source[flushed:])
    return "".join(chunks)


def strip_comments(text: str) -> str:
    """Replace each comment, with the blanks around it, by a single space.

    Offsets are not kept. Used to read a statement back from the original
    source as it would be written without its comments.
    """
    chunks: list[str] = []
    flushed = 0
    for start, _, _, end in _comments(text):
        head = text[flushed:start].rstrip(" \t")
        if head or not chunks:
            chunks.append(head)
            chunks.append(" ")
        flushed = end
        while flushed < len(text) and text[flushed] in " \t":
            flushed += 1

    if not chunks:
        return text
    chunks.append(text[flushed:])
    return "".join(chunks)


def line_number(text: str, offset: int) -> int:
    """1-based line of ``offset``."""
    return text.count("\n", 0, offset) + 1

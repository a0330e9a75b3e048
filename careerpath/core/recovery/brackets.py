"""
Bracket-balance analysis for JSON-like text.

Stateless helpers shared by the normalizer, the domain repairer and the
parser strategies. All scanning is string-aware: delimiters inside
double-quoted string literals are ignored, and a string left open at the
end of the text is reported so callers can close it before balancing.
"""
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

OPENERS = {"{": "}", "[": "]"}
CLOSERS = {"}": "{", "]": "["}

# Segment kinds produced by split_segments
CODE = "code"
STRING = "string"
SQUOTE = "squote"


@dataclass
class BracketBalance:
    """Delimiter counts found outside string literals."""
    open_braces: int = 0
    close_braces: int = 0
    open_brackets: int = 0
    close_brackets: int = 0

    @property
    def missing_braces(self) -> int:
        return max(0, self.open_braces - self.close_braces)

    @property
    def missing_brackets(self) -> int:
        return max(0, self.open_brackets - self.close_brackets)

    @property
    def excess_braces(self) -> int:
        return max(0, self.close_braces - self.open_braces)

    @property
    def excess_brackets(self) -> int:
        return max(0, self.close_brackets - self.open_brackets)

    @property
    def is_balanced(self) -> bool:
        return (
            self.open_braces == self.close_braces
            and self.open_brackets == self.close_brackets
        )


@dataclass
class ScanState:
    """Nesting state at the end of a text.

    Attributes:
        stack: Unclosed openers as (char, index), outermost first
        in_string: Text ends inside a double-quoted string
        string_start: Index of the opening quote of that string
        escaped: Text ends right after a backslash inside that string
    """
    stack: List[Tuple[str, int]] = field(default_factory=list)
    in_string: bool = False
    string_start: Optional[int] = None
    escaped: bool = False

    @property
    def innermost(self) -> Optional[str]:
        return self.stack[-1][0] if self.stack else None


def count_delimiters(text: str) -> BracketBalance:
    """Count braces and brackets outside string literals."""
    balance = BracketBalance()
    in_string = False
    escaped = False

    for ch in text:
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch == "{":
            balance.open_braces += 1
        elif ch == "}":
            balance.close_braces += 1
        elif ch == "[":
            balance.open_brackets += 1
        elif ch == "]":
            balance.close_brackets += 1

    return balance


def scan(text: str) -> ScanState:
    """
    Track nesting through the text.

    Closers that do not match the innermost opener are ignored, so the
    returned stack is what a well-formed continuation would have to close.
    """
    state = ScanState()

    for i, ch in enumerate(text):
        if state.in_string:
            if state.escaped:
                state.escaped = False
            elif ch == "\\":
                state.escaped = True
            elif ch == '"':
                state.in_string = False
                state.string_start = None
            continue
        if ch == '"':
            state.in_string = True
            state.string_start = i
        elif ch in OPENERS:
            state.stack.append((ch, i))
        elif ch in CLOSERS:
            if state.stack and state.stack[-1][0] == CLOSERS[ch]:
                state.stack.pop()

    return state


def closing_sequence(text: str) -> str:
    """Characters needed to close an open string and every open container."""
    state = scan(text)
    closers = ""

    if state.in_string:
        # A trailing lone backslash would escape our closing quote
        closers += '\\"' if state.escaped else '"'

    for opener, _ in reversed(state.stack):
        closers += OPENERS[opener]

    return closers


def balance(text: str) -> str:
    """Append the closers needed to balance the text, in nesting order."""
    return text + closing_sequence(text)


def strip_excess_closers(text: str) -> str:
    """
    Delete every closer that appears with no matching opener.

    Counts are kept per delimiter type: a '}' is excess when more braces
    have been closed than opened so far, likewise for ']'.
    """
    out = []
    opened = {"{": 0, "[": 0}
    closed = {"}": 0, "]": 0}
    in_string = False
    escaped = False

    for ch in text:
        if in_string:
            out.append(ch)
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch in opened:
            opened[ch] += 1
        elif ch in closed:
            if closed[ch] + 1 > opened[CLOSERS[ch]]:
                continue
            closed[ch] += 1
        out.append(ch)

    return "".join(out)


def trailing_closer_run(text: str) -> Tuple[str, str]:
    """
    Split off the run of closers (and whitespace) ending the text.

    Returns:
        (prefix, run); run is empty when the text does not end with a closer
        or the closers sit inside an unterminated string.
    """
    end = len(text)
    start = end
    while start > 0 and (text[start - 1] in CLOSERS or text[start - 1].isspace()):
        start -= 1

    run = text[start:end]
    if not any(ch in CLOSERS for ch in run):
        return text, ""

    prefix = text[:start]
    if scan(prefix).in_string:
        return text, ""
    return prefix, run


def split_segments(text: str, single_quotes: bool = False) -> List[Tuple[str, str]]:
    """
    Split text into code and string-literal segments.

    Args:
        text: JSON-like text
        single_quotes: Also treat '...' in code position as a string literal

    Returns:
        List of (kind, chunk) with kind CODE, STRING or SQUOTE. String chunks
        keep their quotes; a string left open at the end has no closing quote.
    """
    segments: List[Tuple[str, str]] = []
    buf: List[str] = []
    quote = None
    escaped = False

    for ch in text:
        if quote:
            buf.append(ch)
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == quote:
                segments.append((STRING if quote == '"' else SQUOTE, "".join(buf)))
                buf = []
                quote = None
            continue
        if ch == '"' or (single_quotes and ch == "'"):
            if buf:
                segments.append((CODE, "".join(buf)))
                buf = []
            quote = ch
            buf.append(ch)
            continue
        buf.append(ch)

    if buf:
        if quote:
            segments.append((STRING if quote == '"' else SQUOTE, "".join(buf)))
        else:
            segments.append((CODE, "".join(buf)))

    return segments

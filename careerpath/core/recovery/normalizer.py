"""
TextNormalizer - Turn raw model output into best-effort JSON text.

Each step is a pure str -> str function so it can be tested on its own;
TextNormalizer composes them in a fixed order. Syntax rewrites only touch
text outside double-quoted string literals, so a value such as
"Note: remote {hybrid}" survives untouched.
"""
import json
import logging
import re
from typing import Callable, List, Tuple

from careerpath.core.recovery.brackets import (
    CLOSERS,
    CODE,
    SQUOTE,
    balance,
    scan,
    split_segments,
    trailing_closer_run,
)

logger = logging.getLogger(__name__)

Transform = Callable[[str], str]

_FENCE_RE = re.compile(r"```[A-Za-z0-9_+-]*")
_TRAILING_COMMA_RE = re.compile(r",(\s*[}\]])")
_BARE_KEY_RE = re.compile(r"([{,]\s*)(\w+)(\s*:)")
_UNDEFINED_RE = re.compile(r"\bundefined\b")
_NAN_RE = re.compile(r"\bNaN\b")
_ADJACENT_CONTAINERS_RE = re.compile(r"([}\]])(\s*)([{\[])")


def _map_code(text: str, fn: Transform) -> str:
    """Apply fn to every code segment, leaving string literals alone."""
    return "".join(
        fn(chunk) if kind == CODE else chunk
        for kind, chunk in split_segments(text)
    )


# --- Step 1 -----------------------------------------------------------------

def strip_code_fences(text: str) -> str:
    """Remove ``` markers, with or without a language tag."""
    return _FENCE_RE.sub("", text)


# --- Step 2 -----------------------------------------------------------------

def extract_json_span(text: str) -> str:
    """
    Slice from the first '{' to the last '}'.

    Text with no such span is returned unchanged; it most likely holds
    no JSON at all.
    """
    first = text.find("{")
    last = text.rfind("}")

    if first == -1 or last == -1 or last <= first:
        logger.debug("No JSON object span found in text")
        return text

    return text[first:last + 1]


# --- Step 3 -----------------------------------------------------------------

def _requote(chunk: str) -> str:
    body = chunk[1:]
    closed = False
    if body.endswith("'"):
        head = body[:-1]
        # an odd number of backslashes means the final quote is escaped
        closed = (len(head) - len(head.rstrip("\\"))) % 2 == 0
    if closed:
        body = body[:-1]
    body = body.replace("\\'", "'")
    body = re.sub(r'(?<!\\)"', '\\"', body)
    return '"' + body + ('"' if closed else "")


def convert_single_quotes(text: str) -> str:
    """Rewrite single-quoted strings as double-quoted JSON strings."""
    return "".join(
        _requote(chunk) if kind == SQUOTE else chunk
        for kind, chunk in split_segments(text, single_quotes=True)
    )


def remove_trailing_commas(text: str) -> str:
    return _map_code(text, lambda c: _TRAILING_COMMA_RE.sub(r"\1", c))


def quote_bare_keys(text: str) -> str:
    """Wrap unquoted object keys in double quotes (best-effort heuristic)."""
    return _map_code(text, lambda c: _BARE_KEY_RE.sub(r'\1"\2"\3', c))


def replace_js_literals(text: str) -> str:
    """undefined -> null, NaN -> 0."""
    return _map_code(text, lambda c: _NAN_RE.sub("0", _UNDEFINED_RE.sub("null", c)))


def insert_missing_commas(text: str) -> str:
    """Separate adjacent containers: '}{' -> '},{', '][' -> '],[' and so on."""
    return _map_code(text, lambda c: _ADJACENT_CONTAINERS_RE.sub(r"\1,\2\3", c))


def collapse_closer_runs(text: str) -> str:
    """
    Drop unmatched closers from the run of closers ending the text.

    Naive fixes upstream tend to leave runs like '}}]}' with one closer too
    many or of the wrong type; closers that match an open container are kept.
    """
    prefix, run = trailing_closer_run(text)
    if not run:
        return text

    stack = [opener for opener, _ in scan(prefix).stack]
    kept = []
    for ch in run:
        if ch in CLOSERS:
            if stack and stack[-1] == CLOSERS[ch]:
                stack.pop()
                kept.append(ch)
            continue
        kept.append(ch)

    return prefix + "".join(kept)


# --- Step 4 -----------------------------------------------------------------

def fill_truncated_tail(text: str) -> str:
    """
    Patch text that stops right after '{', '[', ',' or ':'.

    A 'null' placeholder is appended after ':' and inside arrays; a dangling
    comma inside an object is dropped since 'null' cannot stand in for a key.
    """
    stripped = text.rstrip()
    if not stripped or stripped[-1] not in "{[,:":
        return text

    state = scan(stripped)
    if state.in_string:
        return text

    last = stripped[-1]
    if last == ":":
        return stripped + "null"
    if last == "[" or (last == "," and state.innermost == "["):
        return stripped + "null"
    if last == ",":
        return stripped[:-1]
    return stripped


# --- Step 5 -----------------------------------------------------------------

def close_open_structures(text: str) -> str:
    """Close an open string and every open container, innermost first."""
    return balance(text)


class TextNormalizer:
    """
    Ordered composition of the normalization steps.

    Usage:
        normalizer = TextNormalizer()
        candidate = normalizer.normalize(raw_text)
    """

    # Steps 1-3: extraction and syntax rewrites
    REWRITES: Tuple[Tuple[str, Transform], ...] = (
        ("strip_code_fences", strip_code_fences),
        ("extract_json_span", extract_json_span),
        ("convert_single_quotes", convert_single_quotes),
        ("remove_trailing_commas", remove_trailing_commas),
        ("quote_bare_keys", quote_bare_keys),
        ("replace_js_literals", replace_js_literals),
        ("insert_missing_commas", insert_missing_commas),
        ("collapse_closer_runs", collapse_closer_runs),
    )

    # Steps 4-5: truncation handling and balancing
    CLOSING: Tuple[Tuple[str, Transform], ...] = (
        ("fill_truncated_tail", fill_truncated_tail),
        ("close_open_structures", close_open_structures),
    )

    def rewrite(self, text: str) -> str:
        """Run steps 1-3 only; the result may still be unbalanced."""
        return self._run(text.strip(), self.REWRITES).strip()

    def normalize(self, text: str) -> str:
        """Run every step and return best-effort JSON text."""
        return self._run(self.rewrite(text), self.CLOSING)

    def _run(self, text: str, steps: Tuple[Tuple[str, Transform], ...]) -> str:
        for name, step in steps:
            updated = step(text)
            if updated != text:
                logger.debug(f"Normalizer step {name} changed {len(text)} -> {len(updated)} chars")
            text = updated
        return text


def describe_decode_error(text: str, error: json.JSONDecodeError, context: int = 50) -> str:
    """Snippet of text around a decode error, for diagnostics."""
    start = max(0, error.pos - context)
    end = min(len(text), error.pos + context)
    return text[start:end]

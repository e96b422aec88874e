"""
Regex builders for matching WordprocessingML elements in raw markup.

All block patterns are non-greedy and span line breaks, so a match always
ends at the nearest closing tag. Opening tags are only accepted when they
are not self-closing; `<w:del .../>` is never the start of a block.
"""
import re
from typing import Callable, Tuple, Union

# Attributes of an opening tag, excluding a trailing "/"
_OPEN_TAIL = r"\b[^>]*(?<!/)>"

def self_closing(tag: str) -> re.Pattern:
    """<tag ... />"""
    return re.compile(rf"<{re.escape(tag)}\b[^>]*/>")

def block(tag: str) -> re.Pattern:
    """
    <tag ...>...</tag>, ending at the nearest </tag>.
    Group "inner" holds the content.
    """
    t = re.escape(tag)
    return re.compile(rf"<{t}{_OPEN_TAIL}(?P<inner>.*?)</{t}>", re.DOTALL)

def innermost_block(tag: str) -> re.Pattern:
    """
    Like `block`, but refuses to match when another <tag> opens inside.
    Applied repeatedly, nested blocks resolve from the inside out.
    """
    t = re.escape(tag)
    return re.compile(
        rf"<{t}{_OPEN_TAIL}(?P<inner>(?:(?!<{t}\b).)*?)</{t}>",
        re.DOTALL,
    )

def element(tag: str) -> re.Pattern:
    """Either the self-closing or the explicit open/close form."""
    t = re.escape(tag)
    return re.compile(rf"<{t}\b(?:[^>]*/>|[^>]*(?<!/)>.*?</{t}>)", re.DOTALL)

def attribute(name: str) -> re.Pattern:
    """An attribute together with the whitespace before it."""
    return re.compile(rf'\s+{re.escape(name)}="[^"]*"')

Replacement = Union[str, Callable[[re.Match], str]]

def sub_until_stable(pattern: re.Pattern, repl: Replacement, text: str) -> Tuple[str, int]:
    """
    Substitutes repeatedly until the pattern no longer matches.
    Returns the new text and the total number of substitutions.
    """
    total = 0
    while True:
        text, count = pattern.subn(repl, text)
        if not count:
            return text, total
        total += count

def keep_inner(match: re.Match) -> str:
    return match.group("inner")

"""
Token-level highlighting between two canonical package strings.

Tokens are compared by position, not aligned: once a token is inserted or
removed, every later token on that line is reported as distinct.
"""
import re
from dataclasses import dataclass, field

# Delimiters are captured so that joining the tokens gives back the input
TOKEN_DELIMITER = re.compile(r"([:(), ]+)")

REMOVED_MARKER = "-"
ADDED_MARKER = "+"


@dataclass(frozen=True)
class Segment:
    """A run of text that is either shared with the other line or not."""
    text: str
    distinct: bool

    def to_dict(self) -> dict:
        return {"text": self.text, "distinct": self.distinct}


@dataclass
class HighlightedLine:
    marker: str
    segments: list[Segment] = field(default_factory=list)

    @property
    def text(self) -> str:
        return "".join(s.text for s in self.segments)

    def to_dict(self) -> dict:
        return {
            "marker": self.marker,
            "segments": [s.to_dict() for s in self.segments],
        }


@dataclass
class Highlight:
    """Highlighted old (`removed`) and new (`added`) lines of a modification."""
    removed: HighlightedLine
    added: HighlightedLine

    def to_dict(self) -> dict:
        return {"removed": self.removed.to_dict(), "added": self.added.to_dict()}


def tokenize(text: str) -> list[str]:
    """
    Split text on delimiter runs, keeping the delimiters as tokens.

    A line starting or ending with a delimiter yields an empty token at
    that end, which keeps both lines aligned by position.
    """
    return TOKEN_DELIMITER.split(text)


def _add(line: HighlightedLine, token: str, distinct: bool):
    if token:
        line.segments.append(Segment(token, distinct))


def highlight(old: str, new: str) -> Highlight:
    """
    Classify each token of two canonical strings as common or distinct.

    Tokens at the same index are common when equal. Tokens past the end of
    the shorter line exist on one side only and are always distinct.
    Empty tokens take part in the alignment but produce no segment.
    """
    old_tokens = tokenize(old)
    new_tokens = tokenize(new)

    removed = HighlightedLine(REMOVED_MARKER)
    added = HighlightedLine(ADDED_MARKER)

    shared = min(len(old_tokens), len(new_tokens))
    for old_token, new_token in zip(old_tokens, new_tokens):
        distinct = old_token != new_token
        _add(removed, old_token, distinct)
        _add(added, new_token, distinct)

    for token in old_tokens[shared:]:
        _add(removed, token, True)
    for token in new_tokens[shared:]:
        _add(added, token, True)

    return Highlight(removed=removed, added=added)

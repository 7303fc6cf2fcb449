"""Placeholder tokenizer.

Recognises exactly five literal forms::

    <tw/>   <text/>   <img/>   <data key="K"/>   {{ dotted.path }}

Text is split in a single pass into an ordered list of literal and
placeholder :class:`Segment` objects; joining every segment's ``text``
reproduces the input exactly. Each placeholder carries the markup context
(tag name and class hint) inferred from the literal text before it.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from template_system.models import PLACEHOLDER_TYPES, Placeholder, PlaceholderContext

# Dotted identifier path; ``{{ color: 'red' }}`` style object literals are not slots.
SLOT_PATH = r"[A-Za-z_$][\w$-]*(?:\.[\w$-]+)*"

PLACEHOLDER_RE = re.compile(
    r"(?P<tw><tw/>)"
    r"|(?P<text><text/>)"
    r"|(?P<img><img/>)"
    r'|<data\s+key="(?P<data>[^"]+)"/>'
    r"|\{\{\s*(?P<slot>" + SLOT_PATH + r")\s*\}\}"
)

# One pattern per form, used for counting leftovers after resolution.
FORM_PATTERNS: dict[str, re.Pattern[str]] = {
    "tw": re.compile(r"<tw/>"),
    "text": re.compile(r"<text/>"),
    "img": re.compile(r"<img/>"),
    "data": re.compile(r'<data\s+key="[^"]+"/>'),
    "slot": re.compile(r"\{\{\s*" + SLOT_PATH + r"\s*\}\}"),
}

_TAG_RE = re.compile(r"<(/?)([A-Za-z][\w.-]*)([^<>]*?)(/?)>")
_OPEN_TAG_HEAD_RE = re.compile(r"^<\s*([A-Za-z][\w.-]*)")
_CLASS_ATTR_RE = re.compile(
    r"\bclass(?:Name)?\s*=\s*(?:\"([^\"]*)\"?|'([^']*)'?|\{\s*`([^`]*)`?)"
)
_VOID_ELEMENTS = frozenset({
    "area", "base", "br", "col", "embed", "hr", "img", "input",
    "link", "meta", "source", "track", "wbr",
})
_SNIPPET_CHARS = 160


@dataclass(frozen=True)
class Segment:
    """A run of literal text, or a single placeholder occurrence."""

    text: str
    placeholder: Placeholder | None = None

    @property
    def is_placeholder(self) -> bool:
        return self.placeholder is not None


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def tokenize(text: str, file: str = "") -> list[Segment]:
    """Split *text* into literal and placeholder segments in one pass."""
    segments: list[Segment] = []
    tracker = _ContextTracker(file)
    cursor = 0
    line = 1

    for match in PLACEHOLDER_RE.finditer(text):
        start, end = match.span()
        if start > cursor:
            literal = text[cursor:start]
            segments.append(Segment(text=literal))
            tracker.feed(literal)
            line += literal.count("\n")

        placeholder_type = match.lastgroup or ""
        key = None
        if placeholder_type in ("data", "slot"):
            key = match.group(placeholder_type).strip()

        context = tracker.context()
        segments.append(
            Segment(
                text=match.group(0),
                placeholder=Placeholder(
                    type=placeholder_type,
                    key=key,
                    position=start,
                    line=line,
                    raw=match.group(0),
                    context=context,
                ),
            )
        )
        line += match.group(0).count("\n")
        cursor = end

    if cursor < len(text):
        segments.append(Segment(text=text[cursor:]))
    return segments


def find_placeholders(text: str, file: str = "") -> list[Placeholder]:
    """Return every placeholder occurrence in *text*, in order of position."""
    return [seg.placeholder for seg in tokenize(text, file) if seg.placeholder is not None]


def count_remaining(text: str) -> dict[str, int]:
    """Count the literal occurrences of each placeholder form in *text*."""
    return {form: len(FORM_PATTERNS[form].findall(text)) for form in PLACEHOLDER_TYPES}


def has_remaining(text: str) -> bool:
    return any(pattern.search(text) for pattern in FORM_PATTERNS.values())


# ---------------------------------------------------------------------------
# Context inference
# ---------------------------------------------------------------------------


def infer_context(prefix: str, file: str = "") -> PlaceholderContext:
    """Infer the enclosing tag of a placeholder from the literal text before it.

    If the prefix ends inside an unclosed ``<tag ...`` the placeholder sits in
    that tag's attributes. Otherwise the innermost element still open at
    that point is used.
    """
    tracker = _ContextTracker(file)
    tracker.feed(prefix)
    return tracker.context()


class _ContextTracker:
    """Running markup state over the literal text seen so far.

    Each literal is scanned once; tags split across literals are carried in
    a small pending buffer that starts at their ``<``.
    """

    def __init__(self, file: str = "") -> None:
        self.file = file
        self._stack: list[tuple[str, str]] = []
        self._pending = ""
        self._open_chunk: str | None = None
        self._tail = ""

    def feed(self, literal: str) -> None:
        if not literal:
            return
        self._tail = (self._tail + literal)[-_SNIPPET_CHARS:]

        last_open = literal.rfind("<")
        last_close = literal.rfind(">")
        if last_open > last_close:
            self._open_chunk = literal[last_open:]
        elif last_close > last_open:
            self._open_chunk = None
        elif self._open_chunk is not None:
            self._open_chunk += literal

        buffer = self._pending + literal
        consumed = 0
        for match in _TAG_RE.finditer(buffer):
            self._push(*match.groups())
            consumed = match.end()
        rest = buffer[consumed:]
        start = rest.rfind("<")
        self._pending = rest[start:] if start >= 0 else ""

    def context(self) -> PlaceholderContext:
        snippet = " ".join(self._tail.split())
        if self._open_chunk is not None:
            head = _OPEN_TAG_HEAD_RE.match(self._open_chunk)
            if head:
                return PlaceholderContext(
                    file=self.file,
                    tag_name=head.group(1).lower(),
                    class_hint=_class_hint(self._open_chunk),
                    snippet=snippet,
                )

        tag_name, attrs = self._stack[-1] if self._stack else (None, "")
        return PlaceholderContext(
            file=self.file,
            tag_name=tag_name,
            class_hint=_class_hint(attrs) if attrs else None,
            snippet=snippet,
        )

    def _push(self, closing: str, name: str, attrs: str, self_closing: str) -> None:
        name = name.lower()
        if closing:
            for index in range(len(self._stack) - 1, -1, -1):
                if self._stack[index][0] == name:
                    del self._stack[index:]
                    break
        elif not self_closing and not attrs.rstrip().endswith("/") and name not in _VOID_ELEMENTS:
            self._stack.append((name, attrs))


def _class_hint(chunk: str) -> str | None:
    match = _CLASS_ATTR_RE.search(chunk)
    if not match:
        return None
    value = next((group for group in match.groups() if group is not None), "")
    return value.strip()

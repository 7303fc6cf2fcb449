"""A small model of Tailwind utility-class tokens.

Tokens are parsed into variant prefix + utility and classified into a
*property group* (background colour, text colour, font size, padding-x,
radius ...). Two tokens conflict when they share both variants and group;
:func:`merge_tw` keeps the last one supplied.

This is deliberately not a full Tailwind parser: anything it cannot
classify is kept verbatim and only de-duplicated by exact text.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

COLOR_FAMILIES = (
    "slate", "gray", "zinc", "neutral", "stone", "red", "orange", "amber", "yellow",
    "lime", "green", "emerald", "teal", "cyan", "sky", "blue", "indigo", "violet",
    "purple", "fuchsia", "pink", "rose",
)

_COLOR = (
    r"(?:(?:" + "|".join(COLOR_FAMILIES) + r")-(?:50|[1-9]00|950)"
    r"|black|white|transparent|current|inherit|\[#[0-9a-fA-F]{3,8}\])(?:/\d{1,3})?"
)
_SIZE_STEP = r"(?:xs|sm|base|lg|xl|[2-9]xl)"
_SIDES = r"(?:t|r|b|l|x|y|s|e|tl|tr|bl|br)"

# Order matters: the first matching pattern decides the group.
_GROUP_PATTERNS: tuple[tuple[re.Pattern[str], str], ...] = tuple(
    (re.compile(pattern), group)
    for pattern, group in (
        (rf"bg-{_COLOR}", "bg-color"),
        (r"bg-(?:gradient-to-(?:t|tr|r|br|b|bl|l|tl)|none)", "bg-image"),
        (rf"text-{_COLOR}", "text-color"),
        (rf"text-{_SIZE_STEP}|text-\[\d+(?:\.\d+)?(?:px|rem|em)\]", "font-size"),
        (r"text-(?:left|center|right|justify|start|end)", "text-align"),
        (r"font-(?:thin|extralight|light|normal|medium|semibold|bold|extrabold|black)", "font-weight"),
        (r"font-(?:sans|serif|mono|\[.+\])", "font-family"),
        (r"leading-\S+", "line-height"),
        (r"tracking-\S+", "letter-spacing"),
        (r"p-\S+", "padding"),
        (rf"p({_SIDES})-\S+", "padding-{0}"),
        (r"m-\S+", "margin"),
        (rf"m({_SIDES})-\S+", "margin-{0}"),
        (r"space-x-\S+", "space-x"),
        (r"space-y-\S+", "space-y"),
        (r"rounded(?:-(?:none|sm|md|lg|xl|2xl|3xl|full|\[.+\]))?", "radius"),
        (rf"rounded-({_SIDES})(?:-(?:none|sm|md|lg|xl|2xl|3xl|full))?", "radius-{0}"),
        (r"shadow(?:-(?:sm|md|lg|xl|2xl|inner|none))?", "shadow"),
        (rf"shadow-{_COLOR}", "shadow-color"),
        (rf"border-{_COLOR}", "border-color"),
        (r"border(?:-(?:0|2|4|8))?", "border-width"),
        (rf"border-({_SIDES})(?:-(?:0|2|4|8))?", "border-width-{0}"),
        (r"(?:block|inline-block|inline|flex|inline-flex|grid|inline-grid|hidden|contents|table)", "display"),
        (r"(?:static|fixed|absolute|relative|sticky)", "position"),
        (r"flex-(?:row|col|row-reverse|col-reverse)", "flex-direction"),
        (r"flex-(?:wrap|nowrap|wrap-reverse)", "flex-wrap"),
        (r"flex-(?:1|auto|initial|none)", "flex"),
        (r"justify-(?:start|end|center|between|around|evenly|normal|stretch)", "justify-content"),
        (r"items-(?:start|end|center|baseline|stretch)", "align-items"),
        (r"gap-(x|y)-\S+", "gap-{0}"),
        (r"gap-\S+", "gap"),
        (r"grid-cols-\S+", "grid-cols"),
        (r"grid-rows-\S+", "grid-rows"),
        (r"w-\S+", "width"),
        (r"min-w-\S+", "min-width"),
        (r"max-w-\S+", "max-width"),
        (r"h-\S+", "height"),
        (r"min-h-\S+", "min-height"),
        (r"max-h-\S+", "max-height"),
        (r"opacity-\S+", "opacity"),
        (r"transition(?:-(?:all|colors|opacity|shadow|transform|none))?", "transition"),
        (r"duration-\S+", "duration"),
        (r"ease-\S+", "ease"),
        (r"overflow-(?:auto|hidden|visible|scroll|clip)", "overflow"),
        (r"z-\S+", "z-index"),
    )
)

# Single-word utilities that the group table does not cover.
STANDALONE_UTILITIES = frozenset({
    "container", "truncate", "underline", "uppercase", "lowercase", "capitalize",
    "italic", "antialiased", "visible", "invisible", "grow", "shrink", "transform",
    "filter", "outline", "ring", "prose", "peer", "group",
})

_MALFORMED_RE = re.compile(
    r"^(bg|text|border|font|shadow|rounded|ring)-\1(?:-|$)"
    r"|--|-$|^-?$|:$|::"
)
_TOKEN_CHARS_RE = re.compile(r"^[A-Za-z0-9!:\-\[\]#/._%'(),]+$")


@dataclass(frozen=True)
class UtilityToken:
    """One parsed utility class such as ``md:hover:bg-blue-600``."""

    raw: str
    variants: tuple[str, ...]
    utility: str
    group: str | None

    @property
    def conflict_key(self) -> tuple[tuple[str, ...], str]:
        """Tokens with equal keys override each other."""
        return (self.variants, self.group if self.group is not None else "=" + self.utility)


def split_variants(raw: str) -> tuple[str, str]:
    """Split ``"md:hover:bg-blue-500"`` into ``("md:hover:", "bg-blue-500")``.

    Colons inside arbitrary values (``bg-[url(a:b)]``) are not treated as
    variant separators.
    """
    depth = 0
    cut = 0
    for index, char in enumerate(raw):
        if char == "[":
            depth += 1
        elif char == "]":
            depth = max(0, depth - 1)
        elif char == ":" and depth == 0:
            cut = index + 1
    return raw[:cut], raw[cut:]


def is_malformed(raw: str) -> bool:
    """Return ``True`` for tokens that cannot be a real utility class.

    Catches doubled prefixes (``bg-bg-red-500``), dangling separators and
    characters that never occur in class names.
    """
    if not raw or not _TOKEN_CHARS_RE.match(raw):
        return True
    _, utility = split_variants(raw)
    core = utility.lstrip("!").lstrip("-")
    if not core:
        return True
    return bool(_MALFORMED_RE.search(core)) or bool(_MALFORMED_RE.search(raw))


def classify(utility: str) -> str | None:
    """Return the property group of a bare utility, or ``None`` if unknown."""
    core = utility.lstrip("!").lstrip("-")
    for pattern, group in _GROUP_PATTERNS:
        match = pattern.fullmatch(core)
        if match:
            return group.format(*match.groups()) if match.groups() else group
    return None


def parse_token(raw: str) -> UtilityToken | None:
    """Parse one class token; malformed tokens yield ``None``."""
    raw = raw.strip()
    if is_malformed(raw):
        return None
    prefix, utility = split_variants(raw)
    variants = tuple(v for v in prefix.split(":") if v)
    return UtilityToken(raw=raw, variants=variants, utility=utility, group=classify(utility))


def split_classes(class_string: str) -> list[str]:
    return class_string.split()


def merge_tw(*class_strings: str) -> str:
    """Merge utility-class strings, resolving conflicts by property group.

    Within one (variants, group) pair the token supplied last wins; survivors
    keep the relative order of their final occurrence. Malformed tokens are
    dropped.

    >>> merge_tw("bg-red-500 px-2", "bg-blue-500")
    'px-2 bg-blue-500'
    """
    tokens: list[UtilityToken] = []
    for class_string in class_strings:
        for raw in split_classes(class_string or ""):
            token = parse_token(raw)
            if token is not None:
                tokens.append(token)

    seen: set[tuple[tuple[str, ...], str]] = set()
    survivors: list[str] = []
    for token in reversed(tokens):
        if token.conflict_key in seen:
            continue
        seen.add(token.conflict_key)
        survivors.append(token.raw)
    return " ".join(reversed(survivors))


def is_known_utility(utility: str) -> bool:
    """``True`` if *utility* looks like a real Tailwind class rather than a word.

    Classified tokens always pass; otherwise the token must be a bare
    standalone utility or a lowercase, hyphenated name.
    """
    core = utility.lstrip("!").lstrip("-")
    if classify(core) is not None or core in STANDALONE_UTILITIES:
        return True
    return "-" in core and core == core.lower()


def is_valid_class_list(class_string: str, max_tokens: int = 40) -> bool:
    """``True`` if *class_string* is a non-empty list of recognisable utility tokens."""
    raw_tokens = split_classes(class_string)
    if not raw_tokens or len(raw_tokens) > max_tokens:
        return False
    for raw in raw_tokens:
        token = parse_token(raw)
        if token is None or not is_known_utility(token.utility):
            return False
    return True

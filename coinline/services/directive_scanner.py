from __future__ import annotations

import re
from functools import lru_cache
from typing import Callable, Iterator

TEXT_MODIFIER = r"[ -]?\d+"
FLOAT_MODIFIER = r"[ -]?\d*\.?\d+"
TIME_MODIFIER = r"\{[^}]*\}"

ROOT_PREFIX = "%"
WINDOW_PREFIXES = {
    "1d": "%1D:",
    "7d": "%7D:",
    "30d": "%30D:",
    "365d": "%365D:",
    "ytd": "%YTD:",
}

# a root "%" must not start a window namespace, or %1D:Z would be read as %1D + ":Z"
_ROOT_GUARD = "(?!(?:" + "|".join(re.escape(p[1:]) for p in WINDOW_PREFIXES.values()) + "))"


@lru_cache(maxsize=None)
def directive_pattern(prefix: str, suffix: str, modifier: str, bare: bool = True) -> re.Pattern[str]:
    """Compile ``<prefix>(<modifier>)<suffix>``; group 1 is the modifier.

    With ``bare`` the modifier is optional and a bare ``<prefix><suffix>``
    matches with an empty group.
    """
    head = re.escape(prefix)
    if prefix == ROOT_PREFIX:
        head += _ROOT_GUARD
    body = f"(?:{modifier})?" if bare else f"(?:{modifier})"
    return re.compile(f"{head}({body}){re.escape(suffix)}", re.ASCII)


def scan(
    template: str, prefix: str, suffix: str, modifier: str, bare: bool = True
) -> Iterator[tuple[str, str]]:
    """Yield ``(match_text, modifier)`` for every directive occurrence."""
    for match in directive_pattern(prefix, suffix, modifier, bare).finditer(template):
        yield match.group(0), match.group(1)


def substitute(
    template: str,
    prefix: str,
    suffix: str,
    modifier: str,
    render: Callable[[str], str],
    bare: bool = True,
) -> str:
    """Replace every directive with ``render(modifier)``; bare forms pass ``""``."""
    pattern = directive_pattern(prefix, suffix, modifier, bare)
    return pattern.sub(lambda match: render(match.group(1)), template)

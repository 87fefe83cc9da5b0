"""Format-string interpreter.

A template is rewritten in ordered passes: ``%%`` is hidden behind a
sentinel, each historical window namespace (``%1D:`` ... ``%YTD:``) is
substituted, then the root fields, and finally the sentinel and backslash
escapes are restored. Within a pass, suffixes that share a leading letter are
dispatched longest first (``MC`` before ``M``) so the shorter pattern never
sees a longer directive.
"""

from __future__ import annotations

import re
from datetime import tzinfo

from coinline.schemas.quote import WINDOW_IDS, Quote, Window
from coinline.services.directive_scanner import (
    FLOAT_MODIFIER,
    ROOT_PREFIX,
    TEXT_MODIFIER,
    TIME_MODIFIER,
    WINDOW_PREFIXES,
    substitute,
)
from coinline.services.time_layout import format_timestamp
from coinline.services.value_format import format_float, format_text, parse_float

DEFAULT_TEMPLATE = "%C: %P %1D:P %1D:C"

UP_GLYPH = "▲"
DOWN_GLYPH = "▼"

PERCENT_SENTINEL = "\x00PERCENT\x00"
_BACKSLASH_ESCAPE = re.compile(r"\\(.)", re.DOTALL)

NUMERIC = "numeric"
TEXT = "text"
TIME = "time"

ROOT_FIELDS: tuple[tuple[str, str, str], ...] = (
    ("HT", "high_timestamp", TIME),
    ("R", "rank", TEXT),
    ("MC", "market_cap", TEXT),
    ("CS", "circulating_supply", TEXT),
    ("H", "high", NUMERIC),
    ("M", "max_supply", TEXT),
    ("T", "price_timestamp", TIME),
    ("D", "price_date", TIME),
    ("P", "price", NUMERIC),
    ("L", "logo_url", TEXT),
    ("N", "name", TEXT),
    ("s", "symbol", TEXT),
    ("C", "currency", TEXT),
    ("I", "id", TEXT),
)

WINDOW_FIELDS: tuple[tuple[str, str], ...] = (
    ("PP", "price_change_pct"),
    ("VC", "volume_change"),
    ("VP", "volume_change_pct"),
    ("MP", "market_cap_change_pct"),
    ("V", "volume"),
    ("P", "price_change"),
    ("M", "market_cap_change"),
)


def _apply_numeric(template: str, prefix: str, suffix: str, value: str) -> str:
    return substitute(template, prefix, suffix, FLOAT_MODIFIER, lambda mod: format_float(value, mod))


def _apply_text(template: str, prefix: str, suffix: str, value: str) -> str:
    return substitute(template, prefix, suffix, TEXT_MODIFIER, lambda mod: format_text(value, mod))


def _apply_time(
    template: str, prefix: str, suffix: str, value: str, tz: tzinfo | None
) -> str:
    template = substitute(
        template,
        prefix,
        suffix,
        TIME_MODIFIER,
        lambda mod: format_timestamp(value, mod[1:-1], tz),
        bare=False,
    )
    # without a layout the raw ISO string is emitted, padded like text
    return _apply_text(template, prefix, suffix, value)


def indicator_glyph(price_change: str) -> str:
    change = parse_float(price_change)
    if change is not None and change < 0:
        return DOWN_GLYPH
    return UP_GLYPH


def render_window(template: str, prefix: str, window: Window) -> str:
    """Substitute every directive of one historical window namespace."""
    for suffix, field in WINDOW_FIELDS:
        template = _apply_numeric(template, prefix, suffix, getattr(window, field))
    return _apply_text(template, prefix, "C", indicator_glyph(window.price_change))


def render_root(template: str, quote: Quote, fiat: str, tz: tzinfo | None = None) -> str:
    """Substitute the top-level quote fields and the caller's fiat code."""
    for suffix, field, kind in ROOT_FIELDS:
        value = getattr(quote, field)
        if kind == TIME:
            template = _apply_time(template, ROOT_PREFIX, suffix, value, tz)
        elif kind == NUMERIC:
            template = _apply_numeric(template, ROOT_PREFIX, suffix, value)
        else:
            template = _apply_text(template, ROOT_PREFIX, suffix, value)
    return _apply_text(template, ROOT_PREFIX, "$", fiat)


def unescape(text: str) -> str:
    return _BACKSLASH_ESCAPE.sub(lambda match: match.group(1), text)


def render(template: str, quote: Quote, fiat: str, tz: tzinfo | None = None) -> str:
    """Render ``template`` against ``quote``.

    ``fiat`` is the currency code the quote was converted to (``%$``).
    ``tz`` selects the zone time layouts are rendered in; UTC when omitted.
    Never raises on malformed templates or field values.

    Substituted values are not protected from later passes: a field value
    containing a directive (``%s``) or a backslash is itself rewritten, so a
    name of ``"50%P"`` or a ``C:\\path`` logo URL do not come out verbatim.
    """
    out = template.replace("%%", PERCENT_SENTINEL)
    for window_id in WINDOW_IDS:
        out = render_window(out, WINDOW_PREFIXES[window_id], quote.window(window_id))
    out = render_root(out, quote, fiat, tz)
    out = out.replace(PERCENT_SENTINEL, "%")
    return unescape(out)

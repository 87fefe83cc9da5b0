from __future__ import annotations

import argparse
import sys
from typing import Callable, Sequence

from pydantic import ValidationError

from coinline.config.settings import Settings, get_settings
from coinline.errors import ApiKeyMissingError, CoinlineError
from coinline.integrations.nomics_rest import NomicsRestClient
from coinline.services.template_engine import DEFAULT_TEMPLATE, render

DEFAULT_CURRENCY = "CAD"
DEFAULT_COIN = "BTC"

USAGE_EPILOG = """\
Wraps the Nomics currencies/ticker API in a one-line terminal readout for
Conky, status bars and shell prompts. Pick a coin, a fiat currency to
convert to, and an output format.

Format directives:
  default   "%C: %P %1D:P %1D:C" -> "BTC: 15627.42669435 279.96446090 ▲"

  %I   id                   "BTC"
  %C   currency             "BTC"
  %s   symbol               "BTC"
  %N   name                 "Bitcoin"
  %L   logo_url             "https://s3.us-east-2..."
  %P   price                "11616.76734947"
  %D   price_date           "2020-08-30T00:00:00Z"
  %T   price_timestamp      "2020-08-30T16:42:00Z"
  %CS  circulating_supply   "18475000"
  %M   max_supply           "21000000"
  %MC  market_cap           "214619776781"
  %R   rank                 "1"
  %H   high                 "19337.69352527"
  %HT  high_timestamp       "2017-12-16T00:00:00Z"
  %$   fiat currency shown  "CAD"

  %1D:, %7D:, %30D:, %365D:, %YTD: select a historical window, each with:
    V   volume                  "17087256040.52"
    P   price_change            "116.36..."
    PP  price_change_pct        "0.0101"
    VC  volume_change           "-48633..."
    VP  volume_change_pct       "-0.0277"
    M   market_cap_change       "21590..."
    MP  market_cap_change_pct   "0.0102"
    C   price change indicator  "▲" or "▼"
    e.g. %1D:05V

  %%   a literal percent sign
  \\x   the character x (\\n, \\t, \\\\, \\%)

Text and integer fields take padding:
  %4C -> " BTC"   %-4C -> "BTC "   %03R -> "001"

Numeric fields take padding and precision:
  %0.3H -> "19337.694"   % 4H -> " 19337.693525"

Time fields (%D, %T, %HT) take a reference-date layout in braces, written as
Mon Jan 2 15:04:05 MST 2006 would appear:
  %{Mon Jan _2 2006}D -> "Tue Sep  1 2020"
"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="coinline",
        description="Print a one-line cryptocurrency quote",
        epilog=USAGE_EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "-c",
        "--currency",
        default=DEFAULT_CURRENCY,
        help="the currency to convert the values to (default: %(default)s)",
    )
    parser.add_argument(
        "-x",
        "--coin",
        default=DEFAULT_COIN,
        help="the cryptocurrency to get data for (default: %(default)s)",
    )
    parser.add_argument(
        "-f",
        "--format",
        default=DEFAULT_TEMPLATE,
        help="the format of the output string",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="print diagnostics to stderr",
    )
    return parser


def _load_settings(settings_loader: Callable[[], Settings]) -> Settings:
    try:
        return settings_loader()
    except ValidationError as exc:
        if any(err.get("loc") == ("API_KEY",) for err in exc.errors()):
            raise ApiKeyMissingError(
                "no API key; set COINLINE_API_KEY or write it to <config dir>/key"
            ) from exc
        raise CoinlineError(f"invalid configuration: {exc.error_count()} error(s)") from exc


def main(
    argv: Sequence[str] | None = None,
    *,
    settings_loader: Callable[[], Settings] = get_settings,
    client_factory: Callable[..., NomicsRestClient] = NomicsRestClient,
) -> int:
    args = build_parser().parse_args(argv)
    # an empty flag value means "use the default", as with an omitted flag
    currency = args.currency.strip() or DEFAULT_CURRENCY
    coin = args.coin.strip() or DEFAULT_COIN
    template = args.format or DEFAULT_TEMPLATE

    try:
        settings = _load_settings(settings_loader)
        client = client_factory(
            settings.API_KEY,
            base_url=settings.BASE_URL,
            timeout=settings.TIMEOUT_SEC,
            verbose=args.verbose,
        )
        quote = client.get_ticker(coin, currency)
    except CoinlineError as exc:
        print(f"An error occurred: {exc}", flush=True)
        return 1

    line = render(template, quote, currency)
    if args.verbose:
        print(f"[RENDER][done] coin={coin} length={len(line)}", file=sys.stderr, flush=True)
    print(line, flush=True)
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())

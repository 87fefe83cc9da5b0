from __future__ import annotations

import sys
from typing import Any, Optional

import requests
from pydantic import ValidationError

from coinline.config.settings import DEFAULT_BASE_URL
from coinline.errors import QuoteDecodeError, QuoteNotFoundError, QuoteRequestError
from coinline.schemas.quote import Quote


class NomicsRestClient:
    """Ticker client for the Nomics ``/currencies/ticker`` endpoint."""

    def __init__(
        self,
        api_key: str,
        *,
        base_url: Optional[str] = None,
        timeout: float = 5,
        session: Optional[Any] = None,
        verbose: bool = False,
    ) -> None:
        if not api_key:
            raise ValueError("api_key must not be empty")

        self.api_key = api_key
        self.base_url = (base_url or DEFAULT_BASE_URL).rstrip("/")
        self.timeout = timeout
        self.session = session or requests
        self.verbose = verbose

    def _log(self, message: str) -> None:
        if self.verbose:
            print(message, file=sys.stderr, flush=True)

    def get_ticker(self, coin: str, convert: str) -> Quote:
        coin = coin.strip().upper()
        convert = convert.strip().upper()
        self._log(f"[QUOTE][fetch] coin={coin} convert={convert} base_url={self.base_url}")

        try:
            response = self.session.get(
                f"{self.base_url}/currencies/ticker",
                params={"key": self.api_key, "ids": coin, "convert": convert},
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.RequestException as exc:
            status = getattr(getattr(exc, "response", None), "status_code", None)
            self._log(f"[QUOTE][fetch_error] status={status} error={type(exc).__name__}")
            if status is not None:
                raise QuoteRequestError(f"ticker request failed with HTTP {status}") from exc
            raise QuoteRequestError(f"ticker request failed: {type(exc).__name__}") from exc

        try:
            payload = response.json()
        except ValueError as exc:
            raise QuoteDecodeError("ticker response is not valid JSON") from exc

        if not isinstance(payload, list):
            raise QuoteDecodeError("ticker response must be a list")

        self._log(f"[QUOTE][fetch_result] status={response.status_code} rows={len(payload)}")

        if not payload:
            raise QuoteNotFoundError(f"no ticker data for {coin} in {convert}")
        if not isinstance(payload[0], dict):
            raise QuoteDecodeError("ticker row must be an object")

        try:
            return Quote.model_validate(payload[0])
        except ValidationError as exc:
            raise QuoteDecodeError(f"invalid ticker row for {coin}") from exc

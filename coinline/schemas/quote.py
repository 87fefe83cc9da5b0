from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

WINDOW_IDS = ("1d", "7d", "30d", "365d", "ytd")


def _as_text(value: Any) -> Any:
    # the API sends numerics as strings, but tolerate null and bare numbers
    if value is None:
        return ""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


class Window(BaseModel):
    model_config = ConfigDict(extra="ignore")

    volume: str = ""
    price_change: str = ""
    price_change_pct: str = ""
    volume_change: str = ""
    volume_change_pct: str = ""
    market_cap_change: str = ""
    market_cap_change_pct: str = ""

    @field_validator("*", mode="before")
    @classmethod
    def coerce_text(cls, value: Any) -> Any:
        return _as_text(value)


class Quote(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: str = ""
    currency: str = ""
    symbol: str = ""
    name: str = ""
    logo_url: str = ""
    price: str = ""
    price_date: str = ""
    price_timestamp: str = ""
    circulating_supply: str = ""
    max_supply: str = ""
    market_cap: str = ""
    rank: str = ""
    high: str = ""
    high_timestamp: str = ""

    d1: Window = Field(default_factory=Window, alias="1d")
    d7: Window = Field(default_factory=Window, alias="7d")
    d30: Window = Field(default_factory=Window, alias="30d")
    d365: Window = Field(default_factory=Window, alias="365d")
    ytd: Window = Field(default_factory=Window, alias="ytd")

    @field_validator(
        "id",
        "currency",
        "symbol",
        "name",
        "logo_url",
        "price",
        "price_date",
        "price_timestamp",
        "circulating_supply",
        "max_supply",
        "market_cap",
        "rank",
        "high",
        "high_timestamp",
        mode="before",
    )
    @classmethod
    def coerce_text(cls, value: Any) -> Any:
        return _as_text(value)

    @field_validator("d1", "d7", "d30", "d365", "ytd", mode="before")
    @classmethod
    def empty_window(cls, value: Any) -> Any:
        return {} if value is None else value

    def window(self, window_id: str) -> Window:
        """Return the historical window for an identifier such as ``"1d"`` or ``"YTD"``."""
        key = window_id.strip().lower()
        if key not in WINDOW_IDS:
            raise KeyError(window_id)
        return self.ytd if key == "ytd" else getattr(self, f"d{key[:-1]}")

class CoinlineError(Exception):
    """Base error for everything that can go wrong before a template is rendered."""


class ApiKeyMissingError(CoinlineError):
    pass


class QuoteRequestError(CoinlineError):
    pass


class QuoteDecodeError(CoinlineError):
    pass


class QuoteNotFoundError(CoinlineError):
    pass

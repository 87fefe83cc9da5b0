import io
import unittest
from contextlib import redirect_stderr, redirect_stdout
from pathlib import Path
from unittest.mock import MagicMock

from pydantic import ValidationError

from coinline.config.settings import Settings
from coinline.errors import QuoteNotFoundError, QuoteRequestError
from coinline.main import build_parser, main
from coinline.schemas.quote import Quote, Window
from coinline.services.template_engine import UP_GLYPH


def _settings():
    return Settings(API_KEY="api-key", CONFIG_DIR=Path("/tmp/coinline"), BASE_URL="https://example.test/v1")


def _missing_key_settings():
    return Settings.model_validate({"API_KEY": None, "CONFIG_DIR": Path("/tmp/coinline")})


class TestCli(unittest.TestCase):
    def setUp(self):
        self.client = MagicMock()
        self.client.get_ticker.return_value = Quote(
            currency="BTC",
            name="Bitcoin",
            price="15627.42669435",
            d1=Window(price_change="279.96446090"),
        )
        self.client_factory = MagicMock(return_value=self.client)

    def _run(self, argv, settings_loader=_settings):
        stdout = io.StringIO()
        stderr = io.StringIO()
        with redirect_stdout(stdout), redirect_stderr(stderr):
            code = main(argv, settings_loader=settings_loader, client_factory=self.client_factory)
        return code, stdout.getvalue(), stderr.getvalue()

    def test_defaults_print_default_template(self):
        code, out, err = self._run([])

        self.assertEqual(code, 0)
        self.assertEqual(out, "BTC: 15627.42669435 279.96446090 " + UP_GLYPH + "\n")
        self.assertEqual(err, "")
        self.client.get_ticker.assert_called_once_with("BTC", "CAD")
        self.client_factory.assert_called_once_with(
            "api-key",
            base_url="https://example.test/v1",
            timeout=5.0,
            verbose=False,
        )

    def test_flags_select_coin_currency_and_format(self):
        code, out, _ = self._run(["-x", "eth", "-c", "usd", "-f", "%N %0.2P %$"])

        self.assertEqual(code, 0)
        self.assertEqual(out, "Bitcoin 15627.43 usd\n")
        self.client.get_ticker.assert_called_once_with("eth", "usd")

    def test_long_flags(self):
        code, out, _ = self._run(["--coin", "BTC", "--currency", "EUR", "--format", "%$"])

        self.assertEqual(code, 0)
        self.assertEqual(out, "EUR\n")

    def test_empty_flags_fall_back_to_defaults(self):
        code, out, _ = self._run(["-c", "", "-x", "", "-f", ""])

        self.assertEqual(code, 0)
        self.client.get_ticker.assert_called_once_with("BTC", "CAD")
        self.assertEqual(out, "BTC: 15627.42669435 279.96446090 " + UP_GLYPH + "\n")

    def test_verbose_writes_diagnostics_to_stderr_only(self):
        code, out, err = self._run(["-v", "-f", "%C"])

        self.assertEqual(code, 0)
        self.assertEqual(out, "BTC\n")
        self.assertIn("[RENDER][done]", err)
        self.assertTrue(self.client_factory.call_args.kwargs["verbose"])

    def test_request_failure_prints_one_line_and_exits_nonzero(self):
        self.client.get_ticker.side_effect = QuoteRequestError("ticker request failed with HTTP 500")

        code, out, _ = self._run([])

        self.assertEqual(code, 1)
        self.assertEqual(out, "An error occurred: ticker request failed with HTTP 500\n")

    def test_unknown_coin_exits_nonzero(self):
        self.client.get_ticker.side_effect = QuoteNotFoundError("no ticker data for NOPE in CAD")

        code, out, _ = self._run(["-x", "NOPE"])

        self.assertEqual(code, 1)
        self.assertTrue(out.startswith("An error occurred: no ticker data"))

    def test_missing_api_key_exits_nonzero(self):
        def loader():
            return _missing_key_settings()

        code, out, _ = self._run([], settings_loader=loader)

        self.assertEqual(code, 1)
        self.assertTrue(out.startswith("An error occurred: no API key"))
        self.client_factory.assert_not_called()

    def test_missing_key_loader_raises_validation_error(self):
        with self.assertRaises(ValidationError):
            _missing_key_settings()

    def test_bad_flag_is_a_usage_error(self):
        with redirect_stderr(io.StringIO()):
            with self.assertRaises(SystemExit) as ctx:
                build_parser().parse_args(["--nope"])

        self.assertEqual(ctx.exception.code, 2)

    def test_help_lists_directives(self):
        help_text = build_parser().format_help()

        self.assertIn("%1D:", help_text)
        self.assertIn("%{Mon Jan _2 2006}D", help_text)
        self.assertIn("--currency", help_text)


if __name__ == "__main__":
    unittest.main()

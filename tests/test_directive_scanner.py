import unittest

from coinline.services.directive_scanner import (
    FLOAT_MODIFIER,
    TEXT_MODIFIER,
    TIME_MODIFIER,
    scan,
    substitute,
)


class TestDirectiveScanner(unittest.TestCase):
    def test_scan_yields_modified_and_bare_occurrences(self):
        found = list(scan("%5C|%C|%-3C", "%", "C", TEXT_MODIFIER))

        self.assertEqual(found, [("%5C", "5"), ("%C", ""), ("%-3C", "-3")])

    def test_float_modifier_grammar(self):
        found = [mod for _, mod in scan("%0.3P %.2P % 8P %-10.1P %P", "%", "P", FLOAT_MODIFIER)]

        self.assertEqual(found, ["0.3", ".2", " 8", "-10.1", ""])

    def test_text_modifier_rejects_precision(self):
        found = list(scan("%0.3N", "%", "N", TEXT_MODIFIER))

        self.assertEqual(found, [])

    def test_time_modifier_requires_braces_when_not_bare(self):
        found = list(scan("%{2006}D %D", "%", "D", TIME_MODIFIER, bare=False))

        self.assertEqual(found, [("%{2006}D", "{2006}")])

    def test_time_modifier_is_not_greedy(self):
        found = [mod for _, mod in scan("%{2006}D-%{01}D", "%", "D", TIME_MODIFIER, bare=False)]

        self.assertEqual(found, ["{2006}", "{01}"])

    def test_window_prefix_is_literal(self):
        found = list(scan("%1D:P %7D:P %YTD:P", "%1D:", "P", FLOAT_MODIFIER))

        self.assertEqual(found, [("%1D:P", "")])

    def test_root_prefix_does_not_open_window_namespace(self):
        found = list(scan("%1D:Z %30D:Z %D", "%", "D", TEXT_MODIFIER))

        self.assertEqual(found, [("%D", "")])

    def test_suffix_is_escaped(self):
        self.assertEqual(substitute("cost %$", "%", "$", TEXT_MODIFIER, lambda mod: "CAD"), "cost CAD")

    def test_substitute_passes_modifier_to_renderer(self):
        seen = []

        def render(mod):
            seen.append(mod)
            return "<" + mod + ">"

        out = substitute("%4N and %N", "%", "N", TEXT_MODIFIER, render)

        self.assertEqual(out, "<4> and <>")
        self.assertEqual(seen, ["4", ""])


if __name__ == "__main__":
    unittest.main()

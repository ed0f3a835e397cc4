"""
Unit tests for report_api/services/report.py
"""

import json
import unittest
from unittest.mock import MagicMock

import httpx
import openai

from fake_responses import message, reasoning, upstream_client
from report_api.config import Settings
from report_api.services.llm_prompts import TRENDS_USER
from report_api.services.report import ReportError, generate_report, parse_body


def _status_error(status, text):
    request = httpx.Request("POST", "https://api.openai.com/v1/responses")
    response = httpx.Response(status, text=text, request=request)
    return openai.APIStatusError(f"Error code: {status}", response=response, body=None)


class TestParseBody(unittest.TestCase):
    def test_empty_body_is_empty_object(self):
        for body in (None, b"", ""):
            self.assertEqual(parse_body(body), {})

    def test_whitespace_only_body_is_empty_object(self):
        for body in (b"   ", "\n\t ", b"\r\n"):
            self.assertEqual(parse_body(body), {})

    def test_raw_bytes_and_text(self):
        self.assertEqual(parse_body(b'{"mode": "conducta"}'), {"mode": "conducta"})
        self.assertEqual(parse_body('{"days": 7}'), {"days": 7})

    def test_already_deserialized_body(self):
        self.assertEqual(parse_body({"mode": "tendencias"}), {"mode": "tendencias"})

    def test_invalid_json_is_400(self):
        bodies = (
            b"{not json", b"\xff\xfe\x00", b"[1, 2]", '"x"', [1],
            b'{"days": NaN}', b'{"days": Infinity}', b'{"days": -Infinity}',
        )
        for body in bodies:
            with self.assertRaises(ReportError) as ctx:
                parse_body(body)
            self.assertEqual(ctx.exception.status_code, 400)
            self.assertEqual(ctx.exception.body, {"error": "Invalid JSON body"})


class TestGenerateReport(unittest.TestCase):
    def setUp(self):
        self.settings = Settings(_env_file=None, OPENAI_API_KEY="sk-test", OPENAI_MODEL="gpt-test")
        self.client = MagicMock()
        self.factory = MagicMock(return_value=self.client)

    def _upstream_returns(self, *output):
        upstream_client(self.client, *output)

    def _call_kwargs(self):
        return self.client.responses.create.call_args.kwargs

    def test_empty_payload_uses_default_trends_mode(self):
        self._upstream_returns(message('{"mode": "tendencias_lilly_mx"}'))
        out = generate_report({}, self.settings, self.factory)
        self.assertEqual(out, {"mode": "tendencias_lilly_mx"})
        kwargs = self._call_kwargs()
        self.assertEqual(kwargs["model"], "gpt-test")
        self.assertEqual(kwargs["max_output_tokens"], 2600)
        self.assertEqual(kwargs["text"]["format"]["name"], "lilly_trends_report")
        self.assertTrue(kwargs["text"]["format"]["strict"])
        self.assertTrue(kwargs["input"].endswith(TRENDS_USER))

    def test_null_mode_is_unsupported(self):
        with self.assertRaises(ReportError) as ctx:
            generate_report({"mode": None}, self.settings, self.factory)
        self.assertEqual(ctx.exception.status_code, 400)
        self.assertEqual(ctx.exception.body, {"error": "Unsupported mode: null"})
        self.factory.assert_not_called()

    def test_legacy_mode_interpolates_prompt(self):
        self._upstream_returns(message('{"top5": [], "forecast": []}'))
        payload = {"mode": "tendencias", "platform": "IG", "region": "MX", "days": 7, "topic": "vacunación"}
        generate_report(payload, self.settings, self.factory)
        kwargs = self._call_kwargs()
        for fragment in ("IG", "MX", "últimos 7 días", "vacunación"):
            self.assertIn(fragment, kwargs["input"])
        self.assertEqual(kwargs["max_output_tokens"], 650)
        self.assertEqual(kwargs["text"]["format"]["name"], "trends_report_legacy")

    def test_legacy_null_params_render_as_json(self):
        self._upstream_returns(message('{"top5": [], "forecast": []}'))
        payload = {"mode": "tendencias", "platform": None, "region": True, "topic": None}
        generate_report(payload, self.settings, self.factory)
        prompt = self._call_kwargs()["input"]
        self.assertIn("- Plataforma: null", prompt)
        self.assertIn("- Región: true", prompt)
        self.assertIn("últimos 30 días", prompt)
        self.assertIn("- Tema (opcional): —", prompt)

    def test_unsupported_mode(self):
        with self.assertRaises(ReportError) as ctx:
            generate_report({"mode": "bogus"}, self.settings, self.factory)
        self.assertEqual(ctx.exception.status_code, 400)
        self.assertEqual(ctx.exception.body, {"error": "Unsupported mode: bogus"})
        self.factory.assert_not_called()

    def test_missing_key_short_circuits(self):
        settings = Settings(_env_file=None, OPENAI_API_KEY=None)
        with self.assertRaises(ReportError) as ctx:
            generate_report({}, settings, self.factory)
        self.assertEqual(ctx.exception.status_code, 500)
        self.factory.assert_not_called()
        self.client.responses.create.assert_not_called()

    def test_missing_key_wins_over_unsupported_mode(self):
        settings = Settings(_env_file=None, OPENAI_API_KEY=None)
        with self.assertRaises(ReportError) as ctx:
            generate_report({"mode": "bogus"}, settings, self.factory)
        self.assertEqual(ctx.exception.status_code, 500)
        self.assertEqual(ctx.exception.body, {"error": "Missing OPENAI_API_KEY env var"})
        self.factory.assert_not_called()

    def test_upstream_error_status_is_relayed(self):
        self.client.responses.create.side_effect = _status_error(429, '{"error": "rate limited"}')
        with self.assertRaises(ReportError) as ctx:
            generate_report({}, self.settings, self.factory)
        self.assertEqual(ctx.exception.status_code, 429)
        self.assertEqual(ctx.exception.body, {"error": 'OpenAI 429: {"error": "rate limited"}'})

    def test_valid_json_is_returned_verbatim(self):
        report = {"executive_summary": ["a", "b", "c"], "charts": {"format_mix": {"labels": [], "values": []}}}
        self._upstream_returns(message(json.dumps(report)))
        self.assertEqual(generate_report({"mode": "conducta"}, self.settings, self.factory), report)

    def test_reasoning_item_before_message(self):
        self._upstream_returns(reasoning(), message('{"top5": ["a"], "forecast": ["b"]}'))
        out = generate_report({"mode": "tendencias"}, self.settings, self.factory)
        self.assertEqual(out, {"top5": ["a"], "forecast": ["b"]})

    def test_non_json_output_is_not_an_http_failure(self):
        self._upstream_returns(message("Lo siento, no puedo."))
        out = generate_report({}, self.settings, self.factory)
        self.assertEqual(out, {"error": "Model returned non-JSON", "raw": "Lo siento, no puedo."})

    def test_non_finite_constants_are_non_json(self):
        for text in ("NaN", '{"value": Infinity}', "[-Infinity]"):
            self._upstream_returns(message(text))
            out = generate_report({}, self.settings, self.factory)
            self.assertEqual(out, {"error": "Model returned non-JSON", "raw": text})

    def test_short_output_is_empty(self):
        self._upstream_returns(message(" x "))
        with self.assertRaises(ReportError) as ctx:
            generate_report({}, self.settings, self.factory)
        self.assertEqual(ctx.exception.status_code, 500)
        self.assertEqual(ctx.exception.body, {"error": "Empty model output", "raw": " x "})

    def test_response_without_output_is_empty(self):
        self._upstream_returns()
        with self.assertRaises(ReportError) as ctx:
            generate_report({}, self.settings, self.factory)
        self.assertEqual(ctx.exception.status_code, 500)
        self.assertEqual(ctx.exception.body, {"error": "Empty model output", "raw": ""})

    def test_reasoning_only_response_is_empty(self):
        self._upstream_returns(reasoning())
        with self.assertRaises(ReportError) as ctx:
            generate_report({}, self.settings, self.factory)
        self.assertEqual(ctx.exception.status_code, 500)
        self.assertEqual(ctx.exception.body["error"], "Empty model output")


if __name__ == "__main__":
    unittest.main()

import os
import unittest
from unittest.mock import MagicMock, patch

import requests

from wordsearch.io.gemini_client import GeminiAPIError, GeminiClient


def make_client(response=None, **kwargs):
    session = MagicMock()
    if response is not None:
        session.post.return_value = response
    with patch.dict(os.environ, {"GEMINI_API_KEY": "test-key"}, clear=False):
        return GeminiClient(session=session, **kwargs), session


def ok_response(payload):
    response = MagicMock()
    response.json.return_value = payload
    return response


class GeminiClientTests(unittest.TestCase):
    def test_missing_api_key_raises(self) -> None:
        with patch.dict(os.environ, {}, clear=True):
            with self.assertRaises(GeminiAPIError):
                GeminiClient(session=MagicMock())

    def test_model_can_be_overridden_from_environment(self) -> None:
        env = {"GEMINI_API_KEY": "k", "GEMINI_MODEL": "gemini-test"}
        with patch.dict(os.environ, env, clear=True):
            client = GeminiClient(session=MagicMock())
        self.assertEqual(client.model_name, "gemini-test")

    def test_returns_first_candidate_text(self) -> None:
        payload = {"candidates": [{"content": {"parts": [{"text": ""}, {"text": "[1]"}]}}]}
        client, session = make_client(ok_response(payload), temperature=0.5)
        self.assertEqual(client.generate_text("hello"), "[1]")

        args, kwargs = session.post.call_args
        self.assertTrue(args[0].endswith(":generateContent"))
        self.assertEqual(kwargs["params"], {"key": "test-key"})
        self.assertEqual(kwargs["json"]["contents"][0]["parts"][0]["text"], "hello")
        self.assertEqual(kwargs["json"]["generationConfig"]["temperature"], 0.5)

    def test_http_error_is_wrapped(self) -> None:
        response = MagicMock()
        response.raise_for_status.side_effect = requests.HTTPError("503 Service Unavailable")
        client, _ = make_client(response)
        with self.assertRaises(GeminiAPIError):
            client.generate_text("hello")

    def test_connection_error_is_wrapped(self) -> None:
        client, session = make_client()
        session.post.side_effect = requests.ConnectionError("offline")
        with self.assertRaises(GeminiAPIError):
            client.generate_text("hello")

    def test_non_json_body_raises(self) -> None:
        response = MagicMock()
        response.json.side_effect = ValueError("no json")
        client, _ = make_client(response)
        with self.assertRaises(GeminiAPIError):
            client.generate_text("hello")

    def test_missing_candidates_raises(self) -> None:
        client, _ = make_client(ok_response({"promptFeedback": {"blockReason": "SAFETY"}}))
        with self.assertRaises(GeminiAPIError):
            client.generate_text("hello")


if __name__ == "__main__":  # pragma: no cover
    unittest.main()

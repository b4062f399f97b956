"""Tests for filtering reasoning blocks from model replies."""

import unittest
from unittest.mock import Mock, patch

from commit_ai.llm.groq_client import GroqClient, strip_thinking_tags


class TestThinkingFilter(unittest.TestCase):
    """Tests for filtering thinking process tags from model replies."""

    def test_filter_applied_to_completion(self):
        client = GroqClient(api_key="key", model="deepseek-r1-distill-llama-70b")

        mock_response = Mock()
        mock_response.status_code = 200
        mock_response.json.return_value = {
            "choices": [
                {
                    "message": {
                        "content": "<think>Let me analyze this diff...</think>\nREPORT:\n- add parser\nCOMMIT_MESSAGE:\nfeat: add parser"
                    }
                }
            ]
        }

        with patch("requests.post", return_value=mock_response):
            result = client.complete("system", "prompt")

        self.assertNotIn("<think>", result)
        self.assertNotIn("Let me analyze", result)
        self.assertTrue(result.startswith("REPORT:"))

    def test_multiline_and_case_insensitive(self):
        text = "<THINKING>\nfirst\nsecond\n</THINKING>\n\nCOMMIT_MESSAGE: fix: x"
        self.assertEqual(strip_thinking_tags(text), "COMMIT_MESSAGE: fix: x")

    def test_multiple_tag_kinds(self):
        text = "<thought>a</thought>REPORT:<reasoning>b</reasoning> done"
        self.assertEqual(strip_thinking_tags(text), "REPORT: done")

    def test_no_tags_unchanged(self):
        self.assertEqual(strip_thinking_tags("  REPORT:\n- x  "), "REPORT:\n- x")


if __name__ == "__main__":
    unittest.main()

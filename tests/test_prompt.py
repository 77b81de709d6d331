import unittest

from stylerewriter.results import RewriteRequest, StyleProfile
from stylerewriter.services.prompt import SYSTEM_PROMPT, build_messages, build_user_prompt


class PromptTests(unittest.TestCase):
    def test_prompt_lists_tone_and_fixed_rules(self):
        prompt = build_user_prompt("Hello", StyleProfile(tone="formal"))

        self.assertIn('Tone="formal"', prompt)
        self.assertIn("Preserve all facts and intent of the original.", prompt)
        self.assertIn("Keep length within ±25% of the original", prompt)
        self.assertIn("shorten or lengthen", prompt)
        self.assertIn("Do not invent new facts.", prompt)
        self.assertIn("verbatim", prompt)
        self.assertIn("Return only the rewritten email text (no commentary).", prompt)
        self.assertNotIn("Signature=", prompt)
        self.assertNotIn("Additional instructions", prompt)

    def test_optional_fields_are_included_when_present(self):
        prompt = build_user_prompt(
            "Hello",
            StyleProfile(
                tone="warm",
                signature="Best, Alex",
                custom_instructions="Make it shorter.",
            ),
            length_tolerance_percent=40,
        )

        self.assertIn('Signature="Best, Alex".', prompt)
        self.assertIn("Additional instructions: Make it shorter.", prompt)
        self.assertIn("±40%", prompt)

    def test_prompt_is_deterministic(self):
        request = RewriteRequest(original_text="Hi", style_profile=StyleProfile(tone="brief"))

        first = build_messages(request)
        second = build_messages(request)

        self.assertEqual(first, second)
        self.assertEqual(first[0], {"role": "system", "content": SYSTEM_PROMPT})


if __name__ == "__main__":
    unittest.main()

import unittest
from unittest.mock import MagicMock

from wordsearch.core.exceptions import ConfigurationError
from wordsearch.data.normalization import clean_word
from wordsearch.data.theme import (
    DummyWordGenerator,
    GeminiWordGenerator,
    GeneratedWord,
    UserWordListGenerator,
    WordBatch,
    merge_word_generators,
)


class GeminiWordGeneratorTests(unittest.TestCase):
    def _generator(self, reply: str) -> tuple:
        client = MagicMock()
        client.generate_text.return_value = reply
        return GeminiWordGenerator(client=client), client

    def test_parses_fenced_json_array(self) -> None:
        reply = (
            "Here you go:\n```json\n"
            '[{"word": "CLOUD", "clue": "Remote computing"}, {"word": "PIXEL", "clue": "Dot"}]'
            "\n```"
        )
        generator, _ = self._generator(reply)
        batch = generator.generate("technology", limit=2)
        self.assertEqual([w.text for w in batch.words], ["CLOUD", "PIXEL"])
        self.assertEqual(batch.words[0].clue, "Remote computing")
        self.assertEqual(batch.words[0].source, "gemini")

    def test_parses_bare_json_and_definition_key(self) -> None:
        generator, _ = self._generator('[{"word": "ROBOT", "definition": "Machine helper"}]')
        batch = generator.generate("technology")
        self.assertEqual(batch.words[0].clue, "Machine helper")

    def test_parses_words_object(self) -> None:
        generator, _ = self._generator('{"words": [{"word": "GENE", "clue": "Heredity unit"}]}')
        self.assertEqual(len(generator.generate("science").words), 1)

    def test_invalid_json_yields_empty_batch(self) -> None:
        generator, _ = self._generator("Sorry, I cannot help with that.")
        self.assertEqual(generator.generate("science").words, [])

    def test_skips_malformed_entries(self) -> None:
        generator, _ = self._generator('[{"word": 42, "clue": "x"}, "TEXT", {"word": "ATOM"}]')
        batch = generator.generate("science")
        self.assertEqual([(w.text, w.clue) for w in batch.words], [("ATOM", "")])

    def test_prompt_mentions_recent_words(self) -> None:
        generator, client = self._generator("[]")
        generator.generate("health", limit=9, difficulty="hard", exclude_words=["HEART", "BONE"])
        prompt = client.generate_text.call_args[0][0]
        self.assertIn('"health"', prompt)
        self.assertIn('"hard"', prompt)
        self.assertIn("Generate 9 unique words", prompt)
        self.assertIn("HEART, BONE", prompt)

    def test_prompt_without_exclusions_has_no_avoid_line(self) -> None:
        generator, client = self._generator("[]")
        generator.generate("health")
        self.assertNotIn("Avoid using", client.generate_text.call_args[0][0])

    def test_explain_word_strips_reply(self) -> None:
        generator, client = self._generator("  A unit of heredity.\n")
        self.assertEqual(generator.explain_word("GENE", "science"), "A unit of heredity.")
        self.assertIn('"GENE"', client.generate_text.call_args[0][0])


class UserWordListGeneratorTests(unittest.TestCase):
    def test_splits_word_and_clue(self) -> None:
        generator = UserWordListGenerator(["cloud: Sky formation", "  ", "data"])
        batch = generator.generate("anything")
        self.assertEqual([(w.text, w.clue) for w in batch.words], [("CLOUD", "Sky formation"), ("DATA", "")])
        self.assertTrue(all(w.source == "user" for w in batch.words))


class DummyWordGeneratorTests(unittest.TestCase):
    def test_prefers_requested_tier(self) -> None:
        buckets = {"nature": {"easy": ["tree", "leaf"], "hard": ["canopy"]}}
        generator = DummyWordGenerator(theme_buckets=buckets, seed=1)
        batch = generator.generate("Nature", limit=2, difficulty="easy")
        self.assertEqual(sorted(w.text for w in batch.words), ["LEAF", "TREE"])
        self.assertEqual(batch.words[0].clue, "Nature word")

    def test_respects_limit(self) -> None:
        generator = DummyWordGenerator(seed=4)
        self.assertEqual(len(generator.generate("science", limit=5).words), 5)

    def test_unknown_theme_uses_default_bucket(self) -> None:
        buckets = {"nature": {"easy": ["tree"]}, "default": {"easy": ["word"]}}
        generator = DummyWordGenerator(theme_buckets=buckets, seed=1)
        batch = generator.generate("space", limit=5, difficulty="easy")
        self.assertEqual([w.text for w in batch.words], ["WORD"])

    def test_unknown_theme_without_default_raises(self) -> None:
        generator = DummyWordGenerator(theme_buckets={"nature": {"easy": ["tree"]}}, seed=1)
        with self.assertRaises(ConfigurationError) as ctx:
            generator.generate("space")
        self.assertIn("space", str(ctx.exception))
        self.assertIn("nature", str(ctx.exception))

    def test_excluded_words_are_demoted(self) -> None:
        buckets = {"nature": {"easy": ["tree", "leaf", "rain"]}}
        generator = DummyWordGenerator(theme_buckets=buckets, seed=1)
        batch = generator.generate("nature", limit=3, difficulty="easy", exclude_words=["tree"])
        self.assertEqual(batch.words[-1].text, "TREE")
        self.assertEqual(len(batch.words), 3)


class MergeWordGeneratorsTests(unittest.TestCase):
    def test_falls_back_when_primary_fails(self) -> None:
        broken = MagicMock()
        broken.generate.side_effect = RuntimeError("quota exceeded")
        dummy = DummyWordGenerator(seed=2)
        batch = merge_word_generators(broken, [dummy], "technology", target=4)
        self.assertEqual(len(batch.words), 4)
        self.assertTrue(all(w.source == "dummy" for w in batch.words))

    def test_tops_up_short_primary_and_deduplicates(self) -> None:
        primary = UserWordListGenerator(["code", "CODE", "laser"])
        fallback = UserWordListGenerator(["CODE", "ROBOT", "PIXEL"])
        batch = merge_word_generators(primary, [fallback], "technology", target=4)
        self.assertEqual([w.text for w in batch.words], ["CODE", "LASER", "ROBOT", "PIXEL"])

    def test_skips_fallbacks_once_target_reached(self) -> None:
        fallback = MagicMock()
        primary = UserWordListGenerator(["ATOM", "GENE"])
        batch = merge_word_generators(primary, [fallback], "science", target=2)
        self.assertEqual(len(batch.words), 2)
        fallback.generate.assert_not_called()

    def test_normalize_rewrites_and_drops_entries(self) -> None:
        def normalize(text: str) -> str:
            word = clean_word(text)
            return word if 3 <= len(word) <= 6 else ""

        primary = MagicMock()
        primary.generate.return_value = WordBatch(
            words=[
                GeneratedWord("café", "Coffee shop", "test"),
                GeneratedWord("go", "Too short", "test"),
                GeneratedWord("e-mail", "Message", "test"),
                GeneratedWord("CAFE", "Duplicate", "test"),
            ]
        )
        batch = merge_word_generators(primary, [], "technology", target=10, normalize=normalize)
        self.assertEqual([(w.text, w.clue) for w in batch.words], [("CAFE", "Coffee shop"), ("EMAIL", "Message")])

    def test_passes_exclusions_to_every_generator(self) -> None:
        primary = MagicMock()
        primary.generate.return_value = WordBatch()
        fallback = MagicMock()
        fallback.generate.return_value = WordBatch()
        merge_word_generators(primary, [fallback], "health", target=3, difficulty="easy", exclude_words=["BONE"])
        for generator in (primary, fallback):
            _, kwargs = generator.generate.call_args
            self.assertEqual(kwargs["exclude_words"], ["BONE"])
            self.assertEqual(kwargs["difficulty"], "easy")


if __name__ == "__main__":  # pragma: no cover
    unittest.main()

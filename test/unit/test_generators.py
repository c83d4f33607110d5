"""
Unit tests for the summary and quiz generators and their prompt templates.
Tests: compute_word_bounds floor arithmetic and tier defaults, rendered
prompt content, generate_summary / generate_quiz against scripted clients
No network required.
"""

import sys
import os
import pytest

BACKEND_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "..", "backend"))
sys.path.insert(0, BACKEND_DIR)

os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-for-unit-tests-only-32chars!")

from studymate.prompts import get_quiz_prompt, get_summary_prompt
from studymate.services.llm_service.errors import ExhaustedRetriesError, ResultValidationError
from studymate.services.quiz.generator import generate_quiz
from studymate.services.summary.generator import (
    build_summary_prompt,
    compute_word_bounds,
    generate_summary,
)


class TestComputeWordBounds:

    def test_medium_thousand_words(self):
        b = compute_word_bounds(1000, "medium")
        assert (b.percent, b.target_words, b.min_words, b.max_words) == (45, 450, 382, 517)

    @pytest.mark.parametrize("tier,percent", [("short", 25), ("medium", 45), ("long", 70)])
    def test_tier_percentages(self, tier, percent):
        assert compute_word_bounds(10000, tier).percent == percent

    @pytest.mark.parametrize("tier", [None, "", "huge", "MEDIUM"])
    def test_unknown_tier_defaults_to_forty(self, tier):
        b = compute_word_bounds(1000, tier)
        assert b.percent == 40
        assert b.target_words == 400

    def test_long_text(self):
        b = compute_word_bounds(2000, "long")
        assert (b.target_words, b.min_words) == (1400, 1190)
        assert b.min_words < b.target_words < b.max_words

    def test_target_floor_of_120(self):
        b = compute_word_bounds(100, "short")
        assert b.target_words == 120
        assert (b.min_words, b.max_words) == (102, 138)

    def test_single_word(self):
        assert compute_word_bounds(1).target_words == 120

    def test_target_floors_fraction(self):
        # 999 * 25 / 100 = 249.75
        assert compute_word_bounds(999, "short").target_words == 249


class TestPrompts:

    def test_summary_prompt_embeds_bounds_and_text(self):
        prompt = get_summary_prompt("Osmosis moves water.", 102, 138)
        assert "at least 102 words" in prompt
        assert "longer than 138 words" in prompt
        assert '"title"' in prompt and '"summary"' in prompt
        assert prompt.rstrip().endswith("Osmosis moves water.")

    def test_summary_prompt_uses_computed_bounds(self):
        text = " ".join(["word"] * 1000)
        prompt = build_summary_prompt(text, "medium")
        assert "at least 382 words" in prompt
        assert "longer than 517 words" in prompt

    def test_summary_prompt_for_empty_text(self):
        prompt = build_summary_prompt("", None)
        assert "at least 102 words" in prompt

    def test_placeholder_like_content_not_substituted(self):
        prompt = get_summary_prompt("literal {{MIN_WORDS}} in notes", 1, 2)
        assert "literal {{MIN_WORDS}} in notes" in prompt

    def test_quiz_prompt(self):
        prompt = get_quiz_prompt("Summary body.", 30)
        assert "Exactly 30 questions" in prompt
        assert '"correctAnswer"' in prompt
        assert "ONLY the SUMMARY" in prompt
        assert prompt.rstrip().endswith("Summary body.")


class TestGenerateSummary:

    def test_returns_summary_result(self, scripted_client):
        client = scripted_client('```json\n{"title": "Plant Cells", "summary": "Chloroplasts..."}\n```')
        result = generate_summary("Plant cells have chloroplasts.", "short", client=client)
        assert result.title == "Plant Cells"
        assert result.summary == "Chloroplasts..."
        assert "Plant cells have chloroplasts." in client.prompts[0]

    def test_array_output_rejected(self, scripted_client):
        client = scripted_client("[1, 2, 3]")
        with pytest.raises(ResultValidationError):
            generate_summary("text", client=client)

    def test_exhausted(self, scripted_client):
        client = scripted_client("I cannot help with that.")
        with pytest.raises(ExhaustedRetriesError):
            generate_summary("text", client=client)


class TestGenerateQuiz:

    def test_exact_count(self, scripted_client, quiz_json):
        client = scripted_client("Here you go:\n" + quiz_json(30))
        questions = generate_quiz("A summary.", client=client)
        assert len(questions) == 30
        assert "Exactly 30 questions" in client.prompts[0]

    def test_custom_count(self, scripted_client, quiz_json):
        client = scripted_client(quiz_json(5))
        assert len(generate_quiz("A summary.", 5, client=client)) == 5

    def test_zero_count_rejected(self, scripted_client):
        client = scripted_client("[]")
        with pytest.raises(ValueError):
            generate_quiz("A summary.", 0, client=client)
        assert client.calls == 0

    def test_wrong_count_rejected(self, scripted_client, quiz_json):
        client = scripted_client(quiz_json(29))
        with pytest.raises(ResultValidationError):
            generate_quiz("A summary.", 30, client=client)

    def test_summary_normalized_into_prompt(self, scripted_client, quiz_json):
        client = scripted_client(quiz_json(3))
        generate_quiz("<p>Cells</p>   divide\x00", 3, client=client)
        assert client.prompts[0].rstrip().endswith("Cells divide")

    def test_strict_policy(self, scripted_client, quiz_items):
        import json
        items = quiz_items(3)
        items[1]["options"] = ["only", "two"]
        client = scripted_client(json.dumps(items))
        with pytest.raises(ResultValidationError):
            generate_quiz("A summary.", 3, item_policy="strict", client=client)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])

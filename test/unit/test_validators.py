"""
Unit tests for backend/studymate/services/llm_service/validators.py
Tests: summary object acceptance and defaulting; quiz exact-count contract,
length-only vs strict item policy
No LLM required.
"""

import sys
import os
import pytest

BACKEND_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "..", "backend"))
sys.path.insert(0, BACKEND_DIR)

os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-for-unit-tests-only-32chars!")

from studymate.services.llm_service.errors import ResultValidationError
from studymate.services.llm_service.validators import validate_quiz, validate_summary


class TestValidateSummary:

    def test_complete_object(self):
        result = validate_summary({"title": "The Cell Cycle", "summary": "Cells divide."})
        assert result.title == "The Cell Cycle"
        assert result.summary == "Cells divide."

    def test_missing_fields_defaulted(self):
        result = validate_summary({})
        assert result.title == "Untitled note"
        assert result.summary == ""

    def test_empty_title_defaulted(self):
        assert validate_summary({"title": "", "summary": "x"}).title == "Untitled note"

    def test_extra_fields_ignored(self):
        result = validate_summary({"title": "T", "summary": "S", "wordCount": 3})
        assert result.model_dump() == {"title": "T", "summary": "S"}

    def test_non_string_title_coerced(self):
        assert validate_summary({"title": 1984, "summary": "S"}).title == "1984"

    @pytest.mark.parametrize("value", [[], [{"title": "T"}], "text", 3, None])
    def test_non_object_rejected(self, value):
        with pytest.raises(ResultValidationError) as exc_info:
            validate_summary(value)
        assert exc_info.value.kind == "summary"


class TestValidateQuizLength:

    def test_exact_count_accepted(self, quiz_items):
        items = quiz_items(30)
        assert validate_quiz(items, 30) == items

    @pytest.mark.parametrize("n", [0, 29, 31])
    def test_wrong_count_rejected(self, quiz_items, n):
        with pytest.raises(ResultValidationError) as exc_info:
            validate_quiz(quiz_items(n), 30)
        assert exc_info.value.kind == "quiz"

    def test_never_truncated(self, quiz_items):
        items = quiz_items(31)
        with pytest.raises(ResultValidationError):
            validate_quiz(items, 30)
        assert len(items) == 31

    def test_object_rejected(self):
        with pytest.raises(ResultValidationError):
            validate_quiz({"questions": []}, 30)

    def test_length_only_ignores_item_shape(self):
        items = [{"question": "?"}] * 29 + ["not even an object"]
        assert len(validate_quiz(items, 30)) == 30


class TestValidateQuizStrict:

    def test_well_formed_accepted(self, quiz_items):
        assert len(validate_quiz(quiz_items(5), 5, policy="strict")) == 5

    def test_three_options_rejected(self, quiz_items):
        items = quiz_items(5)
        items[2]["options"] = ["a", "b", "c"]
        with pytest.raises(ResultValidationError) as exc_info:
            validate_quiz(items, 5, policy="strict")
        assert "question 3" in str(exc_info.value)

    def test_answer_outside_letters_rejected(self, quiz_items):
        items = quiz_items(5)
        items[0]["correctAnswer"] = "E"
        with pytest.raises(ResultValidationError):
            validate_quiz(items, 5, policy="strict")

    def test_missing_question_rejected(self, quiz_items):
        items = quiz_items(5)
        del items[4]["question"]
        with pytest.raises(ResultValidationError):
            validate_quiz(items, 5, policy="strict")

    def test_non_object_item_rejected(self, quiz_items):
        items = quiz_items(4) + ["oops"]
        with pytest.raises(ResultValidationError):
            validate_quiz(items, 5, policy="strict")

    def test_length_checked_before_items(self, quiz_items):
        with pytest.raises(ResultValidationError) as exc_info:
            validate_quiz(quiz_items(4), 5, policy="strict")
        assert "got 4" in str(exc_info.value)

    def test_unknown_policy(self, quiz_items):
        with pytest.raises(ValueError):
            validate_quiz(quiz_items(5), 5, policy="lenient")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])

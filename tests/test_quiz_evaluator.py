"""
Tests for classes/quiz_evaluator.py: pure scoring, no app or database.
"""
import pytest

from classes.exceptions import IncompleteSubmission
from classes.quiz_evaluator import (
    Option,
    Question,
    ScoreResult,
    evaluate,
    find_missing_answers,
    group_options,
)
from factories import make_questions


def all_correct(options):
    return {qid: next(o.id for o in opts if o.is_correct) for qid, opts in options.items()}


def all_wrong(options):
    return {qid: next(o.id for o in opts if not o.is_correct) for qid, opts in options.items()}


# ─── scoring ──────────────────────────────────────────────────────────────────

class TestScoring:
    @pytest.mark.parametrize("count", [1, 3, 10])
    def test_all_correct_passes_with_default_threshold(self, count):
        questions, options = make_questions(count)
        result = evaluate(questions, options, all_correct(options))
        assert result.correct == count
        assert result.total == count
        assert result.passed is True
        assert result.pass_threshold == count

    @pytest.mark.parametrize("threshold", [0, 1, 3])
    def test_zero_correct_passes_only_at_zero_threshold(self, threshold):
        questions, options = make_questions(3)
        result = evaluate(questions, options, all_wrong(options), threshold)
        assert result.correct == 0
        assert result.passed is (threshold == 0)

    def test_scenario_a_two_of_three_with_threshold_two(self):
        questions, options = make_questions(3)
        answers = all_correct(options)
        answers[3] = 32
        result = evaluate(questions, options, answers, pass_threshold=2)
        assert result.correct == 2
        assert result.passed is True

    def test_scenario_b_two_of_three_with_unset_threshold(self):
        questions, options = make_questions(3)
        answers = all_correct(options)
        answers[2] = 22
        result = evaluate(questions, options, answers, pass_threshold=None)
        assert result.correct == 2
        assert result.passed is False
        assert result.pass_threshold == 3

    def test_deterministic(self):
        questions, options = make_questions(4)
        answers = {1: 11, 2: 22, 3: 31, 4: 42}
        first = evaluate(questions, options, answers, 2)
        second = evaluate(questions, options, answers, 2)
        assert first == second

    def test_correct_question_ids_reported_in_question_order(self):
        questions, options = make_questions(3)
        result = evaluate(questions, options, {1: 11, 2: 22, 3: 31}, 1)
        assert result.correct_question_ids == (1, 3)

    def test_string_keys_from_json_are_accepted(self):
        questions, options = make_questions(2)
        result = evaluate(questions, options, {"1": "11", "2": "21"})
        assert result.correct == 2


# ─── defensive cases ──────────────────────────────────────────────────────────

class TestMalformedInput:
    def test_question_without_correct_option_never_counts(self):
        question = Question(id=1, quiz_id=1)
        options = {1: [Option(id=5, question_id=1, is_correct=False), Option(id=6, question_id=1, is_correct=False)]}
        for chosen in (5, 6, 999):
            result = evaluate([question], options, {1: chosen}, 0)
            assert result.correct == 0

    def test_option_from_another_question_is_incorrect(self):
        questions, options = make_questions(2)
        # 21 is the correct option of question 2, submitted for question 1
        result = evaluate(questions, options, {1: 21, 2: 21})
        assert result.correct == 1
        assert result.correct_question_ids == (2,)

    def test_unknown_option_id_is_incorrect_not_an_error(self):
        questions, options = make_questions(1)
        result = evaluate(questions, options, {1: "not-an-id"}, 0)
        assert result.correct == 0
        assert result.passed is True

    def test_question_missing_from_options_mapping(self):
        questions, _ = make_questions(2)
        result = evaluate(questions, {}, {1: 11, 2: 21}, 0)
        assert result.correct == 0

    def test_negative_threshold_rejected(self):
        questions, options = make_questions(1)
        with pytest.raises(ValueError):
            evaluate(questions, options, all_correct(options), -1)


# ─── completeness ─────────────────────────────────────────────────────────────

class TestIncompleteSubmission:
    def test_missing_answer_raises(self):
        questions, options = make_questions(3)
        with pytest.raises(IncompleteSubmission) as exc:
            evaluate(questions, options, {1: 11, 3: 31})
        assert exc.value.missing_question_ids == [2]

    def test_empty_answer_value_counts_as_missing(self):
        questions, options = make_questions(2)
        with pytest.raises(IncompleteSubmission):
            evaluate(questions, options, {1: 11, 2: ""})

    def test_no_answers_at_all(self):
        questions, options = make_questions(2)
        with pytest.raises(IncompleteSubmission) as exc:
            evaluate(questions, options, {})
        assert exc.value.missing_question_ids == [1, 2]

    def test_find_missing_answers_ignores_extra_keys(self):
        questions, _ = make_questions(2)
        assert find_missing_answers(questions, {1: 11, 2: 21, 99: 1}) == []


# ─── degenerate quiz / helpers ────────────────────────────────────────────────

class TestHelpers:
    def test_empty_quiz_default_threshold_passes(self):
        result = evaluate([], {}, {})
        assert result == ScoreResult(correct=0, total=0, passed=True, pass_threshold=0)

    def test_empty_quiz_with_threshold_fails(self):
        assert evaluate([], {}, {}, 1).passed is False

    def test_group_options(self):
        flat = [
            Option(id=1, question_id=10),
            Option(id=2, question_id=20),
            Option(id=3, question_id=10),
        ]
        grouped = group_options(flat)
        assert [o.id for o in grouped[10]] == [1, 3]
        assert [o.id for o in grouped[20]] == [2]

    def test_pass_message(self):
        result = ScoreResult(correct=3, total=3, passed=True, pass_threshold=3)
        assert result.message == "You passed! You answered 3 of 3 correctly."

    def test_fail_message_mentions_threshold(self):
        result = ScoreResult(correct=1, total=3, passed=False, pass_threshold=2)
        assert result.message == "You scored 1 of 3. You need at least 2 correct to pass."

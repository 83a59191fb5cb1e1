"""
Tests for classes/progress_manager.py: attempt history, lesson completion
upsert and course eligibility.
"""
from classes.progress_manager import ProgressManager
from classes.quiz_evaluator import ScoreResult
from factories import make_course_with_quiz, make_user
from models.lesson_progress import LessonProgress
from models.quiz_attempts import QuizAttempt


def passing(total=3):
    return ScoreResult(correct=total, total=total, passed=True, pass_threshold=total)


def failing(total=3):
    return ScoreResult(correct=0, total=total, passed=False, pass_threshold=total)


class TestAttempts:
    def test_record_attempt_stores_score_and_answers(self, app):
        user = make_user()
        setup = make_course_with_quiz()
        attempt = ProgressManager.record_attempt(user.id, setup.quiz, passing(), setup.correct)

        stored = QuizAttempt.query.one()
        assert stored.id == attempt.id
        assert stored.score == 3
        assert stored.passed is True
        assert stored.raw_answers == {str(k): v for k, v in setup.correct.items()}
        assert ProgressManager.attempts_used(user.id, setup.quiz.id) == 1

    def test_attempts_left(self, app):
        setup = make_course_with_quiz(max_attempts=2)
        assert ProgressManager.attempts_left(setup.quiz, 1) == 1
        assert ProgressManager.attempts_left(setup.quiz, 5) == 0

    def test_attempts_left_unlimited(self, app):
        setup = make_course_with_quiz()
        assert ProgressManager.attempts_left(setup.quiz, 10) is None


class TestLessonProgress:
    def test_mark_complete_is_idempotent(self, app):
        user = make_user()
        setup = make_course_with_quiz()
        first = ProgressManager.mark_lesson_complete(user.id, setup.lesson.id)
        second = ProgressManager.mark_lesson_complete(user.id, setup.lesson.id)

        assert first.id == second.id
        assert LessonProgress.query.filter_by(user_id=user.id).count() == 1


class TestEligibility:
    def test_passing_attempt_makes_learner_eligible(self, app):
        user = make_user()
        setup = make_course_with_quiz()
        assert ProgressManager.has_passed_course(user.id, setup.course.id) is False

        ProgressManager.record_attempt(user.id, setup.quiz, failing(), setup.wrong)
        assert ProgressManager.has_passed_course(user.id, setup.course.id) is False

        ProgressManager.record_attempt(user.id, setup.quiz, passing(), setup.correct)
        assert ProgressManager.has_passed_course(user.id, setup.course.id) is True

    def test_pass_in_other_course_does_not_count(self, app):
        user = make_user()
        first = make_course_with_quiz(slug="first")
        second = make_course_with_quiz(title="Other", slug="other")
        ProgressManager.record_attempt(user.id, first.quiz, passing(), first.correct)
        assert ProgressManager.has_passed_course(user.id, second.course.id) is False

import logging
from datetime import datetime, timezone

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from models import db
from models.certificates import Certificate
from models.course_lessons import Lesson
from models.lesson_progress import LessonProgress
from models.quiz_attempts import QuizAttempt
from models.quizzes import Quiz

logger = logging.getLogger(__name__)


class ProgressManager:
    @staticmethod
    def attempts_used(user_id, quiz_id):
        return QuizAttempt.query.filter_by(user_id=user_id, quiz_id=quiz_id).count()

    @staticmethod
    def attempts_left(quiz, attempts_used):
        """None when the quiz has no attempt limit."""
        if quiz.max_attempts is None:
            return None
        return max(0, quiz.max_attempts - attempts_used)

    @staticmethod
    def record_attempt(user_id, quiz, result, answers, started_at=None):
        """Store one scored submission."""
        now = datetime.now(timezone.utc)
        attempt = QuizAttempt(
            user_id=user_id,
            quiz_id=quiz.id,
            score=result.correct,
            passed=result.passed,
            started_at=started_at or now,
            submitted_at=now,
            raw_answers={str(k): v for k, v in answers.items()},
        )
        db.session.add(attempt)
        db.session.commit()
        return attempt

    @staticmethod
    def mark_lesson_complete(user_id, lesson_id):
        """Upsert keyed by learner + lesson; repeated calls refresh completed_at."""
        now = datetime.now(timezone.utc)
        progress = LessonProgress.query.filter_by(user_id=user_id, lesson_id=lesson_id).first()
        if progress:
            progress.completed_at = now
            db.session.commit()
            return progress

        progress = LessonProgress(user_id=user_id, lesson_id=lesson_id, completed_at=now)
        db.session.add(progress)
        try:
            db.session.commit()
        except IntegrityError:
            # another request inserted the row first
            db.session.rollback()
            progress = LessonProgress.query.filter_by(user_id=user_id, lesson_id=lesson_id).one()
            progress.completed_at = now
            db.session.commit()
        return progress

    @staticmethod
    def has_passed_course(user_id, course_id):
        """True when the learner has a passing attempt on any quiz in the course."""
        passing = (
            db.session.query(QuizAttempt.id)
            .join(Quiz, QuizAttempt.quiz_id == Quiz.id)
            .join(Lesson, Quiz.lesson_id == Lesson.id)
            .filter(
                QuizAttempt.user_id == user_id,
                QuizAttempt.passed.is_(True),
                Lesson.course_id == course_id,
            )
            .first()
        )
        return passing is not None

    @staticmethod
    def find_certificate(user_id, course_id):
        return (
            Certificate.query
            .filter_by(user_id=user_id, course_id=course_id)
            .order_by(Certificate.issued_at.desc())
            .first()
        )

    @staticmethod
    def list_certificates(user_id):
        return (
            Certificate.query
            .filter_by(user_id=user_id)
            .order_by(Certificate.issued_at.desc())
            .all()
        )

    @staticmethod
    def record_certificate(user_id, course_id, certificate_url, certificate_number,
                           storage_path, issued_at, completed_at):
        certificate = Certificate(
            user_id=user_id,
            course_id=course_id,
            certificate_url=certificate_url,
            certificate_number=certificate_number,
            storage_path=storage_path,
            issued_at=issued_at,
            completed_at=completed_at,
        )
        db.session.add(certificate)
        try:
            db.session.commit()
        except SQLAlchemyError:
            db.session.rollback()
            logger.error("Rolled back certificate insert for user %s course %s", user_id, course_id)
            raise
        return certificate

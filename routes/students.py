import logging
from datetime import date

from flask import Blueprint, jsonify, g, request, current_app

from classes.certificate_generator import CertificateGenerator, CertificateRequest
from classes.exceptions import CertificateError, IncompleteSubmission
from classes.progress_manager import ProgressManager
from classes.quiz_evaluator import evaluate, group_options
from models import db
from models.courses import Course
from models.course_lessons import Lesson
from models.quizzes import Quiz
from models.users import User
from utils.helpers import clean_text, completion_line_for, format_completion_date
from utils.template_service import build_template_loader
from utils.utils import login_required

logger = logging.getLogger(__name__)

# Students' blueprint
student_bp = Blueprint("student", __name__)


def get_certificate_generator():
    storage = current_app.extensions["certificate_storage"]
    return CertificateGenerator(
        storage=storage,
        template_loader=build_template_loader(current_app.config, storage),
        recorder=ProgressManager.record_certificate,
        folder=current_app.config.get("CERTIFICATE_FOLDER", "certificates"),
    )


def _current_user_id():
    return g.user.get("user_id")


#                                                         QUIZZES
#_____________________________________________________________________________________________________________
#Fetch the quiz attached to a lesson
@student_bp.route("/lessons/<int:lesson_id>/quiz", methods=["GET"])
@login_required
def get_lesson_quiz(lesson_id):
    user_id = _current_user_id()

    lesson = db.session.get(Lesson, lesson_id)
    if not lesson:
        return jsonify({"error": "Lesson not found."}), 404

    quiz = Quiz.query.filter_by(lesson_id=lesson_id).first()
    if not quiz:
        return jsonify({"error": "No quiz has been configured for this lesson yet."}), 404

    attempts_used = ProgressManager.attempts_used(user_id, quiz.id)
    questions = quiz.questions

    return jsonify({
        "quiz": quiz.to_dict(),
        "lesson": lesson.to_dict(),
        "course": lesson.course.to_dict() if lesson.course else None,
        "pass_score": quiz.pass_score if quiz.pass_score is not None else len(questions),
        "total_questions": len(questions),
        "attempts_used": attempts_used,
        "attempts_left": ProgressManager.attempts_left(quiz, attempts_used),
        "questions": [q.to_dict() for q in questions],
    }), 200


@student_bp.route("/quiz/<int:quiz_id>/submit", methods=["POST"])
@login_required
def submit_quiz(quiz_id):
    """Grades the quiz, records the attempt and completes the lesson on a pass."""
    data = request.get_json(silent=True) or {}
    user_id = _current_user_id()
    answers = data.get("answers") or {}
    if not isinstance(answers, dict):
        return jsonify({"error": "answers must be an object of question id to option id"}), 400

    quiz = db.session.get(Quiz, quiz_id)
    if not quiz:
        return jsonify({"error": "Quiz not found"}), 404

    questions = quiz.questions
    if not questions:
        return jsonify({"error": "This quiz doesn't have any questions yet."}), 400

    attempts_used = ProgressManager.attempts_used(user_id, quiz.id)
    if quiz.max_attempts is not None and attempts_used >= quiz.max_attempts:
        return jsonify({"error": "No attempts left"}), 403

    question_records = [q.to_record() for q in questions]
    option_records = group_options(o.to_record() for q in questions for o in q.options)

    try:
        result = evaluate(question_records, option_records, answers, quiz.to_record().pass_score)
    except IncompleteSubmission as e:
        return jsonify({
            "error": e.user_message,
            "missing_question_ids": e.missing_question_ids,
        }), 400

    attempt = ProgressManager.record_attempt(user_id, quiz, result, answers)
    logger.info("User %s scored %s/%s on quiz %s", user_id, result.correct, result.total, quiz.id)

    if result.passed:
        try:
            ProgressManager.mark_lesson_complete(user_id, quiz.lesson_id)
        except Exception:
            # the attempt is already stored; progress can be re-derived from it
            db.session.rollback()
            logger.exception("Error marking lesson %s complete for user %s", quiz.lesson_id, user_id)

    response = result.to_dict()
    response.update({
        "attempt_id": attempt.id,
        "attempts_used": attempts_used + 1,
        "attempts_left": ProgressManager.attempts_left(quiz, attempts_used + 1),
    })
    return jsonify(response), 200


#                                                         CERTIFICATES
#_____________________________________________________________________________________________________________
@student_bp.route("/certificates", methods=["GET"])
@login_required
def get_certificates():
    user_id = _current_user_id()
    certificates = ProgressManager.list_certificates(user_id)
    return jsonify({"certificates": [c.to_dict(include_course=True) for c in certificates]}), 200


@student_bp.route("/courses/<int:course_id>/certificate", methods=["GET"])
@login_required
def get_course_certificate(course_id):
    """Eligibility, any existing certificate, and suggested text fields."""
    user_id = _current_user_id()

    course = db.session.get(Course, course_id)
    if not course:
        return jsonify({"error": "Course not found"}), 404

    user = db.session.get(User, user_id)
    existing = ProgressManager.find_certificate(user_id, course_id)

    return jsonify({
        "eligible": ProgressManager.has_passed_course(user_id, course_id),
        "certificate": existing.to_dict() if existing else None,
        "suggested": {
            "name_text": user.display_name if user else "",
            "completion_line": completion_line_for(course),
            "completion_date": format_completion_date(date.today()),
        },
    }), 200


@student_bp.route("/courses/<int:course_id>/certificate", methods=["POST"])
@login_required
def create_course_certificate(course_id):
    data = request.get_json(silent=True) or {}
    user_id = _current_user_id()

    course = db.session.get(Course, course_id)
    if not course:
        return jsonify({"error": "Course not found"}), 404

    if not ProgressManager.has_passed_course(user_id, course_id):
        return jsonify({"error": "Pass the course quiz before requesting a certificate."}), 403

    try:
        cert_request = CertificateRequest(
            user_id=user_id,
            course_id=course_id,
            name_text=clean_text(data.get("name_text")),
            completion_line=clean_text(data.get("completion_line")),
            completion_date=clean_text(data.get("completion_date")),
        )
    except ValueError as e:
        return jsonify({"error": str(e)}), 400

    try:
        artifact = get_certificate_generator().generate(cert_request)
    except CertificateError as e:
        logger.error("Certificate generation failed for user %s course %s: %s", user_id, course_id, e)
        return jsonify({"error": e.user_message, "reason": type(e).__name__}), 502

    return jsonify({"certificate": artifact.to_dict()}), 201

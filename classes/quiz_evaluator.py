from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from classes.exceptions import IncompleteSubmission
from classes.validators import validate_threshold


@dataclass(frozen=True)
class QuizDefinition:
    id: int
    lesson_id: int
    title: Optional[str] = None
    pass_score: Optional[int] = None
    max_attempts: Optional[int] = None  # informational, enforced by the caller


@dataclass(frozen=True)
class Question:
    id: int
    quiz_id: int
    question_text: str = ""
    sort_order: Optional[int] = None


@dataclass(frozen=True)
class Option:
    id: int
    question_id: int
    option_text: str = ""
    is_correct: bool = False
    sort_order: Optional[int] = None


@dataclass(frozen=True)
class ScoreResult:
    correct: int
    total: int
    passed: bool
    pass_threshold: int
    correct_question_ids: Tuple[int, ...] = field(default_factory=tuple)

    @property
    def message(self) -> str:
        if self.passed:
            return f"You passed! You answered {self.correct} of {self.total} correctly."
        return (
            f"You scored {self.correct} of {self.total}. "
            f"You need at least {self.pass_threshold} correct to pass."
        )

    def to_dict(self):
        return {
            "score": self.correct,
            "total_questions": self.total,
            "passed": self.passed,
            "pass_score": self.pass_threshold,
            "message": self.message,
        }


def group_options(options: Iterable[Option]) -> Dict[int, List[Option]]:
    """Group a flat option list by the question it belongs to."""
    grouped = defaultdict(list)
    for option in options:
        grouped[option.question_id].append(option)
    return dict(grouped)


def _normalise_answers(answers):
    # JSON bodies arrive with string keys; accept either form
    normalised = {}
    for question_id, option_id in (answers or {}).items():
        normalised[str(question_id)] = option_id
    return normalised


def find_missing_answers(questions: Sequence[Question], answers: Mapping) -> List[int]:
    normalised = _normalise_answers(answers)
    missing = []
    for question in questions:
        chosen = normalised.get(str(question.id))
        if chosen is None or chosen == "":
            missing.append(question.id)
    return missing


def evaluate(
    questions: Sequence[Question],
    options: Mapping[int, Sequence[Option]],
    answers: Mapping,
    pass_threshold: Optional[int] = None,
) -> ScoreResult:
    """Score one quiz attempt.

    A question counts as correct only when the chosen option id belongs to
    that question and is flagged correct. Option ids that do not belong to
    the question are scored as wrong rather than rejected.

    Raises IncompleteSubmission when any question has no answer; no partial
    score is produced in that case.
    """
    validate_threshold(pass_threshold)

    missing = find_missing_answers(questions, answers)
    if missing:
        raise IncompleteSubmission(missing)

    normalised = _normalise_answers(answers)
    threshold = len(questions) if pass_threshold is None else pass_threshold

    correct_ids = []
    for question in questions:
        chosen = str(normalised[str(question.id)])
        candidates = options.get(question.id, ())
        if any(str(option.id) == chosen and option.is_correct for option in candidates):
            correct_ids.append(question.id)

    correct = len(correct_ids)
    return ScoreResult(
        correct=correct,
        total=len(questions),
        passed=correct >= threshold,
        pass_threshold=threshold,
        correct_question_ids=tuple(correct_ids),
    )

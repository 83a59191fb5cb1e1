from models import db
from classes.quiz_evaluator import QuizDefinition

class Quiz(db.Model):
    __tablename__ = "quizzes"

    id = db.Column(db.Integer, primary_key=True)
    lesson_id = db.Column(db.Integer, db.ForeignKey("course_lessons.id"), nullable=False, unique=True)
    title = db.Column(db.String(255), nullable=True)
    pass_score = db.Column(db.Integer, nullable=True)
    max_attempts = db.Column(db.Integer, nullable=True)

    lesson = db.relationship("Lesson", back_populates="quiz")
    questions = db.relationship(
        "QuizQuestion",
        back_populates="quiz",
        cascade="all, delete-orphan",
        order_by="QuizQuestion.sort_order",
    )

    def __repr__(self):
        return f"<Quiz {self.title}>"

    def to_record(self):
        return QuizDefinition(
            id=self.id,
            lesson_id=self.lesson_id,
            title=self.title,
            pass_score=int(self.pass_score) if self.pass_score is not None else None,
            max_attempts=int(self.max_attempts) if self.max_attempts is not None else None,
        )

    def to_dict(self):
        return {
            "id": self.id,
            "lesson_id": self.lesson_id,
            "title": self.title,
            "pass_score": self.pass_score,
            "max_attempts": self.max_attempts,
        }

from models import db
from classes.quiz_evaluator import Question

class QuizQuestion(db.Model):
    __tablename__ = "quiz_questions"

    id = db.Column(db.Integer, primary_key=True)
    quiz_id = db.Column(db.Integer, db.ForeignKey("quizzes.id"), nullable=False)
    question_text = db.Column(db.Text, nullable=False)
    sort_order = db.Column(db.Integer, nullable=True)

    quiz = db.relationship("Quiz", back_populates="questions")
    options = db.relationship(
        "QuizOption",
        back_populates="question",
        cascade="all, delete-orphan",
        order_by="QuizOption.sort_order",
    )

    def to_record(self):
        return Question(
            id=self.id,
            quiz_id=self.quiz_id,
            question_text=self.question_text or "",
            sort_order=self.sort_order,
        )

    def to_dict(self):
        return {
            "id": self.id,
            "quiz_id": self.quiz_id,
            "question_text": self.question_text,
            "sort_order": self.sort_order,
            # correctness flags never leave the server
            "options": [option.to_dict() for option in self.options],
        }

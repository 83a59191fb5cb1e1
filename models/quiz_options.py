from models import db
from classes.quiz_evaluator import Option

class QuizOption(db.Model):
    __tablename__ = "quiz_options"

    id = db.Column(db.Integer, primary_key=True)
    question_id = db.Column(db.Integer, db.ForeignKey("quiz_questions.id"), nullable=False)
    option_text = db.Column(db.Text, nullable=False)
    is_correct = db.Column(db.Boolean, nullable=False, default=False)
    sort_order = db.Column(db.Integer, nullable=True)

    question = db.relationship("QuizQuestion", back_populates="options")

    def to_record(self):
        return Option(
            id=self.id,
            question_id=self.question_id,
            option_text=self.option_text or "",
            is_correct=bool(self.is_correct),
            sort_order=self.sort_order,
        )

    def to_dict(self):
        return {
            "id": self.id,
            "question_id": self.question_id,
            "option_text": self.option_text,
            "sort_order": self.sort_order,
        }

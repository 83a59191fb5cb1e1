from models import db
from datetime import datetime, timezone

class LessonProgress(db.Model):
    __tablename__ = "lesson_progress"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    lesson_id = db.Column(db.Integer, db.ForeignKey("course_lessons.id"), nullable=False)
    completed_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        db.UniqueConstraint("user_id", "lesson_id", name="unique_user_lesson"),
    )

    def to_dict(self):
        return {
            "user_id": self.user_id,
            "lesson_id": self.lesson_id,
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
        }

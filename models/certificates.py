from models import db

class Certificate(db.Model):
    __tablename__ = "certificates"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    course_id = db.Column(db.Integer, db.ForeignKey("courses.id"), nullable=False)
    certificate_url = db.Column(db.String(512), nullable=True)
    certificate_number = db.Column(db.String(32), nullable=True)
    storage_path = db.Column(db.String(512), nullable=True)
    issued_at = db.Column(db.DateTime, nullable=False)
    completed_at = db.Column(db.DateTime, nullable=True)

    user = db.relationship("User", back_populates="certificates")
    course = db.relationship("Course", back_populates="certificates")

    def __repr__(self):
        return f"<Certificate #{self.certificate_number} user={self.user_id} course={self.course_id}>"

    def to_dict(self, include_course=False):
        data = {
            "id": self.id,
            "user_id": self.user_id,
            "course_id": self.course_id,
            "certificate_url": self.certificate_url,
            "certificate_number": self.certificate_number,
            "issued_at": self.issued_at.isoformat() if self.issued_at else None,
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
        }
        if include_course:
            data["course"] = self.course.to_dict() if self.course else None
        return data

from models import db


class User(db.Model):
    """Learner profile. Credentials live with the identity provider."""
    __tablename__ = 'users'

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(100), nullable=False, unique=True)
    full_name = db.Column(db.String(100), nullable=True)
    user_type = db.Column(db.String(20), nullable=True)  # 'internal', 'external', 'both'
    date_created = db.Column(db.DateTime, default=db.func.now(), nullable=False)

    certificates = db.relationship("Certificate", back_populates="user", cascade="all, delete-orphan")

    @property
    def display_name(self):
        """Full name, falling back to the local part of the email."""
        if self.full_name:
            return self.full_name
        return self.email.split("@")[0] or "Learner"

    def __repr__(self):
        return f"<User {self.email}>"

    def to_dict(self):
        return {
            "id": self.id,
            "email": self.email,
            "full_name": self.full_name,
            "user_type": self.user_type,
            "date_created": self.date_created.isoformat() if self.date_created else None,
            }

"""
Shared pytest fixtures. Every app runs on TestConfig (in-memory SQLite) and
an in-memory storage double, so no database server or Dropbox account is
needed.
"""
import os

os.environ["FLASK_ENV"] = "testing"

import pytest

from app import create_app
from models import db
from utils.tokens import get_jwt_token

from factories import FakeStorage, make_course_with_quiz, make_template_pdf, make_user


@pytest.fixture
def app():
    app = create_app("testing")
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def template_pdf():
    return make_template_pdf()


@pytest.fixture
def storage(app, template_pdf):
    path = f"{app.config['CERTIFICATE_FOLDER']}/{app.config['CERTIFICATE_TEMPLATE_PATH']}"
    fake = FakeStorage(files={path: template_pdf})
    app.extensions["certificate_storage"] = fake
    return fake


@pytest.fixture
def learner(app):
    return make_user()


@pytest.fixture
def auth_headers(app, learner):
    token = get_jwt_token({"user_id": learner.id, "email": learner.email})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def course_quiz(app):
    return make_course_with_quiz()

import os
import logging
from dotenv import load_dotenv
load_dotenv()
from flask import Flask
from flask_cors import CORS
from flask_migrate import Migrate
from config import config_dict, ProdConfig
from models import db
from routes.students import student_bp
from utils.dropbox_service import DropboxStorage

migrate = Migrate()


def create_app(env=None):
    env = (env or os.environ.get("FLASK_ENV", "production")).lower()

    app = Flask(__name__)
    app.config.from_object(config_dict.get(env, ProdConfig))

    logging.basicConfig(
        level=app.config.get("LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app.logger.info("Environment: %s", env)

    CORS(app, resources={r"/api/*": {"origins": app.config["CORS_ORIGINS"], "supports_credentials": True}})

    db.init_app(app)
    migrate.init_app(app, db)
    app.extensions["certificate_storage"] = DropboxStorage.from_config(app.config)

    @app.route('/')
    def home():
        return "Welcome to the LMS App!"

    @app.cli.command("init-db")
    def init_db():
        """Create all tables for a fresh database."""
        db.create_all()
        print("Database tables created.")

    app.register_blueprint(student_bp, url_prefix='/api/student')
    return app


app = create_app()

if __name__ == '__main__':
    app.run(debug=app.config['DEBUG'])

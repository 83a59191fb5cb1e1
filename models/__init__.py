from flask_sqlalchemy import SQLAlchemy

# Initialize SQLAlchemy
db = SQLAlchemy()

# Import models
from models.users import User

from models.courses import Course
from models.course_lessons import Lesson
from models.lesson_progress import LessonProgress

from models.quizzes import Quiz
from models.quiz_questions import QuizQuestion
from models.quiz_options import QuizOption
from models.quiz_attempts import QuizAttempt

from models.certificates import Certificate

"""NoteTutor: study notes, an AI tutor grounded in them, and generated quizzes."""

__version__ = "0.1.0"

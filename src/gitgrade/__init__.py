"""GitGrade: repository health scoring with AI-generated insights."""

__version__ = "0.1.0"

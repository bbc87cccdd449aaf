"""Classroom discussion questions: generation, class sessions and read-aloud."""

__version__ = "0.1.0"

"""Cognitive Quiz: orientation questions for the quiz modality."""

from .quiz import ORIENTATION_QUESTIONS, QuizQuestion, QuizSession

__all__ = ["ORIENTATION_QUESTIONS", "QuizQuestion", "QuizSession"]

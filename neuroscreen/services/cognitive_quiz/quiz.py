"""Orientation quiz - answer capture for the quiz modality.

The quiz is scored by the external backend; this module only walks the
question list, records answers and builds the submission body. The
backend reply becomes the quiz modality's raw reading.
"""
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QuizQuestion:
    id: int
    text: str
    options: Tuple[str, ...]

    def __post_init__(self):
        if not self.options:
            raise ValueError(f"Question {self.id} must offer at least one option")

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "text": self.text, "options": list(self.options)}


ORIENTATION_QUESTIONS: Tuple[QuizQuestion, ...] = (
    QuizQuestion(1, "What is the year?", ("2024", "2023", "2025", "2022")),
    QuizQuestion(2, "What day of the week is it?", ("Monday", "Tuesday", "Wednesday", "Thursday")),
    QuizQuestion(3, "What is the name of this country?", ("India", "USA", "Canada", "UK")),
)


class QuizSession:
    """Sequential walk through a fixed question list."""

    def __init__(self, questions: Tuple[QuizQuestion, ...] = ORIENTATION_QUESTIONS):
        if not questions:
            raise ValueError("Quiz must contain at least one question")
        self.questions = tuple(questions)
        self._answers: List[str] = []

    @property
    def answers(self) -> Tuple[str, ...]:
        return tuple(self._answers)

    @property
    def is_complete(self) -> bool:
        return len(self._answers) >= len(self.questions)

    @property
    def current_question(self) -> Optional[QuizQuestion]:
        if self.is_complete:
            return None
        return self.questions[len(self._answers)]

    @property
    def progress(self) -> str:
        """Display string such as 'Question 2 of 3'."""
        shown = min(len(self._answers) + 1, len(self.questions))
        return f"Question {shown} of {len(self.questions)}"

    def answer(self, option: str) -> bool:
        """Record an answer for the current question.

        Options outside the question's list are recorded as given; the
        backend scores them as wrong.

        Returns:
            True if recorded, False if the quiz was already complete
        """
        if self.is_complete:
            logger.debug("QUIZ_ANSWER_IGNORED", extra={"answer_count": len(self._answers)})
            return False

        self._answers.append(option)
        if self.is_complete:
            logger.info("QUIZ_COMPLETED", extra={"question_count": len(self.questions)})
        return True

    def reset(self) -> None:
        self._answers = []

    def to_submission(self) -> Optional[Dict[str, Any]]:
        """Backend payload, None until every question is answered."""
        if not self.is_complete:
            return None
        return {
            "answers": list(self._answers),
            "questions": [q.to_dict() for q in self.questions],
        }

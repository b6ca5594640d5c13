from typing import List, Optional

from study_ai.orchestration import Outcome

from .base import StudyTaskExecutor
from .json_output import parse_json_array
from .mock_responses import MOCK_QUIZ
from .schemas import QuizQuestion, QuizDeck

SYSTEM_PROMPT = (
    'You are a study assistant. Generate a quiz from the following notes. '
    'Return a JSON array of objects with "question", "options" (array of 4 choices), '
    'and "correct_answer" (index 0-3 of the correct option) fields. '
    'Generate 5 quiz questions. Only return the JSON array, no other text.'
)


class QuizGenerator(StudyTaskExecutor):
    action = 'quiz'
    operation = 'generateQuiz'
    max_tokens = 2000

    async def generate(self, content: str) -> Outcome:
        if self.mock_mode:
            return self._mock_result(list(MOCK_QUIZ))
        return await self._run(SYSTEM_PROMPT, content, self._interpret)

    @staticmethod
    def _interpret(raw: Optional[str]) -> List[QuizQuestion]:
        return parse_json_array(raw or '[]', QuizDeck, 'quiz')

from typing import Optional

from study_ai.orchestration import Outcome

from .base import StudyTaskExecutor
from .mock_responses import MOCK_ANSWER

ANSWER_FALLBACK = 'Unable to answer the question'


def build_system_prompt(notes: str) -> str:
    return (
        'You are a helpful study assistant. Answer questions based on the following notes. '
        'If the answer cannot be found in the notes, say so. Here are the notes:\n\n'
        f'{notes}'
    )


class QuestionAnswerer(StudyTaskExecutor):
    """Answers one question against the full notes; no memory between questions."""

    action = 'qa'
    operation = 'answerQuestion'
    max_tokens = 1000

    async def answer(self, notes: str, question: str) -> Outcome:
        if self.mock_mode:
            return self._mock_result(MOCK_ANSWER)
        return await self._run(build_system_prompt(notes), question, self._interpret)

    @staticmethod
    def _interpret(raw: Optional[str]) -> str:
        return raw or ANSWER_FALLBACK

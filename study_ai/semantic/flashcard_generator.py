from typing import List, Optional

from study_ai.orchestration import Outcome

from .base import StudyTaskExecutor
from .json_output import parse_json_array
from .mock_responses import MOCK_FLASHCARDS
from .schemas import Flashcard, FlashcardDeck

SYSTEM_PROMPT = (
    'You are a study assistant. Generate flashcards from the following notes. '
    'Return a JSON array of objects with "front" (question/term) and "back" (answer/definition) fields. '
    'Generate 5-10 flashcards based on the content. Only return the JSON array, no other text.'
)


class FlashcardGenerator(StudyTaskExecutor):
    action = 'flashcards'
    operation = 'generateFlashcards'
    max_tokens = 2000

    async def generate(self, content: str) -> Outcome:
        if self.mock_mode:
            return self._mock_result(list(MOCK_FLASHCARDS))
        return await self._run(SYSTEM_PROMPT, content, self._interpret)

    @staticmethod
    def _interpret(raw: Optional[str]) -> List[Flashcard]:
        return parse_json_array(raw or '[]', FlashcardDeck, 'flashcards')

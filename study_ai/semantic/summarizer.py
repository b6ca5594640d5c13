from typing import Optional

from study_ai.orchestration import Outcome

from .base import StudyTaskExecutor
from .mock_responses import MOCK_SUMMARY

SUMMARY_FALLBACK = 'Unable to generate summary'

SYSTEM_PROMPT = (
    'You are a helpful study assistant. Summarize the following notes in a clear, concise manner '
    'while retaining key information. Use bullet points where appropriate.'
)


class Summarizer(StudyTaskExecutor):
    action = 'summarize'
    operation = 'summarizeNotes'
    max_tokens = 1000

    async def summarize(self, content: str) -> Outcome:
        if self.mock_mode:
            return self._mock_result(MOCK_SUMMARY)
        return await self._run(SYSTEM_PROMPT, content, self._interpret)

    @staticmethod
    def _interpret(raw: Optional[str]) -> str:
        return raw or SUMMARY_FALLBACK

from typing import List

from pydantic import BaseModel, Field, StrictInt, StrictStr, TypeAdapter, model_validator

QUIZ_OPTION_COUNT = 4


class Flashcard(BaseModel):
    front: StrictStr
    back: StrictStr


class QuizQuestion(BaseModel):
    # strict types: true or "2" for correct_answer is a malformed reply, not an index
    question: StrictStr
    options: List[StrictStr] = Field(..., min_length=QUIZ_OPTION_COUNT, max_length=QUIZ_OPTION_COUNT)
    correct_answer: StrictInt

    @model_validator(mode='after')
    def check_correct_answer(self):
        if not 0 <= self.correct_answer < len(self.options):
            raise ValueError(f'correct_answer must index into options (0-{len(self.options) - 1})')
        return self


FlashcardDeck = TypeAdapter(List[Flashcard])
QuizDeck = TypeAdapter(List[QuizQuestion])

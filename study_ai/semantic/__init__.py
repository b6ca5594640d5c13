"""
Study task executors: summary, flashcards, quiz and note-grounded answers.
"""
from .schemas import Flashcard, QuizQuestion, FlashcardDeck, QuizDeck, QUIZ_OPTION_COUNT
from .json_output import strip_code_fences, parse_json_array
from .base import StudyTaskExecutor
from .summarizer import Summarizer, SUMMARY_FALLBACK
from .flashcard_generator import FlashcardGenerator
from .quiz_generator import QuizGenerator
from .question_answerer import QuestionAnswerer, ANSWER_FALLBACK
from .mock_responses import MOCK_SUMMARY, MOCK_FLASHCARDS, MOCK_QUIZ, MOCK_ANSWER

__all__ = [
	'Flashcard', 'QuizQuestion', 'FlashcardDeck', 'QuizDeck', 'QUIZ_OPTION_COUNT',
	'strip_code_fences', 'parse_json_array',
	'StudyTaskExecutor',
	'Summarizer', 'SUMMARY_FALLBACK',
	'FlashcardGenerator',
	'QuizGenerator',
	'QuestionAnswerer', 'ANSWER_FALLBACK',
	'MOCK_SUMMARY', 'MOCK_FLASHCARDS', 'MOCK_QUIZ', 'MOCK_ANSWER',
]

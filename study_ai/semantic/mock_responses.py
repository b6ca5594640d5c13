# Canned outputs used when MOCK_OPENAI is enabled; no backend is contacted.
from .schemas import Flashcard, QuizQuestion

MOCK_SUMMARY = (
    '• This is a mock summary of your notes\n'
    '• Key point 1: Important concept explained\n'
    '• Key point 2: Another important detail\n'
    '• Key point 3: Final takeaway'
)

MOCK_FLASHCARDS = [
    Flashcard(front='What is the main concept?', back='This is a mock answer explaining the main concept.'),
    Flashcard(front='What is the second concept?', back='This is a mock answer for the second concept.'),
]

MOCK_QUIZ = [
    QuizQuestion(
        question='What is the main topic of these notes?',
        options=['Option A', 'Option B (correct)', 'Option C', 'Option D'],
        correct_answer=1,
    ),
    QuizQuestion(
        question='Which statement is true?',
        options=['True statement (correct)', 'False statement 1', 'False statement 2', 'False statement 3'],
        correct_answer=0,
    ),
]

MOCK_ANSWER = 'This is a mock answer to your question based on the provided notes. In mock mode, actual AI processing is skipped.'

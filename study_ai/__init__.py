"""
Study notes AI service.
Turns pasted notes into summaries, flashcards, quizzes and grounded answers
through an OpenAI-backed orchestration layer with model fallback and retries.
"""

__version__ = '1.0.0'

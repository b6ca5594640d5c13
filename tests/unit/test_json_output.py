import json

import pytest

from study_ai.orchestration import AIError, ErrorCode
from study_ai.semantic import FlashcardDeck, QuizDeck, parse_json_array, strip_code_fences, Flashcard
from tests.fixtures.fake_backend import MOCK_FLASHCARDS_JSON, MOCK_QUIZ_JSON


@pytest.mark.unit
def test_fenced_and_unfenced_parse_identically():
    fenced = f'```json\n{MOCK_FLASHCARDS_JSON}\n```'
    assert parse_json_array(fenced, FlashcardDeck, 'flashcards') == parse_json_array(MOCK_FLASHCARDS_JSON, FlashcardDeck, 'flashcards')


@pytest.mark.unit
def test_strip_code_fences_variants():
    assert strip_code_fences('```\n[1]\n```') == '[1]'
    assert strip_code_fences('  ```JSON\n[]```  ') == '[]'
    assert strip_code_fences('[]') == '[]'


@pytest.mark.unit
def test_fences_inside_values_are_kept():
    cards = [{'front': 'How do you print in Python?', 'back': '```print(1)```'}]
    fenced = '```json\n' + json.dumps(cards) + '\n```'
    parsed = parse_json_array(fenced, FlashcardDeck, 'flashcards')
    assert parsed[0].back == '```print(1)```'


@pytest.mark.unit
def test_flashcards_parse_to_models():
    cards = parse_json_array(MOCK_FLASHCARDS_JSON, FlashcardDeck, 'flashcards')
    assert all(isinstance(c, Flashcard) for c in cards)
    assert cards[1].back == 'In the chloroplasts.'


@pytest.mark.unit
def test_empty_array_is_valid():
    assert parse_json_array('[]', FlashcardDeck, 'flashcards') == []


@pytest.mark.unit
def test_malformed_json_is_retryable_parse_error():
    with pytest.raises(AIError) as exc_info:
        parse_json_array('[{"front": "Q"', FlashcardDeck, 'flashcards')
    err = exc_info.value
    assert err.code == ErrorCode.PARSE_ERROR
    assert err.status_code == 500
    assert err.retryable is True


@pytest.mark.unit
def test_quiz_parses():
    quiz = parse_json_array(MOCK_QUIZ_JSON, QuizDeck, 'quiz')
    assert quiz[0].correct_answer == 0
    assert len(quiz[0].options) == 4


@pytest.mark.unit
@pytest.mark.parametrize('question', [
    {'question': 'Q', 'options': ['a', 'b', 'c', 'd'], 'correct_answer': 4},
    {'question': 'Q', 'options': ['a', 'b', 'c', 'd'], 'correct_answer': -1},
    {'question': 'Q', 'options': ['a', 'b', 'c'], 'correct_answer': 0},
    {'question': 'Q', 'options': ['a', 'b', 'c', 'd', 'e'], 'correct_answer': 0},
    {'question': 'Q', 'options': ['a', 'b', 'c', 'd']},
    {'question': 'Q', 'options': ['a', 'b', 'c', 'd'], 'correct_answer': True},
    {'question': 'Q', 'options': ['a', 'b', 'c', 'd'], 'correct_answer': '2'},
    {'question': 'Q', 'options': ['a', 'b', 1, 'd'], 'correct_answer': 0},
])
def test_quiz_shape_violations_are_parse_errors(question):
    with pytest.raises(AIError) as exc_info:
        parse_json_array(json.dumps([question]), QuizDeck, 'quiz')
    assert exc_info.value.code == ErrorCode.PARSE_ERROR


@pytest.mark.unit
def test_object_instead_of_array_is_parse_error():
    with pytest.raises(AIError) as exc_info:
        parse_json_array('{"front": "Q", "back": "A"}', FlashcardDeck, 'flashcards')
    assert exc_info.value.code == ErrorCode.PARSE_ERROR


@pytest.mark.unit
def test_non_string_flashcard_side_is_parse_error():
    with pytest.raises(AIError) as exc_info:
        parse_json_array('[{"front": "Q", "back": 42}]', FlashcardDeck, 'flashcards')
    assert exc_info.value.code == ErrorCode.PARSE_ERROR

import json
import time
import uuid
from typing import Optional, Dict, Any, List

try:
    import redis
except Exception:
    redis = None

from study_ai.config import Settings
from study_ai.utils import get_logger

LOG = get_logger()

NOTES_INDEX_KEY = 'notes:index'


class NoteStore:
    """Record store for notes and the flashcards/quizzes generated from them.

    Uses Redis when ``REDIS_URL`` is configured and reachable, otherwise keeps
    records in process memory.
    """

    def __init__(self, settings: Settings):
        self.ttl = settings.note_ttl_seconds or None
        self._use_redis = False
        self._client = None
        self._notes: Dict[str, Dict[str, Any]] = {}
        self._flashcards: Dict[str, List[Dict[str, Any]]] = {}
        self._quizzes: Dict[str, List[Dict[str, Any]]] = {}
        try:
            if redis is not None and settings.redis_url:
                self._client = redis.from_url(settings.redis_url, decode_responses=True)
                self._client.ping()
                self._use_redis = True
                LOG.info('NoteStore using Redis', extra={'redis_url': settings.redis_url})
            else:
                LOG.info('NoteStore using in-memory store')
        except Exception as e:
            LOG.warning('Redis not available for NoteStore, using in-memory store', extra={'error': str(e)})
            self._use_redis = False
            self._client = None

    @property
    def backend_name(self) -> str:
        return 'redis' if self._use_redis else 'memory'

    def _note_key(self, note_id: str) -> str:
        return f'note:{note_id}'

    def _flashcards_key(self, note_id: str) -> str:
        return f'note:{note_id}:flashcards'

    def _quiz_key(self, note_id: str) -> str:
        return f'note:{note_id}:quiz'

    def _write(self, key: str, obj: Any):
        self._client.set(key, json.dumps(obj), ex=self.ttl)

    def _read(self, key: str) -> Any:
        raw = self._client.get(key)
        return json.loads(raw) if raw else None

    def create_note(self, title: str, content: str) -> Dict[str, Any]:
        now = int(time.time())
        note = {
            'id': uuid.uuid4().hex,
            'title': title,
            'content': content,
            'created_at': now,
            'updated_at': now,
        }
        self._save_note(note)
        LOG.info('note_created', extra={'note_id': note['id'], 'content_length': len(content)})
        return note

    def _save_note(self, note: Dict[str, Any]):
        if self._use_redis:
            self._write(self._note_key(note['id']), note)
            self._client.sadd(NOTES_INDEX_KEY, note['id'])
        else:
            self._notes[note['id']] = note

    def get_note(self, note_id: str) -> Optional[Dict[str, Any]]:
        if self._use_redis:
            return self._read(self._note_key(note_id))
        return self._notes.get(note_id)

    def list_notes(self) -> List[Dict[str, Any]]:
        if self._use_redis:
            notes = []
            for note_id in self._client.smembers(NOTES_INDEX_KEY):
                note = self._read(self._note_key(note_id))
                if note is None:
                    # expired; drop the dangling index entry
                    self._client.srem(NOTES_INDEX_KEY, note_id)
                    continue
                notes.append(note)
        else:
            notes = list(self._notes.values())
        return sorted(notes, key=lambda n: n['updated_at'], reverse=True)

    def update_note(self, note_id: str, title: Optional[str] = None, content: Optional[str] = None) -> Optional[Dict[str, Any]]:
        note = self.get_note(note_id)
        if not note:
            LOG.warning('update_note_not_found', extra={'note_id': note_id})
            return None
        if title is not None:
            note['title'] = title
        if content is not None:
            note['content'] = content
        note['updated_at'] = int(time.time())
        self._save_note(note)
        return note

    def delete_note(self, note_id: str) -> bool:
        if self.get_note(note_id) is None:
            return False
        if self._use_redis:
            self._client.delete(self._note_key(note_id), self._flashcards_key(note_id), self._quiz_key(note_id))
            self._client.srem(NOTES_INDEX_KEY, note_id)
        else:
            self._notes.pop(note_id, None)
            self._flashcards.pop(note_id, None)
            self._quizzes.pop(note_id, None)
        LOG.info('note_deleted', extra={'note_id': note_id})
        return True

    def _records(self, note_id: str, items: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        now = int(time.time())
        return [{'id': uuid.uuid4().hex, 'note_id': note_id, **item, 'created_at': now} for item in items]

    def save_flashcards(self, note_id: str, cards: List[Dict[str, Any]]) -> Optional[List[Dict[str, Any]]]:
        """Replace the stored deck for a note. Returns None if the note is unknown."""
        if self.get_note(note_id) is None:
            return None
        records = self._records(note_id, cards)
        if self._use_redis:
            self._write(self._flashcards_key(note_id), records)
        else:
            self._flashcards[note_id] = records
        LOG.info('flashcards_saved', extra={'note_id': note_id, 'count': len(records)})
        return records

    def get_flashcards(self, note_id: str) -> List[Dict[str, Any]]:
        if self._use_redis:
            return self._read(self._flashcards_key(note_id)) or []
        return self._flashcards.get(note_id, [])

    def save_quiz(self, note_id: str, questions: List[Dict[str, Any]]) -> Optional[List[Dict[str, Any]]]:
        """Replace the stored quiz for a note. Returns None if the note is unknown."""
        if self.get_note(note_id) is None:
            return None
        records = self._records(note_id, questions)
        if self._use_redis:
            self._write(self._quiz_key(note_id), records)
        else:
            self._quizzes[note_id] = records
        LOG.info('quiz_saved', extra={'note_id': note_id, 'count': len(records)})
        return records

    def get_quiz(self, note_id: str) -> List[Dict[str, Any]]:
        if self._use_redis:
            return self._read(self._quiz_key(note_id)) or []
        return self._quizzes.get(note_id, [])

    def ping(self) -> str:
        if not self._use_redis:
            return 'ok'
        try:
            self._client.ping()
            return 'ok'
        except Exception as e:
            return f'error: {str(e)}'

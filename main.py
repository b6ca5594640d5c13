import os
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import List, Optional

from fastapi import Depends, FastAPI, File, Request, Response, UploadFile
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from study_ai import __version__
from study_ai.config import get_settings, validate_openai_config
from study_ai.handler import StudyRequestHandler
from study_ai.orchestration import ErrorCode
from study_ai.semantic import Flashcard, QuizQuestion
from study_ai.storage import NoteStore
from study_ai.utils import get_logger, log_request, log_error, set_request_context, extract_note_text, NoteUploadError

LOG = get_logger()

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    LOG.info('Study AI service starting', extra={'env': settings.environment, 'mock_openai': settings.mock_openai})
    config = validate_openai_config(settings)
    if not config.valid and not settings.mock_openai:
        LOG.warning('OpenAI configuration invalid; AI requests will fail with CONFIG_ERROR', extra={'error': config.error})
    try:
        yield
    finally:
        LOG.info('Study AI service shutting down')
        handler = getattr(app.state, 'request_handler', None)
        backend = getattr(handler, 'backend', None)
        if backend is not None and hasattr(backend, 'close'):
            await backend.close()


app = FastAPI(title='Study Notes AI Service', version=__version__, description='AI study assistant for pasted notes', lifespan=lifespan)

# CORS config
origins = [o.strip() for o in settings.cors_origin.split(',') if o.strip()]
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins or ['*'],
    allow_credentials=True,
    allow_methods=['*'],
    allow_headers=['*'],
)


def _error(status_code: int, message: str, code: ErrorCode) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={'error': message, 'code': code.value, 'retryable': False})


@app.middleware('http')
async def add_request_id_and_logging(request: Request, call_next):
    # prefer incoming X-Request-ID header for cross-service tracing
    request_id = request.headers.get('x-request-id') or os.urandom(8).hex()
    request.state.request_id = request_id
    set_request_context(request_id)
    start = time.time()
    LOG.info('http_request_start', extra={'method': request.method, 'path': request.url.path, 'request_id': request_id, 'client': request.client.host if request.client else None})
    try:
        response: Response = await call_next(request)
    except Exception as e:
        log_error(e, {'request_id': request_id, 'path': request.url.path})
        body = {'error': 'Internal server error', 'code': ErrorCode.INTERNAL_ERROR.value}
        return JSONResponse(status_code=500, content=body, headers={'X-Request-ID': request_id})
    duration = int((time.time() - start) * 1000)
    log_request(request_id, request.method, request.url.path, response.status_code, duration, ip=request.client.host if request.client else None)
    # echo back the request id for downstream tracing
    response.headers['X-Request-ID'] = request_id
    return response


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    # 400 with the service envelope instead of FastAPI's default 422
    errors = exc.errors()
    first = errors[0] if errors else {}
    location = '.'.join(str(p) for p in first.get('loc', ()) if p != 'body')
    message = f"{location}: {first.get('msg')}" if location else str(first.get('msg', 'Invalid request'))
    LOG.info('request_validation_failed', extra={'path': request.url.path, 'error_count': len(errors)})
    return _error(400, message, ErrorCode.VALIDATION_ERROR)


def get_request_handler(request: Request) -> StudyRequestHandler:
    handler = getattr(request.app.state, 'request_handler', None)
    if handler is None:
        handler = StudyRequestHandler(settings)
        request.app.state.request_handler = handler
    return handler


async def get_note_store(request: Request) -> NoteStore:
    # resolved on the event loop so concurrent first requests share one store
    store = getattr(request.app.state, 'note_store', None)
    if store is None:
        store = NoteStore(settings)
        request.app.state.note_store = store
    return store


@app.get('/health')
async def health():
    return {'status': 'ok', 'timestamp': datetime.now(timezone.utc).isoformat(), 'service': 'study-ai'}


@app.get('/ready')
def ready(store: NoteStore = Depends(get_note_store)):
    config = validate_openai_config(settings)
    checks = {
        'openai': 'mock' if settings.mock_openai else ('ok' if config.valid else f'error: {config.error}'),
        'note_store': store.ping(),
    }
    ok = all(v in ('ok', 'mock') for v in checks.values())
    status_code = 200 if ok else 503
    return JSONResponse(status_code=status_code, content={'ready': ok, 'checks': checks, 'note_store_backend': store.backend_name})


@app.post('/api/ai')
async def ai_action(request: Request, handler: StudyRequestHandler = Depends(get_request_handler)):
    raw_body = await request.body()
    result = await handler.handle(raw_body)
    LOG.info('ai_action_complete', extra={'status_code': result.status_code, 'code': result.body.get('code')})
    return JSONResponse(status_code=result.status_code, content=result.body)


class NoteCreateRequest(BaseModel):
    title: str = Field('Untitled', description='Note title')
    content: str = Field(..., description='Note text')


class NoteUpdateRequest(BaseModel):
    title: Optional[str] = None
    content: Optional[str] = None


class FlashcardSaveRequest(BaseModel):
    flashcards: List[Flashcard]


class QuizSaveRequest(BaseModel):
    quiz: List[QuizQuestion]


def _note_not_found(note_id: str) -> JSONResponse:
    return _error(404, f'Note {note_id} not found', ErrorCode.NOT_FOUND)


@app.post('/notes/upload')
async def upload_note(file: UploadFile = File(...)):
    data = await file.read()
    try:
        extracted = extract_note_text(file.filename or '', data, max_size_kb=settings.max_upload_size_kb)
    except NoteUploadError as e:
        return _error(400, str(e), ErrorCode.VALIDATION_ERROR)
    return extracted


@app.post('/notes', status_code=201)
def create_note(req: NoteCreateRequest, store: NoteStore = Depends(get_note_store)):
    if not req.content.strip():
        return _error(400, 'Content is required', ErrorCode.VALIDATION_ERROR)
    return store.create_note(req.title.strip() or 'Untitled', req.content)


@app.get('/notes')
def list_notes(store: NoteStore = Depends(get_note_store)):
    return {'notes': store.list_notes()}


@app.get('/notes/{note_id}')
def get_note(note_id: str, store: NoteStore = Depends(get_note_store)):
    note = store.get_note(note_id)
    if note is None:
        return _note_not_found(note_id)
    return note


@app.put('/notes/{note_id}')
def update_note(note_id: str, req: NoteUpdateRequest, store: NoteStore = Depends(get_note_store)):
    if req.content is not None and not req.content.strip():
        return _error(400, 'Content must not be empty', ErrorCode.VALIDATION_ERROR)
    note = store.update_note(note_id, title=req.title, content=req.content)
    if note is None:
        return _note_not_found(note_id)
    return note


@app.delete('/notes/{note_id}', status_code=204)
def delete_note(note_id: str, store: NoteStore = Depends(get_note_store)):
    if not store.delete_note(note_id):
        return _note_not_found(note_id)
    return Response(status_code=204)


@app.post('/notes/{note_id}/flashcards')
def save_flashcards(note_id: str, req: FlashcardSaveRequest, store: NoteStore = Depends(get_note_store)):
    records = store.save_flashcards(note_id, [c.model_dump() for c in req.flashcards])
    if records is None:
        return _note_not_found(note_id)
    return {'flashcards': records}


@app.get('/notes/{note_id}/flashcards')
def get_flashcards(note_id: str, store: NoteStore = Depends(get_note_store)):
    if store.get_note(note_id) is None:
        return _note_not_found(note_id)
    return {'flashcards': store.get_flashcards(note_id)}


@app.post('/notes/{note_id}/quiz')
def save_quiz(note_id: str, req: QuizSaveRequest, store: NoteStore = Depends(get_note_store)):
    records = store.save_quiz(note_id, [q.model_dump() for q in req.quiz])
    if records is None:
        return _note_not_found(note_id)
    return {'quiz': records}


@app.get('/notes/{note_id}/quiz')
def get_quiz(note_id: str, store: NoteStore = Depends(get_note_store)):
    if store.get_note(note_id) is None:
        return _note_not_found(note_id)
    return {'quiz': store.get_quiz(note_id)}


if __name__ == '__main__':
    import uvicorn

    workers = int(os.getenv('WORKERS', '1'))
    # uvicorn cannot reload with multiple workers
    if settings.environment == 'development':
        workers = 1
    reload_enabled = (settings.environment == 'development') and (workers == 1)

    uvicorn.run(
        'main:app',
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        reload=reload_enabled,
        workers=workers,
    )

"""Utility subpackage for the study AI service"""

from .logger import (
	get_logger,
	log_request,
	log_error,
	log_llm_call,
	log_ai_attempt_failure,
	log_generation,
	set_request_context,
	get_request_context,
)
from .file_handler import extract_note_text, NoteUploadError, SUPPORTED_NOTE_EXTENSIONS

__all__ = [
	'get_logger',
	'log_request',
	'log_error',
	'log_llm_call',
	'log_ai_attempt_failure',
	'log_generation',
	'set_request_context',
	'get_request_context',
	'extract_note_text',
	'NoteUploadError',
	'SUPPORTED_NOTE_EXTENSIONS',
]

import pathlib
from typing import Dict, Any

from .logger import get_logger

LOG = get_logger()

SUPPORTED_NOTE_EXTENSIONS = ('txt', 'md')


class NoteUploadError(Exception):
    """Raised when an uploaded note file cannot be turned into text."""


def validate_note_file(filename: str, size_bytes: int, max_size_kb: int):
    if not filename:
        return False, 'Missing filename'
    ext = pathlib.Path(filename).suffix.lstrip('.').lower()
    if ext not in SUPPORTED_NOTE_EXTENSIONS:
        return False, f"Unsupported file extension (expected one of: {', '.join(SUPPORTED_NOTE_EXTENSIONS)})"
    if size_bytes > max_size_kb * 1024:
        return False, f'File too large (max {max_size_kb} KB)'
    return True, None


def extract_note_text(filename: str, data: bytes, max_size_kb: int = 512) -> Dict[str, Any]:
    """Decode an uploaded ``.txt``/``.md`` note into plain text.

    Raises ``NoteUploadError`` for unsupported extensions, oversized files and
    content that is not valid UTF-8.
    """
    valid, err = validate_note_file(filename, len(data), max_size_kb)
    if not valid:
        LOG.warning('note_upload_rejected', extra={'upload_filename': filename, 'size_bytes': len(data), 'reason': err})
        raise NoteUploadError(err)
    try:
        # utf-8-sig drops a leading BOM written by some editors
        text = data.decode('utf-8-sig')
    except UnicodeDecodeError as e:
        raise NoteUploadError('File is not valid UTF-8 text') from e
    LOG.info('note_upload_extracted', extra={'upload_filename': filename, 'characters': len(text)})
    return {
        'filename': pathlib.Path(filename).name,
        'text': text,
        'characters': len(text),
    }

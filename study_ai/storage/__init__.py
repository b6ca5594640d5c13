"""Persistence for notes and their generated study artifacts."""
from .note_store import NoteStore

__all__ = ['NoteStore']

from diff_digest.domain.notes.schemas import DiffItem, DiffPage, ReleaseNotes
from diff_digest.domain.notes.sections import NotesBuffer, extract_sections
from diff_digest.domain.notes.stream import StreamReader, extract_content, read_stream

__all__ = [
    "DiffItem",
    "DiffPage",
    "ReleaseNotes",
    "NotesBuffer",
    "extract_sections",
    "StreamReader",
    "extract_content",
    "read_stream",
]

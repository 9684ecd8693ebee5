from diff_digest.api.v1.schemas.notes import NotesRequest, NotesResponse

__all__ = ["NotesRequest", "NotesResponse"]

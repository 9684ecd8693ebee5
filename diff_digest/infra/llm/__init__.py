from diff_digest.infra.llm.client import (
    build_completion_payload,
    build_messages,
    open_completion_stream,
)

__all__ = [
    "build_messages",
    "build_completion_payload",
    "open_completion_stream",
]

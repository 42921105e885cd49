"""Storage for documents attached to leave requests.

Document writes are not part of the database transaction: a crash between
saving a file and inserting its leave request leaves an orphaned file.
"""

from __future__ import annotations

import re
import secrets
import time
import uuid
from pathlib import Path, PurePath
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from nexus_leave.config import get_settings
from nexus_leave.exceptions import PayloadTooLargeError, ValidationError

if TYPE_CHECKING:
    from nexus_leave.config import Settings
    from nexus_leave.schemas.leave import DocumentUpload

_UNSAFE_CHARS_RE = re.compile(r"[^A-Za-z0-9._-]")


def _safe_filename(filename: str) -> str:
    name = PurePath(filename.replace("\\", "/")).name
    return _UNSAFE_CHARS_RE.sub("_", name) or "document"


def validate_document(upload: DocumentUpload, settings: Settings | None = None) -> None:
    """Reject documents with a disallowed extension or above the size limit."""
    settings = settings or get_settings()
    extension = PurePath(upload.filename).suffix.lower().lstrip(".")
    if extension not in settings.allowed_document_extensions:
        raise ValidationError("Only image, PDF and document files are allowed")
    if len(upload.content) > settings.max_upload_bytes:
        limit_mb = settings.max_upload_bytes // (1024 * 1024)
        raise PayloadTooLargeError(f"File too large. Maximum size is {limit_mb}MB.")


@runtime_checkable
class DocumentStore(Protocol):
    """Interface for leave document storage."""

    def save(self, filename: str, content: bytes) -> str:
        """Store a document and return an opaque reference to it."""
        ...

    def delete(self, reference: str) -> None:
        """Remove a stored document. Unknown references are ignored."""
        ...


class LocalDocumentStore:
    """Stores documents as files under a root directory."""

    def __init__(self, root: str | Path) -> None:
        self._root = Path(root)

    def save(self, filename: str, content: bytes) -> str:
        self._root.mkdir(parents=True, exist_ok=True)
        unique_prefix = f"{int(time.time() * 1000)}-{secrets.randbelow(10**9)}"
        path = self._root / f"{unique_prefix}-{_safe_filename(filename)}"
        path.write_bytes(content)
        return path.as_posix()

    def delete(self, reference: str) -> None:
        path = Path(reference).resolve()
        if not path.is_relative_to(self._root.resolve()):
            return
        path.unlink(missing_ok=True)


class InMemoryDocumentStore:
    """In-memory implementation for development and tests."""

    def __init__(self) -> None:
        self._documents: dict[str, bytes] = {}

    def save(self, filename: str, content: bytes) -> str:
        reference = f"memory://{uuid.uuid4()}/{_safe_filename(filename)}"
        self._documents[reference] = content
        return reference

    def delete(self, reference: str) -> None:
        self._documents.pop(reference, None)

    def get(self, reference: str) -> bytes | None:
        return self._documents.get(reference)

    def __len__(self) -> int:
        return len(self._documents)


_document_store: DocumentStore | None = None


def get_document_store() -> DocumentStore:
    """FastAPI dependency for the document store."""
    global _document_store
    if _document_store is None:
        _document_store = LocalDocumentStore(get_settings().upload_dir)
    return _document_store


def set_document_store(store: DocumentStore | None) -> None:
    """Override the store (for testing or production wiring)."""
    global _document_store
    _document_store = store

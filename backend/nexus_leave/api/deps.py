from __future__ import annotations

from typing import Annotated

from fastapi import Depends

from nexus_leave.services.document import DocumentStore, get_document_store

DocumentStoreDep = Annotated[DocumentStore, Depends(get_document_store)]

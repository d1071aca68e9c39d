"""
Documentation endpoints
"""
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from app.constants import RESOURCE_DOCS
from app.core.deps import get_db, require_permission, audited
from app.core.pipeline import AuditedRoute
from app.models.user import User
from app.schemas.document import DocumentCreate, DocumentUpdate, DocumentOut
from app.services.document_service import (
    count_by_category,
    create_document,
    delete_document,
    get_document_or_404,
    list_documents,
    render_markdown,
    update_document,
)

router = APIRouter(route_class=AuditedRoute)


@router.get("", response_model=List[DocumentOut])
async def list_documents_endpoint(
    category: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(RESOURCE_DOCS, "read")),
):
    return list_documents(db, category=category)


@router.get("/categories", response_model=Dict[str, int])
async def document_categories_endpoint(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(RESOURCE_DOCS, "read")),
):
    """Document count per category"""
    return count_by_category(db)


@router.get("/{document_id}", response_model=DocumentOut)
async def get_document_endpoint(
    document_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(RESOURCE_DOCS, "read")),
):
    return get_document_or_404(db, document_id)


@router.get("/{document_id}/content")
async def get_document_content_endpoint(
    document_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(RESOURCE_DOCS, "read")),
):
    document = get_document_or_404(db, document_id)
    return Response(content=render_markdown(document), media_type="text/markdown; charset=utf-8")


@router.post("", response_model=DocumentOut, status_code=201)
async def create_document_endpoint(
    data: DocumentCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(RESOURCE_DOCS, "create")),
    _audit=Depends(audited("create_document", RESOURCE_DOCS)),
):
    return create_document(db, data)


@router.put("/{document_id}", response_model=DocumentOut)
async def update_document_endpoint(
    document_id: int,
    data: DocumentUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(RESOURCE_DOCS, "update")),
    _audit=Depends(audited("update_document", RESOURCE_DOCS)),
):
    return update_document(db, document_id, data)


@router.delete("/{document_id}", status_code=204)
async def delete_document_endpoint(
    document_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(RESOURCE_DOCS, "delete")),
    _audit=Depends(audited("delete_document", RESOURCE_DOCS)),
):
    delete_document(db, document_id)
    return Response(status_code=204)

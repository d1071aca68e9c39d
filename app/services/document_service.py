"""
Documentation service - pages stored in the database and mirrored to Markdown files
"""
import logging
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from app.constants import DOC_PUBLISHED
from app.core.config import settings
from app.core.errors import NotFound
from app.models.document import Document
from app.schemas.document import DocumentCreate, DocumentUpdate
from app.utils.datetime_utils import utcnow
from app.utils.file_store import delete_text_file, slugify, write_text_file

logger = logging.getLogger(__name__)


def render_markdown(document: Document) -> str:
    lines = [
        f"# {document.title}",
        "",
        f"- **Category:** {document.category}",
        f"- **Author:** {document.author}",
        f"- **Status:** {document.status}",
    ]
    if document.published_at:
        lines.append(f"- **Published:** {document.published_at.isoformat()}")
    lines.extend(["", document.content, ""])
    return "\n".join(lines)


def write_markdown_file(document: Document, docs_dir: Optional[str] = None) -> str:
    filename = f"doc-{document.id}-{slugify(document.title)}.md"
    return write_text_file(docs_dir or settings.DOCS_DIR, filename, render_markdown(document))


def list_documents(db: Session, category: Optional[str] = None) -> List[Document]:
    documents = db.query(Document).order_by(Document.updated_at.desc(), Document.id.desc()).all()
    if category:
        documents = [doc for doc in documents if doc.category == category]
    return documents


def count_by_category(db: Session) -> Dict[str, int]:
    counts: Dict[str, int] = {}
    for document in db.query(Document).all():
        counts[document.category] = counts.get(document.category, 0) + 1
    return counts


def get_document_or_404(db: Session, document_id: int) -> Document:
    document = db.query(Document).filter(Document.id == document_id).first()
    if not document:
        raise NotFound(f"Document with id {document_id} not found")
    return document


def _sync_file(db: Session, document: Document) -> None:
    """Mirror the document to disk; the database row stays authoritative"""
    try:
        document.file_path = write_markdown_file(document)
    except OSError:
        logger.exception("Failed to write Markdown file for documentation %s", document.id)
        return
    db.commit()
    db.refresh(document)


def create_document(db: Session, data: DocumentCreate) -> Document:
    """
    Create a document and write its Markdown file
    """
    document = Document(**data.model_dump())
    if document.status == DOC_PUBLISHED:
        document.published_at = utcnow()
    db.add(document)
    db.commit()
    db.refresh(document)

    _sync_file(db, document)
    logger.info("Documentation %s written to %s", document.id, document.file_path)
    return document


def update_document(db: Session, document_id: int, data: DocumentUpdate) -> Document:
    document = get_document_or_404(db, document_id)
    update_dict = data.model_dump(exclude_unset=True)

    if update_dict.get("status") == DOC_PUBLISHED and document.status != DOC_PUBLISHED:
        document.published_at = utcnow()
    for field, value in update_dict.items():
        if value is not None:
            setattr(document, field, value)
    db.commit()
    db.refresh(document)

    _sync_file(db, document)
    return document


def delete_document(db: Session, document_id: int) -> None:
    document = get_document_or_404(db, document_id)
    db.delete(document)
    db.commit()
    delete_text_file(document.file_path)

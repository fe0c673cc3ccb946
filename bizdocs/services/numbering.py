from datetime import date

from sqlalchemy.orm import Session

from ..models import DocumentSequence
from ..models.base import utcnow
from .kinds import DocumentKind


def next_document_number(
    db: Session, kind: DocumentKind, on: date | None = None
) -> str:
    """Reserve the next ``<PREFIX><YYYYMM>-<NNNN>`` number for ``kind``.

    The counter row is updated in the caller's transaction and is never
    decremented, so numbers of deleted documents are not handed out again.
    """
    period = (on or date.today()).strftime("%Y%m")
    sequence = db.get(DocumentSequence, (kind.name, period))
    if sequence is None:
        sequence = DocumentSequence(
            document_type=kind.name, period=period, last_number=0
        )
        db.add(sequence)
    sequence.last_number += 1
    sequence.updated_at = utcnow()
    db.flush()
    return f"{kind.prefix}{period}-{sequence.last_number:04d}"

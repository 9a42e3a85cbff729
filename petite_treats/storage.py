# petite_treats/storage.py
from typing import List

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from .errors import DuplicateFeedback
from .models import ContactRequest
from .tables import Feedback


def record_feedback(session: Session, req: ContactRequest) -> None:
    """Store a contact form submission.

    The email is the primary key of the ``feedback`` table, so a second
    submission from the same address is refused by the database and
    reported as ``DuplicateFeedback``.
    """
    session.add(Feedback(email=req.email, name=req.name, message=req.message))
    try:
        session.commit()
    except IntegrityError as exc:
        session.rollback()
        raise DuplicateFeedback(req.email) from exc


def list_feedback(session: Session) -> List[ContactRequest]:
    rows = session.scalars(select(Feedback).order_by(Feedback.email))
    return [ContactRequest(name=row.name, email=row.email, message=row.message) for row in rows]

"""
Error messages and exceptions shared by the API layers.

The store raises ``ProductNotFound`` and ``DuplicateFeedback``; handlers
turn them into ``HTTPException`` with the messages below. Anything else
coming out of the database or the data files is reported to the client
as ``SERVER_ERROR`` only.
"""

import logging
from contextlib import contextmanager
from typing import Iterator

from fastapi import HTTPException
from sqlalchemy.exc import SQLAlchemyError


logger = logging.getLogger(__name__)

SERVER_ERROR = "The server encountered an error, please try again later."
PRODUCT_404_ERR = "Product not found"
INVALID_QUERY_ERR = "Invalid query parameter(s)"
INVALID_REQUEST_ERR = "Invalid request parameter(s)"
MISSING_DESC_PARAMS_ERR = "Missing one or more of the required parameters: product, flavor, box."
MISSING_FORM_PARAMS_ERR = "Missing one or more of the required parameters: name, email and message."
INVALID_EMAIL_ERR = "Invalid email. Must contain '@'."
DUPLICATE_FEEDBACK_ERR = "A message from this email has already been submitted."
CONTACT_SUCCESS = "Message successfully submitted! Thank you!"


class ProductNotFound(LookupError):
    def __init__(self, key: str):
        super().__init__(PRODUCT_404_ERR)
        self.key = key


class DuplicateFeedback(ValueError):
    def __init__(self, email: str):
        super().__init__(DUPLICATE_FEEDBACK_ERR)
        self.email = email


@contextmanager
def server_faults(operation: str) -> Iterator[None]:
    """Report database and file failures as a generic 500.

    The original exception is logged with its traceback; the client only
    ever receives ``SERVER_ERROR``.
    """
    try:
        yield
    except (SQLAlchemyError, OSError) as exc:
        logger.exception("%s failed", operation)
        raise HTTPException(status_code=500, detail=SERVER_ERROR) from exc

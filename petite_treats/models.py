# petite_treats/models.py
from typing import Any, Dict, Iterable

from fastapi import HTTPException, Request
from pydantic import BaseModel

from .errors import INVALID_EMAIL_ERR, MISSING_DESC_PARAMS_ERR, MISSING_FORM_PARAMS_ERR


class CustomDescriptionRequest(BaseModel):
    product: str
    flavor: str
    box: str


class ContactRequest(BaseModel):
    name: str
    email: str
    message: str


async def read_payload(request: Request) -> Dict[str, Any]:
    """Read a POST body sent either as JSON or as a (multipart) form.

    A body that cannot be parsed is treated as empty, so the caller
    reports the missing parameters instead of a parsing error.
    """
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("application/json"):
        try:
            data = await request.json()
        except ValueError:
            return {}
        return data if isinstance(data, dict) else {}
    form = await request.form()
    return dict(form)


def _required_fields(payload: Dict[str, Any], fields: Iterable[str], message: str) -> Dict[str, str]:
    values = {}
    for field in fields:
        value = payload.get(field)
        if value is None or not isinstance(value, (str, int, float)) or not str(value).strip():
            raise HTTPException(status_code=400, detail=message)
        values[field] = str(value).strip()
    return values


def parse_description_request(payload: Dict[str, Any]) -> CustomDescriptionRequest:
    values = _required_fields(payload, ("product", "flavor", "box"), MISSING_DESC_PARAMS_ERR)
    return CustomDescriptionRequest(**values)


def parse_contact_request(payload: Dict[str, Any]) -> ContactRequest:
    values = _required_fields(payload, ("name", "email", "message"), MISSING_FORM_PARAMS_ERR)
    if "@" not in values["email"]:
        raise HTTPException(status_code=400, detail=INVALID_EMAIL_ERR)
    return ContactRequest(**values)

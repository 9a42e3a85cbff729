# petite_treats/main.py
import logging
import sys
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import PlainTextResponse
from sqlalchemy.orm import Session
from starlette.exceptions import HTTPException as StarletteHTTPException

from .catalog import catalog_router
from .config import Settings
from .database import Database, get_session
from .errors import CONTACT_SUCCESS, INVALID_REQUEST_ERR, SERVER_ERROR, DuplicateFeedback, server_faults
from .models import ContactRequest, parse_contact_request, read_payload
from . import storage


logger = logging.getLogger("petite_treats")

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

debug_handler = logging.StreamHandler(sys.stdout)
debug_handler.setFormatter(logging.Formatter(LOG_FORMAT))


def configure_logging(debug: bool) -> None:
    """Send the package's DEBUG records to stdout when ``debug`` is on.

    The handler is attached once, however many apps are created.
    """
    if not debug:
        return
    logger.setLevel(logging.DEBUG)
    if debug_handler not in logger.handlers:
        logger.addHandler(debug_handler)


async def contact_params(request: Request) -> ContactRequest:
    payload = await read_payload(request)
    return parse_contact_request(payload)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings()
    configure_logging(settings.debug)

    database = Database(settings.database_url, echo=settings.debug)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        database.create_all()
        if settings.seed_on_startup:
            database.seed(settings.seed_path)
        logger.info("Storefront API ready (database: %s)", database.engine.url)
        yield
        database.dispose()

    app = FastAPI(
        title="Petite Treats",
        description=(
            "Storefront API for a bakery: menu with search and sort, "
            "product flavors and customized descriptions, FAQ and "
            "contact form."
        ),
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.database = database

    # Every error leaves as plain text, never as a JSON body
    @app.exception_handler(StarletteHTTPException)
    async def plain_text_http_error(request: Request, exc: StarletteHTTPException):
        logger.debug("%s %s -> %s %s", request.method, request.url.path, exc.status_code, exc.detail)
        return PlainTextResponse(str(exc.detail), status_code=exc.status_code, headers=exc.headers)

    @app.exception_handler(RequestValidationError)
    async def plain_text_validation_error(request: Request, exc: RequestValidationError):
        return PlainTextResponse(INVALID_REQUEST_ERR, status_code=400)

    @app.exception_handler(Exception)
    async def plain_text_server_error(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return PlainTextResponse(SERVER_ERROR, status_code=500)

    @app.get("/health")
    def health_check():
        return {"status": "ok"}

    @app.post("/contact-us", response_class=PlainTextResponse)
    def contact_us(
        req: ContactRequest = Depends(contact_params),
        session: Session = Depends(get_session),
    ):
        with server_faults("Recording feedback"):
            try:
                storage.record_feedback(session, req)
            except DuplicateFeedback as e:
                raise HTTPException(status_code=409, detail=str(e))
        return PlainTextResponse(CONTACT_SUCCESS)

    app.include_router(catalog_router)
    return app


app = create_app()

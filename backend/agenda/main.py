"""FastAPI application entrypoint and HTTP controllers.

This module defines the HTTP endpoints of the study agenda backend.
Controllers are intentionally thin: they read the submitted form,
delegate to repositories/services and answer with JSON or a short
plain-text message.

Endpoints implemented:
- GET /
- GET /usuarios
- GET /materias
- POST /usuarios-add
- POST /usuarios-update
- GET /health
"""

from contextlib import asynccontextmanager
import json
import logging
import time
import uuid

from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, PlainTextResponse, Response
from fastapi.staticfiles import StaticFiles
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session
import uvicorn

from . import repositories, services
from .config import Settings, settings as default_settings
from .database import build_engine, create_db_and_tables, get_session
from .schemas import UserIn, UserUpdateIn

logger = logging.getLogger("agenda.api")

MSG_MISSING_FIELDS = 'Todos os campos são obrigatórios.'
MSG_READ_FAILED = 'Erro ao consultar o banco de dados.'
MSG_INSERT_FAILED = 'Erro ao inserir dados no banco de dados.'
MSG_UPDATE_FAILED = 'Erro ao atualizar dados no banco de dados.'
MSG_DUPLICATE_EMAIL = 'Email já cadastrado.'
MSG_USER_NOT_FOUND = 'Usuário não encontrado.'
MSG_ADDED = 'Formulário recebido com sucesso!'
MSG_UPDATED = 'Formulário atualizado com sucesso!'

router = APIRouter()


async def read_form(request: Request) -> dict:
    """Return the request body as a flat dict.

    JSON bodies and URL-encoded/multipart forms are both accepted. A body
    that cannot be decoded yields an empty dict, which the schemas then
    reject as missing fields.
    """
    content_type = request.headers.get("content-type", "")
    if "application/json" in content_type:
        try:
            data = await request.json()
        except ValueError:
            return {}
        return data if isinstance(data, dict) else {}
    form = await request.form()
    return dict(form)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Schema creation finishes before the server starts accepting requests.
    create_db_and_tables(app.state.engine, app.state.settings.DB_PATH)
    yield
    app.state.engine.dispose()


async def request_context_middleware(request: Request, call_next):
    req_id = request.headers.get("X-Request-ID", uuid.uuid4().hex)
    request.state.request_id = req_id
    started = time.perf_counter()
    response: Response
    try:
        response = await call_next(request)
    except Exception:
        elapsed_ms = round((time.perf_counter() - started) * 1000.0, 2)
        logger.exception(
            "request_failed %s",
            json.dumps(
                {
                    "request_id": req_id,
                    "path": request.url.path,
                    "method": request.method,
                    "duration_ms": elapsed_ms,
                    "client": request.client.host if request.client else "unknown",
                },
                ensure_ascii=True,
            ),
        )
        raise
    response.headers["X-Request-ID"] = req_id
    elapsed_ms = round((time.perf_counter() - started) * 1000.0, 2)
    logger.info(
        "request_done %s",
        json.dumps(
            {
                "request_id": req_id,
                "path": request.url.path,
                "method": request.method,
                "status_code": response.status_code,
                "duration_ms": elapsed_ms,
                "client": request.client.host if request.client else "unknown",
            },
            ensure_ascii=True,
        ),
    )
    return response


@router.get("/")
def home(request: Request):
    """Serve the static registration form."""
    cfg: Settings = request.app.state.settings
    index = cfg.PUBLIC_DIR / cfg.INDEX_FILE
    if not index.is_file():
        return PlainTextResponse("Not Found", status_code=404)
    return FileResponse(index, media_type="text/html")


@router.get("/health")
def health():
    """Lightweight health check for uptime monitoring."""
    return {"status": "ok"}


@router.get('/usuarios')
def list_users(db: Session = Depends(get_session)):
    """List every user in insertion order. Password hashes are not exposed."""
    try:
        users = repositories.UserRepository(db).list_all()
    except SQLAlchemyError:
        logger.exception("Reading usuarios failed")
        return PlainTextResponse(MSG_READ_FAILED, status_code=500)
    return [{'id': u.id, 'nome': u.nome, 'email': u.email} for u in users]


@router.get('/materias')
def list_subjects(db: Session = Depends(get_session)):
    """List every subject in insertion order; `[]` when there are none."""
    try:
        subjects = repositories.SubjectRepository(db).list_all()
    except SQLAlchemyError:
        logger.exception("Reading materias failed")
        return PlainTextResponse(MSG_READ_FAILED, status_code=500)
    return [
        {
            'id': s.id,
            'nome': s.nome,
            'descricao': s.descricao,
            'professor': s.professor,
            'data_registro': s.data_registro,
        }
        for s in subjects
    ]


@router.post('/usuarios-add')
def add_user(form: dict = Depends(read_form), db: Session = Depends(get_session)):
    """Register a user from the submitted form.

    Answers 400 when a field is missing and 409 when the email is already
    taken; other storage failures answer 500.
    """
    try:
        payload = UserIn.model_validate(form)
    except ValidationError:
        return PlainTextResponse(MSG_MISSING_FIELDS, status_code=400)
    try:
        services.UserService(db).register(payload.name, payload.email, payload.password)
    except services.DuplicateEmailError:
        logger.warning("Rejected duplicate email on insert")
        return PlainTextResponse(MSG_DUPLICATE_EMAIL, status_code=409)
    except services.StorageError:
        logger.exception("Inserting user failed")
        return PlainTextResponse(MSG_INSERT_FAILED, status_code=500)
    return PlainTextResponse(MSG_ADDED)


@router.post('/usuarios-update')
def update_user(form: dict = Depends(read_form), db: Session = Depends(get_session)):
    """Overwrite name, email and password of an existing user by id."""
    try:
        payload = UserUpdateIn.model_validate(form)
    except ValidationError:
        return PlainTextResponse(MSG_MISSING_FIELDS, status_code=400)
    try:
        services.UserService(db).update(payload.id, payload.name, payload.email, payload.password)
    except services.UserNotFoundError:
        return PlainTextResponse(MSG_USER_NOT_FOUND, status_code=404)
    except services.DuplicateEmailError:
        logger.warning("Rejected duplicate email on update of user %s", payload.id)
        return PlainTextResponse(MSG_DUPLICATE_EMAIL, status_code=409)
    except services.StorageError:
        logger.exception("Updating user %s failed", payload.id)
        return PlainTextResponse(MSG_UPDATE_FAILED, status_code=500)
    return PlainTextResponse(MSG_UPDATED)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the application around its own engine and settings."""
    cfg = settings or default_settings
    if not logging.getLogger().handlers:
        logging.basicConfig(level=cfg.LOG_LEVEL)

    app = FastAPI(title="Study Agenda API", lifespan=lifespan)
    app.state.settings = cfg
    app.state.engine = build_engine(cfg.DB_PATH)

    if cfg.ALLOW_DEV_CORS:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )
    app.middleware("http")(request_context_middleware)
    app.include_router(router)

    # Mounted last so the API routes above take precedence.
    if cfg.PUBLIC_DIR.is_dir():
        app.mount("/", StaticFiles(directory=cfg.PUBLIC_DIR), name="public")
    return app


app = create_app()


def run():
    """Serve `app` with uvicorn on the configured host and port."""
    logger.info("Server running at http://%s:%s", default_settings.HOST, default_settings.PORT)
    uvicorn.run(app, host=default_settings.HOST, port=default_settings.PORT, log_level=default_settings.LOG_LEVEL.lower())


if __name__ == '__main__':
    run()

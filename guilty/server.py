"""
JSON API for guilty.

Serves the engine operations over HTTP:

- GET  /api/groups
- GET  /api/repositories?group=<group>
- POST /api/repositories                 {"name": ..., "group": ...}
- GET  /api/repository/<group>/<name>
- POST /api/repository/<group>/<name>    {"operation": "delete"}
- GET  /api/directory/<group>/<name>[/<path>]
- GET  /api/file/<group>/<name>/<path>

Paths after the route prefix are taken from the raw request path, since
the router sees them already decoded and ``%2F`` inside a file name would
be indistinguishable from a separator.
"""

from typing import Optional, List
import logging

from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from . import __version__
from .api import GitStore
from .exit_codes import CommandError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["repositories"])


class CreateRepositoryRequest(BaseModel):
    name: str
    group: Optional[str] = None


class RepositoryOperationRequest(BaseModel):
    operation: str


def get_store(request: Request) -> GitStore:
    return request.app.state.store


def raw_tail(request: Request, prefix: str) -> str:
    """
    The undecoded part of the request path after prefix.

    Bytes outside ASCII (clients that send UTF-8 names unencoded) are
    percent-encoded so the codec decodes them exactly once.
    """
    raw = request.scope.get("raw_path")
    if raw:
        path = "".join(chr(b) if b < 0x80 else f"%{b:02X}" for b in raw)
    else:
        path = request.url.path
    return path[len(prefix):] if path.startswith(prefix) else ""


@router.get("/groups")
def list_groups(store: GitStore = Depends(get_store)) -> List[str]:
    return store.list_groups()


@router.get("/repositories")
def list_repositories(group: Optional[str] = None, store: GitStore = Depends(get_store)):
    return [repo.to_dict() for repo in store.list_repositories(group)]


@router.post("/repositories", status_code=201)
def create_repository(body: CreateRepositoryRequest, store: GitStore = Depends(get_store)):
    group = body.group or store.config.default_group
    repo = store.create_repository(group, body.name)
    return {"message": "Repository created", "repository": repo.to_dict()}


@router.get("/repository/{tail:path}")
def repository_details(tail: str, request: Request, store: GitStore = Depends(get_store)):
    parsed = store.parse_path(raw_tail(request, "/api/repository/"))
    return store.get_repository_details(parsed.group, parsed.name).to_dict()


@router.post("/repository/{tail:path}")
def repository_operation(
    tail: str,
    body: RepositoryOperationRequest,
    request: Request,
    store: GitStore = Depends(get_store)
):
    if body.operation != "delete":
        return JSONResponse(
            status_code=400,
            content={"error": f"Unsupported operation: {body.operation}"}
        )
    parsed = store.parse_path(raw_tail(request, "/api/repository/"))
    store.delete_repository(parsed.group, parsed.name)
    return {"message": "Repository deleted"}


@router.get("/directory/{tail:path}")
def directory_contents(tail: str, request: Request, store: GitStore = Depends(get_store)):
    parsed = store.parse_path(raw_tail(request, "/api/directory/"))
    entries = store.list_directory(parsed.group, parsed.name, parsed.path)
    return [entry.to_dict() for entry in entries]


@router.get("/file/{tail:path}")
def file_contents(tail: str, request: Request, store: GitStore = Depends(get_store)):
    parsed = store.parse_path(raw_tail(request, "/api/file/"), require_path=True)
    return store.read_file(parsed.group, parsed.name, parsed.path).to_dict()


def create_app(store: Optional[GitStore] = None, cors_origins: Optional[List[str]] = None) -> FastAPI:
    """
    Build the FastAPI application around a GitStore.

    Args:
        store: Engine facade (built from the config file if None)
        cors_origins: Allowed CORS origins (default: any)
    """
    app = FastAPI(
        title="guilty",
        description="Browse a store of git repositories",
        version=__version__,
    )
    app.state.store = store or GitStore()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins or ["*"],
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type"],
    )

    @app.exception_handler(CommandError)
    async def command_error_handler(request: Request, exc: CommandError):
        if exc.http_status >= 500:
            logger.error(f"{request.method} {request.url.path}: {exc}")
        return JSONResponse(
            status_code=exc.http_status,
            content={"error": str(exc), "type": type(exc).__name__},
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"error": "Invalid request body"})

    @app.get("/health")
    def health():
        return {"status": "ok", "app": "guilty", "version": __version__}

    app.include_router(router)
    return app

"""FastAPI routes for dnc.

Thin HTTP adapter over ``TaskTreeService`` and ``BatchUpdateCoordinator``.
Services are built once per app in ``create_app`` and kept on
``app.state``; routes translate Result errors into HTTP status codes.
"""

import logging
from typing import Any, Optional

from fastapi import APIRouter, Body, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from dnc import __version__
from dnc.application import (
    BatchUpdateCoordinator,
    HistoryEntry,
    HistoryRecorder,
    TaskTreeService,
    parse_batch,
)
from dnc.config import Settings, load_settings
from dnc.domain.shared import (
    ConflictError,
    DncError,
    Err,
    NotFoundError,
    ValidationError,
)
from dnc.domain.task import Task, TaskChanges, parse_status
from dnc.infrastructure.storage import TaskTreeRepository
from dnc.interfaces.api.schemas import (
    AppendChildRequest,
    ErrorResponse,
    HealthResponse,
    InitTaskRequest,
    TreeSummaryResponse,
    UpdateTaskRequest,
    UpdateTaskResponse,
)

logger = logging.getLogger(__name__)


router = APIRouter(prefix="/api")


# =============================================================================
# Helpers
# =============================================================================


def _service(request: Request) -> TaskTreeService:
    return request.app.state.task_service


def _coordinator(request: Request) -> BatchUpdateCoordinator:
    return request.app.state.batch_coordinator


def _history(request: Request) -> HistoryRecorder:
    return request.app.state.history


def _status_code(error: DncError) -> int:
    if isinstance(error, ValidationError):
        return 400
    if isinstance(error, NotFoundError):
        return 404
    if isinstance(error, ConflictError):
        return 409
    return 500


def _fail(error: DncError) -> HTTPException:
    code = _status_code(error)
    if code >= 500:
        logger.error(f"Request failed: {error}")
    return HTTPException(status_code=code, detail=str(error))


# =============================================================================
# Task Trees
# =============================================================================


@router.get("/tasks", response_model=list[str])
def list_root_tasks(request: Request):
    """List all root task ids."""
    result = _service(request).list_root_ids()
    if isinstance(result, Err):
        raise _fail(result.error)
    return result.value


@router.post(
    "/tasks",
    response_model=Task,
    response_model_exclude_none=True,
    status_code=201,
)
def init_root_task(req: InitTaskRequest, request: Request):
    """Create a new root task."""
    result = _service(request).init_root(req.task_id, req.goal, req.acceptance)
    if isinstance(result, Err):
        raise _fail(result.error)
    return result.value


@router.post("/tasks/batch-update", responses={400: {"model": ErrorResponse}})
def batch_update(request: Request, payload: Any = Body(default=None)):
    """Update status/additionalInstructions of many nodes at once.

    Request-level problems return 400 ``{"error": ...}``; node-level
    failures are reported per result with an overall 200.
    """
    if not isinstance(payload, dict) or "updates" not in payload:
        return JSONResponse(status_code=400, content={"error": "Request body must contain 'updates'"})

    parsed = parse_batch(payload["updates"])
    if isinstance(parsed, Err):
        return JSONResponse(status_code=400, content={"error": str(parsed.error)})

    result = _coordinator(request).apply(parsed.value)
    if isinstance(result, Err):
        return JSONResponse(status_code=400, content={"error": str(result.error)})

    response = result.value.to_document()
    _history(request).record("batch_update", payload, response)
    return response


@router.get("/tasks/{root_id}", response_model=Task, response_model_exclude_none=True)
def get_task_tree(root_id: str, request: Request):
    """Get a whole task tree."""
    result = _service(request).get_tree(root_id)
    if isinstance(result, Err):
        raise _fail(result.error)
    return result.value


@router.get("/tasks/{root_id}/summary", response_model=TreeSummaryResponse, response_model_by_alias=True)
def get_task_summary(root_id: str, request: Request):
    """Status counts for a task tree."""
    result = _service(request).summarize(root_id)
    if isinstance(result, Err):
        raise _fail(result.error)
    summary = result.value
    return TreeSummaryResponse(
        root_task_id=summary.root_id,
        goal=summary.goal,
        total=summary.total,
        counts=summary.counts,
        progress_percent=summary.progress_percent,
    )


@router.post(
    "/tasks/{root_id}/children",
    response_model=Task,
    response_model_exclude_none=True,
    status_code=201,
)
def append_child_task(root_id: str, req: AppendChildRequest, request: Request):
    """Append a child task under a parent."""
    result = _service(request).append_child(
        root_id, req.parent_task_id, req.task_id, req.goal, req.acceptance
    )
    if isinstance(result, Err):
        raise _fail(result.error)
    return result.value


@router.patch(
    "/tasks/{root_id}/nodes/{task_id}",
    response_model=UpdateTaskResponse,
    response_model_exclude_none=True,
)
def update_task(root_id: str, task_id: str, req: UpdateTaskRequest, request: Request):
    """Overwrite fields of a single node."""
    status = None
    if req.status is not None:
        parsed = parse_status(req.status)
        if isinstance(parsed, Err):
            raise _fail(parsed.error)
        status = parsed.value

    changes = TaskChanges(
        goal=req.goal,
        status=status,
        acceptance=req.acceptance,
        additional_instructions=req.additional_instructions,
    )
    result = _service(request).update_task(root_id, task_id, changes)
    if isinstance(result, Err):
        raise _fail(result.error)

    outcome = result.value
    warning = outcome.advice.warning if outcome.advice else None
    return UpdateTaskResponse(task=outcome.task, warning=warning)


@router.delete("/tasks/{root_id}/nodes/{task_id}")
def delete_task(root_id: str, task_id: str, request: Request):
    """Remove a node, or the whole tree when task_id is the root."""
    result = _service(request).remove_task(root_id, task_id)
    if isinstance(result, Err):
        raise _fail(result.error)
    return {"status": "deleted", "taskId": task_id}


# =============================================================================
# History
# =============================================================================


@router.get("/history", response_model=list[HistoryEntry])
def get_history(request: Request, tool_name: Optional[str] = None):
    """Recorded changes and tool calls, oldest first."""
    return _history(request).get_history(tool_name)


# =============================================================================
# App Factory
# =============================================================================


def create_app(
    settings: Settings | None = None,
    repository: TaskTreeRepository | None = None,
    history: HistoryRecorder | None = None,
) -> FastAPI:
    """Create the FastAPI application.

    Args:
        settings: Runtime settings. Loaded from the environment if omitted.
        repository: Storage to use. Built from ``settings.data_dir`` if omitted.
        history: Notifier shared by the services. A fresh recorder if omitted.
    """
    settings = settings or load_settings()
    repository = repository or TaskTreeRepository(settings.data_dir)
    repository.ensure_ready()
    history = history or HistoryRecorder()

    app = FastAPI(
        title="dnc",
        description="Divide-and-conquer task trees",
        version=__version__,
    )

    app.state.settings = settings
    app.state.history = history
    app.state.task_service = TaskTreeService(repository, history)
    app.state.batch_coordinator = BatchUpdateCoordinator(repository, history)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(router)

    @app.get("/health", response_model=HealthResponse)
    def health():
        return HealthResponse()

    @app.get("/")
    def root():
        return {"name": "dnc", "version": __version__}

    return app

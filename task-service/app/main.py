import logging
from functools import lru_cache
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException, Query, Request, Response
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from app import config
from app.db import init_db, make_engine, make_session_factory
from app.filtering import filter_tasks
from app.logging_setup import setup_logging
from app.models import SortKey, TaskCreate, TaskQuery, TaskResponse, TaskStats, TaskUpdate
from app.stats import summarize_tasks
from app.store import TaskStore

logger = logging.getLogger(__name__)

app = FastAPI(title="Todo Task Service")


@lru_cache(maxsize=1)
def get_store() -> TaskStore:
    engine = make_engine(config.DATABASE_URL)
    init_db(engine)
    return TaskStore(make_session_factory(engine))


def _not_found(task_id: int, action: str) -> HTTPException:
    logger.warning("Task with ID %s not found for %s", task_id, action)
    return HTTPException(status_code=404, detail=f"Task with ID {task_id} not found")


@app.exception_handler(SQLAlchemyError)
async def database_error(request: Request, exc: SQLAlchemyError):
    logger.error("Database error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=500,
        content={"detail": "An error occurred while processing the request"},
    )


@app.get("/health")
async def health():
    return {"status": "healthy"}


@app.get("/tasks", response_model=list[TaskResponse])
def list_tasks(
    search: Optional[str] = Query(default=None),
    isCompleted: Optional[bool] = Query(default=None),
    priority: Optional[int] = Query(default=None),
    sortBy: Optional[SortKey] = Query(default=None),
    sortDescending: Optional[bool] = Query(default=None),
    store: TaskStore = Depends(get_store),
):
    query = TaskQuery(
        search=search,
        isCompleted=isCompleted,
        priority=priority,
        sortBy=sortBy,
        sortDescending=sortDescending,
    )
    tasks = filter_tasks(store.list_all(), query)
    logger.info("Retrieved %d tasks", len(tasks))
    return tasks


@app.get("/tasks/stats", response_model=TaskStats)
def task_stats(store: TaskStore = Depends(get_store)):
    return summarize_tasks(store.list_all())


@app.get("/tasks/{task_id}", response_model=TaskResponse)
def get_task(task_id: int, store: TaskStore = Depends(get_store)):
    task = store.get(task_id)
    if task is None:
        raise _not_found(task_id, "retrieval")
    return task


@app.post("/tasks", status_code=201, response_model=TaskResponse)
def create_task(task: TaskCreate, response: Response, store: TaskStore = Depends(get_store)):
    created = store.insert(task)
    response.headers["Location"] = f"/tasks/{created.id}"
    return created


@app.patch("/tasks/{task_id}", response_model=TaskResponse)
def update_task(task_id: int, updates: TaskUpdate, store: TaskStore = Depends(get_store)):
    updated = store.update(task_id, updates.model_dump(exclude_unset=True))
    if updated is None:
        raise _not_found(task_id, "update")
    return updated


@app.delete("/tasks/{task_id}", status_code=204)
def delete_task(task_id: int, store: TaskStore = Depends(get_store)):
    if not store.delete(task_id):
        raise _not_found(task_id, "deletion")
    return Response(status_code=204)


def serve() -> None:
    import uvicorn

    setup_logging(config.LOG_LEVEL)
    uvicorn.run(app, host=config.HOST, port=config.PORT)

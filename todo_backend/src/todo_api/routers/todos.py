from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.responses import JSONResponse

from ..repositories import TodoRepository
from ..schemas import TODO_NOT_FOUND, ErrorOut, TodoCreate, TodoOut, TodoReplace

router = APIRouter(
    prefix="/todos",
    tags=["todos"],
)


def get_repository(request: Request) -> TodoRepository:
    """
    Build a repository over the pool the application was created with.
    """
    pool = request.app.state.pool
    if pool is None:
        raise RuntimeError("Database pool is not initialized")
    return TodoRepository(pool)


def _not_found() -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"error": TODO_NOT_FOUND})


# PUBLIC_INTERFACE
@router.get(
    "",
    response_model=List[TodoOut],
    summary="List Todos",
    description="Return every todo ordered by ascending id.",
    responses={
        200: {"description": "List retrieved successfully"},
        500: {"model": ErrorOut, "description": "Database unavailable or query failed"},
    },
)
async def list_todos(repo: TodoRepository = Depends(get_repository)) -> List[TodoOut]:
    """
    List all todos.
    """
    items = await repo.list()
    return [TodoOut(**it) for it in items]


# PUBLIC_INTERFACE
@router.post(
    "",
    response_model=TodoOut,
    status_code=status.HTTP_201_CREATED,
    summary="Create Todo",
    description="Create a new, not yet completed todo and return the stored row.",
    responses={
        201: {"description": "Todo created successfully"},
        400: {"description": "Malformed JSON body"},
        500: {"model": ErrorOut, "description": "Database unavailable or query failed"},
    },
)
async def create_todo(payload: TodoCreate, repo: TodoRepository = Depends(get_repository)) -> TodoOut:
    """
    Create a new Todo. Any ``completed`` flag in the body is ignored.
    """
    created = await repo.create(payload.title)
    return TodoOut(**created)


# PUBLIC_INTERFACE
@router.put(
    "/{todo_id}",
    response_model=TodoOut,
    summary="Replace Todo",
    description="Replace title and completed of an existing todo. Both fields are required.",
    responses={
        200: {"description": "Todo updated"},
        404: {"model": ErrorOut, "description": "Todo not found"},
        500: {"model": ErrorOut, "description": "Database unavailable or query failed"},
    },
)
async def replace_todo(
    todo_id: str,
    payload: TodoReplace,
    repo: TodoRepository = Depends(get_repository),
):
    """
    Full replacement of a Todo's fields. ``todo_id`` is passed to the store as sent.
    """
    updated = await repo.replace(todo_id, payload.title, payload.completed)
    if updated is None:
        return _not_found()
    return TodoOut(**updated)


# PUBLIC_INTERFACE
@router.delete(
    "/{todo_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete Todo",
    description="Delete a todo by id.",
    responses={
        204: {"description": "Todo deleted"},
        404: {"model": ErrorOut, "description": "Todo not found"},
        500: {"model": ErrorOut, "description": "Database unavailable or query failed"},
    },
)
async def delete_todo(todo_id: str, repo: TodoRepository = Depends(get_repository)) -> Response:
    """
    Delete a Todo. Returns 204 on success, 404 if not found.
    """
    deleted = await repo.delete(todo_id)
    if not deleted:
        return _not_found()
    return Response(status_code=status.HTTP_204_NO_CONTENT)

"""Todo API routes."""

from fastapi import APIRouter, Depends, Request, status

from api.dependencies.auth import CurrentUser
from api.v1.dependencies import get_todo_service
from api.v1.schemas.todo import (
    ClearCompletedResponse,
    TodoCreate,
    TodoDetailResponse,
    TodoListResponse,
    TodoMove,
    TodoResponse,
    TodoUpdate,
)
from core.rate_limit import limiter
from domain.entities.todo import Todo
from domain.services.todo_service import TodoService

router = APIRouter(prefix="/todos", tags=["todos"])


@router.get(
    "",
    response_model=TodoListResponse,
    summary="List all tasks",
    responses={
        200: {"description": "The caller's tasks in list order"},
    },
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def list_todos(
    request: Request,
    user: CurrentUser,
    service: TodoService = Depends(get_todo_service),
) -> TodoListResponse:
    """Get all tasks for the authenticated user, ordered by position."""
    todos = await service.list_todos(user.id)
    return TodoListResponse(
        data=[_build_todo_response(todo) for todo in todos],
        meta={
            "total": len(todos),
            "completed": sum(1 for t in todos if t.completed),
        },
    )


@router.delete(
    "/completed",
    response_model=ClearCompletedResponse,
    summary="Clear completed tasks",
    responses={
        200: {"description": "Completed tasks removed; the rest renumbered"},
        503: {"description": "Storage transaction failed, safe to retry"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def clear_completed(
    request: Request,
    user: CurrentUser,
    service: TodoService = Depends(get_todo_service),
) -> ClearCompletedResponse:
    """Delete every completed task and close the gaps they leave."""
    removed = await service.clear_completed(user.id)
    return ClearCompletedResponse(removed=removed)


@router.get(
    "/{todo_id}",
    response_model=TodoDetailResponse,
    summary="Get a task",
    responses={
        200: {"description": "Task details"},
        404: {"description": "Task not found"},
    },
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def get_todo(
    request: Request,
    todo_id: int,
    user: CurrentUser,
    service: TodoService = Depends(get_todo_service),
) -> TodoDetailResponse:
    """Get a specific task by ID."""
    todo = await service.get(user.id, todo_id)
    return TodoDetailResponse(data=_build_todo_response(todo))


@router.post(
    "",
    response_model=TodoDetailResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new task",
    responses={
        201: {"description": "Task created at the end of the list"},
        400: {"description": "Blank text"},
        422: {"description": "Validation error"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def create_todo(
    request: Request,
    body: TodoCreate,
    user: CurrentUser,
    service: TodoService = Depends(get_todo_service),
) -> TodoDetailResponse:
    """Create a new task, appended after the user's last task."""
    todo = await service.create(user.id, body.text)
    return TodoDetailResponse(data=_build_todo_response(todo))


@router.patch(
    "/{todo_id}",
    response_model=TodoDetailResponse,
    summary="Update a task",
    responses={
        200: {"description": "Task updated successfully"},
        404: {"description": "Task not found"},
        422: {"description": "Validation error"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def update_todo(
    request: Request,
    todo_id: int,
    body: TodoUpdate,
    user: CurrentUser,
    service: TodoService = Depends(get_todo_service),
) -> TodoDetailResponse:
    """Update text and/or completion. Position is changed only via move."""
    todo = await service.update(
        user.id, todo_id, text=body.text, completed=body.completed
    )
    return TodoDetailResponse(data=_build_todo_response(todo))


@router.post(
    "/{todo_id}/toggle",
    response_model=TodoDetailResponse,
    summary="Toggle a task's completion",
    responses={
        200: {"description": "Completion flipped"},
        404: {"description": "Task not found"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def toggle_todo(
    request: Request,
    todo_id: int,
    user: CurrentUser,
    service: TodoService = Depends(get_todo_service),
) -> TodoDetailResponse:
    todo = await service.toggle_completed(user.id, todo_id)
    return TodoDetailResponse(data=_build_todo_response(todo))


@router.post(
    "/{todo_id}/move",
    response_model=TodoDetailResponse,
    summary="Move a task",
    responses={
        200: {"description": "Task moved; neighbours shifted"},
        400: {"description": "Negative position"},
        404: {"description": "Task not found"},
        503: {"description": "Storage transaction failed, safe to retry"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def move_todo(
    request: Request,
    todo_id: int,
    body: TodoMove,
    user: CurrentUser,
    service: TodoService = Depends(get_todo_service),
) -> TodoDetailResponse:
    """
    Move a task to `position`.

    Positions past the end of the list are clamped to the last slot.
    """
    todo = await service.move(user.id, todo_id, body.position)
    return TodoDetailResponse(data=_build_todo_response(todo))


@router.delete(
    "/{todo_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a task",
    responses={
        204: {"description": "Task deleted successfully"},
        404: {"description": "Task not found"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def delete_todo(
    request: Request,
    todo_id: int,
    user: CurrentUser,
    service: TodoService = Depends(get_todo_service),
) -> None:
    """Delete a task; the tasks after it move up one position."""
    await service.delete(user.id, todo_id)
    return None


def _build_todo_response(todo: Todo) -> TodoResponse:
    """Convert domain entity to response schema."""
    return TodoResponse(
        id=todo.id,
        text=todo.text,
        completed=todo.completed,
        position=todo.position,
        created_at=todo.created_at,
        updated_at=todo.updated_at,
    )

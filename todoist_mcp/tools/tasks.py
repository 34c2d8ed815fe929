import logging
from datetime import date, datetime
from typing import Annotated, Any

from mcp.server.fastmcp import Context, FastMCP
from pydantic import Field
from todoist_api_python.api import TodoistAPI

from ..api_resolver import ApiResolver
from .common import (
    LabelFilter,
    Limit,
    ParentIdFilter,
    ProjectIdFilter,
    SectionIdFilter,
    TaskIds,
    call_api,
    collect_pages,
    run_sync,
    sdk_kwargs,
    session_from_context,
    to_text,
)

logger = logging.getLogger(__name__)

TaskId = Annotated[str, Field(description="Unique task identifier (example: '7025')")]
Priority = Annotated[
    int | None, Field(description="Task priority: 4 (highest) - 1 (lowest)", ge=1, le=4)
]
Labels = Annotated[
    list[str] | None, Field(description="Array of label names (example: ['work', 'urgent'])")
]
DueString = Annotated[
    str | None,
    Field(description="Due date in text format (example: 'tomorrow at 3pm', 'every Monday')"),
]
DueDate = Annotated[
    date | None, Field(description="Due date in YYYY-MM-DD format (example: '2024-03-20')")
]
DueDatetime = Annotated[
    datetime | None,
    Field(description="Due date in ISO 8601 format (example: '2024-03-20T15:00:00Z')"),
]
DueLang = Annotated[
    str | None, Field(description="Language for processing due_string (example: 'ru', 'en')")
]


def narrow_tasks(
    tasks: list[Any],
    project_id: str | None = None,
    section_id: str | None = None,
    parent_id: str | None = None,
    ids: list[str] | None = None,
) -> list[Any]:
    """Apply id-based constraints the filter endpoint cannot express."""
    wanted = sdk_kwargs(project_id=project_id, section_id=section_id, parent_id=parent_id)
    if not wanted and not ids:
        return tasks
    return [
        task
        for task in tasks
        if all(getattr(task, key, None) == value for key, value in wanted.items())
        and (not ids or getattr(task, "id", None) in ids)
    ]


async def query_tasks(
    api: TodoistAPI,
    filter: str | None = None,
    project_id: str | None = None,
    section_id: str | None = None,
    label: str | None = None,
    ids: list[str] | None = None,
    parent_id: str | None = None,
    limit: int | None = None,
) -> list[Any]:
    """Fetch tasks, switching to the filter endpoint when a query is given."""
    if not filter:
        return await collect_pages(
            api.get_tasks,
            limit=limit,
            project_id=project_id,
            section_id=section_id,
            parent_id=parent_id,
            label=label,
            ids=ids,
        )

    query = f"({filter}) & @{label}" if label else filter
    narrowed = bool(ids) or any(value is not None for value in (project_id, section_id, parent_id))
    tasks = await collect_pages(api.filter_tasks, limit=None if narrowed else limit, query=query)
    tasks = narrow_tasks(
        tasks, project_id=project_id, section_id=section_id, parent_id=parent_id, ids=ids
    )
    return tasks[:limit] if limit else tasks


def update_and_move_task(api: TodoistAPI, task_id: str, **changes: Any) -> Any:
    """Edit a task's fields, then move it if a new parent container was given.

    The SDK splits these into ``update_task`` and ``move_task``.
    """
    destination = sdk_kwargs(
        project_id=changes.pop("project_id", None),
        section_id=changes.pop("section_id", None),
        parent_id=changes.pop("parent_id", None),
    )
    fields = sdk_kwargs(**changes)

    task = api.update_task(task_id=task_id, **fields) if fields else None
    if destination:
        api.move_task(task_id=task_id, **destination)
    if task is None or destination:
        task = api.get_task(task_id=task_id)
    return task


def setup_task_tools(app: FastMCP, resolve_api: ApiResolver) -> None:
    @app.tool()
    async def get_tasks(
        ctx: Context,
        project_id: ProjectIdFilter = None,
        section_id: SectionIdFilter = None,
        label: LabelFilter = None,
        ids: TaskIds = None,
        parent_id: ParentIdFilter = None,
        limit: Limit = None,
    ) -> str:
        """
        Get a list of tasks in Todoist with basic filtering by project, section,
        label, and other parameters.
        """
        logger.info(
            f"=== get_tasks called: project_id={project_id}, section_id={section_id}, "
            f"label={label}, limit={limit} ==="
        )
        api = resolve_api(session_from_context(ctx))
        tasks = await call_api(
            "get_tasks",
            query_tasks(
                api,
                project_id=project_id,
                section_id=section_id,
                label=label,
                ids=ids,
                parent_id=parent_id,
                limit=limit,
            ),
        )
        return to_text(tasks)

    @app.tool()
    async def get_tasks_by_filter(
        ctx: Context,
        filter: Annotated[
            str,
            Field(
                description="Filter string in Todoist format "
                "(example: 'today & @important', 'overdue | today')"
            ),
        ],
        project_id: ProjectIdFilter = None,
        section_id: SectionIdFilter = None,
        label: LabelFilter = None,
        limit: Limit = None,
    ) -> str:
        """
        Get a list of tasks in Todoist by query filter. Supports complex filtering
        conditions.
        """
        logger.info(f"=== get_tasks_by_filter called: filter='{filter}' ===")
        api = resolve_api(session_from_context(ctx))
        tasks = await call_api(
            "get_tasks_by_filter",
            query_tasks(
                api,
                filter=filter,
                project_id=project_id,
                section_id=section_id,
                label=label,
                limit=limit,
            ),
        )
        return to_text(tasks)

    @app.tool()
    async def create_task(
        ctx: Context,
        content: Annotated[str, Field(description="Task text (required)")],
        description: Annotated[
            str | None, Field(description="Detailed text description of the task")
        ] = None,
        project_id: Annotated[
            str | None,
            Field(description="Project ID where the task is being created (example: '2207306141')"),
        ] = None,
        section_id: Annotated[
            str | None, Field(description="Section ID in the project (example: '7025')")
        ] = None,
        parent_id: Annotated[
            str | None, Field(description="Parent task ID (for creating a subtask)")
        ] = None,
        order: Annotated[int | None, Field(description="Task order in the list (integer)")] = None,
        labels: Labels = None,
        priority: Priority = None,
        due_string: DueString = None,
        due_date: DueDate = None,
        due_datetime: DueDatetime = None,
        due_lang: DueLang = None,
        assignee_id: Annotated[
            str | None, Field(description="ID of the user to whom the task is assigned")
        ] = None,
    ) -> str:
        """Create a new task in Todoist."""
        logger.info(f"=== create_task called: project_id={project_id}, priority={priority} ===")
        api = resolve_api(session_from_context(ctx))
        task = await call_api(
            "create_task",
            run_sync(
                api.add_task,
                content=content,
                **sdk_kwargs(
                    description=description,
                    project_id=project_id,
                    section_id=section_id,
                    parent_id=parent_id,
                    order=order,
                    labels=labels,
                    priority=priority,
                    due_string=due_string,
                    due_date=due_date,
                    due_datetime=due_datetime,
                    due_lang=due_lang,
                    assignee_id=assignee_id,
                ),
            ),
        )
        return to_text(task)

    @app.tool()
    async def update_task(
        ctx: Context,
        id: TaskId,
        content: Annotated[str | None, Field(description="New task text")] = None,
        description: Annotated[str | None, Field(description="New task description")] = None,
        project_id: Annotated[
            str | None, Field(description="Move the task to this project (example: '2207306141')")
        ] = None,
        section_id: Annotated[
            str | None, Field(description="Move the task to this section (example: '7025')")
        ] = None,
        parent_id: Annotated[
            str | None, Field(description="Move the task under this parent task")
        ] = None,
        labels: Labels = None,
        priority: Priority = None,
        due_string: DueString = None,
        due_date: DueDate = None,
        due_datetime: DueDatetime = None,
        due_lang: DueLang = None,
        assignee_id: Annotated[str | None, Field(description="New assignee ID")] = None,
    ) -> str:
        """Update an existing task in Todoist. Project, section or parent changes move it."""
        logger.info(f"=== update_task called: id='{id}' ===")
        api = resolve_api(session_from_context(ctx))
        task = await call_api(
            "update_task",
            run_sync(
                update_and_move_task,
                api,
                id,
                content=content,
                description=description,
                project_id=project_id,
                section_id=section_id,
                parent_id=parent_id,
                labels=labels,
                priority=priority,
                due_string=due_string,
                due_date=due_date,
                due_datetime=due_datetime,
                due_lang=due_lang,
                assignee_id=assignee_id,
            ),
        )
        return to_text(task)

    @app.tool()
    async def delete_task(ctx: Context, id: TaskId) -> str:
        """Delete a task from Todoist."""
        logger.info(f"=== delete_task called: id='{id}' ===")
        api = resolve_api(session_from_context(ctx))
        await call_api("delete_task", run_sync(api.delete_task, task_id=id))
        return "Task deleted successfully"

    @app.tool()
    async def get_task(ctx: Context, id: TaskId) -> str:
        """Get information about a specific task by its ID."""
        logger.info(f"=== get_task called: id='{id}' ===")
        api = resolve_api(session_from_context(ctx))
        task = await call_api("get_task", run_sync(api.get_task, task_id=id))
        return to_text(task)

    @app.tool()
    async def close_task(ctx: Context, id: TaskId) -> str:
        """Mark a task as completed in Todoist."""
        logger.info(f"=== close_task called: id='{id}' ===")
        api = resolve_api(session_from_context(ctx))
        await call_api("close_task", run_sync(api.complete_task, task_id=id))
        return "Task closed successfully"

    @app.tool()
    async def reopen_task(ctx: Context, id: TaskId) -> str:
        """Reopen a previously completed task in Todoist."""
        logger.info(f"=== reopen_task called: id='{id}' ===")
        api = resolve_api(session_from_context(ctx))
        await call_api("reopen_task", run_sync(api.uncomplete_task, task_id=id))
        return "Task reopened successfully"

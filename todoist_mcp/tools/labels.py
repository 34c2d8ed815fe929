import logging
from typing import Annotated

from mcp.server.fastmcp import Context, FastMCP
from pydantic import Field

from ..api_resolver import ApiResolver
from .common import (
    Color,
    Favorite,
    Limit,
    ParentIdFilter,
    ProjectIdFilter,
    QueryFilter,
    SectionIdFilter,
    TaskIds,
    call_api,
    collect_pages,
    run_sync,
    sdk_kwargs,
    session_from_context,
    to_text,
)
from .tasks import query_tasks

logger = logging.getLogger(__name__)

LabelId = Annotated[str, Field(description="Unique label identifier")]
LabelOrder = Annotated[
    int | None,
    Field(description="Label order in the list of labels. Determines position among other labels."),
]


def setup_label_tools(app: FastMCP, resolve_api: ApiResolver) -> None:
    @app.tool()
    async def get_labels(ctx: Context, limit: Limit = None) -> str:
        """Get a list of all personal labels in Todoist."""
        logger.info("=== get_labels called ===")
        api = resolve_api(session_from_context(ctx))
        labels = await call_api("get_labels", collect_pages(api.get_labels, limit=limit))
        return to_text(labels)

    @app.tool()
    async def create_label(
        ctx: Context,
        name: Annotated[str, Field(description="Label name (required field)")],
        color: Color = None,
        order: LabelOrder = None,
        favorite: Favorite = None,
    ) -> str:
        """Create a new label in Todoist."""
        logger.info(f"=== create_label called: color={color} ===")
        api = resolve_api(session_from_context(ctx))
        label = await call_api(
            "create_label",
            run_sync(
                api.add_label,
                name=name,
                **sdk_kwargs(color=color, item_order=order, is_favorite=favorite),
            ),
        )
        return to_text(label)

    @app.tool()
    async def update_label(
        ctx: Context,
        id: LabelId,
        name: Annotated[str | None, Field(description="New label name")] = None,
        color: Color = None,
        order: LabelOrder = None,
        favorite: Favorite = None,
    ) -> str:
        """Update an existing label in Todoist."""
        logger.info(f"=== update_label called: id='{id}' ===")
        api = resolve_api(session_from_context(ctx))
        label = await call_api(
            "update_label",
            run_sync(
                api.update_label,
                label_id=id,
                **sdk_kwargs(name=name, color=color, item_order=order, is_favorite=favorite),
            ),
        )
        return to_text(label)

    @app.tool()
    async def delete_label(ctx: Context, id: LabelId) -> str:
        """Delete a label from Todoist."""
        logger.info(f"=== delete_label called: id='{id}' ===")
        api = resolve_api(session_from_context(ctx))
        await call_api("delete_label", run_sync(api.delete_label, label_id=id))
        return "Label deleted successfully"

    @app.tool()
    async def get_label(ctx: Context, id: LabelId) -> str:
        """Get information about a specific label by its ID."""
        logger.info(f"=== get_label called: id='{id}' ===")
        api = resolve_api(session_from_context(ctx))
        label = await call_api("get_label", run_sync(api.get_label, label_id=id))
        return to_text(label)

    @app.tool()
    async def get_label_tasks(
        ctx: Context,
        label: Annotated[str, Field(description="Label for filtering tasks")],
        project_id: ProjectIdFilter = None,
        section_id: SectionIdFilter = None,
        filter: QueryFilter = None,
        ids: TaskIds = None,
        parent_id: ParentIdFilter = None,
        limit: Limit = None,
    ) -> str:
        """Get a list of tasks with a specific label."""
        logger.info(f"=== get_label_tasks called: label='{label}' ===")
        api = resolve_api(session_from_context(ctx))
        tasks = await call_api(
            "get_label_tasks",
            query_tasks(
                api,
                filter=filter,
                project_id=project_id,
                section_id=section_id,
                label=label,
                ids=ids,
                parent_id=parent_id,
                limit=limit,
            ),
        )
        return to_text(tasks)

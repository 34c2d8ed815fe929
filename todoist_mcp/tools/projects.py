import logging
from typing import Annotated

from mcp.server.fastmcp import Context, FastMCP
from pydantic import Field

from ..api_resolver import ApiResolver
from ..constants import ViewStyle
from .common import (
    Color,
    Favorite,
    LabelFilter,
    Limit,
    ParentIdFilter,
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

ProjectId = Annotated[str, Field(description="Unique project identifier (example: '2207306141')")]


def setup_project_tools(app: FastMCP, resolve_api: ApiResolver) -> None:
    @app.tool()
    async def get_projects(ctx: Context, limit: Limit = None) -> str:
        """Get a list of all projects in Todoist."""
        logger.info("=== get_projects called ===")
        api = resolve_api(session_from_context(ctx))
        projects = await call_api("get_projects", collect_pages(api.get_projects, limit=limit))
        return to_text(projects)

    @app.tool()
    async def create_project(
        ctx: Context,
        name: Annotated[str, Field(description="Project name (required)")],
        parent_id: Annotated[
            str | None, Field(description="Parent project ID (example: '2207306141')")
        ] = None,
        color: Color = None,
        favorite: Favorite = None,
        view_style: Annotated[
            ViewStyle | None, Field(description="Project view style: 'list' or 'board'")
        ] = None,
    ) -> str:
        """Create a new project in Todoist."""
        logger.info(f"=== create_project called: parent_id={parent_id}, color={color} ===")
        api = resolve_api(session_from_context(ctx))
        project = await call_api(
            "create_project",
            run_sync(
                api.add_project,
                name=name,
                **sdk_kwargs(
                    parent_id=parent_id,
                    color=color,
                    is_favorite=favorite,
                    view_style=view_style,
                ),
            ),
        )
        return to_text(project)

    @app.tool()
    async def update_project(
        ctx: Context,
        id: ProjectId,
        name: Annotated[str | None, Field(description="New project name")] = None,
        color: Color = None,
        favorite: Favorite = None,
        view_style: Annotated[
            ViewStyle | None, Field(description="New view style: 'list' or 'board'")
        ] = None,
    ) -> str:
        """Update an existing project in Todoist."""
        logger.info(f"=== update_project called: id='{id}' ===")
        api = resolve_api(session_from_context(ctx))
        project = await call_api(
            "update_project",
            run_sync(
                api.update_project,
                project_id=id,
                **sdk_kwargs(name=name, color=color, is_favorite=favorite, view_style=view_style),
            ),
        )
        return to_text(project)

    @app.tool()
    async def delete_project(ctx: Context, id: ProjectId) -> str:
        """Delete a project from Todoist."""
        logger.info(f"=== delete_project called: id='{id}' ===")
        api = resolve_api(session_from_context(ctx))
        await call_api("delete_project", run_sync(api.delete_project, project_id=id))
        return "Project deleted successfully"

    @app.tool()
    async def get_project(ctx: Context, id: ProjectId) -> str:
        """Get information about a specific project by its ID."""
        logger.info(f"=== get_project called: id='{id}' ===")
        api = resolve_api(session_from_context(ctx))
        project = await call_api("get_project", run_sync(api.get_project, project_id=id))
        return to_text(project)

    @app.tool()
    async def get_project_tasks(
        ctx: Context,
        project_id: Annotated[str, Field(description="Project ID (example: '2207306141')")],
        section_id: SectionIdFilter = None,
        label: LabelFilter = None,
        filter: QueryFilter = None,
        ids: TaskIds = None,
        parent_id: ParentIdFilter = None,
        limit: Limit = None,
    ) -> str:
        """Get a list of tasks from a specific project."""
        logger.info(f"=== get_project_tasks called: project_id='{project_id}' ===")
        api = resolve_api(session_from_context(ctx))
        tasks = await call_api(
            "get_project_tasks",
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

import logging
from typing import Annotated

from mcp.server.fastmcp import Context, FastMCP
from pydantic import Field

from ..api_resolver import ApiResolver
from .common import (
    LabelFilter,
    Limit,
    ParentIdFilter,
    ProjectIdFilter,
    QueryFilter,
    TaskIds,
    call_api,
    collect_pages,
    run_sync,
    session_from_context,
    to_text,
)
from .tasks import query_tasks

logger = logging.getLogger(__name__)

SectionId = Annotated[str, Field(description="Unique section identifier (example: '7025')")]


def setup_section_tools(app: FastMCP, resolve_api: ApiResolver) -> None:
    @app.tool()
    async def get_sections(
        ctx: Context,
        project_id: Annotated[
            str | None,
            Field(description="Project ID for filtering sections (example: '2207306141')"),
        ] = None,
    ) -> str:
        """Get a list of sections in Todoist with the ability to filter by project."""
        logger.info(f"=== get_sections called: project_id={project_id} ===")
        api = resolve_api(session_from_context(ctx))
        sections = await call_api(
            "get_sections", collect_pages(api.get_sections, project_id=project_id)
        )
        return to_text(sections)

    @app.tool()
    async def create_section(
        ctx: Context,
        name: Annotated[str, Field(description="Section name (required)")],
        project_id: Annotated[
            str, Field(description="Project ID for creating the section (example: '2207306141')")
        ],
        order: Annotated[
            int | None, Field(description="Section order in the project (starting from 1)", ge=1)
        ] = None,
    ) -> str:
        """Create a new section in a Todoist project specifying name and order."""
        logger.info(f"=== create_section called: project_id='{project_id}' ===")
        api = resolve_api(session_from_context(ctx))
        section = await call_api(
            "create_section",
            run_sync(api.add_section, name=name, project_id=project_id, **sdk_kwargs(order=order)),
        )
        return to_text(section)

    @app.tool()
    async def update_section(
        ctx: Context,
        id: SectionId,
        name: Annotated[str, Field(description="New section name (required)")],
    ) -> str:
        """Rename an existing section in Todoist."""
        logger.info(f"=== update_section called: id='{id}' ===")
        api = resolve_api(session_from_context(ctx))
        section = await call_api(
            "update_section", run_sync(api.update_section, section_id=id, name=name)
        )
        return to_text(section)

    @app.tool()
    async def delete_section(ctx: Context, id: SectionId) -> str:
        """Delete a section from Todoist without removing associated tasks."""
        logger.info(f"=== delete_section called: id='{id}' ===")
        api = resolve_api(session_from_context(ctx))
        await call_api("delete_section", run_sync(api.delete_section, section_id=id))
        return "Section deleted successfully"

    @app.tool()
    async def get_section(ctx: Context, id: SectionId) -> str:
        """Get information about a specific section by its ID."""
        logger.info(f"=== get_section called: id='{id}' ===")
        api = resolve_api(session_from_context(ctx))
        section = await call_api("get_section", run_sync(api.get_section, section_id=id))
        return to_text(section)

    @app.tool()
    async def get_section_tasks(
        ctx: Context,
        section_id: Annotated[str, Field(description="Section ID (example: '7025')")],
        project_id: ProjectIdFilter = None,
        label: LabelFilter = None,
        filter: QueryFilter = None,
        ids: TaskIds = None,
        parent_id: ParentIdFilter = None,
        limit: Limit = None,
    ) -> str:
        """Get tasks from a specific section with additional filtering options."""
        logger.info(f"=== get_section_tasks called: section_id='{section_id}' ===")
        api = resolve_api(session_from_context(ctx))
        tasks = await call_api(
            "get_section_tasks",
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

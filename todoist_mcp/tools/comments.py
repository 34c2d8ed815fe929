import logging
from typing import Annotated

from mcp.server.fastmcp import Context, FastMCP
from pydantic import Field

from ..api_resolver import ApiResolver
from .common import call_api, collect_pages, run_sync, session_from_context, to_text

logger = logging.getLogger(__name__)

CommentId = Annotated[str, Field(description="Unique comment identifier")]
CommentContent = Annotated[str, Field(description="Comment text")]


def setup_comment_tools(app: FastMCP, resolve_api: ApiResolver) -> None:
    @app.tool()
    async def get_task_comments(
        ctx: Context, task_id: Annotated[str, Field(description="Task ID for filtering")]
    ) -> str:
        """Get a list of comments for a specific task in Todoist."""
        logger.info(f"=== get_task_comments called: task_id='{task_id}' ===")
        api = resolve_api(session_from_context(ctx))
        comments = await call_api(
            "get_task_comments", collect_pages(api.get_comments, task_id=task_id)
        )
        return to_text(comments)

    @app.tool()
    async def get_project_comments(
        ctx: Context, project_id: Annotated[str, Field(description="Project ID for filtering")]
    ) -> str:
        """Get a list of comments for a specific project in Todoist."""
        logger.info(f"=== get_project_comments called: project_id='{project_id}' ===")
        api = resolve_api(session_from_context(ctx))
        comments = await call_api(
            "get_project_comments", collect_pages(api.get_comments, project_id=project_id)
        )
        return to_text(comments)

    @app.tool()
    async def create_task_comment(
        ctx: Context,
        content: CommentContent,
        task_id: Annotated[str, Field(description="Task ID")],
    ) -> str:
        """Create a new comment for a task in Todoist."""
        logger.info(f"=== create_task_comment called: task_id='{task_id}' ===")
        api = resolve_api(session_from_context(ctx))
        comment = await call_api(
            "create_task_comment", run_sync(api.add_comment, content=content, task_id=task_id)
        )
        return to_text(comment)

    @app.tool()
    async def create_project_comment(
        ctx: Context,
        content: CommentContent,
        project_id: Annotated[str, Field(description="Project ID")],
    ) -> str:
        """Create a new comment for a project in Todoist."""
        logger.info(f"=== create_project_comment called: project_id='{project_id}' ===")
        api = resolve_api(session_from_context(ctx))
        comment = await call_api(
            "create_project_comment",
            run_sync(api.add_comment, content=content, project_id=project_id),
        )
        return to_text(comment)

    @app.tool()
    async def update_comment(
        ctx: Context,
        id: CommentId,
        content: Annotated[str, Field(description="New comment text")],
    ) -> str:
        """Update an existing comment in Todoist."""
        logger.info(f"=== update_comment called: id='{id}' ===")
        api = resolve_api(session_from_context(ctx))
        comment = await call_api(
            "update_comment", run_sync(api.update_comment, comment_id=id, content=content)
        )
        return to_text(comment)

    @app.tool()
    async def delete_comment(ctx: Context, id: CommentId) -> str:
        """Delete a comment from Todoist."""
        logger.info(f"=== delete_comment called: id='{id}' ===")
        api = resolve_api(session_from_context(ctx))
        await call_api("delete_comment", run_sync(api.delete_comment, comment_id=id))
        return "Comment deleted successfully"

    @app.tool()
    async def get_comment(ctx: Context, id: CommentId) -> str:
        """Get information about a specific comment by its ID."""
        logger.info(f"=== get_comment called: id='{id}' ===")
        api = resolve_api(session_from_context(ctx))
        comment = await call_api("get_comment", run_sync(api.get_comment, comment_id=id))
        return to_text(comment)

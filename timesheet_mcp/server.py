"""FastMCP server initialization for Timesheet MCP."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from mcp.server.fastmcp import FastMCP

from timesheet_mcp.config import get_settings
from timesheet_mcp.context import AppContext, get_context, set_context
from timesheet_mcp.utils.logging_setup import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(server: FastMCP) -> AsyncIterator[None]:
    """Write any notes drafts still pending when the session ends."""
    try:
        yield
    finally:
        await get_context().autosaver.flush_all()


# Initialize the MCP server
mcp = FastMCP("timesheet_mcp", lifespan=lifespan)


def run() -> None:
    """Load settings, configure logging, open the database, and run the MCP server."""
    settings = get_settings()
    setup_logging(settings)
    ctx = AppContext.create(settings)
    set_context(ctx)
    logger.info("Starting timesheet_mcp server")
    try:
        mcp.run()
    finally:
        ctx.close()
        set_context(None)

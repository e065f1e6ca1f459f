"""MCP server exposing the task switcher window filter."""
import json
import sys
from typing import Any, Dict, List, Optional

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import Tool, TextContent

from switcher.version import __version__
from switcher.config import get_config
from switcher.filterer import Candidate, WindowFilterContext, WindowFilterer
from switcher.highlighter import XamlHighlighter
from switcher.matchers import StringPart
from switcher.query import parse_query


SERVER_NAME = "task-switcher-mcp"

# Global state
_filterer: Optional[WindowFilterer] = None


def get_filterer() -> WindowFilterer:
    """Get the shared filterer, built from the global config.

    Returns:
        WindowFilterer instance
    """
    global _filterer

    if _filterer is None:
        _filterer = WindowFilterer(get_config().filter)

    return _filterer


def _text(text: str) -> List[TextContent]:
    return [TextContent(type="text", text=text)]


def parse_windows(raw_windows: Any) -> List[Candidate]:
    """Convert the windows tool argument into candidates.

    Args:
        raw_windows: List of {"title", "process", "handle"} objects

    Returns:
        Candidates in the given order

    Raises:
        ValueError: If the argument is not a list of objects
    """
    if not isinstance(raw_windows, list):
        raise ValueError("'windows' must be a list of objects")

    candidates = []
    for i, window in enumerate(raw_windows):
        if not isinstance(window, dict):
            raise ValueError(f"windows[{i}] must be an object")

        handle = window.get("handle")
        candidates.append(Candidate(
            title=window.get("title"),
            group_label=window.get("process"),
            handle=str(handle) if handle is not None else None,
        ))

    return candidates


def parse_limit(raw_limit: Any) -> Optional[int]:
    """Validate the optional limit tool argument.

    Raises:
        ValueError: If the limit is given but is not a positive integer
    """
    if raw_limit is None:
        return None
    if isinstance(raw_limit, bool) or not isinstance(raw_limit, int) or raw_limit < 1:
        raise ValueError("'limit' must be a positive integer")
    return raw_limit


async def health_check_tool() -> List[TextContent]:
    """Tool handler for health_check."""
    config = get_config()
    status = {
        "status": "ok",
        "server": SERVER_NAME,
        "version": __version__,
        "parallel_threshold": config.filter.parallel_threshold,
        "max_results": config.max_results,
        "highlight_tag": config.highlight_tag,
    }
    return _text(json.dumps(status, indent=2))


async def filter_windows_tool(
    query: str,
    windows: List[Candidate],
    foreground_process: Optional[str] = None,
    limit: Optional[int] = None,
) -> List[TextContent]:
    """Tool handler for filter_windows.

    Args:
        query: Raw query, optionally "process.title"
        windows: Candidate windows in switcher order
        foreground_process: Process of the active window, used for ".title"
        limit: Maximum number of results (capped by config)

    Returns:
        List of TextContent with the ranked windows as JSON
    """
    config = get_config()
    max_results = config.max_results if limit is None else min(limit, config.max_results)

    context = WindowFilterContext(windows=windows, foreground_group=foreground_process)
    results = get_filterer().filter(context, query, limit=max_results)

    if not results:
        return _text(f"No windows found matching query: {query}")

    highlighter = XamlHighlighter(config.highlight_tag)
    ranked = [
        {
            "handle": r.candidate.handle,
            "title": r.candidate.title,
            "process": r.candidate.group_label,
            "score": r.score,
            "formatted_title": r.formatted_title(highlighter),
            "formatted_process": r.formatted_group(highlighter),
        }
        for r in results
    ]

    return _text(json.dumps(ranked, indent=2))


async def parse_query_tool(query: str, foreground_process: Optional[str] = None) -> List[TextContent]:
    """Tool handler for parse_query."""
    parsed = parse_query(query, foreground_process)
    return _text(json.dumps({
        "text_filter": parsed.text_filter,
        "group_filter": parsed.group_filter,
    }))


async def highlight_tool(parts: List[Dict[str, Any]]) -> List[TextContent]:
    """Tool handler for highlight.

    Args:
        parts: List of {"value": str, "is_match": bool}

    Returns:
        List of TextContent with the markup
    """
    string_parts = [
        StringPart(str(p.get("value", "")), bool(p.get("is_match", False)))
        for p in parts
    ]
    return _text(XamlHighlighter(get_config().highlight_tag).highlight(string_parts))


WINDOW_SCHEMA = {
    "type": "object",
    "properties": {
        "title": {"type": "string", "description": "Window title"},
        "process": {"type": "string", "description": "Owning process name"},
        "handle": {"type": "string", "description": "Opaque window identifier"},
    },
    "required": ["title"],
}


def create_server() -> Server:
    """Create and configure the MCP server.

    Returns:
        Configured Server instance
    """
    server = Server(SERVER_NAME)

    @server.list_tools()
    async def list_tools() -> list[Tool]:
        """List available tools."""
        return [
            Tool(
                name="health_check",
                description="Report server status, version and filter settings.",
                inputSchema={"type": "object", "properties": {}},
            ),
            Tool(
                name="filter_windows",
                description=(
                    "Filter and rank windows against a task switcher query. "
                    "Use 'process.text' to restrict matches to a process, or '.text' "
                    "for the foreground window's process. Returns the matching windows, "
                    "best first, with highlighted titles."
                ),
                inputSchema={
                    "type": "object",
                    "properties": {
                        "query": {
                            "type": "string",
                            "description": "What the user typed",
                        },
                        "windows": {
                            "type": "array",
                            "items": WINDOW_SCHEMA,
                            "description": "Candidate windows in switcher order",
                        },
                        "foreground_process": {
                            "type": "string",
                            "description": "Process of the active window, used when the query starts with '.'",
                        },
                        "limit": {
                            "type": "integer",
                            "description": "Maximum number of windows to return",
                        },
                    },
                    "required": ["query", "windows"],
                },
            ),
            Tool(
                name="parse_query",
                description="Split a query into its text filter and optional process filter.",
                inputSchema={
                    "type": "object",
                    "properties": {
                        "query": {"type": "string"},
                        "foreground_process": {"type": "string"},
                    },
                    "required": ["query"],
                },
            ),
            Tool(
                name="highlight",
                description="Render matched/unmatched string parts as XAML markup.",
                inputSchema={
                    "type": "object",
                    "properties": {
                        "parts": {
                            "type": "array",
                            "items": {
                                "type": "object",
                                "properties": {
                                    "value": {"type": "string"},
                                    "is_match": {"type": "boolean"},
                                },
                                "required": ["value"],
                            },
                        },
                    },
                    "required": ["parts"],
                },
            ),
        ]

    @server.call_tool()
    async def call_tool(name: str, arguments: Any) -> list[TextContent]:
        """Handle tool calls."""
        arguments = arguments or {}

        if name == "health_check":
            return await health_check_tool()

        elif name == "filter_windows":
            query = arguments.get("query")
            if query is None:
                return _text("Error: 'query' parameter is required")
            try:
                windows = parse_windows(arguments.get("windows"))
                limit = parse_limit(arguments.get("limit"))
            except ValueError as e:
                print(f"[Server] Rejected filter_windows call: {e}", file=sys.stderr)
                return _text(f"Error: {e}")
            return await filter_windows_tool(
                query,
                windows,
                foreground_process=arguments.get("foreground_process"),
                limit=limit,
            )

        elif name == "parse_query":
            query = arguments.get("query")
            if query is None:
                return _text("Error: 'query' parameter is required")
            return await parse_query_tool(query, arguments.get("foreground_process"))

        elif name == "highlight":
            parts = arguments.get("parts")
            if not isinstance(parts, list) or not all(isinstance(p, dict) for p in parts):
                return _text("Error: 'parts' must be a list of objects")
            return await highlight_tool(parts)

        else:
            raise ValueError(f"Unknown tool: {name}")

    return server


async def main():
    """Main entry point for the MCP server."""
    server = create_server()
    print(f"[Server] {SERVER_NAME} {__version__} starting on stdio", file=sys.stderr)

    async with stdio_server() as (read_stream, write_stream):
        initialization_options = server.create_initialization_options()
        await server.run(read_stream, write_stream, initialization_options)

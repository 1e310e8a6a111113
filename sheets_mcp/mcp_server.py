import logging
from typing import Any

from fastmcp import FastMCP
from fastmcp.exceptions import ToolError

from sheets_mcp.models.tools import MatchType, ValueInputOption, ValueRenderOption
from sheets_mcp.services import sheets as sheets_service
from sheets_mcp.tools.catalog import build_registry

logger = logging.getLogger(__name__)

RESOURCE_URI = "resource://sheets-mcp/spreadsheet/{spreadsheet_id}"

mcp = FastMCP("sheets-mcp")
registry = build_registry()


def _call(name: str, **arguments: Any) -> str:
    """Dispatch through the registry; failures become MCP error results."""
    result = registry.dispatch(name, {k: v for k, v in arguments.items() if v is not None})
    if result.is_error:
        raise ToolError(result.error)
    return result.data


def _description(name: str) -> str:
    return registry[name].description


# --- Spreadsheet tools ---

@mcp.tool(name="create-spreadsheet", description=_description("create-spreadsheet"))
def create_spreadsheet(title: str, locale: str | None = None, time_zone: str | None = None) -> str:
    return _call("create-spreadsheet", title=title, locale=locale, time_zone=time_zone)


@mcp.tool(name="get-spreadsheet", description=_description("get-spreadsheet"))
def get_spreadsheet(spreadsheet_id: str | None = None, include_grid_data: bool = False) -> str:
    return _call("get-spreadsheet", spreadsheet_id=spreadsheet_id, include_grid_data=include_grid_data)


# --- Values tools ---

@mcp.tool(name="get-values", description=_description("get-values"))
def get_values(
    spreadsheet_id: str | None = None,
    range: str | None = None,
    value_render_option: ValueRenderOption = "FORMATTED_VALUE",
) -> str:
    return _call("get-values", spreadsheet_id=spreadsheet_id, range=range, value_render_option=value_render_option)


@mcp.tool(name="batch-get-values", description=_description("batch-get-values"))
def batch_get_values(
    ranges: list[str],
    spreadsheet_id: str | None = None,
    value_render_option: ValueRenderOption = "FORMATTED_VALUE",
) -> str:
    return _call(
        "batch-get-values", spreadsheet_id=spreadsheet_id, ranges=ranges, value_render_option=value_render_option
    )


@mcp.tool(name="update-values", description=_description("update-values"))
def update_values(
    range: str,
    values: list[list[str | int | float | bool | None]],
    spreadsheet_id: str | None = None,
    value_input_option: ValueInputOption = "USER_ENTERED",
) -> str:
    return _call(
        "update-values",
        spreadsheet_id=spreadsheet_id,
        range=range,
        values=values,
        value_input_option=value_input_option,
    )


@mcp.tool(name="append-values", description=_description("append-values"))
def append_values(
    range: str,
    values: list[list[str | int | float | bool | None]],
    spreadsheet_id: str | None = None,
    value_input_option: ValueInputOption = "USER_ENTERED",
) -> str:
    return _call(
        "append-values",
        spreadsheet_id=spreadsheet_id,
        range=range,
        values=values,
        value_input_option=value_input_option,
    )


@mcp.tool(name="clear-values", description=_description("clear-values"))
def clear_values(range: str, spreadsheet_id: str | None = None) -> str:
    return _call("clear-values", spreadsheet_id=spreadsheet_id, range=range)


# --- Sheet tools ---

@mcp.tool(name="list-sheets", description=_description("list-sheets"))
def list_sheets(spreadsheet_id: str | None = None) -> str:
    return _call("list-sheets", spreadsheet_id=spreadsheet_id)


@mcp.tool(name="get-sheet-by-gid", description=_description("get-sheet-by-gid"))
def get_sheet_by_gid(spreadsheet_id: str | None = None, url: str | None = None, gid: str | None = None) -> str:
    return _call("get-sheet-by-gid", spreadsheet_id=spreadsheet_id, url=url, gid=gid)


@mcp.tool(name="get-sheet-info", description=_description("get-sheet-info"))
def get_sheet_info(sheet_name: str, spreadsheet_id: str | None = None) -> str:
    return _call("get-sheet-info", spreadsheet_id=spreadsheet_id, sheet_name=sheet_name)


@mcp.tool(name="get-sheet-preview", description=_description("get-sheet-preview"))
def get_sheet_preview(sheet_name: str, spreadsheet_id: str | None = None, num_rows: int = 10) -> str:
    return _call("get-sheet-preview", spreadsheet_id=spreadsheet_id, sheet_name=sheet_name, num_rows=num_rows)


# --- Search tools ---

@mcp.tool(name="search-values", description=_description("search-values"))
def search_values(
    sheet_name: str,
    search_text: str,
    spreadsheet_id: str | None = None,
    match_type: MatchType = "contains",
    max_results: int = 50,
) -> str:
    return _call(
        "search-values",
        spreadsheet_id=spreadsheet_id,
        sheet_name=sheet_name,
        search_text=search_text,
        match_type=match_type,
        max_results=max_results,
    )


@mcp.tool(name="find-in-column", description=_description("find-in-column"))
def find_in_column(
    sheet_name: str,
    column: str,
    search_text: str,
    spreadsheet_id: str | None = None,
    match_type: MatchType = "contains",
    max_results: int | None = None,
) -> str:
    return _call(
        "find-in-column",
        spreadsheet_id=spreadsheet_id,
        sheet_name=sheet_name,
        column=column,
        search_text=search_text,
        match_type=match_type,
        max_results=max_results,
    )


# --- Status tool ---

@mcp.tool(name="server-status", description=_description("server-status"))
def server_status() -> str:
    return _call("server-status")


# --- Resources ---

@mcp.resource(
    RESOURCE_URI,
    name="Spreadsheet Metadata",
    description="Spreadsheet structure and properties by ID",
    mime_type="application/json",
)
def spreadsheet_metadata(spreadsheet_id: str) -> str:
    logger.info("Reading spreadsheet resource %s", spreadsheet_id)
    return sheets_service.get_spreadsheet(spreadsheet_id).model_dump_json(indent=2)


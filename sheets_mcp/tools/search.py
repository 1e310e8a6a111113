from sheets_mcp.models.common import ToolResult
from sheets_mcp.models.tools import FindInColumnParams, SearchValuesParams
from sheets_mcp.services import search as search_service
from sheets_mcp.tools.formatting import plural
from sheets_mcp.tools.registry import ToolSpec
from sheets_mcp.url_parser import parse_spreadsheet_input


def search_values(params: SearchValuesParams) -> ToolResult:
    spreadsheet_id, _ = parse_spreadsheet_input(params.spreadsheet_id)
    result = search_service.search_values(
        spreadsheet_id, params.sheet_name, params.search_text, params.match_type, params.max_results
    )
    searched = f'Searched for: "{params.search_text}" ({params.match_type})\nSheet: {params.sheet_name}'
    if not result.matches:
        return ToolResult.ok(f"**No matches found**\n\n{searched}")

    listing = "\n".join(f'  {m.cell_ref}: "{m.value}"' for m in result.matches)
    shown = f" (showing first {params.max_results})" if result.truncated else ""
    return ToolResult.ok(
        f"**Found {plural(len(result.matches), 'match', 'es')}{' or more' if result.truncated else ''}**\n\n"
        f"{searched}\n\n**Results{shown}:**\n{listing}"
    )


def find_in_column(params: FindInColumnParams) -> ToolResult:
    spreadsheet_id, _ = parse_spreadsheet_input(params.spreadsheet_id)
    column = params.column.upper()
    result = search_service.find_in_column(
        spreadsheet_id, params.sheet_name, column, params.search_text, params.match_type, params.max_results
    )
    searched = f'Searched for: "{params.search_text}" ({params.match_type})\nSheet: {params.sheet_name}'
    if not result.matches:
        return ToolResult.ok(f"**No matches found in column {column}**\n\n{searched}")

    listing = "\n".join(f'  Row {m.row} ({m.cell_ref}): "{m.value}"' for m in result.matches)
    shown = f" (showing first {params.max_results})" if result.truncated else ""
    return ToolResult.ok(
        f"**Found {plural(len(result.matches), 'match', 'es')} in column {column}**\n\n"
        f"{searched}\n\n**Results{shown}:**\n{listing}"
    )


TOOLS = [
    ToolSpec(
        name="search-values",
        description="Search a sheet for text. Returns every matching cell with its reference (A1, B2, ...). "
        'match_type is "exact" or "contains" (default); matching ignores case.',
        params=SearchValuesParams,
        handler=search_values,
    ),
    ToolSpec(
        name="find-in-column",
        description="Find the values in one column that match some text. Returns row numbers and cell references.",
        params=FindInColumnParams,
        handler=find_in_column,
    ),
]

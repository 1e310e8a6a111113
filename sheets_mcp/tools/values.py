from sheets_mcp.models.common import ToolResult
from sheets_mcp.models.tools import (
    AppendValuesParams,
    BatchGetValuesParams,
    GetValuesParams,
    RangeParams,
    UpdateValuesParams,
)
from sheets_mcp.services import sheets as sheets_service
from sheets_mcp.tools.formatting import grid_size, values_table
from sheets_mcp.tools.registry import ToolSpec
from sheets_mcp.url_parser import parse_spreadsheet_input


def get_values(params: GetValuesParams) -> ToolResult:
    spreadsheet_id, _ = parse_spreadsheet_input(params.spreadsheet_id)
    result = sheets_service.get_values(spreadsheet_id, params.range, params.value_render_option)
    return ToolResult.ok(
        f"**Values from {result.range}**\n\n"
        f"**Size:** {grid_size(result.values)}\n\n"
        f"**Data:**\n```\n{values_table(result.values)}\n```"
    )


def batch_get_values(params: BatchGetValuesParams) -> ToolResult:
    spreadsheet_id, _ = parse_spreadsheet_input(params.spreadsheet_id)
    results = sheets_service.batch_get_values(spreadsheet_id, params.ranges, params.value_render_option)
    blocks = [
        f"**{result.range}** ({grid_size(result.values)})\n```\n{values_table(result.values)}\n```"
        for result in results
    ]
    return ToolResult.ok(f"**Values from {len(results)} ranges**\n\n" + "\n\n".join(blocks))


def update_values(params: UpdateValuesParams) -> ToolResult:
    spreadsheet_id, _ = parse_spreadsheet_input(params.spreadsheet_id)
    result = sheets_service.update_values(spreadsheet_id, params.range, params.values, params.value_input_option)
    return ToolResult.ok(
        "**Values updated successfully**\n\n"
        f"**Range:** {result.updated_range}\n"
        f"**Cells updated:** {result.updated_cells}\n"
        f"**Rows updated:** {result.updated_rows}\n"
        f"**Columns updated:** {result.updated_columns}"
    )


def append_values(params: AppendValuesParams) -> ToolResult:
    spreadsheet_id, _ = parse_spreadsheet_input(params.spreadsheet_id)
    result = sheets_service.append_values(spreadsheet_id, params.range, params.values, params.value_input_option)
    return ToolResult.ok(
        "**Values appended successfully**\n\n"
        f"**Table range:** {result.table_range or 'N/A'}\n"
        f"**Updated range:** {result.updated_range}\n"
        f"**Rows added:** {result.updated_rows}\n"
        f"**Cells written:** {result.updated_cells}"
    )


def clear_values(params: RangeParams) -> ToolResult:
    spreadsheet_id, _ = parse_spreadsheet_input(params.spreadsheet_id)
    result = sheets_service.clear_values(spreadsheet_id, params.range)
    return ToolResult.ok(
        "**Values cleared successfully**\n\n"
        f"**Range:** {result.cleared_range}\n\n"
        "Cell data has been cleared. Formatting is preserved."
    )


TOOLS = [
    ToolSpec(
        name="get-values",
        description='Get cell values from a range. Use A1 notation like "Sheet1!A1:C10" or "A1:C10" for the first sheet. '
        "Accepts either a spreadsheet ID or a full Google Sheets URL.",
        params=GetValuesParams,
        handler=get_values,
    ),
    ToolSpec(
        name="batch-get-values",
        description="Get cell values from several ranges in one request. Ranges use A1 notation.",
        params=BatchGetValuesParams,
        handler=batch_get_values,
    ),
    ToolSpec(
        name="update-values",
        description="Write a 2D array of values to a range. With USER_ENTERED input (the default) values are "
        'interpreted as if typed by a user, so "=SUM(A1:A10)" becomes a formula.',
        params=UpdateValuesParams,
        handler=update_values,
    ),
    ToolSpec(
        name="append-values",
        description="Append rows after the last row with data in a table. Good for adding entries to a log.",
        params=AppendValuesParams,
        handler=append_values,
    ),
    ToolSpec(
        name="clear-values",
        description="Clear cell values in a range. Removes data but keeps formatting.",
        params=RangeParams,
        handler=clear_values,
    ),
]

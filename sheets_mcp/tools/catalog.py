from sheets_mcp.tools import search, sheet, spreadsheet, status, values
from sheets_mcp.tools.registry import ToolRegistry

TOOL_MODULES = [spreadsheet, values, sheet, search, status]


def build_registry() -> ToolRegistry:
    return ToolRegistry(spec for module in TOOL_MODULES for spec in module.TOOLS)

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from pydantic import BaseModel, ValidationError

from sheets_mcp.exceptions import (
    AuthenticationError,
    DuplicateToolError,
    IntegrationError,
    InvalidSpreadsheetUrlError,
    RateLimitError,
)
from sheets_mcp.models.common import ToolResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ToolSpec:
    name: str
    description: str
    params: type[BaseModel]
    handler: Callable[[BaseModel], ToolResult]


def _format_validation_error(name: str, e: ValidationError) -> str:
    problems = []
    for err in e.errors():
        field = ".".join(str(part) for part in err["loc"]) or "arguments"
        problems.append(f"- {field}: {err['msg']}")
    return f"**Invalid arguments for {name}**\n\n" + "\n".join(problems)


def _handle_tool_error(name: str, e: Exception) -> ToolResult:
    """Convert expected failures to agent-friendly error text."""
    if isinstance(e, AuthenticationError):
        return ToolResult.fail(
            f"**Authentication failed while executing {name}**\n\n{e}\n\n"
            "Check the service account key and that the spreadsheet is shared with it."
        )
    if isinstance(e, RateLimitError):
        return ToolResult.fail(f"**Rate limited while executing {name}**\n\n{e}\n\nWait a moment and retry.")
    if isinstance(e, IntegrationError):
        return ToolResult.fail(f"**Error executing {name}**\n\n{e}")
    if isinstance(e, InvalidSpreadsheetUrlError):
        return ToolResult.fail(f"**Invalid spreadsheet reference**\n\n{e}")
    return ToolResult.fail(f"**Error executing {name}**\n\n{e}")


class ToolRegistry:
    """Flat name -> tool mapping built once at startup."""

    def __init__(self, specs: Iterable[ToolSpec]):
        self._tools: dict[str, ToolSpec] = {}
        for spec in specs:
            if spec.name in self._tools:
                raise DuplicateToolError(f"Tool {spec.name!r} is registered more than once")
            self._tools[spec.name] = spec

    def __contains__(self, name: str) -> bool:
        return name in self._tools

    def __getitem__(self, name: str) -> ToolSpec:
        return self._tools[name]

    def names(self) -> list[str]:
        return list(self._tools)

    def list_tools(self) -> list[dict]:
        return [
            {"name": spec.name, "description": spec.description, "inputSchema": spec.params.model_json_schema()}
            for spec in self._tools.values()
        ]

    def dispatch(self, name: str, arguments: dict | None = None) -> ToolResult:
        spec = self._tools.get(name)
        if spec is None:
            return ToolResult.fail(f"Unknown tool: {name}")
        try:
            params = spec.params.model_validate(arguments or {})
        except ValidationError as e:
            logger.warning("Rejected %s call: %d invalid argument(s)", name, e.error_count())
            return ToolResult.fail(_format_validation_error(name, e))

        logger.info("Tool called: %s", name)
        try:
            return spec.handler(params)
        except (AuthenticationError, IntegrationError, RateLimitError, InvalidSpreadsheetUrlError) as e:
            logger.error("Tool %s failed: %s", name, e)
            return _handle_tool_error(name, e)

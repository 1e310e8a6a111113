from sheets_mcp.auth import get_credential_manager
from sheets_mcp.config import get_settings
from sheets_mcp.exceptions import ConfigurationError
from sheets_mcp.models.common import StatusResponse, ToolResult
from sheets_mcp.models.tools import NoParams
from sheets_mcp.tools.registry import ToolSpec


def server_status() -> StatusResponse:
    """Describe the credential state without contacting Google."""
    default_id = get_settings().default_spreadsheet_id
    try:
        manager = get_credential_manager()
    except ConfigurationError as e:
        return StatusResponse(
            authenticated=False, credential_state="unconfigured", default_spreadsheet_id=default_id, message=str(e)
        )
    state = manager.state
    return StatusResponse(
        authenticated=state == "valid",
        credential_state=state,
        service_account=manager.service_account_email,
        scopes=manager.scopes,
        default_spreadsheet_id=default_id,
        message=(
            f"Service account {manager.service_account_email} loaded; token {state}. "
            "Spreadsheets must be shared with this address."
        ),
    )


def get_server_status(params: NoParams) -> ToolResult:
    status = server_status()
    lines = [
        "**Server status**\n",
        f"**Credential state:** {status.credential_state}",
        f"**Service account:** {status.service_account or 'N/A'}",
        f"**Scopes:** {', '.join(status.scopes) or 'N/A'}",
        f"**Default spreadsheet:** {status.default_spreadsheet_id or 'N/A'}",
        "",
        status.message,
    ]
    return ToolResult.ok("\n".join(lines))


TOOLS = [
    ToolSpec(
        name="server-status",
        description="Check whether the service account is configured and which spreadsheet is used by default.",
        params=NoParams,
        handler=get_server_status,
    ),
]

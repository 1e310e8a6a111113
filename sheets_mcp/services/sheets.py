import logging

from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from sheets_mcp.auth import get_credential_manager
from sheets_mcp.exceptions import AuthenticationError, ConfigurationError, IntegrationError, RateLimitError
from sheets_mcp.models.sheets import (
    AppendValuesResponse,
    ClearValuesResponse,
    SheetInfo,
    SpreadsheetInfo,
    UpdateValuesResponse,
    ValueRange,
)

logger = logging.getLogger(__name__)


def _get_sheets_service():
    try:
        creds = get_credential_manager().acquire()
    except ConfigurationError as e:
        raise AuthenticationError(str(e)) from e
    return build("sheets", "v4", credentials=creds, cache_discovery=False)


def _handle_api_error(e: HttpError):
    status = e.resp.status
    message = e.reason if isinstance(e.reason, str) and e.reason else str(e)
    logger.warning("Sheets API returned %s: %s", status, message)
    if status == 429:
        raise RateLimitError(f"Sheets API rate limit exceeded: {message}", status=status) from e
    if status in (401, 403):
        raise AuthenticationError(
            f"Sheets API denied access ({status}): {message}. "
            "Check that the spreadsheet is shared with the service account.",
            status=status,
        ) from e
    raise IntegrationError(f"Sheets API error ({status}): {message}", status=status) from e


def _spreadsheet_info(result: dict) -> SpreadsheetInfo:
    properties = result.get("properties", {})
    return SpreadsheetInfo(
        id=result["spreadsheetId"],
        title=properties.get("title", ""),
        locale=properties.get("locale"),
        time_zone=properties.get("timeZone"),
        url=result.get("spreadsheetUrl", ""),
        sheets=[SheetInfo.from_api(s.get("properties", {})) for s in result.get("sheets", [])],
    )


def _value_range(result: dict, default_range: str) -> ValueRange:
    return ValueRange(
        range=result.get("range", default_range),
        major_dimension=result.get("majorDimension", "ROWS"),
        values=result.get("values", []),
    )


def get_spreadsheet(spreadsheet_id: str, include_grid_data: bool = False) -> SpreadsheetInfo:
    """Get spreadsheet metadata: title, locale, time zone, URL and sheet properties."""
    service = _get_sheets_service()
    logger.info("Getting spreadsheet %s", spreadsheet_id)
    try:
        result = service.spreadsheets().get(
            spreadsheetId=spreadsheet_id, includeGridData=include_grid_data
        ).execute()
        return _spreadsheet_info(result)
    except HttpError as e:
        _handle_api_error(e)


def create_spreadsheet(
    title: str,
    locale: str | None = None,
    time_zone: str | None = None,
    sheet_names: list[str] | None = None,
) -> SpreadsheetInfo:
    """Create a new spreadsheet with optional locale, time zone and sheet names."""
    service = _get_sheets_service()
    properties: dict = {"title": title}
    if locale:
        properties["locale"] = locale
    if time_zone:
        properties["timeZone"] = time_zone
    body: dict = {"properties": properties}
    if sheet_names:
        body["sheets"] = [{"properties": {"title": name}} for name in sheet_names]
    logger.info("Creating spreadsheet %r", title)
    try:
        result = service.spreadsheets().create(body=body).execute()
        return _spreadsheet_info(result)
    except HttpError as e:
        _handle_api_error(e)


def get_values(spreadsheet_id: str, range: str, value_render_option: str = "FORMATTED_VALUE") -> ValueRange:
    """Read a range of cells (e.g. 'Sheet1!A1:D10')."""
    service = _get_sheets_service()
    logger.debug("Getting values %s from %s", range, spreadsheet_id)
    try:
        result = service.spreadsheets().values().get(
            spreadsheetId=spreadsheet_id, range=range, valueRenderOption=value_render_option
        ).execute()
        return _value_range(result, range)
    except HttpError as e:
        _handle_api_error(e)


def batch_get_values(
    spreadsheet_id: str, ranges: list[str], value_render_option: str = "FORMATTED_VALUE"
) -> list[ValueRange]:
    """Read several ranges in one request, in the order requested."""
    service = _get_sheets_service()
    logger.debug("Batch getting %d ranges from %s", len(ranges), spreadsheet_id)
    try:
        result = service.spreadsheets().values().batchGet(
            spreadsheetId=spreadsheet_id, ranges=ranges, valueRenderOption=value_render_option
        ).execute()
        value_ranges = result.get("valueRanges", [])
        return [_value_range(vr, requested) for vr, requested in zip(value_ranges, ranges)]
    except HttpError as e:
        _handle_api_error(e)


def update_values(
    spreadsheet_id: str, range: str, values: list[list], value_input_option: str = "USER_ENTERED"
) -> UpdateValuesResponse:
    """Write values to a range of cells."""
    service = _get_sheets_service()
    logger.info("Updating %s in %s (%d rows)", range, spreadsheet_id, len(values))
    try:
        result = service.spreadsheets().values().update(
            spreadsheetId=spreadsheet_id,
            range=range,
            valueInputOption=value_input_option,
            body={"values": values},
        ).execute()
        return UpdateValuesResponse(
            spreadsheet_id=spreadsheet_id,
            updated_range=result.get("updatedRange", range),
            updated_rows=result.get("updatedRows", 0),
            updated_columns=result.get("updatedColumns", 0),
            updated_cells=result.get("updatedCells", 0),
        )
    except HttpError as e:
        _handle_api_error(e)


def append_values(
    spreadsheet_id: str,
    range: str,
    values: list[list],
    value_input_option: str = "USER_ENTERED",
    insert_data_option: str = "INSERT_ROWS",
) -> AppendValuesResponse:
    """Append rows after the last row with data in the range."""
    service = _get_sheets_service()
    logger.info("Appending %d rows to %s in %s", len(values), range, spreadsheet_id)
    try:
        result = service.spreadsheets().values().append(
            spreadsheetId=spreadsheet_id,
            range=range,
            valueInputOption=value_input_option,
            insertDataOption=insert_data_option,
            body={"values": values},
        ).execute()
        updates = result.get("updates", {})
        return AppendValuesResponse(
            spreadsheet_id=spreadsheet_id,
            table_range=result.get("tableRange"),
            updated_range=updates.get("updatedRange", range),
            updated_rows=updates.get("updatedRows", 0),
            updated_columns=updates.get("updatedColumns", 0),
            updated_cells=updates.get("updatedCells", 0),
        )
    except HttpError as e:
        _handle_api_error(e)


def clear_values(spreadsheet_id: str, range: str) -> ClearValuesResponse:
    """Clear cell values in a range, keeping formatting."""
    service = _get_sheets_service()
    logger.info("Clearing %s in %s", range, spreadsheet_id)
    try:
        result = service.spreadsheets().values().clear(
            spreadsheetId=spreadsheet_id, range=range, body={}
        ).execute()
        return ClearValuesResponse(
            spreadsheet_id=spreadsheet_id,
            cleared_range=result.get("clearedRange", range),
        )
    except HttpError as e:
        _handle_api_error(e)


def list_sheets(spreadsheet_id: str) -> list[SheetInfo]:
    return get_spreadsheet(spreadsheet_id).sheets


def get_sheet_by_gid(spreadsheet_id: str, gid: int | str) -> SheetInfo | None:
    """Resolve a gid (the numeric sheet ID in URLs) to its sheet. Returns None if no sheet has it."""
    for sheet in list_sheets(spreadsheet_id):
        if str(sheet.sheet_id) == str(gid).strip():
            logger.info("Resolved gid %s to sheet %r", gid, sheet.title)
            return sheet
    logger.warning("No sheet with gid %s in %s", gid, spreadsheet_id)
    return None


def get_sheet_by_title(spreadsheet_id: str, title: str) -> SheetInfo | None:
    for sheet in list_sheets(spreadsheet_id):
        if sheet.title == title:
            return sheet
    return None

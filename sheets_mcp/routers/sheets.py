from fastapi import APIRouter, HTTPException, Query

from sheets_mcp.models.sheets import SearchResult, SheetInfo, SpreadsheetInfo, ValueRange
from sheets_mcp.models.tools import MatchType, ValueRenderOption
from sheets_mcp.services import search as search_service
from sheets_mcp.services import sheets as sheets_service

router = APIRouter(prefix="/api/sheets", tags=["sheets"])


@router.get("/spreadsheets/{spreadsheet_id}")
def get_spreadsheet(spreadsheet_id: str) -> SpreadsheetInfo:
    return sheets_service.get_spreadsheet(spreadsheet_id)


@router.get("/spreadsheets/{spreadsheet_id}/sheets")
def list_sheets(spreadsheet_id: str) -> list[SheetInfo]:
    return sheets_service.list_sheets(spreadsheet_id)


@router.get("/spreadsheets/{spreadsheet_id}/sheets/{gid}")
def get_sheet_by_gid(spreadsheet_id: str, gid: int) -> SheetInfo:
    sheet = sheets_service.get_sheet_by_gid(spreadsheet_id, gid)
    if sheet is None:
        raise HTTPException(status_code=404, detail=f"No sheet with gid {gid}")
    return sheet


@router.get("/spreadsheets/{spreadsheet_id}/values")
def get_values(spreadsheet_id: str, range: str, value_render_option: ValueRenderOption = "FORMATTED_VALUE") -> ValueRange:
    return sheets_service.get_values(spreadsheet_id, range, value_render_option)


@router.get("/spreadsheets/{spreadsheet_id}/search")
def search_values(
    spreadsheet_id: str,
    sheet_name: str,
    text: str,
    match_type: MatchType = "contains",
    max_results: int = Query(50, ge=1),
) -> SearchResult:
    return search_service.search_values(spreadsheet_id, sheet_name, text, match_type, max_results)

"""Parameter records for each tool, validated before a handler runs."""

from typing import Literal

from pydantic import BaseModel, Field, model_validator

from sheets_mcp.config import get_settings
from sheets_mcp.models.sheets import CellValue

ValueRenderOption = Literal["FORMATTED_VALUE", "UNFORMATTED_VALUE", "FORMULA"]
ValueInputOption = Literal["USER_ENTERED", "RAW"]
MatchType = Literal["exact", "contains"]


class ToolParams(BaseModel):
    model_config = {"extra": "forbid"}


class SpreadsheetParams(ToolParams):
    spreadsheet_id: str = Field(min_length=1, description="Spreadsheet ID or full Google Sheets URL")

    @model_validator(mode="before")
    @classmethod
    def _default_spreadsheet(cls, data):
        if isinstance(data, dict) and not data.get("spreadsheet_id"):
            default = get_settings().default_spreadsheet_id
            if default:
                return {**data, "spreadsheet_id": default}
        return data


class NoParams(ToolParams):
    pass


class CreateSpreadsheetParams(ToolParams):
    title: str = Field(min_length=1, description="Title of the spreadsheet")
    locale: str | None = Field(None, description='Locale of the spreadsheet (e.g. "en_US")')
    time_zone: str | None = Field(None, description='Time zone (e.g. "America/New_York")')


class GetSpreadsheetParams(SpreadsheetParams):
    include_grid_data: bool = Field(False, description="Whether to include cell data")


class GetValuesParams(SpreadsheetParams):
    range: str = Field(min_length=1, description='Range in A1 notation (e.g. "Sheet1!A1:B10")')
    value_render_option: ValueRenderOption = "FORMATTED_VALUE"


class BatchGetValuesParams(SpreadsheetParams):
    ranges: list[str] = Field(min_length=1, description="Ranges in A1 notation")
    value_render_option: ValueRenderOption = "FORMATTED_VALUE"


class UpdateValuesParams(SpreadsheetParams):
    range: str = Field(min_length=1, description='Range in A1 notation (e.g. "Sheet1!A1:B10")')
    values: list[list[CellValue]] = Field(description="2D array of values [[row1], [row2], ...]")
    value_input_option: ValueInputOption = "USER_ENTERED"


class AppendValuesParams(SpreadsheetParams):
    range: str = Field(min_length=1, description='Range to search for a table (e.g. "Sheet1!A:C" or "Sheet1")')
    values: list[list[CellValue]] = Field(description="2D array of values to append")
    value_input_option: ValueInputOption = "USER_ENTERED"


class RangeParams(SpreadsheetParams):
    range: str = Field(min_length=1, description='Range in A1 notation (e.g. "Sheet1!A1:B10")')


class GetSheetByGidParams(ToolParams):
    spreadsheet_id: str | None = Field(None, description="Spreadsheet ID or full Google Sheets URL")
    url: str | None = Field(None, description="Alternative to spreadsheet_id: full Google Sheets URL")
    gid: str | None = Field(None, description="Sheet ID (gid from the URL). Optional when the URL carries one.")


class SheetParams(SpreadsheetParams):
    sheet_name: str = Field(min_length=1, description='Name of the sheet (e.g. "Sheet1")')


class SheetPreviewParams(SheetParams):
    num_rows: int = Field(10, ge=1, description="Number of rows to return (capped at 50)")


class SearchValuesParams(SheetParams):
    search_text: str = Field(min_length=1, description="Text to search for")
    match_type: MatchType = "contains"
    max_results: int = Field(50, ge=1, description="Maximum number of matches to return")


class FindInColumnParams(SheetParams):
    column: str = Field(pattern=r"^[A-Za-z]{1,3}$", description="Column letter (A, B, C, ...)")
    search_text: str = Field(min_length=1, description="Text to find")
    match_type: MatchType = "contains"
    max_results: int | None = Field(None, ge=1, description="Maximum number of matches to return (default: all)")

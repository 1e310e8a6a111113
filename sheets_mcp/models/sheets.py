from pydantic import BaseModel

CellValue = str | int | float | bool | None


class SheetInfo(BaseModel):
    sheet_id: int
    title: str
    index: int = 0
    sheet_type: str = "GRID"
    row_count: int = 0
    column_count: int = 0
    frozen_row_count: int = 0
    frozen_column_count: int = 0
    hidden: bool = False
    hide_gridlines: bool = False
    right_to_left: bool = False
    tab_color: dict[str, float] | None = None

    @classmethod
    def from_api(cls, properties: dict) -> "SheetInfo":
        grid = properties.get("gridProperties", {})
        return cls(
            sheet_id=properties.get("sheetId", 0),
            title=properties.get("title", ""),
            index=properties.get("index", 0),
            sheet_type=properties.get("sheetType", "GRID"),
            row_count=grid.get("rowCount", 0),
            column_count=grid.get("columnCount", 0),
            frozen_row_count=grid.get("frozenRowCount", 0),
            frozen_column_count=grid.get("frozenColumnCount", 0),
            hidden=properties.get("hidden", False),
            hide_gridlines=grid.get("hideGridlines", False),
            right_to_left=properties.get("rightToLeft", False),
            tab_color=properties.get("tabColor"),
        )


class SpreadsheetInfo(BaseModel):
    id: str
    title: str
    locale: str | None = None
    time_zone: str | None = None
    url: str = ""
    sheets: list[SheetInfo] = []


class ValueRange(BaseModel):
    range: str
    major_dimension: str = "ROWS"
    values: list[list[CellValue]] = []


class UpdateValuesResponse(BaseModel):
    spreadsheet_id: str
    updated_range: str
    updated_rows: int = 0
    updated_columns: int = 0
    updated_cells: int = 0


class AppendValuesResponse(UpdateValuesResponse):
    table_range: str | None = None


class ClearValuesResponse(BaseModel):
    spreadsheet_id: str
    cleared_range: str


class CellMatch(BaseModel):
    cell_ref: str
    value: str
    row: int
    col: str


class SearchResult(BaseModel):
    matches: list[CellMatch]
    truncated: bool = False

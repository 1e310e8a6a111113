import json

import pytest
from unittest.mock import MagicMock

from googleapiclient.errors import HttpError

from sheets_mcp.exceptions import AuthenticationError, ConfigurationError, IntegrationError, RateLimitError
from sheets_mcp.models.sheets import (
    AppendValuesResponse,
    ClearValuesResponse,
    SheetInfo,
    SpreadsheetInfo,
    UpdateValuesResponse,
    ValueRange,
)
from sheets_mcp.services import sheets as sheets_service
from tests.conftest import SPREADSHEET_API_RESPONSE, VALUES_API_RESPONSE

UPDATE_API_RESPONSE = {
    "updatedRange": "Sheet1!A1:B2",
    "updatedRows": 2,
    "updatedColumns": 2,
    "updatedCells": 4,
}

APPEND_API_RESPONSE = {
    "tableRange": "Sheet1!A1:B2",
    "updates": {
        "updatedRange": "Sheet1!A3:B3",
        "updatedRows": 1,
        "updatedColumns": 2,
        "updatedCells": 2,
    },
}


class TestGetSpreadsheet:
    def test_returns_spreadsheet_info(self, mock_sheets_service):
        mock_sheets_service.spreadsheets().get().execute.return_value = SPREADSHEET_API_RESPONSE
        result = sheets_service.get_spreadsheet("abc123")
        assert isinstance(result, SpreadsheetInfo)
        assert result.id == "abc123"
        assert result.title == "My Sheet"
        assert result.locale == "en_US"
        assert result.time_zone == "Europe/London"
        assert [s.title for s in result.sheets] == ["Sheet1", "Scores 2024"]

    def test_sheet_properties(self, mock_sheets_service):
        mock_sheets_service.spreadsheets().get().execute.return_value = SPREADSHEET_API_RESPONSE
        second = sheets_service.get_spreadsheet("abc123").sheets[1]
        assert second.sheet_id == 1850828774
        assert second.hidden is True
        assert second.row_count == 50
        assert second.column_count == 5
        assert second.sheet_type == "GRID"
        assert second.tab_color == {"red": 1, "green": 0.5}

    def test_forwards_grid_data_flag(self, mock_sheets_service):
        mock_sheets_service.spreadsheets().get().execute.return_value = SPREADSHEET_API_RESPONSE
        sheets_service.get_spreadsheet("abc123", include_grid_data=True)
        mock_sheets_service.spreadsheets().get.assert_called_with(spreadsheetId="abc123", includeGridData=True)

    def test_single_request_without_retries(self, mock_sheets_service):
        mock_sheets_service.spreadsheets().get().execute.return_value = SPREADSHEET_API_RESPONSE
        sheets_service.get_spreadsheet("abc123")
        mock_sheets_service.spreadsheets().get().execute.assert_called_once_with()


class TestCreateSpreadsheet:
    def test_creates_spreadsheet(self, mock_sheets_service):
        mock_sheets_service.spreadsheets().create().execute.return_value = SPREADSHEET_API_RESPONSE
        result = sheets_service.create_spreadsheet("My Sheet", locale="en_US", time_zone="Europe/London")
        assert isinstance(result, SpreadsheetInfo)
        assert result.id == "abc123"
        body = mock_sheets_service.spreadsheets().create.call_args.kwargs["body"]
        assert body == {"properties": {"title": "My Sheet", "locale": "en_US", "timeZone": "Europe/London"}}

    def test_creates_with_sheet_names(self, mock_sheets_service):
        mock_sheets_service.spreadsheets().create().execute.return_value = SPREADSHEET_API_RESPONSE
        sheets_service.create_spreadsheet("My Sheet", sheet_names=["Data", "Summary"])
        body = mock_sheets_service.spreadsheets().create.call_args.kwargs["body"]
        assert body["sheets"] == [{"properties": {"title": "Data"}}, {"properties": {"title": "Summary"}}]


class TestGetValues:
    def test_returns_values(self, mock_sheets_service):
        mock_sheets_service.spreadsheets().values().get().execute.return_value = VALUES_API_RESPONSE
        result = sheets_service.get_values("abc123", "Sheet1!A1:B2")
        assert isinstance(result, ValueRange)
        assert result.values == [["Name", "Score"], ["Alice", "95"]]

    def test_empty_range(self, mock_sheets_service):
        mock_sheets_service.spreadsheets().values().get().execute.return_value = {"range": "Sheet1!A1:A1"}
        result = sheets_service.get_values("abc123", "Sheet1!A1:A1")
        assert result.values == []

    def test_range_passed_verbatim(self, mock_sheets_service):
        mock_sheets_service.spreadsheets().values().get().execute.return_value = {}
        result = sheets_service.get_values("abc123", "'My Sheet'!A1:B2", "UNFORMATTED_VALUE")
        mock_sheets_service.spreadsheets().values().get.assert_called_with(
            spreadsheetId="abc123", range="'My Sheet'!A1:B2", valueRenderOption="UNFORMATTED_VALUE"
        )
        assert result.range == "'My Sheet'!A1:B2"

    def test_unformatted_values_keep_types(self, mock_sheets_service):
        mock_sheets_service.spreadsheets().values().get().execute.return_value = {
            "range": "Sheet1!A1:C1",
            "values": [[1, 2.5, True]],
        }
        result = sheets_service.get_values("abc123", "Sheet1!A1:C1", "UNFORMATTED_VALUE")
        assert result.values == [[1, 2.5, True]]
        assert result.values[0][2] is True


class TestBatchGetValues:
    def test_returns_ranges_in_order(self, mock_sheets_service):
        mock_sheets_service.spreadsheets().values().batchGet().execute.return_value = {
            "valueRanges": [
                {"range": "Sheet1!A1:A2", "values": [["a"], ["b"]]},
                {"range": "Sheet1!B1:B1"},
            ]
        }
        result = sheets_service.batch_get_values("abc123", ["Sheet1!A1:A2", "Sheet1!B1"])
        assert [vr.range for vr in result] == ["Sheet1!A1:A2", "Sheet1!B1:B1"]
        assert result[0].values == [["a"], ["b"]]
        assert result[1].values == []


class TestUpdateValues:
    def test_writes_values(self, mock_sheets_service):
        mock_sheets_service.spreadsheets().values().update().execute.return_value = UPDATE_API_RESPONSE
        result = sheets_service.update_values("abc123", "Sheet1!A1:B2", [["X", "Y"], ["1", "2"]])
        assert isinstance(result, UpdateValuesResponse)
        assert result.updated_cells == 4
        assert result.updated_rows == 2
        kwargs = mock_sheets_service.spreadsheets().values().update.call_args.kwargs
        assert kwargs["valueInputOption"] == "USER_ENTERED"
        assert kwargs["body"] == {"values": [["X", "Y"], ["1", "2"]]}

    def test_raw_input_option(self, mock_sheets_service):
        mock_sheets_service.spreadsheets().values().update().execute.return_value = UPDATE_API_RESPONSE
        sheets_service.update_values("abc123", "Sheet1!A1", [["=1+1"]], value_input_option="RAW")
        kwargs = mock_sheets_service.spreadsheets().values().update.call_args.kwargs
        assert kwargs["valueInputOption"] == "RAW"


class TestAppendValues:
    def test_appends_rows(self, mock_sheets_service):
        mock_sheets_service.spreadsheets().values().append().execute.return_value = APPEND_API_RESPONSE
        result = sheets_service.append_values("abc123", "Sheet1!A:B", [["Bob", "25"]])
        assert isinstance(result, AppendValuesResponse)
        assert result.updated_rows == 1
        assert result.table_range == "Sheet1!A1:B2"
        kwargs = mock_sheets_service.spreadsheets().values().append.call_args.kwargs
        assert kwargs["insertDataOption"] == "INSERT_ROWS"


class TestClearValues:
    def test_clears_range(self, mock_sheets_service):
        mock_sheets_service.spreadsheets().values().clear().execute.return_value = {
            "spreadsheetId": "abc123",
            "clearedRange": "Sheet1!A1:B2",
        }
        result = sheets_service.clear_values("abc123", "Sheet1!A1:B2")
        assert isinstance(result, ClearValuesResponse)
        assert result.cleared_range == "Sheet1!A1:B2"


class TestSheetLookup:
    @pytest.fixture(autouse=True)
    def spreadsheet(self, mock_sheets_service):
        mock_sheets_service.spreadsheets().get().execute.return_value = SPREADSHEET_API_RESPONSE

    def test_list_sheets(self):
        sheets = sheets_service.list_sheets("abc123")
        assert all(isinstance(s, SheetInfo) for s in sheets)
        assert [s.sheet_id for s in sheets] == [0, 1850828774]

    @pytest.mark.parametrize("gid", ["1850828774", 1850828774])
    def test_get_sheet_by_gid(self, gid):
        sheet = sheets_service.get_sheet_by_gid("abc123", gid)
        assert sheet.title == "Scores 2024"

    def test_gid_zero(self):
        assert sheets_service.get_sheet_by_gid("abc123", "0").title == "Sheet1"

    def test_unknown_gid_returns_none(self):
        assert sheets_service.get_sheet_by_gid("abc123", "999") is None

    def test_get_sheet_by_title(self):
        assert sheets_service.get_sheet_by_title("abc123", "Sheet1").sheet_id == 0
        assert sheets_service.get_sheet_by_title("abc123", "sheet1") is None


class TestErrorHandling:
    def _make_http_error(self, status, message="boom"):
        resp = MagicMock()
        resp.status = status
        resp.reason = "Error"
        content = json.dumps({"error": {"code": status, "message": message}}).encode()
        return HttpError(resp=resp, content=content)

    def test_401_raises_auth_error(self, mock_sheets_service):
        mock_sheets_service.spreadsheets().get().execute.side_effect = self._make_http_error(401)
        with pytest.raises(AuthenticationError):
            sheets_service.get_spreadsheet("abc123")

    def test_403_raises_auth_error(self, mock_sheets_service):
        mock_sheets_service.spreadsheets().values().update().execute.side_effect = self._make_http_error(403)
        with pytest.raises(AuthenticationError) as exc_info:
            sheets_service.update_values("abc123", "A1", [["x"]])
        assert exc_info.value.status == 403

    def test_429_raises_rate_limit(self, mock_sheets_service):
        mock_sheets_service.spreadsheets().values().get().execute.side_effect = self._make_http_error(429)
        with pytest.raises(RateLimitError):
            sheets_service.get_values("abc123", "A1:B2")

    def test_error_carries_upstream_status_and_message(self, mock_sheets_service):
        mock_sheets_service.spreadsheets().values().get().execute.side_effect = self._make_http_error(
            400, "Unable to parse range: Nope!A1"
        )
        with pytest.raises(IntegrationError) as exc_info:
            sheets_service.get_values("abc123", "Nope!A1")
        assert exc_info.value.status == 400
        assert "Unable to parse range: Nope!A1" in exc_info.value.message

    def test_500_raises_integration_error(self, mock_sheets_service):
        mock_sheets_service.spreadsheets().get().execute.side_effect = self._make_http_error(500)
        with pytest.raises(IntegrationError):
            sheets_service.get_spreadsheet("abc123")

    def test_failed_request_not_retried(self, mock_sheets_service):
        execute = mock_sheets_service.spreadsheets().values().clear().execute
        execute.side_effect = self._make_http_error(503)
        with pytest.raises(IntegrationError):
            sheets_service.clear_values("abc123", "A1")
        assert execute.call_count == 1

    def test_missing_configuration_raises_auth_error(self, mocker):
        mocker.patch(
            "sheets_mcp.services.sheets.get_credential_manager",
            side_effect=ConfigurationError("GOOGLE_APPLICATION_CREDENTIALS is not set"),
        )
        with pytest.raises(AuthenticationError):
            sheets_service.get_spreadsheet("abc123")

    def test_token_failure_propagates(self, mocker):
        manager = MagicMock()
        manager.acquire.side_effect = AuthenticationError("Token exchange failed")
        mocker.patch("sheets_mcp.services.sheets.get_credential_manager", return_value=manager)
        with pytest.raises(AuthenticationError, match="Token exchange failed"):
            sheets_service.get_values("abc123", "A1")

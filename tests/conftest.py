import pytest
from unittest.mock import MagicMock

from fastapi.testclient import TestClient

from sheets_mcp.auth import get_credential_manager
from sheets_mcp.config import get_settings


# --- Canned API responses ---

SPREADSHEET_API_RESPONSE = {
    "spreadsheetId": "abc123",
    "properties": {"title": "My Sheet", "locale": "en_US", "timeZone": "Europe/London"},
    "sheets": [
        {
            "properties": {
                "sheetId": 0,
                "title": "Sheet1",
                "index": 0,
                "sheetType": "GRID",
                "gridProperties": {"rowCount": 1000, "columnCount": 26, "frozenRowCount": 1},
            }
        },
        {
            "properties": {
                "sheetId": 1850828774,
                "title": "Scores 2024",
                "index": 1,
                "hidden": True,
                "gridProperties": {"rowCount": 50, "columnCount": 5},
                "tabColor": {"red": 1, "green": 0.5},
            }
        },
    ],
    "spreadsheetUrl": "https://docs.google.com/spreadsheets/d/abc123/edit",
}

VALUES_API_RESPONSE = {
    "range": "Sheet1!A1:B2",
    "majorDimension": "ROWS",
    "values": [["Name", "Score"], ["Alice", "95"]],
}


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    """Keep the developer's environment out of the tests."""
    for var in ("GOOGLE_APPLICATION_CREDENTIALS", "DEFAULT_SPREADSHEET_ID", "READ_ONLY", "TRANSPORT"):
        monkeypatch.delenv(var, raising=False)
    get_settings.cache_clear()
    get_credential_manager.cache_clear()
    yield
    get_settings.cache_clear()
    get_credential_manager.cache_clear()


@pytest.fixture
def default_spreadsheet(monkeypatch):
    monkeypatch.setenv("DEFAULT_SPREADSHEET_ID", "default123")
    get_settings.cache_clear()
    return "default123"


@pytest.fixture
def mock_sheets_credentials(mocker):
    return mocker.patch("sheets_mcp.services.sheets.get_credential_manager", return_value=MagicMock())


@pytest.fixture
def mock_sheets_build(mocker):
    mock_svc = MagicMock()
    mocker.patch("sheets_mcp.services.sheets.build", return_value=mock_svc)
    return mock_svc


@pytest.fixture
def mock_sheets_service(mock_sheets_credentials, mock_sheets_build):
    """Fully mocked Sheets API service."""
    return mock_sheets_build


@pytest.fixture
def api_client():
    """FastAPI TestClient for router tests."""
    from sheets_mcp.main import api
    return TestClient(api)

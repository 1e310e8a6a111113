from pydantic import BaseModel, model_validator


class ErrorResponse(BaseModel):
    error_code: str
    message: str


class StatusResponse(BaseModel):
    authenticated: bool
    credential_state: str
    service_account: str | None = None
    scopes: list[str] = []
    default_spreadsheet_id: str | None = None
    message: str


class ToolResult(BaseModel):
    """Outcome of one tool call: response text in ``data`` or failure text in ``error``, never both."""

    data: str | None = None
    error: str | None = None

    @model_validator(mode="after")
    def _exactly_one(self):
        if (self.data is None) == (self.error is None):
            raise ValueError("ToolResult needs exactly one of data or error")
        return self

    @classmethod
    def ok(cls, text: str) -> "ToolResult":
        return cls(data=text)

    @classmethod
    def fail(cls, text: str) -> "ToolResult":
        return cls(error=text)

    @property
    def is_error(self) -> bool:
        return self.error is not None

    @property
    def text(self) -> str:
        return self.error if self.error is not None else self.data

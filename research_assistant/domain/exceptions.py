from __future__ import annotations


class ApiError(Exception):
    """Raised by routes to end a request with `{"error": ..., "details"?: ...}`."""

    def __init__(self, status_code: int, error: str, details: str | None = None):
        super().__init__(error)
        self.status_code = status_code
        self.error = error
        self.details = details

    def to_body(self) -> dict[str, str]:
        body = {"error": self.error}
        if self.details is not None:
            body["details"] = self.details
        return body

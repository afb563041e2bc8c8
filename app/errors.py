"""
app/errors.py

Pipeline-level exceptions surfaced to the HTTP layer.
"""

from __future__ import annotations

from app.failure_codes import FATAL_FAILURES


class FatalPipelineError(RuntimeError):
    """
    Raised when the bulk import cannot proceed at all.

    Only archival failure and identifier-resolution failure raise this;
    per-record problems are folded into the import report instead.
    """

    def __init__(self, *, code: str, detail: str, status: int = 503) -> None:
        if code not in FATAL_FAILURES:
            raise ValueError(f"Unknown fatal failure code '{code}'.")
        super().__init__(detail)
        self.code = code
        self.detail = detail
        self.status = status

    def to_dict(self) -> dict[str, object]:
        return {
            "code": self.code,
            "message": self.detail,
            "upstream_status": self.status,
        }

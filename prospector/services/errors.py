"""Error classes surfaced at the pipeline boundary."""

from __future__ import annotations


class PipelineError(RuntimeError):
    """Base exception for user-visible pipeline failures."""

    def __init__(self, message: str, code: str = "500_PIPELINE_ERROR") -> None:
        super().__init__(message)
        self.code = code

    @property
    def status_code(self) -> int:
        prefix, _, _ = self.code.partition("_")
        return int(prefix) if prefix.isdigit() else 500


class InvalidIcpError(PipelineError):
    """Raised when the ICP description is missing or too short."""

    def __init__(
        self,
        message: str = "Please provide a more detailed ICP description (at least 10 characters).",
    ) -> None:
        super().__init__(message, code="400_INVALID_ICP")


class ConfigurationError(PipelineError):
    """Raised when a required provider credential is missing."""

    def __init__(self, message: str, code: str = "500_MISSING_LLM_KEY") -> None:
        super().__init__(message, code=code)


class NoLeadsMatchedError(PipelineError):
    """Raised when no lead survives scoring."""

    def __init__(
        self,
        message: str = "No matching leads found for the provided ICP. Try broadening your criteria.",
    ) -> None:
        super().__init__(message, code="404_NO_LEADS_MATCHED")

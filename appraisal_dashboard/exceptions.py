"""Project-wide custom exception types."""


class DataUnavailableError(RuntimeError):
    """Raised when the appraisal workbook cannot be fetched or parsed."""

    def __init__(self, message: str, source: object = None) -> None:
        super().__init__(message)
        self.source = source

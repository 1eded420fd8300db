"""Application-level error types."""


class TailError(Exception):
    """Base error for ptail."""


class InvalidSelectorError(TailError):
    """Raised when a count argument is not a valid integer in range."""

    def __init__(self, text: str) -> None:
        super().__init__(text)
        self.text = text


class ConfigError(TailError):
    """Raised when options or the defaults file are invalid."""


class SourceError(TailError):
    """Per-file failure; the batch keeps going after one of these."""

    def __init__(self, name: str, detail: str) -> None:
        super().__init__(f"{name}: {detail}")
        self.name = name
        self.detail = detail


class FileOpenError(SourceError):
    """Raised when a file target cannot be opened."""


class TailIOError(SourceError):
    """Raised when reading an opened file fails."""


class UnseekableSourceError(TailIOError):
    """Raised when a source cannot be rewound for the output pass."""


class OutputError(TailError):
    """Raised when writing to the output sink fails; ends the whole run."""

    def __init__(self, detail: str, *, broken_pipe: bool = False) -> None:
        super().__init__(detail)
        self.detail = detail
        self.broken_pipe = broken_pipe

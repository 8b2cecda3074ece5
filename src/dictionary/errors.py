"""Exception types shared by the query and synchronization paths."""


class DictionaryError(Exception):
    """Base class for dictionary service errors."""


class DecodeError(DictionaryError):
    """Raised when a queue record payload cannot be decoded into a document."""

    def __init__(self, message: str, topic: str | None = None) -> None:
        """Initialize decode error.

        Args:
            message: Error message.
            topic: Topic the record was received on, if known.
        """
        super().__init__(message)
        self.topic = topic


class EngineError(DictionaryError):
    """Raised when a search engine call fails."""

    def __init__(self, message: str, index: str | None = None) -> None:
        """Initialize engine error.

        Args:
            message: Error message.
            index: Index (collection) the call targeted, if any.
        """
        super().__init__(message)
        self.index = index


class QueryError(DictionaryError):
    """Raised by the query service when a read against the engine fails."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

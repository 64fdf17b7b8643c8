class BookTrackerError(Exception):
    """Base class for errors raised by the book tracker service."""


class ConfigurationError(BookTrackerError):
    pass


class ValidationError(BookTrackerError):
    """A required book field is missing or empty."""


class NotFound(BookTrackerError):
    def __init__(self, book_id: str) -> None:
        super().__init__(f"Book {book_id} not found")
        self.book_id = book_id


class StoreUnavailable(BookTrackerError):
    """The store could not be reached or rejected the operation."""

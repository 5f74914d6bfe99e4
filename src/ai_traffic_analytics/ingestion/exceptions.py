"""
Custom exceptions for the ingestion and site registry modules.

Each maps to one HTTP status at the API boundary: ValidationError to 400
and NotFoundError to 404.
"""


class IngestionError(Exception):
    """
    Base exception for all ingestion-related errors.

    All other ingestion exceptions inherit from this class,
    allowing for broad exception catching when needed.
    """

    pass


class ValidationError(IngestionError):
    """
    Raised when an incoming payload or registry request is invalid.

    Attributes:
        field: The field name that failed validation (optional)
        value: The invalid value (optional)
        message: Detailed error message
    """

    def __init__(
        self,
        message: str,
        field: str | None = None,
        value: object | None = None,
    ):
        self.field = field
        self.value = value
        self.message = message
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the error message with field and value context."""
        if self.field and self.value is not None:
            return f"{self.message} (field='{self.field}', value={self.value!r})"
        elif self.field:
            return f"{self.message} (field='{self.field}')"
        return self.message


class NotFoundError(IngestionError):
    """
    Raised when a referenced resource (e.g. a website) does not exist.

    Attributes:
        resource: Kind of resource, e.g. 'Website'
        identifier: The id that was looked up
    """

    def __init__(self, resource: str, identifier: str | None = None):
        self.resource = resource
        self.identifier = identifier
        super().__init__(self._format_message())

    @property
    def message(self) -> str:
        """Short client-facing message without the identifier."""
        return f"{self.resource} not found"

    def _format_message(self) -> str:
        if self.identifier is not None:
            return f"{self.message} (id={self.identifier!r})"
        return self.message

"""Domain exceptions shared by services and API routes."""


class FieldOpsError(Exception):
    pass


class StoreError(FieldOpsError):
    """A read or write against the record store failed."""

    def __init__(self, message: str, *, table: str | None = None, operation: str | None = None) -> None:
        super().__init__(message)
        self.table = table
        self.operation = operation


class StoreNotConfiguredError(StoreError):
    pass


class NotFoundError(FieldOpsError):
    pass


class ValidationError(FieldOpsError):
    pass


class ConflictError(FieldOpsError):
    pass

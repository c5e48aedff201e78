class InventoryError(Exception):
    """Base for every error the inventory core reports to its caller."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(InventoryError, ValueError):
    """A required field is empty or invalid. Nothing was changed."""

    status_code = 400


class NotFoundError(InventoryError):
    status_code = 404


class PersistenceError(InventoryError):
    """The store could not durably save the change. Safe to retry."""

    status_code = 503


class ExportFailure(InventoryError):
    """Report text could not be written out as a file."""

    status_code = 500

"""Exception hierarchy shared by the logic, infra and api layers.

Each error carries a short machine code and the HTTP status the API layer
answers with (see ``pillbox.api.api_run``).
"""


class PillboxError(Exception):
    code = "error"
    status_code = 500

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message or self.__class__.__name__

    def to_dict(self) -> dict:
        return {"error": self.code, "detail": self.message}


class ConfigurationError(PillboxError):
    """Connection parameters are missing; the app cannot reach its backend."""
    code = "configuration"
    status_code = 503


class ValidationFailed(PillboxError):
    """Invalid user input, detected before any backend call."""
    code = "validation"
    status_code = 400


class BackendError(PillboxError):
    """The backend rejected an operation. ``message`` is its raw message."""
    code = "backend"
    status_code = 502


class StockLocationMissing(PillboxError):
    code = "stock_location_missing"
    status_code = 409

    def __init__(self, med_id: str, location: str):
        super().__init__(f"Stock record '{location}' missing for medication {med_id}")
        self.med_id = med_id
        self.location = location


class NotFound(PillboxError):
    code = "not_found"
    status_code = 404


class NotAuthenticated(PillboxError):
    code = "not_authenticated"
    status_code = 401

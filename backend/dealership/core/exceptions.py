"""
Domain errors.

Services raise these before writing anything; the application maps them to
JSON responses using ``status_code``. Messages carry the offending id or value
and are relied upon by callers, so keep their wording stable.
"""


class DealershipError(Exception):
    """Base class for every validation failure raised by the services"""
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFound(DealershipError):
    status_code = 404


class InvalidTransition(DealershipError):
    """Requested status is not reachable from the current one"""


class AlreadyInStatus(DealershipError):
    """Requested status equals the current one"""


class InvalidStatus(DealershipError):
    """Archive requested for a car that is not sold"""


class DuplicateStockCode(DealershipError):
    status_code = 409


class HasDependents(DealershipError):
    """Partner still referenced by transactions"""
    status_code = 409


class AlreadyInactive(DealershipError):
    """Partner was soft-deleted before"""

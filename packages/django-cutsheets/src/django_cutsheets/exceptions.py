"""Custom exceptions for django-cutsheets.

Each exception carries a stable ``code`` that is copied onto the
OperationResult returned by the public service functions.
"""


class CutSheetError(Exception):
    """Base exception for cut sheet errors."""

    code = 'error'
    default_message = 'Cut sheet operation failed'

    def __init__(self, message: str = ''):
        self.message = message or self.default_message
        super().__init__(self.message)


class NotAuthenticated(CutSheetError):
    """Raised when no actor is available for an operation."""

    code = 'not_authenticated'
    default_message = 'Not authenticated'


class NotAuthorized(CutSheetError):
    """Raised when the actor's organization may not perform an operation."""

    code = 'not_authorized'
    default_message = 'Not authorized'


class NotFound(CutSheetError):
    """Raised when a cut sheet, package or config does not exist."""

    code = 'not_found'

    def __init__(self, kind: str, identifier=None):
        self.kind = kind
        self.identifier = identifier
        super().__init__(f"{kind} not found")


class AlreadyExists(CutSheetError):
    """Raised when creating something that already exists."""

    code = 'already_exists'
    default_message = 'Already exists'


class AlreadyAdded(AlreadyExists):
    """Raised when a processor adds a cut that is already on the sheet."""

    code = 'already_added'

    def __init__(self, cut_id: str):
        self.cut_id = cut_id
        super().__init__('Cut already added')


class AlreadyRemoved(AlreadyExists):
    """Raised internally when a cut is already removed; callers treat it as success."""

    code = 'already_removed'

    def __init__(self, cut_id: str):
        self.cut_id = cut_id
        super().__init__('Cut already removed')


class InvalidState(CutSheetError):
    """Raised when an operation does not apply to the document in its current state."""

    code = 'invalid_state'


class InvalidSelection(CutSheetError):
    """Raised when cut selections violate taxonomy constraints."""

    code = 'invalid_selection'

    def __init__(self, message: str, errors=None):
        self.errors = list(errors or [])
        super().__init__(message)


class PersistenceFailure(CutSheetError):
    """Raised when the primary write of an operation fails."""

    code = 'persistence_failure'

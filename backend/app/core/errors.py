"""
Error taxonomy for the contact workflow and identity provider
"""
from typing import Dict, Optional


class SiteError(Exception):
    """Base class for errors raised by site services"""
    pass


class ValidationError(SiteError):
    """Submission rejected by the validation schema; user-correctable"""

    def __init__(self, field_errors: Dict[str, str]):
        self.field_errors = dict(field_errors)
        fields = ", ".join(sorted(self.field_errors))
        super().__init__(f"Invalid fields: {fields}")

    @property
    def fields(self):
        return set(self.field_errors)


class PersistenceError(SiteError):
    """Durable store unreachable or rejected a read/write"""
    pass


class AuthorizationError(SiteError):
    """No valid session; the request must be sent to sign-in"""

    def __init__(self, sign_in_url: str, message: Optional[str] = None):
        self.sign_in_url = sign_in_url
        super().__init__(message or "Authentication required")


class UpstreamError(SiteError):
    """Identity provider directory call failed"""
    pass


class DuplicateEmailError(SiteError):
    """An account with this email already exists"""

    def __init__(self, email: str):
        self.email = email
        super().__init__(f"Email '{email}' already exists")

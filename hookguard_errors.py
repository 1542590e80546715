from typing import Optional


class HookguardError(Exception):
    """Base class for every error raised by hookguard."""


class SignatureVerificationError(HookguardError):
    """
    Raised when a webhook header cannot be trusted.

    - sig_header: the header value that failed verification
    - http_body: the payload it was meant to cover
    """

    def __init__(self, message: str, sig_header: Optional[str] = None, http_body: Optional[bytes | str] = None):
        super().__init__(message)
        self.sig_header = sig_header
        self.http_body = http_body


class UnexpectedValueError(HookguardError, ValueError):
    """Raised when a verified payload cannot be decoded into an event."""

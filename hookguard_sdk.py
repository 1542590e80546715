import json
import logging
from datetime import timedelta
from typing import Any, Dict, Optional

from hookguard_errors import HookguardError, SignatureVerificationError, UnexpectedValueError
from hookguard_webhook import (
    EXPECTED_SCHEME,
    compute_signature,
    generate_test_header,
    parse_header,
    verify_header,
)

__all__ = [
    "DEFAULT_HEADER_NAME",
    "DEFAULT_TOLERANCE",
    "EXPECTED_SCHEME",
    "Event",
    "HookguardError",
    "SignatureVerificationError",
    "UnexpectedValueError",
    "compute_signature",
    "construct_event",
    "generate_test_header",
    "parse_header",
    "verify_header",
]

logger = logging.getLogger(__name__)

DEFAULT_TOLERANCE = 300
DEFAULT_HEADER_NAME = "Hookguard-Signature"


class Event:
    """A verified webhook event. Top-level fields are readable as attributes or items."""

    def __init__(self, data: Dict[str, Any]):
        self._data = data

    @classmethod
    def construct_from(cls, data: Any) -> "Event":
        if not isinstance(data, dict):
            raise UnexpectedValueError(f"Invalid payload: expected a JSON object, got {type(data).__name__}")
        return cls(data)

    @property
    def id(self) -> Optional[str]:
        return self._data.get("id")

    @property
    def type(self) -> Optional[str]:
        return self._data.get("type")

    @property
    def created(self) -> Optional[int]:
        return self._data.get("created")

    @property
    def data(self) -> Any:
        return self._data.get("data")

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        try:
            return self._data[name]
        except KeyError:
            raise AttributeError(name) from None

    def __getitem__(self, key: str) -> Any:
        return self._data[key]

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def to_dict(self) -> Dict[str, Any]:
        return dict(self._data)

    def __repr__(self) -> str:
        return f"<Event id={self.id!r} type={self.type!r}>"


def construct_event(
    payload: bytes | str,
    sig_header: str,
    secret: bytes | str,
    tolerance: Optional[float | timedelta] = None,
) -> Event:
    """
    Verify a webhook and decode its payload into an Event.

    - payload: raw request body, exactly as received
    - sig_header: value of the signature header
    - secret: the endpoint's shared secret
    - tolerance: seconds of clock skew allowed; None disables the check.
      Receivers should normally pass DEFAULT_TOLERANCE.

    Raises SignatureVerificationError when the header does not verify and
    UnexpectedValueError when the payload is not a JSON object.
    """
    verify_header(payload, sig_header, secret, tolerance)
    try:
        data = json.loads(payload)
    except ValueError as e:
        logger.debug("verified webhook payload is not JSON: %s", e)
        raise UnexpectedValueError(f"Invalid payload: {e}") from e
    return Event.construct_from(data)


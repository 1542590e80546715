import hashlib
import hmac
import logging
import math
import re
import time
from datetime import timedelta
from typing import NamedTuple, Optional

from hookguard_errors import SignatureVerificationError

logger = logging.getLogger(__name__)

EXPECTED_SCHEME = "v1"
# timestamps must fit a signed 64-bit integer
MAX_TIMESTAMP = 2**63 - 1

_TIMESTAMP_RE = re.compile(r"0|[1-9][0-9]*")

ERR_MALFORMED = "Unable to extract timestamp and signatures from header"
ERR_NO_SCHEME = "No signatures found with expected scheme"
ERR_NO_MATCH = "No signatures found matching the expected signature for payload"
ERR_TOLERANCE = "Timestamp outside the tolerance zone"


class ParsedHeader(NamedTuple):
    timestamp: int
    signatures: list[tuple[str, str]]


def _to_bytes(value: bytes | str) -> bytes:
    if isinstance(value, str):
        return value.encode("utf-8")
    return bytes(value)


def parse_timestamp(literal: str) -> Optional[int]:
    """Return the value of a canonical non-negative integer literal, or None."""
    if not _TIMESTAMP_RE.fullmatch(literal):
        return None
    # oversized numerals never reach int()
    if len(literal) > len(str(MAX_TIMESTAMP)):
        return None
    value = int(literal)
    if value > MAX_TIMESTAMP:
        return None
    return value


def parse_header(header: str) -> ParsedHeader:
    """
    Split a ``t=<ts>,<scheme>=<sig>,...`` header into its timestamp and
    signature pairs.

    Tokens without ``=`` are skipped. A repeated ``t`` key overwrites the
    previous one; repeated scheme keys are all kept in header order.
    """
    if not isinstance(header, str) or not header:
        raise SignatureVerificationError(ERR_MALFORMED, sig_header=header)
    raw_ts = None
    signatures: list[tuple[str, str]] = []
    for item in header.split(","):
        key, sep, value = item.partition("=")
        if not sep:
            continue
        if key == "t":
            raw_ts = value
        else:
            signatures.append((key, value))
    ts = parse_timestamp(raw_ts) if raw_ts is not None else None
    if ts is None or not signatures:
        raise SignatureVerificationError(ERR_MALFORMED, sig_header=header)
    return ParsedHeader(ts, signatures)


def compute_signature(secret: bytes | str, timestamp: int, payload: bytes | str) -> str:
    msg = f"{timestamp}.".encode() + _to_bytes(payload)
    return hmac.new(_to_bytes(secret), msg, hashlib.sha256).hexdigest()


def _tolerance_seconds(tolerance: Optional[float | timedelta]) -> Optional[float]:
    if tolerance is None:
        return None
    if isinstance(tolerance, timedelta):
        tolerance = tolerance.total_seconds()
    if not math.isfinite(tolerance) or tolerance < 0:
        raise ValueError("tolerance must be a finite non-negative number")
    return tolerance


def verify_header(
    payload: bytes | str,
    header: str,
    secret: bytes | str,
    tolerance: Optional[float | timedelta] = None,
) -> bool:
    """
    Verify a signature header against the raw payload.

    - tolerance: max allowed distance in seconds between the header timestamp
      and the local clock, in either direction. None skips the check; 0 allows no skew.

    Returns True, or raises SignatureVerificationError.
    """
    window = _tolerance_seconds(tolerance)
    try:
        parsed = parse_header(header)
    except SignatureVerificationError as e:
        logger.debug("webhook header rejected: %s", e)
        e.http_body = payload
        raise

    candidates = [sig for scheme, sig in parsed.signatures if scheme == EXPECTED_SCHEME]
    if not candidates:
        logger.debug("webhook header rejected: %s", ERR_NO_SCHEME)
        raise SignatureVerificationError(ERR_NO_SCHEME, sig_header=header, http_body=payload)

    expected = compute_signature(secret, parsed.timestamp, payload).encode()
    # constant-time compare against every candidate, no early exit
    matched = False
    for sig in candidates:
        if hmac.compare_digest(expected, sig.encode("utf-8", "replace")):
            matched = True
    if not matched:
        logger.debug("webhook header rejected: %s", ERR_NO_MATCH)
        raise SignatureVerificationError(ERR_NO_MATCH, sig_header=header, http_body=payload)

    if window is not None:
        now = int(time.time())
        if abs(now - parsed.timestamp) > window:
            logger.debug("webhook header rejected: %s (age=%ds)", ERR_TOLERANCE, now - parsed.timestamp)
            raise SignatureVerificationError(ERR_TOLERANCE, sig_header=header, http_body=payload)

    return True


def generate_test_header(
    payload: bytes | str,
    secret: bytes | str,
    timestamp: Optional[int | str] = None,
    scheme: str = EXPECTED_SCHEME,
    signature: Optional[str] = None,
) -> str:
    """Build a header a receiver will accept, for tests and local tooling."""
    ts = int(time.time()) if timestamp is None else timestamp
    if signature is None:
        signature = compute_signature(secret, ts, payload)
    return f"t={ts},{scheme}={signature}"

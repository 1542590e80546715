import json
import logging
from typing import Any, Dict, Optional

import requests

from hookguard_sdk import DEFAULT_HEADER_NAME
from hookguard_webhook import generate_test_header

logger = logging.getLogger(__name__)


class WebhookSender:
    """Signs payloads and POSTs them to a receiver, the way the platform delivers events."""

    def __init__(self, secret: bytes | str, url: str, header_name: str = DEFAULT_HEADER_NAME, timeout: float = 10):
        if not secret:
            raise ValueError("secret is required")
        if not url:
            raise ValueError("url is required")
        self.secret = secret
        self.url = url
        self.header_name = header_name
        self.timeout = timeout

    def sign(self, payload: bytes | str, timestamp: Optional[int] = None) -> str:
        return generate_test_header(payload, self.secret, timestamp=timestamp)

    def send(self, payload: bytes | str | Dict[str, Any], timestamp: Optional[int] = None) -> requests.Response:
        if isinstance(payload, dict):
            payload = json.dumps(payload)
        body = payload.encode("utf-8") if isinstance(payload, str) else payload
        headers = {
            "Content-Type": "application/json",
            self.header_name: self.sign(body, timestamp),
        }
        logger.debug("delivering webhook to %s", self.url)
        resp = requests.post(self.url, data=body, headers=headers, timeout=self.timeout)
        resp.raise_for_status()
        return resp

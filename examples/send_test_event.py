"""Post a signed sample event to a local receiver.
Requires env: HOOKGUARD_WEBHOOK_SECRET, optional HOOKGUARD_WEBHOOK_URL
"""
import os
import time

import requests

from hookguard_sender import WebhookSender

url = os.environ.get("HOOKGUARD_WEBHOOK_URL", "http://localhost:8000/webhooks")
secret = os.environ.get("HOOKGUARD_WEBHOOK_SECRET")

if not secret:
    print("Set HOOKGUARD_WEBHOOK_SECRET to the receiver's secret")
    raise SystemExit(2)

event = {"id": f"evt_{int(time.time())}", "object": "event", "type": "test.ping", "data": {}}
try:
    resp = WebhookSender(secret, url).send(event)
except requests.RequestException as e:
    print("delivery failed:", e)
    raise SystemExit(1)
print("delivered:", resp.status_code, resp.text)

import json
import unittest
from unittest.mock import patch

from hookguard_sdk import (
    DEFAULT_TOLERANCE,
    Event,
    HookguardError,
    SignatureVerificationError,
    UnexpectedValueError,
    construct_event,
    generate_test_header,
)

EVENT_PAYLOAD = """{
  "id": "evt_test_webhook",
  "object": "event"
}"""
SECRET = "whsec_test_secret"
NOW = 1700000000


class TestConstructEvent(unittest.TestCase):
    def test_valid_json_and_header(self):
        header = generate_test_header(EVENT_PAYLOAD, SECRET)
        event = construct_event(EVENT_PAYLOAD, header, SECRET)
        self.assertIsInstance(event, Event)
        self.assertEqual(event.id, "evt_test_webhook")
        self.assertEqual(event.object, "event")
        self.assertEqual(event["object"], "event")

    def test_bytes_payload(self):
        body = EVENT_PAYLOAD.encode()
        header = generate_test_header(body, SECRET)
        self.assertEqual(construct_event(body, header, SECRET).id, "evt_test_webhook")

    def test_invalid_json(self):
        payload = "this is not valid JSON"
        header = generate_test_header(payload, SECRET)
        with self.assertRaises(UnexpectedValueError) as cm:
            construct_event(payload, header, SECRET)
        self.assertIsInstance(cm.exception, ValueError)
        self.assertIsInstance(cm.exception.__cause__, json.JSONDecodeError)

    def test_invalid_utf8(self):
        payload = b"\x80{}"
        header = generate_test_header(payload, SECRET)
        with self.assertRaises(UnexpectedValueError):
            construct_event(payload, header, SECRET)

    def test_json_not_an_object(self):
        payload = "[1, 2, 3]"
        header = generate_test_header(payload, SECRET)
        with self.assertRaises(UnexpectedValueError):
            construct_event(payload, header, SECRET)

    def test_valid_json_and_invalid_header(self):
        with self.assertRaises(SignatureVerificationError):
            construct_event(EVENT_PAYLOAD, "bad_header", SECRET)

    def test_invalid_json_and_invalid_header(self):
        # signature errors win: the payload is never parsed
        with self.assertRaises(SignatureVerificationError):
            construct_event("not json", "bad_header", SECRET)

    def test_no_tolerance_by_default(self):
        header = generate_test_header(EVENT_PAYLOAD, SECRET, timestamp=12345)
        with patch("hookguard_webhook.time.time", return_value=NOW):
            self.assertEqual(construct_event(EVENT_PAYLOAD, header, SECRET).id, "evt_test_webhook")

    def test_default_tolerance_constant(self):
        stale = generate_test_header(EVENT_PAYLOAD, SECRET, timestamp=NOW - 301)
        fresh = generate_test_header(EVENT_PAYLOAD, SECRET, timestamp=NOW - 300)
        with patch("hookguard_webhook.time.time", return_value=NOW):
            with self.assertRaises(SignatureVerificationError) as cm:
                construct_event(EVENT_PAYLOAD, stale, SECRET, tolerance=DEFAULT_TOLERANCE)
            self.assertEqual(str(cm.exception), "Timestamp outside the tolerance zone")
            self.assertEqual(construct_event(EVENT_PAYLOAD, fresh, SECRET, tolerance=DEFAULT_TOLERANCE).id, "evt_test_webhook")

    def test_errors_share_base(self):
        self.assertTrue(issubclass(SignatureVerificationError, HookguardError))
        self.assertTrue(issubclass(UnexpectedValueError, HookguardError))


class TestEvent(unittest.TestCase):
    def test_fields(self):
        event = Event({"id": "evt_1", "type": "invoice.paid", "created": 12, "data": {"object": {"amount": 5}}})
        self.assertEqual(event.type, "invoice.paid")
        self.assertEqual(event.created, 12)
        self.assertEqual(event.data["object"]["amount"], 5)
        self.assertIn("id", event)
        self.assertIsNone(event.get("livemode"))
        self.assertEqual(event.to_dict()["id"], "evt_1")
        self.assertIn("evt_1", repr(event))

    def test_missing_attribute(self):
        event = Event({"id": "evt_1"})
        self.assertIsNone(event.type)
        with self.assertRaises(AttributeError):
            event.livemode
        with self.assertRaises(KeyError):
            event["livemode"]


if __name__ == "__main__":
    unittest.main()

from fastapi import FastAPI, Request, Header, HTTPException
from hookguard_sdk import DEFAULT_TOLERANCE, construct_event, SignatureVerificationError, UnexpectedValueError
import logging
import os

logger = logging.getLogger("hookguard.example")

app = FastAPI()

@app.post("/webhooks")
async def webhook(request: Request, hookguard_signature: str = Header(None)):
    secret = os.environ.get("HOOKGUARD_WEBHOOK_SECRET", "")
    body = await request.body()
    try:
        event = construct_event(body, hookguard_signature, secret, tolerance=DEFAULT_TOLERANCE)
    except SignatureVerificationError:
        raise HTTPException(status_code=400, detail="invalid signature")
    except UnexpectedValueError:
        raise HTTPException(status_code=400, detail="invalid payload")
    logger.info("webhook event %s (%s)", event.id, event.type)
    return {"ok": True, "id": event.id}

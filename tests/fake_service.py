"""In-process stand-in for the NoCaptcha verification service"""

import json
import secrets

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from nocaptcha.codec import base64url_encode


def error_response(status: int, message: str, code_message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status,
        content={"message": message, "errorCode": {"httpCode": status, "message": code_message}},
    )


def create_app(complete_status: int = 202) -> FastAPI:
    """Build a fake service that tracks pending attempts in memory"""
    app = FastAPI(title="Fake NoCaptcha Service")
    app.state.pending = {}
    app.state.completed = []

    @app.post("/v1/nocaptcha/start")
    async def start(request: Request):
        body = await request.json()
        if not body.get("id"):
            return error_response(400, "ID is required.", "Potential malformed request")

        user_id = base64url_encode(secrets.token_bytes(16))
        public_key = {
            "rp": {"name": "Singular", "id": "example.com"},
            "user": {"name": body["id"], "displayName": body["id"], "id": user_id},
            "challenge": base64url_encode(secrets.token_bytes(32)),
            "pubKeyCredParams": [{"alg": -7, "type": "public-key"}],
            "attestation": "none",
        }
        app.state.pending[user_id] = public_key
        return JSONResponse(
            status_code=201,
            content={"pubKeyCredOpts": json.dumps({"publicKey": public_key})},
        )

    @app.put("/v1/nocaptcha/complete")
    async def complete(request: Request):
        body = await request.json()
        if app.state.pending.pop(body.get("id"), None) is None:
            return error_response(400, "Unable to recognize temporary passkey", "Potential malformed request")
        if complete_status != 202:
            return error_response(complete_status, "Internal error", "Internal error")

        app.state.completed.append(body)
        return JSONResponse(status_code=202, content={})

    return app

"""HTTP transport for the two-step NoCaptcha verification protocol"""

import json
import logging
from typing import Any, Dict, Optional

import httpx
from pydantic import ValidationError

from settings import (
    ANONYMOUS_ID,
    COMPLETE_PATH,
    COMPLETE_SUCCESS_STATUS,
    NOCAPTCHA_API_URL,
    REQUEST_TIMEOUT,
    START_PATH,
    START_SUCCESS_STATUS,
)
from .codec import base64url_decode
from .models import ChallengeBundle, Outcome
from .schemas import (
    CompleteRequest,
    CreationOptionsEnvelope,
    SignedCredential,
    StartRequest,
    StartResponse,
)


logger = logging.getLogger(__name__)

JSON_HEADERS = {"Content-Type": "application/json"}


def build_challenge_bundle(pub_key_cred_opts: str) -> ChallengeBundle:
    """Reshape the service's creation options for the authenticator

    Args:
        pub_key_cred_opts: JSON string holding ``{"publicKey": {...}}``

    Returns:
        ChallengeBundle with challenge, user.id and excluded credential ids
        decoded to bytes

    Raises:
        pydantic.ValidationError: If the options are missing required fields
        ValueError: If a base64url field cannot be decoded
    """
    envelope = CreationOptionsEnvelope.model_validate_json(pub_key_cred_opts)
    public_key = envelope.publicKey

    # user.id doubles as the pending attempt identifier
    base64_id = public_key.user.id

    options = public_key.model_dump(exclude_none=True)
    options["challenge"] = base64url_decode(public_key.challenge)
    options["user"]["id"] = base64url_decode(public_key.user.id)
    options["excludeCredentials"] = [
        {**descriptor.model_dump(exclude_none=True), "id": base64url_decode(descriptor.id)}
        for descriptor in public_key.excludeCredentials or []
    ]

    return ChallengeBundle(credentials_options=options, base64_id=base64_id)


class NoCaptchaApi:
    """Client for the verification service's start/complete endpoints"""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize the API client

        Args:
            base_url: Service base URL (default: NOCAPTCHA_API_URL setting)
            timeout: Per-request timeout in seconds (default: REQUEST_TIMEOUT)
            transport: Optional httpx transport, used for testing
        """
        self.base_url = (base_url or NOCAPTCHA_API_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else REQUEST_TIMEOUT
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            headers=JSON_HEADERS,
            timeout=self.timeout,
            transport=self.transport,
        )

    async def captcha_start(self) -> Outcome[ChallengeBundle]:
        """Request a fresh challenge for an anonymous subject

        Returns:
            Outcome holding the ChallengeBundle on HTTP 201
        """
        body = StartRequest(id=ANONYMOUS_ID).model_dump()
        logger.debug(f"Requesting challenge from {self.base_url}{START_PATH}")

        try:
            async with self._client() as client:
                response = await client.post(START_PATH, json=body)

            logger.debug(f"Start response status: {response.status_code}")

            if response.status_code != START_SUCCESS_STATUS:
                return self._server_failure("start", response)

            payload = StartResponse.model_validate(response.json())
            bundle = build_challenge_bundle(payload.pubKeyCredOpts)

        except httpx.RequestError as e:
            logger.error(f"Challenge request failed: {e}")
            return Outcome.failure_network()
        except (ValidationError, ValueError) as e:
            logger.error(f"Failed to parse challenge response: {e}")
            return Outcome.failure_sorry()
        except Exception as e:
            logger.error(f"Challenge request failed unexpectedly: {e!r}")
            return Outcome.failure_sorry()

        logger.info(f"Received challenge for pending attempt {bundle.base64_id}")
        return Outcome.success(bundle)

    async def captcha_complete(
        self,
        base64_id: str,
        credential: SignedCredential,
    ) -> Outcome[Dict[str, Any]]:
        """Submit the signed credential for the pending attempt

        Args:
            base64_id: Pending attempt identifier from captcha_start
            credential: Packaged authenticator attestation

        Returns:
            Outcome holding the service's response body on HTTP 202
        """
        body = CompleteRequest(id=base64_id, pubKeyCredOpts=credential).model_dump(
            exclude_none=True
        )
        logger.debug(f"Submitting credential for pending attempt {base64_id}")

        try:
            async with self._client() as client:
                response = await client.put(COMPLETE_PATH, json=body)

            logger.debug(f"Complete response status: {response.status_code}")

            if response.status_code != COMPLETE_SUCCESS_STATUS:
                return self._server_failure("complete", response)

            payload = response.json()
            if not isinstance(payload, dict):
                logger.error(f"Unexpected completion body: {payload!r}")
                return Outcome.failure_sorry()

        except httpx.RequestError as e:
            logger.error(f"Completion request failed: {e}")
            return Outcome.failure_network()
        except ValueError as e:
            logger.error(f"Failed to parse completion response: {e}")
            return Outcome.failure_sorry()
        except Exception as e:
            logger.error(f"Completion request failed unexpectedly: {e!r}")
            return Outcome.failure_sorry()

        logger.info(f"Verification completed for pending attempt {base64_id}")
        return Outcome.success(payload)

    @staticmethod
    def _server_failure(step: str, response: httpx.Response) -> Outcome:
        """Translate an unexpected status into a failed Outcome"""
        try:
            envelope = response.json()
        except json.JSONDecodeError:
            logger.error(f"{step} failed with status {response.status_code}: {response.text}")
            return Outcome.failure_sorry()

        outcome = Outcome.failure(envelope)
        logger.error(
            f"{step} failed with status {response.status_code}: "
            f"{outcome.error_code.http_code} {outcome.error_message}"
        )
        return outcome

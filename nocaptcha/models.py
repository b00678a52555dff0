"""Domain models for the NoCaptcha verification protocol"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Generic, Optional, TypeVar

from pydantic import ValidationError

from .codec import base64url_encode
from .schemas import CredentialResponse, ErrorEnvelope, SignedCredential


logger = logging.getLogger(__name__)

T = TypeVar("T")

GENERIC_FAILURE_MESSAGE = "Sorry, something went wrong. Please try later."
NETWORK_FAILURE_MESSAGE = (
    "Sorry, it looks like your internet connection is unstable. Please try later."
)


@dataclass(frozen=True)
class ErrorCode:
    """Error classification carried by a failed Outcome

    Attributes:
        http_code: HTTP status reported by the server, or a negative local code
        message: Short classification message
    """
    http_code: int
    message: str

    @classmethod
    def from_json(cls, envelope: Any) -> "ErrorCode":
        """Build from a server error envelope

        Raises:
            pydantic.ValidationError: If the envelope has no errorCode object
        """
        parsed = ErrorEnvelope.model_validate(envelope)
        return cls(parsed.errorCode.httpCode, parsed.errorCode.message)


GENERIC_FAILURE = ErrorCode(-1, "Generic Failure")
NETWORK_FAILURE = ErrorCode(-2, "Network Failure")


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """Result of an operation that can fail

    Exactly one branch is populated: ``value`` on success, or
    ``error_code`` and ``error_message`` on failure. Use the named
    constructors rather than building instances directly.
    """
    value: Optional[T] = None
    error_message: Optional[str] = None
    error_code: Optional[ErrorCode] = None

    def is_success(self) -> bool:
        return self.value is not None

    def is_failure(self) -> bool:
        return self.error_code is not None

    @classmethod
    def success(cls, value: T) -> "Outcome[T]":
        if value is None:
            raise ValueError("A successful outcome requires a value")
        return cls(value=value)

    @classmethod
    def failure(cls, envelope: Any) -> "Outcome[T]":
        """Failure classified by the server

        Args:
            envelope: Parsed JSON error body

        Returns:
            Failure carrying the server's code and message, or the generic
            failure when the body is not an error envelope
        """
        try:
            parsed = ErrorEnvelope.model_validate(envelope)
        except ValidationError as e:
            logger.warning(f"Unrecognized error body, treating as generic failure: {e}")
            return cls.failure_sorry()

        error_code = ErrorCode(parsed.errorCode.httpCode, parsed.errorCode.message)
        message = parsed.message if parsed.message is not None else error_code.message
        return cls(error_message=message, error_code=error_code)

    @classmethod
    def failure_sorry(cls) -> "Outcome[T]":
        return cls(error_message=GENERIC_FAILURE_MESSAGE, error_code=GENERIC_FAILURE)

    @classmethod
    def failure_network(cls) -> "Outcome[T]":
        return cls(error_message=NETWORK_FAILURE_MESSAGE, error_code=NETWORK_FAILURE)


@dataclass
class ChallengeBundle:
    """Server challenge reshaped for the authenticator

    Attributes:
        credentials_options: PublicKeyCredentialCreationOptions with
            challenge, user.id and excludeCredentials[].id as bytes
        base64_id: Pending attempt identifier (the original user.id text)
    """
    credentials_options: Dict[str, Any]
    base64_id: str

    @property
    def exclude_credentials(self):
        return self.credentials_options.get("excludeCredentials", [])


@dataclass
class RegistrationCredential:
    """Credential returned by the authenticator's creation ceremony"""
    id: str
    raw_id: bytes
    client_data_json: bytes
    attestation_object: bytes
    type: str = "public-key"
    authenticator_attachment: Optional[str] = None
    client_extension_results: Dict[str, Any] = field(default_factory=dict)

    def to_signed_credential(self) -> SignedCredential:
        """Package the credential for JSON transport"""
        return SignedCredential(
            id=self.id,
            rawId=base64url_encode(self.raw_id),
            response=CredentialResponse(
                clientDataJSON=base64url_encode(self.client_data_json),
                attestationObject=base64url_encode(self.attestation_object),
            ),
            authenticatorAttachment=self.authenticator_attachment,
            type=self.type,
            clientExtensionResults=dict(self.client_extension_results or {}),
        )

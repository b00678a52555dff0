"""NoCaptcha verification client

Replaces a CAPTCHA challenge with a WebAuthn authenticator ceremony,
brokered by the NoCaptcha service's start/complete endpoints.
"""

from .codec import base64url_decode, base64url_encode
from .models import (
    ChallengeBundle,
    ErrorCode,
    GENERIC_FAILURE,
    NETWORK_FAILURE,
    Outcome,
    RegistrationCredential,
)
from .schemas import SignedCredential
from .transport import NoCaptchaApi, build_challenge_bundle
from .storage import (
    FileSessionStore,
    MemorySessionStore,
    SessionStore,
    clear_session_id,
    get_session_id,
    save_session_id,
)
from .authenticator import Authenticator, AuthenticatorError, Fido2Authenticator
from .orchestrator import (
    NullShell,
    PresentationShell,
    VerificationState,
    Verifier,
    VerifierConfig,
)

__all__ = [
    "base64url_decode",
    "base64url_encode",
    "ChallengeBundle",
    "ErrorCode",
    "GENERIC_FAILURE",
    "NETWORK_FAILURE",
    "Outcome",
    "RegistrationCredential",
    "SignedCredential",
    "NoCaptchaApi",
    "build_challenge_bundle",
    "FileSessionStore",
    "MemorySessionStore",
    "SessionStore",
    "clear_session_id",
    "get_session_id",
    "save_session_id",
    "Authenticator",
    "AuthenticatorError",
    "Fido2Authenticator",
    "NullShell",
    "PresentationShell",
    "VerificationState",
    "Verifier",
    "VerifierConfig",
]

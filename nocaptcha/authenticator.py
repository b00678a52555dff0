"""Platform authenticator capability and its fido2-backed implementation

The verification protocol treats the credential-creation ceremony as an
opaque capability: it hands over creation options and receives either a
signed credential or an exception (cancellation, unsupported device,
platform timeout).
"""

import asyncio
import logging
import threading
from functools import partial
from typing import Any, Dict, Optional, Protocol

from fido2.client import Fido2Client, UserInteraction
from fido2.hid import CtapHidDevice
from fido2.webauthn import (
    AttestationConveyancePreference,
    AuthenticatorAttachment,
    AuthenticatorSelectionCriteria,
    PublicKeyCredentialCreationOptions,
    PublicKeyCredentialDescriptor,
    PublicKeyCredentialParameters,
    PublicKeyCredentialRpEntity,
    PublicKeyCredentialType,
    PublicKeyCredentialUserEntity,
    ResidentKeyRequirement,
    UserVerificationRequirement,
)

from settings import NOCAPTCHA_ORIGIN
from .codec import base64url_encode
from .models import RegistrationCredential


logger = logging.getLogger(__name__)


class AuthenticatorError(Exception):
    """Raised when no credential could be created"""


class Authenticator(Protocol):
    """Credential-creation capability consumed by the verifier"""

    async def create(self, options: Dict[str, Any]) -> RegistrationCredential: ...


def to_fido2_options(options: Dict[str, Any]) -> PublicKeyCredentialCreationOptions:
    """Convert decoded creation options into fido2 types

    Args:
        options: Creation options with challenge, user.id and
            excludeCredentials[].id already decoded to bytes

    Returns:
        PublicKeyCredentialCreationOptions for Fido2Client.make_credential
    """
    rp = options.get("rp") or {}
    user = options["user"]

    selection = None
    criteria = options.get("authenticatorSelection")
    if criteria:
        selection = AuthenticatorSelectionCriteria(
            authenticator_attachment=(
                AuthenticatorAttachment(criteria["authenticatorAttachment"])
                if criteria.get("authenticatorAttachment") else None
            ),
            resident_key=(
                ResidentKeyRequirement(criteria["residentKey"])
                if criteria.get("residentKey") else None
            ),
            user_verification=(
                UserVerificationRequirement(criteria["userVerification"])
                if criteria.get("userVerification") else None
            ),
        )

    attestation = options.get("attestation")

    return PublicKeyCredentialCreationOptions(
        rp=PublicKeyCredentialRpEntity(name=rp.get("name", ""), id=rp.get("id")),
        user=PublicKeyCredentialUserEntity(
            name=user.get("name", ""),
            id=user["id"],
            display_name=user.get("displayName"),
        ),
        challenge=options["challenge"],
        pub_key_cred_params=[
            PublicKeyCredentialParameters(
                type=PublicKeyCredentialType(param.get("type", "public-key")),
                alg=param["alg"],
            )
            for param in options.get("pubKeyCredParams", [])
        ],
        timeout=options.get("timeout"),
        exclude_credentials=[
            PublicKeyCredentialDescriptor(
                type=PublicKeyCredentialType(descriptor.get("type", "public-key")),
                id=descriptor["id"],
            )
            for descriptor in options.get("excludeCredentials", [])
        ] or None,
        authenticator_selection=selection,
        attestation=AttestationConveyancePreference(attestation) if attestation else None,
        extensions=options.get("extensions"),
    )


class Fido2Authenticator:
    """Creates credentials on the first attached FIDO2 HID authenticator"""

    def __init__(
        self,
        origin: Optional[str] = None,
        user_interaction: Optional[UserInteraction] = None,
        device=None,
    ):
        """Initialize the authenticator

        Args:
            origin: WebAuthn origin (default: NOCAPTCHA_ORIGIN, or https://<rp.id>)
            user_interaction: Prompts shown while the device waits for a touch
            device: CTAP device to use (default: first HID device found)
        """
        self.origin = origin or NOCAPTCHA_ORIGIN or None
        self.user_interaction = user_interaction or UserInteraction()
        self.device = device

    def _find_device(self):
        if self.device is not None:
            return self.device

        device = next(CtapHidDevice.list_devices(), None)
        if device is None:
            raise AuthenticatorError("No FIDO2 authenticator found")
        logger.debug(f"Using authenticator {device}")
        return device

    def _make_credential(
        self, options: Dict[str, Any], cancel: Optional[threading.Event] = None
    ) -> RegistrationCredential:
        public_key = to_fido2_options(options)
        origin = self.origin or f"https://{public_key.rp.id}"

        client = Fido2Client(
            self._find_device(), origin, user_interaction=self.user_interaction
        )
        result = client.make_credential(public_key, event=cancel)

        credential_id = result.attestation_object.auth_data.credential_data.credential_id
        return RegistrationCredential(
            id=base64url_encode(credential_id),
            raw_id=bytes(credential_id),
            client_data_json=bytes(result.client_data),
            attestation_object=bytes(result.attestation_object),
            authenticator_attachment="cross-platform",
            client_extension_results=dict(getattr(result, "extension_results", None) or {}),
        )

    async def create(self, options: Dict[str, Any]) -> RegistrationCredential:
        """Run the creation ceremony without blocking the event loop

        Cancelling the awaiting task aborts the pending ceremony on the device.
        """
        loop = asyncio.get_running_loop()
        cancel = threading.Event()
        try:
            return await loop.run_in_executor(None, partial(self._make_credential, options, cancel))
        except asyncio.CancelledError:
            logger.info("Authenticator ceremony cancelled")
            cancel.set()
            raise

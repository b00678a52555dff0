"""Verification state machine

Drives one verification attempt: request a challenge, run the
authenticator ceremony, submit the signed credential and persist the
resulting session marker.
"""

import inspect
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional, Protocol

from .authenticator import Authenticator
from .models import Outcome
from .storage import SessionStore, get_session_id, save_session_id
from .transport import NoCaptchaApi


logger = logging.getLogger(__name__)


class VerificationState(str, Enum):
    IDLE = "idle"
    STARTING = "starting"
    AWAITING_AUTHENTICATOR = "awaiting_authenticator"
    COMPLETING = "completing"
    VERIFIED = "verified"
    FAILED = "failed"


IN_PROGRESS_STATES = frozenset({
    VerificationState.STARTING,
    VerificationState.AWAITING_AUTHENTICATOR,
    VerificationState.COMPLETING,
})


@dataclass
class VerifierConfig:
    """Notification callbacks supplied by the host

    Attributes:
        on_init: Called with no arguments when the verifier is attached
        on_verify: Called when the subject is verified; receives the
            completion Outcome after a fresh verification and no arguments
            when an existing session short-circuits it
    """
    on_init: Optional[Callable[..., Any]] = None
    on_verify: Optional[Callable[..., Any]] = None


class PresentationShell(Protocol):
    """UI sink driven by the verifier"""

    def set_loading(self, is_loading: bool) -> None: ...

    def set_error(self) -> None: ...


class NullShell:
    """Shell that renders nothing"""

    def set_loading(self, is_loading: bool) -> None:
        pass

    def set_error(self) -> None:
        pass


async def _notify(callback: Optional[Callable[..., Any]], *args) -> None:
    if callback is None:
        return
    result = callback(*args)
    if inspect.isawaitable(result):
        await result


class Verifier:
    """Runs NoCaptcha verifications for a single widget"""

    def __init__(
        self,
        api: NoCaptchaApi,
        authenticator: Authenticator,
        store: SessionStore,
        shell: Optional[PresentationShell] = None,
        config: Optional[VerifierConfig] = None,
    ):
        self.api = api
        self.authenticator = authenticator
        self.store = store
        self.shell = shell or NullShell()
        self.config = config or VerifierConfig()
        self.state = VerificationState.IDLE

    @property
    def is_busy(self) -> bool:
        """True while an attempt is in flight"""
        return self.state in IN_PROGRESS_STATES

    async def attach(self) -> bool:
        """Fire the init notification and short-circuit an existing session

        Returns:
            True if a stored session already verifies the subject
        """
        await _notify(self.config.on_init)

        session_id = get_session_id(self.store)
        if not session_id:
            return False

        logger.info("Existing verification session found, skipping verification")
        if not self.is_busy:
            self.state = VerificationState.VERIFIED
        await _notify(self.config.on_verify)
        return True

    async def init(self, config: VerifierConfig) -> bool:
        """Register the given callbacks and re-run attach

        Callbacks left as None keep their current registration.
        """
        self.config = VerifierConfig(
            on_init=config.on_init or self.config.on_init,
            on_verify=config.on_verify or self.config.on_verify,
        )
        return await self.attach()

    async def start_verification(self) -> Optional[Outcome]:
        """Run one verification attempt

        Returns:
            The failed start Outcome, or the completion Outcome; None when
            the trigger was ignored or the authenticator ceremony failed
        """
        if self.is_busy:
            logger.warning(f"Verification already in progress ({self.state.value}), ignoring trigger")
            return None

        self.state = VerificationState.STARTING
        try:
            return await self._run_attempt()
        finally:
            if self.is_busy:
                # The attempt was interrupted by an exception or cancellation
                logger.error(f"Verification attempt aborted while {self.state.value}")
                self.shell.set_loading(False)
                self.state = VerificationState.FAILED

    async def _run_attempt(self) -> Optional[Outcome]:
        self.shell.set_loading(True)
        result = await self.api.captcha_start()
        self.shell.set_loading(False)

        if result.is_failure():
            logger.error(f"Verification start failed: {result.error_message}")
            self.shell.set_error()
            self.state = VerificationState.FAILED
            return result

        bundle = result.value
        self.state = VerificationState.AWAITING_AUTHENTICATOR

        try:
            credential = await self.authenticator.create(bundle.credentials_options)
            signed_credential = credential.to_signed_credential()
        except Exception as e:
            # Cancellation and platform rejections end the attempt without
            # surfacing an error in the shell
            logger.error(f"Authenticator ceremony failed: {e!r}")
            self.state = VerificationState.FAILED
            return None

        self.state = VerificationState.COMPLETING
        self.shell.set_loading(True)
        result = await self.api.captcha_complete(bundle.base64_id, signed_credential)
        self.shell.set_loading(False)

        if result.is_failure():
            logger.error(f"Verification completion failed: {result.error_message}")
            self.shell.set_error()
            self.state = VerificationState.FAILED
            return result

        save_session_id(self.store, bundle.base64_id)
        self.state = VerificationState.VERIFIED
        logger.info("Verification succeeded")
        await _notify(self.config.on_verify, result)
        return result

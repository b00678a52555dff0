"""Tests for the fido2-backed authenticator adapter"""

import asyncio
import json
import threading
import time
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest

from nocaptcha.authenticator import Fido2Authenticator, to_fido2_options
from nocaptcha.transport import build_challenge_bundle


class FakeAttestationObject(bytes):
    """bytes carrying the parsed auth_data attribute like fido2's AttestationObject"""


def decoded_options(public_key_options):
    return build_challenge_bundle(json.dumps({"publicKey": public_key_options})).credentials_options


class TestToFido2Options:

    def test_converts_decoded_options(self, public_key_options):
        options = to_fido2_options(decoded_options(public_key_options))

        assert options.challenge == b"challenge"
        assert options.rp.id == "example.com"
        assert options.user.id == b"user-handle"
        assert options.user.display_name == "Anonymous"
        assert [p.alg for p in options.pub_key_cred_params] == [-7]
        assert [c.id for c in options.exclude_credentials] == [b"\x01\x02\x03"]
        assert options.authenticator_selection.user_verification == "preferred"
        assert options.attestation == "none"

    def test_empty_exclude_list(self, public_key_options):
        del public_key_options["excludeCredentials"]
        del public_key_options["authenticatorSelection"]

        options = to_fido2_options(decoded_options(public_key_options))

        assert not options.exclude_credentials
        assert options.authenticator_selection is None


class TestFido2Authenticator:

    @pytest.mark.asyncio
    async def test_create_packages_attestation(self, public_key_options):
        attestation = FakeAttestationObject(b"\xa3attestation")
        attestation.auth_data = SimpleNamespace(
            credential_data=SimpleNamespace(credential_id=b"\x01\x02\x03")
        )
        result = SimpleNamespace(
            client_data=b'{"type":"webauthn.create"}',
            attestation_object=attestation,
            extension_results={"credProps": {"rk": False}},
        )

        with patch("nocaptcha.authenticator.Fido2Client") as client_cls:
            client_cls.return_value.make_credential.return_value = result
            device = MagicMock()
            authenticator = Fido2Authenticator(device=device)

            credential = await authenticator.create(decoded_options(public_key_options))

        assert client_cls.call_args.args[:2] == (device, "https://example.com")
        assert credential.id == "AQID"
        assert credential.raw_id == b"\x01\x02\x03"
        assert credential.client_data_json == b'{"type":"webauthn.create"}'
        assert credential.attestation_object == b"\xa3attestation"
        assert credential.client_extension_results == {"credProps": {"rk": False}}

    @pytest.mark.asyncio
    async def test_explicit_origin_wins(self, public_key_options):
        attestation = FakeAttestationObject(b"")
        attestation.auth_data = SimpleNamespace(credential_data=SimpleNamespace(credential_id=b"\x00"))
        result = SimpleNamespace(client_data=b"", attestation_object=attestation)

        with patch("nocaptcha.authenticator.Fido2Client") as client_cls:
            client_cls.return_value.make_credential.return_value = result
            authenticator = Fido2Authenticator(origin="https://verify.example.com", device=MagicMock())
            await authenticator.create(decoded_options(public_key_options))

        assert client_cls.call_args.args[1] == "https://verify.example.com"

    @pytest.mark.asyncio
    async def test_ceremony_errors_propagate(self, public_key_options):
        with patch("nocaptcha.authenticator.Fido2Client") as client_cls:
            client_cls.return_value.make_credential.side_effect = RuntimeError("cancelled")
            authenticator = Fido2Authenticator(device=MagicMock())

            with pytest.raises(RuntimeError):
                await authenticator.create(decoded_options(public_key_options))

    @pytest.mark.asyncio
    async def test_cancelling_create_aborts_ceremony(self, public_key_options):
        entered = threading.Event()
        seen_events = []

        def make_credential(public_key, event=None):
            seen_events.append(event)
            entered.set()
            event.wait(3)
            raise RuntimeError("ceremony aborted")

        with patch("nocaptcha.authenticator.Fido2Client") as client_cls:
            client_cls.return_value.make_credential.side_effect = make_credential
            authenticator = Fido2Authenticator(device=MagicMock())

            task = asyncio.create_task(authenticator.create(decoded_options(public_key_options)))
            while not entered.is_set():
                await asyncio.sleep(0.01)

            started = time.monotonic()
            task.cancel()
            with pytest.raises(asyncio.CancelledError):
                await task

        assert seen_events[0].wait(1)
        assert time.monotonic() - started < 1

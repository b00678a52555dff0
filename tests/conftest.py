"""Shared fixtures for the NoCaptcha client tests"""

import json
from typing import Any, Dict

import pytest

from nocaptcha import (
    ChallengeBundle,
    MemorySessionStore,
    RegistrationCredential,
)


@pytest.fixture
def public_key_options() -> Dict[str, Any]:
    """Creation options as the service serializes them"""
    return {
        "rp": {"name": "Singular", "id": "example.com"},
        "user": {
            "name": "Anonymous",
            "displayName": "Anonymous",
            "id": "dXNlci1oYW5kbGU",  # b"user-handle"
        },
        "challenge": "Y2hhbGxlbmdl",  # b"challenge"
        "pubKeyCredParams": [{"alg": -7, "type": "public-key"}],
        "excludeCredentials": [{"type": "public-key", "id": "AQID"}],
        "authenticatorSelection": {
            "residentKey": "discouraged",
            "userVerification": "preferred",
        },
        "attestation": "none",
    }


@pytest.fixture
def start_body(public_key_options) -> Dict[str, Any]:
    return {"pubKeyCredOpts": json.dumps({"publicKey": public_key_options})}


@pytest.fixture
def credential() -> RegistrationCredential:
    return RegistrationCredential(
        id="AQID",
        raw_id=b"\x01\x02\x03",
        client_data_json=b'{"type":"webauthn.create"}',
        attestation_object=b"\xa3fmtdnone",
        authenticator_attachment="platform",
        client_extension_results={"credProps": {"rk": False}},
    )


@pytest.fixture
def bundle() -> ChallengeBundle:
    return ChallengeBundle(
        credentials_options={
            "challenge": b"challenge",
            "user": {"id": b"user-handle", "name": "Anonymous"},
            "excludeCredentials": [],
        },
        base64_id="dXNlci1oYW5kbGU",
    )


@pytest.fixture
def store() -> MemorySessionStore:
    return MemorySessionStore()

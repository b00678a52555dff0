"""
Pydantic models for the JSON envelopes exchanged with the verification service.
"""
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field


class ErrorCodeBody(BaseModel):
    """Server error classification"""
    httpCode: int
    message: str


class ErrorEnvelope(BaseModel):
    """Body of every non-success response"""
    message: Optional[str] = None
    errorCode: ErrorCodeBody


class StartRequest(BaseModel):
    """Body of POST /v1/nocaptcha/start"""
    id: str


class StartResponse(BaseModel):
    """Body of a 201 start response"""
    pubKeyCredOpts: str  # JSON-encoded creation options


class UserEntity(BaseModel):
    """User entity of the creation options (id is base64url)"""
    model_config = ConfigDict(extra="allow")

    id: str


class CredentialDescriptor(BaseModel):
    """Excluded credential descriptor (id is base64url)"""
    model_config = ConfigDict(extra="allow")

    id: str
    type: str = "public-key"


class PublicKeyOptions(BaseModel):
    """PublicKeyCredentialCreationOptions as sent by the service"""
    model_config = ConfigDict(extra="allow")

    challenge: str
    user: UserEntity
    excludeCredentials: Optional[List[CredentialDescriptor]] = None


class CreationOptionsEnvelope(BaseModel):
    """Decoded content of StartResponse.pubKeyCredOpts"""
    publicKey: PublicKeyOptions


class CredentialResponse(BaseModel):
    """Attestation response fields, base64url encoded"""
    clientDataJSON: str
    attestationObject: str


class SignedCredential(BaseModel):
    """Authenticator attestation reshaped for transport"""
    id: str
    rawId: str
    response: CredentialResponse
    authenticatorAttachment: Optional[str] = None
    type: str = "public-key"
    clientExtensionResults: Dict[str, Any] = Field(default_factory=dict)


class CompleteRequest(BaseModel):
    """Body of PUT /v1/nocaptcha/complete"""
    id: str
    pubKeyCredOpts: SignedCredential

"""base64url codec for credential fields exchanged with the verification service"""

import base64


def base64url_encode(value: bytes) -> str:
    """Encode bytes as unpadded base64url text

    Args:
        value: Raw binary buffer (may be empty)

    Returns:
        base64url string with trailing '=' padding stripped
    """
    return base64.urlsafe_b64encode(bytes(value)).rstrip(b"=").decode("ascii")


def base64url_decode(value: str) -> bytes:
    """Decode unpadded base64url text back into bytes

    Args:
        value: base64url string, with or without padding

    Returns:
        The original byte sequence

    Raises:
        ValueError: If the text is not valid base64url
    """
    # Pad to a multiple of 4 characters
    padded = value + "=" * (-len(value) % 4)
    return base64.b64decode(padded.encode("ascii"), altchars=b"-_", validate=True)

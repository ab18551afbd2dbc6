"""
LINE Signature Verification

SECURITY BOUNDARY - Verify the x-line-signature header.
No use case imports. No retries. No logic.

LINE signs every webhook with base64(HMAC-SHA256(channel_secret, body)).
"""

import base64
import hashlib
import hmac

LINE_SIGNATURE_HEADER = "x-line-signature"


class SignatureVerificationError(Exception):
    """Signature could not be verified (not the same as a bad signature)."""
    pass


def _to_bytes(body: str | bytes) -> bytes:
    if isinstance(body, bytes):
        return body
    return body.encode("utf-8")


def compute_signature(body: str | bytes, channel_secret: str) -> str:
    """
    Compute the signature LINE would send for this body.

    Args:
        body: Raw request body
        channel_secret: LINE channel secret

    Returns:
        Base64 encoded HMAC-SHA256 digest
    """
    digest = hmac.new(
        key=channel_secret.encode("utf-8"),
        msg=_to_bytes(body),
        digestmod=hashlib.sha256,
    ).digest()
    return base64.b64encode(digest).decode("utf-8")


def verify_signature(body: str | bytes, signature: str, channel_secret: str) -> bool:
    """
    Check a webhook body against its x-line-signature header.

    Args:
        body: Raw request body
        signature: Value of the x-line-signature header
        channel_secret: LINE channel secret

    Returns:
        True if the signature was produced with channel_secret

    Raises:
        SignatureVerificationError: Channel secret not configured
    """

    if not channel_secret:
        raise SignatureVerificationError("LINE_CHANNEL_SECRET not configured")

    expected_signature = compute_signature(body, channel_secret)

    # Compare (constant-time to prevent timing attacks)
    return hmac.compare_digest(signature.encode("utf-8"), expected_signature.encode("utf-8"))

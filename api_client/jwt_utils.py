"""
JWT payload decoding for display-only session fields
"""
import base64
import binascii
import json
import logging
from typing import Dict, Optional, Any

logger = logging.getLogger(__name__)


def decode_jwt(token: str) -> Optional[Dict[str, Any]]:
    """
    Decode JWT token without verification.

    Note: This only decodes the payload, does not verify signature.
    The result must never be used for authorization decisions.

    Args:
        token: JWT access token

    Returns:
        Decoded JWT payload as dictionary, or None if invalid
    """
    # JWT structure: header.payload.signature
    parts = token.split(".")
    if len(parts) != 3:
        logger.debug(f"Invalid JWT format: expected 3 parts, got {len(parts)}")
        return None

    payload = parts[1]

    # Add padding if needed (JWT uses base64url without padding)
    padding = 4 - (len(payload) % 4)
    if padding != 4:
        payload += "=" * padding

    try:
        decoded = json.loads(base64.urlsafe_b64decode(payload).decode("utf-8"))
    except (binascii.Error, UnicodeDecodeError, ValueError) as e:
        logger.debug(f"Error decoding JWT: {e}")
        return None

    return decoded if isinstance(decoded, dict) else None


def get_claim(token: Optional[str], *names: str) -> Optional[Any]:
    """
    Return the first present claim among names.

    Args:
        token: JWT access token (may be None)
        names: Claim names in order of preference

    Returns:
        Claim value, or None if the token is missing, invalid, or lacks every claim
    """
    if not token:
        return None

    payload = decode_jwt(token)
    if not payload:
        return None

    for name in names:
        value = payload.get(name)
        if value:
            return value
    return None

"""Token refresh and revocation against the auth endpoints"""

import logging
from typing import Any, Optional

import httpx

from utils.storage import TokenPair
from .errors import AuthExpiredError
from .models import RefreshResponse

logger = logging.getLogger(__name__)


def response_body(response: httpx.Response) -> Any:
    """Decoded JSON body, falling back to text for non-JSON responses"""
    try:
        return response.json()
    except ValueError:
        return response.text


async def refresh_tokens(
    client: httpx.AsyncClient,
    refresh_token: Optional[str],
    api_prefix: str = ""
) -> TokenPair:
    """Exchange a refresh token for a new token pair

    Args:
        client: HTTP client bound to the API base URL
        refresh_token: Stored refresh token
        api_prefix: Versioned base path of the API

    Returns:
        The newly issued token pair

    Raises:
        AuthExpiredError: If there is no refresh token or the refresh fails
    """
    if not refresh_token:
        logger.warning("No refresh token available for refresh")
        raise AuthExpiredError("No refresh token available")

    logger.info("Attempting to refresh access token...")
    try:
        response = await client.post(
            f"{api_prefix}/auth/refresh",
            json={"refreshToken": refresh_token},
            headers={"Content-Type": "application/json"}
        )
    except httpx.RequestError as e:
        logger.error(f"Token refresh request failed: {e}")
        raise AuthExpiredError(f"Token refresh request failed: {e}") from e

    if not response.is_success:
        logger.error(f"Token refresh failed with status {response.status_code}: {response.text}")
        raise AuthExpiredError(f"Token refresh failed with status {response.status_code}")

    try:
        token_data = RefreshResponse.model_validate(response.json())
    except ValueError as e:
        logger.error(f"Failed to parse token refresh response: {e}")
        raise AuthExpiredError("Malformed token refresh response") from e

    logger.info("Successfully refreshed access token")
    return TokenPair(
        access_token=token_data.access_token,
        refresh_token=token_data.refresh_token,
    )


async def revoke_refresh_token(
    client: httpx.AsyncClient,
    refresh_token: str,
    api_prefix: str = ""
) -> bool:
    """Tell the server to forget a refresh token

    Best effort: failures are logged and reported as False, never raised.
    """
    try:
        response = await client.post(
            f"{api_prefix}/auth/logout",
            json={"refreshToken": refresh_token},
            headers={"Content-Type": "application/json"}
        )
    except httpx.HTTPError as e:
        logger.error(f"Logout API call failed: {e}")
        return False

    if not response.is_success:
        logger.error(f"Logout API call failed with status {response.status_code}")
        return False
    return True

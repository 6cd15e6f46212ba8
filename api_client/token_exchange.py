"""Credential login: exchanges email and password for a token pair"""

import logging

import httpx

from .errors import ApiClientError, HttpError, NetworkError
from .models import LoginResponse
from .token_refresh import response_body

logger = logging.getLogger(__name__)


async def exchange_credentials(
    client: httpx.AsyncClient,
    email: str,
    password: str,
    api_prefix: str = ""
) -> LoginResponse:
    """Log in with email (or username) and password

    Args:
        client: HTTP client bound to the API base URL
        email: Email address or username
        password: Account password
        api_prefix: Versioned base path of the API

    Returns:
        Parsed login response with both tokens and the user profile

    Raises:
        NetworkError: If no response was received
        HttpError: If the server rejected the credentials
        ApiClientError: If the response body is not a login response
    """
    try:
        response = await client.post(
            f"{api_prefix}/auth/login",
            json={"email": email, "password": password},
            headers={"Content-Type": "application/json"}
        )
    except httpx.RequestError as e:
        raise NetworkError(f"Login request failed: {e}", e) from e

    if not response.is_success:
        logger.warning(f"Login failed with status {response.status_code}")
        raise HttpError(response.status_code, response_body(response))

    try:
        login_data = LoginResponse.model_validate(response.json())
    except ValueError as e:
        raise ApiClientError(f"Malformed login response: {e}") from e

    logger.info("Login succeeded, storing session tokens...")
    return login_data

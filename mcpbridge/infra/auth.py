"""OAuth bearer-token gate for the MCP endpoint."""

from fastapi import HTTPException, Request, status

from mcpbridge.models.server_config import OAuthConfig

PROTECTED_RESOURCE_PATH = "/.well-known/oauth-protected-resource"


def canonical_base_url(request: Request) -> str:
    """Scheme and host the client used to reach this server."""
    scheme = request.headers.get("x-forwarded-proto") or request.url.scheme
    host = request.headers.get("host") or request.url.netloc
    return f"{scheme}://{host}"


def www_authenticate(request: Request, error: str, description: str) -> str:
    resource_metadata = canonical_base_url(request) + PROTECTED_RESOURCE_PATH
    return (
        f'Bearer, error="{error}", error_description="{description}", '
        f'resource_metadata="{resource_metadata}"'
    )


def protected_resource_metadata(request: Request, oauth: OAuthConfig) -> dict:
    """RFC 9728 protected resource metadata for the MCP endpoint."""
    return {
        "resource": canonical_base_url(request) + "/mcp",
        "authorization_servers": list(oauth.authorization_servers),
    }


async def require_bearer_token(request: Request) -> None:
    """
    Require an Authorization: Bearer header when OAuth is enabled.

    Only the presence of a bearer token is checked; tokens are not verified.

    Raises:
        HTTPException: 401 with a WWW-Authenticate discovery hint
    """
    oauth: OAuthConfig = request.app.state.server_config.security.oauth
    if not oauth.enabled:
        return

    # SECURITY: Never log the token itself
    authorization = request.headers.get("Authorization", "")
    if not authorization.lower().startswith("bearer ") or not authorization[7:].strip():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing bearer token",
            headers={"WWW-Authenticate": www_authenticate(request, "invalid_token", "Missing bearer token")},
        )

"""Shared FastAPI dependencies."""

from fastapi import Depends, Header, HTTPException, Request, status

from farm_assistant.containers import AppContainer
from farm_assistant.services.auth import ANONYMOUS, CallerContext, parse_bearer_token


def get_container(request: Request) -> AppContainer:
    """Return the dependency container attached to the app."""
    return request.app.state.container


def get_caller(
    authorization: str | None = Header(default=None),
    container: AppContainer = Depends(get_container),
) -> CallerContext:
    """Resolve the caller from a bearer token, or anonymous."""
    token = parse_bearer_token(authorization)
    if token is None:
        return ANONYMOUS
    return container.token_verifier.verify(token)


def require_caller(caller: CallerContext = Depends(get_caller)) -> CallerContext:
    """Ensure the request carries a valid bearer token."""
    if not caller.is_authenticated:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User must be authenticated",
        )
    return caller

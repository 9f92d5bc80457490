"""Header token auth for API routes."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import Depends, Header, HTTPException, Request, status

from calorie_tracker.config import fingerprint

if TYPE_CHECKING:
    from calorie_tracker.containers import AppContainer


def _get_auth_token(request: Request) -> str:
    container: AppContainer = request.app.state.container
    return container.settings.auth_token


async def require_token(
    x_auth_token: str | None = Header(default=None),
    auth_token: str = Depends(_get_auth_token),
) -> None:
    """Ensure requests include the configured auth token."""
    if not x_auth_token or x_auth_token != auth_token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={
                "ok": False,
                "error": "Unauthorized",
                "auth": {
                    "provided": "present" if x_auth_token else "missing",
                    "provided_fp": fingerprint(x_auth_token),
                    "expected_fp": fingerprint(auth_token),
                },
            },
        )

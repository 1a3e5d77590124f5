"""Helpers for reading caller details off a request."""

from fastapi import Request


def get_client_info(request: Request) -> tuple[str | None, str | None]:
    """Return (user agent, client ip), honouring X-Forwarded-For."""
    user_agent = request.headers.get("user-agent")
    forwarded_for = request.headers.get("x-forwarded-for")
    if forwarded_for:
        ip_address = forwarded_for.split(",")[0].strip()
    else:
        ip_address = request.headers.get("x-real-ip") or (
            request.client.host if request.client else None
        )
    return user_agent, ip_address

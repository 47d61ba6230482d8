# noteshub/core/notifications.py
from fastapi import Request

_KEY = "_flashes"


def flash(request: Request, title: str, description: str = "", variant: str = "default") -> None:
    """Queue a notification for the next rendered page."""
    queued = request.session.get(_KEY, [])
    queued.append({"title": title, "description": description, "variant": variant})
    request.session[_KEY] = queued


def flash_error(request: Request, title: str, exc: Exception) -> None:
    flash(request, title, str(exc), variant="destructive")


def pop_flashes(request: Request) -> list:
    return request.session.pop(_KEY, [])

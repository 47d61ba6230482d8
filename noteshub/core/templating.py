# noteshub/core/templating.py
from pathlib import Path

from fastapi import Request
from fastapi.templating import Jinja2Templates

from noteshub.core.notifications import pop_flashes

BASE_DIR = Path(__file__).resolve().parent.parent

templates = Jinja2Templates(directory=str(BASE_DIR / "templates"))


def render(request: Request, name: str, context: dict = None, status_code: int = 200):
    context = dict(context or {})
    context.setdefault("account", getattr(request.state, "account", None))
    context["messages"] = pop_flashes(request)
    return templates.TemplateResponse(request, name, context, status_code=status_code)

"""
Template rendering utilities
"""
from datetime import datetime
from pathlib import Path
from typing import Optional

from fastapi import Request
from fastapi.templating import Jinja2Templates

from app.core.config import get_settings

# Project root: backend/app/core/templates.py -> ../../../..
BASE_DIR = Path(__file__).resolve().parent.parent.parent.parent
TEMPLATES_DIR = Path(get_settings().templates_dir or BASE_DIR / "frontend" / "templates")

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


def friendly_datetime(value: Optional[datetime]) -> str:
    """Format like 'Mar 5, 2025 at 3:07 PM'"""
    if value is None:
        return ""
    hour = value.hour % 12 or 12
    return f"{value:%b} {value.day}, {value:%Y} at {hour}:{value:%M} {value:%p}"


templates.env.filters["friendly_datetime"] = friendly_datetime
templates.env.globals["site_name"] = get_settings().app_name
templates.env.globals["current_year"] = lambda: datetime.now().year


def render_template(template_name: str, context: dict, request: Request, status_code: int = 200):
    """Render template with context"""
    return templates.TemplateResponse(
        request,
        template_name,
        context,
        status_code=status_code,
    )

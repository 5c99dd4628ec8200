"""Shared dependencies for the admin routes."""

from fastapi.requests import Request

from ..host import HostServices
from ..template_loader import TemplateLoader


def get_host(request: Request) -> HostServices:
    """Host services attached to the running application."""
    return request.app.state.host


def get_templates(request: Request) -> TemplateLoader:
    return request.app.state.templates

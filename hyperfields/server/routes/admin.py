"""Admin pages and the options save endpoint."""

from __future__ import annotations

import logging
from typing import Any, Dict, List
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.requests import Request
from fastapi.responses import HTMLResponse, RedirectResponse
from markupsafe import Markup

from ...host import HostServices
from ...options.request import ACTIVE_TAB_KEY, RequestInput, bind_request, parse_form_items
from ...template_loader import TemplateLoader
from ..dependencies import get_host, get_templates

router = APIRouter(prefix="/admin", tags=["admin"])
logger = logging.getLogger(__name__)

REFERER_KEY = "_wp_http_referer"


@router.get("/pages")
async def list_pages(host: HostServices = Depends(get_host)) -> List[Dict[str, Any]]:
    """Registered admin pages in menu order."""
    pages = []
    for entry in host.menu.entries():
        data = entry.to_dict()
        data["url"] = f"{host.admin_url}{entry.slug}"
        pages.append(data)
    return pages


@router.post("/options.php")
async def save_options(request: Request, host: HostServices = Depends(get_host)):
    """Persist a submitted options form and send the browser back to its page."""
    form = await request.form()
    post = parse_form_items(form.multi_items())

    option_page = post.get("option_page")
    nonce = post.get("_wpnonce")
    if not isinstance(option_page, str) or not isinstance(nonce, str) or not host.nonce.verify(nonce, option_page):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="The link you followed has expired.")

    if host.settings.get_setting(option_page) is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Unknown option page '{option_page}'")

    raw_input = post.get(option_page)
    if not isinstance(raw_input, dict):
        raw_input = {}

    with bind_request(RequestInput(post=post, query=dict(request.query_params))):
        host.settings.save(option_page, raw_input)

    referer = post.get(REFERER_KEY)
    if not isinstance(referer, str) or not referer.startswith(host.admin_url):
        referer = f"{host.admin_url}pages"

    params = {"settings-updated": "true"}
    active_tab = post.get(ACTIVE_TAB_KEY)
    if isinstance(active_tab, str) and active_tab:
        params["tab"] = active_tab
    separator = "&" if "?" in referer else "?"
    return RedirectResponse(url=f"{referer}{separator}{urlencode(params)}", status_code=status.HTTP_303_SEE_OTHER)


@router.get("/{slug}", response_class=HTMLResponse)
async def render_admin_page(
    slug: str,
    request: Request,
    host: HostServices = Depends(get_host),
    templates: TemplateLoader = Depends(get_templates),
):
    entry = host.menu.get(slug)
    if entry is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Admin page '{slug}' not found")
    if not host.current_user_can(entry.capability):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Sorry, you are not allowed to access this page.",
        )

    # Assets are collected per screen; the queue is rebuilt for every render.
    host.assets.reset()
    try:
        host.hooks.do("admin_enqueue_scripts", entry.screen_id)
        with bind_request(RequestInput(query=dict(request.query_params))):
            body = entry.callback()
    except Exception as exc:
        logger.error("Failed to render admin page '%s': %s", slug, exc, exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to render page") from exc

    tags = host.assets.render_tags()
    html = templates.render(
        "admin_layout.html",
        {
            "title": entry.page_title,
            "head_tags": tags["head"],
            "body": Markup(body),
            "footer_tags": tags["footer"],
        },
    )
    return HTMLResponse(content=html)

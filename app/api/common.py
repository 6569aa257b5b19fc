"""
app/api/common.py

Purpose: Helpers shared by the page routers

- Resolves the visitor behind a request (cookie -> VisitorContext)
- Renders JSON views and 303 redirects
"""

from typing import Any, Dict, Optional

from fastapi import Depends, Request
from fastapi.responses import JSONResponse, RedirectResponse

from app.core.config import settings
from app.schemas.response import ViewResponse
from app.services.visitor_service import VisitorContext, VisitorService, get_visitor_service


async def get_visitor(
    request: Request,
    service: VisitorService = Depends(get_visitor_service)
) -> VisitorContext:
    """
    Dependency: the visitor of this request.
    The visitor cookie is (re)issued by the middleware in app.main.
    """
    visitor = await service.get_or_create(request.cookies.get(settings.VISITOR_COOKIE_NAME))
    request.state.visitor = visitor
    return visitor


def see_other(location: str) -> RedirectResponse:
    return RedirectResponse(url=location, status_code=303)


def render(
    visitor: VisitorContext,
    view: str,
    path: str,
    state: Optional[Dict[str, Any]] = None
) -> JSONResponse:
    user = visitor.session.user
    return JSONResponse(
        content=ViewResponse(
            view=view,
            path=path,
            user=user.summary() if user else None,
            state=state or {},
        ).model_dump()
    )

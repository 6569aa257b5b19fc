"""
app/api/pages.py

Purpose: Guarded pages

- Every gated page runs the route guard before it renders
- /onboarding collects and submits the profile draft
- Redirects use 303 so that a POST lands on a GET
"""

from typing import Any, Dict

from fastapi import APIRouter, Body, Depends

from app.api.common import get_visitor, render, see_other
from app.core.logging import get_logger
from app.flow.guard import GuardAction, GuardDecision, evaluate_guard
from app.flow.routes import GATED_ROUTES, ONBOARDING_ROUTE, GatedRoute
from app.services.visitor_service import VisitorContext

logger = get_logger(__name__)
router = APIRouter()


def guard(visitor: VisitorContext, route: GatedRoute) -> GuardDecision:
    decision = evaluate_guard(visitor.session, route.requirements, route.path)
    if decision.action is GuardAction.REDIRECT:
        with visitor.log_context():
            logger.info(f"Guard redirect {route.path} -> {decision.location} ({decision.reason})")
    return decision


def guarded_response(visitor: VisitorContext, route: GatedRoute, decision: GuardDecision):
    """Response for any decision other than RENDER."""
    if decision.action is GuardAction.LOADING:
        return render(visitor, "loading", route.path, {"isLoading": True})
    return see_other(decision.location)


# ============================================================
# ONBOARDING
# ============================================================

@router.get(ONBOARDING_ROUTE.path)
async def onboarding_page(visitor: VisitorContext = Depends(get_visitor)):
    decision = guard(visitor, ONBOARDING_ROUTE)
    if decision.action is not GuardAction.RENDER:
        return guarded_response(visitor, ONBOARDING_ROUTE, decision)

    result = visitor.onboarding().view(visitor.session.user)
    return render(visitor, ONBOARDING_ROUTE.view, ONBOARDING_ROUTE.path, result.to_state())


@router.post(ONBOARDING_ROUTE.path)
async def submit_onboarding(
    data: Dict[str, Any] = Body(...),
    visitor: VisitorContext = Depends(get_visitor)
):
    async with visitor.lock:
        decision = guard(visitor, ONBOARDING_ROUTE)
        if decision.action is not GuardAction.RENDER:
            return guarded_response(visitor, ONBOARDING_ROUTE, decision)

        with visitor.log_context():
            result = await visitor.onboarding().submit(visitor.session.user, data)

    if result.redirect:
        return see_other(result.redirect)
    return render(visitor, ONBOARDING_ROUTE.view, ONBOARDING_ROUTE.path, result.to_state())


# ============================================================
# GATED PAGES
# ============================================================

def make_page_endpoint(route: GatedRoute):
    async def page(visitor: VisitorContext = Depends(get_visitor)):
        decision = guard(visitor, route)
        if decision.action is not GuardAction.RENDER:
            return guarded_response(visitor, route, decision)
        return render(visitor, route.view, route.path)

    page.__name__ = route.view.replace("-", "_")
    return page


for _route in GATED_ROUTES.values():
    if _route is ONBOARDING_ROUTE:
        continue
    router.add_api_route(_route.path, make_page_endpoint(_route), methods=["GET"])

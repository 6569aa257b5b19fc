"""
app/flow/routes.py

Purpose: Declared requirements of every gated page
"""

from dataclasses import dataclass
from typing import Dict, Optional

from app.flow.guard import RouteRequirements
from app.models.user import Role
from utils.constants import (
    ADMIN_DASHBOARD_PATH,
    EMPLOYER_DASHBOARD_PATH,
    JOB_SEEKER_DASHBOARD_PATH,
    JOB_SEEKER_HOME_PATH,
    ONBOARDING_PATH,
)


@dataclass(frozen=True)
class GatedRoute:
    path: str
    view: str
    requirements: RouteRequirements


def _route(path: str, view: str, role: Optional[Role] = None, onboarding: bool = False) -> GatedRoute:
    return GatedRoute(
        path=path,
        view=view,
        requirements=RouteRequirements(require_onboarding=onboarding, require_role=role),
    )


ONBOARDING_ROUTE = _route(ONBOARDING_PATH, "onboarding", onboarding=True)

GATED_ROUTES: Dict[str, GatedRoute] = {
    route.path: route
    for route in [
        ONBOARDING_ROUTE,
        _route(JOB_SEEKER_HOME_PATH, "job-seeker-home", Role.JOB_SEEKER),

        # Employer area
        _route(EMPLOYER_DASHBOARD_PATH, "employer-dashboard", Role.EMPLOYER),
        _route("/employer/post-job", "employer-post-job", Role.EMPLOYER),
        _route("/employer/my-jobs", "employer-my-jobs", Role.EMPLOYER),
        _route("/employer/applications", "employer-applications", Role.EMPLOYER),
        _route("/employer/candidates", "employer-candidates", Role.EMPLOYER),
        _route("/employer/profile", "employer-profile", Role.EMPLOYER),

        # Job seeker area
        _route(JOB_SEEKER_DASHBOARD_PATH, "job-seeker-dashboard", Role.JOB_SEEKER),
        _route("/job-seeker/applications", "job-seeker-applications", Role.JOB_SEEKER),
        _route("/job-seeker/saved-jobs", "job-seeker-saved-jobs", Role.JOB_SEEKER),
        _route("/job-seeker/profile", "job-seeker-profile", Role.JOB_SEEKER),

        # Admin area
        _route(ADMIN_DASHBOARD_PATH, "admin-dashboard", Role.ADMIN),
        _route("/admin/users", "admin-users", Role.ADMIN),
        _route("/admin/jobs", "admin-jobs", Role.ADMIN),
        _route("/admin/applications", "admin-applications", Role.ADMIN),
        _route("/admin/analytics", "admin-analytics", Role.ADMIN),
        _route("/admin/settings", "admin-settings", Role.ADMIN),
        _route("/admin/create-admin", "admin-create-admin", Role.ADMIN),
    ]
}

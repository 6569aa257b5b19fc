"""
app/api/auth.py

Purpose: Login, signup and password pages

- GET renders the current step of the visitor's flow
- POST actions drive the flow and render its next step
- Visitors who are already signed in are sent to their landing page
- Session-changing actions hold the visitor lock; navigation does not
"""

from fastapi import APIRouter, Depends

from app.api.common import get_visitor, render, see_other
from app.core.exceptions import EmployMeError
from app.flow.guard import landing_path_for
from app.flow.signup import FlowResult
from app.schemas.auth import (
    EmailRequest,
    LoginRequest,
    RegisterRequest,
    ResetPasswordRequest,
    RoleSelectionRequest,
    VerifyEmailRequest,
)
from app.services.visitor_service import VisitorContext
from utils.constants import GENERIC_ERROR_MESSAGE, LOGIN_PATH, SIGNUP_PATH

router = APIRouter()


def flow_response(visitor: VisitorContext, view: str, path: str, result: FlowResult):
    """
    An explicit redirect from the flow wins; otherwise a signed-in visitor
    leaves the page for their landing page.
    """
    if result.redirect:
        return see_other(result.redirect)
    user = visitor.session.user
    if user is not None:
        return see_other(landing_path_for(user))
    return render(visitor, view, path, result.to_state())


# ============================================================
# LOGIN
# ============================================================

@router.get(LOGIN_PATH)
async def login_page(visitor: VisitorContext = Depends(get_visitor)):
    return flow_response(visitor, "login", LOGIN_PATH, visitor.login.view())


@router.post(LOGIN_PATH)
async def submit_login(body: LoginRequest, visitor: VisitorContext = Depends(get_visitor)):
    async with visitor.lock:
        with visitor.log_context(step=visitor.login.step.value):
            result = await visitor.login.login(body.email, body.password)
    return flow_response(visitor, "login", LOGIN_PATH, result)


@router.post(f"{LOGIN_PATH}/verify")
async def verify_from_login(body: VerifyEmailRequest, visitor: VisitorContext = Depends(get_visitor)):
    async with visitor.lock:
        with visitor.log_context(step=visitor.login.step.value):
            result = await visitor.login.verify(body.code)
    return flow_response(visitor, "login", LOGIN_PATH, result)


@router.post(f"{LOGIN_PATH}/resend")
async def resend_from_login(visitor: VisitorContext = Depends(get_visitor)):
    result = await visitor.login.resend_code()
    return flow_response(visitor, "login", LOGIN_PATH, result)


@router.post(f"{LOGIN_PATH}/back")
async def back_to_login(visitor: VisitorContext = Depends(get_visitor)):
    return flow_response(visitor, "login", LOGIN_PATH, visitor.login.back_to_login())


# ============================================================
# SIGNUP
# ============================================================

@router.get(SIGNUP_PATH)
async def signup_page(visitor: VisitorContext = Depends(get_visitor)):
    return flow_response(visitor, "signup", SIGNUP_PATH, visitor.signup.view())


@router.post(f"{SIGNUP_PATH}/role")
async def select_role(body: RoleSelectionRequest, visitor: VisitorContext = Depends(get_visitor)):
    return flow_response(visitor, "signup", SIGNUP_PATH, visitor.signup.select_role(body.role))


@router.post(f"{SIGNUP_PATH}/register")
async def submit_registration(body: RegisterRequest, visitor: VisitorContext = Depends(get_visitor)):
    async with visitor.lock:
        with visitor.log_context(step=visitor.signup.step.value):
            result = await visitor.signup.register(
                body.email,
                body.password,
                body.first_name,
                body.last_name
            )
    return flow_response(visitor, "signup", SIGNUP_PATH, result)


@router.post(f"{SIGNUP_PATH}/verify")
async def verify_from_signup(body: VerifyEmailRequest, visitor: VisitorContext = Depends(get_visitor)):
    async with visitor.lock:
        with visitor.log_context(step=visitor.signup.step.value):
            result = await visitor.signup.verify(body.code)
    return flow_response(visitor, "signup", SIGNUP_PATH, result)


@router.post(f"{SIGNUP_PATH}/resend")
async def resend_from_signup(visitor: VisitorContext = Depends(get_visitor)):
    result = await visitor.signup.resend_code()
    return flow_response(visitor, "signup", SIGNUP_PATH, result)


@router.post(f"{SIGNUP_PATH}/back")
async def back_to_role_selection(visitor: VisitorContext = Depends(get_visitor)):
    return flow_response(visitor, "signup", SIGNUP_PATH, visitor.signup.back_to_role_selection())


# ============================================================
# LOGOUT & PASSWORD
# ============================================================

@router.post("/logout")
async def logout(visitor: VisitorContext = Depends(get_visitor)):
    async with visitor.lock:
        with visitor.log_context():
            await visitor.auth.logout()
    return see_other(LOGIN_PATH)


@router.post("/forgot-password")
async def forgot_password(body: EmailRequest, visitor: VisitorContext = Depends(get_visitor)):
    try:
        response = await visitor.auth.forgot_password(body.email)
        state = {"notice": response.get("message"), "error": None}
    except EmployMeError as e:
        state = {"notice": None, "error": e.message or GENERIC_ERROR_MESSAGE}
    return render(visitor, "forgot-password", "/forgot-password", state)


@router.post("/reset-password")
async def reset_password(body: ResetPasswordRequest, visitor: VisitorContext = Depends(get_visitor)):
    try:
        response = await visitor.auth.reset_password(body.code, body.new_password)
        state = {"notice": response.get("message"), "error": None}
    except EmployMeError as e:
        state = {"notice": None, "error": e.message or GENERIC_ERROR_MESSAGE}
    return render(visitor, "reset-password", "/reset-password", state)

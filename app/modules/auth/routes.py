from fastapi import APIRouter, Depends, HTTPException, Request, Response
from app.database.supabase_client import get_supabase, get_auth_client
from app.modules.auth.schemas import (
    SetSessionRequest, LoginRequest, LoginResponse, RegisterRequest,
    VerifyOtpRequest, ResetPasswordRequest, UpdatePasswordRequest, GuardResponse
)
from app.modules.auth.service import AuthService
from app.core.acl import get_default_route
from app.core.dependencies import (
    get_auth_service, get_current_user_id, get_user_profile, resolve_user_role, _get_request_cache
)
from app.core.route_guard import resolve_guard_redirect
from app.core.session import set_session_cookies, clear_session_cookies, get_session_token
from supabase import Client
from typing import Dict

router = APIRouter(prefix="/auth", tags=["auth"])


def get_auth_flow_service(
    supabase: Client = Depends(get_supabase),
    auth_client: Client = Depends(get_auth_client)
) -> AuthService:
    """AuthService whose sign-in calls go through a per-request anon client"""
    return AuthService(supabase, auth_client)


@router.post("/set-session")
async def set_session(
    body: SetSessionRequest,
    response: Response,
    service: AuthService = Depends(get_auth_flow_service)
):
    """Store a token pair obtained by the browser (magic link, recovery link) as session cookies"""
    if not body.access_token or not body.refresh_token:
        raise HTTPException(status_code=400, detail="Missing tokens")
    tokens = service.set_session(body.access_token, body.refresh_token)
    set_session_cookies(response, tokens["access_token"], tokens["refresh_token"])
    return {"ok": True}


@router.post("/login", response_model=LoginResponse)
async def login(
    login_data: LoginRequest,
    request: Request,
    response: Response,
    service: AuthService = Depends(get_auth_flow_service),
    supabase: Client = Depends(get_supabase)
):
    """Sign in with e-mail and password and open a cookie session"""
    auth_response = service.login(login_data)
    session = auth_response.session
    set_session_cookies(response, session.access_token, session.refresh_token)

    user = auth_response.user
    role = resolve_user_role(user.id, supabase, _get_request_cache(request))
    return LoginResponse(
        user_id=user.id,
        email=user.email or login_data.email,
        role=role,
        redirect_to=get_default_route(role)
    )


@router.post("/logout")
async def logout(
    request: Request,
    response: Response,
    service: AuthService = Depends(get_auth_service)
):
    """Revoke the session (best effort) and drop the cookies"""
    service.logout(get_session_token(request))
    clear_session_cookies(response)
    return {"ok": True}


@router.post("/register")
async def register(
    register_data: RegisterRequest,
    service: AuthService = Depends(get_auth_flow_service)
):
    """First registration step: e-mail a 6 digit code"""
    service.send_registration_otp(register_data)
    return {"ok": True, "email": register_data.email}


@router.post("/verify-otp", status_code=201)
async def verify_otp(
    otp_data: VerifyOtpRequest,
    response: Response,
    service: AuthService = Depends(get_auth_flow_service)
):
    """Second registration step: verify the code, create the profile and open the session"""
    auth_response = service.verify_registration_otp(otp_data)
    session = auth_response.session
    set_session_cookies(response, session.access_token, session.refresh_token)
    return {
        "ok": True,
        "user_id": auth_response.user.id,
        "redirect_to": get_default_route(None)
    }


@router.post("/reset-password")
async def reset_password(
    body: ResetPasswordRequest,
    service: AuthService = Depends(get_auth_flow_service)
):
    service.request_password_reset(body.email)
    return {"ok": True}


@router.post("/update-password")
async def update_password(
    body: UpdatePasswordRequest,
    user_data: Dict = Depends(get_current_user_id),
    service: AuthService = Depends(get_auth_service)
):
    """Change the password of the session user"""
    service.update_password(user_data["id"], body.password)
    return {"ok": True}


@router.get("/me")
async def get_me(
    request: Request,
    user_data: Dict = Depends(get_current_user_id),
    supabase: Client = Depends(get_supabase)
):
    """Session user with profile and navigation role"""
    cache = _get_request_cache(request)
    profile = get_user_profile(user_data["id"], supabase, cache)
    role = resolve_user_role(user_data["id"], supabase, cache)
    return {**user_data, "profile": profile, "role": role}


@router.get("/guard", response_model=GuardResponse)
async def guard(
    path: str,
    request: Request,
    service: AuthService = Depends(get_auth_service),
    supabase: Client = Depends(get_supabase)
):
    """Page guard decision for a frontend served elsewhere"""
    token = get_session_token(request)
    user_data, role, session_error = None, None, False
    if token:
        try:
            user_data = service.get_current_user(token)
            role = resolve_user_role(user_data["id"], supabase, _get_request_cache(request))
        except HTTPException:
            session_error = True
    redirect_to = resolve_guard_redirect(path, user_data is not None, role, session_error)
    return GuardResponse(path=path, allowed=redirect_to is None, redirect_to=redirect_to, role=role)

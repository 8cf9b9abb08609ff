"""
Authentication API endpoints.

Signup, signin, token refresh and signout. Every successful signup/signin
opens a session backed by one PersonalToken row.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from app.api.deps import CurrentClaims, RefreshClaims, get_auth_service
from app.core.responses import api_response
from app.schemas.auth import CompanySignupRequest, SigninRequest, SignupRequest
from app.services.auth import AuthService

router = APIRouter()

Service = Annotated[AuthService, Depends(get_auth_service)]


@router.post("/signup", status_code=status.HTTP_201_CREATED)
def signup(data: SignupRequest, service: Service):
    """Register a job seeker and sign them in."""
    result = service.signup(data)
    return api_response(result, "User registered successfully", status.HTTP_201_CREATED)


@router.post("/company/signup", status_code=status.HTTP_201_CREATED)
def signup_company(data: CompanySignupRequest, service: Service):
    """Register a company account together with its company record."""
    result = service.signup_company(data)
    return api_response(result, "Company registered successfully", status.HTTP_201_CREATED)


@router.post("/signin")
def signin(data: SigninRequest, service: Service):
    result = service.signin(data)
    return api_response(result, "Signin successful")


@router.post("/refresh")
def refresh(claims: RefreshClaims, service: Service):
    """
    Issue a new access token.

    Send the refresh token as the bearer token.
    """
    result = service.refresh(claims["sub"], claims["token"])
    return api_response(result, "Token refreshed successfully")


@router.get("/current")
def current_user(claims: CurrentClaims, service: Service):
    return api_response(service.get_current_user(claims["sub"]))


@router.delete("/signout")
def signout(claims: CurrentClaims, service: Service):
    service.signout(claims["sub"], claims["token"])
    return api_response(message="Signout successful")

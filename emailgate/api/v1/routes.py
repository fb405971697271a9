"""
API v1 routes.

Defines the account endpoints, mounted under /v1/user:
- POST /signup - Register and send a verification link
- GET  /verify/{account_id}/{token} - Follow a verification link
- GET  /verified - Verification outcome page
- POST /signin - Authenticate a verified account

Handlers are plain (sync) functions: the domain services block on bcrypt
and database I/O, so FastAPI runs them in its threadpool.
"""

import html
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse

from emailgate.api.dependencies import (
    get_registration_service,
    get_signin_service,
    get_verification_service,
)
from emailgate.api.models import (
    FailureResponse,
    ProfileModel,
    SigninRequest,
    SigninResponse,
    SignupRequest,
    SignupResponse,
)
from emailgate.domain.exceptions import (
    AccountError,
    AccountNotVerified,
    AuthenticationFailed,
    EmailAlreadyRegistered,
    InternalError,
    ValidationFailed,
)
from emailgate.domain.ports import VerifyResult
from emailgate.domain.registration import RegistrationService
from emailgate.domain.signin import SignInService
from emailgate.domain.verification import VERIFY_MESSAGES, VerificationService

router = APIRouter(tags=["v1"])


def status_code_for(error: AccountError) -> int:
    """Map a domain error onto its HTTP status code."""
    if isinstance(error, ValidationFailed):
        return status.HTTP_400_BAD_REQUEST
    if isinstance(error, EmailAlreadyRegistered):
        return status.HTTP_409_CONFLICT
    if isinstance(error, AccountNotVerified):
        return status.HTTP_403_FORBIDDEN
    if isinstance(error, AuthenticationFailed):
        return status.HTTP_401_UNAUTHORIZED
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def failure(error: AccountError) -> JSONResponse:
    return JSONResponse(
        status_code=status_code_for(error),
        content=FailureResponse(message=error.message).model_dump(),
    )


@router.post(
    "/signup",
    response_model=SignupResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": FailureResponse, "description": "Invalid input"},
        409: {"model": FailureResponse, "description": "Email already registered"},
        500: {"model": FailureResponse, "description": "Internal error"},
    },
    summary="Register a new user",
    description="Create an unverified account and email a verification link "
    "that expires in 6 hours.",
)
def signup(
    request_data: SignupRequest,
    service: RegistrationService = Depends(get_registration_service),
) -> SignupResponse | JSONResponse:
    """
    Register a new user and send the verification link.

    - **name**: Letters and spaces only
    - **email**: Email address
    - **password**: Password (minimum 8 characters)
    - **dateOfBirth**: ISO date
    """
    try:
        outcome = service.register(
            request_data.name,
            request_data.email,
            request_data.password,
            request_data.date_of_birth,
        )
    except AccountError as e:
        return failure(e)
    return SignupResponse(
        status=outcome.status.value,
        message=outcome.message,
        account_id=outcome.account_id,
    )


@router.get(
    "/verify/{account_id}/{token}",
    response_class=RedirectResponse,
    status_code=status.HTTP_303_SEE_OTHER,
    summary="Verify an email address",
    description="Target of the emailed verification link. Redirects to the "
    "verification outcome page.",
)
def verify(
    account_id: str,
    token: str,
    request: Request,
    service: VerificationService = Depends(get_verification_service),
) -> RedirectResponse:
    try:
        result = service.verify(account_id, token)
    except InternalError as e:
        return _redirect_to_outcome(request, error=True, message=e.message)
    return _redirect_to_outcome(
        request,
        error=result != VerifyResult.VERIFIED,
        message=VERIFY_MESSAGES[result],
    )


def _redirect_to_outcome(request: Request, error: bool, message: str) -> RedirectResponse:
    query = urlencode({"error": "true" if error else "false", "message": message})
    return RedirectResponse(
        url=f"{request.url_for('verified')}?{query}",
        status_code=status.HTTP_303_SEE_OTHER,
    )


@router.get(
    "/verified",
    response_class=HTMLResponse,
    summary="Verification outcome page",
)
def verified(error: str = "false", message: str = "") -> HTMLResponse:
    failed = error.strip().lower() == "true"
    title = "Verification failed" if failed else "Email verified"
    body = message or VERIFY_MESSAGES[VerifyResult.VERIFIED]
    return HTMLResponse(
        "<!doctype html><html><head><meta charset=\"utf-8\">"
        f"<title>{title}</title></head>"
        f"<body><h1>{title}</h1><p>{html.escape(body)}</p></body></html>"
    )


@router.post(
    "/signin",
    response_model=SigninResponse,
    responses={
        400: {"model": FailureResponse, "description": "Empty credentials"},
        401: {"model": FailureResponse, "description": "Invalid credentials or password"},
        403: {"model": FailureResponse, "description": "Email not verified"},
        500: {"model": FailureResponse, "description": "Internal error"},
    },
    summary="Sign in",
    description="Check email and password of a verified account.",
)
def signin(
    request_data: SigninRequest,
    service: SignInService = Depends(get_signin_service),
) -> SigninResponse | JSONResponse:
    try:
        profile = service.signin(request_data.email, request_data.password)
    except AccountError as e:
        return failure(e)
    return SigninResponse(message="Signin successful", data=ProfileModel.from_profile(profile))


async def request_validation_failure(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed request bodies and parameters in the failure shape."""
    first = exc.errors()[0] if exc.errors() else {}
    field = ".".join(str(part) for part in first.get("loc", ())[1:]) or "request"
    message = f"Invalid {field}: {first.get('msg', 'malformed request')}"
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=FailureResponse(message=message).model_dump(),
    )

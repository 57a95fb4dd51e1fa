import logging

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from wocuum.config import Settings, get_settings
from wocuum.db import get_db
from wocuum.routers.bookings import get_booking_service
from wocuum.schemas.booking import BookingListResponse
from wocuum.schemas.user import (
    DeleteAccountRequest,
    LoginRequest,
    MessageResponse,
    PasswordResetRequest,
    RegisterRequest,
    UserPublic,
    UserResponse,
)
from wocuum.services.accounts import AccountService
from wocuum.services.bookings import BookingService
from wocuum.utils.auth import (
    clear_session_cookie,
    get_request_context,
    get_session_store,
    require_auth,
    set_session_cookie,
)
from wocuum.utils.rate_limit import delete_account_limit, login_limit, register_limit, reset_password_limit
from wocuum.utils.sessions import RequestContext, SessionStore

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/users",
    tags=["users"],
)

# Message sent with a 400 when the request body fails schema validation,
# keyed by route name.
VALIDATION_MESSAGES = {
    "register": "Error occured when registering user",
    "login": "Error occured when trying to login!",
    "reset_password": "Invalid email format",
    "delete_account": "Password is required",
}


def get_account_service(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> AccountService:
    return AccountService(db, settings)


@router.post(
    "/register",
    name="register",
    dependencies=[Depends(register_limit)],
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user",
)
def register(data: RegisterRequest, accounts: AccountService = Depends(get_account_service)):
    """
    Create a user account.

    - **email**: Unique email address.
    - **password**: At least 6 characters.
    - **fullName**: (Optional) Display name, up to 100 characters.

    Fails with 409 for a taken email and 403 once the user limit is reached.
    """
    user = accounts.register(data)
    return UserResponse(message="User registered successfully", user=UserPublic.model_validate(user))


@router.post(
    "/login",
    name="login",
    dependencies=[Depends(login_limit)],
    response_model=UserResponse,
    summary="Log in",
)
def login(
    data: LoginRequest,
    response: Response,
    context: RequestContext = Depends(get_request_context),
    store: SessionStore = Depends(get_session_store),
    accounts: AccountService = Depends(get_account_service),
    settings: Settings = Depends(get_settings),
):
    """
    Check credentials and start a session.

    Sets the session cookie. Unknown email and wrong password give the same 401.
    """
    user = accounts.authenticate(data.email, data.password)

    if context.session_id:
        store.destroy(context.session_id)
    session_id = store.create({"userId": user.id, "email": user.email, "role": user.role.value})
    set_session_cookie(response, session_id, settings)

    return UserResponse(message="Login successful", user=UserPublic.model_validate(user))


@router.post("/logout", response_model=MessageResponse, summary="Log out")
def logout(
    response: Response,
    context: RequestContext = Depends(get_request_context),
    store: SessionStore = Depends(get_session_store),
    settings: Settings = Depends(get_settings),
):
    """Destroy the current session, if any, and clear the cookie."""
    if context.session_id:
        store.destroy(context.session_id)
        logger.info(f"User logged out: {context.email}")
    clear_session_cookie(response, settings)
    return MessageResponse(message="Logged out successfully")


@router.post(
    "/reset-password",
    name="reset_password",
    dependencies=[Depends(reset_password_limit)],
    response_model=MessageResponse,
    summary="Request a password reset",
)
def reset_password(data: PasswordResetRequest, accounts: AccountService = Depends(get_account_service)):
    """Always succeeds for a well-formed email so that registered addresses cannot be probed."""
    accounts.request_password_reset(data.email)
    return MessageResponse(message="Password reset instructions sent!")


@router.get("/info", response_model=UserResponse, summary="Current user")
def info(
    context: RequestContext = Depends(require_auth),
    accounts: AccountService = Depends(get_account_service),
):
    user = accounts.get_user(context.user_id)
    return UserResponse(user=UserPublic.model_validate(user))


@router.get("/bookings", response_model=BookingListResponse, summary="Current user's bookings")
def user_bookings(
    context: RequestContext = Depends(require_auth),
    bookings: BookingService = Depends(get_booking_service),
):
    return {"ok": True, "bookings": bookings.list_for_user(context.user_id)}


@router.delete(
    "/delete",
    name="delete_account",
    dependencies=[Depends(delete_account_limit)],
    response_model=MessageResponse,
    summary="Delete account",
)
def delete_account(
    data: DeleteAccountRequest,
    response: Response,
    context: RequestContext = Depends(require_auth),
    store: SessionStore = Depends(get_session_store),
    accounts: AccountService = Depends(get_account_service),
    settings: Settings = Depends(get_settings),
):
    """
    Delete the logged-in user's account and every booking it owns.
    Requires authentication and the current password.
    """
    accounts.delete_account(context.user_id, data.password)
    store.destroy(context.session_id)
    clear_session_cookie(response, settings)
    return MessageResponse(message="User account deleted successfully")

# clinic_booking/routers/auth_routes.py

from fastapi import APIRouter, Depends, Response
from fastapi.security import OAuth2PasswordRequestForm

from clinic_booking.deps import get_identity_store, http_error
from clinic_booking.errors import BookingError
from clinic_booking.identity import IdentityStore
from clinic_booking.routers.users_routes import public_identity
from clinic_booking.schemas import AdminUser, ClientPublic

router = APIRouter(
    prefix="/auth",
    tags=["auth"],
)


@router.post("/login", response_model=ClientPublic)
def login(
    form_data: OAuth2PasswordRequestForm = Depends(),
    identity: IdentityStore = Depends(get_identity_store),
):
    # OAuth2 "password" form: the username field carries the email
    try:
        user = identity.login(form_data.username, form_data.password)
    except BookingError as exc:
        raise http_error(exc)
    return public_identity(user)


@router.post("/admin/login", response_model=AdminUser)
def admin_login(
    form_data: OAuth2PasswordRequestForm = Depends(),
    identity: IdentityStore = Depends(get_identity_store),
):
    try:
        admin = identity.login_admin(form_data.username, form_data.password)
    except BookingError as exc:
        raise http_error(exc)
    return public_identity(admin)


@router.post("/logout", status_code=204)
def logout(identity: IdentityStore = Depends(get_identity_store)):
    identity.logout()
    return Response(status_code=204)

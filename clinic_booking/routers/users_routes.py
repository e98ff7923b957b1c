# clinic_booking/routers/users_routes.py

from fastapi import APIRouter, Depends

from clinic_booking.auth import get_current_user
from clinic_booking.deps import get_identity_store, http_error
from clinic_booking.errors import BookingError
from clinic_booking.identity import IdentityStore
from clinic_booking.schemas import ClientPublic, IdentityPublic, UserCreate

router = APIRouter(
    tags=["users"],
)


def public_identity(user) -> dict:
    if user.type == "admin":
        return {"type": "admin", "username": user.username}
    return {
        "type": "client",
        "name": user.name,
        "email": user.email,
        "phone": user.phone,
    }


@router.get("/me", response_model=IdentityPublic)
def me(current_user=Depends(get_current_user)):
    return public_identity(current_user)


@router.post("/users", status_code=201, response_model=ClientPublic)
def create_user(
    user: UserCreate,
    identity: IdentityStore = Depends(get_identity_store),
):
    # Registration also opens the session for the new client
    try:
        new_user = identity.register(
            name=user.name,
            email=user.email,
            phone=user.phone,
            password=user.password,
        )
    except BookingError as exc:
        raise http_error(exc)

    return public_identity(new_user)

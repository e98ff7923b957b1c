# clinic_booking/auth.py

from typing import Union

from fastapi import Depends, HTTPException

from .deps import get_identity_store, require_role
from .identity import IdentityStore
from .schemas import AdminUser, ClientUser, UserType


def get_current_user(
    identity: IdentityStore = Depends(get_identity_store),
) -> Union[ClientUser, AdminUser]:
    # The session is whatever identity was last written under currentUser
    user = identity.current_user()
    if user is None:
        raise HTTPException(status_code=401, detail="Not logged in")
    return user


def get_current_client(user=Depends(get_current_user)) -> ClientUser:
    require_role(user, UserType.client)
    return user


def get_current_admin(user=Depends(get_current_user)) -> AdminUser:
    require_role(user, UserType.admin)
    return user

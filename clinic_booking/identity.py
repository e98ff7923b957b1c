# clinic_booking/identity.py

import logging
from typing import List, Optional, Union

from .config import settings
from .data import CURRENT_USER_KEY, USERS_KEY
from .errors import DuplicateEmail, InvalidCredentials, MissingFields
from .schemas import AdminUser, ClientUser, identity_adapter
from .storage import KeyValueStore, write_lock

logger = logging.getLogger(__name__)


class IdentityStore:
    """Registered clients plus the current session identity.

    Passwords are kept and compared verbatim and the session is simply the
    last identity written under ``currentUser``.
    """

    def __init__(
        self,
        store: KeyValueStore,
        admin_username: Optional[str] = None,
        admin_password: Optional[str] = None,
    ):
        self.store = store
        self.admin_username = admin_username or settings.admin_username
        self.admin_password = admin_password or settings.admin_password

    def users(self) -> List[ClientUser]:
        return [ClientUser.model_validate(u) for u in self.store.read_json(USERS_KEY, [])]

    def register(self, name: str, email: str, phone: str, password: str) -> ClientUser:
        # 1) All fields are required
        if not name or not email or not phone or not password:
            raise MissingFields()

        with write_lock:
            # 2) One record per email
            users = self.store.read_json(USERS_KEY, [])
            for existing in users:
                if existing.get("email") == email:
                    logger.warning("identity.register_duplicate", extra={"email": email})
                    raise DuplicateEmail()

            # 3) Append and open the session
            new_user = ClientUser(name=name, email=email, phone=phone, password=password)
            users.append(new_user.model_dump())
            self.store.write_json(USERS_KEY, users)
            self._start_session(new_user)

        logger.info("identity.registered", extra={"email": email})
        return new_user

    def login(self, email: str, password: str) -> ClientUser:
        for existing in self.users():
            if existing.email == email and existing.password == password:
                self._start_session(existing)
                logger.info("identity.login", extra={"email": email})
                return existing

        logger.warning("identity.login_failed", extra={"email": email})
        raise InvalidCredentials("Incorrect email or password")

    def login_admin(self, username: str, password: str) -> AdminUser:
        if username != self.admin_username or password != self.admin_password:
            logger.warning("identity.admin_login_failed", extra={"username": username})
            raise InvalidCredentials("Invalid administrative credentials")

        admin = AdminUser(username=username)
        self._start_session(admin)
        logger.info("identity.admin_login", extra={"username": username})
        return admin

    def current_user(self) -> Optional[Union[ClientUser, AdminUser]]:
        raw = self.store.read_json(CURRENT_USER_KEY)
        if raw is None:
            return None
        return identity_adapter.validate_python(raw)

    def logout(self) -> None:
        self.store.remove_item(CURRENT_USER_KEY)
        logger.info("identity.logout")

    def _start_session(self, user: Union[ClientUser, AdminUser]) -> None:
        self.store.write_json(CURRENT_USER_KEY, user.model_dump())

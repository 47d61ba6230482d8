# noteshub/core/session.py
import logging
from typing import Optional

from fastapi import Depends, Request
from fastapi.responses import RedirectResponse
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from werkzeug.security import check_password_hash, generate_password_hash

from noteshub.core.errors import DuplicateAccount, InvalidCredentials, ValidationFailed
from noteshub.core.notifications import flash
from noteshub.models.account import Account
from noteshub.models.database import get_db

logger = logging.getLogger(__name__)

SESSION_KEY = "account_id"
MIN_DISPLAY_NAME_LENGTH = 3


class SessionStore:
    """The current account for one request.

    The signed session cookie caches only the account id; the ``accounts``
    table stays the system of record for everything else.
    """

    def __init__(self, request: Request, db: Session):
        self.request = request
        self.db = db
        self._account: Optional[Account] = None
        self._loaded = False

    @property
    def account(self) -> Optional[Account]:
        if not self._loaded:
            self._set(self._restore())
        return self._account

    @property
    def is_authenticated(self) -> bool:
        return self.account is not None

    def _restore(self) -> Optional[Account]:
        account_id = self.request.session.get(SESSION_KEY)
        if account_id is None:
            return None
        account = self.db.get(Account, account_id)
        if account is None:
            # Stale cookie, e.g. the database was reset
            self.request.session.pop(SESSION_KEY, None)
        return account

    def _set(self, account: Optional[Account]) -> None:
        self._account = account
        self._loaded = True
        self.request.state.account = account
        if account is None:
            self.request.session.pop(SESSION_KEY, None)
        else:
            self.request.session[SESSION_KEY] = account.id

    def sign_up(self, email: str, password: str, display_name: str) -> Account:
        email = (email or "").strip().lower()
        display_name = (display_name or "").strip()

        failures = []
        if not email:
            failures.append("Email is required")
        if not password:
            failures.append("Password is required")
        if len(display_name) < MIN_DISPLAY_NAME_LENGTH:
            failures.append(f"Username must be at least {MIN_DISPLAY_NAME_LENGTH} characters")
        if failures:
            raise ValidationFailed(failures)

        existing = (
            self.db.query(Account)
            .filter((Account.email == email) | (Account.display_name == display_name))
            .first()
        )
        if existing:
            raise DuplicateAccount()

        account = Account(
            email=email,
            display_name=display_name,
            password_hash=generate_password_hash(password),
            has_contributed=False,
        )
        self.db.add(account)
        try:
            self.db.commit()
        except IntegrityError as exc:
            # Lost a race with another sign-up on a unique column
            self.db.rollback()
            raise DuplicateAccount() from exc
        self.db.refresh(account)

        logger.info("account %s signed up as %r", account.id, account.display_name)
        self._set(account)
        return account

    def log_in(self, email: str, password: str) -> Account:
        email = (email or "").strip().lower()
        account = self.db.query(Account).filter(Account.email == email).first()
        if not account or not check_password_hash(account.password_hash, password or ""):
            logger.info("failed login for %r", email)
            raise InvalidCredentials()

        logger.info("account %s logged in", account.id)
        self._set(account)
        return account

    def log_out(self) -> None:
        if self._account is not None:
            logger.info("account %s logged out", self._account.id)
        self._set(None)

    def mark_contributed(self) -> None:
        account = self.account
        if account is None or account.has_contributed:
            return
        account.has_contributed = True
        self.db.commit()
        logger.info("account %s is now a contributor", account.id)


def get_session_store(request: Request, db: Session = Depends(get_db)) -> SessionStore:
    return SessionStore(request, db)


def contributor_redirect(request: Request, store: SessionStore) -> Optional[RedirectResponse]:
    """Redirect response when the account may not browse yet, else None."""
    account = store.account
    if account is None:
        flash(request, "Authentication required", variant="destructive")
        return RedirectResponse(url="/", status_code=303)
    if not account.has_contributed:
        flash(request, "Upload required", "Please upload some materials before browsing", "destructive")
        return RedirectResponse(url="/upload", status_code=303)
    return None

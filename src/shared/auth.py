"""Request identity.

Sign-in happens at the hosted identity provider. The gateway in front of this
API forwards the authenticated user id and, for vendor accounts, the id of
the company they manage. Operators, who moderate the catalogue and work the
reconciliation queue, are listed by user id in ``OPERATOR_USER_IDS``.
"""

from dataclasses import dataclass

from fastapi import Header

from shared.exceptions import NotAuthenticated, NotAuthorized
from shared.settings import get_settings


@dataclass(frozen=True)
class CurrentUser:
    user_id: str
    company_id: str | None = None

    @property
    def is_vendor(self) -> bool:
        return bool(self.company_id)


def current_user(
    x_user_id: str | None = Header(default=None),
    x_company_id: str | None = Header(default=None),
) -> CurrentUser:
    if not x_user_id:
        raise NotAuthenticated("Sign in to continue")
    return CurrentUser(user_id=x_user_id, company_id=x_company_id or None)


def current_vendor(
    x_user_id: str | None = Header(default=None),
    x_company_id: str | None = Header(default=None),
) -> CurrentUser:
    user = current_user(x_user_id=x_user_id, x_company_id=x_company_id)
    if not user.is_vendor:
        raise NotAuthorized("Only company accounts can do this")
    return user


def current_operator(
    x_user_id: str | None = Header(default=None),
    x_company_id: str | None = Header(default=None),
) -> CurrentUser:
    user = current_user(x_user_id=x_user_id, x_company_id=x_company_id)
    if user.user_id not in get_settings().operator_user_ids:
        raise NotAuthorized("Only operators can do this")
    return user

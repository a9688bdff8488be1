# storefront/services/policy.py
from dataclasses import dataclass
from enum import Enum

from storefront.data.models.user import UserModel
from storefront.domain.errors import AuthenticationError, AuthorizationError

CUSTOMER = "customer"
ADMIN = "admin"
ROLES = (CUSTOMER, ADMIN)


class Action(str, Enum):
    PROFILE_MANAGE = "profile:manage"
    CART_USE = "cart:use"
    ORDER_CREATE = "order:create"
    ORDER_LIST_OWN = "order:list_own"
    ORDER_READ = "order:read"
    ORDER_LIST_ALL = "order:list_all"
    ORDER_UPDATE_STATUS = "order:update_status"
    PRODUCT_WRITE = "product:write"
    USER_MANAGE = "user:manage"


@dataclass(frozen=True)
class Rule:
    roles: frozenset
    owner_allowed: bool = False
    message: str = "You do not have permission to perform this action"


ANY_USER = frozenset(ROLES)
ADMIN_ONLY = frozenset({ADMIN})

POLICY: dict[Action, Rule] = {
    Action.PROFILE_MANAGE: Rule(ANY_USER),
    Action.CART_USE: Rule(ANY_USER),
    Action.ORDER_CREATE: Rule(ANY_USER),
    Action.ORDER_LIST_OWN: Rule(ANY_USER),
    Action.ORDER_READ: Rule(
        ADMIN_ONLY,
        owner_allowed=True,
        message="Not authorized to view this order",
    ),
    Action.ORDER_LIST_ALL: Rule(ADMIN_ONLY),
    Action.ORDER_UPDATE_STATUS: Rule(ADMIN_ONLY),
    Action.PRODUCT_WRITE: Rule(ADMIN_ONLY),
    Action.USER_MANAGE: Rule(ADMIN_ONLY),
}


def is_allowed(user: UserModel | None, action: Action, owner_id: int | None = None) -> bool:
    if user is None:
        return False
    rule = POLICY[action]
    if user.role in rule.roles:
        return True
    return rule.owner_allowed and owner_id is not None and owner_id == user.id


def authorize(user: UserModel | None, action: Action, owner_id: int | None = None) -> None:
    """
    Jedno miejsce decyzji o dostepie: rola podmiotu, akcja, wlasciciel zasobu.
    Brak uzytkownika -> 401, brak uprawnien -> 403.
    """
    if user is None:
        raise AuthenticationError("You are not logged in. Please log in to get access")
    if not is_allowed(user, action, owner_id):
        raise AuthorizationError(POLICY[action].message)

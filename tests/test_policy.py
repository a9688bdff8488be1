"""Access policy decisions, independent of HTTP."""

import pytest

from storefront.data.models import UserModel
from storefront.domain.errors import AuthenticationError, AuthorizationError
from storefront.services.policy import POLICY, Action, authorize, is_allowed


def _user(user_id, role):
    return UserModel(id=user_id, name="x", email=f"{user_id}@example.com", password_hash="x", role=role)


class TestAuthorize:
    def test_every_action_has_a_rule(self):
        assert set(POLICY) == set(Action)

    @pytest.mark.parametrize(
        "action",
        [Action.PRODUCT_WRITE, Action.USER_MANAGE, Action.ORDER_LIST_ALL, Action.ORDER_UPDATE_STATUS],
    )
    def test_admin_only_actions(self, action):
        assert is_allowed(_user(1, "admin"), action)
        assert not is_allowed(_user(2, "customer"), action)

    @pytest.mark.parametrize("action", [Action.CART_USE, Action.ORDER_CREATE, Action.PROFILE_MANAGE])
    def test_any_user_actions(self, action):
        assert is_allowed(_user(1, "admin"), action)
        assert is_allowed(_user(2, "customer"), action)

    def test_owner_may_read_own_order(self):
        owner = _user(7, "customer")

        authorize(owner, Action.ORDER_READ, owner_id=7)

        with pytest.raises(AuthorizationError, match="Not authorized to view this order"):
            authorize(owner, Action.ORDER_READ, owner_id=8)

    def test_admin_reads_any_order(self):
        authorize(_user(1, "admin"), Action.ORDER_READ, owner_id=99)

    def test_owner_rule_does_not_match_missing_owner(self):
        assert not is_allowed(_user(7, "customer"), Action.ORDER_READ, owner_id=None)

    def test_no_subject_is_unauthenticated(self):
        with pytest.raises(AuthenticationError):
            authorize(None, Action.CART_USE)

    def test_unknown_role_is_forbidden(self):
        with pytest.raises(AuthorizationError):
            authorize(_user(3, "guest"), Action.CART_USE)

"""Unit tests for the authorization policy table and checks."""

import re

import pytest

from backend_api.errors import Forbidden, NotFound
from backend_api.main import app
from backend_api.policy import POLICIES, Access, Identity, Rule, check

USER = Identity(user_id=1, username="alice", role="USER")
OTHER = Identity(user_id=2, username="bob", role="USER")
ADMIN = Identity(user_id=3, username="root", role="ADMIN")


def owned_by_alice(db, resource_id):
    if resource_id != 10:
        raise NotFound("Thing", resource_id)
    return "alice"


OWNER_RULE = Rule(Access.OWNER_OR_ADMIN, owned_by_alice, "thing_id")


class TestCheck:

    def test_admin_rule(self):
        check(Rule(Access.ADMIN), ADMIN, db=None)
        with pytest.raises(Forbidden):
            check(Rule(Access.ADMIN), USER, db=None)

    def test_authenticated_rule_allows_anyone_with_identity(self):
        check(Rule(Access.AUTHENTICATED), USER, db=None)

    def test_owner_passes(self):
        check(OWNER_RULE, USER, db=None, resource_id=10)

    def test_non_owner_is_forbidden(self):
        with pytest.raises(Forbidden):
            check(OWNER_RULE, OTHER, db=None, resource_id=10)

    def test_admin_passes_ownership(self):
        check(OWNER_RULE, ADMIN, db=None, resource_id=10)

    def test_missing_resource_is_not_found_for_everyone(self):
        for identity in (USER, OTHER, ADMIN):
            with pytest.raises(NotFound):
                check(OWNER_RULE, identity, db=None, resource_id=99)


class TestPolicyTable:

    def test_owner_rules_have_loader_and_param(self):
        for action, rule in POLICIES.items():
            if rule.access == Access.OWNER_OR_ADMIN:
                assert rule.owner is not None, action
                assert rule.param, action

    def test_owner_params_exist_on_routes(self):
        # Cada regla de propiedad lee un parámetro de ruta que debe existir
        params = set()
        for path in app.openapi()["paths"]:
            params.update(re.findall(r"\{(\w+)\}", path))
        for rule in POLICIES.values():
            if rule.param:
                assert rule.param in params

    def test_identity_admin_flag(self):
        assert ADMIN.is_admin
        assert not USER.is_admin

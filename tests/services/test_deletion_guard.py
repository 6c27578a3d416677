from unittest.mock import MagicMock

import pytest
from pydantic import SecretStr

from paygo.exceptions import Forbidden, Unauthorized
from paygo.services.deletion_guard import DeletionGuard
from tests.conftest import ADMIN, BILLING_ENGINEER, VIEWER


class TestDeletionGuard:
    def test_admin_with_right_secret(self):
        DeletionGuard(secret="s3cret").check(ADMIN, "s3cret")

    def test_wrong_secret(self):
        with pytest.raises(Unauthorized):
            DeletionGuard(secret="s3cret").check(ADMIN, "nope")

    def test_non_admin_forbidden_even_with_right_secret(self):
        with pytest.raises(Forbidden):
            DeletionGuard(secret="s3cret").check(BILLING_ENGINEER, "s3cret")

    def test_role_checked_before_secret(self):
        with pytest.raises(Forbidden):
            DeletionGuard(secret="s3cret").check(VIEWER, "wrong")

    def test_empty_configured_secret_refuses_everything(self):
        with pytest.raises(Unauthorized):
            DeletionGuard(secret="").check(ADMIN, "")

    def test_reads_settings_when_no_secret_given(self, monkeypatch):
        from paygo.settings import settings

        monkeypatch.setattr(settings, "delete_password", SecretStr("from-env"))
        guard = DeletionGuard()
        guard.check(ADMIN, "from-env")
        with pytest.raises(Unauthorized):
            guard.check(ADMIN, "other")

    def test_uses_injected_authz(self):
        authz = MagicMock()
        authz.can_delete.return_value = True
        DeletionGuard(secret="x", authz=authz).check(VIEWER, "x")
        authz.require.assert_called_once()

"""Tests for meshctl.services.superadmin: bootstrap, atomic transfer and reconciliation."""

import unittest
from datetime import UTC, datetime, timedelta
from unittest.mock import patch

from sqlalchemy.exc import OperationalError

from meshctl.core.errors import BadRequestError, ForbiddenError, InternalError, NotFoundError
from meshctl.models import User
from meshctl.schemas.user import SuperAdminCreate
from meshctl.services.superadmin import (
    create_superadmin,
    has_superadmin,
    reconcile_superadmins,
    transfer_superadmin,
)
from tests.support import add_user, make_settings, make_store


def _superadmin_names(store) -> list[str]:
    return [u.username for u in store.list_superadmins()]


class TestCreateSuperadmin(unittest.TestCase):
    def setUp(self) -> None:
        self.store = make_store()
        self.settings = make_settings()

    def test_fresh_install_has_no_superadmin(self) -> None:
        self.assertFalse(has_superadmin(self.store))

    def test_create_first_superadmin(self) -> None:
        user = create_superadmin(self.store, SuperAdminCreate(username="root", password="rootpass"), self.settings)
        self.assertTrue(user.is_super_admin)
        self.assertFalse(user.is_admin)
        self.assertTrue(has_superadmin(self.store))
        self.assertEqual(self.store.find_state().superadmin_username, "root")
        self.assertEqual(_superadmin_names(self.store), ["root"])

    def test_second_superadmin_is_rejected(self) -> None:
        create_superadmin(self.store, SuperAdminCreate(username="root", password="rootpass"), self.settings)
        with self.assertRaises(BadRequestError):
            create_superadmin(self.store, SuperAdminCreate(username="other", password="otherpass"), self.settings)
        self.assertEqual(_superadmin_names(self.store), ["root"])
        self.assertIsNone(self.store.find_user("other"))

    def test_basic_auth_disabled(self) -> None:
        with self.assertRaises(BadRequestError):
            create_superadmin(
                self.store,
                SuperAdminCreate(username="root", password="rootpass"),
                make_settings(BASIC_AUTH_ENABLED=False),
            )


class TestTransferSuperadmin(unittest.TestCase):
    def setUp(self) -> None:
        self.store = make_store()
        self.settings = make_settings()
        self.root = add_user(self.store, "root", is_super_admin=True)
        self.dana = add_user(self.store, "dana", is_admin=True)
        add_user(self.store, "erin")

    def test_transfer_swaps_roles(self) -> None:
        target = transfer_superadmin(self.store, self.root, "dana", self.settings)
        self.assertEqual(target.username, "dana")

        self.store.session.expire_all()
        dana = self.store.get_user("dana")
        root = self.store.get_user("root")
        self.assertTrue(dana.is_super_admin)
        self.assertFalse(dana.is_admin)
        self.assertFalse(root.is_super_admin)
        self.assertTrue(root.is_admin)
        self.assertIsNotNone(dana.promoted_at)
        self.assertEqual(self.store.find_state().superadmin_username, "dana")
        self.assertEqual(_superadmin_names(self.store), ["dana"])

    def test_caller_must_be_superadmin(self) -> None:
        with self.assertRaises(ForbiddenError):
            transfer_superadmin(self.store, self.dana, "root", self.settings)

    def test_target_must_be_admin(self) -> None:
        with self.assertRaises(ForbiddenError):
            transfer_superadmin(self.store, self.root, "erin", self.settings)

    def test_target_cannot_be_the_caller(self) -> None:
        with self.assertRaises(ForbiddenError):
            transfer_superadmin(self.store, self.root, "root", self.settings)

    def test_unknown_target(self) -> None:
        with self.assertRaises(NotFoundError):
            transfer_superadmin(self.store, self.root, "nobody", self.settings)

    def test_failed_commit_leaves_roles_unchanged(self) -> None:
        with patch.object(
            self.store.session,
            "commit",
            side_effect=OperationalError("UPDATE users", {}, Exception("connection lost")),
        ):
            with self.assertRaises(InternalError):
                transfer_superadmin(self.store, self.root, "dana", self.settings)

        self.store.session.expire_all()
        self.assertEqual(_superadmin_names(self.store), ["root"])
        self.assertTrue(self.store.get_user("dana").is_admin)
        self.assertEqual(self.store.find_state().superadmin_username, "root")

    def test_failed_demotion_flush_raises_internal_error(self) -> None:
        with patch.object(
            self.store.session,
            "flush",
            side_effect=OperationalError("UPDATE users", {}, Exception("connection lost")),
        ):
            with self.assertRaises(InternalError):
                transfer_superadmin(self.store, self.root, "dana", self.settings)

        self.store.session.expire_all()
        self.assertEqual(_superadmin_names(self.store), ["root"])
        self.assertTrue(self.store.get_user("root").is_super_admin)
        self.assertEqual(self.store.find_state().superadmin_username, "root")


class TestReconcileSuperadmins(unittest.TestCase):
    def setUp(self) -> None:
        self.store = make_store()

    def _flag(self, username: str, promoted_at: datetime | None = None) -> User:
        user = add_user(self.store, username)
        user.is_super_admin = True
        user.promoted_at = promoted_at
        self.store.session.commit()
        return user

    def test_keeps_user_named_by_system_state(self) -> None:
        add_user(self.store, "root", is_super_admin=True)
        self._flag("dana", promoted_at=datetime.now(UTC))

        demoted = reconcile_superadmins(self.store)

        self.assertEqual(demoted, ["dana"])
        self.assertEqual(_superadmin_names(self.store), ["root"])
        self.assertTrue(self.store.get_user("dana").is_admin)

    def test_keeps_most_recent_promotion_without_state(self) -> None:
        now = datetime.now(UTC)
        self._flag("root", promoted_at=now - timedelta(days=3))
        self._flag("dana", promoted_at=now)

        demoted = reconcile_superadmins(self.store)

        self.assertEqual(demoted, ["root"])
        self.assertEqual(_superadmin_names(self.store), ["dana"])
        self.assertEqual(self.store.find_state().superadmin_username, "dana")

    def test_single_superadmin_is_untouched(self) -> None:
        add_user(self.store, "root", is_super_admin=True)
        self.assertEqual(reconcile_superadmins(self.store), [])
        self.assertEqual(reconcile_superadmins(self.store), [])
        self.assertEqual(_superadmin_names(self.store), ["root"])

    def test_restores_flag_from_state(self) -> None:
        add_user(self.store, "root")
        self.store.get_state().superadmin_username = "root"
        self.store.session.commit()

        reconcile_superadmins(self.store)

        self.assertEqual(_superadmin_names(self.store), ["root"])


if __name__ == "__main__":
    unittest.main()

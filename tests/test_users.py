"""Tests for meshctl.services.users: login, create, update and delete through the permission rules."""

import unittest

from meshctl.core.errors import BadRequestError, ForbiddenError, NotFoundError, UnauthorizedError
from meshctl.core.security import decode_access_token, verify_password
from meshctl.models.user import ORIGIN_OAUTH
from meshctl.schemas.user import UserCreate, UserUpdate
from meshctl.services.users import authenticate, create_user, delete_user, update_user
from tests.support import add_user, make_settings, make_store


class TestAuthenticate(unittest.TestCase):
    def setUp(self) -> None:
        self.store = make_store()
        add_user(self.store, "alice", password="alicepass")
        add_user(self.store, "gina", password="ginapass", origin=ORIGIN_OAUTH)

    def test_valid_credentials_return_token(self) -> None:
        token = authenticate(self.store, "alice", "alicepass", make_settings())
        payload = decode_access_token(token)
        self.assertEqual(payload["sub"], "alice")
        self.assertEqual(payload["role"], "user")

    def test_wrong_password(self) -> None:
        with self.assertRaises(UnauthorizedError):
            authenticate(self.store, "alice", "nope", make_settings())

    def test_unknown_user_gets_same_error(self) -> None:
        with self.assertRaises(UnauthorizedError) as ctx:
            authenticate(self.store, "nobody", "nope", make_settings())
        self.assertEqual(ctx.exception.message, "invalid username or password")

    def test_oauth_user_cannot_use_basic_auth(self) -> None:
        with self.assertRaises(UnauthorizedError):
            authenticate(self.store, "gina", "ginapass", make_settings())

    def test_basic_auth_disabled(self) -> None:
        with self.assertRaises(BadRequestError):
            authenticate(self.store, "alice", "alicepass", make_settings(BASIC_AUTH_ENABLED=False))


class TestCreateUser(unittest.TestCase):
    def setUp(self) -> None:
        self.store = make_store()
        self.root = add_user(self.store, "root", is_super_admin=True)
        self.bob = add_user(self.store, "bob", is_admin=True)

    def test_admin_creates_regular_user(self) -> None:
        user = create_user(self.store, self.bob, "erin", UserCreate(password="erinpass"))
        self.assertFalse(user.is_admin)
        self.assertTrue(verify_password("erinpass", self.store.get_user("erin").password_hash))

    def test_admin_cannot_create_admin(self) -> None:
        with self.assertRaises(ForbiddenError):
            create_user(self.store, self.bob, "erin", UserCreate(password="erinpass", is_admin=True))
        self.assertIsNone(self.store.find_user("erin"))

    def test_superadmin_creates_admin(self) -> None:
        user = create_user(self.store, self.root, "carol", UserCreate(password="carolpass", is_admin=True))
        self.assertTrue(user.is_admin)

    def test_duplicate_username(self) -> None:
        with self.assertRaises(BadRequestError):
            create_user(self.store, self.root, "bob", UserCreate(password="bobpass2"))

    def test_invalid_username_rejected(self) -> None:
        for username in ("x" * 41, "bad/name", "has space", "ab", "trailing\n"):
            with self.subTest(username=username):
                with self.assertRaises(BadRequestError):
                    create_user(self.store, self.root, username, UserCreate(password="somepass"))
        self.assertEqual(len(self.store.list_users()), 2)


class TestUpdateUser(unittest.TestCase):
    def setUp(self) -> None:
        self.store = make_store()
        self.root = add_user(self.store, "root", is_super_admin=True)
        self.bob = add_user(self.store, "bob", is_admin=True)
        self.carol = add_user(self.store, "carol", is_admin=True)
        self.erin = add_user(self.store, "erin", password="erinpass")

    def test_admin_cannot_update_other_admin(self) -> None:
        with self.assertRaises(ForbiddenError):
            update_user(self.store, self.bob, "carol", UserUpdate(password="changed1"))

    def test_admin_cannot_change_own_role(self) -> None:
        with self.assertRaises(ForbiddenError):
            update_user(self.store, self.bob, "bob", UserUpdate(is_admin=False))
        self.assertTrue(self.store.get_user("bob").is_admin)

    def test_user_changes_own_password(self) -> None:
        update_user(self.store, self.erin, "erin", UserUpdate(password="newerinpass"))
        self.assertTrue(verify_password("newerinpass", self.store.get_user("erin").password_hash))

    def test_superadmin_promotes_user_to_admin(self) -> None:
        user = update_user(self.store, self.root, "erin", UserUpdate(is_admin=True))
        self.assertTrue(user.is_admin)
        self.assertFalse(user.is_super_admin)

    def test_unknown_target(self) -> None:
        with self.assertRaises(NotFoundError):
            update_user(self.store, self.root, "nobody", UserUpdate(password="whatever"))


class TestDeleteUser(unittest.TestCase):
    def setUp(self) -> None:
        self.store = make_store()
        self.root = add_user(self.store, "root", is_super_admin=True)
        self.bob = add_user(self.store, "bob", is_admin=True)
        add_user(self.store, "carol", is_admin=True)
        add_user(self.store, "erin")

    def test_superadmin_cannot_be_deleted(self) -> None:
        with self.assertRaises(ForbiddenError):
            delete_user(self.store, self.root, "root")
        self.assertIsNotNone(self.store.find_user("root"))

    def test_admin_cannot_delete_admin(self) -> None:
        with self.assertRaises(ForbiddenError):
            delete_user(self.store, self.bob, "carol")

    def test_admin_deletes_user(self) -> None:
        delete_user(self.store, self.bob, "erin")
        self.assertIsNone(self.store.find_user("erin"))

    def test_superadmin_deletes_admin(self) -> None:
        delete_user(self.store, self.root, "carol")
        self.assertIsNone(self.store.find_user("carol"))


if __name__ == "__main__":
    unittest.main()

import os
import tempfile
import unittest
from datetime import datetime, timedelta, timezone

import jwt


TEST_SECRET = "test-secret-key-that-is-long-enough-for-hs256"


class TestCredentialService(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        db_fd, cls.db_path = tempfile.mkstemp(suffix=".db")
        os.close(db_fd)

        from blogfeed import create_app
        from blogfeed.db import db
        from blogfeed.services import credential_service

        cls.app = create_app({
            "TESTING": True,
            "SQLALCHEMY_DATABASE_URI": f"sqlite:///{cls.db_path}",
            "JWT_SECRET_KEY": TEST_SECRET,
            "IMAGE_CLEANUP_ASYNC": False,
        })
        cls.db = db
        cls.credential_service = credential_service

    @classmethod
    def tearDownClass(cls):
        if os.path.exists(cls.db_path):
            os.remove(cls.db_path)

    def setUp(self):
        self.ctx = self.app.app_context()
        self.ctx.push()
        self.db.drop_all()
        self.db.create_all()

    def tearDown(self):
        self.db.session.remove()
        self.ctx.pop()

    def test_register_returns_string_id(self):
        user_id = self.credential_service.register_user("a@x.com", "A", "password1")
        self.assertIsInstance(user_id, str)
        self.assertTrue(user_id.isdigit())

    def test_register_hashes_password(self):
        from blogfeed.repositories import user_repository

        self.credential_service.register_user("a@x.com", "A", "password1")
        user = user_repository.get_by_email("a@x.com")
        self.assertNotEqual(user.password_hash, "password1")
        self.assertEqual(user.status, "")
        self.assertEqual(user.posts, [])

    def test_register_same_email_twice_conflicts(self):
        from blogfeed.errors import ConflictError

        self.credential_service.register_user("a@x.com", "A", "password1")
        with self.assertRaises(ConflictError):
            self.credential_service.register_user("a@x.com", "Other", "password2")

    def test_register_reports_every_invalid_field(self):
        from blogfeed.errors import ValidationError

        with self.assertRaises(ValidationError) as ctx:
            self.credential_service.register_user("not-an-email", "A", "short")

        fields = [item["field"] for item in ctx.exception.data]
        self.assertEqual(fields, ["email", "password"])

    def test_register_accepts_exactly_eight_character_password(self):
        user_id = self.credential_service.register_user("b@x.com", "B", "12345678")
        self.assertTrue(user_id)

    def test_authenticate_unknown_email(self):
        from blogfeed.errors import NotFoundError

        with self.assertRaises(NotFoundError):
            self.credential_service.authenticate("nobody@x.com", "password1")

    def test_authenticate_wrong_password(self):
        from blogfeed.errors import AuthError

        self.credential_service.register_user("a@x.com", "A", "password1")
        with self.assertRaises(AuthError):
            self.credential_service.authenticate("a@x.com", "password2")

    def test_issued_token_verifies_to_user_and_email(self):
        user_id = self.credential_service.register_user("a@x.com", "A", "password1")
        result = self.credential_service.authenticate("a@x.com", "password1")

        self.assertEqual(result["user_id"], user_id)
        self.assertEqual(
            self.credential_service.verify_token(result["token"]),
            (user_id, "a@x.com"),
        )

    def test_issued_token_expires_after_one_hour(self):
        self.credential_service.register_user("a@x.com", "A", "password1")
        token = self.credential_service.authenticate("a@x.com", "password1")["token"]

        claims = jwt.decode(token, TEST_SECRET, algorithms=["HS256"])
        self.assertEqual(claims["exp"] - claims["iat"], 3600)

    def test_verify_token_with_wrong_signature_is_absent(self):
        now = datetime.now(timezone.utc)
        forged = jwt.encode(
            {
                "sub": "1",
                "email": "a@x.com",
                "type": "access",
                "iat": now,
                "nbf": now,
                "exp": now + timedelta(hours=1),
            },
            "some-other-secret-that-is-also-long-enough",
            algorithm="HS256",
        )
        self.assertIsNone(self.credential_service.verify_token(forged))

    def test_verify_token_expired_is_absent(self):
        from flask_jwt_extended import create_access_token

        token = create_access_token(identity="1", expires_delta=timedelta(seconds=-5))
        self.assertIsNone(self.credential_service.verify_token(token))

    def test_verify_token_rejects_refresh_tokens(self):
        from flask_jwt_extended import create_refresh_token

        token = create_refresh_token(identity="1")
        self.assertIsNone(self.credential_service.verify_token(token))

    def test_verify_token_missing_or_malformed_is_absent(self):
        self.assertIsNone(self.credential_service.verify_token(None))
        self.assertIsNone(self.credential_service.verify_token(""))
        self.assertIsNone(self.credential_service.verify_token("not.a.token"))


if __name__ == "__main__":
    unittest.main()

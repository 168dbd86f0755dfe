"""Unit tests for app.core.security: bcrypt hashing and the access/refresh token issuer."""

import unittest
from datetime import UTC, datetime, timedelta
from types import SimpleNamespace

import jwt
from pydantic import SecretStr

from app.core.config import Settings
from app.core.security import TokenIssuer, hash_password, verify_password


def _issuer(**kwargs: object) -> TokenIssuer:
    defaults = {
        "access_secret": "access-secret",
        "refresh_secret": "refresh-secret",
        "access_expire_minutes": 15,
        "refresh_expire_minutes": 60,
    }
    defaults.update(kwargs)
    return TokenIssuer(**defaults)


class TestPasswordHashing(unittest.TestCase):
    """hash_password is salted and one-way; verify_password checks against the hash."""

    def test_hash_is_not_plaintext_and_verifies(self) -> None:
        hashed = hash_password("secret", rounds=4)
        self.assertNotEqual(hashed, "secret")
        self.assertTrue(hashed.startswith("$2"))
        self.assertTrue(verify_password("secret", hashed))

    def test_wrong_password_fails(self) -> None:
        hashed = hash_password("secret", rounds=4)
        self.assertFalse(verify_password("Secret", hashed))

    def test_same_password_gets_different_salts(self) -> None:
        self.assertNotEqual(hash_password("secret", rounds=4), hash_password("secret", rounds=4))

    def test_malformed_hash_returns_false(self) -> None:
        self.assertFalse(verify_password("secret", "not-a-bcrypt-hash"))

    def test_long_password_is_truncated_consistently(self) -> None:
        long_pw = "x" * 100
        hashed = hash_password(long_pw, rounds=4)
        self.assertTrue(verify_password(long_pw, hashed))


class TestTokenIssuer(unittest.TestCase):
    """Access and refresh tokens carry the user id, expire, and are not interchangeable."""

    def setUp(self) -> None:
        self.issuer = _issuer()
        self.user = SimpleNamespace(id=7, email="a@x.com")

    def test_access_token_claims(self) -> None:
        token = self.issuer.generate_access_token(self.user)
        payload = self.issuer.decode_access_token(token)
        self.assertEqual(payload["sub"], "7")
        self.assertEqual(payload["email"], "a@x.com")
        self.assertEqual(payload["type"], "access")
        self.assertEqual(payload["exp"] - payload["iat"], 15 * 60)

    def test_refresh_token_claims(self) -> None:
        token = self.issuer.generate_refresh_token(self.user)
        payload = self.issuer.decode_refresh_token(token)
        self.assertEqual(payload["sub"], "7")
        self.assertEqual(payload["type"], "refresh")
        self.assertNotIn("email", payload)
        self.assertEqual(payload["exp"] - payload["iat"], 60 * 60)

    def test_refresh_token_rejected_as_access_token(self) -> None:
        token = self.issuer.generate_refresh_token(self.user)
        with self.assertRaises(jwt.PyJWTError):
            self.issuer.decode_access_token(token)

    def test_access_token_rejected_as_refresh_token_even_with_shared_secret(self) -> None:
        issuer = _issuer(refresh_secret="access-secret")
        token = issuer.generate_access_token(self.user)
        with self.assertRaises(jwt.InvalidTokenError):
            issuer.decode_refresh_token(token)

    def test_token_signed_with_other_secret_rejected(self) -> None:
        token = _issuer(access_secret="other").generate_access_token(self.user)
        with self.assertRaises(jwt.InvalidSignatureError):
            self.issuer.decode_access_token(token)

    def test_expired_token_rejected(self) -> None:
        now = datetime.now(UTC)
        token = jwt.encode(
            {
                "sub": "7",
                "type": "access",
                "jti": "expired",
                "iat": now - timedelta(hours=2),
                "exp": now - timedelta(hours=1),
            },
            "access-secret",
            algorithm="HS256",
        )
        with self.assertRaises(jwt.ExpiredSignatureError):
            self.issuer.decode_access_token(token)

    def test_each_token_is_unique(self) -> None:
        first = self.issuer.generate_refresh_token(self.user)
        second = self.issuer.generate_refresh_token(self.user)
        self.assertNotEqual(first, second)
        self.assertNotEqual(
            self.issuer.decode_refresh_token(first)["jti"],
            self.issuer.decode_refresh_token(second)["jti"],
        )

    def test_token_without_jti_rejected(self) -> None:
        now = datetime.now(UTC)
        token = jwt.encode(
            {"sub": "7", "type": "access", "iat": now, "exp": now + timedelta(minutes=5)},
            "access-secret",
            algorithm="HS256",
        )
        with self.assertRaises(jwt.MissingRequiredClaimError):
            self.issuer.decode_access_token(token)

    def test_from_settings(self) -> None:
        settings = Settings(
            _env_file=None,
            ACCESS_TOKEN_SECRET=SecretStr("a-secret"),
            REFRESH_TOKEN_SECRET=SecretStr("r-secret"),
            ACCESS_TOKEN_EXPIRE_MINUTES=5,
            REFRESH_TOKEN_EXPIRE_MINUTES=50,
        )
        issuer = TokenIssuer.from_settings(settings)
        self.assertEqual(issuer.access_expire, timedelta(minutes=5))
        self.assertEqual(issuer.refresh_expire, timedelta(minutes=50))
        token = issuer.generate_access_token(self.user)
        payload = jwt.decode(token, "a-secret", algorithms=["HS256"])
        self.assertEqual(payload["sub"], "7")


if __name__ == "__main__":
    unittest.main()

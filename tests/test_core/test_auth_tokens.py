from datetime import timedelta

import jwt
import pytest

from core.auth import JWTManager, PasswordManager, gravatar_url
from core.exceptions import AuthenticationError


class TestJWTManager:
    """Test session token creation and verification."""

    def test_round_trip(self, jwt_manager):
        token = jwt_manager.create_token("user-1")
        assert jwt_manager.verify_token(token) == "user-1"

    def test_payload_shape(self, jwt_manager):
        payload = jwt_manager.decode_token(jwt_manager.create_token("user-1"))

        assert payload["user"] == {"id": "user-1"}
        assert payload["exp"] - payload["iat"] == 3600

    def test_default_expiry(self):
        manager = JWTManager(secret_key="default-expiry-secret-key-for-hs256-tests")
        payload = manager.decode_token(manager.create_token("user-1"))

        assert payload["exp"] - payload["iat"] == 360000

    def test_missing_token(self, jwt_manager):
        with pytest.raises(AuthenticationError) as exc_info:
            jwt_manager.verify_token(None)
        assert exc_info.value.message == "No token, authorization denied"

        with pytest.raises(AuthenticationError):
            jwt_manager.verify_token("")

    def test_expired_token(self, jwt_manager):
        token = jwt_manager.create_token("user-1", expires_delta=timedelta(seconds=-10))

        with pytest.raises(AuthenticationError) as exc_info:
            jwt_manager.verify_token(token)
        assert exc_info.value.message == "Token is not valid"

    def test_tampered_token(self, jwt_manager):
        token = jwt_manager.create_token("user-1")
        header, payload, signature = token.split(".")
        tampered = ".".join([header, payload, signature[::-1]])

        with pytest.raises(AuthenticationError):
            jwt_manager.verify_token(tampered)

    def test_token_signed_with_other_secret(self, jwt_manager):
        token = JWTManager(secret_key="another-secret-key-that-is-long-enough-too").create_token("user-1")

        with pytest.raises(AuthenticationError):
            jwt_manager.verify_token(token)

    def test_token_without_user(self, jwt_manager):
        token = jwt.encode({"sub": "user-1"}, jwt_manager.secret_key, algorithm="HS256")

        with pytest.raises(AuthenticationError):
            jwt_manager.verify_token(token)

    def test_generated_secret_when_unset(self):
        manager = JWTManager()
        assert len(manager.secret_key) >= 32


class TestPasswordManager:
    """Test password hashing."""

    def test_hash_and_verify(self, password_manager):
        hashed = password_manager.hash_password("secret1")

        assert hashed != "secret1"
        assert password_manager.verify_password("secret1", hashed)
        assert not password_manager.verify_password("secret2", hashed)

    def test_hashes_are_salted(self, password_manager):
        assert password_manager.hash_password("secret1") != password_manager.hash_password(
            "secret1"
        )

    def test_malformed_hash(self):
        assert PasswordManager.verify_password("secret1", "not-a-hash") is False


class TestGravatar:
    """Test avatar URL derivation."""

    def test_gravatar_url(self):
        url = gravatar_url("MyEmailAddress@example.com ")

        assert url == (
            "https://www.gravatar.com/avatar/0bc83cb571cd1c50ba6f3e8a78ef1346"
            "?s=200&r=pg&d=mm"
        )

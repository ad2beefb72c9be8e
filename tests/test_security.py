import unittest
from unittest.mock import patch

from fastapi import HTTPException

from shopledger.config import Settings
from shopledger.core.security import authenticate_request


def _settings(**overrides):
    values = {"API_KEYS": "shop-key:manager, plain-key", "DEFAULT_USER_ID": "owner"}
    values.update(overrides)
    return Settings(**values)


class AuthenticateRequestTest(unittest.TestCase):
    def test_api_key_maps_to_user(self):
        with patch("shopledger.core.security.get_settings", return_value=_settings()):
            session = authenticate_request("shop-key", None)
            plain = authenticate_request("plain-key", None)

        self.assertEqual(session.user_id, "manager")
        self.assertEqual(plain.user_id, "owner")

    def test_missing_credentials(self):
        with patch("shopledger.core.security.get_settings", return_value=_settings()):
            self.assertIsNone(authenticate_request(None, None))
            with self.assertRaises(HTTPException) as ctx:
                authenticate_request("wrong-key", None, require_auth=True)

        self.assertEqual(ctx.exception.status_code, 401)

    def test_bearer_token_without_jwt_secret_is_rejected(self):
        with patch("shopledger.core.security.get_settings", return_value=_settings()):
            with self.assertRaises(HTTPException) as ctx:
                authenticate_request(None, "Bearer abc.def.ghi", require_auth=True)

        self.assertEqual(ctx.exception.status_code, 401)

    def test_bearer_token_claims_become_session(self):
        import jwt

        settings = _settings(JWT_SECRET="s3cret-for-tests-only-0123456789")
        token = jwt.encode(
            {"sub": "u42", "name": "Sam", "email": "sam@example.com"},
            settings.JWT_SECRET,
            algorithm="HS256",
        )
        with patch("shopledger.core.security.get_settings", return_value=settings):
            session = authenticate_request(None, "Bearer {}".format(token))

        self.assertEqual(session.user_id, "u42")
        self.assertEqual(session.user_name, "Sam")
        self.assertEqual(session.user_email, "sam@example.com")

    def test_invalid_token_is_rejected(self):
        settings = _settings(JWT_SECRET="s3cret-for-tests-only-0123456789")
        with patch("shopledger.core.security.get_settings", return_value=settings):
            with self.assertRaises(HTTPException) as ctx:
                authenticate_request(None, "Bearer not-a-token")

        self.assertEqual(ctx.exception.status_code, 401)


if __name__ == "__main__":
    unittest.main()

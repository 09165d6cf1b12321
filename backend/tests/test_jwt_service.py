"""
Tests for JWT minting and validation.

Covers:
- Round trips and claim layout
- Expiry, including the exact ``now == exp`` boundary
- Wrong secret, tampering, wrong issuer, foreign algorithms
- Malformed tokens and subjects
- Rejections never echo the secret
"""

import base64
import json
import uuid
from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt

from auth.errors import (
    AuthError,
    AuthErrorKind,
    InvalidSignatureError,
    MalformedSubjectError,
    MalformedTokenError,
    TokenExpiredError,
    TokenSigningError,
    UnsupportedAlgorithmError,
    WrongIssuerError,
)
from auth.jwt_service import TokenService

SECRET = "secret"
T0 = datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


class FakeClock:
    """Settable clock for deterministic expiry checks."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


def _b64(data: dict) -> str:
    raw = json.dumps(data, separators=(",", ":")).encode()
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode()


def _claims(sub: str = None, iss: str = "chirpy", lifetime: timedelta = timedelta(minutes=5)) -> dict:
    now = datetime.now(timezone.utc)
    return {
        "iss": iss,
        "sub": sub if sub is not None else str(uuid.uuid4()),
        "iat": now,
        "exp": now + lifetime,
    }


class TestMint:

    def test_header_is_hs256_jwt(self, token_service):
        token = token_service.mint(uuid.uuid4(), SECRET, timedelta(minutes=5))
        assert token.count(".") == 2
        assert jwt.get_unverified_header(token) == {"alg": "HS256", "typ": "JWT"}

    def test_registered_claims(self):
        user_id = uuid.uuid4()
        service = TokenService(clock=FakeClock(T0))
        token = service.mint(user_id, SECRET, timedelta(minutes=5))

        claims = jwt.get_unverified_claims(token)
        assert claims["iss"] == "chirpy"
        assert claims["sub"] == str(user_id)
        assert claims["iat"] == int(T0.timestamp())
        assert claims["exp"] == int((T0 + timedelta(minutes=5)).timestamp())

    def test_custom_issuer(self):
        token = TokenService(issuer="other").mint(uuid.uuid4(), SECRET, timedelta(minutes=1))
        assert jwt.get_unverified_claims(token)["iss"] == "other"

    def test_bytes_secret(self, token_service):
        user_id = uuid.uuid4()
        token = token_service.mint(user_id, b"\x00\xffbinary-key", timedelta(minutes=1))
        assert token_service.validate(token, b"\x00\xffbinary-key") == user_id

    @pytest.mark.parametrize("lifetime", [timedelta(0), timedelta(seconds=-30)])
    def test_non_positive_lifetime_mints_expired_token(self, token_service, lifetime):
        token = token_service.mint(uuid.uuid4(), SECRET, lifetime)
        with pytest.raises(TokenExpiredError) as exc_info:
            token_service.validate(token, SECRET)
        assert exc_info.value.kind is AuthErrorKind.EXPIRED

    @pytest.mark.parametrize("secret", [b"ssh-rsa AAAA", "-----BEGIN PUBLIC KEY-----abc"])
    def test_key_refused_by_signer(self, token_service, secret):
        with pytest.raises(TokenSigningError) as exc_info:
            token_service.mint(uuid.uuid4(), secret, timedelta(minutes=5))
        assert exc_info.value.kind is AuthErrorKind.SIGNING_FAILURE
        assert exc_info.value.expected is False

    def test_key_refused_by_verifier(self, token_service):
        token = token_service.mint(uuid.uuid4(), SECRET, timedelta(minutes=5))
        with pytest.raises(InvalidSignatureError):
            token_service.validate(token, b"ssh-rsa AAAA")


class TestValidate:

    def test_round_trip(self, token_service):
        user_id = uuid.uuid4()
        token = token_service.mint(user_id, SECRET, timedelta(minutes=5))
        assert token_service.validate(token, SECRET) == user_id

    def test_random_round_trips_respect_expiry(self):
        """Never a false rejection before exp, never an acceptance at or after it."""
        clock = FakeClock(T0)
        service = TokenService(clock=clock)
        lifetime = timedelta(minutes=5)
        expires_at = T0 + lifetime

        for _ in range(1000):
            user_id = uuid.uuid4()
            clock.now = T0
            token = service.mint(user_id, SECRET, lifetime)

            assert service.validate(token, SECRET) == user_id
            clock.now = expires_at - timedelta(microseconds=1)
            assert service.validate(token, SECRET) == user_id

            for now in (expires_at, expires_at + timedelta(seconds=1)):
                clock.now = now
                with pytest.raises(TokenExpiredError):
                    service.validate(token, SECRET)

    def test_expiry_boundary_rejects(self):
        clock = FakeClock(T0)
        service = TokenService(clock=clock)
        token = service.mint(uuid.uuid4(), SECRET, timedelta(seconds=60))

        clock.now = T0 + timedelta(seconds=60)
        with pytest.raises(TokenExpiredError):
            service.validate(token, SECRET)

    def test_wrong_secret(self, token_service):
        token = token_service.mint(uuid.uuid4(), "s1", timedelta(minutes=5))
        with pytest.raises(InvalidSignatureError) as exc_info:
            token_service.validate(token, "s2")
        assert exc_info.value.kind is AuthErrorKind.INVALID_SIGNATURE

    def test_tampered_payload(self, token_service):
        victim = token_service.mint(uuid.uuid4(), SECRET, timedelta(minutes=5))
        attacker = token_service.mint(uuid.uuid4(), "attacker-secret", timedelta(minutes=5))

        header, _, signature = victim.split(".")
        forged = ".".join([header, attacker.split(".")[1], signature])
        with pytest.raises(InvalidSignatureError):
            token_service.validate(forged, SECRET)

    def test_wrong_issuer(self, token_service):
        token = TokenService(issuer="not-chirpy").mint(uuid.uuid4(), SECRET, timedelta(minutes=5))
        with pytest.raises(WrongIssuerError) as exc_info:
            token_service.validate(token, SECRET)
        assert exc_info.value.kind is AuthErrorKind.WRONG_ISSUER

    def test_missing_issuer(self, token_service):
        claims = _claims()
        del claims["iss"]
        token = jwt.encode(claims, SECRET, algorithm="HS256")
        with pytest.raises(WrongIssuerError):
            token_service.validate(token, SECRET)

    def test_issuer_is_per_instance(self):
        token = TokenService(issuer="a").mint(uuid.uuid4(), SECRET, timedelta(minutes=5))
        TokenService(issuer="a").validate(token, SECRET)
        with pytest.raises(WrongIssuerError):
            TokenService(issuer="b").validate(token, SECRET)

    @pytest.mark.parametrize("algorithm", ["HS384", "HS512"])
    def test_other_hmac_algorithms_rejected(self, token_service, algorithm):
        token = jwt.encode(_claims(), SECRET, algorithm=algorithm)
        with pytest.raises(UnsupportedAlgorithmError) as exc_info:
            token_service.validate(token, SECRET)
        assert exc_info.value.kind is AuthErrorKind.UNSUPPORTED_ALGORITHM

    def test_alg_none_rejected(self, token_service):
        claims = _claims()
        claims["iat"] = int(claims["iat"].timestamp())
        claims["exp"] = int(claims["exp"].timestamp())
        token = f"{_b64({'alg': 'none', 'typ': 'JWT'})}.{_b64(claims)}."
        with pytest.raises(UnsupportedAlgorithmError):
            token_service.validate(token, SECRET)

    @pytest.mark.parametrize("subject", ["not-a-uuid", "", "1234"])
    def test_malformed_subject(self, token_service, subject):
        token = jwt.encode(_claims(sub=subject), SECRET, algorithm="HS256")
        with pytest.raises(MalformedSubjectError) as exc_info:
            token_service.validate(token, SECRET)
        assert exc_info.value.kind is AuthErrorKind.MALFORMED_SUBJECT

    def test_non_string_subject(self, token_service):
        claims = _claims()
        claims["sub"] = 42
        token = jwt.encode(claims, SECRET, algorithm="HS256")
        with pytest.raises(MalformedSubjectError):
            token_service.validate(token, SECRET)

    def test_missing_subject(self, token_service):
        claims = _claims()
        del claims["sub"]
        token = jwt.encode(claims, SECRET, algorithm="HS256")
        with pytest.raises(MalformedSubjectError):
            token_service.validate(token, SECRET)

    def test_missing_expiry(self, token_service):
        claims = _claims()
        del claims["exp"]
        token = jwt.encode(claims, SECRET, algorithm="HS256")
        with pytest.raises(MalformedTokenError):
            token_service.validate(token, SECRET)

    @pytest.mark.parametrize("token", ["", "garbage", "a.b", "a.b.c"])
    def test_malformed_token(self, token_service, token):
        with pytest.raises(MalformedTokenError) as exc_info:
            token_service.validate(token, SECRET)
        assert exc_info.value.kind is AuthErrorKind.MALFORMED_TOKEN

    def test_checks_run_in_order(self):
        """An expired token signed with the wrong key reports the signature first."""
        token = TokenService().mint(uuid.uuid4(), "s1", timedelta(seconds=-10))
        with pytest.raises(InvalidSignatureError):
            TokenService().validate(token, "s2")

    def test_errors_do_not_leak_secret(self, token_service):
        secret = "super-secret-signing-key"
        token = token_service.mint(uuid.uuid4(), secret, timedelta(seconds=-1))
        for candidate_secret in (secret, "wrong-" + secret):
            with pytest.raises(AuthError) as exc_info:
                token_service.validate(token, candidate_secret)
            message = str(exc_info.value)
            assert secret not in message
            assert token.split(".")[2] not in message

"""Unit tests for auth/store.py and auth/accounts.py.

Covers:
- principals round-trip through create / get_by_username / get_by_id
- per-namespace username uniqueness; duplicates leave the store untouched
- the same username may exist once as a User and once as an Admin
- register then login yields a token for the same id and kind
- wrong password -> InvalidCredentials, unknown username -> NotFoundError
- a password bcrypt refuses fails registration without touching the store
- database failures surface as PersistenceError
"""

import pytest
from sqlalchemy.exc import OperationalError

from auth import accounts
from auth.models import PrincipalKind
from auth.passwords import verify_password
from auth.store import CredentialStore
from auth.tokens import TokenService
from core.errors import DuplicateUsername, InvalidCredentials, NotFoundError, PersistenceError, ValidationError

SECRET = "c" * 40


def _broken(*args, **kwargs):
    raise OperationalError("SELECT 1", {}, Exception("database is locked"))


@pytest.fixture
def tokens() -> TokenService:
    return TokenService(SECRET)


class TestCredentialStore:
    def test_create_and_lookup(self, credentials: CredentialStore) -> None:
        pid = credentials.create_principal(PrincipalKind.user, "alice", "hash-1")
        by_name = credentials.get_by_username(PrincipalKind.user, "alice")
        by_id = credentials.get_by_id(PrincipalKind.user, pid)
        assert by_name is not None and by_id is not None
        assert by_name.id == by_id.id == pid
        assert by_name.password_hash == "hash-1"
        assert by_name.kind is PrincipalKind.user
        assert by_name.created_at

    def test_ids_are_opaque_and_unique(self, credentials: CredentialStore) -> None:
        a = credentials.create_principal(PrincipalKind.user, "a", "h")
        b = credentials.create_principal(PrincipalKind.user, "b", "h")
        assert isinstance(a, str) and a != b

    def test_duplicate_in_same_namespace_fails_without_mutation(self, credentials: CredentialStore) -> None:
        credentials.create_principal(PrincipalKind.admin, "bob", "hash-1")
        with pytest.raises(DuplicateUsername):
            credentials.create_principal(PrincipalKind.admin, "bob", "hash-2")
        assert credentials.count(PrincipalKind.admin) == 1
        assert credentials.get_by_username(PrincipalKind.admin, "bob").password_hash == "hash-1"

    def test_same_username_across_namespaces(self, credentials: CredentialStore) -> None:
        user_id = credentials.create_principal(PrincipalKind.user, "carol", "h")
        admin_id = credentials.create_principal(PrincipalKind.admin, "carol", "h")
        assert user_id != admin_id
        assert credentials.count(PrincipalKind.user) == 1
        assert credentials.count(PrincipalKind.admin) == 1

    def test_namespaces_are_disjoint(self, credentials: CredentialStore) -> None:
        user_id = credentials.create_principal(PrincipalKind.user, "dave", "h")
        assert credentials.get_by_id(PrincipalKind.admin, user_id) is None
        assert credentials.get_by_username(PrincipalKind.admin, "dave") is None

    def test_unknown_lookups_return_none(self, credentials: CredentialStore) -> None:
        assert credentials.get_by_id(PrincipalKind.user, "missing") is None
        assert credentials.get_by_username(PrincipalKind.user, "missing") is None


class TestAccounts:
    @pytest.mark.parametrize("kind", list(PrincipalKind))
    def test_register_then_login(self, credentials: CredentialStore, tokens: TokenService, kind) -> None:
        pid = accounts.register(credentials, kind, "erin", "s3cret")
        token = accounts.login(credentials, tokens, kind, "erin", "s3cret")
        claims = tokens.verify(token)
        assert claims.id == pid
        assert claims.role is kind

    def test_password_stored_hashed(self, credentials: CredentialStore) -> None:
        accounts.register(credentials, PrincipalKind.user, "frank", "pw1")
        stored = credentials.get_by_username(PrincipalKind.user, "frank")
        assert stored.password_hash != "pw1"
        assert verify_password("pw1", stored.password_hash)

    def test_wrong_password(self, credentials: CredentialStore, tokens: TokenService) -> None:
        accounts.register(credentials, PrincipalKind.user, "grace", "right")
        with pytest.raises(InvalidCredentials):
            accounts.login(credentials, tokens, PrincipalKind.user, "grace", "wrong")

    def test_unknown_username(self, credentials: CredentialStore, tokens: TokenService) -> None:
        with pytest.raises(NotFoundError):
            accounts.login(credentials, tokens, PrincipalKind.user, "nobody", "pw")

    def test_user_credentials_do_not_log_in_as_admin(self, credentials: CredentialStore, tokens: TokenService) -> None:
        accounts.register(credentials, PrincipalKind.user, "heidi", "pw")
        with pytest.raises(NotFoundError):
            accounts.login(credentials, tokens, PrincipalKind.admin, "heidi", "pw")

    def test_duplicate_registration(self, credentials: CredentialStore) -> None:
        accounts.register(credentials, PrincipalKind.user, "ivan", "pw")
        with pytest.raises(DuplicateUsername):
            accounts.register(credentials, PrincipalKind.user, "ivan", "other")

    def test_unhashable_password_leaves_store_empty(self, credentials: CredentialStore, monkeypatch) -> None:
        def refuse(plain: str) -> str:
            raise ValueError("password cannot be longer than 72 bytes")

        monkeypatch.setattr(accounts, "hash_password", refuse)
        with pytest.raises(ValidationError):
            accounts.register(credentials, PrincipalKind.user, "judy", "pw")
        assert credentials.count(PrincipalKind.user) == 0


class TestStoreFailures:
    @pytest.mark.parametrize("method, args", [
        ("get_by_username", ("alice",)),
        ("get_by_id", ("some-id",)),
        ("count", ()),
    ])
    def test_reads_wrap_database_errors(self, credentials: CredentialStore, monkeypatch, method, args) -> None:
        monkeypatch.setattr(credentials.engine, "connect", _broken)
        with pytest.raises(PersistenceError):
            getattr(credentials, method)(PrincipalKind.user, *args)

    def test_create_wraps_database_errors(self, credentials: CredentialStore, monkeypatch) -> None:
        monkeypatch.setattr(credentials.engine, "begin", _broken)
        with pytest.raises(PersistenceError):
            credentials.create_principal(PrincipalKind.user, "alice", "h")

"""
End-to-end lifecycle tests on persistent backends.
"""

import time

import pytest

from fineauth.core.errors import InvalidCredentialsError, UserAlreadyExistsError
from fineauth.db import StorageType, create_storage


@pytest.fixture(params=["sqlite", "mongodb"])
def backend(request, tmp_path, mongo_database):
    if request.param == "sqlite":
        return create_storage(StorageType.SQLITE, tmp_path / "auth.db")
    return create_storage(StorageType.MONGODB, mongo_database)


class TestAuthFlow:

    def test_full_lifecycle(self, make_auth, backend):
        auth = make_auth(backend=backend)

        signed_up = auth.sign_up("Flow@Example.com", "s3cure-pass")
        with pytest.raises(UserAlreadyExistsError):
            auth.sign_up("flow@example.com", "other")

        signed_in = auth.sign_in("FLOW@example.com", "s3cure-pass")
        with pytest.raises(InvalidCredentialsError):
            auth.sign_in("flow@example.com", "wrong")

        validation = auth.validate_session(signed_in.token)
        assert validation.user.email == "flow@example.com"
        assert validation.user.id == signed_up.user.id

        auth.sign_out(signed_in.token)
        assert auth.validate_session(signed_in.token) is None
        assert auth.validate_session(signed_up.token) is not None

        auth.sign_out_all(signed_up.user.id)
        assert auth.validate_session(signed_up.token) is None

    def test_expiry(self, make_auth, backend):
        auth = make_auth(expires_in="1ms", backend=backend)
        result = auth.sign_up("short@example.com", "pw")
        time.sleep(0.01)

        assert auth.validate_session(result.token) is None
        assert backend.get_session(result.session.id) is None

    def test_tokens_survive_manager_restart(self, make_auth, backend):
        result = make_auth(backend=backend).sign_up("restart@example.com", "pw")

        restarted = make_auth(backend=backend)

        assert restarted.validate_session(result.token).user.email == "restart@example.com"

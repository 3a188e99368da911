"""
Test doubles and request helpers shared across the test modules.
"""
from datetime import datetime, timedelta, timezone

from ums_platform.ums_service.errors import WalletProvisionFailure
from ums_platform.ums_service.external.wallet import Wallet


class FakeWalletClient:
    def __init__(self, fail=False):
        self.fail = fail
        self.calls = []

    def create_wallet(self, user_id):
        self.calls.append(user_id)
        if self.fail:
            raise WalletProvisionFailure("got error response from wallet service 503")
        return Wallet(id=100 + user_id, user_id=user_id, balance=0.0)


class FakeClock:
    def __init__(self, now=None):
        self.now = now or datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now = self.now + timedelta(**kwargs)


def register_user(client, username="alice", email="alice@x.com", full_name="Alice Liddell", password="secret123"):
    return client.post(
        "/user/v1/register",
        json={"username": username, "email": email, "full_name": full_name, "password": password},
    )


def login_user(client, username="alice", password="secret123"):
    return client.post("/user/v1/login", json={"username": username, "password": password})


def auth_header(token):
    return {"Authorization": token}

"""
Account registration followed by wallet provisioning.
"""
from dataclasses import dataclass
import logging
from typing import Optional

from ..auth import PasswordVerifier
from ..errors import AccountAlreadyExists, WalletProvisionFailure
from ..external.wallet import Wallet, WalletClient
from ..models import User
from ..repository import CredentialStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RegistrationResult:
    user_id: int
    username: str
    email: str
    full_name: str
    wallet: Optional[Wallet]


class RegistrationService:
    def __init__(self, store: CredentialStore, verifier: PasswordVerifier, wallet_client: WalletClient):
        self.store = store
        self.verifier = verifier
        self.wallet_client = wallet_client

    def register(self, username: str, email: str, full_name: str, password: str) -> RegistrationResult:
        """
        Create an account and provision its wallet.

        Wallet provisioning is best effort: a failure is logged and the
        account is kept, with `wallet` left as None in the result.

        Raises:
            AccountAlreadyExists: if the username or email is taken
            StoreError: if the account could not be written
        """
        if self.store.get_user_by_username(username) is not None:
            raise AccountAlreadyExists("username already exists")
        if self.store.get_user_by_email(email) is not None:
            raise AccountAlreadyExists("email already exists")

        user = self.store.insert_user(
            User(
                username=username,
                email=email,
                full_name=full_name,
                password=self.verifier.hash(password),
            )
        )
        logger.info("Account registered: user_id=%s", user.id)

        wallet = None
        try:
            wallet = self.wallet_client.create_wallet(user.id)
        except WalletProvisionFailure as e:
            logger.warning("Wallet provisioning failed: user_id=%s error=%s", user.id, e)

        return RegistrationResult(
            user_id=user.id,
            username=user.username,
            email=user.email,
            full_name=user.full_name,
            wallet=wallet,
        )

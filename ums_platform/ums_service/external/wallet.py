"""
Client for the wallet service, called once after an account is created.
"""
from dataclasses import dataclass
import logging
from typing import Optional

import httpx

from ..errors import WalletProvisionFailure

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Wallet:
    id: int
    user_id: int
    balance: float


class WalletClient:
    def __init__(
        self,
        host: str,
        create_endpoint: str,
        timeout: float = 5.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.url = host.rstrip("/") + "/" + create_endpoint.lstrip("/")
        self.timeout = timeout
        self._transport = transport

    def create_wallet(self, user_id: int) -> Wallet:
        """
        Ask the wallet service to create a wallet for `user_id`.

        Raises:
            WalletProvisionFailure: on connection errors, non-200 responses
                or an unreadable response body
        """
        try:
            with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
                response = client.post(self.url, json={"user_id": user_id})
        except httpx.HTTPError as e:
            raise WalletProvisionFailure(f"failed to connect wallet service: {e}") from e

        if response.status_code != httpx.codes.OK:
            raise WalletProvisionFailure(
                f"got error response from wallet service {response.status_code}"
            )

        try:
            body = response.json()
            # some deployments wrap the wallet in the {message, data} envelope
            if isinstance(body, dict) and isinstance(body.get("data"), dict):
                body = body["data"]
            wallet = Wallet(
                id=int(body["id"]),
                user_id=int(body["user_id"]),
                balance=float(body.get("balance", 0)),
            )
        except (ValueError, KeyError, TypeError) as e:
            raise WalletProvisionFailure("failed to read response body") from e

        logger.info("Wallet created: user_id=%s wallet_id=%s", wallet.user_id, wallet.id)
        return wallet

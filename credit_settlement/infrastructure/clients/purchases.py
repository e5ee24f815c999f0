"""Purchase service HTTP client for fetching credit purchase snapshots"""

from datetime import datetime

import httpx

from credit_settlement.config import settings
from credit_settlement.domain.exceptions import (
    InvalidPurchaseError,
    PurchaseAlreadyRepaidError,
    PurchaseNotFoundError,
    PurchaseServiceError,
)
from credit_settlement.domain.models import Purchase

REPAID_STATUS = "repaid"


class PurchaseClient:
    """Client for the external credit purchase system of record"""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url or settings.purchase_api_base
        self.timeout = timeout or settings.http_timeout_seconds
        self.transport = transport

    async def get_purchase(self, purchase_id: str) -> Purchase:
        """
        Fetch a credit purchase that is still open for repayment.

        Raises:
            PurchaseNotFoundError: Purchase does not exist
            PurchaseAlreadyRepaidError: Purchase is already settled
            PurchaseServiceError: On timeout, HTTP errors, or invalid response
        """
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                response = await client.get(f"{self.base_url}/purchases/{purchase_id}")
                if response.status_code == 404:
                    raise PurchaseNotFoundError(f"Credit purchase {purchase_id} not found")
                response.raise_for_status()
                data = response.json()

                purchase = Purchase(
                    purchase_id=str(data["id"]),
                    principal_amount=data["total_amount"],
                    created_at=datetime.fromisoformat(data["created_at"]),
                )
                status = data.get("status")

            except httpx.TimeoutException as e:
                raise PurchaseServiceError(f"Purchase service timeout after {self.timeout}s") from e
            except httpx.HTTPStatusError as e:
                raise PurchaseServiceError(f"Purchase service error: {e.response.status_code}") from e
            except httpx.RequestError as e:
                raise PurchaseServiceError(f"Purchase service unreachable: {e}") from e
            except (KeyError, ValueError, TypeError, InvalidPurchaseError) as e:
                raise PurchaseServiceError(f"Invalid purchase data from service: {e}") from e

        if status == REPAID_STATUS:
            raise PurchaseAlreadyRepaidError(f"Credit purchase {purchase_id} has already been repaid")
        return purchase

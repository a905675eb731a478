"""HTTP client for the receipt printer bridge."""

from dataclasses import dataclass

import httpx


@dataclass
class HttpxReceiptPrinter:
    """Receipt printer reached through an HTTP print bridge."""

    base_url: str
    http_client: httpx.AsyncClient
    timeout_seconds: float = 10.0

    @classmethod
    def create(
        cls, base_url: str, timeout_seconds: float = 10.0
    ) -> "HttpxReceiptPrinter":
        """Create a printer client with a managed httpx session."""
        return cls(
            base_url=base_url.rstrip("/"),
            http_client=httpx.AsyncClient(),
            timeout_seconds=timeout_seconds,
        )

    async def print_receipt(self, payload: dict[str, object]) -> bool:
        """Submit a receipt and return the bridge's success flag."""
        response = await self.http_client.post(
            f"{self.base_url}/receipts",
            json=payload,
            timeout=self.timeout_seconds,
        )
        response.raise_for_status()
        body = response.json()
        return bool(body.get("success"))

    async def close(self) -> None:
        """Close the underlying HTTP client session."""
        await self.http_client.aclose()

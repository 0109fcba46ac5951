import httpx
from typing import Optional, Dict, Any
from config import settings
import logging

logger = logging.getLogger(__name__)


class LaunchAPIError(Exception):
    """Raised when a launch service call fails"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def _error_message(response: httpx.Response, default: str) -> str:
    """Pull the service error text out of a failed response"""
    try:
        body = response.json()
    except ValueError:
        return default
    if not isinstance(body, dict):
        return default
    error = body.get("error")
    if isinstance(error, str) and error:
        return error
    if isinstance(error, dict) and error.get("message"):
        return str(error["message"])
    return default


class LaunchAPI:
    """Client for the token launch service"""

    def __init__(self, base_url: Optional[str] = None, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self.client = httpx.AsyncClient(
            timeout=settings.request_timeout,
            limits=httpx.Limits(max_keepalive_connections=5, max_connections=10),
            transport=transport
        )

    async def close(self):
        await self.client.aclose()

    async def _request(self, method: str, path: str, default_error: str, **kwargs) -> Any:
        url = f"{self.base_url}{path}"
        logger.info(f"{method} {url}")
        try:
            response = await self.client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            raise LaunchAPIError(f"{default_error}: {e}") from e
        if response.is_error:
            raise LaunchAPIError(_error_message(response, default_error), response.status_code)
        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError as e:
            raise LaunchAPIError(f"{default_error}: invalid response body", response.status_code) from e

    # Launch endpoints
    async def start_launch(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Create a launch session. Returns sessionId, issuerAddress, requiredFunding and status."""
        body = await self._request(
            "POST", "/launch-token", "Failed to initialize token launch", json=payload
        )
        if not isinstance(body, dict):
            raise LaunchAPIError("Failed to initialize token launch: invalid response body")
        # Some deployments wrap the session in a data envelope
        if isinstance(body.get("data"), dict):
            return body["data"]
        return body

    async def get_status(self, session_id: str) -> Dict[str, Any]:
        """Get full session snapshot. Used for polling."""
        return await self._request(
            "GET", f"/launch-token/status/{session_id}", "Failed to fetch launch status"
        )

    async def continue_launch(self, session_id: str, user_address: Optional[str]) -> Dict[str, Any]:
        """Ask the service to resume a stalled launch"""
        payload = {"userAddress": user_address} if user_address else {}
        return await self._request(
            "POST", f"/launch-token/{session_id}/continue", "Failed to continue launch", json=payload
        )

    async def cancel_launch(self, session_id: str, refund_address: Optional[str]) -> Dict[str, Any]:
        """Cancel a launch that is still waiting for funding"""
        payload = {"refundAddress": refund_address} if refund_address else {}
        return await self._request(
            "DELETE", f"/launch-token/{session_id}", "Cancel failed", json=payload
        )

    async def upload_image(self, session_id: str, image_data: str) -> Dict[str, Any]:
        """Attach a token icon (base64 data URL) to a session"""
        return await self._request(
            "POST", f"/launch-token/{session_id}/image", "Image upload failed",
            json={"imageData": image_data}
        )

    # Quote endpoint
    async def calculate_funding(
        self,
        amm_xrp_amount: float,
        anti_snipe: bool,
        token_supply: int,
        user_check_amount: int = 0,
        platform_retention_percent: int = 0
    ) -> Dict[str, Any]:
        """Get XRP cost breakdown for a launch before submitting it"""
        params = {
            "ammXrpAmount": amm_xrp_amount,
            "antiSnipe": "true" if anti_snipe else "false",
            "tokenSupply": token_supply,
            "userCheckAmount": user_check_amount,
            "platformRetentionPercent": platform_retention_percent
        }
        return await self._request(
            "GET", "/launch-token/calculate-funding", "Failed to calculate funding", params=params
        )


# Global API client instance
api = LaunchAPI()

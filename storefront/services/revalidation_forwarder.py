import logging
from typing import Any, Optional

import aiohttp

from storefront.config import Settings

logger = logging.getLogger(__name__)

REVALIDATE_ENDPOINT = "/api/revalidate-products"


class RevalidationForwarder:
    """
    Relays product change events to the revalidation webhook.

    Runs server-side only so the shared secret never reaches the browser.
    """

    def __init__(self, settings: Settings):
        self.secret = settings.REVALIDATE_WEBHOOK_SECRET
        self.base_url = settings.base_url

    @property
    def url(self) -> str:
        return f"{self.base_url}{REVALIDATE_ENDPOINT}"

    async def trigger(self, event_type: str, record: dict[str, Any], old_record: Optional[dict[str, Any]] = None) -> dict:
        if not self.secret:
            logger.error("Revalidation webhook secret is not configured")
            return {"success": False, "error": "Webhook secret not configured"}

        headers = {
            "Authorization": f"Bearer {self.secret}",
            "Content-Type": "application/json",
        }
        payload = {"type": event_type, "record": record, "old_record": old_record}

        try:
            async with aiohttp.ClientSession() as session:
                async with session.post(self.url, json=payload, headers=headers) as resp:
                    if resp.status >= 400:
                        text = await resp.text()
                        logger.error(f"Revalidation failed (status {resp.status}): {text}")
                        return {"success": False, "error": text}
                    result = await resp.json()
        except Exception as e:
            logger.exception("Error triggering revalidation: %s", e)
            return {"success": False, "error": str(e)}

        logger.info(f"✔ Revalidation successful: {result}")
        return {"success": True, "data": result}

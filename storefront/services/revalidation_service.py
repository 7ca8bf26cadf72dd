import hmac
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone

from storefront.cache.page_cache import PageCache
from storefront.products.models import RevalidationEvent

logger = logging.getLogger(__name__)

PRODUCTS_PATH = "/products"
PRODUCTS_TAG = "products"
HOME_PATH = "/"


class WebhookNotConfigured(Exception):
    """No shared secret configured; the webhook refuses to run."""


class WebhookUnauthorized(Exception):
    pass


@dataclass
class RevalidationPlan:
    paths: list[str] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)

    def add_path(self, path: str) -> None:
        if path not in self.paths:
            self.paths.append(path)

    def add_tag(self, tag: str) -> None:
        if tag not in self.tags:
            self.tags.append(tag)


def product_path(slug: str) -> str:
    return f"{PRODUCTS_PATH}/{slug}"


def plan_revalidation(event: RevalidationEvent) -> RevalidationPlan:
    """
    Work out which cached pages and tags a product change makes stale.

    - the listing page and the ``products`` tag, always
    - the detail page of the current slug
    - the detail page of the previous slug when an update renamed it
    - the home page when the product is, or was, featured or a featured deal
    """
    record = event.record or {}
    old_record = event.old_record or {}

    plan = RevalidationPlan()
    plan.add_path(PRODUCTS_PATH)
    plan.add_tag(PRODUCTS_TAG)

    slug = record.get("slug")
    if slug:
        plan.add_path(product_path(slug))

    old_slug = old_record.get("slug")
    if event.type == "UPDATE" and old_slug and old_slug != slug:
        plan.add_path(product_path(old_slug))

    if record.get("is_featured") or old_record.get("is_featured"):
        plan.add_path(HOME_PATH)

    if record.get("is_featured_deal") or old_record.get("is_featured_deal"):
        plan.add_path(HOME_PATH)

    return plan


class RevalidationDispatcher:
    def __init__(self, secret: str | None, cache: PageCache):
        self.secret = secret
        self.cache = cache

    def authorize(self, authorization: str | None) -> None:
        if not self.secret:
            logger.error("Revalidation webhook secret is not configured")
            raise WebhookNotConfigured("Webhook not configured")

        expected = f"Bearer {self.secret}"
        if not authorization or not hmac.compare_digest(authorization.encode("utf-8"), expected.encode("utf-8")):
            logger.error("Invalid revalidation webhook secret")
            raise WebhookUnauthorized("Unauthorized")

    def dispatch(self, event: RevalidationEvent) -> dict:
        record = event.record or {}
        logger.info(
            "Revalidation webhook triggered: type=%s product_id=%s slug=%s",
            event.type, record.get("id"), record.get("slug"),
        )

        plan = plan_revalidation(event)

        for path in plan.paths:
            self.cache.revalidate_path(path)
            logger.info("Revalidated %s", path)
        for tag in plan.tags:
            dropped = self.cache.revalidate_tag(tag)
            logger.info("Revalidated tag %s (%d cached pages)", tag, dropped)

        return {
            "revalidated": True,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "paths": plan.paths,
        }

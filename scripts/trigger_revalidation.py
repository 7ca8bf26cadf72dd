import argparse
import sys, os

import requests

ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.append(ROOT)

from storefront.config import get_settings
from storefront.services.revalidation_forwarder import REVALIDATE_ENDPOINT


def main():
    parser = argparse.ArgumentParser(description="Send a test product event to the revalidation webhook")
    parser.add_argument("slug")
    parser.add_argument("--type", default="UPDATE", choices=["INSERT", "UPDATE", "DELETE"])
    parser.add_argument("--old-slug")
    parser.add_argument("--featured", action="store_true")
    parser.add_argument("--secret", help="override REVALIDATE_WEBHOOK_SECRET (use a wrong one to test 401)")
    args = parser.parse_args()

    settings = get_settings()
    secret = args.secret or settings.REVALIDATE_WEBHOOK_SECRET
    if not secret:
        print("❌ REVALIDATE_WEBHOOK_SECRET not configured")
        sys.exit(1)

    payload = {
        "type": args.type,
        "record": {"slug": args.slug, "is_featured": args.featured},
        "old_record": {"slug": args.old_slug} if args.old_slug else None,
    }
    url = f"{settings.base_url}{REVALIDATE_ENDPOINT}"
    resp = requests.post(url, json=payload, headers={"Authorization": f"Bearer {secret}"}, timeout=10)

    print(f"{url} -> {resp.status_code}")
    print(resp.text)
    if resp.status_code != 200:
        sys.exit(1)


if __name__ == "__main__":
    main()

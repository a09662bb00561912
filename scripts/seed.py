#!/usr/bin/env python3
"""
Seed script: creates a demo domain, one site with default modules, a few
products, a published post and a publishing API key.
Run after migrations: python scripts/seed.py
"""

import asyncio
import os
import sys
from datetime import datetime, timezone
from uuid import uuid4

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sitefront.auth.middleware import hash_api_key
from sitefront.database import async_session_maker
from sitefront.engine.modules import default_modules
from sitefront.models import ApiKey, Domain, Post, Product
from sitefront.models.post import POST_PUBLISHED
from sitefront.models.site import default_site_config
from sitefront.storage.repositories import (
    create_site,
    get_api_key_by_hash,
    get_domain_by_name,
    get_site_by_full_domain,
)

DOMAIN = "demo.localtest.me"
SUBDOMAIN = "mattress"
API_KEY = "sk_site_demo_12345"  # Demo API key - print this for user

PRODUCTS = [
    {
        "slug": "cloudrest-hybrid",
        "name": "CloudRest Hybrid",
        "rank": 1,
        "badge": "Best overall",
        "tagline": "Pocket coils with a cooling foam top",
        "price": {"original": 1299, "current": 899, "currency": "USD"},
        "rating": 9.4,
        "specs": [{"label": "Height", "value": "12 in"}, {"label": "Firmness", "value": "6/10"}],
        "pros": ["Great edge support", "Sleeps cool"],
        "cons": ["Heavy to move"],
        "affiliate_link": "https://example.com/go/cloudrest",
    },
    {
        "slug": "nimbus-foam",
        "name": "Nimbus Foam",
        "rank": 2,
        "badge": "Best value",
        "tagline": "All-foam comfort on a budget",
        "price": {"original": 699, "current": 499, "currency": "USD"},
        "rating": 8.7,
        "pros": ["Low price", "Motion isolation"],
        "cons": ["Sleeps warm"],
        "affiliate_link": "https://example.com/go/nimbus",
    },
    {
        "slug": "terra-latex",
        "name": "Terra Latex",
        "rank": 3,
        "tagline": "Natural latex, firm and bouncy",
        "price": {"original": 1599, "current": 1599, "currency": "USD"},
        "rating": 8.9,
        "affiliate_link": "https://example.com/go/terra",
    },
]


async def seed():
    async with async_session_maker() as session:
        now = datetime.now(timezone.utc)

        domain = await get_domain_by_name(session, DOMAIN)
        if domain:
            print("Domain already exists, using existing.")
        else:
            domain = Domain(id=str(uuid4()), domain=DOMAIN, name="Demo", is_active=True, created_at=now)
            session.add(domain)
            await session.flush()

        full_domain = f"{SUBDOMAIN}.{DOMAIN}"
        site = await get_site_by_full_domain(session, full_domain)
        if site:
            print(f"Site {full_domain} already exists, nothing to seed.")
            return

        site = await create_site(
            session,
            domain=domain,
            subdomain=SUBDOMAIN,
            name="Sleep Lab",
            config=default_site_config("Sleep Lab", now.year),
            modules=default_modules(),
        )

        for data in PRODUCTS:
            session.add(
                Product(
                    id=str(uuid4()),
                    site_id=site.id,
                    show_in_ranking=True,
                    is_active=True,
                    created_at=now,
                    updated_at=now,
                    **data,
                )
            )

        session.add(
            Post(
                id=str(uuid4()),
                site_id=site.id,
                slug="how-to-choose-a-mattress",
                title="How to choose a mattress",
                excerpt="Firmness, materials and trial periods explained.",
                content="<p>Start with your sleeping position.</p>",
                category="Guides",
                tags=["buying-guide", "sleep"],
                status=POST_PUBLISHED,
                published_at=now,
                created_at=now,
                updated_at=now,
            )
        )

        if not await get_api_key_by_hash(session, hash_api_key(API_KEY)):
            session.add(
                ApiKey(
                    id=str(uuid4()),
                    site_id=site.id,
                    name="demo",
                    key_hash=hash_api_key(API_KEY),
                    is_active=True,
                    created_at=now,
                )
            )
        await session.commit()

    print("Seed complete!")
    print(f"Site: {full_domain} (id {site.id})")
    print(f"API Key: {API_KEY}")
    print(f"Try: curl -H 'Host: {full_domain}' http://localhost:8000/")
    print("Publish: curl -X POST http://localhost:8000/api/posts/publish \\")
    print('  -H "Authorization: Bearer ' + API_KEY + '" \\')
    print('  -H "Content-Type: application/json" \\')
    print('  -d \'{"title":"Hello","slug":"hello","content":"<p>Hi</p>"}\'')


if __name__ == "__main__":
    asyncio.run(seed())

#!/usr/bin/env python3
"""
Seed the demo organizations and memberships.

Usage:
    python -m tenancy.seeds.base_seed
    python -m tenancy.seeds.base_seed --only organizations
"""
import argparse
import asyncio
import logging
from datetime import datetime
from typing import Dict

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from tenancy.core.database import AsyncSessionLocal, init_db
from tenancy.models.membership import Membership
from tenancy.models.organization import Organization
from tenancy.seeds.demo_data import DEMO_MEMBERSHIPS, DEMO_ORGANIZATIONS

logger = logging.getLogger(__name__)
logging.basicConfig(level=logging.INFO)


async def get_or_create_organization(db: AsyncSession, seed) -> Organization:
    """Get existing organization by slug or create a new one."""
    result = await db.execute(select(Organization).where(Organization.slug == seed.slug))
    organization = result.scalar_one_or_none()
    if organization:
        logger.info(f"Organization '{seed.slug}' already exists, skipping")
        return organization

    organization = Organization(
        name=seed.name,
        slug=seed.slug,
        plan=seed.plan,
        industry=seed.industry,
        domain=seed.slug,
        custom_domain=seed.custom_domain,
        settings=seed.settings,
        branding=seed.branding,
        features=seed.features,
    )
    db.add(organization)
    await db.flush()
    logger.info(f"Created organization '{seed.slug}' ({organization.id})")
    return organization


async def seed_organizations(db: AsyncSession) -> Dict[str, Organization]:
    organizations = {}
    for seed in DEMO_ORGANIZATIONS:
        organizations[seed.slug] = await get_or_create_organization(db, seed)
    return organizations


async def seed_memberships(db: AsyncSession, organizations: Dict[str, Organization]) -> int:
    created = 0
    for seed in DEMO_MEMBERSHIPS:
        organization = organizations.get(seed.slug)
        if organization is None:
            logger.warning(f"No organization '{seed.slug}' for membership of user {seed.user_id}")
            continue
        result = await db.execute(
            select(Membership).where(
                Membership.user_id == seed.user_id,
                Membership.organization_id == organization.id,
            )
        )
        if result.scalar_one_or_none():
            continue
        db.add(Membership(
            user_id=seed.user_id,
            organization_id=organization.id,
            role=seed.role,
            joined_at=datetime.fromisoformat(seed.joined_at),
        ))
        created += 1
    await db.flush()
    logger.info(f"Created {created} memberships")
    return created


async def run_seed(only: str = None) -> None:
    await init_db()
    async with AsyncSessionLocal() as db:
        organizations = await seed_organizations(db)
        if only != "organizations":
            await seed_memberships(db, organizations)
        await db.commit()


def main():
    parser = argparse.ArgumentParser(description="Seed demo tenancy data")
    parser.add_argument(
        "--only",
        choices=["organizations"],
        help="Seed organizations without memberships"
    )
    args = parser.parse_args()
    asyncio.run(run_seed(only=args.only))


if __name__ == "__main__":
    main()

#!/usr/bin/env python3
"""Seed a database with an administrator and sample incidents.

Administrators cannot be created through the public signup endpoint, so
this is the way to bootstrap one. Incidents are spread over the last
seven days with cycling locations and crime types, which gives enough
rows to exercise pagination, search and sorting.

Usage:
    python scripts/seed_data.py --badge-id ADMIN001 --password changeme --incidents 50
"""

import argparse
import asyncio
import logging
import random
import sys
from datetime import timedelta
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "src"))

from starlette.concurrency import run_in_threadpool  # noqa: E402

from crime_records.api.context import RequestContext  # noqa: E402
from crime_records.core.credential_store import CredentialStore, hash_password  # noqa: E402
from crime_records.core.incident_manager import IncidentManager  # noqa: E402
from crime_records.infrastructure.database.client import db_client  # noqa: E402
from crime_records.infrastructure.database.models import utcnow  # noqa: E402
from crime_records.models import IncidentCreateRequest  # noqa: E402

logger = logging.getLogger("seed_data")

LOCATIONS = [
    "Brodipet 4th Lane, Guntur",
    "Arundelpet Main Road, Near Shankar Vilas, Guntur",
    "RTC Bus Stand Complex, Guntur",
    "Pattabhipuram Main Road, Guntur",
    "Lakshmipuram Circle, Near Chandramouli Theatre, Guntur",
    "Amaravati Road, Gorantla Area, Guntur",
    "Inner Ring Road, Near R&B Guest House, Gujjanagundla, Guntur",
    "AT Agraharam Market Area, Guntur",
    "Vidya Nagar, 1st Lane, Guntur",
    "Market Center, Old Guntur",
    "Collector Office Road, Guntur",
    "SVN Colony Park, Guntur",
    "Nallapadu Road, Guntur",
    "Stambalagaruvu Center, Guntur",
    "Koritepadu Main Road, Guntur",
    "Nagarampalem Police Station Road, Guntur",
    "Etukuru Road, Near Railway Track, Guntur",
    "Pedakakani Village Outskirts",
    "Prathipadu Main Road Junction",
    "Mangalagiri, Near Temple Area",
]

CRIME_TYPES = [
    "Petty Theft (Shop)",
    "Vehicle Theft (Motorcycle)",
    "Public Nuisance (Loitering)",
    "Traffic Violation (Wrong Way Driving)",
    "Noise Complaint (Loud Music Late Night)",
    "Simple Assault (Argument Escalation)",
    "Pickpocketing (Bus Stand)",
    "Chain Snatching Attempt (Failed)",
    "Vandalism (Graffiti)",
    "Domestic Dispute (Verbal)",
    "Missing Person Inquiry (Child)",
    "Burglary (Residential - Attempted)",
    "Illegal Parking",
    "Public Intoxication",
    "Fraudulent Activity Report",
    "Harassment Complaint",
    "Road Rage Incident",
    "Suspicious Person Reported",
    "Property Damage (Minor)",
    "Lost Property Report",
]


def describe(i: int, crime_type: str, location: str) -> str:
    """Vary the description text a little between incidents"""
    if i % 3 == 0:
        return f"Report filed regarding {crime_type} near {location}. Incident #{i} requires follow-up."
    if i % 3 == 1:
        return (
            f"Details for incident #{i}: {crime_type} occurred around specified time at {location}. "
            "Witness statements pending."
        )
    return f"{crime_type} reported by patrol unit at {location} (Ref Incident #{i})."


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Seed the crime records database")
    parser.add_argument("--badge-id", default="ADMIN001", help="Badge ID of the administrator")
    parser.add_argument("--name", default="Station Administrator", help="Administrator display name")
    parser.add_argument("--password", required=True, help="Administrator password (at least 6 characters)")
    parser.add_argument("--incidents", type=int, default=50, help="Number of sample incidents to create")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for reproducible timestamps")
    args = parser.parse_args(argv)

    if len(args.password) < 6:
        parser.error("--password must be at least 6 characters")
    if args.incidents < 0:
        parser.error("--incidents must not be negative")
    return args


async def seed(args: argparse.Namespace) -> None:
    rng = random.Random(args.seed)
    store = CredentialStore()
    incidents = IncidentManager()

    await db_client.initialize()
    try:
        async with db_client.get_session() as db:
            admin = await store.find_by_badge_id(db, args.badge_id)
            if admin is None:
                await store.create_user(db, args.badge_id, args.name, args.password)
                admin = await store.find_by_badge_id(db, args.badge_id)
                logger.info(f"Created administrator {admin.id} (badge {args.badge_id})")
            else:
                admin.password = await run_in_threadpool(hash_password, args.password)
                logger.info(f"Administrator badge {args.badge_id} exists, resetting password")

            admin.is_admin = True
            await db.commit()

            actor = RequestContext(user_id=admin.id, badge_id=admin.badge_id, is_admin=True)
            now = utcnow()

            for i in range(1, args.incidents + 1):
                location = LOCATIONS[(i - 1) % len(LOCATIONS)]
                crime_type = CRIME_TYPES[(i - 1) % len(CRIME_TYPES)]
                request = IncidentCreateRequest(
                    occurred_at=now - timedelta(minutes=rng.randrange(7 * 24 * 60)),
                    location=location,
                    crime_type=crime_type,
                    description=describe(i, crime_type, location),
                )
                incident = await incidents.create_incident(db, request, actor)
                logger.debug(f"Incident #{i}: {incident.case_number}")

            logger.info(f"Created {args.incidents} incidents reported by {args.badge_id}")
    finally:
        await db_client.close()


def main(argv=None) -> int:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    args = parse_args(argv)
    asyncio.run(seed(args))
    return 0


if __name__ == "__main__":
    sys.exit(main())

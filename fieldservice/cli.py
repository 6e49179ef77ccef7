"""CLI for the field-service stack: create schemas, seed demo data."""

from __future__ import annotations

import argparse
import asyncio
import sys

DEMO_TECHNICIANS = [
    {
        "name": "Maria Lopez",
        "email": "maria.lopez@example.com",
        "phone_number": "555-0101",
        "current_location": "North",
        "skills": ["HVAC", "Electrical", "Refrigeration"],
        "experience_years": 8,
        "hourly_rate": 65.0,
    },
    {
        "name": "Dev Patel",
        "email": "dev.patel@example.com",
        "phone_number": "555-0102",
        "current_location": "Downtown",
        "skills": ["Plumbing", "Water Heaters"],
        "experience_years": 5,
        "hourly_rate": 55.0,
    },
    {
        "name": "Sam Okafor",
        "email": "sam.okafor@example.com",
        "phone_number": "555-0103",
        "current_location": "North",
        "skills": ["Electrical", "Generators"],
        "experience_years": 3,
        "hourly_rate": 48.0,
    },
]


async def cmd_init_db(args):
    """Create work-order and technician tables."""
    from fieldservice.db.engine import create_schema, engine
    from fieldservice.db.technician_engine import create_technician_schema, technician_engine

    await create_schema()
    await create_technician_schema()
    await engine.dispose()
    await technician_engine.dispose()
    print("Schemas created.")


async def cmd_seed_technicians(args):
    """Insert demo technicians, skipping any whose email already exists."""
    from fieldservice.db import technician_crud as crud
    from fieldservice.db.technician_engine import (
        create_technician_schema, technician_engine, technician_session_factory,
    )

    await create_technician_schema()
    created = 0
    async with technician_session_factory() as db:
        for fields in DEMO_TECHNICIANS:
            if await crud.get_technician_by_email(db, fields["email"]):
                print(f"  Skipping {fields['email']} (exists)")
                continue
            tech = await crud.create_technician(db, **fields)
            print(f"  Created {tech.name} (id={tech.id}, skills={tech.skills})")
            created += 1
    await technician_engine.dispose()
    print(f"Seeded {created} technician(s).")


def main():
    parser = argparse.ArgumentParser(description="Field service CLI")
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("init-db", help="Create work-order and technician tables")
    subparsers.add_parser("seed-technicians", help="Insert demo technicians")

    args = parser.parse_args()

    if args.command == "init-db":
        asyncio.run(cmd_init_db(args))
    elif args.command == "seed-technicians":
        asyncio.run(cmd_seed_technicians(args))
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()

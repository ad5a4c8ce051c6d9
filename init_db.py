"""
Create the database tables.

Usage:
    python init_db.py          # create tables
    python init_db.py --seed   # create tables and add demo tasks if empty
"""

import asyncio
import sys

from task_tracker.core.database import AsyncSessionLocal, init_db
from task_tracker.services import seed_demo_data


async def main(seed: bool) -> None:
    print("Creating tables...")
    await init_db()
    print("✓ Tables created")

    if seed:
        async with AsyncSessionLocal() as session:
            created = await seed_demo_data(session)
            await session.commit()
        print(f"✓ Demo tasks added: {created}")


if __name__ == "__main__":
    asyncio.run(main(seed="--seed" in sys.argv[1:]))

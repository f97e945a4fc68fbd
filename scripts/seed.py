"""Database seeder: recreates the cards table and fills it with sample cards."""
import asyncio
import argparse
import random
import time
from datetime import datetime, timezone, timedelta
from cards_api.database import engine, async_session, Base
from cards_api.models import Card

TOPICS = ["invoice", "contract", "receipt", "report", "photo", "drawing",
          "manual", "datasheet", "certificate", "presentation"]

async def seed(count: int):
    print(f"Seeding: {count} cards")
    start = time.perf_counter()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    async with async_session() as session:
        batch_size = 500
        for batch_start in range(0, count, batch_size):
            batch_end = min(batch_start + batch_size, count)
            for i in range(batch_start, batch_end):
                topic = random.choice(TOPICS)
                created = datetime.now(timezone.utc) - timedelta(minutes=random.randint(0, 525600))
                # Seeded cards have no file; uploads go through the API so the
                # bucket and the database stay in step.
                session.add(Card(
                    title=f"Card {i}: {topic}",
                    description=f"Sample {topic} card number {i}.",
                    created_at=created,
                    updated_at=created,
                ))
            await session.flush()
            print(f"  Batch {batch_start}-{batch_end}: cards created")

        await session.commit()

    elapsed = time.perf_counter() - start
    print(f"\nSeeding complete in {elapsed:.1f}s")
    print(f"  Cards: {count}")


def main():
    parser = argparse.ArgumentParser(description="Seed the cards database")
    parser.add_argument("--count", type=int, default=1000, help="Number of cards to create")
    parser.add_argument("--small", action="store_true", help="Use small dataset (50 cards)")
    args = parser.parse_args()
    asyncio.run(seed(50 if args.small else args.count))


if __name__ == "__main__":
    main()

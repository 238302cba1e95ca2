"""Database seeding script (a small group trip)"""
import asyncio
import sys
import uuid
from pathlib import Path

# Add parent directory to path to import settleease modules
sys.path.append(str(Path(__file__).parent.parent))

from sqlalchemy import select

from settleease.core.security import create_access_token
from settleease.database import SessionFactory, create_tables
from settleease.models import (Expense, Person, SplitMethod, UserProfile,
                               UserRole)

ADMIN_USER_ID = uuid.UUID("00000000-0000-4000-8000-000000000001")

PEOPLE = ["Alice", "Bob", "Charlie", "Diana"]


def _share(person: Person, amount: float) -> dict:
    return {"personId": str(person.id), "amount": amount}


async def seed_people(session) -> dict:
    """Create the group members that don't exist yet"""
    people = {}
    for name in PEOPLE:
        result = await session.execute(select(Person).where(Person.name == name))
        person = result.scalar_one_or_none()

        if person:
            print(f"  ⏭️  Person '{name}' already exists, skipping...")
        else:
            person = Person(name=name)
            session.add(person)
            await session.flush()
            print(f"  ✅ Created person '{name}'")

        people[name] = person
    return people


async def seed_expenses(session, people: dict) -> int:
    """Create a few trip expenses covering every split method"""
    alice, bob, charlie, diana = (people[n] for n in PEOPLE)

    expenses = [
        Expense(
            description="Hotel",
            total_amount=400,
            category="Bills",
            paid_by=[_share(alice, 400)],
            split_method=SplitMethod.EQUAL,
            shares=[_share(p, 100) for p in (alice, bob, charlie, diana)],
        ),
        Expense(
            description="Taxi",
            total_amount=90,
            category="Transport",
            paid_by=[_share(bob, 60), _share(charlie, 30)],
            split_method=SplitMethod.UNEQUAL,
            shares=[_share(alice, 20), _share(bob, 40), _share(charlie, 30)],
        ),
        Expense(
            description="Birthday dinner",
            total_amount=300,
            category="Food",
            paid_by=[_share(diana, 300)],
            split_method=SplitMethod.ITEMWISE,
            shares=[_share(alice, 90), _share(bob, 90), _share(diana, 70)],
            celebration_contribution=_share(charlie, 50),
            items=[
                {"id": "item-1", "name": "Pizza", "price": 180,
                 "sharedBy": [str(alice.id), str(bob.id)], "categoryName": "Food"},
                {"id": "item-2", "name": "Dessert", "price": 120,
                 "sharedBy": [str(alice.id), str(bob.id), str(diana.id)], "categoryName": "Food"},
            ],
        ),
    ]

    result = await session.execute(select(Expense.description))
    existing = {row[0] for row in result.all()}

    created = 0
    for expense in expenses:
        if expense.description in existing:
            print(f"  ⏭️  Expense '{expense.description}' already exists, skipping...")
            continue
        session.add(expense)
        print(f"  ✅ Created expense '{expense.description}' ({expense.total_amount})")
        created += 1
    return created


async def seed_admin(session) -> None:
    """Give the demo admin user an admin profile"""
    result = await session.execute(
        select(UserProfile).where(UserProfile.user_id == ADMIN_USER_ID)
    )
    if result.scalar_one_or_none():
        print("  ⏭️  Admin profile already exists, skipping...")
        return

    session.add(UserProfile(user_id=ADMIN_USER_ID, role=UserRole.ADMIN, display_name="Admin"))
    print(f"  ✅ Created admin profile for {ADMIN_USER_ID}")


async def main():
    """Main function to run seeding"""
    print("🌱 Seeding database with a demo group...\n")

    try:
        await create_tables()
        async with SessionFactory() as session:
            people = await seed_people(session)
            created = await seed_expenses(session, people)
            await seed_admin(session)
            await session.commit()

        print("\n📊 Summary:")
        print(f"  People: {len(PEOPLE)}")
        print(f"  Expenses created: {created}")
        print("\n🔐 Admin bearer token (30 minutes):")
        print(f"  {create_access_token({'sub': str(ADMIN_USER_ID)})}")
        print("\n✨ Database seeding completed successfully!")
    except Exception as e:
        print(f"\n❌ Error seeding database: {str(e)}")
        raise


if __name__ == "__main__":
    asyncio.run(main())

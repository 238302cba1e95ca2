"""Person data access"""
from typing import List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from settleease.models.person import Person


class PersonRepository:
    """Repository for Person database operations"""

    @staticmethod
    async def get_all(db: AsyncSession) -> List[Person]:
        """
        Get all people ordered by name.

        Args:
            db: Database session

        Returns:
            List of people
        """
        result = await db.execute(select(Person).order_by(Person.name, Person.id))
        return list(result.scalars().all())

    @staticmethod
    async def get_by_id(db: AsyncSession, person_id: UUID) -> Optional[Person]:
        """
        Get person by ID.

        Args:
            db: Database session
            person_id: Person UUID

        Returns:
            Person if found, None otherwise
        """
        result = await db.execute(select(Person).where(Person.id == person_id))
        return result.scalar_one_or_none()

    @staticmethod
    async def create(db: AsyncSession, person: Person) -> Person:
        """
        Insert a person (used by the seed script).

        Args:
            db: Database session
            person: Person to insert

        Returns:
            Created person
        """
        db.add(person)
        await db.flush()
        await db.refresh(person)
        return person

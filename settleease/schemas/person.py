"""Person schemas"""
from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class PersonRead(BaseModel):
    """Person as read from the store"""
    id: UUID
    name: str
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

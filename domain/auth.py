"""Domain Entities - Auth"""
from pydantic import BaseModel, Field
from uuid import UUID, uuid4
from typing import Optional


class User(BaseModel):
    """Back-office operator allowed to call the rental API"""
    user_id: UUID = Field(default_factory=uuid4)
    username: str
    full_name: Optional[str] = None
    disabled: bool = False

    class Config:
        from_attributes = True


class UserInDB(User):
    hashed_password: str

"""Pydantic schemas for records.

Learn: The wire format keeps the original camelCase/Mongo-style names
(_id, idNumber, userId, createdAt) and calls the stored secret "password".
Python-side fields use snake_case; aliases map between the two. Field
names can't start with an underscore in pydantic v2, hence id -> "_id".
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class RecordCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    type: str
    name: str
    id_number: str = Field(alias="idNumber")
    secret: Optional[str] = Field(default="", alias="password")
    notes: Optional[str] = None


class RecordRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID = Field(serialization_alias="_id")
    type: str
    name: str
    id_number: str = Field(serialization_alias="idNumber")
    secret: str = Field(serialization_alias="password")
    notes: Optional[str] = None
    user_id: uuid.UUID = Field(serialization_alias="userId")
    created_at: datetime = Field(serialization_alias="createdAt")


class MessageResponse(BaseModel):
    message: str

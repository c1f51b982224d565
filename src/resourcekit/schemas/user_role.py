"""
Pydantic schemas for the UserRole resource.

One DTO serves input and output. Every field is optional so that partial
payloads (PATCH) can be expressed; the service decides which fields are
required or forbidden for each operation.
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class UserRoleDTO(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID | None = None
    name: str | None = None
    description: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    deleted_at: datetime | None = None

from datetime import datetime
from pydantic import Field
from app.db.models.brand_member import BrandRole
from app.schemas.common import CamelModel

class BrandCreate(CamelModel):
    name: str = Field(min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=500)

class BrandUpdate(CamelModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=500)

class BrandOut(CamelModel):
    id: str
    name: str
    description: str | None = None
    owner_id: str
    role: BrandRole | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

class MemberAdd(CamelModel):
    user_id: str = Field(min_length=1)
    role: BrandRole = BrandRole.MEMBER

class MemberRoleUpdate(CamelModel):
    role: BrandRole

class MemberOut(CamelModel):
    id: str
    brand_id: str
    user_id: str
    role: BrandRole
    invited_by: str | None = None
    accepted_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

from datetime import datetime
from app.schemas.common import CamelModel

class ApiKeyInfoOut(CamelModel):
    has_key: bool
    name: str | None = None
    is_active: bool | None = None
    last_used: datetime | None = None
    created_at: datetime | None = None

class ApiKeyCreatedOut(CamelModel):
    api_key: str
    message: str = "API key generated successfully"

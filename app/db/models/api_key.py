from sqlalchemy import Column, String, Boolean, DateTime, func
from app.db.base import Base, utcnow

class ApiKey(Base):
    __tablename__ = "api_keys"
    id = Column(String, primary_key=True)                       # ulid/uuid
    user_id = Column(String, unique=True, nullable=False)       # sub de Supabase; una key por usuario
    hashed_key = Column(String, unique=True, nullable=False)    # sha256 hex, nunca el secreto
    name = Column(String, nullable=False, default="Default API Key")
    is_active = Column(Boolean, nullable=False, default=True)
    last_used_at = Column(DateTime(timezone=True))
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, server_default=func.now())

from sqlalchemy import Column, String, DateTime, func
from app.db.base import Base, utcnow

class Brand(Base):
    __tablename__ = "brands"
    id = Column(String, primary_key=True)                       # ulid/uuid
    name = Column(String(100), nullable=False)
    description = Column(String(500))
    owner_id = Column(String, nullable=False, index=True)       # sub de Supabase del creador
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, server_default=func.now())

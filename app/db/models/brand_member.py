import enum
from sqlalchemy import Column, String, DateTime, ForeignKey, UniqueConstraint, func
from app.db.base import Base, utcnow

class BrandRole(str, enum.Enum):
    OWNER = "owner"
    ADMIN = "admin"
    MEMBER = "member"

class BrandMember(Base):
    __tablename__ = "brand_members"
    __table_args__ = (
        # un usuario es miembro una sola vez por brand
        UniqueConstraint("brand_id", "user_id", name="uq_brand_members_brand_user"),
    )
    id = Column(String, primary_key=True)
    brand_id = Column(String, ForeignKey("brands.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(String, nullable=False, index=True)
    role = Column(String, nullable=False, default=BrandRole.MEMBER.value)   # 'owner' | 'admin' | 'member'
    invited_by = Column(String)
    accepted_at = Column(DateTime(timezone=True))
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, server_default=func.now())

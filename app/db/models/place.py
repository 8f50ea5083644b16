from sqlalchemy import Column, String, Float, DateTime, ForeignKey, CheckConstraint, JSON, func
from app.db.base import Base, utcnow

class Place(Base):
    __tablename__ = "places"
    __table_args__ = (
        # exactamente uno de owner_id / brand_id
        CheckConstraint("(owner_id IS NULL) <> (brand_id IS NULL)", name="ck_places_single_scope"),
    )
    id = Column(String, primary_key=True)
    name = Column(String, nullable=False)
    address = Column(String)
    city = Column(String)
    state = Column(String)
    lat = Column(Float, nullable=False, index=True)
    lng = Column(Float, nullable=False, index=True)
    location = Column(JSON, nullable=False)    # GeoJSON Point, coordinates = [lng, lat]
    brand_id = Column(String, ForeignKey("brands.id", ondelete="CASCADE"), index=True)
    owner_id = Column(String, index=True)      # legado: places por usuario
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, server_default=func.now())

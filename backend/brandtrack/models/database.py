"""
AI Brand Track Database Models
PostgreSQL with SQLAlchemy ORM
"""

from datetime import datetime
from enum import Enum as PyEnum
from uuid import uuid4

from sqlalchemy import (
    Column, String, Text, Integer, Boolean, DateTime, ForeignKey, Index, JSON, Uuid
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.ext.declarative import declarative_base
from sqlalchemy.orm import relationship

Base = declarative_base()

# JSONB on PostgreSQL, plain JSON elsewhere
JSONType = JSON().with_variant(JSONB(), "postgresql")


# ============================================================================
# ENUMS
# ============================================================================

class SentimentPolarity(str, PyEnum):
    POSITIVE = "positive"
    NEUTRAL = "neutral"
    NEGATIVE = "negative"


class TrendDirection(str, PyEnum):
    UP = "up"
    DOWN = "down"
    STABLE = "stable"


# ============================================================================
# USERS
# ============================================================================

class User(Base):
    """Account mirrored from the auth provider"""
    __tablename__ = "users"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    email = Column(String(255), unique=True, nullable=False, index=True)
    full_name = Column(String(255))
    is_active = Column(Boolean, default=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    analyses = relationship("BrandAnalysis", back_populates="user", cascade="all, delete-orphan")


# ============================================================================
# BRAND ANALYSES
# ============================================================================

class BrandAnalysis(Base):
    """A saved brand analysis run: full results plus the inputs that produced them"""
    __tablename__ = "brand_analyses"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)

    url = Column(Text, nullable=False)
    company_name = Column(String(255))
    industry = Column(String(255))

    analysis_data = Column(JSONType)  # full analysis results
    competitors = Column(JSONType)
    prompts = Column(JSONType)
    credits_used = Column(Integer, default=10)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = relationship("User", back_populates="analyses")
    snapshots = relationship(
        "BrandAnalysisSnapshot",
        back_populates="brand_analysis",
        cascade="all, delete-orphan",
        order_by="desc(BrandAnalysisSnapshot.snapshot_date)",
    )
    source_domains = relationship("SourceDomain", back_populates="brand_analysis", cascade="all, delete-orphan")
    source_pages = relationship("SourcePage", back_populates="brand_analysis", cascade="all, delete-orphan")

    __table_args__ = (
        Index('idx_brand_analysis_user', 'user_id', 'created_at'),
    )


class BrandAnalysisSnapshot(Base):
    """Point-in-time metrics for a brand analysis. Append-only."""
    __tablename__ = "brand_analysis_snapshots"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    brand_analysis_id = Column(
        Uuid(as_uuid=True), ForeignKey("brand_analyses.id", ondelete="CASCADE"), nullable=False
    )

    visibility_score = Column(Integer)  # 0-100
    sentiment_score = Column(Integer)   # 0-100
    share_of_voice = Column(Integer)    # 0-100
    average_position = Column(Integer)
    rank = Column(Integer)              # 1 = strongest entity in the analysis

    snapshot_date = Column(DateTime, default=datetime.utcnow, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    brand_analysis = relationship("BrandAnalysis", back_populates="snapshots")

    __table_args__ = (
        Index('idx_snapshot_analysis_date', 'brand_analysis_id', 'snapshot_date'),
    )


# ============================================================================
# SOURCE TRACKING
# ============================================================================

class SourceDomain(Base):
    """Domain cited by AI responses within one analysis"""
    __tablename__ = "source_domains"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    brand_analysis_id = Column(
        Uuid(as_uuid=True), ForeignKey("brand_analyses.id", ondelete="CASCADE"), nullable=False
    )

    domain = Column(String(255), nullable=False)  # e.g. reddit.com
    domain_name = Column(String(255))             # e.g. Reddit
    times_cited = Column(Integer, default=0)
    share_of_citations = Column(Integer)          # percentage 0-100
    category = Column(String(100))

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    brand_analysis = relationship("BrandAnalysis", back_populates="source_domains")
    pages = relationship("SourcePage", back_populates="domain", cascade="all, delete-orphan")


class SourcePage(Base):
    """Individual cited page"""
    __tablename__ = "source_pages"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    brand_analysis_id = Column(
        Uuid(as_uuid=True), ForeignKey("brand_analyses.id", ondelete="CASCADE"), nullable=False
    )
    domain_id = Column(Uuid(as_uuid=True), ForeignKey("source_domains.id", ondelete="CASCADE"))

    url = Column(Text, nullable=False)
    title = Column(Text)
    times_cited = Column(Integer, default=0)
    share_of_citations = Column(Integer)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    brand_analysis = relationship("BrandAnalysis", back_populates="source_pages")
    domain = relationship("SourceDomain", back_populates="pages")

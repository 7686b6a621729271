"""technology_findings table."""

import uuid
from typing import Optional

from sqlalchemy import Boolean, ForeignKey, Index, Integer, String, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column

from stackscan.core.database import Base


class TechnologyFinding(Base):
    __tablename__ = "technology_findings"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    scan_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("scans.id", ondelete="CASCADE"),
        nullable=False,
    )
    # insertion order within a scan
    position: Mapped[int] = mapped_column(Integer, nullable=False, server_default=text("0"))
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    version: Mapped[Optional[str]] = mapped_column(String(100))
    source_file: Mapped[Optional[str]] = mapped_column(String(500))
    detector: Mapped[Optional[str]] = mapped_column(String(200))
    is_outdated: Mapped[bool] = mapped_column(Boolean, nullable=False, server_default=text("false"))
    latest_version: Mapped[Optional[str]] = mapped_column(String(100))

    __table_args__ = (Index("idx_findings_scan", "scan_id"),)

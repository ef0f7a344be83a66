"""
CBC Exams Backend: Crawled Resource Model
===========================================

What:  ORM model for the `web_crawler_resources` table.
Who:   Read by the search and directory services. Rows are written by the
       crawler's ingestion job, never by this service.

Table Layout:
    - id: UUID primary key
    - parent_url: page the document was discovered on
    - google_drive_download_link / django_relative_path: unique hosted links
    - name / relative_path / parent_directory: filesystem location at crawl time
    - google_cloud_storage_link: public download URL returned to clients
    - categories: free-form tags (PostgreSQL text array)
    - is_extracted / extracted_content: text pulled out of the document,
      searched but never returned in listings

    Index on parent_directory backs the distinct-directory listing.
"""

import uuid
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import JSON, Boolean, DateTime, Index, String, Text, Uuid, text
from sqlalchemy.dialects.postgresql import ARRAY
from sqlalchemy.orm import Mapped, mapped_column

from cbcexams.database import Base


class WebCrawlerResource(Base):
    """
    A single crawled document or file.

    Query Patterns:
        - Keyword search: LOWER(<column>) LIKE '%value%' across six text columns
        - Directory listing: SELECT DISTINCT parent_directory ... ORDER BY parent_directory
        - Directory members: SELECT ... WHERE parent_directory IN (...)
    """

    __tablename__ = "web_crawler_resources"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    parent_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    google_drive_download_link: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
        unique=True,
    )

    name: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    relative_path: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    parent_directory: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    django_relative_path: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
        unique=True,
    )

    google_cloud_storage_link: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    # PostgreSQL stores a varchar(255)[]; SQLite (tests) falls back to JSON
    categories: Mapped[Optional[List[str]]] = mapped_column(
        ARRAY(String(255)).with_variant(JSON(), "sqlite"),
        nullable=True,
    )

    is_extracted: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        server_default=text("false"),
    )

    extracted_content: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    __table_args__ = (
        Index("idx_web_crawler_resources_parent_directory", "parent_directory"),
        Index("idx_web_crawler_resources_created_at", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<WebCrawlerResource(id={self.id}, name='{self.name}')>"

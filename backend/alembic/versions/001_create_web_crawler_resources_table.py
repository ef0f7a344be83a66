"""Create web_crawler_resources table

Revision ID: 001
Revises: None
Create Date: 2024-06-03 00:00:00.000000+00:00

What:  Creates the catalog table the crawler fills and the search endpoints read.
How:   UUID primary key generated by PostgreSQL, text columns for every
       path/link, and a varchar array for categories.

Rollback: downgrade() drops the table (all crawled rows are lost).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "web_crawler_resources",

        sa.Column(
            "id",
            postgresql.UUID(as_uuid=True),
            server_default=sa.text("gen_random_uuid()"),
            nullable=False,
        ),

        sa.Column(
            "parent_url",
            sa.Text(),
            nullable=True,
            comment="Page the document was discovered on",
        ),

        sa.Column("google_drive_download_link", sa.Text(), nullable=True),
        sa.Column("name", sa.Text(), nullable=True),
        sa.Column("relative_path", sa.Text(), nullable=True),

        sa.Column(
            "parent_directory",
            sa.Text(),
            nullable=True,
            comment="Absolute crawl directory; the crawler prefix is stripped on read",
        ),

        sa.Column("django_relative_path", sa.Text(), nullable=True),

        sa.Column(
            "google_cloud_storage_link",
            sa.Text(),
            nullable=True,
            comment="Public download URL returned to clients",
        ),

        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),

        sa.Column("categories", postgresql.ARRAY(sa.String(255)), nullable=True),

        sa.Column(
            "is_extracted",
            sa.Boolean(),
            nullable=False,
            server_default=sa.text("false"),
        ),

        sa.Column(
            "extracted_content",
            sa.Text(),
            nullable=True,
            comment="Text pulled out of the document; searched, never returned",
        ),

        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("google_drive_download_link"),
        sa.UniqueConstraint("django_relative_path"),
    )

    # Distinct-directory listing and IN (...) member lookups
    op.create_index(
        "idx_web_crawler_resources_parent_directory",
        "web_crawler_resources",
        ["parent_directory"],
    )

    # Search results are served newest first
    op.create_index(
        "idx_web_crawler_resources_created_at",
        "web_crawler_resources",
        [sa.text("created_at DESC")],
    )


def downgrade() -> None:
    op.drop_index("idx_web_crawler_resources_created_at", table_name="web_crawler_resources")
    op.drop_index("idx_web_crawler_resources_parent_directory", table_name="web_crawler_resources")
    op.drop_table("web_crawler_resources")

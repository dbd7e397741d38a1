"""SQLAlchemy table definitions - dialect-agnostic (works with SQLite and PostgreSQL)."""

from sqlalchemy import Column, DateTime, Index, MetaData, String, Table, Text

# Metadata object for all tables
metadata = MetaData()

# ============================================================================
# DEPLOYMENTS TABLE
# ============================================================================
deployments_table = Table(
    "deployments",
    metadata,
    Column("id", String, primary_key=True),
    Column("owner_id", String, nullable=False),
    Column("data", Text, nullable=False),  # raw descriptor YAML
    Column("created_at", DateTime(timezone=True), nullable=False),
    Column("updated_at", DateTime(timezone=True), nullable=False),
)

Index("idx_deployments_owner_id", deployments_table.c.owner_id)

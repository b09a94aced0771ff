"""initial schema

Revision ID: 5c1e2a7d9b40
Revises:
Create Date: 2025-11-09 12:37:32.000000

Creates satellite_data, geospatial_analysis and ingestion_jobs. On
PostgreSQL a trigger keeps updated_at current on every UPDATE; other
dialects rely on the ORM's onupdate.
"""
from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = '5c1e2a7d9b40'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

UPDATED_AT_TABLES = ("satellite_data", "geospatial_analysis")


def upgrade() -> None:
    op.create_table(
        "ingestion_jobs",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("source", sa.String(50), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("config", sa.JSON(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("started_at", sa.DateTime(), nullable=True),
        sa.Column("completed_at", sa.DateTime(), nullable=True),
        sa.Column("rows_inserted", sa.Integer(), nullable=True),
        sa.Column("error_message", sa.Text(), nullable=True),
        sa.Column("error_details", sa.JSON(), nullable=True),
    )
    op.create_index("ix_ingestion_jobs_source", "ingestion_jobs", ["source"])
    op.create_index("ix_ingestion_jobs_status", "ingestion_jobs", ["status"])

    op.create_table(
        "satellite_data",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("latitude", sa.Float(), nullable=False),
        sa.Column("longitude", sa.Float(), nullable=False),
        sa.Column("acquisition_time", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("cloud_coverage", sa.Float(), nullable=True),
        sa.Column("vegetation_index", sa.Float(), nullable=True),
        sa.Column("water_index", sa.Float(), nullable=True),
        sa.Column("temperature", sa.Float(), nullable=True),
        sa.Column("risk_indicators", sa.JSON(), nullable=False),
        sa.Column("source", sa.String(100), nullable=False, server_default="copernicus-simulated"),
        sa.Column("processing_status", sa.String(20), nullable=False, server_default="processed"),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("idx_satellite_data_location", "satellite_data", ["latitude", "longitude"])
    op.create_index("idx_satellite_data_acquisition_time", "satellite_data", ["acquisition_time"])

    op.create_table(
        "geospatial_analysis",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("analysis_type", sa.String(50), nullable=False),
        sa.Column("location_name", sa.String(255), nullable=True),
        sa.Column("center_latitude", sa.Float(), nullable=False),
        sa.Column("center_longitude", sa.Float(), nullable=False),
        sa.Column("bbox_north", sa.Float(), nullable=True),
        sa.Column("bbox_south", sa.Float(), nullable=True),
        sa.Column("bbox_east", sa.Float(), nullable=True),
        sa.Column("bbox_west", sa.Float(), nullable=True),
        sa.Column("acquisition_date_pre", sa.DateTime(), nullable=True),
        sa.Column("acquisition_date_post", sa.DateTime(), nullable=True),
        sa.Column("satellite_source", sa.String(50), nullable=True),
        sa.Column("analysis_results", sa.JSON(), nullable=True),
        sa.Column("geotiff_url", sa.Text(), nullable=True),
        sa.Column("shapefile_url", sa.Text(), nullable=True),
        sa.Column("thumbnail_url", sa.Text(), nullable=True),
        sa.Column("processing_status", sa.String(20), nullable=False, server_default="processing"),
        sa.Column("error_message", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index(
        "idx_geospatial_analysis_location",
        "geospatial_analysis",
        ["center_latitude", "center_longitude"],
    )
    op.create_index("ix_geospatial_analysis_analysis_type", "geospatial_analysis", ["analysis_type"])
    op.create_index(
        "ix_geospatial_analysis_acquisition_date_post",
        "geospatial_analysis",
        ["acquisition_date_post"],
    )

    if op.get_bind().dialect.name == "postgresql":
        op.execute(
            """
            CREATE OR REPLACE FUNCTION update_updated_at_column()
            RETURNS TRIGGER AS $$
            BEGIN
              NEW.updated_at = NOW();
              RETURN NEW;
            END;
            $$ LANGUAGE plpgsql
            """
        )
        for table in UPDATED_AT_TABLES:
            op.execute(
                f"""
                CREATE TRIGGER {table}_updated_at
                BEFORE UPDATE ON {table}
                FOR EACH ROW
                EXECUTE FUNCTION update_updated_at_column()
                """
            )


def downgrade() -> None:
    if op.get_bind().dialect.name == "postgresql":
        for table in UPDATED_AT_TABLES:
            op.execute(f"DROP TRIGGER IF EXISTS {table}_updated_at ON {table}")
        op.execute("DROP FUNCTION IF EXISTS update_updated_at_column()")

    op.drop_table("geospatial_analysis")
    op.drop_table("satellite_data")
    op.drop_table("ingestion_jobs")

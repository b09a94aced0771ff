"""
SQLAlchemy models for core tables.

satellite_data is append-only: the generator inserts rows and only the
updated_at column ever changes afterwards.
"""
from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, Text, JSON, Enum, Float, Index
from sqlalchemy.ext.declarative import declarative_base
import enum

Base = declarative_base()


class JobStatus(str, enum.Enum):
    """Job status enumeration - ONLY these values allowed."""
    PENDING = "pending"
    RUNNING = "running"
    SUCCESS = "success"
    FAILED = "failed"


class ProcessingStatus(str, enum.Enum):
    """Lifecycle of a processed satellite product."""
    PROCESSING = "processing"
    PROCESSED = "processed"
    FAILED = "failed"


class IngestionJob(Base):
    """
    Tracks all satellite ingestion runs.

    One record per call to the generator, whatever triggered it.
    """
    __tablename__ = "ingestion_jobs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    source = Column(String(50), nullable=False, index=True)
    status = Column(
        Enum(JobStatus, native_enum=False, length=20),
        nullable=False,
        default=JobStatus.PENDING,
        index=True
    )
    config = Column(JSON, nullable=False)  # trigger, source, locations, event metadata

    # Timestamps
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    started_at = Column(DateTime, nullable=True)
    completed_at = Column(DateTime, nullable=True)

    # Results
    rows_inserted = Column(Integer, nullable=True)
    error_message = Column(Text, nullable=True)
    error_details = Column(JSON, nullable=True)  # Per-location failures

    def __repr__(self) -> str:
        return (
            f"<IngestionJob(id={self.id}, source={self.source}, "
            f"status={self.status}, created_at={self.created_at})>"
        )


class SatelliteData(Base):
    """
    One pseudo-satellite reading on the ingestion lattice.

    Indices are range-bounded and risk indicators are integers in [0, 100].
    """
    __tablename__ = "satellite_data"

    id = Column(Integer, primary_key=True, autoincrement=True)
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    acquisition_time = Column(DateTime, nullable=False, default=datetime.utcnow)

    cloud_coverage = Column(Float, nullable=True)  # percent
    vegetation_index = Column(Float, nullable=True)  # NDVI
    water_index = Column(Float, nullable=True)  # NDWI
    temperature = Column(Float, nullable=True)  # °C

    risk_indicators = Column(JSON, nullable=False)
    source = Column(String(100), nullable=False, default="copernicus-simulated")
    processing_status = Column(
        Enum(ProcessingStatus, native_enum=False, length=20),
        nullable=False,
        default=ProcessingStatus.PROCESSED,
    )

    # Timestamps
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        Index("idx_satellite_data_location", "latitude", "longitude"),
        Index("idx_satellite_data_acquisition_time", "acquisition_time"),
    )

    def to_dict(self):
        return {
            "id": self.id,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "acquisition_time": self.acquisition_time,
            "cloud_coverage": self.cloud_coverage,
            "vegetation_index": self.vegetation_index,
            "water_index": self.water_index,
            "temperature": self.temperature,
            "risk_indicators": self.risk_indicators,
            "source": self.source,
        }

    def __repr__(self) -> str:
        return (
            f"<SatelliteData(id={self.id}, lat={self.latitude}, "
            f"lng={self.longitude}, source={self.source})>"
        )


class GeospatialAnalysis(Base):
    """
    Change-detection / burn-severity analysis products.

    Schema only; no ingestion path populates it yet.
    """
    __tablename__ = "geospatial_analysis"

    id = Column(Integer, primary_key=True, autoincrement=True)
    analysis_type = Column(String(50), nullable=False, index=True)  # sar_change_detection, burn_severity, hazard_extent
    location_name = Column(String(255), nullable=True)
    center_latitude = Column(Float, nullable=False)
    center_longitude = Column(Float, nullable=False)

    # Bounding box
    bbox_north = Column(Float, nullable=True)
    bbox_south = Column(Float, nullable=True)
    bbox_east = Column(Float, nullable=True)
    bbox_west = Column(Float, nullable=True)

    acquisition_date_pre = Column(DateTime, nullable=True)
    acquisition_date_post = Column(DateTime, nullable=True, index=True)
    satellite_source = Column(String(50), nullable=True)  # sentinel-1, sentinel-2

    analysis_results = Column(JSON, nullable=True)
    geotiff_url = Column(Text, nullable=True)
    shapefile_url = Column(Text, nullable=True)
    thumbnail_url = Column(Text, nullable=True)

    processing_status = Column(
        Enum(ProcessingStatus, native_enum=False, length=20),
        nullable=False,
        default=ProcessingStatus.PROCESSING,
    )
    error_message = Column(Text, nullable=True)

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        Index("idx_geospatial_analysis_location", "center_latitude", "center_longitude"),
    )

    def __repr__(self) -> str:
        return (
            f"<GeospatialAnalysis(id={self.id}, type={self.analysis_type}, "
            f"status={self.processing_status})>"
        )

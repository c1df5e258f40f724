"""001_baseline

Baseline migration for the FreshRoute Dispatch schema.

Revision ID: 0001
Revises: (none)
Create Date: 2026-10-19
"""
from typing import Sequence, Union

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

_ENUMS = {
    "vehicle_class": ("UNCOVERED", "COVERED", "REFRIGERATED"),
    "vehicle_status": ("AVAILABLE", "BOOKED", "MAINTENANCE", "OFFLINE"),
    "order_status": ("PENDING", "ASSIGNED", "ASSIGNED_PARTIAL", "FAILED_NO_CAPACITY"),
    "job_status": ("SCHEDULED", "IN_PROGRESS", "COMPLETED"),
    "stop_type": ("PICKUP", "DROP"),
}

_TABLES_WITH_TRIGGERS = [
    "product_specs",
    "vehicles",
    "transport_jobs",
    "orders",
    "route_stops",
]


def upgrade() -> None:
    # ------------------------------------------------------------------
    # Enum types
    # ------------------------------------------------------------------
    for name, values in _ENUMS.items():
        labels = ", ".join(f"'{v}'" for v in values)
        op.execute(f"CREATE TYPE {name} AS ENUM ({labels})")

    # ------------------------------------------------------------------
    # Tables (dependency order)
    # ------------------------------------------------------------------

    # --- product_specs ---
    op.execute("""
        CREATE TABLE product_specs (
            id UUID PRIMARY KEY,
            variant_name VARCHAR(50) NOT NULL,
            display_name VARCHAR(100) NOT NULL,
            optimal_temp_c NUMERIC(5, 2) NOT NULL,
            max_safe_temp_c NUMERIC(5, 2) NOT NULL,
            max_distance_uncooled_km NUMERIC(8, 2) NOT NULL,
            force_refrigeration BOOLEAN NOT NULL DEFAULT FALSE,
            created_at TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP,
            CONSTRAINT uq_product_specs_variant_name UNIQUE (variant_name)
        )
    """)

    # --- vehicles ---
    op.execute("""
        CREATE TABLE vehicles (
            id UUID PRIMARY KEY,
            license_plate VARCHAR(20) NOT NULL,
            driver_name VARCHAR(100),
            vehicle_class vehicle_class NOT NULL,
            capacity_kg INTEGER NOT NULL CHECK (capacity_kg >= 0),
            current_latitude NUMERIC(10, 7),
            current_longitude NUMERIC(10, 7),
            status vehicle_status NOT NULL DEFAULT 'AVAILABLE',
            booked_date DATE,
            created_at TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP,
            CONSTRAINT uq_vehicles_license_plate UNIQUE (license_plate)
        )
    """)

    # --- transport_jobs ---
    op.execute("""
        CREATE TABLE transport_jobs (
            id UUID PRIMARY KEY,
            job_date DATE NOT NULL,
            vehicle_id UUID NOT NULL REFERENCES vehicles(id),
            vehicle_class_used vehicle_class NOT NULL,
            required_class vehicle_class NOT NULL,
            route_name VARCHAR(150) NOT NULL,
            assignment_reason TEXT,
            total_weight_kg INTEGER NOT NULL DEFAULT 0,
            total_distance_km NUMERIC(10, 1) NOT NULL DEFAULT 0,
            status job_status NOT NULL DEFAULT 'SCHEDULED',
            created_at TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP
        )
    """)

    # --- orders ---
    op.execute("""
        CREATE TABLE orders (
            id UUID PRIMARY KEY,
            order_number VARCHAR(50) NOT NULL,
            product_variant VARCHAR(50) NOT NULL,
            quantity_kg INTEGER NOT NULL CHECK (quantity_kg > 0),
            pickup_location VARCHAR(100),
            pickup_latitude NUMERIC(10, 7),
            pickup_longitude NUMERIC(10, 7),
            drop_location VARCHAR(100),
            drop_latitude NUMERIC(10, 7),
            drop_longitude NUMERIC(10, 7),
            pickup_date DATE NOT NULL,
            status order_status NOT NULL DEFAULT 'PENDING',
            assigned_job_id UUID REFERENCES transport_jobs(id),
            created_at TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP,
            CONSTRAINT uq_orders_order_number UNIQUE (order_number)
        )
    """)

    # --- route_stops ---
    op.execute("""
        CREATE TABLE route_stops (
            id UUID PRIMARY KEY,
            job_id UUID NOT NULL REFERENCES transport_jobs(id) ON DELETE CASCADE,
            sequence_number INTEGER NOT NULL CHECK (sequence_number >= 1),
            stop_type stop_type NOT NULL,
            order_id UUID NOT NULL REFERENCES orders(id),
            latitude NUMERIC(10, 7) NOT NULL,
            longitude NUMERIC(10, 7) NOT NULL,
            distance_from_last_km NUMERIC(10, 1) NOT NULL DEFAULT 0,
            load_kg INTEGER NOT NULL DEFAULT 0,
            created_at TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP,
            CONSTRAINT uq_route_stops_job_sequence UNIQUE (job_id, sequence_number)
        )
    """)

    # ------------------------------------------------------------------
    # Indexes
    # ------------------------------------------------------------------
    op.execute("CREATE INDEX idx_vehicles_status ON vehicles (status)")
    op.execute("CREATE INDEX idx_vehicles_class ON vehicles (vehicle_class)")

    op.execute("CREATE INDEX idx_orders_pickup_date_status ON orders (pickup_date, status)")
    op.execute("CREATE INDEX idx_orders_variant ON orders (product_variant)")

    op.execute("CREATE INDEX idx_transport_jobs_date ON transport_jobs (job_date)")
    op.execute("CREATE INDEX idx_transport_jobs_vehicle ON transport_jobs (vehicle_id)")
    op.execute("CREATE INDEX idx_transport_jobs_status ON transport_jobs (status)")

    op.execute("CREATE INDEX idx_route_stops_job ON route_stops (job_id)")
    op.execute("CREATE INDEX idx_route_stops_order ON route_stops (order_id)")

    # ------------------------------------------------------------------
    # Functions & triggers
    # ------------------------------------------------------------------
    op.execute("""
        CREATE OR REPLACE FUNCTION update_updated_at_column()
        RETURNS TRIGGER AS $$
        BEGIN
            NEW.updated_at = CURRENT_TIMESTAMP;
            RETURN NEW;
        END;
        $$ LANGUAGE plpgsql
    """)

    for table in _TABLES_WITH_TRIGGERS:
        op.execute(
            f"CREATE TRIGGER update_{table}_updated_at "
            f"BEFORE UPDATE ON {table} "
            f"FOR EACH ROW EXECUTE FUNCTION update_updated_at_column()"
        )


def downgrade() -> None:
    for table in reversed(_TABLES_WITH_TRIGGERS):
        op.execute(f"DROP TRIGGER IF EXISTS update_{table}_updated_at ON {table}")
    op.execute("DROP FUNCTION IF EXISTS update_updated_at_column()")

    op.execute("DROP TABLE IF EXISTS route_stops")
    op.execute("DROP TABLE IF EXISTS orders")
    op.execute("DROP TABLE IF EXISTS transport_jobs")
    op.execute("DROP TABLE IF EXISTS vehicles")
    op.execute("DROP TABLE IF EXISTS product_specs")

    for name in reversed(list(_ENUMS)):
        op.execute(f"DROP TYPE IF EXISTS {name}")

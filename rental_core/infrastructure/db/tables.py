from sqlalchemy import (
    JSON,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    Numeric,
    String,
    Table,
    Text,
)

metadata = MetaData()

vehicles = Table(
    "vehicles",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("plate", String(16), nullable=False, unique=True),
    Column("brand", String(100), nullable=False),
    Column("model", String(100), nullable=False),
    Column("daily_rate", Numeric(12, 2), nullable=False),
    Column("currency_code", String(3), nullable=False),
    Column("mileage", Integer, nullable=False, default=0),
    Column("status", String(16), nullable=False),
    Column("lock_version", Integer, nullable=False, default=0),
    Column("created_at", DateTime(timezone=True)),
    Column("updated_at", DateTime(timezone=True)),
)

reservations = Table(
    "reservations",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("vehicle_id", Integer, ForeignKey("vehicles.id"), nullable=False),
    Column("requester_id", Integer, nullable=False),
    Column("start_date", Date, nullable=False),
    Column("end_date", Date, nullable=False),
    Column("currency_code", String(3), nullable=False),
    Column("daily_rate", Numeric(12, 2), nullable=False),
    Column("base_cost", Numeric(12, 2), nullable=False),
    Column("discount", Numeric(12, 2), nullable=False),
    Column("insurance_tier", String(16)),
    Column("insurance_fee", Numeric(12, 2), nullable=False),
    Column("total_amount", Numeric(12, 2), nullable=False),
    Column("security_deposit", Numeric(12, 2), nullable=False),
    Column("additional_charges", Numeric(12, 2)),
    Column("additional_charges_description", String(500)),
    Column("status", String(16), nullable=False),
    Column("payment_status", String(16), nullable=False),
    Column("pickup_location", String(255), nullable=False),
    Column("return_location", String(255), nullable=False),
    Column("notes", Text),
    Column("cancellation_reason", String(500)),
    Column("initial_mileage", Integer),
    Column("final_mileage", Integer),
    Column("actual_return_at", DateTime(timezone=True)),
    Column("lock_version", Integer, nullable=False, default=0),
    Column("created_at", DateTime(timezone=True)),
    Column("updated_at", DateTime(timezone=True)),
    Index("ix_reservations_vehicle_status", "vehicle_id", "status"),
)

payments = Table(
    "payments",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("reservation_id", Integer, ForeignKey("reservations.id"), nullable=False),
    Column("transaction_id", String(64), unique=True),
    Column("amount", Numeric(12, 2), nullable=False),
    Column("currency_code", String(3), nullable=False),
    Column("type", String(16), nullable=False),
    Column("method", String(16)),
    Column("description", String(500)),
    Column("refunded_payment_id", Integer, ForeignKey("payments.id")),
    Column("status", String(16), nullable=False),
    Column("gateway_reference", String(128)),
    Column("gateway_response", JSON),
    Column("lock_version", Integer, nullable=False, default=0),
    Column("created_at", DateTime(timezone=True)),
    Column("updated_at", DateTime(timezone=True)),
    Column("completed_at", DateTime(timezone=True)),
    Column("refunded_at", DateTime(timezone=True)),
    Index("ix_payments_reservation", "reservation_id"),
    Index("ix_payments_refunded_payment", "refunded_payment_id"),
)

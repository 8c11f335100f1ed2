from rental_core.infrastructure.db.repositories.payment_repo_sql import PaymentRepoSQL
from rental_core.infrastructure.db.repositories.reservation_repo_sql import ReservationRepoSQL
from rental_core.infrastructure.db.repositories.vehicle_repo_sql import VehicleRepoSQL

__all__ = ["PaymentRepoSQL", "ReservationRepoSQL", "VehicleRepoSQL"]

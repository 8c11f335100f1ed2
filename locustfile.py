import random
import uuid
from datetime import date, timedelta

from locust import HttpUser, between, task


class APIUser(HttpUser):
    # Wait between 1 and 3 seconds between tasks
    wait_time = between(1, 3)

    def on_start(self):
        """
        Called when a Locust user starts.
        Registers one vehicle per user; every user competes for its own calendar
        and for the shared vehicle 1 when it exists.
        """
        plate = uuid.uuid4().hex[:7].upper()
        resp = self.client.post(
            "/api/v1/vehicles",
            json={"plate": plate, "brand": "Fiat", "model": "Mobi", "daily_rate": "95.00"},
            name="/api/v1/vehicles",
        )
        self.vehicle_id = resp.json()["id"] if resp.status_code == 201 else 1

    def _random_range(self):
        start = date.today() + timedelta(days=random.randint(1, 60))
        end = start + timedelta(days=random.randint(0, 6))
        return start.isoformat(), end.isoformat()

    @task(3)
    def create_reservation(self):
        """
        Reserva un rango aleatorio. Los 409 por superposición son esperados.
        """
        start_date, end_date = self._random_range()
        vehicle_id = random.choice([self.vehicle_id, 1])
        with self.client.post(
            "/api/v1/reservations",
            json={
                "vehicle_id": vehicle_id,
                "requester_id": random.randint(1, 1000),
                "start_date": start_date,
                "end_date": end_date,
                "pickup_location": "Aeropuerto GRU",
            },
            name="/api/v1/reservations",  # Group all requests under this name in the stats
            catch_response=True,
        ) as resp:
            if resp.status_code in (201, 409):
                resp.success()

    @task(2)
    def check_availability(self):
        start_date, end_date = self._random_range()
        self.client.get(
            f"/api/v1/vehicles/{self.vehicle_id}/availability",
            params={"start_date": start_date, "end_date": end_date},
            name="/api/v1/vehicles/[id]/availability",
        )

    @task(1)
    def calculate_price(self):
        start_date, end_date = self._random_range()
        self.client.post(
            "/api/v1/reservations/calculate-price",
            json={
                "vehicle_id": self.vehicle_id,
                "start_date": start_date,
                "end_date": end_date,
                "insurance_tier": "basic",
            },
            name="/api/v1/reservations/calculate-price",
        )

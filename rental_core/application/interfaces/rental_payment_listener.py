from typing import Protocol


class RentalPaymentListener(Protocol):
    """Recibe la señal de que el pago de locación de una reservación se completó."""

    async def on_rental_payment_completed(self, reservation_id: int) -> None: ...

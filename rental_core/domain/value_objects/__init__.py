"""Value Objects del dominio de locaciones."""

from rental_core.domain.value_objects.date_range import DateRange, start_of_day
from rental_core.domain.value_objects.money import Money, quantize

__all__ = [
    "DateRange",
    "Money",
    "quantize",
    "start_of_day",
]

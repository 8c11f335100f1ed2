import asyncio
import sys
from decimal import Decimal
from pathlib import Path

# Add project root to sys.path
project_root = Path(__file__).resolve().parent.parent
sys.path.append(str(project_root))

from rental_core.api.dependencies import _build_use_cases, _sql_bundle  # noqa: E402
from rental_core.api.deps import AsyncSessionLocal, engine  # noqa: E402
from rental_core.config import get_settings  # noqa: E402
from rental_core.domain.errors import ValidationError  # noqa: E402
from rental_core.infrastructure.db.engine import create_schema  # noqa: E402

FLEET = (
    ("RIO2A24", "Fiat", "Mobi", Decimal("89.90"), 12000),
    ("SPO3B15", "Volkswagen", "Polo", Decimal("129.00"), 8500),
    ("BHZ4C36", "Jeep", "Renegade", Decimal("219.00"), 21000),
    ("CWB5D47", "Toyota", "Corolla Cross", Decimal("279.00"), 3000),
)


async def seed():
    settings = get_settings()
    await create_schema(engine)
    print("Created missing tables.")

    async with AsyncSessionLocal() as session:
        use_cases = _build_use_cases(_sql_bundle(settings, session), settings)
        for plate, brand, model, daily_rate, mileage in FLEET:
            try:
                vehicle = await use_cases["register_vehicle"].execute(
                    plate=plate, brand=brand, model=model, daily_rate=daily_rate, mileage=mileage
                )
            except ValidationError as exc:
                print(f"Skipped {plate}: {exc.message}")
                continue
            print(f"Registered vehicle {vehicle.id}: {plate} {brand} {model} ({daily_rate}/día)")

    await engine.dispose()
    print("Seeded fleet.")

if __name__ == "__main__":
    asyncio.run(seed())

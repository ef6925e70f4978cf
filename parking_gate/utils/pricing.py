# parking_gate/utils/pricing.py
"""
Parking tariff (Lei).
  ≤ 30 min: 6 • ≤ 1 h: 10 • ≤ 2 h: 18 • ≤ 24 h: 50 • longer: 50 per started day
"""

import math
from datetime import datetime

DAILY_RATE = 50.0

TARIFF_STEPS = [
    (30, 6.0),
    (60, 10.0),
    (120, 18.0),
    (1440, DAILY_RATE),
]


def calculate_price(start: datetime, end: datetime) -> float:
    minutes = (end - start).total_seconds() / 60
    if minutes <= 0:
        return 0.0
    for limit, price in TARIFF_STEPS:
        if minutes <= limit:
            return price
    return math.ceil(minutes / 1440) * DAILY_RATE


def format_price(amount: float) -> str:
    return f"{amount:.0f} Lei"

import random
from typing import Optional


class SimulatedPaymentProcessor:
    """Stands in for a payment gateway: declines a fixed share of attempts."""

    def __init__(self, failure_rate: float = 0.25, rng: Optional[random.Random] = None):
        if not 0 <= failure_rate <= 1:
            raise ValueError("failure_rate must be between 0 and 1")
        self.failure_rate = failure_rate
        self.rng = rng or random.Random()

    def authorize(self, order_id: str, amount: float) -> bool:
        return self.rng.random() >= self.failure_rate


class FixedPaymentProcessor:
    """Always returns the same outcome. Used for deterministic runs."""

    def __init__(self, approve: bool = True):
        self.approve = approve

    def authorize(self, order_id: str, amount: float) -> bool:
        return self.approve

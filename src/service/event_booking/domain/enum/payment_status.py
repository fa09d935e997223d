from enum import StrEnum


class PaymentStatus(StrEnum):
    """
    Order payment lifecycle

    PENDING is the only non-terminal state. Reservation creates it; settlement
    (COMPLETED / FAILED) and the expiry sweep (EXPIRED) leave it exactly once.
    """

    PENDING = 'pending'
    COMPLETED = 'completed'
    FAILED = 'failed'
    EXPIRED = 'expired'

    @property
    def is_terminal(self) -> bool:
        return self is not PaymentStatus.PENDING

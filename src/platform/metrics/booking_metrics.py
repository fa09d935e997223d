from prometheus_client import Counter, Histogram


class BookingMetrics:
    """
    Booking Engine Core Metrics Collector

    Tracks reservation outcomes, webhook settlements and expiry sweeps
    """

    def __init__(self):
        # ========== Reservation Metrics ==========
        self.reservation_requests = Counter(
            'ticket_reservation_requests_total',
            'Total ticket reservation requests',
            ['result'],  # result: reserved/conflict/rejected/gateway_error
        )

        self.reservation_duration = Histogram(
            'ticket_reservation_duration_seconds',
            'Ticket reservation processing time',
            ['result'],
            buckets=[0.01, 0.05, 0.1, 0.2, 0.5, 1.0, 2.0, 5.0, 10.0],
        )

        self.tickets_reserved = Counter(
            'tickets_reserved_total', 'Tickets moved into a pending hold', ['event_id']
        )

        # ========== Settlement Metrics ==========
        self.payment_webhooks = Counter(
            'payment_webhooks_total',
            'Payment webhook deliveries',
            ['event_type', 'outcome'],  # outcome: completed/failed/duplicate/ignored/rejected
        )

        self.tickets_issued = Counter('tickets_issued_total', 'Tickets issued on capture')

        self.ticket_issue_retries = Counter(
            'ticket_issue_retries_total', 'Ticket issuance retries after a code collision'
        )

        # ========== Expiry Sweep Metrics ==========
        self.orders_expired = Counter('orders_expired_total', 'Pending orders expired by sweeps')

        self.orders_sweep_skipped = Counter(
            'orders_sweep_skipped_total', 'Expired orders left pending after a failed release'
        )

        self.tickets_released = Counter(
            'tickets_released_total',
            'Tickets returned to inventory',
            ['reason'],  # reason: failed/expired
        )

    # ========== Helper Methods ==========

    def record_reservation(
        self, *, result: str, duration: float, event_id: str = '', quantity: int = 0
    ):
        self.reservation_requests.labels(result=result).inc()
        self.reservation_duration.labels(result=result).observe(duration)
        if quantity:
            self.tickets_reserved.labels(event_id=event_id).inc(quantity)

    def record_webhook(self, *, event_type: str, outcome: str):
        self.payment_webhooks.labels(event_type=event_type or 'unknown', outcome=outcome).inc()

    def record_release(self, *, reason: str, quantity: int):
        if quantity:
            self.tickets_released.labels(reason=reason).inc(quantity)


# Global metrics instance
metrics = BookingMetrics()

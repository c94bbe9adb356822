from prometheus_client import Counter, Histogram


class CommerceMetrics:
    """
    Order and ticket lifecycle metrics, exposed at /metrics

    Label values are kept to small closed sets (result, type, kind) so that
    cardinality does not grow with orders or guests.
    """

    def __init__(self):
        # ========== Order Metrics ==========
        self.orders_created = Counter(
            'commerce_orders_created_total',
            'Orders paid and persisted',
            ['persisted'],  # 'false' = charged but local write failed, needs reconciliation
        )

        self.order_amount = Histogram(
            'commerce_order_amount',
            'Order subtotal in major currency units',
            buckets=[10, 25, 50, 100, 250, 500, 1000, 2500],
        )

        self.payment_declines = Counter(
            'commerce_payment_declines_total', 'Sales declined by the payment processor'
        )

        self.reversals = Counter(
            'commerce_reversals_total',
            'Refunds and voids of paid orders',
            ['type', 'result'],  # type: refund/void, result: success/failed
        )

        self.transfers = Counter(
            'commerce_transfers_total', 'Guests moved to a transferee', ['result']
        )

        # ========== Guest / Door Metrics ==========
        self.check_ins = Counter(
            'commerce_check_ins_total',
            'Ticket scans at the door',
            ['result'],  # checked_in or the error code
        )

        # ========== Outbox Metrics ==========
        self.follow_up_tasks = Counter(
            'commerce_follow_up_tasks_total',
            'Follow-up tasks processed',
            ['kind', 'result'],
        )

    # ========== Helper Methods ==========

    def record_order_created(self, *, amount: float, persisted: bool) -> None:
        self.orders_created.labels(persisted=str(persisted).lower()).inc()
        self.order_amount.observe(amount)

    def record_payment_declined(self) -> None:
        self.payment_declines.inc()

    def record_reversal(self, *, type: str, success: bool) -> None:
        self.reversals.labels(type=type, result='success' if success else 'failed').inc()

    def record_transfer(self, *, guest_count: int, success: bool) -> None:
        self.transfers.labels(result='success' if success else 'failed').inc(guest_count)

    def record_check_in(self, *, result: str) -> None:
        self.check_ins.labels(result=result).inc()

    def record_follow_up_task(self, *, kind: str, success: bool) -> None:
        self.follow_up_tasks.labels(kind=kind, result='success' if success else 'failed').inc()


# Global metrics instance
metrics = CommerceMetrics()

"""
Orders Feed
===========

Builds the order set shown on the admin orders page.

Each refresh fetches every order, then looks up the customer for any order
that has a customer_id but no name or email in its embedded profile. The
lookups run concurrently; each one produces an EnrichmentResult and the
results are merged only after all of them have finished. A failed lookup
keeps the order as it was.

Only one refresh runs at a time per feed. A caller that arrives while a
refresh is in flight gets the last completed snapshot instead of starting
a second fetch. Status edits made while a refresh is in flight are
re-applied to its result.
"""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone

from orderdesk.modules.orders.models import FILTER_ALL, ORDER_STATUSES, needs_enrichment
from orderdesk.modules.orders.store import list_orders

logger = logging.getLogger(__name__)

EXTENSION_KEY = 'orderdesk_orders_feed'


class EnrichmentResult:
    """Outcome of one customer lookup"""

    __slots__ = ('order', 'profile', 'error')

    def __init__(self, order, profile=None, error=None):
        self.order = order
        self.profile = profile
        self.error = error

    @property
    def ok(self):
        return self.error is None

    def merged(self):
        """The order to display: enriched on success, untouched on failure"""
        if not self.ok:
            return self.order
        return {**self.order, 'profiles': self.profile}


def lookup_profile(gateway, order):
    """Fetch the customer's metadata for one order"""
    customer_id = order.get('customer_id')
    try:
        user = gateway.get_user(customer_id)
    except Exception as e:
        logger.warning(f"Error fetching profile for customer {customer_id}: {e}")
        return EnrichmentResult(order, error=str(e))

    profile = dict(user.get('user_metadata') or {})
    if not profile.get('email') and user.get('email'):
        profile['email'] = user['email']
    return EnrichmentResult(order, profile=profile)


def enrich_orders(gateway, orders, max_workers=8):
    """Return orders with missing profiles filled in where the lookup succeeds"""
    pending = [(i, order) for i, order in enumerate(orders) if needs_enrichment(order)]
    if not pending:
        return list(orders)

    workers = max(1, min(max_workers, len(pending)))
    with ThreadPoolExecutor(max_workers=workers) as executor:
        results = list(executor.map(lambda pair: lookup_profile(gateway, pair[1]), pending))

    merged = list(orders)
    for (index, _), result in zip(pending, results):
        merged[index] = result.merged()

    failed = sum(1 for r in results if not r.ok)
    if failed:
        logger.info(f"Enrichment: {len(results) - failed} ok, {failed} kept unenriched")
    return merged


def filter_orders(orders, status=FILTER_ALL):
    """'all' returns every order; any other value is an exact status match"""
    if status == FILTER_ALL:
        return list(orders)
    return [order for order in orders if order.get('status') == status]


def count_by_status(orders):
    counts = {FILTER_ALL: len(orders)}
    for status in ORDER_STATUSES:
        counts[status] = sum(1 for order in orders if order.get('status') == status)
    return counts


def apply_status(orders, order_id, status, updated_at):
    """Patch one order's status in a local list without refetching"""
    return [
        {**order, 'status': status, 'updated_at': updated_at}
        if order.get('id') == order_id else order
        for order in orders
    ]


class OrdersFeed:
    """Per-app holder of the latest enriched order snapshot"""

    def __init__(self, gateway, max_workers=8):
        self.gateway = gateway
        self.max_workers = max_workers
        self.refreshed_at = None
        self._snapshot = None
        # Status edits made since the current refresh started fetching
        self._patches = {}
        self._refresh_lock = threading.Lock()
        self._state_lock = threading.Lock()

    @property
    def snapshot(self):
        with self._state_lock:
            return list(self._snapshot) if self._snapshot is not None else None

    def refresh(self):
        """Fetch and enrich; overlapping callers reuse the last snapshot"""
        if not self._refresh_lock.acquire(blocking=False):
            snapshot = self.snapshot
            if snapshot is not None:
                logger.debug("Refresh already in flight, serving last snapshot")
                return snapshot
            # Nothing to serve yet; wait for the in-flight refresh to finish
            self._refresh_lock.acquire()
            snapshot = self.snapshot
            if snapshot is not None:
                self._refresh_lock.release()
                return snapshot

        try:
            with self._state_lock:
                self._patches = {}

            orders = enrich_orders(self.gateway, list_orders(self.gateway), self.max_workers)

            with self._state_lock:
                # The fetch may predate an edit made while it ran
                for order_id, (status, updated_at) in self._patches.items():
                    orders = apply_status(orders, order_id, status, updated_at)
                self._patches = {}
                self._snapshot = orders
                self.refreshed_at = datetime.now(timezone.utc).isoformat()
                return list(orders)
        finally:
            self._refresh_lock.release()

    def apply_status(self, order_id, status, updated_at):
        with self._state_lock:
            self._patches[order_id] = (status, updated_at)
            if self._snapshot is not None:
                self._snapshot = apply_status(self._snapshot, order_id, status, updated_at)

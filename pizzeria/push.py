"""Web push delivery and the notification fan-out.

Every active notification goes to every stored subscription. All attempts
run at once and are awaited together; one dead endpoint never stops the
others. Subscriptions the push service reports as gone (404/410) are
removed afterwards, once each.
"""

import json
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, List, Sequence

from pywebpush import WebPushException, webpush

from . import config
from .errors import PushDeliveryError, StoreError
from .models import DeliveryOutcome, DispatchReport, PushSubscription, Record
from .notifications import push_payload

logger = logging.getLogger("pizzeria.push")

MAX_PUSH_WORKERS = 16


class WebPushTransport:
    """Sends one encrypted message to one subscription via pywebpush."""

    def __init__(
        self,
        vapid_private_key: str = config.VAPID_PRIVATE_KEY,
        vapid_subject: str = config.VAPID_SUBJECT,
        ttl: int = config.PUSH_TTL,
        timeout: float = config.PUSH_TIMEOUT,
    ):
        self.vapid_private_key = vapid_private_key
        self.vapid_subject = vapid_subject
        self.ttl = ttl
        self.timeout = timeout

    def send(self, subscription: PushSubscription, payload: Dict[str, str]) -> None:
        """Deliver a payload; raises PushDeliveryError on refusal."""
        try:
            webpush(
                subscription_info={"endpoint": subscription.endpoint, "keys": subscription.keys},
                data=json.dumps(payload),
                vapid_private_key=self.vapid_private_key,
                vapid_claims={"sub": self.vapid_subject},
                ttl=self.ttl,
                timeout=self.timeout,
            )
        except WebPushException as e:
            status = e.response.status_code if e.response is not None else None
            raise PushDeliveryError(subscription.endpoint, status, str(e)[:200]) from e


def _attempt(transport, notification: Record, subscription: PushSubscription) -> DeliveryOutcome:
    outcome = DeliveryOutcome(
        endpoint=subscription.endpoint,
        notification_id=str(notification.get("id", "")),
    )
    try:
        transport.send(subscription, push_payload(notification))
        logger.debug(f"Sent '{outcome.notification_id}' to {subscription.endpoint}")
    except PushDeliveryError as e:
        outcome.success = False
        outcome.status_code = e.status_code
        outcome.permanent_failure = e.is_permanent
        logger.warning(f"Push failed for {subscription.endpoint}: {e.status_code} {e.reason}")
    except Exception as e:
        # Connection errors and the like: transient, logged and not retried
        outcome.success = False
        logger.warning(f"Push failed for {subscription.endpoint}: {e}")
    return outcome


def dispatch(
    notifications: Sequence[Record],
    subscriptions: Sequence[PushSubscription],
    transport,
    store,
    max_workers: int = MAX_PUSH_WORKERS,
) -> DispatchReport:
    """Send every notification to every subscription, then prune dead ones."""
    report = DispatchReport()
    pairs = [(n, s) for n in notifications for s in subscriptions]
    if not pairs:
        return report

    logger.info(
        f"Dispatching {len(notifications)} notification(s) "
        f"to {len(subscriptions)} subscription(s)"
    )
    with ThreadPoolExecutor(max_workers=min(max_workers, len(pairs))) as pool:
        futures = [pool.submit(_attempt, transport, n, s) for n, s in pairs]
    report.outcomes = [f.result() for f in futures]

    dead: List[str] = []
    for outcome in report.outcomes:
        if outcome.permanent_failure and outcome.endpoint not in dead:
            dead.append(outcome.endpoint)

    for endpoint in dead:
        try:
            store.remove(endpoint)
            report.removed.append(endpoint)
        except StoreError as e:
            logger.error(f"Could not remove dead subscription {endpoint}: {e}")

    logger.info(report.status_line)
    return report

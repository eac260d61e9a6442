"""Push subscription storage in Firestore.

Each browser subscription is one document in the `pushSubscriptions`
collection. The document id is a hash of the endpoint, so a browser that
subscribes twice overwrites its own document instead of adding a copy.
"""

import hashlib
import logging
from typing import Any, Dict, List

import firebase_admin
from firebase_admin import credentials, firestore

from . import config
from .errors import StoreError, SubscriptionInvalid
from .models import PushSubscription

logger = logging.getLogger("pizzeria.subscriptions")


def document_id(endpoint: str) -> str:
    return hashlib.sha256(endpoint.encode("utf-8")).hexdigest()


def validate(descriptor: Any) -> PushSubscription:
    """Turn a request body into a PushSubscription or raise SubscriptionInvalid."""
    if not isinstance(descriptor, dict):
        raise SubscriptionInvalid("Push subscription is missing or invalid.")
    endpoint = descriptor.get("endpoint")
    if not isinstance(endpoint, str) or not endpoint.strip():
        raise SubscriptionInvalid("Push subscription is missing or invalid.")
    keys = descriptor.get("keys") or {}
    if not isinstance(keys, dict):
        raise SubscriptionInvalid("Push subscription keys must be an object.")
    return PushSubscription.from_dict(descriptor)


class FirestoreSubscriptionStore:
    """Subscription store backed by a Firestore collection.

    The Firestore client is built once per process (see `from_config`) and
    handed in, so tests can pass any object with the same `collection` API.
    """

    def __init__(self, client, collection: str = config.SUBSCRIPTIONS_COLLECTION):
        self.client = client
        self.collection_name = collection

    @classmethod
    def from_config(cls) -> "FirestoreSubscriptionStore":
        """Initialize firebase-admin from the service account env vars.

        A warm process that already initialized the default app reuses it.
        """
        try:
            app = firebase_admin.get_app()
        except ValueError:
            cert = credentials.Certificate({
                "type": "service_account",
                "project_id": config.FIREBASE_PROJECT_ID,
                "private_key": config.FIREBASE_ADMIN_PRIVATE_KEY,
                "client_email": config.FIREBASE_ADMIN_CLIENT_EMAIL,
                "token_uri": "https://oauth2.googleapis.com/token",
            })
            app = firebase_admin.initialize_app(cert, {"projectId": config.FIREBASE_PROJECT_ID})
        return cls(firestore.client(app))

    @property
    def _collection(self):
        return self.client.collection(self.collection_name)

    def save(self, descriptor: Dict[str, Any]) -> bool:
        """Store a subscription. Returns False when the endpoint was already stored."""
        subscription = validate(descriptor)
        try:
            doc = self._collection.document(document_id(subscription.endpoint))
            existed = doc.get().exists
            doc.set(subscription.to_dict())
        except Exception as e:
            raise StoreError(f"Failed to save subscription: {e}") from e

        if existed:
            logger.info(f"Refreshed existing subscription: {subscription.endpoint}")
        else:
            logger.info(f"New push subscription: {subscription.endpoint}")
        return not existed

    def list(self) -> List[PushSubscription]:
        try:
            docs = list(self._collection.stream())
        except Exception as e:
            raise StoreError(f"Failed to list subscriptions: {e}") from e

        subscriptions = []
        for doc in docs:
            subscription = PushSubscription.from_dict(doc.to_dict() or {})
            if subscription.endpoint:
                subscriptions.append(subscription)
        return subscriptions

    def remove(self, endpoint: str) -> None:
        try:
            self._collection.document(document_id(endpoint)).delete()
        except Exception as e:
            raise StoreError(f"Failed to remove subscription: {e}") from e
        logger.info(f"Removed subscription: {endpoint}")

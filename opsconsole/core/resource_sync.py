"""
RESOURCE SYNCHRONIZER

One generic load / create / update / remove pattern, instantiated for
drivers, routes and orders.

Contract:
- load():    replace the list wholesale; on failure keep the old list
- create():  server-confirmed append (only the server's object, with its id)
- update():  merge the patch in place on success; immutable fields never sent
- remove():  explicit confirmation first; drop the entry on success
- Order is insertion order from the last load, adjusted by create/remove;
  the list is never sorted client-side
- Every failure becomes a local error string, nothing propagates to the view
- Responses arriving after the view unmounted are discarded
"""

import logging
from contextlib import contextmanager
from dataclasses import replace
from typing import Any, Callable, Dict, Generic, List, Optional, TypeVar, Union

from opsconsole.core.entities import (
    DRIVER_SPEC,
    ORDER_SPEC,
    ROUTE_SPEC,
    EntitySpec,
    ValidationError,
)
from opsconsole.core.models import Driver, Order, Route
from opsconsole.integrations.api_client import (
    ApiClient,
    ApiError,
    TransportError,
    UnauthorizedError,
)

logger = logging.getLogger(__name__)

E = TypeVar("E")

SESSION_EXPIRED_ERROR = "Your session has expired. Please log in again."

ACTION_LOAD = "load"
ACTION_CREATE = "create"
ACTION_UPDATE = "update"
ACTION_REMOVE = "remove"


class ResourceSynchronizer(Generic[E]):
    """
    Local ordered mirror of one server collection.

    Attributes:
        items: current list, in display order
        loading: True only until the first load response (success or failure)
        error: last error message for the page, or None
        pending: actions with a request in flight (UI disables their controls)
    """

    def __init__(self, client: ApiClient, spec: EntitySpec):
        self.client = client
        self.spec = spec
        self.items: List[E] = []
        self.loading = True
        self.error: Optional[str] = None
        self.pending: set = set()
        self._mount_token = 0
        self._mounted = False

    # ------------------------------
    # VIEW LIFECYCLE
    # ------------------------------

    def mount(self) -> int:
        self._mount_token += 1
        self._mounted = True
        return self._mount_token

    def unmount(self) -> None:
        # Invalidates every request issued under the previous token
        self._mount_token += 1
        self._mounted = False

    @property
    def mounted(self) -> bool:
        return self._mounted

    def _is_stale(self, token: int) -> bool:
        return token != self._mount_token

    # ------------------------------
    # HELPERS
    # ------------------------------

    def is_busy(self, action: str) -> bool:
        return action in self.pending

    def clear_error(self) -> None:
        self.error = None

    def find(self, entity_id: str) -> Optional[E]:
        for item in self.items:
            if getattr(item, "id", None) == entity_id:
                return item
        return None

    @contextmanager
    def _in_flight(self, action: str):
        self.pending.add(action)
        try:
            yield
        finally:
            self.pending.discard(action)

    def _error_text(self, exc: Exception, fallback: str) -> str:
        if isinstance(exc, ValidationError):
            return str(exc)
        if isinstance(exc, UnauthorizedError):
            return SESSION_EXPIRED_ERROR
        if isinstance(exc, TransportError):
            return fallback
        if isinstance(exc, ApiError) and exc.server_message:
            return exc.server_message
        return fallback

    def _decode(self, data: Dict[str, Any]) -> E:
        return self.spec.model.from_api(data)

    # ------------------------------
    # OPERATIONS
    # ------------------------------

    def load(self) -> bool:
        """Fetch the full collection and replace the local list."""
        if self.is_busy(ACTION_LOAD):
            return False

        token = self._mount_token
        with self._in_flight(ACTION_LOAD):
            try:
                rows = self.client.list_resources(self.spec.endpoint)
                items = [self._decode(row) for row in rows]
            except ApiError as e:
                if self._is_stale(token):
                    return False
                logger.warning(f"Loading {self.spec.plural} failed: {e}")
                self.error = self._error_text(e, self.spec.load_error)
                self.loading = False
                return False

        if self._is_stale(token):
            logger.info(f"Discarding stale {self.spec.plural} response")
            return False

        self.items = items
        self.loading = False
        self.error = None
        logger.info(f"Loaded {len(items)} {self.spec.plural}")
        return True

    def fetch_one(self, entity_id: str) -> Optional[E]:
        """Read a single entity; the local list is not touched."""
        try:
            return self._decode(self.client.get_resource(self.spec.endpoint, entity_id))
        except ApiError as e:
            logger.warning(f"Fetching {self.spec.name} {entity_id} failed: {e}")
            self.error = self._error_text(e, self.spec.load_error)
            return None

    def create(self, values: Dict[str, Any]) -> Optional[E]:
        """
        Validate and submit a new entity.

        Appends the server's object only after the server confirms it.
        Returns None on failure; the caller keeps the form for correction.
        """
        if self.is_busy(ACTION_CREATE):
            return None

        try:
            draft = self.spec.build(values)
        except ValidationError as e:
            self.error = self._error_text(e, self.spec.save_error)
            return None

        token = self._mount_token
        with self._in_flight(ACTION_CREATE):
            try:
                created = self._decode(
                    self.client.create_resource(self.spec.endpoint, draft.to_api())
                )
            except ApiError as e:
                if not self._is_stale(token):
                    logger.warning(f"Creating {self.spec.name} failed: {e}")
                    self.error = self._error_text(e, self.spec.save_error)
                return None

        if self._is_stale(token):
            return None

        self.items = self.items + [created]
        self.error = None
        logger.info(f"Created {self.spec.name} {getattr(created, 'id', None)}")
        return created

    def update(self, entity_id: str, patch: Dict[str, Any]) -> bool:
        """
        Send a patch; on success merge it into the matching entry in place.

        Immutable fields (routeId, orderId) are dropped from the patch.
        """
        if self.is_busy(ACTION_UPDATE):
            return False

        patch = {k: v for k, v in patch.items() if k not in self.spec.immutable_fields}
        try:
            cleaned = self.spec.validate_patch(patch)
        except ValidationError as e:
            self.error = self._error_text(e, self.spec.save_error)
            return False

        token = self._mount_token
        with self._in_flight(ACTION_UPDATE):
            try:
                self.client.update_resource(
                    self.spec.endpoint, entity_id, self.spec.model.wire_patch(cleaned)
                )
            except ApiError as e:
                if not self._is_stale(token):
                    logger.warning(f"Updating {self.spec.name} {entity_id} failed: {e}")
                    self.error = self._error_text(e, self.spec.save_error)
                return False

        if self._is_stale(token):
            return False

        self.items = [
            replace(item, **cleaned) if getattr(item, "id", None) == entity_id else item
            for item in self.items
        ]
        self.error = None
        logger.info(f"Updated {self.spec.name} {entity_id}")
        return True

    def remove(self, entity_id: str, confirm: Union[bool, Callable[[], bool]]) -> bool:
        """
        Delete after explicit confirmation.

        confirm is either the operator's answer or a callable asking for it.
        Without an affirmative answer nothing is sent and nothing changes.
        """
        confirmed = confirm() if callable(confirm) else confirm
        if not confirmed:
            return False

        if self.is_busy(ACTION_REMOVE):
            return False

        token = self._mount_token
        with self._in_flight(ACTION_REMOVE):
            try:
                self.client.delete_resource(self.spec.endpoint, entity_id)
            except ApiError as e:
                if not self._is_stale(token):
                    logger.warning(f"Deleting {self.spec.name} {entity_id} failed: {e}")
                    self.error = self._error_text(e, self.spec.delete_error)
                return False

        if self._is_stale(token):
            return False

        self.items = [i for i in self.items if getattr(i, "id", None) != entity_id]
        self.error = None
        logger.info(f"Deleted {self.spec.name} {entity_id}")
        return True


# ==================================================
# FACTORIES
# ==================================================

def driver_synchronizer(client: ApiClient) -> ResourceSynchronizer[Driver]:
    return ResourceSynchronizer(client, DRIVER_SPEC)


def route_synchronizer(client: ApiClient) -> ResourceSynchronizer[Route]:
    return ResourceSynchronizer(client, ROUTE_SPEC)


def order_synchronizer(client: ApiClient) -> ResourceSynchronizer[Order]:
    return ResourceSynchronizer(client, ORDER_SPEC)

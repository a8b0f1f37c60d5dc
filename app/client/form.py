"""
Listing form controller.

Holds the draft of one listing being edited and autosaves it to the API
with a trailing debounce. Every write, autosave or publish toggle, goes
through a single FIFO queue so writes reach the server in issue order.
"""

from typing import Any, Dict, Optional
from datetime import datetime, timezone
import asyncio
import copy
import enum
import logging

from app.client.api import ListingsAPIClient, ListingsAPIError, ListingNotFound
from app.config import settings

logger = logging.getLogger(__name__)

# Fields the server owns or that only the publish toggle may change
_READ_ONLY_FIELDS = ("_id", "createdAt", "updatedAt")
_PUBLICATION_FIELDS = ("status", "isPublished")


class FormState(str, enum.Enum):
    LOADING = "loading"
    IDLE = "idle"
    PENDING = "pending"
    SAVING = "saving"


class ListingLockedError(Exception):
    """Raised when editing a published listing or toggling one that is still loading."""


def default_draft() -> Dict[str, Any]:
    """Initial values of a new listing form."""
    return {
        "title": "",
        "description": "",
        "price": 0,
        "currency": "AED",
        "propertyType": "apartment",
        "purpose": "sale",
        "sizeSqFt": 0,
        "bedrooms": 0,
        "bathrooms": 0,
        "parkingSpots": 0,
        "location": {
            "emirate": "",
            "city": "",
            "community": "",
            "street": "",
            "buildingName": "",
            "coordinates": {"lat": 0, "lng": 0},
        },
        "status": "draft",
        "isPublished": False,
        "amenities": [],
        "developer": "",
        "completionStatus": "ready",
        "yearBuilt": datetime.now().year,
        "paymentPlan": {"available": False},
        "ownership": "freehold",
        "agent": {"name": "", "phone": "", "email": "", "company": ""},
    }


class _Write:
    """One queued write. ``publish`` is None for an autosave."""

    def __init__(self, snapshot: Optional[Dict[str, Any]] = None, publish: Optional[bool] = None):
        self.snapshot = snapshot
        self.publish = publish
        self.done: asyncio.Future = asyncio.get_running_loop().create_future()


class ListingFormController:
    """
    Draft state machine for creating or editing one listing.

    States move ``loading -> idle -> pending -> saving -> idle``; ``loading``
    only occurs when editing an existing listing. The first save of a new
    draft creates the listing and captures its ``_id``; later saves update it.
    """

    def __init__(
        self,
        client: ListingsAPIClient,
        listing_id: Optional[str] = None,
        delay: Optional[float] = None
    ):
        self.client = client
        self.listing_id = listing_id
        self.delay = settings.autosave_delay_ms / 1000 if delay is None else delay

        self.draft: Dict[str, Any] = default_draft()
        self.is_published = False
        self.state = FormState.LOADING if listing_id else FormState.IDLE
        self.last_saved: Optional[datetime] = None
        self.last_error: Optional[ListingsAPIError] = None

        self._timer: Optional[asyncio.Task] = None
        self._queue: "asyncio.Queue[_Write]" = asyncio.Queue()
        self._worker: Optional[asyncio.Task] = None

    @property
    def is_loading(self) -> bool:
        return self.state == FormState.LOADING

    async def load(self) -> Dict[str, Any]:
        """
        Populate the draft from the stored listing.

        A failed load is logged and leaves the default draft in place.
        """
        if not self.listing_id:
            self.state = FormState.IDLE
            return self.draft

        try:
            document = await self.client.get(self.listing_id)
        except ListingNotFound as e:
            logger.warning(f"Listing {self.listing_id} not found while loading form")
            self.last_error = e
        except ListingsAPIError as e:
            logger.error(f"Error loading listing {self.listing_id}: {e}")
            self.last_error = e
        else:
            draft = default_draft()
            draft.update({k: v for k, v in document.items() if k not in _READ_ONLY_FIELDS})
            self.draft = draft
            self.is_published = bool(document.get("isPublished", False))
            logger.debug(f"Loaded listing {self.listing_id} into form")
        finally:
            self.state = FormState.IDLE

        return self.draft

    def set_field(self, path: str, value: Any) -> None:
        """
        Set a draft field and re-arm the autosave timer.

        ``path`` is dotted for nested fields, e.g. ``location.emirate``.
        """
        self.update_fields({path: value})

    def update_fields(self, values: Dict[str, Any]) -> None:
        """Set several draft fields as one edit."""
        if self.is_published:
            raise ListingLockedError("Published listings cannot be edited")

        for path, value in values.items():
            if path.split(".", 1)[0] in _READ_ONLY_FIELDS + _PUBLICATION_FIELDS:
                raise ValueError(f"Field '{path}' cannot be edited")
            _set_path(self.draft, path, value)

        if self.state == FormState.LOADING:
            return
        self._arm_timer()

    async def toggle_publish(self) -> bool:
        """
        Flip the publication status.

        Any pending edit is saved first. Returns the new ``is_published``;
        raises ``ListingsAPIError`` if the server refuses the change.
        """
        if self.state == FormState.LOADING:
            raise ListingLockedError("Listing is still loading")

        if self._timer is not None or not self.listing_id:
            self._cancel_timer()
            self._enqueue(_Write(snapshot=self._snapshot()))

        target = not self.is_published
        write = _Write(publish=target)
        self._enqueue(write)
        await write.done

        self.is_published = target
        self.draft["isPublished"] = target
        self.draft["status"] = "published" if target else "draft"
        logger.info(f"Listing {self.listing_id} {'published' if target else 'unpublished'}")
        return target

    async def flush(self) -> None:
        """Send any pending snapshot now and wait for all queued writes."""
        if self._timer is not None:
            self._cancel_timer()
            self._enqueue(_Write(snapshot=self._snapshot()))
        await self._queue.join()
        self._settle()

    async def close(self) -> None:
        """Flush pending writes and stop the writer."""
        await self.flush()
        if self._worker is not None:
            self._worker.cancel()
            try:
                await self._worker
            except asyncio.CancelledError:
                pass
            self._worker = None

    def _snapshot(self) -> Dict[str, Any]:
        return copy.deepcopy(self.draft)

    def _arm_timer(self) -> None:
        self._cancel_timer()
        self.state = FormState.PENDING
        self._timer = asyncio.create_task(self._debounce())

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    async def _debounce(self) -> None:
        await asyncio.sleep(self.delay)
        self._timer = None
        self._enqueue(_Write(snapshot=self._snapshot()))

    def _enqueue(self, write: _Write) -> None:
        if self._worker is None:
            self._worker = asyncio.create_task(self._run())
        self._queue.put_nowait(write)

    async def _run(self) -> None:
        while True:
            write = await self._queue.get()
            self.state = FormState.SAVING
            try:
                await self._apply(write)
            except ListingsAPIError as e:
                self._fail(write, e)
            except Exception as e:
                logger.exception(f"Unexpected error writing listing {self.listing_id}")
                error = ListingsAPIError(f"Unexpected error: {e}")
                error.__cause__ = e
                self._fail(write, error)
            else:
                self.last_error = None
                self.last_saved = datetime.now(timezone.utc)
                write.done.set_result(None)
            finally:
                self._queue.task_done()
                self._settle()

    def _fail(self, write: _Write, error: ListingsAPIError) -> None:
        self.last_error = error
        if write.publish is None:
            # Autosave failures are reported through last_error only
            logger.error(f"Autosave failed for listing {self.listing_id}: {error}")
            write.done.set_result(None)
        else:
            logger.warning(f"Publish toggle failed for listing {self.listing_id}: {error}")
            write.done.set_exception(error)

    async def _apply(self, write: _Write) -> None:
        if write.publish is not None:
            if not self.listing_id:
                raise ListingsAPIError("Listing has not been saved yet")
            await self.client.update(self.listing_id, {
                "isPublished": write.publish,
                "status": "published" if write.publish else "draft",
            })
            return

        if not self.listing_id:
            document = await self.client.create(write.snapshot)
            self.listing_id = document["_id"]
            logger.info(f"Created listing {self.listing_id} from form")
        else:
            payload = {
                k: v for k, v in write.snapshot.items()
                if k not in _PUBLICATION_FIELDS
            }
            await self.client.update(self.listing_id, payload)
            logger.debug(f"Autosaved listing {self.listing_id}")

    def _settle(self) -> None:
        if self.state == FormState.LOADING:
            return
        if self._timer is not None:
            self.state = FormState.PENDING
        elif self._queue.empty():
            self.state = FormState.IDLE


def _set_path(document: Dict[str, Any], path: str, value: Any) -> None:
    keys = path.split(".")
    target = document
    for key in keys[:-1]:
        child = target.get(key)
        if not isinstance(child, dict):
            child = {}
            target[key] = child
        target = child
    target[keys[-1]] = value

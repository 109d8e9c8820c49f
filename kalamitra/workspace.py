import threading
import time
import uuid
from collections import OrderedDict
from contextlib import contextmanager
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterator, List, Optional, Set

from .constants import LISTING_GATED_VIEWS, VIEWS
from .copilot import CopilotSession, create_session
from .errors import (
    ActionInProgressError,
    ValidationError,
    ViewLockedError,
    WorkspaceNotFoundError,
)
from .models import GeneratedImageResult, ProductListing
from .utils import image_bytes_to_data_url


@dataclass(frozen=True)
class UploadedImage:
    data: bytes
    mime_type: str
    filename: str = ""

    @property
    def preview(self) -> str:
        return image_bytes_to_data_url(self.data, self.mime_type)


class Workspace:
    """Cross-view state for one artisan: the photo, its AI variants and listing.

    ``revision`` increases on every upload; results computed against an older
    revision are discarded instead of overwriting state for the new photo.
    """

    def __init__(self, workspace_id: str):
        self.id = workspace_id
        self.created_at = datetime.now(timezone.utc)
        self.revision = 0
        self.image: Optional[UploadedImage] = None
        self.generated_image: Optional[GeneratedImageResult] = None
        self.listing: Optional[ProductListing] = None
        self.copilot: Optional[CopilotSession] = None
        self._busy: Set[str] = set()
        self._lock = threading.Lock()

    def upload_image(self, data: bytes, mime_type: str, filename: str = "") -> None:
        with self._lock:
            self.image = UploadedImage(data=data, mime_type=mime_type, filename=filename)
            self.revision += 1
            self.generated_image = None
            self.listing = None
            self.copilot = None

    def require_image(self) -> UploadedImage:
        if self.image is None:
            raise ValidationError("Please upload an image first.")
        return self.image

    def commit_generated_image(self, result: GeneratedImageResult, revision: int) -> bool:
        with self._lock:
            if revision != self.revision:
                return False
            self.generated_image = result
            return True

    def commit_listing(self, listing: ProductListing, revision: int, copilot_model: str) -> bool:
        with self._lock:
            if revision != self.revision:
                return False
            self.listing = listing
            self.copilot = create_session(listing, copilot_model)
            return True

    @property
    def has_listing(self) -> bool:
        return self.listing is not None

    def unlocked_views(self) -> List[str]:
        return [view for view in VIEWS if self.has_listing or view not in LISTING_GATED_VIEWS]

    def require_view(self, view: str) -> None:
        if view not in VIEWS:
            raise ValidationError(f"Unknown view: {view}.")
        if view not in self.unlocked_views():
            raise ViewLockedError(
                'Please create a product listing first using the "Listing Creator" tab.'
            )

    def require_listing(self) -> ProductListing:
        self.require_view("store")
        return self.listing

    def require_copilot(self) -> CopilotSession:
        self.require_view("copilot")
        return self.copilot

    @contextmanager
    def action(self, name: str) -> Iterator[None]:
        with self._lock:
            if name in self._busy:
                raise ActionInProgressError(f"A {name} request is already in progress.")
            self._busy.add(name)
        try:
            yield
        finally:
            with self._lock:
                self._busy.discard(name)

    def enriched_listing(self) -> Optional[ProductListing]:
        if self.listing is None:
            return None
        return replace(
            self.listing,
            original_image_preview=self.image.preview if self.image else None,
            generated_image=self.generated_image,
        )

    def summary(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "created_at": self.created_at.isoformat(),
            "has_image": self.image is not None,
            "has_generated_image": self.generated_image is not None,
            "has_listing": self.has_listing,
            "views": self.unlocked_views(),
        }


class WorkspaceStore:
    """In-memory workspaces, dropped after ``ttl_seconds`` idle or beyond ``max_items``.

    A value of 0 disables the corresponding limit. Lookups refresh the idle
    timer, so the least recently used workspace is evicted first.
    """

    def __init__(
        self,
        ttl_seconds: float = 0,
        max_items: int = 0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.ttl_seconds = ttl_seconds
        self.max_items = max_items
        self._clock = clock
        self._items: "OrderedDict[str, Workspace]" = OrderedDict()
        self._last_used: Dict[str, float] = {}
        self._lock = threading.Lock()

    def create(self) -> Workspace:
        workspace = Workspace(uuid.uuid4().hex)
        with self._lock:
            self._items[workspace.id] = workspace
            self._last_used[workspace.id] = self._clock()
            self._evict()
        return workspace

    def get(self, workspace_id: str) -> Workspace:
        with self._lock:
            self._evict()
            workspace = self._items.get(workspace_id)
            if workspace is not None:
                self._items.move_to_end(workspace_id)
                self._last_used[workspace_id] = self._clock()
        if workspace is None:
            raise WorkspaceNotFoundError("Workspace not found.")
        return workspace

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def _evict(self) -> None:
        if self.ttl_seconds > 0:
            cutoff = self._clock() - self.ttl_seconds
            for workspace_id in list(self._items):
                if self._last_used[workspace_id] > cutoff:
                    # Ordered by last use; everything after this is fresher.
                    break
                self._drop(workspace_id)
        if self.max_items > 0:
            while len(self._items) > self.max_items:
                self._drop(next(iter(self._items)))

    def _drop(self, workspace_id: str) -> None:
        del self._items[workspace_id]
        del self._last_used[workspace_id]

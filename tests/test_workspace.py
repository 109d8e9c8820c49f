import pytest

from kalamitra.errors import ActionInProgressError, ValidationError, ViewLockedError, WorkspaceNotFoundError
from kalamitra.models import GeneratedImageResult
from kalamitra.workspace import WorkspaceStore
from tests.helpers import PNG_BYTES


@pytest.fixture
def workspace():
    return WorkspaceStore().create()


def test_views_gated_on_listing(workspace, listing):
    assert workspace.unlocked_views() == ["photoshoot", "listing"]
    with pytest.raises(ViewLockedError):
        workspace.require_view("store")
    with pytest.raises(ViewLockedError):
        workspace.require_copilot()

    workspace.upload_image(PNG_BYTES, "image/png")
    assert workspace.commit_listing(listing, workspace.revision, "text-model")
    assert workspace.unlocked_views() == ["photoshoot", "listing", "copilot", "store"]
    assert workspace.require_copilot().listing is listing


def test_upload_clears_generated_state(workspace, listing):
    workspace.upload_image(PNG_BYTES, "image/png", "pot.png")
    revision = workspace.revision
    workspace.commit_generated_image(GeneratedImageResult(["data:image/png;base64,AA"]), revision)
    workspace.commit_listing(listing, revision, "text-model")

    workspace.upload_image(PNG_BYTES, "image/webp", "pot2.webp")

    assert workspace.image.mime_type == "image/webp"
    assert workspace.generated_image is None
    assert workspace.listing is None
    assert workspace.copilot is None


def test_results_for_replaced_image_are_discarded(workspace, listing):
    workspace.upload_image(PNG_BYTES, "image/png")
    stale = workspace.revision
    workspace.upload_image(PNG_BYTES, "image/jpeg")

    assert workspace.commit_listing(listing, stale, "text-model") is False
    assert workspace.commit_generated_image(GeneratedImageResult(["x"]), stale) is False
    assert workspace.listing is None
    assert workspace.generated_image is None


def test_require_image(workspace):
    with pytest.raises(ValidationError, match="upload an image"):
        workspace.require_image()


def test_duplicate_action_rejected_until_finished(workspace):
    with workspace.action("listing"):
        with pytest.raises(ActionInProgressError):
            with workspace.action("listing"):
                pass
        with workspace.action("photoshoot"):
            pass
    with workspace.action("listing"):
        pass


def test_action_released_after_error(workspace):
    with pytest.raises(RuntimeError):
        with workspace.action("chat"):
            raise RuntimeError("boom")
    with workspace.action("chat"):
        pass


def test_enriched_listing_adds_presentation(workspace, listing):
    workspace.upload_image(PNG_BYTES, "image/png")
    generated = GeneratedImageResult(["data:image/png;base64,AA"], "note")
    workspace.commit_generated_image(generated, workspace.revision)
    workspace.commit_listing(listing, workspace.revision, "text-model")

    enriched = workspace.enriched_listing()

    assert enriched.original_image_preview.startswith("data:image/png;base64,")
    assert enriched.generated_image is generated
    assert workspace.listing.original_image_preview is None


def test_store_lookup():
    store = WorkspaceStore()
    workspace = store.create()
    assert store.get(workspace.id) is workspace
    with pytest.raises(WorkspaceNotFoundError):
        store.get("missing")


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


def test_idle_workspace_expires():
    clock = FakeClock()
    store = WorkspaceStore(ttl_seconds=60, clock=clock)
    idle = store.create()
    clock.now += 30
    active = store.create()

    clock.now += 45
    assert store.get(active.id) is active
    with pytest.raises(WorkspaceNotFoundError):
        store.get(idle.id)
    assert len(store) == 1


def test_lookup_refreshes_idle_timer():
    clock = FakeClock()
    store = WorkspaceStore(ttl_seconds=60, clock=clock)
    workspace = store.create()
    for _ in range(3):
        clock.now += 50
        assert store.get(workspace.id) is workspace


def test_store_evicts_least_recently_used_beyond_limit():
    clock = FakeClock()
    store = WorkspaceStore(max_items=2, clock=clock)
    first = store.create()
    second = store.create()
    store.get(first.id)

    third = store.create()

    assert len(store) == 2
    assert store.get(first.id) is first
    assert store.get(third.id) is third
    with pytest.raises(WorkspaceNotFoundError):
        store.get(second.id)

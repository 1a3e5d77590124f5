"""
Listing editor: field validation, form state, auto-save and navigation guard.
"""

import asyncio

import pytest

from rentify_backend.config import settings
from rentify_backend.modules.property_editor.autosave import AutoSaver, serialize_draft
from rentify_backend.modules.property_editor.form_state import PropertyFormState
from rentify_backend.modules.property_editor.navigation import (
    DEFAULT_UNSAVED_MESSAGE,
    UnsavedChangesGuard,
)
from rentify_backend.modules.property_editor.schemas import (
    PropertyFormData,
    SaveStatusValue,
)
from rentify_backend.modules.property_editor.validation import (
    completion_percentage,
    validate_all,
    validate_field,
)

VALID_DRAFT = {
    "title": "Sunny 2 bedroom",
    "location": "Ntinda, Kampala",
    "description": "Bright apartment with a balcony and parking.",
    "category": "Apartment",
    "price_ugx": 150_000_000,
    "bedrooms": 2,
    "bathrooms": 1,
    "minimum_initial_months": 3,
}


class TestFieldValidation:
    def test_price_validator_is_pure(self):
        first = validate_field("price_ugx", -5)
        second = validate_field("price_ugx", -5)
        assert first == second == "Price cannot be negative"

    @pytest.mark.parametrize(
        "name,value,message",
        [
            ("title", "", "Title is required"),
            ("title", "ab", "Title must be at least 3 characters"),
            ("title", "x" * 101, "Title must be less than 100 characters"),
            ("location", "   ", "Location is required"),
            ("description", "short", "Description must be at least 10 characters"),
            ("category", "", "Category is required"),
            ("price_ugx", None, "Price is required"),
            ("bedrooms", -1, "Bedrooms cannot be negative"),
            ("bedrooms", 21, "Maximum 20 bedrooms allowed"),
            ("bathrooms", None, "Bathrooms is required"),
            ("minimum_initial_months", 0, "Minimum 1 month required"),
            ("minimum_initial_months", 25, "Maximum 24 months allowed"),
        ],
    )
    def test_messages(self, name, value, message):
        assert validate_field(name, value) == message

    def test_valid_values_and_unknown_fields_pass(self):
        for name, value in VALID_DRAFT.items():
            assert validate_field(name, value) is None
        assert validate_field("video_url", "not checked") is None

    def test_validate_all_reports_only_failures(self):
        errors = validate_all({**VALID_DRAFT, "title": "", "bedrooms": 30})
        assert errors == {
            "title": "Title is required",
            "bedrooms": "Maximum 20 bedrooms allowed",
        }

    def test_completion_percentage(self):
        assert completion_percentage(VALID_DRAFT) == 70
        full = {
            **VALID_DRAFT,
            "image_url": "https://cdn.example.com/a.jpg",
            "video_url": "https://cdn.example.com/a.mp4",
            "google_maps_embed_url": "<iframe></iframe>",
        }
        assert completion_percentage(full) == 100
        assert completion_percentage({}) == 0


class TestFormState:
    def test_errors_only_for_touched_fields(self):
        form = PropertyFormState()
        form.update_field("title", "a")
        assert form.visible_errors() == {}
        assert form.is_dirty

        assert form.touch_field("title") == "Title must be at least 3 characters"
        form.update_field("title", "A fine title")
        assert form.visible_errors() == {}

    def test_unknown_field_rejected(self):
        with pytest.raises(KeyError):
            PropertyFormState().update_field("colour", "blue")

    def test_set_data_does_not_mark_dirty(self):
        form = PropertyFormState()
        form.set_data(**VALID_DRAFT)
        assert not form.is_dirty
        assert form.is_valid()

    def test_reset_clears_state(self):
        form = PropertyFormState(VALID_DRAFT)
        form.update_field("title", "x")
        form.touch_field("title")
        form.reset()
        assert not form.is_dirty
        assert form.touched == set()
        assert form.visible_errors() == {}

    def test_snapshot_is_serializable(self):
        form = PropertyFormState(VALID_DRAFT)
        form.touch_field("location")
        snapshot = form.snapshot()
        assert snapshot["touched"] == ["location"]
        assert snapshot["completion_percentage"] == 70
        assert snapshot["data"]["price_ugx"] == 150_000_000


class TestAutoSaver:
    def test_defaults_come_from_settings(self, monkeypatch):
        monkeypatch.setattr(settings, "autosave_interval_seconds", 12.5)
        monkeypatch.setattr(settings, "autosave_idle_reset_seconds", 0.5)

        async def on_save(data):
            return None

        saver = AutoSaver(lambda: VALID_DRAFT, on_save)
        assert saver.interval == 12.5
        assert saver.idle_reset == 0.5

        explicit = AutoSaver(lambda: VALID_DRAFT, on_save, interval=5, idle_reset=1)
        assert (explicit.interval, explicit.idle_reset) == (5, 1)

    async def test_tick_without_changes_does_not_save(self):
        draft = PropertyFormData(**VALID_DRAFT)
        calls = []

        async def on_save(data):
            calls.append(data)

        saver = AutoSaver(lambda: draft, on_save, interval=60)
        assert await saver.tick() is False
        assert calls == []
        await saver.stop()

    async def test_tick_saves_changes_once(self):
        state = {"draft": PropertyFormData(**VALID_DRAFT)}
        calls = []

        async def on_save(data):
            calls.append(serialize_draft(data))

        saver = AutoSaver(lambda: state["draft"], on_save, interval=60)
        state["draft"] = state["draft"].model_copy(update={"title": "Renamed listing"})

        assert saver.has_changes
        assert await saver.tick() is True
        assert await saver.tick() is False
        assert len(calls) == 1
        assert saver.status.status == SaveStatusValue.SAVED
        await saver.stop()

    async def test_manual_save_always_runs(self):
        calls = []

        async def on_save(data):
            calls.append(data)

        saver = AutoSaver(lambda: VALID_DRAFT, on_save, interval=60)
        assert await saver.save() is True
        assert len(calls) == 1
        await saver.stop()

    async def test_failed_save_reports_error(self):
        state = {"draft": {"title": "one"}}

        async def on_save(data):
            raise RuntimeError("network down")

        saver = AutoSaver(lambda: state["draft"], on_save, interval=60)
        state["draft"] = {"title": "two"}

        assert await saver.tick() is False
        assert saver.status.status == SaveStatusValue.ERROR
        assert saver.status.error == "network down"
        assert saver.has_changes
        await saver.stop()

    async def test_disabled_saver_never_ticks(self):
        state = {"draft": {"title": "one"}}
        calls = []

        async def on_save(data):
            calls.append(data)

        saver = AutoSaver(lambda: state["draft"], on_save, enabled=False)
        state["draft"] = {"title": "two"}
        assert await saver.tick() is False
        assert calls == []

    async def test_status_returns_to_idle(self):
        state = {"draft": {"title": "one"}}

        async def on_save(data):
            return None

        saver = AutoSaver(lambda: state["draft"], on_save, interval=60, idle_reset=0.01)
        await saver.save()
        assert saver.status.status == SaveStatusValue.SAVED
        await asyncio.sleep(0.05)
        assert saver.status.status == SaveStatusValue.IDLE
        assert saver.status.last_saved is not None
        await saver.stop()

    async def test_background_loop_saves_changes(self):
        state = {"draft": {"title": "one"}}
        saved = asyncio.Event()

        async def on_save(data):
            saved.set()

        async with AutoSaver(lambda: state["draft"], on_save, interval=0.01):
            state["draft"] = {"title": "two"}
            await asyncio.wait_for(saved.wait(), timeout=1)


class TestUnsavedChangesGuard:
    def make_guard(self, dirty: bool, answer: bool):
        visited = []
        prompts = []

        def confirm(message):
            prompts.append(message)
            return answer

        guard = UnsavedChangesGuard(lambda: dirty, visited.append, confirm)
        return guard, visited, prompts

    def test_clean_form_navigates_without_prompt(self):
        guard, visited, prompts = self.make_guard(dirty=False, answer=False)
        assert guard.safe_navigate("/admin/properties")
        assert visited == ["/admin/properties"]
        assert prompts == []
        assert guard.before_unload() is None

    def test_dirty_form_asks_first(self):
        guard, visited, prompts = self.make_guard(dirty=True, answer=False)
        assert not guard.safe_navigate("/admin/properties")
        assert visited == []
        assert prompts == [DEFAULT_UNSAVED_MESSAGE]
        assert guard.before_unload() == DEFAULT_UNSAVED_MESSAGE

    def test_force_navigate_skips_prompt(self):
        guard, visited, prompts = self.make_guard(dirty=True, answer=False)
        guard.force_navigate("/admin/properties")
        assert visited == ["/admin/properties"]
        assert prompts == []

import json

import pytest

from app.forms.itinerary_form import ItineraryForm
from app.models.itinerary import Activity
from app.tools.media_host import PhotoFile, SupabaseStorageUploader
from app.utils import database
from app.utils.exceptions import NotFound
from app.validators.input_validator import ValidationError


def photo(name):
    return PhotoFile(filename=name, content=b"img", content_type="image/png")


def test_from_form_data_parses_activities():
    form = ItineraryForm.from_form_data(
        title="Alps",
        destination="Chamonix",
        trip_type="Adventure",
        activities=json.dumps([{"name": "Hike", "description": "Ridge", "date": "2024-05-01"}]),
    )
    assert form.activities == [Activity(name="Hike", description="Ridge", date="2024-05-01")]


@pytest.mark.parametrize("raw", [None, "", "undefined"])
def test_from_form_data_without_activities(raw):
    assert ItineraryForm.from_form_data("t", "d", activities=raw).activities == []


def test_from_form_data_rejects_malformed_activities():
    with pytest.raises(ValidationError) as exc:
        ItineraryForm.from_form_data("t", "d", activities="{not json")
    assert exc.value.message == "Invalid activities format"


def test_activity_editing():
    form = ItineraryForm(title="t", destination="d")
    form.add_activity()
    form.add_activity()
    form.update_activity(0, "name", "Museum")
    form.update_activity(1, "date", "2024-06-02")
    form.remove_activity(0)

    assert form.activities == [Activity(name="", description="", date="2024-06-02")]


def test_update_activity_rejects_unknown_field():
    form = ItineraryForm(activities=[Activity(name="x")])
    with pytest.raises(ValidationError):
        form.update_activity(0, "location", "Paris")
    assert form.activities == [Activity(name="x")]


def test_update_activity_rejects_bad_index():
    with pytest.raises(ValidationError):
        ItineraryForm().update_activity(3, "name", "x")


def test_photo_removal():
    form = ItineraryForm(existing_photos=["u1", "u2", "u3"], new_photos=[photo("a.png"), photo("b.png")])
    form.remove_existing_photo(1)
    form.remove_new_photo(0)
    assert form.existing_photos == ["u1", "u3"]
    assert [p.filename for p in form.new_photos] == ["b.png"]


@pytest.mark.asyncio
async def test_submit_create_validates_before_uploading(fake_supabase, session):
    form = ItineraryForm(title="", destination="Rome", new_photos=[photo("a.png")])
    with pytest.raises(ValidationError):
        await form.submit_create(session, SupabaseStorageUploader())
    assert fake_supabase.storage.objects == {}
    assert fake_supabase.calls == []


@pytest.mark.asyncio
async def test_submit_create_omits_failed_photos(fake_supabase, session):
    fake_supabase.storage.failing.add("bad.png")
    form = ItineraryForm(
        title="Rome",
        destination="Rome",
        new_photos=[photo("a.png"), photo("bad.png"), photo("c.png")],
    )

    result = await form.submit_create(session, SupabaseStorageUploader())

    assert result.failed_uploads == ["bad.png"]
    stored = await database.get_itinerary(session, result.id)
    assert len(stored.photos) == 2
    assert stored.photos[0].endswith("_a.png")
    assert stored.photos[1].endswith("_c.png")
    assert all(f"itineraries/{session.owner_id}/" in url for url in stored.photos)


@pytest.mark.asyncio
async def test_submit_update_appends_new_photos_to_kept_ones(fake_supabase, session):
    created = await ItineraryForm(title="Oslo", destination="Oslo").submit_create(session, SupabaseStorageUploader())

    form = ItineraryForm(
        title="Oslo again",
        destination="Oslo",
        trip_type="Work",
        existing_photos=["https://cdn.test/kept.jpg"],
        new_photos=[photo("new.png")],
    )
    result = await form.submit_update(session, created.id, SupabaseStorageUploader())

    assert result.id == created.id
    assert result.photos[0] == "https://cdn.test/kept.jpg"
    assert result.photos[1].endswith("_new.png")
    stored = await database.get_itinerary(session, created.id)
    assert stored.title == "Oslo again"
    assert stored.trip_type == "Work"


@pytest.mark.asyncio
async def test_submit_update_unknown_id_uploads_nothing(fake_supabase, session):
    form = ItineraryForm(title="t", destination="d", new_photos=[photo("a.png")])
    with pytest.raises(NotFound):
        await form.submit_update(session, "00000000-0000-0000-0000-000000000000", SupabaseStorageUploader())
    assert fake_supabase.storage.objects == {}

from app.schemas.location import LocationRead
from app.services.map_sync import LocationPicker, format_coordinates, sync_markers
from tests.fakes import FakeLocationStore, FakeMapView, make_task, utc


def test_format_coordinates():
    assert format_coordinates((13.268969332, 57.472916241)) == "[13.268969, 57.472916]"


def test_clicks_are_ignored_outside_picking_mode():
    view = FakeMapView()
    picker = LocationPicker(view)
    view.click(1.0, 2.0)
    assert picker.picked is None

    picker.start()
    picker.cancel()
    view.click(1.0, 2.0)
    assert picker.picked is None


async def test_pick_and_submit_places_marker():
    view, store = FakeMapView(), FakeLocationStore()
    picker = LocationPicker(view)

    picker.start()
    view.click(13.27, 57.47)
    assert picker.picked == (13.27, 57.47)

    location = await picker.submit(store, "Rose bed", "**Full sun**")
    assert location is not None
    assert location.name == "Rose bed"
    assert view.markers[location.id] == (13.27, 57.47)
    assert not picker.picking
    assert view.handler is None


async def test_submit_without_pick_does_nothing():
    view, store = FakeMapView(), FakeLocationStore()
    picker = LocationPicker(view)
    picker.start()
    assert await picker.submit(store, "Nowhere") is None
    assert store.locations == {}


async def test_submit_keeps_picking_when_store_fails():
    view, store = FakeMapView(), FakeLocationStore()
    store.fail_create = True
    picker = LocationPicker(view)
    picker.start()
    view.click(1.0, 1.0)
    assert await picker.submit(store, "Herbs") is None
    assert picker.picking
    assert view.markers == {}


def test_sync_markers_highlights_and_removes_stale():
    view = FakeMapView()
    view.markers[7] = (0.0, 0.0)
    locations = [
        LocationRead(id=1, name="Orchard", coordinates=(1.0, 2.0), info="",
                     tasks=[make_task(1, start=utc(2024, 1, 1))]),
        LocationRead(id=2, name="Pond", coordinates=(3.0, 4.0), info="",
                     tasks=[make_task(2, start=utc(2024, 6, 1), location_id=2)]),
    ]

    shown = sync_markers(view, locations, utc(2024, 1, 5), known_ids=[1, 2, 7])

    assert shown == {1, 2}
    assert view.markers == {1: (1.0, 2.0), 2: (3.0, 4.0)}
    assert view.highlighted == {1: True, 2: False}

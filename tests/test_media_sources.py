import json

from nota.models import MediaItem
from nota.schemas.media_source_config import Condition, MediaSourceConfig, SearchFilter
from nota.services.datasource import ItemRef, get_datasource
from nota.services.media_sources import get_media_items, scan_media_source, search_media_item_ids


def test_scan_is_idempotent_and_skips_exports(db, media_source, media, media_root):
    media("images/a.jpg", sidecar={"annotations": []})
    media("b.jpg")
    (media_root / "exports").mkdir()
    (media_root / "exports" / "old.tar.gz").write_bytes(b"x")

    assert scan_media_source(db, media_source) == 2
    assert scan_media_source(db, media_source) == 0
    rows = {(m.path, m.name) for m in db.query(MediaItem)}
    assert rows == {("images", "a.jpg"), ("", "b.jpg")}


def test_conditions_filter_on_metadata(db, media_source, media):
    for n in ("a.jpg", "b.jpg", "c.jpg"):
        media(f"images/{n}")
    scan_media_source(db, media_source)
    meta = {"a.jpg": {"camera": "front", "tags": ["night"]}, "b.jpg": {"camera": "rear"}, "c.jpg": {"camera": "front"}}
    for m in db.query(MediaItem):
        m.metadata_json = json.dumps(meta[m.name])
    db.commit()

    def names(conditions):
        ids = search_media_item_ids(db, media_source, SearchFilter(path="images"), conditions)
        return [m.name for m in get_media_items(db, ids)]

    assert names([Condition(field="camera", value="front")]) == ["a.jpg", "c.jpg"]
    assert names([Condition(field="camera", operator="neq", value="front")]) == ["b.jpg"]
    assert names([Condition(field="tags", operator="contains", value="night")]) == ["a.jpg"]
    assert names([Condition(field="camera", operator="in", value=["rear", "side"])]) == ["b.jpg"]
    assert names([]) == ["a.jpg", "b.jpg", "c.jpg"]


def test_get_media_items_keeps_id_order(db, media_source, media):
    for n in ("a.jpg", "b.jpg", "c.jpg"):
        media(n)
    scan_media_source(db, media_source)
    ids = [m.id for m in db.query(MediaItem).order_by(MediaItem.id)]

    assert [m.id for m in get_media_items(db, list(reversed(ids)))] == list(reversed(ids))
    assert get_media_items(db, []) == []


def test_filesystem_datasource_round_trip(media_source, media_root):
    ds = get_datasource(media_source)
    ref = ItemRef(resource="exports/2024", file_name="x.bin")

    assert not ds.stat_item(ref)
    descriptor = ds.write_item(ref, b"a" * 100_000)

    assert descriptor.path == "exports/2024/x.bin"
    assert descriptor.size == 100_000
    assert descriptor.media_source_id == media_source.id
    assert ds.stat_item(ref)
    assert b"".join(ds.read_item(ref)) == b"a" * 100_000


def test_media_source_config_keeps_stored_keys():
    raw = '{"options": {"path": "images/", "limit": 10, "excludeAlreadyUsed": true}, "conditions": [{"field": "camera", "operator": "eq", "value": "front"}]}'
    config = MediaSourceConfig.from_json(raw)

    assert config.options.exclude_already_used is True
    assert config.options.limit == 10
    assert json.loads(config.to_json()) == json.loads(raw)
    assert MediaSourceConfig.from_json(None).options.path == ""

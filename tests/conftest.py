import json
import os

# must be set before anything from nota is imported
os.environ["ENV"] = "test"
os.environ["DATABASE_URL"] = "sqlite+pysqlite:///:memory:"

import pytest  # noqa: E402

import nota.models  # noqa: E402,F401
from nota.db.base import Base  # noqa: E402
from nota.db.session import SessionLocal, engine  # noqa: E402
from nota.models import MediaSource, Project, TaskTemplate  # noqa: E402
from nota.schemas.media_source_config import MediaSourceConfig  # noqa: E402
from nota.services.media_sources import scan_media_source  # noqa: E402
from nota.services.tasks import create_task  # noqa: E402

TEMPLATE = {
    "parser": "nota",
    "mediaExtensions": ["jpg", "png"],
    "annotations": [
        {"name": "objects", "labels": [{"name": "class", "type": "single-selection"}]},
        {
            "name": "quality",
            "labels": [
                {"name": "blurry", "type": "boolean", "options": {"default": False}},
                {"name": "tags", "type": "multiple-selection"},
            ],
            "options": {"autoCreate": True},
        },
    ],
}


@pytest.fixture()
def db():
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def media_root(tmp_path):
    root = tmp_path / "media"
    root.mkdir()
    return root


@pytest.fixture()
def project(db):
    p = Project(name="Street scenes")
    db.add(p)
    db.commit()
    return p


@pytest.fixture()
def media_source(db, media_root):
    ms = MediaSource(name="local", type="filesystem", config_json=json.dumps({"root": str(media_root)}))
    db.add(ms)
    db.commit()
    return ms


@pytest.fixture()
def template(db):
    t = TaskTemplate(name="objects + quality", template_json=json.dumps(TEMPLATE))
    db.add(t)
    db.commit()
    return t


def add_media(root, relative_path: str, sidecar: dict | str | None = None) -> None:
    p = root / relative_path
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_bytes(b"\xff\xd8fake-image")
    if sidecar is not None:
        body = sidecar if isinstance(sidecar, str) else json.dumps(sidecar)
        (p.parent / (p.name + ".json")).write_text(body)


@pytest.fixture()
def make_task(db, project, template, media_source):
    def _make(path: str = "images/", **options):
        config = MediaSourceConfig.model_validate({"options": {"path": path, **options}})
        return create_task(
            db,
            project_id=project.id,
            task_template_id=template.id,
            media_source_id=media_source.id,
            name="street",
            media_source_config=config,
            created_by=7,
        )

    return _make


@pytest.fixture()
def scan(db, media_source):
    def _scan() -> int:
        return scan_media_source(db, media_source)

    return _scan


@pytest.fixture()
def media(media_root):
    """media("images/a.jpg", sidecar={...}) drops a file (and its .json) into the media root."""

    def _add(relative_path: str, sidecar: dict | str | None = None) -> None:
        add_media(media_root, relative_path, sidecar)

    return _add

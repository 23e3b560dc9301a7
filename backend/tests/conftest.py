import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from database import Base, make_engine
from storage import get_store
from storage.json_store import JsonFileStore
from storage.sql_store import SqlRecordStore
import models.collection  # noqa: F401


@pytest.fixture
def json_store(tmp_path):
    return JsonFileStore(tmp_path / "data")


@pytest.fixture
def sql_store(tmp_path):
    engine = make_engine(f"sqlite:///{tmp_path / 'store.db'}")
    Base.metadata.create_all(bind=engine)
    yield SqlRecordStore(sessionmaker(autocommit=False, autoflush=False, bind=engine))
    engine.dispose()


# Service tests run against both backends
@pytest.fixture(params=["json", "sql"])
def store(request):
    return request.getfixturevalue(f"{request.param}_store")


@pytest.fixture
def client(json_store):
    from main import app

    app.dependency_overrides[get_store] = lambda: json_store
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def dress_fields():
    return {
        "name": "Floral Wrap Dress",
        "category": "women",
        "price": 1899.0,
        "description": "Lightweight wrap dress",
        "color": "Red",
        "size": ["S", "M", "L"],
        "image": "/images/floral-wrap.jpg",
        "stock": 12,
    }

from fastapi.testclient import TestClient

from app import dependencies as deps
from app.main import app
from app.schemas.blog import ParsedPost
from app.security import SESSION_COOKIE_NAME, get_settings
from app.settings import Settings
from tests.conftest import FakePostsService


def test_root_endpoint():
    with TestClient(app) as client:
        res = client.get("/")
        assert res.status_code == 200
        assert res.json() == {"message": "Church Blog API is running"}


def test_posts_are_public_but_writes_need_login():
    fake_post = ParsedPost(
        id="1717234200123-hello",
        slug="hello",
        title="Hello World",
        author="Pastor John",
        content="Body",
        excerpt="Body...",
        createdAt="2024-06-01T09:30:00.123Z",
        updatedAt="2024-06-01T09:30:00.123Z",
        tags=[],
        filename="1717234200123-hello.md",
    )
    service = FakePostsService(list_posts_return=[fake_post])
    form = {"title": "New", "author": "Mary", "content": "Body"}

    original_overrides = dict(app.dependency_overrides)
    app.dependency_overrides[deps.get_posts_service] = lambda: service
    app.dependency_overrides[get_settings] = lambda: Settings(ADMIN_PASSWORD="amen")
    try:
        with TestClient(app) as client:
            res = client.get("/posts")
            assert res.status_code == 200
            assert res.json()[0]["slug"] == "hello"

            res = client.post("/posts", json=form)
            assert res.status_code == 403

            res = client.post("/auth/login", json={"password": "amen"})
            assert res.status_code == 200
            assert client.cookies.get(SESSION_COOKIE_NAME)

            res = client.post("/posts", json=form)
            assert res.status_code == 201
            assert service.saved[0].title == "New"
    finally:
        app.dependency_overrides = original_overrides

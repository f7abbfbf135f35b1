"""Tests for the REST transport."""

from app.catalog.policy import CapabilityPolicy
from app.config import Settings
from app.main import create_app
from app.storage import InMemoryRepository

from fastapi.testclient import TestClient

from .conftest import AUTHOR_HEADERS, EDITOR_HEADERS, SUBSCRIBER_HEADERS


def _create_author(client, name="Jane Austen"):
    resp = client.post("/api/catalog/authors", json={"name": name}, headers=EDITOR_HEADERS)
    assert resp.status_code == 201
    return resp.json()["author"]


def test_health_check(client):
    resp = client.get("/")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


def test_book_lifecycle(client):
    author = _create_author(client)
    assert author == {"id": 1, "name": "Jane Austen"}

    resp = client.post(
        "/api/catalog/books",
        json={
            "title": "Emma",
            "description": "A comedy of manners.",
            "isbn": "123",
            "publication_year": "1815",
            "author_ids": [author["id"]],
        },
        headers=EDITOR_HEADERS,
    )
    assert resp.status_code == 201
    body = resp.json()
    assert body["message"] == "Book created successfully"
    book = body["book"]
    assert book["authors"] == [{"id": 1, "name": "Jane Austen"}]
    assert book["description"] == "A comedy of manners."

    listed = client.get("/api/catalog/books").json()
    assert [b["id"] for b in listed] == [book["id"]]
    assert "description" not in listed[0]

    detail = client.get(f"/api/catalog/books/{book['id']}").json()
    assert detail["description"] == "A comedy of manners."
    assert detail["isbn"] == "123"
    assert detail["publication_year"] == "1815"

    resp = client.put(
        f"/api/catalog/books/{book['id']}",
        json={"title": "Emma", "author_ids": [1, 99]},
        headers=EDITOR_HEADERS,
    )
    assert resp.status_code == 200
    updated = resp.json()["book"]
    assert updated["authors"] == [{"id": 1, "name": "Jane Austen"}]
    assert updated["author_ids"] == [1, 99]
    assert updated["description"] == ""

    resp = client.delete(f"/api/catalog/books/{book['id']}", headers=EDITOR_HEADERS)
    assert resp.status_code == 200
    assert resp.json() == {"message": "Book deleted successfully", "id": book["id"]}

    assert client.get(f"/api/catalog/books/{book['id']}").status_code == 404


def test_validation_errors_are_400(client):
    resp = client.post("/api/catalog/books", json={"title": "   "}, headers=EDITOR_HEADERS)
    assert resp.status_code == 400
    assert resp.json()["detail"] == "title required"
    assert client.get("/api/catalog/books").json() == []

    resp = client.post("/api/catalog/authors", json={"name": ""}, headers=EDITOR_HEADERS)
    assert resp.status_code == 400
    assert resp.json()["detail"] == "name required"


def test_malformed_body_is_400(client):
    resp = client.post("/api/catalog/books", content="not json", headers=EDITOR_HEADERS)
    assert resp.status_code == 400


def test_not_found(client):
    assert client.get("/api/catalog/books/12").status_code == 404
    assert client.get("/api/catalog/authors/12").status_code == 404
    resp = client.put("/api/catalog/books/12", json={"title": "x"}, headers=EDITOR_HEADERS)
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Book not found"
    assert client.delete("/api/catalog/books/12", headers=EDITOR_HEADERS).status_code == 404


def test_author_is_not_a_book(client):
    author = _create_author(client)
    assert client.get(f"/api/catalog/books/{author['id']}").status_code == 404
    assert client.get(f"/api/catalog/authors/{author['id']}").json() == author


def test_permissions(client):
    resp = client.post("/api/catalog/books", json={"title": "x"})
    assert resp.status_code == 403
    resp = client.post("/api/catalog/books", json={"title": "x"}, headers=SUBSCRIBER_HEADERS)
    assert resp.status_code == 403
    resp = client.post("/api/catalog/authors", json={"name": "x"}, headers=SUBSCRIBER_HEADERS)
    assert resp.status_code == 403

    resp = client.post("/api/catalog/books", json={"title": "Mine"}, headers=AUTHOR_HEADERS)
    assert resp.status_code == 201
    book_id = resp.json()["book"]["id"]

    resp = client.put(f"/api/catalog/books/{book_id}", json={"title": "Still mine"}, headers=AUTHOR_HEADERS)
    assert resp.status_code == 200
    assert client.delete(f"/api/catalog/books/{book_id}", headers=AUTHOR_HEADERS).status_code == 403
    assert client.delete(f"/api/catalog/books/{book_id}", headers=EDITOR_HEADERS).status_code == 200


def test_authors_listed_by_name(client):
    for name in ["Zola", "Austen", "Balzac"]:
        _create_author(client, name)
    names = [a["name"] for a in client.get("/api/catalog/authors").json()]
    assert names == ["Austen", "Balzac", "Zola"]


def test_seed_file_loaded_at_startup():
    from app.catalog.store import DATA_FILE

    repo = InMemoryRepository()
    app = create_app(repository=repo, policy=CapabilityPolicy(), settings=Settings(seed_file=DATA_FILE))
    client = TestClient(app)

    books = client.get("/api/catalog/books").json()
    assert len(books) == 4
    emma = next(b for b in books if b["title"] == "Emma")
    assert emma["author"] == "Jane Austen"
    detail = client.get(f"/api/catalog/books/{emma['id']}").json()
    assert detail["description"].startswith("Emma Woodhouse")


def test_repository_failure_is_500(broken_repository):
    client = TestClient(create_app(repository=broken_repository, settings=Settings(seed_file=None)))
    resp = client.get("/api/catalog/books")
    assert resp.status_code == 500
    assert resp.json()["detail"] == "Failed to list books"

import pytest

from ordtrie_service import SEED_KEYS, create_app


@pytest.fixture
def client():
    app = create_app(["go", "goad", "goal"], max_key_length=8)
    app.config["TESTING"] = True
    with app.test_client() as c:
        yield c


def test_index_lists_endpoints(client):
    resp = client.get("/")
    assert resp.status_code == 200
    assert "GET  /dump?sep=<sep>" in resp.get_json()["endpoints"]


def test_health(client):
    body = client.get("/health").get_json()
    assert body["status"] == "healthy"
    assert body["trie_size"] == 3


def test_stats(client):
    body = client.get("/stats").get_json()
    assert body["total_keys"] == 3
    assert body["total_nodes"] == 5
    assert body["seed_keys"] == 3


@pytest.mark.parametrize(
    "key, found, matched",
    [
        ("go", True, "go"),
        ("goa", False, "goa"),
        ("goat", False, "goa"),
        ("", False, ""),
    ],
)
def test_lookup(client, key, found, matched):
    resp = client.get("/lookup", query_string={"q": key})
    assert resp.status_code == 200
    assert resp.get_json() == {"key": key, "found": found, "matched": matched}


def test_prefix(client):
    body = client.get("/prefix?q=goa").get_json()
    assert body == {"prefix": "goa", "count": 2, "matches": ["goad", "goal"]}


def test_prefix_limit(client):
    body = client.get("/prefix?q=go&limit=2").get_json()
    assert body["matches"] == ["go", "goad"]
    body = client.get("/prefix?q=go&limit=many").get_json()
    assert body["count"] == 3


def test_insert(client):
    resp = client.post("/insert", json={"key": "goat"})
    assert resp.status_code == 201
    assert resp.get_json() == {"inserted": "goat", "trie_size": 4}
    assert client.get("/lookup?q=goat").get_json()["found"] is True


def test_insert_rejects_bad_bodies(client):
    assert client.post("/insert", json={"key": ""}).status_code == 400
    assert client.post("/insert", json={}).status_code == 400
    assert client.post("/insert", json=["go"]).status_code == 400
    assert client.post("/insert", data="go").status_code == 400
    resp = client.post("/insert", json={"key": "goalkeeper"})
    assert resp.status_code == 400
    assert "max 8" in resp.get_json()["error"]
    assert client.get("/health").get_json()["trie_size"] == 3


def test_delete(client):
    resp = client.delete("/delete?q=go")
    assert resp.status_code == 200
    assert resp.get_json() == {"deleted": "go", "trie_size": 2}
    assert client.get("/lookup?q=goad").get_json()["found"] is True


def test_delete_errors(client):
    resp = client.delete("/delete?q=goa")
    assert resp.status_code == 404
    assert resp.get_json() == {"error": "key not found", "key": "goa"}
    resp = client.delete("/delete")
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "key length cannot be zero"


def test_dump(client):
    resp = client.get("/dump")
    assert resp.status_code == 200
    assert resp.mimetype == "text/plain"
    assert resp.get_data(as_text=True) == "go\ngoad\ngoal\n"
    resp = client.get("/dump?sep=,")
    assert resp.get_data(as_text=True) == "go,goad,goal,"


def test_dump_after_deleting_everything(client):
    for key in ["goal", "go", "goad"]:
        assert client.delete("/delete", query_string={"q": key}).status_code == 200
    assert client.get("/dump").get_data(as_text=True) == ""
    assert client.get("/stats").get_json()["total_nodes"] == 0


def test_default_app_is_seeded():
    from ordtrie_service import app

    with app.test_client() as c:
        body = c.get("/stats").get_json()
    assert body["seed_keys"] == len(SEED_KEYS)
    assert body["total_keys"] >= 1

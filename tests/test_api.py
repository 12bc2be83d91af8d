import asyncio
import io

import httpx
from fastapi.testclient import TestClient

from boxinventory import main
from boxinventory.config import settings
from boxinventory.routes import boxes as box_routes
from boxinventory.services.tag_suggestion import suggest_tags


def test_health(api_client):
    client, _, _ = api_client
    assert client.get("/health").json() == {"status": "healthy"}


def test_list_boxes(api_client):
    client, _, _ = api_client
    res = client.get("/api/boxes/")
    assert res.status_code == 200
    assert [b["id"] for b in res.json()] == ["BOX-001", "BOX-002", "SHELF-A"]


def test_get_existing_and_new_box(api_client):
    client, store, _ = api_client
    res = client.get("/api/boxes/box-001")
    assert res.status_code == 200
    assert res.json()["is_new"] is False
    assert len(res.json()["box"]["items"]) == 2

    res = client.get("/api/boxes/box-new")
    assert res.json() == {"box": {"id": "BOX-NEW", "items": []}, "is_new": True}
    assert store.saves == 0


def test_save_new_empty_box_is_dropped(api_client):
    client, store, repo = api_client
    res = client.put("/api/boxes/fresh", json={"items": []})
    assert res.status_code == 200
    assert res.json()["persisted"] is False
    assert store.saves == 0
    assert repo.get("FRESH") is None


def test_save_box_replaces_items(api_client):
    client, store, repo = api_client
    res = client.put("/api/boxes/BOX-002", json={"items": [{"id": "H1", "name": "Hammer", "tags": ["Tools"]}]})
    assert res.status_code == 200
    body = res.json()
    assert body["persisted"] is True
    assert body["warning"] is None
    assert body["box"]["items"] == [{"id": "H1", "name": "Hammer", "tags": ["tools"]}]
    assert store.saves == 1


def test_save_box_with_duplicate_item_ids_is_rejected(api_client):
    client, store, _ = api_client
    res = client.put("/api/boxes/BOX-002", json={"items": [{"id": "X", "name": "a"}, {"id": "X", "name": "b"}]})
    assert res.status_code == 422
    assert store.saves == 0


def test_save_failure_is_reported_not_reverted(api_client):
    client, store, repo = api_client
    store.fail_write = True
    res = client.post("/api/boxes/BOX-002/items", json={"name": "Hammer"})
    assert res.status_code == 201
    assert "server rejected" in res.json()["warning"]
    assert [i.name for i in repo.get("BOX-002").items] == ["Phillips Screwdriver", "Hammer"]


def test_add_item_to_new_box_creates_it(api_client):
    client, store, repo = api_client
    res = client.post("/api/boxes/new-1/items", json={"name": "Lamp", "tags": ["Home", " light"]})
    assert res.status_code == 201
    item = res.json()["box"]["items"][0]
    assert item["name"] == "Lamp"
    assert item["tags"] == ["home", "light"]
    assert item["id"].startswith("ITEM-")
    assert repo.get("NEW-1") is not None
    assert store.saves == 1


def test_add_item_blank_name(api_client):
    client, store, _ = api_client
    res = client.post("/api/boxes/BOX-001/items", json={"name": "  "})
    assert res.status_code == 400
    assert store.saves == 0


def test_add_item_with_auto_tag(api_client, monkeypatch):
    client, _, _ = api_client

    async def fake_suggest(name):
        return ["lighting", "home"]

    monkeypatch.setattr(box_routes, "suggest_tags", fake_suggest)
    res = client.post("/api/boxes/BOX-001/items", json={"name": "Lamp", "auto_tag": True})
    assert res.json()["box"]["items"][-1]["tags"] == ["lighting", "home"]

    res = client.post("/api/boxes/BOX-001/items", json={"name": "Desk Lamp", "tags": ["desk"], "auto_tag": True})
    assert res.json()["box"]["items"][-1]["tags"] == ["desk"]


def test_add_item_when_suggestions_fail(api_client, monkeypatch):
    client, _, _ = api_client

    async def no_tags(name):
        return []

    monkeypatch.setattr(box_routes, "suggest_tags", no_tags)
    res = client.post("/api/boxes/BOX-001/items", json={"name": "Lamp", "auto_tag": True})
    assert res.status_code == 201
    assert res.json()["box"]["items"][-1]["tags"] == []


def test_add_item_when_suggestion_reply_is_malformed(api_client, monkeypatch):
    client, store, _ = api_client
    monkeypatch.setattr(settings, "TAG_SUGGESTION_API_KEY", "test-key")
    reply = {"candidates": [{"content": {"parts": [{"text": None}]}}]}
    transport = httpx.MockTransport(lambda request: httpx.Response(200, json=reply))

    async def suggest_from_bad_reply(name):
        return await suggest_tags(name, transport=transport)

    monkeypatch.setattr(box_routes, "suggest_tags", suggest_from_bad_reply)
    res = client.post("/api/boxes/BOX-001/items", json={"name": "Lamp", "auto_tag": True})
    assert res.status_code == 201
    assert res.json()["box"]["items"][-1]["tags"] == []
    assert store.saves == 1


def test_update_item(api_client):
    client, _, repo = api_client
    res = client.put("/api/boxes/box-001/items/I2", json={"tags": ["silk"]})
    assert res.status_code == 200
    item = repo.get("BOX-001").items[1]
    assert (item.id, item.name, item.tags) == ("I2", "Wool Scarf", ["silk"])


def test_update_unknown_item_or_box(api_client):
    client, _, _ = api_client
    assert client.put("/api/boxes/BOX-001/items/nope", json={"name": "x"}).status_code == 404
    assert client.put("/api/boxes/NOPE/items/I1", json={"name": "x"}).status_code == 404


def test_remove_item_keeps_empty_box(api_client):
    client, store, repo = api_client
    res = client.delete("/api/boxes/BOX-002/items/I3")
    assert res.status_code == 200
    assert res.json()["persisted"] is True
    assert repo.get("BOX-002").items == []
    assert ["BOX-002", "", "", ""] == [store.records[2].box_id, store.records[2].item_id,
                                       store.records[2].item_name, store.records[2].item_tags]


def test_remove_unknown_item(api_client):
    client, store, _ = api_client
    assert client.delete("/api/boxes/BOX-002/items/missing").status_code == 404
    assert client.delete("/api/boxes/MISSING/items/I3").status_code == 404
    assert store.saves == 0


def test_search(api_client):
    client, _, _ = api_client
    res = client.get("/api/search/", params={"q": "JACK"})
    assert res.status_code == 200
    body = res.json()
    assert [r["box_id"] for r in body] == ["BOX-001"]
    match = body[0]["items"][0]
    assert match["item"]["name"] == "Winter Jacket"
    assert match["name_highlights"] == [{"start": 7, "end": 11}]

    assert client.get("/api/search/", params={"q": ""}).json() == []
    assert client.get("/api/search/").json() == []


def test_scan(api_client):
    client, _, _ = api_client
    assert client.post("/api/scan/", json={"payload": " box-001 "}).json() == {"box_id": "BOX-001", "exists": True}
    assert client.post("/api/scan/", json={"payload": "Box-999"}).json() == {"box_id": "BOX-999", "exists": False}
    assert client.post("/api/scan/", json={"payload": "   "}).status_code == 400


def test_item_names(api_client):
    client, _, _ = api_client
    assert client.get("/api/items/names").json() == {
        "names": ["Winter Jacket", "Wool Scarf", "Phillips Screwdriver"]
    }


def test_tag_suggest_route(api_client, monkeypatch):
    client, _, _ = api_client
    from boxinventory.routes import tags as tag_routes

    async def fake_suggest(name):
        return ["clothing"]

    monkeypatch.setattr(tag_routes, "suggest_tags", fake_suggest)
    assert client.get("/api/tags/suggest", params={"name": "Jacket"}).json() == {
        "name": "Jacket", "tags": ["clothing"]
    }
    assert client.get("/api/tags/suggest", params={"name": " "}).status_code == 400


def test_reload_failure_returns_warning(api_client):
    client, store, _ = api_client
    store.fail_read = True
    res = client.post("/api/inventory/reload")
    assert res.status_code == 200
    assert res.json()["boxes"] == []
    assert "network down" in res.json()["warning"]
    assert client.get("/api/inventory/").json()["warning"] == res.json()["warning"]


def test_export_csv(api_client):
    client, _, _ = api_client
    res = client.get("/api/boxes/export/csv")
    assert res.status_code == 200
    lines = res.text.splitlines()
    assert lines[0] == "box_id,item_id,item_name,item_tags"
    assert lines[1] == "BOX-001,I1,Winter Jacket,\"clothing,outdoor\""
    assert lines[-1] == "SHELF-A,,,"


def test_import_csv(api_client):
    client, store, repo = api_client
    csv_text = (
        "box_id,item_id,item_name,item_tags\n"
        "box-002,N1,Hammer,tools\n"
        ",N2,Orphan,\n"
        "box-010,N3,Rope,\"outdoor,climbing\"\n"
        "box-011,,,\n"
        "box-012,N4,,tools\n"
    )
    res = client.post(
        "/api/boxes/import/csv",
        files={"file": ("boxes.csv", io.BytesIO(csv_text.encode()), "text/csv")},
    )
    assert res.status_code == 200
    body = res.json()
    assert body["imported"] == 2
    assert body["errors"] == ["Row 3: box_id is required", "Row 6: item_name is required"]
    assert [i.name for i in repo.get("BOX-002").items] == ["Hammer"]
    assert repo.get("BOX-010").items[0].tags == ["outdoor", "climbing"]
    assert repo.get("BOX-011") is None
    assert repo.get("BOX-012") is None
    assert store.saves == 1


def test_import_rejects_non_csv(api_client):
    client, _, _ = api_client
    res = client.post("/api/boxes/import/csv", files={"file": ("boxes.txt", b"x", "text/plain")})
    assert res.status_code == 400


def test_startup_creates_write_lock(store, monkeypatch):
    monkeypatch.setattr(main, "build_store", lambda _settings: store)
    main.app.state.write_lock = None
    with TestClient(main.app) as client:
        assert isinstance(main.app.state.write_lock, asyncio.Lock)
        assert [b["id"] for b in client.get("/api/boxes/").json()] == ["BOX-001", "BOX-002", "SHELF-A"]


def test_write_lock_is_made_on_first_write(api_client):
    client, _, _ = api_client
    assert main.app.state.write_lock is None
    client.post("/api/boxes/BOX-001/items", json={"name": "Lamp"})
    lock = main.app.state.write_lock
    assert isinstance(lock, asyncio.Lock)
    client.post("/api/boxes/BOX-001/items", json={"name": "Rope"})
    assert main.app.state.write_lock is lock

"""API-level tests for part CRUD and search."""

from tests.payloads import gear_payload


def create_part(client, **overrides):
    resp = client.post("/api/parts", json=gear_payload(**overrides))
    assert resp.status_code == 201, resp.text
    return resp.json()


def test_create_part_returns_wire_shape(client):
    data = create_part(client)

    assert data["name"] == "Gear"
    assert data["price"] == 12.99
    assert data["stock"] == 20
    assert data["machineId"] == "MCH-001"
    assert data["companyName"] is None
    assert data["type"] == "InHouse"
    assert data["id"]
    assert data["createdAt"] and data["updatedAt"]


def test_create_part_drops_field_of_other_type(client):
    data = create_part(client, companyName="Should Vanish")

    assert data["companyName"] is None


def test_create_part_missing_fields(client):
    resp = client.post("/api/parts", json={"price": 12.99, "stock": 20})
    assert resp.status_code == 400
    body = resp.json()

    assert body["code"] == "validation_error"
    for message in ("Part name is required", "Part min is required", "Part max is required", "Part type is required"):
        assert message in body["message"]
    assert {err["field"] for err in body["errors"]} >= {"name", "min", "max", "type"}


def test_create_part_rejects_non_object_body(client):
    resp = client.post("/api/parts", json=["not", "an", "object"])
    assert resp.status_code == 422


def test_get_part_round_trip(client):
    created = create_part(client)

    resp = client.get(f"/api/parts/id/{created['id']}")
    assert resp.status_code == 200
    assert resp.json() == created


def test_get_part_invalid_id(client):
    resp = client.get("/api/parts/id/not-an-id")
    assert resp.status_code == 400
    assert resp.json()["message"] == "Invalid ID format"


def test_get_part_not_found(client):
    resp = client.get(f"/api/parts/id/{'a' * 32}")
    assert resp.status_code == 404
    assert resp.json()["message"] == "Part not found"


def test_list_parts(client):
    create_part(client, name="Gear")
    create_part(client, name="Bolt")

    resp = client.get("/api/parts")
    assert resp.status_code == 200
    assert sorted(p["name"] for p in resp.json()) == ["Bolt", "Gear"]


def test_search_parts(client):
    create_part(client, name="Spur Gear")
    create_part(client, name="Bolt")

    resp = client.get("/api/parts/name/gEAr")
    assert resp.status_code == 200
    assert [p["name"] for p in resp.json()] == ["Spur Gear"]


def test_empty_search_lists_all_parts(client):
    create_part(client, name="Spur Gear")
    create_part(client, name="Bolt")

    everything = client.get("/api/parts").json()
    resp = client.get("/api/parts/name/")
    assert resp.status_code == 200
    assert {p["id"] for p in resp.json()} == {p["id"] for p in everything}


def test_search_without_matches(client):
    create_part(client)

    resp = client.get("/api/parts/name/widget")
    assert resp.status_code == 404
    assert resp.json()["message"] == "No parts found"


def test_update_part_switches_type(client):
    """Moving an InHouse part to Outsourced clears its machine ID."""
    part = create_part(client, name="Bolt", price=0.99, stock=100, min=10, max=500, machineId="MCH-002")

    resp = client.put(
        f"/api/parts/{part['id']}",
        json={"name": "Updated Bolt", "price": 1.25, "stock": 150, "min": 15, "max": 600, "type": "Outsourced", "companyName": "Fasteners Inc."},
    )
    assert resp.status_code == 200, resp.text
    data = resp.json()

    assert data["name"] == "Updated Bolt"
    assert data["price"] == 1.25
    assert data["stock"] == 150
    assert data["companyName"] == "Fasteners Inc."
    assert data["machineId"] is None


def test_partial_update_keeps_other_fields(client):
    part = create_part(client)

    resp = client.put(f"/api/parts/{part['id']}", json={"stock": 99})
    assert resp.status_code == 200, resp.text
    data = resp.json()

    assert data["stock"] == 99
    assert data["name"] == "Gear"
    assert data["machineId"] == "MCH-001"


def test_update_rechecks_invariants(client):
    part = create_part(client)

    resp = client.put(f"/api/parts/{part['id']}", json={"stock": 500})
    assert resp.status_code == 400
    assert resp.json()["message"] == "Stock must be between min and max values"

    unchanged = client.get(f"/api/parts/id/{part['id']}").json()
    assert unchanged["stock"] == 20


def test_update_part_not_found(client):
    resp = client.put(f"/api/parts/{'b' * 32}", json={"name": "Non-existent part"})
    assert resp.status_code == 404
    assert resp.json() == {"message": "Part not found", "code": "not_found"}


def test_delete_part(client):
    part = create_part(client)

    resp = client.delete(f"/api/parts/{part['id']}")
    assert resp.status_code == 200
    assert resp.json() == {"message": "Part removed"}
    assert client.get(f"/api/parts/id/{part['id']}").status_code == 404


def test_delete_part_not_found(client):
    resp = client.delete(f"/api/parts/{'c' * 32}")
    assert resp.status_code == 404


def test_huge_numbers_are_field_errors(client):
    resp = client.post("/api/parts", json=gear_payload(price=10 ** 400))
    assert resp.status_code == 400
    assert resp.json()["errors"] == [{"field": "price", "message": "Part price must be a number"}]

    resp = client.post("/api/parts", json=gear_payload(stock=10 ** 20, max=10 ** 21))
    assert resp.status_code == 400
    assert {err["field"] for err in resp.json()["errors"]} == {"stock", "max"}
    assert client.get("/api/parts").json() == []

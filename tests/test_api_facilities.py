from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError


NEW_FACILITY = {
    "name": "Godavari Cold Hub",
    "location": "Aurangabad, Maharashtra",
    "distance": 4.2,
    "type": ["Cold", "Frozen"],
    "pricePerKgPerDay": 1.1,
    "totalCapacity": 20000,
    "contactPhone": "+91 90000 00000",
    "operatingHours": "24 Hours",
    "minBookingDays": 2,
}


def test_read_root(client: TestClient):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json() == {"message": "Welcome to the Kisan Sangraha API"}


def test_list_facilities_nearest_first(client: TestClient, make_facility):
    make_facility(name="Far", distance=12.3)
    make_facility(name="Near", distance=3.2)
    make_facility(name="Middle", distance=5.8)

    response = client.get("/facilities/")

    assert response.status_code == 200
    assert [f["name"] for f in response.json()] == ["Near", "Middle", "Far"]


def test_list_facilities_by_owner(client: TestClient, make_facility):
    make_facility(owner_id="provider-1", name="Mine")
    make_facility(owner_id="provider-2", name="Theirs")
    make_facility(owner_id=None, name="Demo")

    response = client.get("/facilities/", params={"ownerId": "provider-1"})

    assert [f["name"] for f in response.json()] == ["Mine"]


def test_read_facility(client: TestClient, make_facility):
    facility = make_facility(total_capacity=1000, available_capacity=400)

    response = client.get(f"/facilities/{facility.id}")

    assert response.status_code == 200
    data = response.json()
    assert data["availableCapacity"] == 400
    assert data["totalCapacity"] == 1000
    assert data["ownerId"] == "provider-1"


def test_read_facility_not_found(client: TestClient):
    response = client.get("/facilities/missing")
    assert response.status_code == 404


def test_register_facility(client: TestClient, provider_headers):
    response = client.post("/facilities/", json=NEW_FACILITY, headers=provider_headers)

    assert response.status_code == 201
    data = response.json()
    assert data["ownerId"] == "provider-1"
    assert data["availableCapacity"] == data["totalCapacity"] == 20000
    assert data["type"] == ["Cold", "Frozen"]
    assert data["minBookingDays"] == 2


def test_register_facility_requires_provider(client: TestClient, farmer_headers):
    response = client.post("/facilities/", json=NEW_FACILITY, headers=farmer_headers)
    assert response.status_code == 403


def test_register_facility_rejects_non_positive_values(client: TestClient, provider_headers):
    response = client.post("/facilities/", json={**NEW_FACILITY, "pricePerKgPerDay": 0}, headers=provider_headers)
    assert response.status_code == 400

    response = client.post("/facilities/", json={**NEW_FACILITY, "totalCapacity": -5}, headers=provider_headers)
    assert response.status_code == 400


def test_update_facility_price_and_name(client: TestClient, provider_headers, make_facility):
    facility = make_facility()

    response = client.put(
        f"/facilities/{facility.id}",
        json={"pricePerKgPerDay": 1.25, "name": "Sahyadri Cold Storage II"},
        headers=provider_headers,
    )

    assert response.status_code == 200
    data = response.json()
    assert data["pricePerKgPerDay"] == 1.25
    assert data["name"] == "Sahyadri Cold Storage II"


def test_update_facility_rejects_non_positive_price(client: TestClient, provider_headers, make_facility):
    facility = make_facility(price_per_kg_per_day=2.0)

    response = client.put(f"/facilities/{facility.id}", json={"pricePerKgPerDay": 0}, headers=provider_headers)

    assert response.status_code == 400
    assert client.get(f"/facilities/{facility.id}").json()["pricePerKgPerDay"] == 2.0


def test_update_facility_availability_is_clamped(client: TestClient, provider_headers, make_facility):
    facility = make_facility(total_capacity=1000, available_capacity=500)

    response = client.put(f"/facilities/{facility.id}", json={"availableCapacity": 5000}, headers=provider_headers)

    assert response.status_code == 200
    assert response.json()["availableCapacity"] == 1000


def test_update_facility_total_then_available(client: TestClient, provider_headers, make_facility):
    facility = make_facility(total_capacity=1000, available_capacity=1000)

    response = client.put(
        f"/facilities/{facility.id}",
        json={"totalCapacity": 400, "availableCapacity": 900},
        headers=provider_headers,
    )

    data = response.json()
    assert data["totalCapacity"] == 400
    assert data["availableCapacity"] == 400


def test_update_facility_of_another_provider(client: TestClient, auth_headers, make_facility):
    facility = make_facility(owner_id="provider-1")

    response = client.put(
        f"/facilities/{facility.id}",
        json={"pricePerKgPerDay": 3.0},
        headers=auth_headers("provider-2", "provider"),
    )
    assert response.status_code == 403


def test_update_facility_requires_provider(client: TestClient, farmer_headers, make_facility):
    facility = make_facility()
    response = client.put(f"/facilities/{facility.id}", json={"pricePerKgPerDay": 3.0}, headers=farmer_headers)
    assert response.status_code == 403


def test_pricing_categories(client: TestClient):
    response = client.get("/pricing/categories")

    assert response.status_code == 200
    dairy = next(c for c in response.json() if c["name"] == "Dairy Products")
    assert dairy == {"name": "Dairy Products", "min": 1.5, "max": 2.5, "default": 2.0}


def test_pricing_check(client: TestClient):
    response = client.get("/pricing/check", params={"category": "Frozen Goods", "price": 6.0})

    assert response.status_code == 200
    data = response.json()
    assert data["inBounds"] is False
    assert (data["min"], data["max"]) == (3.0, 5.0)


def test_storage_failure_returns_503(client: TestClient, mocker):
    mocker.patch(
        "sangraha.crud.list_facilities",
        side_effect=OperationalError("SELECT facilities", {}, Exception("database is locked")),
    )

    response = client.get("/facilities/")

    assert response.status_code == 503
    assert "locked" not in response.json()["detail"]

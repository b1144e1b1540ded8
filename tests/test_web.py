import pytest
from fastapi.testclient import TestClient

from agrilink.adapters.inbound.web.fastapi_app import create_app
from agrilink.bootstrap import build_usecases
from agrilink.config import Settings
from agrilink.core.domain.service.token_codec import derive_matrix


@pytest.fixture
def client():
    usecases = build_usecases(Settings(database_url=None))
    return TestClient(create_app(usecases))


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_products_are_sorted_by_name(client):
    res = client.get("/api/products")
    assert res.status_code == 200
    names = [p["name"] for p in res.json()]
    assert names == sorted(names)
    assert len(names) == 7


def test_products_filtered_by_category(client):
    res = client.get("/api/products", params={"category": "vegetables"})
    assert {p["id"] for p in res.json()} == {"v1", "v2", "v3"}


def test_create_order(client):
    res = client.post(
        "/api/orders",
        json={"items": [{"productId": "v1", "qty": 2, "price": 25}]},
    )
    assert res.status_code == 201
    body = res.json()
    assert body["token"].startswith("AGR-")
    assert body["items"] == [{"productId": "v1", "qty": 2, "price": 25}]
    assert body["pickupPoint"] is None
    assert body["total"] == 50
    assert "createdAt" in body
    assert res.headers["Location"] == f"/api/orders/{body['token']}"


def test_created_order_can_be_fetched(client):
    created = client.post(
        "/api/orders",
        json={
            "items": [{"productId": "e1", "qty": 1, "price": 65}],
            "pickupPoint": "School gate",
        },
    ).json()

    res = client.get(f"/api/orders/{created['token']}")
    assert res.status_code == 200
    assert res.json() == created


def test_empty_items_is_a_validation_error(client):
    res = client.post("/api/orders", json={"items": []})
    assert res.status_code == 400
    body = res.json()
    assert body["type"] == "ValidationError"
    assert body["field"] == "items"


def test_non_positive_qty_is_a_validation_error(client):
    res = client.post(
        "/api/orders", json={"items": [{"productId": "v1", "qty": 0, "price": 25}]}
    )
    assert res.status_code == 400
    assert res.json()["field"] == "items[0].qty"


def test_negative_price_is_a_validation_error(client):
    res = client.post(
        "/api/orders", json={"items": [{"productId": "v1", "qty": 1, "price": -5}]}
    )
    assert res.status_code == 400
    assert res.json()["field"] == "items[0].price"


@pytest.mark.parametrize(
    "item",
    [
        {"qty": 1, "price": 25},
        {"productId": "v1", "qty": "2", "price": 25},
        {"productId": "v1", "qty": 1.5, "price": 25},
        {"productId": 7, "qty": 1, "price": 25},
    ],
)
def test_wrong_shape_is_rejected(client, item):
    res = client.post("/api/orders", json={"items": [item]})
    assert res.status_code == 400
    body = res.json()
    assert body["type"] == "RequestValidationError"
    assert body["details"]


def test_unknown_order_is_404(client):
    res = client.get("/api/orders/AGR-NOPE00")
    assert res.status_code == 404
    assert res.json()["type"] == "OrderNotFound"


def test_order_code_matches_matrix_encoder(client):
    token = client.post(
        "/api/orders", json={"items": [{"productId": "v1", "qty": 1, "price": 25}]}
    ).json()["token"]

    res = client.get(f"/api/orders/{token}/code")
    assert res.status_code == 200
    body = res.json()
    assert body["payload"] == token
    assert body["size"] == 5
    assert body["cells"] == [list(r) for r in derive_matrix(token, 5)]

    res = client.get(f"/api/orders/{token}/code", params={"size": 7})
    assert len(res.json()["cells"]) == 7


def test_metrics_summary(client):
    res = client.get("/api/metrics")
    assert res.status_code == 200
    body = res.json()
    assert [s["period"] for s in body["samples"]] == ["W1", "W2", "W3", "W4"]
    assert body["totals"]["vegetables"] == 42 + 38 + 54 + 49
    assert body["contributionShare"] == 10576
    assert body["periods"] == 4


def test_metrics_series_selection(client):
    res = client.get("/api/metrics", params={"limit": 2, "series": ["eggs", "fish"]})
    body = res.json()
    assert body["totals"] == {"eggs": 42, "fish": 0}
    assert body["contributionShare"] == round((2670 + 2390 + 1100 + 1150) * 0.8)


def test_metrics_bad_limit(client):
    res = client.get("/api/metrics", params={"limit": 0})
    assert res.status_code == 400
    assert res.json()["field"] == "limit"

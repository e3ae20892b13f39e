import json


def load(path):
    return json.loads(path.read_text(encoding="utf-8"))


def test_list_returns_paginated_items(client):
    response = client.get("/items?page=1&limit=2")
    assert response.status_code == 200
    body = response.json()
    assert body["page"] == 1
    assert body["limit"] == 2
    assert body["totalPages"] == 2
    assert body["totalResults"] == 3
    assert len(body["data"]) == 2


def test_list_filters_by_search_query(client):
    body = client.get("/items?q=item").json()
    assert body["totalResults"] == 3

    body = client.get("/items?q=ANOTHER").json()
    assert [item["name"] for item in body["data"]] == ["Another Item"]


def test_list_defaults_to_name_ascending(client):
    body = client.get("/items").json()
    assert body["page"] == 1
    assert body["limit"] == 10
    assert [item["name"] for item in body["data"]] == ["Another Item", "Item 1", "Item 2"]


def test_list_sorts_by_price_descending(client):
    body = client.get("/items?sortKey=price&sortOrder=desc").json()
    assert [item["price"] for item in body["data"]] == [30, 20, 10]


def test_list_coerces_malformed_numbers(client):
    body = client.get("/items?page=abc&limit=-5").json()
    assert body["page"] == 1
    assert body["limit"] == 10
    assert body["totalResults"] == 3


def test_list_out_of_range_page_is_empty(client):
    body = client.get("/items?page=9&limit=2").json()
    assert body["page"] == 9
    assert body["data"] == []
    assert body["totalPages"] == 2
    assert body["totalResults"] == 3


def test_list_unknown_term_yields_nothing(client):
    body = client.get("/items?q=zzz").json()
    assert body["totalResults"] == 0
    assert body["totalPages"] == 0
    assert body["data"] == []


def test_get_single_item(client):
    response = client.get("/items/1")
    assert response.status_code == 200
    assert response.json() == {"id": 1, "name": "Item 1", "price": 10}


def test_get_missing_item_returns_404(client):
    response = client.get("/items/999")
    assert response.status_code == 404
    assert response.json()["detail"] == "Item not found"


def test_create_item(client, data_path):
    response = client.post("/items", json={"name": "New Item", "price": 40})
    assert response.status_code == 201
    body = response.json()
    assert body["name"] == "New Item"
    assert body["price"] == 40

    stored = load(data_path)
    assert len(stored) == 4
    assert body["id"] not in {1, 2, 3}
    assert stored[-1]["id"] == body["id"]


def test_create_item_keeps_category(client):
    body = client.post("/items", json={"name": "Lamp", "price": 12.5, "category": "Home"}).json()
    assert body["category"] == "Home"
    assert client.get(f"/items/{body['id']}").json()["category"] == "Home"


def test_create_without_name_returns_400(client, data_path):
    response = client.post("/items", json={"price": 40})
    assert response.status_code == 400
    assert response.json()["detail"] == "Name and price are required."
    assert len(load(data_path)) == 3


def test_create_without_price_returns_400(client, data_path):
    response = client.post("/items", json={"name": "New Item"})
    assert response.status_code == 400
    assert len(load(data_path)) == 3


def test_unreadable_store_returns_500(client, data_path):
    data_path.write_text("{not json", encoding="utf-8")
    response = client.get("/items")
    assert response.status_code == 500
    assert response.json()["detail"] == "Internal server error"


def test_missing_store_returns_500(client, data_path):
    data_path.unlink()
    assert client.get("/items/1").status_code == 500


def test_create_without_body_returns_400(client, data_path):
    assert client.post("/items").status_code == 400
    response = client.post("/items", content="null", headers={"Content-Type": "application/json"})
    assert response.status_code == 400
    assert len(load(data_path)) == 3


def test_non_numeric_id_returns_404(client):
    response = client.get("/items/abc")
    assert response.status_code == 404
    assert response.json()["detail"] == "Item not found"


def test_search_term_is_matched_as_given(client):
    body = client.get("/items", params={"q": "Item "}).json()
    assert [item["name"] for item in body["data"]] == ["Item 1", "Item 2"]

    body = client.get("/items", params={"q": " "}).json()
    assert body["totalResults"] == 3

    body = client.get("/items", params={"q": "1 "}).json()
    assert body["totalResults"] == 0

import pytest


def create_list(client, headers, name="Groceries"):
    response = client.post("/api/grocery-lists", json={"name": name}, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]


def add_item(client, headers, list_id, name):
    return client.post(f"/api/grocery-lists/{list_id}/items", json={"name": name}, headers=headers)


@pytest.mark.integration
class TestGroceryListEndpoints:

    def test_create_and_fetch_lists(self, client, auth_headers):
        created = create_list(client, auth_headers, "Weekly")

        assert created["name"] == "Weekly"
        assert created["is_shared"] is False
        assert created["items"] == []

        lists = client.get("/api/grocery-lists", headers=auth_headers).json()["data"]
        assert [gl["id"] for gl in lists] == [created["id"]]

        one = client.get(f"/api/grocery-lists/{created['id']}", headers=auth_headers)
        assert one.status_code == 200
        assert one.json()["data"]["name"] == "Weekly"

    def test_rename_list(self, client, auth_headers):
        created = create_list(client, auth_headers)

        response = client.put(
            f"/api/grocery-lists/{created['id']}", json={"name": "Renamed"}, headers=auth_headers
        )

        assert response.status_code == 200
        assert response.json()["data"]["name"] == "Renamed"

    def test_rename_to_blank_is_400(self, client, auth_headers):
        created = create_list(client, auth_headers)

        response = client.put(
            f"/api/grocery-lists/{created['id']}", json={"name": "  "}, headers=auth_headers
        )

        assert response.status_code == 400

    def test_delete_list(self, client, auth_headers):
        created = create_list(client, auth_headers)
        add_item(client, auth_headers, created["id"], "Milk")

        response = client.delete(f"/api/grocery-lists/{created['id']}", headers=auth_headers)

        assert response.status_code == 200
        assert client.get(f"/api/grocery-lists/{created['id']}", headers=auth_headers).status_code == 404

    def test_items_roundtrip(self, client, auth_headers):
        created = create_list(client, auth_headers)

        response = add_item(client, auth_headers, created["id"], "Milk")
        assert response.status_code == 201
        item = response.json()["data"]
        assert item["name"] == "Milk"
        assert item["completed"] is False
        assert item["tags"] == []

        update = client.put(
            f"/api/grocery-lists/{created['id']}/items/{item['id']}",
            json={"completed": True, "tags": [{"text": "Dairy", "color": "blue"}]},
            headers=auth_headers,
        )
        assert update.status_code == 200
        assert update.json()["data"]["completed"] is True
        assert update.json()["data"]["tags"] == [{"text": "Dairy", "color": "blue"}]

        items = client.get(f"/api/grocery-lists/{created['id']}/items", headers=auth_headers)
        assert [i["name"] for i in items.json()["data"]] == ["Milk"]

        delete = client.delete(
            f"/api/grocery-lists/{created['id']}/items/{item['id']}", headers=auth_headers
        )
        assert delete.status_code == 200
        items = client.get(f"/api/grocery-lists/{created['id']}/items", headers=auth_headers)
        assert items.json()["data"] == []

    def test_duplicate_item_is_409(self, client, auth_headers):
        created = create_list(client, auth_headers)
        add_item(client, auth_headers, created["id"], "Milk")

        response = add_item(client, auth_headers, created["id"], "mILK")

        assert response.status_code == 409
        assert response.json()["error"] == "Duplicate item"

    def test_unknown_item_is_404(self, client, auth_headers):
        created = create_list(client, auth_headers)

        response = client.put(
            f"/api/grocery-lists/{created['id']}/items/999",
            json={"completed": True},
            headers=auth_headers,
        )

        assert response.status_code == 404

    def test_stranger_is_forbidden(self, client, auth_headers, other_headers):
        created = create_list(client, auth_headers)

        assert client.get(f"/api/grocery-lists/{created['id']}", headers=other_headers).status_code == 403
        assert client.get(f"/api/grocery-lists/{created['id']}/items", headers=other_headers).status_code == 403
        assert add_item(client, other_headers, created["id"], "Eggs").status_code == 403
        assert client.delete(f"/api/grocery-lists/{created['id']}", headers=other_headers).status_code == 403

    def test_other_users_lists_are_not_listed(self, client, auth_headers, other_headers):
        create_list(client, auth_headers, "Mine")

        assert client.get("/api/grocery-lists", headers=other_headers).json()["data"] == []

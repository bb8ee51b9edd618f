"""HTTP routes: identity headers, error mapping and response shapes."""

import pytest
from httpx import AsyncClient

MARGARITA = {
    "name": "Margarita",
    "category": "Classici",
    "ingredients": [
        {"name": "Tequila", "quantity": "50 ml"},
        {"name": "Lime", "quantity": "25 ml"},
    ],
}


async def create_cocktail(client: AsyncClient, headers: dict, payload: dict = MARGARITA) -> dict:
    response = await client.post("/api/cocktails", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


@pytest.mark.asyncio
async def test_create_and_fetch_cocktail(api_client, user_headers) -> None:
    created = await create_cocktail(api_client, user_headers)

    response = await api_client.get(f"/api/cocktails/{created['id']}")

    assert response.status_code == 200
    body = response.json()
    assert body["name"] == "Margarita"
    assert body["glass_type"] == "Bicchiere standard"
    assert [i["ingredient_name"] for i in body["ingredients"]] == ["Tequila", "Lime"]
    assert [i["quantity"] for i in body["ingredients"]] == ["50 ml", "25 ml"]


@pytest.mark.asyncio
async def test_writes_require_identity(api_client) -> None:
    response = await api_client.post("/api/cocktails", json=MARGARITA)

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_writes_require_a_known_role(api_client) -> None:
    response = await api_client.post(
        "/api/cocktails", json=MARGARITA, headers={"X-User-Id": "eve", "X-User-Roles": "GUEST"}
    )

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_admin_routes_reject_plain_users(api_client, user_headers, admin_headers) -> None:
    created = await create_cocktail(api_client, user_headers)

    assert (await api_client.delete(f"/api/admin/cocktails/{created['id']}", headers=user_headers)).status_code == 403
    assert (await api_client.get("/api/admin/cocktails/gaps", headers=user_headers)).status_code == 403

    response = await api_client.delete(f"/api/admin/cocktails/{created['id']}", headers=admin_headers)
    assert response.status_code == 204
    assert (await api_client.get(f"/api/cocktails/{created['id']}")).status_code == 404


@pytest.mark.asyncio
async def test_domain_errors_map_to_status_codes(api_client, user_headers) -> None:
    await create_cocktail(api_client, user_headers)

    missing = await api_client.get("/api/cocktails/999")
    duplicate = await api_client.post("/api/cocktails", json=MARGARITA, headers=user_headers)
    empty = await api_client.post(
        "/api/cocktails", json={"name": "Nothing", "ingredients": []}, headers=user_headers
    )

    assert missing.status_code == 404
    assert "999" in missing.json()["detail"]
    assert duplicate.status_code == 409
    assert empty.status_code == 400


@pytest.mark.asyncio
async def test_public_page_envelope(api_client, user_headers) -> None:
    await create_cocktail(api_client, user_headers)
    await create_cocktail(
        api_client, user_headers, {"name": "Daiquiri", "ingredients": [{"name": "lime", "quantity": "30 ml"}]}
    )

    response = await api_client.get("/api/public/cocktails", params={"size": 1})

    assert response.status_code == 200
    page = response.json()
    assert [c["name"] for c in page["items"]] == ["Daiquiri"]
    assert page["total_elements"] == 2
    assert page["total_pages"] == 2
    assert page["first"] is True
    assert page["last"] is False


@pytest.mark.asyncio
async def test_bad_paging_parameters(api_client) -> None:
    assert (await api_client.get("/api/public/cocktails", params={"size": 1000})).status_code == 400
    assert (await api_client.get("/api/public/cocktails", params={"page": -1})).status_code == 400
    assert (await api_client.get("/api/public/cocktails", params={"sort_by": "nope"})).status_code == 400


@pytest.mark.asyncio
async def test_gap_report_uses_camel_case(api_client, user_headers, admin_headers) -> None:
    first = await create_cocktail(api_client, user_headers)
    await create_cocktail(
        api_client, user_headers, {"name": "Paloma", "ingredients": [{"name": "Tequila", "quantity": "50 ml"}]}
    )
    await api_client.delete(f"/api/admin/cocktails/{first['id']}", headers=admin_headers)

    response = await api_client.get("/api/admin/cocktails/gaps", headers=admin_headers)

    assert response.status_code == 200
    assert response.json() == {
        "existingIds": [2],
        "missingIds": [1],
        "totalCocktails": 1,
        "maxId": 2,
        "nextAvailableId": 3,
    }


@pytest.mark.asyncio
async def test_composition_routes(api_client, user_headers) -> None:
    created = await create_cocktail(api_client, user_headers)
    cocktail_id = created["id"]

    added = await api_client.post(
        f"/api/cocktails/{cocktail_id}/ingredients",
        json={"ingredients": [{"name": "Triple Sec", "quantity": "20 ml"}]},
        headers=user_headers,
    )
    assert added.status_code == 200
    lines = {i["ingredient_name"]: i for i in added.json()["ingredients"]}
    assert set(lines) == {"Tequila", "Lime", "Triple Sec"}

    patched = await api_client.patch(
        f"/api/cocktails/{cocktail_id}/ingredients/{lines['Lime']['ingredient_id']}",
        json={"quantity": "30 ml"},
        headers=user_headers,
    )
    assert patched.status_code == 200
    assert {i["ingredient_name"]: i["quantity"] for i in patched.json()["ingredients"]}["Lime"] == "30 ml"

    removed = await api_client.delete(f"/api/cocktails/{cocktail_id}/ingredients/Triple Sec", headers=user_headers)
    assert removed.status_code == 200
    assert len(removed.json()["ingredients"]) == 2

    missing = await api_client.delete(f"/api/cocktails/{cocktail_id}/ingredients/lime", headers=user_headers)
    assert missing.status_code == 404

    by_id = await api_client.delete(
        f"/api/cocktails/{cocktail_id}/ingredients/by-id/{lines['Lime']['ingredient_id']}", headers=user_headers
    )
    assert by_id.status_code == 200
    assert [i["ingredient_name"] for i in by_id.json()["ingredients"]] == ["Tequila"]


@pytest.mark.asyncio
async def test_ingredient_routes(api_client, user_headers, admin_headers) -> None:
    created = await api_client.post("/api/ingredients", json={"name": "Gin", "unit": "ml"}, headers=user_headers)
    assert created.status_code == 201
    gin_id = created.json()["id"]

    found = await api_client.post("/api/ingredients/find-or-create", json={"name": "GIN"}, headers=user_headers)
    assert found.json()["id"] == gin_id

    duplicate = await api_client.post("/api/ingredients", json={"name": "gin"}, headers=user_headers)
    assert duplicate.status_code == 409

    page = (await api_client.get("/api/ingredients")).json()
    assert page["total_elements"] == 1

    assert (await api_client.delete(f"/api/ingredients/{gin_id}", headers=user_headers)).status_code == 403
    assert (await api_client.delete(f"/api/ingredients/{gin_id}", headers=admin_headers)).status_code == 204
    assert (await api_client.get(f"/api/ingredients/{gin_id}")).status_code == 404


@pytest.mark.asyncio
async def test_ingredient_delete_rejected_while_used(api_client, user_headers, admin_headers) -> None:
    created = await create_cocktail(api_client, user_headers)
    lime_id = created["ingredients"][1]["ingredient_id"]

    response = await api_client.delete(f"/api/ingredients/{lime_id}", headers=admin_headers)

    assert response.status_code == 409


@pytest.mark.asyncio
async def test_favorites_are_scoped_to_the_caller(api_client, user_headers, other_user_headers) -> None:
    created = await create_cocktail(api_client, user_headers)
    cocktail_id = created["id"]

    added = await api_client.post(f"/api/favorites/{cocktail_id}", headers=user_headers)
    again = await api_client.post(f"/api/favorites/{cocktail_id}", headers=user_headers)

    assert added.status_code == 201
    assert added.json()["user_id"] == "alice"
    assert again.status_code == 409
    assert (await api_client.get("/api/favorites/count", headers=user_headers)).json() == {"count": 1}
    assert (await api_client.get("/api/favorites/count", headers=other_user_headers)).json() == {"count": 0}

    toggled = await api_client.put(f"/api/favorites/toggle/{cocktail_id}", headers=other_user_headers)
    assert toggled.json() == {"cocktail_id": cocktail_id, "added": True}

    check = await api_client.get(f"/api/favorites/check/{cocktail_id}", headers=other_user_headers)
    assert check.json()["is_favorite"] is True

    popular = await api_client.get("/api/favorites/most-favorited", headers=user_headers)
    assert popular.json() == [{"cocktail_id": cocktail_id, "cocktail_name": "Margarita", "count": 2}]

    cleared = await api_client.delete("/api/favorites", headers=user_headers)
    assert cleared.json() == {"count": 1}
    assert (await api_client.get("/api/favorites", headers=user_headers)).json() == []


@pytest.mark.asyncio
async def test_favorite_color_flow(api_client, user_headers, admin_headers) -> None:
    created = await create_cocktail(api_client, user_headers)
    cocktail_id = created["id"]
    await api_client.post(f"/api/favorites/{cocktail_id}", headers=user_headers)

    forbidden = await api_client.post("/api/admin/colors", json={"name": "Oro", "hex_code": "#FFD700"}, headers=user_headers)
    assert forbidden.status_code == 403
    bad_hex = await api_client.post("/api/admin/colors", json={"name": "Oro", "hex_code": "gold"}, headers=admin_headers)
    assert bad_hex.status_code == 400
    color = await api_client.post("/api/admin/colors", json={"name": "Oro", "hex_code": "#ffd700"}, headers=admin_headers)
    assert color.status_code == 201
    assert color.json()["hex_code"] == "#FFD700"

    both = await api_client.patch(
        f"/api/favorites/{cocktail_id}/color", json={"color_id": 1, "color_name": "Oro"}, headers=user_headers
    )
    assert both.status_code == 400
    tagged = await api_client.patch(f"/api/favorites/{cocktail_id}/color", json={"color_name": "Oro"}, headers=user_headers)
    assert tagged.status_code == 200
    assert tagged.json()["color"]["name"] == "Oro"

    listing = await api_client.get("/api/cocktails/with-favorites", headers=user_headers)
    item = listing.json()["items"][0]
    assert item["is_favorite"] is True
    assert item["favorite_color"]["hex_code"] == "#FFD700"

    deleted = await api_client.delete(f"/api/admin/colors/{color.json()['id']}", headers=admin_headers)
    assert deleted.status_code == 204
    favorites = (await api_client.get("/api/favorites", headers=user_headers)).json()
    assert favorites[0]["color"] is None
    assert (await api_client.get("/api/public/colors")).json() == []


@pytest.mark.asyncio
async def test_stats_route(api_client, user_headers, admin_headers) -> None:
    await create_cocktail(api_client, user_headers)

    response = await api_client.get("/api/admin/stats", headers=admin_headers)

    assert response.status_code == 200
    stats = response.json()
    assert stats["total_cocktails"] == 1
    assert stats["top_categories"] == {"Classici": 1}
    assert stats["last_created"]["name"] == "Margarita"


@pytest.mark.asyncio
async def test_favorite_color_accepts_camel_case_selectors(api_client, user_headers, admin_headers) -> None:
    created = await create_cocktail(api_client, user_headers)
    cocktail_id = created["id"]
    await api_client.post(f"/api/favorites/{cocktail_id}", headers=user_headers)
    blue = (await api_client.post("/api/admin/colors", json={"name": "Blu", "hex_code": "#0000FF"}, headers=admin_headers)).json()
    await api_client.post("/api/admin/colors", json={"name": "Rosso", "hex_code": "#FF0000"}, headers=admin_headers)

    by_id = await api_client.patch(f"/api/favorites/{cocktail_id}/color", json={"colorId": blue["id"]}, headers=user_headers)
    assert by_id.status_code == 200
    assert by_id.json()["color"]["name"] == "Blu"

    by_name = await api_client.patch(f"/api/favorites/{cocktail_id}/color", json={"colorName": "Rosso"}, headers=user_headers)
    assert by_name.status_code == 200
    favorites = (await api_client.get("/api/favorites", headers=user_headers)).json()
    assert favorites[0]["color"]["name"] == "Rosso"


@pytest.mark.asyncio
async def test_missing_required_fields_are_bad_requests(api_client, user_headers, admin_headers) -> None:
    assert (await api_client.post("/api/ingredients", json={"unit": "ml"}, headers=user_headers)).status_code == 400
    assert (await api_client.post("/api/ingredients/find-or-create", json={}, headers=user_headers)).status_code == 400
    assert (await api_client.post("/api/admin/colors", json={"name": "Oro"}, headers=admin_headers)).status_code == 400
    assert (await api_client.post("/api/admin/colors", json={"hex_code": "#FFD700"}, headers=admin_headers)).status_code == 400

    created = (await api_client.post("/api/ingredients", json={"name": "Gin"}, headers=user_headers)).json()
    response = await api_client.put(f"/api/ingredients/{created['id']}", json={"unit": "ml"}, headers=user_headers)
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_most_favorited_route_is_not_capped(api_client, user_headers) -> None:
    for n in range(12):
        created = await create_cocktail(
            api_client, user_headers, {"name": f"Cocktail {n:02d}", "ingredients": [{"name": "Gin", "quantity": "1"}]}
        )
        await api_client.post(f"/api/favorites/{created['id']}", headers=user_headers)

    everything = await api_client.get("/api/favorites/most-favorited", headers=user_headers)
    top = await api_client.get("/api/favorites/most-favorited", params={"limit": 5}, headers=user_headers)

    assert len(everything.json()) == 12
    assert len(top.json()) == 5

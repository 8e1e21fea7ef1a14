import pytest


def _products_section(content_source):
    return {
        "type": "ProductsSection",
        "props": {"heading": "Menu at [[location.name]]", "products": [], "contentSource": content_source},
    }


@pytest.fixture()
def site(api_client, editor_headers):
    api_client.post("/locations/seed", headers=editor_headers)
    downtown = api_client.get(
        "/locations/by-slugs", params={"region": "ca", "city": "san-francisco", "line1": "123-market-st"}
    ).json()
    mission = api_client.get(
        "/locations/by-slugs", params={"region": "ca", "city": "san-francisco", "line1": "482-valencia-st"}
    ).json()

    def product(name, price):
        return api_client.post("/products", json={"name": name, "price": price}, headers=editor_headers).json()

    burger, fries = product("Burger", 12), product("Fries", 4.5)
    promo = api_client.post(
        "/promotions", json={"name": "Happy hour", "description": "Half price"}, headers=editor_headers
    ).json()
    return {"downtown": downtown, "mission": mission, "burger": burger, "fries": fries, "promo": promo}


def _publish_location_group(api_client, editor_headers, content, zones=None):
    response = api_client.post(
        "/page-groups/location/publish",
        json={
            "data": {
                "root": {"props": {"title": "[[location.name]] | Galaxy Grill"}},
                "content": content,
                "zones": zones or {},
            }
        },
        headers=editor_headers,
    )
    assert response.status_code == 200, response.text


def test_location_page_resolves_per_location_links(api_client, editor_headers, site):
    api_client.post(
        "/relationships/location-products/sync",
        json={
            "overrides": [
                {"locationIds": [site["downtown"]["id"]], "itemIds": [site["fries"]["id"], site["burger"]["id"]]},
                {"locationIds": [site["mission"]["id"]], "itemIds": [site["burger"]["id"]]},
            ]
        },
        headers=editor_headers,
    )
    _publish_location_group(
        api_client,
        editor_headers,
        [_products_section({"source": "dynamic", "dynamicMode": "perLocation"})],
    )

    downtown = api_client.get("/public/locations/CA/San Francisco/123 Market St")
    mission = api_client.get("/public/locations/ca/san-francisco/482-valencia-st")

    assert downtown.status_code == 200, downtown.text
    body = downtown.json()
    props = body["data"]["content"][0]["props"]
    assert [item["title"] for item in props["products"]] == ["Fries", "Burger"]
    assert props["products"][1]["price"] == "$12"
    assert props["heading"] == "Menu at Galaxy Grill Downtown"
    assert body["title"] == "Galaxy Grill Downtown | Galaxy Grill"
    assert body["metadata"]["location"]["id"] == site["downtown"]["id"]

    assert [item["title"] for item in mission.json()["data"]["content"][0]["props"]["products"]] == ["Burger"]


def test_location_page_with_synced_promo_in_zone(api_client, editor_headers, site):
    promo_section = {
        "type": "PromoSection",
        "props": {
            "title": "Authored",
            "buttonText": "Claim",
            "contentSource": {"source": "dynamic", "selectedId": site["promo"]["id"]},
        },
    }
    _publish_location_group(api_client, editor_headers, [], zones={"Columns-1:left": [promo_section]})

    body = api_client.get("/public/locations/ca/san-francisco/123-market-st").json()

    props = body["data"]["zones"]["Columns-1:left"][0]["props"]
    assert props["title"] == "Happy hour"
    assert props["description"] == "Half price"
    assert props["buttonText"] == "Claim"


def test_unlinked_location_keeps_authored_content(api_client, editor_headers, site):
    section = _products_section({"source": "dynamic", "dynamicMode": "perLocation"})
    section["props"]["products"] = [{"title": "Chef's pick"}]
    _publish_location_group(api_client, editor_headers, [section])

    body = api_client.get("/public/locations/ca/oakland/780-broadway").json()

    assert body["data"]["content"][0]["props"]["products"] == [{"title": "Chef's pick"}]


def test_location_page_not_found_or_unpublished(api_client, editor_headers, site):
    assert api_client.get("/public/locations/ca/oakland/1-nowhere").status_code == 404
    # Seeded but nothing published for the group yet.
    assert api_client.get("/public/locations/ca/oakland/780-broadway").status_code == 404


def test_location_page_uses_injected_store(api_client, editor_headers, site, override_content_store):
    override_content_store.product_links = {site["downtown"]["id"]: []}
    _publish_location_group(
        api_client,
        editor_headers,
        [_products_section({"source": "dynamic", "dynamicMode": "perLocation"})],
    )

    api_client.get("/public/locations/ca/san-francisco/123-market-st")

    assert override_content_store.calls == [("products_for_location", site["downtown"]["id"])]


def test_city_page(api_client, editor_headers, site):
    api_client.post(
        "/page-groups/city/publish",
        json={"data": {"root": {"props": {"title": "Galaxy Grill in [[city.name]]"}}, "content": [], "zones": {}}},
        headers=editor_headers,
    )

    response = api_client.get("/public/cities/ca/san-francisco")

    assert response.status_code == 200
    body = response.json()
    assert body["title"] == "Galaxy Grill in San Francisco"
    assert body["metadata"]["city"]["path"] == "/ca/san-francisco"
    assert [location["name"] for location in body["metadata"]["locations"]] == [
        "Galaxy Grill Downtown",
        "Galaxy Grill Mission",
    ]
    assert api_client.get("/public/cities/ca/atlantis").status_code == 404


def test_public_page_serves_published_data_only(api_client, editor_headers):
    api_client.put(
        "/pages/draft",
        json={"path": "/about", "data": {"root": {"props": {"title": "Draft"}}, "content": []}},
        headers=editor_headers,
    )
    assert api_client.get("/public/pages", params={"path": "/about"}).status_code == 404

    api_client.post(
        "/pages/publish",
        json={"path": "/about", "data": {"root": {"props": {"title": "About"}}, "content": []}},
        headers=editor_headers,
    )
    response = api_client.get("/public/pages", params={"path": "/about"})

    assert response.status_code == 200
    assert response.json()["data"]["root"]["props"]["title"] == "About"

import asyncio
import copy
import logging

import pytest

from sitegen.services.overrides import (
    RESOLVERS,
    format_price,
    order_records_by_ids,
    parse_content_source,
    resolve_per_location_data,
)

LOCATION_ID = "11111111-1111-4111-8111-111111111111"
OTHER_LOCATION_ID = "22222222-2222-4222-8222-222222222222"
P1 = "aaaaaaaa-0000-4000-8000-000000000001"
P2 = "aaaaaaaa-0000-4000-8000-000000000002"
P3 = "aaaaaaaa-0000-4000-8000-000000000003"
PROMO_1 = "bbbbbbbb-0000-4000-8000-000000000001"
PROMO_2 = "bbbbbbbb-0000-4000-8000-000000000002"
ARTICLE_1 = "cccccccc-0000-4000-8000-000000000001"


def _run(document, store, location_id=LOCATION_ID, **kwargs):
    return asyncio.run(resolve_per_location_data(document, location_id, store=store, **kwargs))


def _products_node(content_source, products=None):
    return {
        "type": "ProductsSection",
        "props": {
            "id": "products-1",
            "heading": "Our menu",
            "products": products if products is not None else [{"title": "Authored"}],
            "contentSource": content_source,
        },
    }


def _promo_node(content_source):
    return {
        "type": "PromoSection",
        "props": {
            "id": "promo-1",
            "title": "Authored promo",
            "description": "Authored description",
            "imageUrl": "/authored.png",
            "buttonText": "Order now",
            "buttonLink": "/order",
            "contentSource": content_source,
        },
    }


def _document(*nodes, zones=None):
    return {"root": {"props": {"title": "Home"}}, "content": list(nodes), "zones": zones or {}}


@pytest.fixture()
def catalog(fake_store):
    fake_store.products = {
        P1: {"id": P1, "name": "Burger", "category": "Mains", "price": 12.0, "description": "Beef", "image": "/b.png"},
        P2: {"id": P2, "name": "Fries", "category": "Sides", "price": 4.5, "description": None, "image": None},
        P3: {"id": P3, "name": "Shake", "category": "Drinks", "price": None, "description": "Vanilla", "image": None},
    }
    fake_store.promotions = {
        PROMO_1: {"id": PROMO_1, "name": "Happy hour", "description": "Half price", "image": "/hh.png"},
        PROMO_2: {"id": PROMO_2, "name": "Kids eat free", "description": "Sundays", "image": "/kids.png"},
    }
    fake_store.articles = {
        ARTICLE_1: {
            "id": ARTICLE_1,
            "title": "New patio",
            "category": "News",
            "datePosted": "2024-05-02T10:00:00+00:00",
            "contentSummary": "We built a patio.",
            "image": "/patio.png",
        }
    }
    return fake_store


def test_static_nodes_are_returned_unchanged(catalog):
    document = _document(_products_node({"source": "static"}), {"type": "Hero", "props": {"title": "Hi"}})

    resolved = _run(document, catalog)

    assert resolved == document
    assert catalog.calls == []


def test_input_document_is_never_mutated(catalog):
    document = _document(_products_node({"source": "dynamic", "dynamicMode": "all", "selectedIds": [P2, P1]}))
    snapshot = copy.deepcopy(document)

    resolved = _run(document, catalog)

    assert document == snapshot
    assert resolved is not document
    assert resolved["content"][0]["props"]["products"] != snapshot["content"][0]["props"]["products"]


def test_synced_products_follow_selected_id_order(catalog):
    document = _document(_products_node({"source": "dynamic", "dynamicMode": "all", "selectedIds": [P2, P1]}))

    props = _run(document, catalog)["content"][0]["props"]

    assert [item["title"] for item in props["products"]] == ["Fries", "Burger"]
    assert props["products"][1] == {
        "title": "Burger",
        "category": "Mains",
        "description": "Beef",
        "imageUrl": "/b.png",
        "link": "#",
        "price": "$12",
    }
    assert props["products"][0]["price"] == "$4.5"
    assert props["heading"] == "Our menu"
    assert props["contentSource"]["selectedIds"] == [P2, P1]


def test_synced_selection_is_the_same_for_every_location(catalog):
    document = _document(_products_node({"source": "dynamic", "selectedIds": [P3]}))

    first = _run(document, catalog, location_id=LOCATION_ID)
    second = _run(document, catalog, location_id=OTHER_LOCATION_ID)

    assert first == second
    assert "price" not in first["content"][0]["props"]["products"][0]


def test_per_location_products_come_from_links_not_descriptor(catalog):
    catalog.product_links = {LOCATION_ID: [P3, P1]}
    document = _document(
        _products_node(
            {
                "source": "dynamic",
                "dynamicMode": "perLocation",
                "selectedIds": [P2],
                "perLocationSelectedIds": {LOCATION_ID: [P2]},
            }
        )
    )

    props = _run(document, catalog)["content"][0]["props"]

    assert [item["title"] for item in props["products"]] == ["Shake", "Burger"]
    assert ("products_by_ids", [P2]) not in catalog.calls


def test_per_location_without_links_keeps_authored_props(catalog):
    catalog.product_links = {OTHER_LOCATION_ID: [P1]}
    document = _document(_products_node({"source": "dynamic", "dynamicMode": "perLocation"}))

    resolved = _run(document, catalog)

    assert resolved["content"][0] == document["content"][0]


def test_malformed_ids_never_reach_storage(catalog):
    document = _document(
        _products_node({"source": "dynamic", "selectedIds": ["not-a-uuid", 42, None, "'; drop table"]})
    )

    resolved = _run(document, catalog)

    assert resolved == document
    assert catalog.calls == []


def test_malformed_ids_are_dropped_from_mixed_selection(catalog):
    document = _document(_products_node({"source": "dynamic", "selectedIds": ["bogus", P1]}))

    props = _run(document, catalog)["content"][0]["props"]

    assert catalog.calls == [("products_by_ids", [P1])]
    assert [item["title"] for item in props["products"]] == ["Burger"]


def test_synced_selection_with_no_matches_keeps_authored_props(catalog):
    missing = "dddddddd-0000-4000-8000-000000000009"
    document = _document(_products_node({"source": "dynamic", "selectedIds": [missing]}))

    assert _run(document, catalog) == document


@pytest.mark.parametrize(
    "content_source",
    [
        "dynamic",
        ["dynamic"],
        {"source": "sometimes"},
        {"source": "dynamic", "dynamicMode": 5},
    ],
)
def test_malformed_descriptors_are_treated_as_static(catalog, content_source):
    document = _document(_products_node(content_source))

    assert _run(document, catalog) == document
    assert catalog.calls == []


def test_unknown_dynamic_mode_falls_back_to_synced():
    source = parse_content_source({"contentSource": {"source": "dynamic", "dynamicMode": "weekly"}})

    assert source is not None
    assert source.mode.value == "synced"


def test_promo_synced_overwrites_only_content_fields(catalog):
    document = _document(_promo_node({"source": "dynamic", "selectedId": PROMO_2}))

    props = _run(document, catalog)["content"][0]["props"]

    assert props["title"] == "Kids eat free"
    assert props["description"] == "Sundays"
    assert props["imageUrl"] == "/kids.png"
    assert props["buttonText"] == "Order now"
    assert props["buttonLink"] == "/order"


def test_promo_per_location_uses_first_link(catalog):
    catalog.promotion_links = {LOCATION_ID: [PROMO_1, PROMO_2]}
    document = _document(
        _promo_node(
            {
                "source": "dynamic",
                "dynamicMode": "perLocation",
                "selectedId": PROMO_2,
                "perLocationSelectedId": {LOCATION_ID: PROMO_2},
            }
        )
    )

    props = _run(document, catalog)["content"][0]["props"]

    assert props["title"] == "Happy hour"
    assert ("promotion_by_id", PROMO_2) not in catalog.calls


def test_promo_with_invalid_selected_id_is_left_alone(catalog):
    document = _document(_promo_node({"source": "dynamic", "selectedId": "promo-1"}))

    assert _run(document, catalog) == document
    assert catalog.calls == []


def test_insights_resolve_articles(catalog):
    catalog.article_links = {LOCATION_ID: [ARTICLE_1]}
    node = {
        "type": "InsightsSection",
        "props": {"insights": [], "contentSource": {"source": "dynamic", "dynamicMode": "perLocation"}},
    }

    props = _run(_document(node), catalog)["content"][0]["props"]

    assert props["insights"] == [
        {
            "title": "New patio",
            "category": "News",
            "date": "2024-05-02",
            "description": "We built a patio.",
            "imageUrl": "/patio.png",
            "link": "#",
        }
    ]


def test_failing_node_keeps_authored_props_and_others_resolve(catalog, caplog):
    catalog.failing = {"products_by_ids"}
    document = _document(
        _products_node({"source": "dynamic", "selectedIds": [P1]}),
        _promo_node({"source": "dynamic", "selectedId": PROMO_1}),
    )

    with caplog.at_level(logging.WARNING, logger="sitegen.services.overrides"):
        resolved = _run(document, catalog)

    assert resolved["content"][0] == document["content"][0]
    assert resolved["content"][1]["props"]["title"] == "Happy hour"
    assert any("keeping authored props" in record.getMessage() for record in caplog.records)


def test_nodes_in_named_zones_are_resolved(catalog):
    catalog.product_links = {LOCATION_ID: [P2]}
    hero = {"type": "Hero", "props": {"title": "Welcome"}}
    zoned = _products_node({"source": "dynamic", "dynamicMode": "perLocation"})
    document = _document(hero, zones={"Columns-1:left": [zoned, hero], "Columns-1:right": []})

    resolved = _run(document, catalog)

    left = resolved["zones"]["Columns-1:left"]
    assert [item["title"] for item in left[0]["props"]["products"]] == ["Fries"]
    assert left[1] == hero
    assert resolved["zones"]["Columns-1:right"] == []
    assert resolved["content"] == [hero]


def test_node_order_and_unknown_types_are_preserved(catalog):
    nodes = [
        {"type": "Hero", "props": {"title": "A"}},
        _products_node({"source": "dynamic", "selectedIds": [P1]}),
        {"type": "FaqSection", "props": {"items": []}},
        "not-a-node",
        {"type": "PromoSection", "props": "broken"},
    ]

    resolved = _run(_document(*nodes), catalog)

    assert [node if isinstance(node, str) else node["type"] for node in resolved["content"]] == [
        "Hero",
        "ProductsSection",
        "FaqSection",
        "not-a-node",
        "PromoSection",
    ]
    assert resolved["content"][4] == {"type": "PromoSection", "props": "broken"}


def test_resolution_is_idempotent(catalog):
    catalog.product_links = {LOCATION_ID: [P1, P2]}
    document = _document(
        _products_node({"source": "dynamic", "dynamicMode": "perLocation"}),
        _promo_node({"source": "dynamic", "selectedId": PROMO_1}),
    )

    once = _run(document, catalog)
    twice = _run(once, catalog)

    assert once == twice


def test_custom_resolver_table(catalog):
    async def shout(props, location_id, store):
        return {**props, "title": props["title"].upper()}

    document = _document({"type": "Banner", "props": {"title": "hello"}})

    resolved = _run(document, catalog, resolvers={**RESOLVERS, "Banner": shout})

    assert resolved["content"][0]["props"]["title"] == "HELLO"


def test_document_must_be_a_mapping(catalog):
    with pytest.raises(TypeError):
        _run(["not", "a", "document"], catalog)


def test_missing_content_and_zones_are_tolerated(catalog):
    assert _run({"root": {"props": {}}}, catalog) == {"root": {"props": {}}}


def test_order_records_by_ids_is_case_insensitive():
    records = [{"id": "B"}, {"id": "a"}, {"id": "c"}]

    ordered = order_records_by_ids(records, ["A", "b"])

    assert [record["id"] for record in ordered] == ["a", "B", "c"]


def test_format_price():
    assert format_price(None) is None
    assert format_price(10.0) == "$10"
    assert format_price(9.99) == "$9.99"
    assert format_price(3, prefix="EUR ") == "EUR 3"


def test_synced_selection_drops_deleted_items(catalog):
    del catalog.products[P1]
    document = _document(_products_node({"source": "dynamic", "dynamicMode": "synced", "selectedIds": [P3, P1]}))

    props = _run(document, catalog)["content"][0]["props"]

    assert [item["title"] for item in props["products"]] == ["Shake"]


@pytest.mark.parametrize(
    "stale_cache",
    [
        {"selectedIds": None},
        {"selectedIds": "stale"},
        {"perLocationSelectedIds": []},
        {"perLocationSelectedId": "promo-1"},
        {"refresh": "soon"},
    ],
)
def test_unusable_editor_cache_does_not_disable_per_location_links(catalog, stale_cache):
    catalog.product_links = {LOCATION_ID: [P1]}
    document = _document(
        _products_node({"source": "dynamic", "dynamicMode": "perLocation", **stale_cache}, products=[])
    )

    props = _run(document, catalog)["content"][0]["props"]

    assert [item["title"] for item in props["products"]] == ["Burger"]


def test_null_selected_ids_mean_no_synced_selection():
    source = parse_content_source({"contentSource": {"source": "dynamic", "selectedIds": None}})

    assert source is not None
    assert source.selectedIds == []

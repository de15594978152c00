import pytest
from sqlalchemy import update

from kushalwear.data.models.product import ProductModel


def _add(client, headers, **payload):
    payload.setdefault("productId", "P1")
    return client.post("/api/cart", headers=headers, json=payload)


def test_cart_requires_token(client):
    res = client.get("/api/cart")
    assert res.status_code == 401
    assert res.json()["message"] == "Access token required"


def test_empty_cart_is_created_on_first_read(client, headers):
    res = client.get("/api/cart", headers=headers)
    assert res.status_code == 200
    cart = res.json()["cart"]
    assert cart["items"] == []
    assert cart["totalItems"] == 0
    assert cart["totalPrice"] == 0


def test_adding_same_item_twice_merges_quantity(client, headers, product):
    assert _add(client, headers, quantity=1).status_code == 200
    res = _add(client, headers, quantity=1)

    assert res.status_code == 200
    body = res.json()
    assert body["message"] == "Item added to cart successfully"
    assert len(body["cart"]["items"]) == 1
    assert body["cart"]["items"][0]["quantity"] == 2
    assert body["cart"]["totalItems"] == 2
    assert body["cart"]["totalPrice"] == pytest.approx(39.98)


def test_size_and_color_make_separate_lines(client, headers, product):
    black = {"name": "Black", "hex": "#000000"}
    _add(client, headers, size="M", color=black)
    _add(client, headers, size="L", color=black)
    res = _add(client, headers, size="M", color=black, quantity=2)

    items = res.json()["cart"]["items"]
    assert [(i["size"], i["quantity"]) for i in items] == [("M", 3), ("L", 1)]
    assert items[0]["color"] == black
    assert items[0]["product"]["name"] == "Classic Tee"


def test_add_checks_product_and_stock(client, headers, make_product):
    make_product("P1", stock=3)
    make_product("OFF", is_active=False)

    res = _add(client, headers, quantity=5)
    assert res.status_code == 400
    assert res.json()["message"] == "Only 3 items available in stock"

    res = _add(client, headers, productId="nope")
    assert res.status_code == 404
    assert res.json()["message"] == "Product not found"

    res = _add(client, headers, productId="OFF")
    assert res.status_code == 400
    assert res.json()["message"] == "Product is not available"


def test_add_rejects_zero_quantity_and_bad_size(client, headers, product):
    res = _add(client, headers, quantity=0)
    assert res.status_code == 400
    assert res.json()["message"] == "Validation failed"

    assert _add(client, headers, size="XXXXL").status_code == 400


def test_line_price_is_a_snapshot(client, headers, session, product):
    _add(client, headers)
    session.execute(update(ProductModel).where(ProductModel.id == "P1").values(price=99))
    session.commit()

    res = _add(client, headers)
    item = res.json()["cart"]["items"][0]
    assert item["price"] == pytest.approx(19.99)
    assert item["product"]["price"] == pytest.approx(99)


def test_update_quantity(client, headers, product):
    item_id = _add(client, headers).json()["cart"]["items"][0]["id"]

    res = client.put(f"/api/cart/{item_id}", headers=headers, json={"quantity": 4})
    assert res.status_code == 200
    assert res.json()["message"] == "Cart item updated successfully"
    assert res.json()["cart"]["totalItems"] == 4

    res = client.put(f"/api/cart/{item_id}", headers=headers, json={"quantity": 11})
    assert res.status_code == 400

    res = client.put(f"/api/cart/{item_id}", headers=headers, json={"quantity": 0})
    assert res.json()["cart"]["items"] == []


def test_update_and_remove_unknown_item(client, headers, product):
    res = client.put("/api/cart/nope", headers=headers, json={"quantity": 1})
    assert res.status_code == 404
    assert res.json()["message"] == "Cart not found"

    _add(client, headers)
    res = client.put("/api/cart/nope", headers=headers, json={"quantity": 1})
    assert res.status_code == 404
    assert res.json()["message"] == "Item not found in cart"

    res = client.delete("/api/cart/nope", headers=headers)
    assert res.status_code == 404


def test_remove_item_and_clear(client, headers, make_product):
    make_product("P1")
    make_product("P2", name="Other Tee")
    _add(client, headers, quantity=2)
    items = _add(client, headers, productId="P2").json()["cart"]["items"]

    res = client.delete(f"/api/cart/{items[0]['id']}", headers=headers)
    assert res.status_code == 200
    assert res.json()["message"] == "Item removed from cart successfully"
    assert [i["productId"] for i in res.json()["cart"]["items"]] == ["P2"]

    res = client.delete("/api/cart", headers=headers)
    assert res.json()["message"] == "Cart cleared successfully"
    assert res.json()["cart"]["totalItems"] == 0


def test_clear_without_cart_is_404(client, headers):
    res = client.delete("/api/cart", headers=headers)
    assert res.status_code == 404
    assert res.json()["message"] == "Cart not found"


def test_count(client, headers, product):
    assert client.get("/api/cart/count", headers=headers).json() == {"count": 0}
    _add(client, headers, quantity=3)
    assert client.get("/api/cart/count", headers=headers).json() == {"count": 3}


def test_merge_guest_cart(client, headers, make_product):
    make_product("P1", stock=4)
    make_product("EMPTY", stock=0)
    _add(client, headers, quantity=1)

    res = client.post(
        "/api/cart/merge",
        headers=headers,
        json={
            "guestCart": [
                {"id": "P1", "quantity": 2},
                {"id": "P1", "quantity": 9, "size": "M"},
                {"id": "EMPTY", "quantity": 1},
                {"id": "missing", "quantity": 1},
            ]
        },
    )
    assert res.status_code == 200
    body = res.json()
    assert body["message"] == "Guest cart merged successfully"
    assert body["merged"] == 2
    assert body["skipped"] == 2
    # ilosc przycieta do stanu magazynu
    assert [(i["size"] if "size" in i else None, i["quantity"]) for i in body["cart"]["items"]] == [
        (None, 3),
        ("M", 4),
    ]


def test_carts_are_per_user(client, register, product):
    alice = register(email="alice@example.com")
    bob = register(email="bob@example.com")
    _add(client, alice, quantity=2)

    assert client.get("/api/cart", headers=bob).json()["cart"]["items"] == []
    assert client.get("/api/cart/count", headers=alice).json() == {"count": 2}

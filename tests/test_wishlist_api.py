from sqlalchemy import update

from kushalwear.data.models.product import ProductModel

BLACK = {"name": "Black", "hex": "#000000"}


def test_add_remove_check(client, headers, product):
    res = client.post("/api/wishlist/add", headers=headers, json={"productId": "P1"})
    assert res.status_code == 200
    assert res.json()["success"] is True
    assert res.json()["wishlistItem"]["product"]["id"] == "P1"

    assert client.get("/api/wishlist/check/P1", headers=headers).json()["inWishlist"] is True

    res = client.delete("/api/wishlist/remove/P1", headers=headers)
    assert res.status_code == 200

    res = client.get("/api/wishlist/check/P1", headers=headers)
    assert res.json() == {"success": True, "inWishlist": False}


def test_remove_missing_product_is_not_an_error(client, headers, product):
    res = client.delete("/api/wishlist/remove/P1", headers=headers)
    assert res.status_code == 200


def test_adding_twice_keeps_one_entry(client, headers, product):
    client.post("/api/wishlist/add", headers=headers, json={"productId": "P1", "size": "M", "color": BLACK})
    client.post("/api/wishlist/add", headers=headers, json={"productId": "P1", "size": "L"})

    wishlist = client.get("/api/wishlist", headers=headers).json()["wishlist"]
    assert wishlist["totalItems"] == 1
    entry = wishlist["products"][0]
    assert entry["selectedSize"] == "L"
    assert entry["selectedColor"] == BLACK


def test_add_unknown_product(client, headers):
    res = client.post("/api/wishlist/add", headers=headers, json={"productId": "nope"})
    assert res.status_code == 404
    assert res.json()["message"] == "Product not found or unavailable"


def test_inactive_products_are_hidden(client, headers, session, make_product):
    make_product("P1")
    make_product("P2", name="Soon Gone")
    client.post("/api/wishlist/add", headers=headers, json={"productId": "P1"})
    client.post("/api/wishlist/add", headers=headers, json={"productId": "P2"})

    session.execute(update(ProductModel).where(ProductModel.id == "P2").values(is_active=False))
    session.commit()

    wishlist = client.get("/api/wishlist", headers=headers).json()["wishlist"]
    assert [e["product"]["id"] for e in wishlist["products"]] == ["P1"]
    assert wishlist["totalItems"] == 1


def test_move_to_cart_uses_selected_options(client, headers, product):
    client.post("/api/wishlist/add", headers=headers, json={"productId": "P1", "size": "S", "color": BLACK})

    res = client.post("/api/wishlist/move-to-cart/P1", headers=headers, json={"quantity": 2})
    assert res.status_code == 200
    body = res.json()
    assert body["quantity"] == 2
    assert body["cart"]["items"][0]["size"] == "S"
    assert body["cart"]["items"][0]["color"] == BLACK
    assert body["cart"]["totalItems"] == 2

    assert client.get("/api/wishlist/check/P1", headers=headers).json()["inWishlist"] is False


def test_move_to_cart_without_body_moves_one(client, headers, product):
    client.post("/api/wishlist/add", headers=headers, json={"productId": "P1"})
    res = client.post("/api/wishlist/move-to-cart/P1", headers=headers)
    assert res.json()["cart"]["totalItems"] == 1


def test_move_to_cart_requires_wishlist_entry(client, headers, product):
    res = client.post("/api/wishlist/move-to-cart/P1", headers=headers)
    assert res.status_code == 404
    assert res.json()["message"] == "Product not found in wishlist"


def test_clear(client, headers, product):
    res = client.delete("/api/wishlist/clear", headers=headers)
    assert res.status_code == 404
    assert res.json()["message"] == "Wishlist not found"

    client.post("/api/wishlist/add", headers=headers, json={"productId": "P1"})
    res = client.delete("/api/wishlist/clear", headers=headers)
    assert res.status_code == 200
    assert client.get("/api/wishlist", headers=headers).json()["wishlist"]["products"] == []

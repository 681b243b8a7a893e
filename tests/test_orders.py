"""Tests for Order API endpoints."""


def _order(client, items, **extra):
    body = {"items": items, "shipping_address": "1 Main St", **extra}
    return client.post("/api/orders", json=body)


def test_create_order_success(client, make_product, low_stock_task):
    """Two products, totals and snapshots as submitted."""
    a = make_product(name="Widget", price=10.00, quantity=10, category="Parts")
    b = make_product(name="Gadget", price=5.00, quantity=10)
    
    response = _order(client, [
        {"product_id": a["id"], "quantity": 2},
        {"product_id": b["id"], "quantity": 1},
    ])
    
    assert response.status_code == 201
    data = response.json()
    assert data["total_amount"] == 25.00
    assert data["status"] == "Pending"
    assert data["shipping_address"] == "1 Main St"
    assert [(i["product_id"], i["quantity"], i["price_per_unit"]) for i in data["items"]] == [
        (a["id"], 2, 10.00),
        (b["id"], 1, 5.00),
    ]
    assert data["items"][0]["product"]["name"] == "Widget"
    assert data["items"][0]["product"]["category"] == "Parts"
    low_stock_task.assert_called_once_with(sorted([a["id"], b["id"]]))


def test_order_decrements_stock(client, make_product):
    """Test that creating an order decrements inventory."""
    a = make_product(name="A", price=10.00, quantity=10)
    b = make_product(name="B", price=5.00, quantity=4)
    
    _order(client, [
        {"product_id": a["id"], "quantity": 2},
        {"product_id": b["id"], "quantity": 1},
    ])
    
    assert client.get(f"/api/inventory/{a['id']}").json()["quantity"] == 8
    assert client.get(f"/api/inventory/{b['id']}").json()["quantity"] == 3


def test_billing_address_defaults_to_shipping(client, make_product):
    product = make_product()
    
    data = _order(client, [{"product_id": product["id"], "quantity": 1}]).json()
    
    assert data["billing_address"] == "1 Main St"


def test_billing_address_kept_when_given(client, make_product):
    product = make_product()
    
    data = _order(
        client,
        [{"product_id": product["id"], "quantity": 1}],
        billing_address="PO Box 9"
    ).json()
    
    assert data["billing_address"] == "PO Box 9"


def test_create_order_insufficient_stock(client, make_product, low_stock_task):
    """Test order fails when insufficient stock, leaving inventory alone."""
    product = make_product(name="Limited Product", price=50.00, quantity=3)
    
    response = _order(client, [{"product_id": product["id"], "quantity": 5}])
    
    assert response.status_code == 400
    detail = response.json()["detail"]
    assert "Insufficient stock" in detail
    assert "Limited Product" in detail
    assert "Requested: 5" in detail
    assert "Available: 3" in detail
    assert client.get(f"/api/inventory/{product['id']}").json()["quantity"] == 3
    assert client.get("/api/orders").json() == []
    low_stock_task.assert_not_called()


def test_rejected_order_leaves_earlier_items_untouched(client, make_product):
    """A failing later item keeps earlier items from being deducted."""
    plenty = make_product(name="Plenty", quantity=10)
    scarce = make_product(name="Scarce", quantity=1)
    
    response = _order(client, [
        {"product_id": plenty["id"], "quantity": 4},
        {"product_id": scarce["id"], "quantity": 2},
    ])
    
    assert response.status_code == 400
    assert client.get(f"/api/inventory/{plenty['id']}").json()["quantity"] == 10


def test_repeated_product_counts_against_same_stock(client, make_product):
    product = make_product(name="Twice", quantity=3)
    
    response = _order(client, [
        {"product_id": product["id"], "quantity": 2},
        {"product_id": product["id"], "quantity": 2},
    ])
    
    assert response.status_code == 400
    assert "Available: 1" in response.json()["detail"]


def test_create_order_product_not_found(client):
    """Test order fails when product doesn't exist."""
    response = _order(client, [{"product_id": "missing-product", "quantity": 1}])
    
    assert response.status_code == 404
    assert "missing-product" in response.json()["detail"]


def test_create_order_customer_not_found(client, make_product):
    product = make_product()
    
    response = _order(
        client,
        [{"product_id": product["id"], "quantity": 1}],
        customer_id="nobody"
    )
    
    assert response.status_code == 404


def test_create_order_empty_items(client):
    response = _order(client, [])
    
    assert response.status_code == 400
    assert "non-empty" in response.json()["detail"]


def test_create_order_missing_items(client):
    response = client.post("/api/orders", json={"shipping_address": "1 Main St"})
    
    assert response.status_code == 400


def test_create_order_missing_shipping_address(client, make_product):
    product = make_product()
    
    response = client.post(
        "/api/orders",
        json={"items": [{"product_id": product["id"], "quantity": 1}]}
    )
    
    assert response.status_code == 400
    assert "Shipping address" in response.json()["detail"]


def test_create_order_item_without_product_id(client):
    response = _order(client, [{"quantity": 1}])
    
    assert response.status_code == 400
    assert "product_id" in response.json()["detail"]


def test_create_order_invalid_quantities(client, make_product):
    product = make_product()
    
    for quantity in [0, -1, 1.5, "2", None, True]:
        response = _order(client, [{"product_id": product["id"], "quantity": quantity}])
        assert response.status_code == 400, quantity
    
    assert client.get(f"/api/inventory/{product['id']}").json()["quantity"] == 10


def test_multiple_orders_deplete_stock(client, make_product):
    """Test multiple orders correctly deplete stock."""
    product = make_product(name="Depleting Product", price=10.00, quantity=5)
    
    assert _order(client, [{"product_id": product["id"], "quantity": 3}]).status_code == 201
    assert _order(client, [{"product_id": product["id"], "quantity": 2}]).status_code == 201
    
    # Third order should fail (no stock)
    assert _order(client, [{"product_id": product["id"], "quantity": 1}]).status_code == 400
    assert client.get(f"/api/inventory/{product['id']}").json()["quantity"] == 0


def test_order_keeps_price_snapshot(client, make_product):
    """Changing a product's price does not change existing orders."""
    product = make_product(name="Repriced", price=10.00)
    order_id = _order(client, [{"product_id": product["id"], "quantity": 3}]).json()["id"]
    
    client.put(f"/api/products/{product['id']}", json={"price": 99.00})
    
    data = client.get(f"/api/orders/{order_id}").json()
    assert data["items"][0]["price_per_unit"] == 10.00
    assert data["total_amount"] == 30.00
    assert data["items"][0]["product"]["price"] == 99.00


def test_get_order(client, make_product):
    """Test getting an order by ID, with the customer expanded."""
    customer = client.post(
        "/api/customers",
        json={"first_name": "Ada", "last_name": "Lovelace", "email": "ada@example.com"}
    ).json()
    product = make_product()
    order_id = _order(
        client,
        [{"product_id": product["id"], "quantity": 1}],
        customer_id=customer["id"]
    ).json()["id"]
    
    response = client.get(f"/api/orders/{order_id}")
    
    assert response.status_code == 200
    data = response.json()
    assert data["id"] == order_id
    assert data["customer_id"] == customer["id"]
    assert data["customer"]["email"] == "ada@example.com"


def test_get_order_not_found(client):
    assert client.get("/api/orders/not-an-id").status_code == 404


def test_list_orders_newest_first(client, make_product):
    product = make_product(quantity=100)
    ids = [
        _order(client, [{"product_id": product["id"], "quantity": 1}]).json()["id"]
        for _ in range(3)
    ]
    
    response = client.get("/api/orders")
    
    assert response.status_code == 200
    assert [o["id"] for o in response.json()] == list(reversed(ids))


def test_list_orders_filtered_by_status(client, make_product):
    product = make_product(quantity=100)
    first = _order(client, [{"product_id": product["id"], "quantity": 1}]).json()["id"]
    _order(client, [{"product_id": product["id"], "quantity": 1}])
    client.put(f"/api/orders/{first}/status", json={"status": "Shipped"})
    
    data = client.get("/api/orders?status=Shipped").json()
    
    assert [o["id"] for o in data] == [first]


def test_update_status_changes_only_status(client, make_product):
    product = make_product(quantity=5)
    created = _order(client, [{"product_id": product["id"], "quantity": 2}]).json()
    before = client.get(f"/api/orders/{created['id']}").json()
    
    response = client.put(f"/api/orders/{created['id']}/status", json={"status": "Shipped"})
    
    assert response.status_code == 200
    updated = response.json()
    assert updated["status"] == "Shipped"
    assert before.pop("status") == "Pending"
    after = dict(updated)
    after.pop("status")
    assert after == before
    assert after["total_amount"] == created["total_amount"]
    assert after["items"] == created["items"]
    assert after["order_date"] == created["order_date"]


def test_update_status_any_transition_allowed(client, make_product):
    product = make_product()
    order_id = _order(client, [{"product_id": product["id"], "quantity": 1}]).json()["id"]
    
    for new_status in ["Delivered", "Pending", "Pending", "Processing", "Cancelled", "Shipped"]:
        response = client.put(f"/api/orders/{order_id}/status", json={"status": new_status})
        assert response.status_code == 200
        assert response.json()["status"] == new_status


def test_cancelling_does_not_restock(client, make_product):
    product = make_product(quantity=5)
    order_id = _order(client, [{"product_id": product["id"], "quantity": 2}]).json()["id"]
    
    client.put(f"/api/orders/{order_id}/status", json={"status": "Cancelled"})
    
    assert client.get(f"/api/inventory/{product['id']}").json()["quantity"] == 3


def test_update_status_invalid_value(client, make_product):
    product = make_product()
    order_id = _order(client, [{"product_id": product["id"], "quantity": 1}]).json()["id"]
    
    response = client.put(f"/api/orders/{order_id}/status", json={"status": "Delivered!!"})
    
    assert response.status_code == 400
    assert "Delivered!!" in response.json()["detail"]
    assert client.get(f"/api/orders/{order_id}").json()["status"] == "Pending"


def test_update_status_missing_value(client, make_product):
    product = make_product()
    order_id = _order(client, [{"product_id": product["id"], "quantity": 1}]).json()["id"]
    
    assert client.put(f"/api/orders/{order_id}/status", json={}).status_code == 400


def test_update_status_order_not_found(client):
    response = client.put("/api/orders/missing/status", json={"status": "Shipped"})
    
    assert response.status_code == 404


def test_create_order_malformed_body_is_400(client, make_product):
    """Wrongly typed fields are reported by the order service, not the schema."""
    product = make_product()
    bodies = [
        {"items": {}, "shipping_address": "1 Main St"},
        {"items": "abc", "shipping_address": "1 Main St"},
        {"items": ["abc"], "shipping_address": "1 Main St"},
        {"items": [{"product_id": 5, "quantity": 1}], "shipping_address": "1 Main St"},
        {"items": [{"product_id": product["id"], "quantity": 1}], "shipping_address": 123},
        {
            "items": [{"product_id": product["id"], "quantity": 1}],
            "shipping_address": "1 Main St",
            "billing_address": ["x"]
        },
        {
            "items": [{"product_id": product["id"], "quantity": 1}],
            "shipping_address": "1 Main St",
            "customer_id": 42
        },
    ]
    
    for body in bodies:
        response = client.post("/api/orders", json=body)
        assert response.status_code == 400, body
    
    assert client.get("/api/orders").json() == []
    assert client.get(f"/api/inventory/{product['id']}").json()["quantity"] == 10


def test_create_order_names_malformed_item(client, make_product):
    product = make_product()
    
    response = _order(client, [{"product_id": product["id"], "quantity": 1}, "abc"])
    
    assert response.status_code == 400
    assert "Item 1" in response.json()["detail"]


def test_order_created_when_low_stock_dispatch_fails(client, make_product, low_stock_task):
    """A broker outage after commit still answers 201 with the stored order."""
    low_stock_task.side_effect = ConnectionError("broker unreachable")
    product = make_product(quantity=5)
    
    response = _order(client, [{"product_id": product["id"], "quantity": 2}])
    
    assert response.status_code == 201
    assert len(client.get("/api/orders").json()) == 1
    assert client.get(f"/api/inventory/{product['id']}").json()["quantity"] == 3


def test_update_status_non_string_is_400(client, make_product):
    product = make_product()
    order_id = _order(client, [{"product_id": product["id"], "quantity": 1}]).json()["id"]
    
    for value in [5, ["Shipped"], {"status": "Shipped"}]:
        response = client.put(f"/api/orders/{order_id}/status", json={"status": value})
        assert response.status_code == 400, value
    
    assert client.get(f"/api/orders/{order_id}").json()["status"] == "Pending"

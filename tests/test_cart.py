"""Per-user cart: lazy creation, merging, stock checks and live totals."""

from decimal import Decimal


class TestGetCart:
    def test_cart_is_created_lazily(self, client, customer, customer_headers):
        response = client.get("/api/cart", headers=customer_headers)

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["user_id"] == customer.id
        assert data["items"] == []
        assert data["total"] == 0

    def test_same_cart_is_returned_on_every_read(self, client, customer_headers):
        first = client.get("/api/cart", headers=customer_headers).json()["data"]["id"]
        second = client.get("/api/cart", headers=customer_headers).json()["data"]["id"]

        assert first == second

    def test_requires_login(self, client):
        assert client.get("/api/cart").status_code == 401


class TestAddItem:
    def test_add_defaults_to_quantity_one(self, client, customer_headers, make_product):
        product = make_product(price="25.00")

        response = client.post("/api/cart", json={"product_id": product.id}, headers=customer_headers)

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["items"][0]["quantity"] == 1
        assert data["total"] == 25.0

    def test_adding_same_product_twice_merges_quantity(self, client, customer_headers, make_product):
        product = make_product(stock=10)

        client.post("/api/cart", json={"product_id": product.id, "quantity": 2}, headers=customer_headers)
        response = client.post("/api/cart", json={"product_id": product.id, "quantity": 3}, headers=customer_headers)

        items = response.json()["data"]["items"]
        assert len(items) == 1
        assert items[0]["quantity"] == 5

    def test_missing_product_is_not_found(self, client, customer_headers):
        response = client.post("/api/cart", json={"product_id": 999, "quantity": 1}, headers=customer_headers)

        assert response.status_code == 404
        assert response.json()["message"] == "Product not found"

    def test_quantity_above_stock_is_bad_request(self, client, customer_headers, make_product):
        product = make_product(stock=2)

        response = client.post("/api/cart", json={"product_id": product.id, "quantity": 3}, headers=customer_headers)

        assert response.status_code == 400
        assert response.json()["message"] == "Not enough stock available"

    def test_cumulative_quantity_above_stock_is_bad_request(self, client, customer_headers, make_product):
        product = make_product(stock=4)
        client.post("/api/cart", json={"product_id": product.id, "quantity": 3}, headers=customer_headers)

        response = client.post("/api/cart", json={"product_id": product.id, "quantity": 2}, headers=customer_headers)

        assert response.status_code == 400
        cart = client.get("/api/cart", headers=customer_headers).json()["data"]
        assert cart["items"][0]["quantity"] == 3

    def test_zero_quantity_is_bad_request(self, client, customer_headers, make_product):
        product = make_product()

        response = client.post("/api/cart", json={"product_id": product.id, "quantity": 0}, headers=customer_headers)

        assert response.status_code == 400


class TestUpdateItem:
    def test_update_sets_quantity(self, client, customer_headers, make_product):
        product = make_product(stock=10)
        client.post("/api/cart", json={"product_id": product.id, "quantity": 2}, headers=customer_headers)

        response = client.put("/api/cart", json={"product_id": product.id, "quantity": 7}, headers=customer_headers)

        assert response.status_code == 200
        assert response.json()["data"]["items"][0]["quantity"] == 7

    def test_zero_or_negative_quantity_is_bad_request(self, client, customer_headers, make_product):
        product = make_product(stock=10)
        client.post("/api/cart", json={"product_id": product.id}, headers=customer_headers)

        for quantity in (0, -3):
            response = client.put(
                "/api/cart", json={"product_id": product.id, "quantity": quantity}, headers=customer_headers
            )
            assert response.status_code == 400
            assert response.json()["message"] == "Quantity must be at least 1"

    def test_quantity_above_stock_is_bad_request(self, client, customer_headers, make_product):
        product = make_product(stock=3)
        client.post("/api/cart", json={"product_id": product.id}, headers=customer_headers)

        response = client.put("/api/cart", json={"product_id": product.id, "quantity": 4}, headers=customer_headers)

        assert response.status_code == 400

    def test_item_not_in_cart_is_not_found(self, client, customer_headers, make_product):
        in_cart = make_product(name="In Cart")
        other = make_product(name="Other")
        client.post("/api/cart", json={"product_id": in_cart.id}, headers=customer_headers)

        response = client.put("/api/cart", json={"product_id": other.id, "quantity": 1}, headers=customer_headers)

        assert response.status_code == 404
        assert response.json()["message"] == "Item not found in cart"

    def test_missing_cart_is_not_found(self, client, customer_headers, make_product):
        product = make_product()

        response = client.put("/api/cart", json={"product_id": product.id, "quantity": 1}, headers=customer_headers)

        assert response.status_code == 404
        assert response.json()["message"] == "Cart not found"


class TestRemoveAndClear:
    def test_remove_item(self, client, customer_headers, make_product):
        keep = make_product(name="Keep", price="10.00")
        drop = make_product(name="Drop", price="30.00")
        client.post("/api/cart", json={"product_id": keep.id}, headers=customer_headers)
        client.post("/api/cart", json={"product_id": drop.id}, headers=customer_headers)

        response = client.delete(f"/api/cart/items/{drop.id}", headers=customer_headers)

        data = response.json()["data"]
        assert [i["product_id"] for i in data["items"]] == [keep.id]
        assert data["total"] == 10.0

    def test_remove_absent_item_is_a_no_op(self, client, customer_headers):
        response = client.delete("/api/cart/items/12345", headers=customer_headers)

        assert response.status_code == 200
        assert response.json()["data"]["items"] == []

    def test_clear_cart(self, client, customer_headers, make_product):
        product = make_product()
        client.post("/api/cart", json={"product_id": product.id, "quantity": 2}, headers=customer_headers)

        response = client.delete("/api/cart", headers=customer_headers)

        assert response.status_code == 200
        assert response.json()["data"]["items"] == []
        assert response.json()["data"]["total"] == 0

    def test_clear_empty_cart_succeeds(self, client, customer_headers):
        response = client.delete("/api/cart", headers=customer_headers)

        assert response.status_code == 200
        assert response.json()["data"]["total"] == 0

    def test_deleted_product_disappears_from_cart(self, client, customer_headers, admin_headers, make_product):
        product = make_product()
        client.post("/api/cart", json={"product_id": product.id}, headers=customer_headers)

        client.delete(f"/api/products/{product.id}", headers=admin_headers)

        assert client.get("/api/cart", headers=customer_headers).json()["data"]["items"] == []


class TestLiveTotal:
    def test_total_follows_current_price(self, client, customer_headers, make_product, db):
        product = make_product(price="10.00", stock=10)
        client.post("/api/cart", json={"product_id": product.id, "quantity": 3}, headers=customer_headers)

        product.price = Decimal("12.50")
        db.commit()

        data = client.get("/api/cart", headers=customer_headers).json()["data"]
        assert data["items"][0]["price"] == 12.5
        assert data["total"] == 37.5

    def test_carts_are_per_user(self, client, customer_headers, make_user, login, make_product):
        product = make_product()
        client.post("/api/cart", json={"product_id": product.id}, headers=customer_headers)
        other = make_user(email="other@example.com")

        other_cart = client.get("/api/cart", headers=login(other.email)).json()["data"]

        assert other_cart["items"] == []


class TestConcurrentCreation:
    def test_cart_created_by_parallel_request_is_reused(self, customer, db, monkeypatch):
        from storefront.data.database import SessionLocal
        from storefront.data.models import CartModel
        from storefront.repos.cart_repo import CartRepo
        from storefront.services.cart_service import CartService

        existing = CartModel(user_id=customer.id)
        db.add(existing)
        db.commit()

        real_lookup = CartRepo.get_cart_by_user
        calls = []

        def late_lookup(self, user_id):
            # pierwszy odczyt nie widzi koszyka zapisanego przez rownolegly request
            calls.append(user_id)
            if len(calls) == 1:
                return None
            return real_lookup(self, user_id)

        monkeypatch.setattr(CartRepo, "get_cart_by_user", late_lookup)

        session = SessionLocal()
        try:
            cart = CartService(session).get_cart(customer.id)
        finally:
            session.close()

        assert cart.id == existing.id
        assert db.query(CartModel).filter_by(user_id=customer.id).count() == 1

"""
Car Store Backend — Order Endpoint Tests
==========================================

What:  End-to-end tests for /api/orders and the stock bookkeeping on cars.

What we test:
    ✅ Ordering decrements stock and prices the order from the car
    ✅ Ordering the last units flips inStock to false
    ✅ Ordering more than the stock fails and leaves the car untouched
    ✅ Unknown car → 404, invalid payload → 400
    ✅ Revenue sums every order, including orders of deleted cars
"""

from uuid import uuid4

import pytest


async def create_car(client, payload):
    response = await client.post("/api/cars", json=payload)
    assert response.status_code == 200, response.text
    return response.json()["data"]


async def place_order(client, car_id, quantity, email="buyer@example.com"):
    return await client.post(
        "/api/orders",
        json={"email": email, "car": car_id, "quantity": quantity},
    )


class TestCreateOrder:

    @pytest.mark.asyncio
    async def test_create_order(self, test_client, car_payload):
        car = await create_car(test_client, car_payload)

        response = await place_order(test_client, car["id"], 2)

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        order = body["data"]
        assert order["id"]
        assert order["car"] == car["id"]
        assert order["email"] == "buyer@example.com"
        assert order["quantity"] == 2
        assert order["totalPrice"] == 40000

        car_after = (await test_client.get(f"/api/cars/{car['id']}")).json()["data"]
        assert car_after["quantity"] == 3
        assert car_after["inStock"] is True

    @pytest.mark.asyncio
    async def test_order_last_units(self, test_client, car_payload):
        car = await create_car(test_client, car_payload)

        response = await place_order(test_client, car["id"], 5)

        assert response.status_code == 200
        car_after = (await test_client.get(f"/api/cars/{car['id']}")).json()["data"]
        assert car_after["quantity"] == 0
        assert car_after["inStock"] is False

    @pytest.mark.asyncio
    async def test_order_exceeding_stock(self, test_client, car_payload):
        car = await create_car(test_client, car_payload)

        response = await place_order(test_client, car["id"], 6)

        assert response.status_code == 400
        body = response.json()
        assert body["error"]["name"] == "InsufficientStockError"
        assert "quantity" in body["error"]["errors"]

        car_after = (await test_client.get(f"/api/cars/{car['id']}")).json()["data"]
        assert car_after["quantity"] == 5

    @pytest.mark.asyncio
    async def test_order_unknown_car(self, test_client):
        response = await place_order(test_client, str(uuid4()), 1)

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_order_validation_error(self, test_client):
        response = await test_client.post(
            "/api/orders",
            json={"email": "nobody", "car": "abc", "quantity": 0},
        )

        assert response.status_code == 400
        assert set(response.json()["error"]["errors"]) == {"email", "car", "quantity"}

    @pytest.mark.asyncio
    async def test_order_quantity_not_coerced(self, test_client, car_payload):
        car = await create_car(test_client, car_payload)

        response = await place_order(test_client, car["id"], "2")

        assert response.status_code == 400
        assert list(response.json()["error"]["errors"]) == ["quantity"]

    @pytest.mark.asyncio
    async def test_client_total_price_ignored(self, test_client, car_payload):
        car = await create_car(test_client, car_payload)

        response = await test_client.post(
            "/api/orders",
            json={"email": "a@b.co", "car": car["id"], "quantity": 1, "totalPrice": 1},
        )

        assert response.json()["data"]["totalPrice"] == 20000


class TestRevenue:

    @pytest.mark.asyncio
    async def test_revenue_without_orders(self, test_client):
        response = await test_client.get("/api/orders/revenue")

        assert response.status_code == 200
        assert response.json()["data"] == {"totalRevenue": 0}

    @pytest.mark.asyncio
    async def test_revenue_sums_orders(self, test_client, car_payload):
        sedan = await create_car(test_client, car_payload)
        suv = await create_car(
            test_client,
            {**car_payload, "brand": "Ford", "model": "Explorer", "category": "SUV", "price": 35000},
        )
        await place_order(test_client, sedan["id"], 2)
        await place_order(test_client, suv["id"], 1)
        # Rejected orders don't count
        await place_order(test_client, suv["id"], 50)

        response = await test_client.get("/api/orders/revenue")

        assert response.json()["data"]["totalRevenue"] == 75000

    @pytest.mark.asyncio
    async def test_deleting_car_keeps_its_orders(self, test_client, car_payload):
        car = await create_car(test_client, car_payload)
        await place_order(test_client, car["id"], 1)

        response = await test_client.delete(f"/api/cars/{car['id']}")
        assert response.status_code == 200

        response = await test_client.get("/api/orders/revenue")
        assert response.json()["data"]["totalRevenue"] == 20000

import unittest

from tests.base import PASSWORD, PHONE, CourierTestCase


class TestAuthGate(CourierTestCase):
    def test_missing_header_is_401(self):
        resp = self.client.get("/api/v1/orders")
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.get_json()["message"], "Authorization header required")

    def test_unknown_token_is_403(self):
        resp = self.client.get("/api/v1/orders", headers=self.auth_headers("not-a-session"))
        self.assertEqual(resp.status_code, 403)
        self.assertEqual(resp.get_json()["type"], "error")

    def test_login_logout_flow(self):
        user_id, email = self.register()

        # 1. Login
        resp = self.client.post("/api/v1/auth/login", json={"email": email, "password": PASSWORD})
        self.assertEqual(resp.status_code, 200)
        body = resp.get_json()
        self.assertEqual(body["message"], "Successfully logged in")
        headers = self.auth_headers(body["data"]["access_token"])

        # 2. Session is valid
        resp = self.client.get("/api/v1/auth/session", headers=headers)
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.get_json()["data"]["user_id"], user_id)

        # 3. Logout
        resp = self.client.post("/api/v1/auth/logout", headers=headers)
        self.assertEqual(resp.status_code, 200)

        # 4. Token no longer opens the gate
        resp = self.client.get("/api/v1/auth/session", headers=headers)
        self.assertEqual(resp.status_code, 403)

    def test_bad_credentials_look_the_same(self):
        _, email = self.register()

        wrong_password = self.client.post(
            "/api/v1/auth/login", json={"email": email, "password": "wrong-password"}
        )
        unknown_email = self.client.post(
            "/api/v1/auth/login", json={"email": self.unique_email("ghost"), "password": PASSWORD}
        )

        self.assertEqual(wrong_password.status_code, 401)
        self.assertEqual(wrong_password.get_json(), unknown_email.get_json())
        self.assertNotIn("errors", wrong_password.get_json())

    def test_login_requires_fields(self):
        resp = self.client.post("/api/v1/auth/login", json={"email": ""})
        self.assertEqual(resp.status_code, 422)
        self.assertIn("email", resp.get_json()["errors"])
        self.assertIn("password", resp.get_json()["errors"])


class TestOrdersApi(CourierTestCase):
    def setUp(self):
        super().setUp()
        self.user_id, self.headers = self.signed_in()
        _, self.other_headers = self.signed_in()
        self.city = self.create_city("Dhaka", 80.0)
        self.store = self.create_store("S1")

    def post_order(self, headers=None, **overrides):
        store_id = overrides.pop("store_id", self.store.id)
        city_id = overrides.pop("city_id", self.city.id)
        return self.client.post(
            "/api/v1/orders",
            json=self.order_payload(store_id, city_id, **overrides),
            headers=headers or self.headers,
        )

    def test_create_and_fetch_order(self):
        resp = self.post_order()
        self.assertEqual(resp.status_code, 201)
        body = resp.get_json()
        self.assertEqual(body["message"], "Order Created Successfully")
        self.assertEqual(body["data"]["order_status"], "pending")
        self.assertEqual(body["data"]["delivery_fee"], 95.0)
        self.assertEqual(body["data"]["merchant_order_id"], "M-1001")
        consignment_id = body["data"]["consignment_id"]

        resp = self.client.get(f"/api/v1/orders/{consignment_id}", headers=self.headers)
        self.assertEqual(resp.status_code, 200)
        order = resp.get_json()["data"]
        self.assertEqual(order["cod_fee"], 5.0)
        self.assertEqual(order["total_fee"], 100.0)
        self.assertEqual(order["amount_to_collect"], 600.0)
        self.assertEqual(order["instruction"], "Call before delivery")
        self.assertEqual(order["order_description"], "Books")

    def test_other_user_cannot_read_order(self):
        consignment_id = self.post_order().get_json()["data"]["consignment_id"]

        resp = self.client.get(f"/api/v1/orders/{consignment_id}", headers=self.other_headers)
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.get_json()["message"], "Unauthorized")

    def test_unknown_store(self):
        resp = self.post_order(store_id=9999)
        self.assertEqual(resp.status_code, 422)
        self.assertEqual(resp.get_json()["errors"]["store_id"],
                         ["The store field is required", "Wrong Store selected"])

    def test_invalid_phone(self):
        resp = self.post_order(recipient_phone="0171234")
        self.assertEqual(resp.status_code, 422)
        self.assertIn("recipient_phone", resp.get_json()["errors"])

    def test_out_of_range_values_are_rejected(self):
        resp = self.post_order(item_quantity=2 ** 64)
        self.assertEqual(resp.status_code, 422)
        self.assertEqual(resp.get_json()["errors"]["item_quantity"],
                         ["The item quantity may not be greater than 2147483647."])

        resp = self.post_order(order_amount=1e9)
        self.assertEqual(resp.status_code, 422)
        self.assertIn("order_amount", resp.get_json()["errors"])

        resp = self.post_order(item_weight=2.555)
        self.assertEqual(resp.status_code, 422)
        self.assertEqual(resp.get_json()["errors"]["item_weight"],
                         ["The item weight may not have more than 2 decimal places."])

    def test_non_object_body(self):
        resp = self.client.post("/api/v1/orders", json=[1, 2], headers=self.headers)
        self.assertEqual(resp.status_code, 422)
        self.assertEqual(resp.get_json()["message"], "Unable to bind request")

    def test_list_orders_with_pagination(self):
        for _ in range(3):
            self.assertEqual(self.post_order().status_code, 201)
        self.assertEqual(self.post_order(headers=self.other_headers).status_code, 201)

        resp = self.client.get("/api/v1/orders?page=1&limit=2", headers=self.headers)
        self.assertEqual(resp.status_code, 200)
        data = resp.get_json()["data"]
        self.assertEqual(len(data["orders"]), 2)
        self.assertEqual(data["pagination"]["total"], 3)
        self.assertEqual(data["pagination"]["last_page"], 2)

    def test_list_orders_bad_params(self):
        resp = self.client.get("/api/v1/orders?order_status=shipped", headers=self.headers)
        self.assertEqual(resp.status_code, 422)

        resp = self.client.get("/api/v1/orders?page=abc", headers=self.headers)
        self.assertEqual(resp.status_code, 400)

    def test_update_order(self):
        consignment_id = self.post_order().get_json()["data"]["consignment_id"]

        resp = self.client.put(
            f"/api/v1/orders/{consignment_id}",
            json={"order_amount": 1000, "recipient_name": "Karim"},
            headers=self.headers,
        )
        self.assertEqual(resp.status_code, 200)
        order = resp.get_json()["data"]
        self.assertEqual(order["recipient_name"], "Karim")
        self.assertEqual(order["amount_to_collect"], 1105.0)

    def test_cancel_then_delete(self):
        consignment_id = self.post_order().get_json()["data"]["consignment_id"]

        resp = self.client.patch(f"/api/v1/orders/{consignment_id}/cancel", headers=self.headers)
        self.assertEqual(resp.status_code, 200)
        resp = self.client.get(f"/api/v1/orders/{consignment_id}", headers=self.headers)
        self.assertEqual(resp.get_json()["data"]["order_status"], "cancelled")

        resp = self.client.delete(f"/api/v1/orders/{consignment_id}", headers=self.other_headers)
        self.assertEqual(resp.status_code, 401)

        resp = self.client.delete(f"/api/v1/orders/{consignment_id}", headers=self.headers)
        self.assertEqual(resp.status_code, 200)
        resp = self.client.get(f"/api/v1/orders/{consignment_id}", headers=self.headers)
        self.assertEqual(resp.status_code, 404)


class TestReferenceApi(CourierTestCase):
    def setUp(self):
        super().setUp()
        _, self.headers = self.signed_in()

    def test_city_crud(self):
        resp = self.client.post("/api/v1/cities", json={"name": "Chattogram"}, headers=self.headers)
        self.assertEqual(resp.status_code, 201)
        city = resp.get_json()["data"]
        self.assertEqual(city["base_delivery_fee"], 100.0)

        resp = self.client.get("/api/v1/cities/name/Chattogram", headers=self.headers)
        self.assertEqual(resp.get_json()["data"]["id"], city["id"])

        resp = self.client.put(f"/api/v1/cities/{city['id']}",
                               json={"name": "Chittagong", "base_delivery_fee": 90},
                               headers=self.headers)
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.get_json()["data"]["base_delivery_fee"], 90.0)

        resp = self.client.delete(f"/api/v1/cities/{city['id']}", headers=self.headers)
        self.assertEqual(resp.status_code, 200)
        resp = self.client.get(f"/api/v1/cities/{city['id']}", headers=self.headers)
        self.assertEqual(resp.status_code, 404)

    def test_duplicate_city_name(self):
        self.client.post("/api/v1/cities", json={"name": "Sylhet"}, headers=self.headers)
        resp = self.client.post("/api/v1/cities", json={"name": "Sylhet"}, headers=self.headers)
        self.assertEqual(resp.status_code, 409)

    def test_list_limit_validation(self):
        resp = self.client.get("/api/v1/cities?limit=0", headers=self.headers)
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.get_json()["message"], "invalid limit parameter")

        resp = self.client.get("/api/v1/cities?offset=-1", headers=self.headers)
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.get_json()["message"], "invalid offset parameter")

    def test_store_requires_valid_phone(self):
        resp = self.client.post("/api/v1/stores",
                                json={"name": "Shop", "contact_phone": "12345"},
                                headers=self.headers)
        self.assertEqual(resp.status_code, 422)

        resp = self.client.post("/api/v1/stores",
                                json={"name": "Shop", "contact_phone": PHONE, "address": "Mirpur"},
                                headers=self.headers)
        self.assertEqual(resp.status_code, 201)
        store_id = resp.get_json()["data"]["id"]

        # phone may be left out on update
        resp = self.client.put(f"/api/v1/stores/{store_id}", json={"name": "Shop 2"},
                               headers=self.headers)
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.get_json()["data"]["contact_phone"], PHONE)

    def test_zones_are_unique_per_city(self):
        dhaka = self.create_city("Dhaka")
        khulna = self.create_city("Khulna")

        resp = self.client.post("/api/v1/zones", json={"city_id": dhaka.id, "name": "Gulshan"},
                                headers=self.headers)
        self.assertEqual(resp.status_code, 201)
        resp = self.client.post("/api/v1/zones", json={"city_id": dhaka.id, "name": "Gulshan"},
                                headers=self.headers)
        self.assertEqual(resp.status_code, 409)
        resp = self.client.post("/api/v1/zones", json={"city_id": khulna.id, "name": "Gulshan"},
                                headers=self.headers)
        self.assertEqual(resp.status_code, 201)

        resp = self.client.get(f"/api/v1/zones/city/{dhaka.id}", headers=self.headers)
        self.assertEqual([z["name"] for z in resp.get_json()["data"]], ["Gulshan"])

    def test_zone_needs_existing_city(self):
        resp = self.client.post("/api/v1/zones", json={"city_id": 9999, "name": "Nowhere"},
                                headers=self.headers)
        self.assertEqual(resp.status_code, 422)
        self.assertIn("city_id", resp.get_json()["errors"])

        resp = self.client.get("/api/v1/zones/city/9999", headers=self.headers)
        self.assertEqual(resp.status_code, 404)

    def test_seeded_types_are_listed(self):
        resp = self.client.get("/api/v1/item-types", headers=self.headers)
        self.assertEqual([t["name"] for t in resp.get_json()["data"]], ["Parcel", "Document"])

        resp = self.client.get("/api/v1/delivery-types", headers=self.headers)
        self.assertEqual([t["name"] for t in resp.get_json()["data"]],
                         ["Normal Delivery", "On Demand Delivery"])

    def test_item_type_name_length(self):
        resp = self.client.post("/api/v1/item-types", json={"name": "x" * 51}, headers=self.headers)
        self.assertEqual(resp.status_code, 422)

        resp = self.client.post("/api/v1/item-types", json={"name": "Fragile"}, headers=self.headers)
        self.assertEqual(resp.status_code, 201)

    def test_reference_routes_need_session(self):
        resp = self.client.get("/api/v1/stores")
        self.assertEqual(resp.status_code, 401)


class TestUsersApi(CourierTestCase):
    def test_register_and_lookup(self):
        user_id, email = self.register(email="  Someone@Example.com ")
        self.assertEqual(email.strip().lower(), "someone@example.com")
        headers = self.auth_headers(self.login("someone@example.com"))

        resp = self.client.get(f"/api/v1/users/{user_id}", headers=headers)
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.get_json()["data"]["email"], "someone@example.com")
        self.assertNotIn("password_hash", resp.get_json()["data"])

        resp = self.client.get("/api/v1/users/email/someone@example.com", headers=headers)
        self.assertEqual(resp.get_json()["data"]["id"], user_id)

    def test_duplicate_registration(self):
        _, email = self.register()
        resp = self.client.post("/api/v1/users", json={"email": email, "password": PASSWORD})
        self.assertEqual(resp.status_code, 409)

    def test_short_password(self):
        resp = self.client.post("/api/v1/users",
                                json={"email": self.unique_email(), "password": "abc"})
        self.assertEqual(resp.status_code, 422)
        self.assertIn("password", resp.get_json()["errors"])

    def test_update_email_requires_password(self):
        user_id, headers = self.signed_in()
        new_email = self.unique_email("renamed")

        resp = self.client.put(f"/api/v1/users/{user_id}",
                               json={"email": new_email, "password": "wrong-password"},
                               headers=headers)
        self.assertEqual(resp.status_code, 401)

        resp = self.client.put(f"/api/v1/users/{user_id}",
                               json={"email": new_email, "password": PASSWORD},
                               headers=headers)
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.get_json()["data"]["email"], new_email)

    def test_list_and_delete(self):
        user_id, headers = self.signed_in()
        other_id, _ = self.register()

        resp = self.client.get("/api/v1/users?limit=10", headers=headers)
        self.assertEqual({u["id"] for u in resp.get_json()["data"]}, {user_id, other_id})

        resp = self.client.delete(f"/api/v1/users/{other_id}", headers=headers)
        self.assertEqual(resp.status_code, 200)
        resp = self.client.get(f"/api/v1/users/{other_id}", headers=headers)
        self.assertEqual(resp.status_code, 404)


    def test_deleted_user_tokens_stop_working(self):
        _, headers = self.signed_in()
        other_id, other_email = self.register()
        other_headers = self.auth_headers(self.login(other_email))

        # 1. Token works while the account exists
        resp = self.client.get("/api/v1/auth/session", headers=other_headers)
        self.assertEqual(resp.status_code, 200)

        # 2. Delete the account
        resp = self.client.delete(f"/api/v1/users/{other_id}", headers=headers)
        self.assertEqual(resp.status_code, 200)

        # 3. Its session is gone with it
        resp = self.client.get("/api/v1/auth/session", headers=other_headers)
        self.assertEqual(resp.status_code, 403)


class TestHealth(CourierTestCase):
    def test_health(self):
        resp = self.client.get("/health")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.get_json()["status"], "healthy")

    def test_api_docs_cover_reference_routes(self):
        resp = self.client.get("/apispec_1.json")
        self.assertEqual(resp.status_code, 200)
        paths = resp.get_json()["paths"]

        for prefix in ("cities", "stores", "item-types", "delivery-types"):
            self.assertLessEqual({"get", "post"}, set(paths[f"/api/v1/{prefix}"]))
            self.assertLessEqual({"get", "put", "delete"}, set(paths[f"/api/v1/{prefix}/{{id}}"]))
        self.assertLessEqual({"get", "put", "delete"}, set(paths["/api/v1/zones/{zone_id}"]))
        self.assertEqual(paths["/api/v1/item-types"]["post"]["tags"], ["Item Types"])

    def test_unknown_route_uses_envelope(self):
        resp = self.client.get("/api/v1/nowhere")
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.get_json()["type"], "error")


if __name__ == '__main__':
    unittest.main()

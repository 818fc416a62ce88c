"""
Integration tests for API endpoints.
"""

import pytest
from httpx import AsyncClient, ASGITransport

from snafles.api.main import create_app

from tests.conftest import bearer, get_test_settings

pytestmark = pytest.mark.asyncio


class TestHealthEndpoints:
    """Tests for health check endpoints."""

    async def test_health_check(self, client):
        response = await client.get("/api/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "OK"
        assert data["message"] == "Mock API Server Running"
        assert data["uptime"] >= 0

    async def test_cors_preflight_from_frontend(self, client):
        response = await client.options(
            "/api/products",
            headers={
                "Origin": "http://localhost:5173",
                "Access-Control-Request-Method": "GET",
            },
        )

        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == "http://localhost:5173"

    async def test_request_id_echoed(self, client):
        response = await client.get("/api/products", headers={"X-Request-ID": "abc123"})
        assert response.headers["X-Request-ID"] == "abc123"


class TestServiceSeeding:
    """Tests for lazy fixture seeding."""

    async def test_create_app_defers_seeding(self):
        app = create_app(get_test_settings())
        services = app.state.services

        assert services._user_repository is None
        assert services._product_repository is None

        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            response = await ac.post(
                "/api/auth/login", json={"email": "testexample@gmail.com", "password": "123"}
            )

        assert response.status_code == 200
        assert services._user_repository is not None
        assert services._product_repository is None


class TestAuthEndpoints:
    """Tests for registration, login and identity."""

    async def test_login_then_me(self, client):
        login = await client.post(
            "/api/auth/login",
            json={"email": "demo@snafles.com", "password": "demo123"},
        )
        assert login.status_code == 200
        body = login.json()
        assert body["message"] == "Login successful"
        assert body["user"]["role"] == "customer"

        me = await client.get("/api/auth/me", headers=bearer(body["token"]))

        assert me.status_code == 200
        user = me.json()["user"]
        assert user["id"] == body["user"]["id"]
        assert user["loyaltyPoints"] == 1250
        assert "passwordHash" not in user

    async def test_register(self, client, services):
        before = len(services.user_repository)

        response = await client.post(
            "/api/auth/register",
            json={"name": "New Person", "email": "New@Example.com", "password": "secret1"},
        )

        assert response.status_code == 201
        body = response.json()
        assert body["user"]["email"] == "new@example.com"
        assert body["user"]["role"] == "customer"
        assert len(services.user_repository) == before + 1

        me = await client.get("/api/auth/me", headers=bearer(body["token"]))
        assert me.json()["user"]["name"] == "New Person"

    async def test_duplicate_registration(self, client, services):
        before = len(services.user_repository)

        response = await client.post(
            "/api/auth/register",
            json={"name": "Sarah Again", "email": "demo@snafles.com", "password": "secret1"},
        )

        assert response.status_code == 400
        assert response.json()["message"] == "User already exists with this email"
        assert len(services.user_repository) == before

    async def test_register_validation(self, client):
        response = await client.post(
            "/api/auth/register",
            json={"name": "X", "email": "not-an-email", "password": "123"},
        )

        assert response.status_code == 400
        body = response.json()
        assert body["message"] == "Validation Error"
        fields = {e["field"] for e in body["errors"]}
        assert {"name", "email", "password"} <= fields

    async def test_wrong_password(self, client):
        response = await client.post(
            "/api/auth/login",
            json={"email": "demo@snafles.com", "password": "nope"},
        )

        assert response.status_code == 400
        assert response.json() == {"message": "Invalid credentials", "code": "INVALID_CREDENTIALS"}

    async def test_vendor_login(self, client):
        ok = await client.post(
            "/api/auth/vendor-login",
            json={"email": "vendor@artisancrafts.com", "password": "vendor123"},
        )
        denied = await client.post(
            "/api/auth/vendor-login",
            json={"email": "demo@snafles.com", "password": "demo123"},
        )

        assert ok.status_code == 200
        assert ok.json()["user"]["role"] == "vendor"
        assert denied.status_code == 400
        assert denied.json()["message"] == "Invalid vendor credentials"

    async def test_me_without_token(self, client):
        response = await client.get("/api/auth/me")

        assert response.status_code == 401
        assert response.json()["message"] == "No token, authorization denied"
        assert response.headers["WWW-Authenticate"] == "Bearer"

    async def test_me_with_bad_token(self, client):
        response = await client.get("/api/auth/me", headers=bearer("garbage"))

        assert response.status_code == 401
        assert response.json()["message"] == "Token is not valid"

    async def test_token_for_deleted_user(self, client, services):
        token = services.token_codec.issue("ghost")
        response = await client.get("/api/auth/me", headers=bearer(token))

        assert response.status_code == 401

    async def test_change_password(self, client, customer_headers):
        wrong = await client.post(
            "/api/auth/change-password",
            json={"currentPassword": "nope", "newPassword": "brandnew1"},
            headers=customer_headers,
        )
        assert wrong.status_code == 400
        assert wrong.json()["message"] == "Current password is incorrect"

        ok = await client.post(
            "/api/auth/change-password",
            json={"currentPassword": "demo123", "newPassword": "brandnew1"},
            headers=customer_headers,
        )
        assert ok.status_code == 200

        login = await client.post(
            "/api/auth/login",
            json={"email": "demo@snafles.com", "password": "brandnew1"},
        )
        assert login.status_code == 200

    async def test_verify_password(self, client, customer_headers):
        good = await client.post(
            "/api/auth/verify-password", json={"password": "demo123"}, headers=customer_headers
        )
        bad = await client.post(
            "/api/auth/verify-password", json={"password": "x"}, headers=customer_headers
        )

        assert good.json() == {"isValid": True}
        assert bad.json() == {"isValid": False}


class TestProfileEndpoints:
    """Tests for profile read/update."""

    async def test_preferences_merge(self, client, customer_headers):
        response = await client.put(
            "/api/users/profile",
            json={"preferences": {"smsNotifications": True}},
            headers=customer_headers,
        )

        assert response.status_code == 200
        prefs = response.json()["user"]["preferences"]
        assert prefs == {"newsletter": True, "smsNotifications": True}

    async def test_update_visible_through_me(self, client, customer_headers):
        await client.put(
            "/api/auth/profile",
            json={"name": "Sarah J.", "phone": "+1 555 0000"},
            headers=customer_headers,
        )

        me = await client.get("/api/users/profile", headers=customer_headers)
        assert me.json()["user"]["name"] == "Sarah J."
        assert me.json()["user"]["phone"] == "+1 555 0000"


class TestProductEndpoints:
    """Tests for product listing, detail and reviews."""

    async def test_category_pagination(self, client):
        response = await client.get("/api/products", params={"category": "Jewelry", "limit": 1})

        assert response.status_code == 200
        body = response.json()
        assert len(body["products"]) == 1
        assert body["pagination"] == {
            "currentPage": 1,
            "totalPages": 2,
            "totalProducts": 2,
            "hasNext": True,
            "hasPrev": False,
        }

    async def test_category_all_is_unfiltered(self, client):
        response = await client.get("/api/products", params={"category": "all"})
        assert response.json()["pagination"]["totalProducts"] == 4

    async def test_search_and_price_sort(self, client):
        response = await client.get(
            "/api/products", params={"search": "silver", "sortBy": "price-high"}
        )

        ids = [p["id"] for p in response.json()["products"]]
        assert ids == ["jewelry-001", "clothing-001"]

    async def test_price_range(self, client):
        response = await client.get("/api/products", params={"minPrice": 40, "maxPrice": 90})

        ids = {p["id"] for p in response.json()["products"]}
        assert ids == {"jewelry-001", "decor-001"}

    async def test_featured(self, client):
        featured = await client.get("/api/products", params={"featured": "true"})
        not_featured = await client.get("/api/products", params={"featured": "false"})

        assert {p["id"] for p in featured.json()["products"]} == {"jewelry-001", "decor-001"}
        assert not_featured.json()["pagination"]["totalProducts"] == 4

    async def test_non_positive_page_is_first_page(self, client):
        response = await client.get("/api/products", params={"page": 0, "limit": -5})

        pagination = response.json()["pagination"]
        assert pagination["currentPage"] == 1
        assert pagination["hasPrev"] is False

    async def test_unknown_sort_rejected(self, client):
        response = await client.get("/api/products", params={"sortBy": "cheapest"})
        assert response.status_code == 400

    async def test_non_finite_price_rejected(self, client):
        nan = await client.get("/api/products", params={"minPrice": "nan", "maxPrice": "nan"})
        inf = await client.get("/api/products", params={"maxPrice": "inf"})

        assert nan.status_code == 400
        assert inf.status_code == 400

    async def test_product_detail_embeds_vendor(self, client):
        response = await client.get("/api/products/jewelry-001")

        assert response.status_code == 200
        body = response.json()
        assert body["vendor"]["id"] == "vendor-001"
        assert body["vendor"]["name"] == "Artisan Crafts Co."

    async def test_product_not_found(self, client):
        response = await client.get("/api/products/nope")

        assert response.status_code == 404
        assert response.json() == {"message": "Product not found", "code": "NOT_FOUND"}

    async def test_add_review(self, client, customer_headers):
        response = await client.post(
            "/api/products/art-001/reviews",
            json={"rating": 4, "comment": "Lovely colours"},
            headers=customer_headers,
        )

        assert response.status_code == 201
        body = response.json()
        assert body["rating"] == 4.0
        assert body["reviews"] == 1
        assert body["customerReviews"][0]["name"] == "Sarah Johnson"

    async def test_review_requires_auth(self, client):
        response = await client.post(
            "/api/products/art-001/reviews", json={"rating": 4, "comment": "x"}
        )
        assert response.status_code == 401

    async def test_review_rating_bounds(self, client, customer_headers):
        response = await client.post(
            "/api/products/art-001/reviews",
            json={"rating": 6, "comment": "x"},
            headers=customer_headers,
        )
        assert response.status_code == 400


class TestVendorEndpoints:
    """Tests for vendor browsing."""

    async def test_list_by_category(self, client):
        response = await client.get("/api/vendors", params={"category": "Home"})

        names = [v["name"] for v in response.json()["vendors"]]
        assert names == ["Creative Home Studio", "Jaipur Block Prints"]

    async def test_verified_only(self, client):
        response = await client.get("/api/vendors", params={"verified": "true"})
        assert response.json()["pagination"]["totalVendors"] == 2

    async def test_location(self, client):
        response = await client.get("/api/vendors", params={"location": "mumbai"})
        assert [v["id"] for v in response.json()["vendors"]] == ["vendor-001"]

    async def test_vendor_detail(self, client):
        response = await client.get("/api/vendors/vendor-001")

        body = response.json()
        assert body["vendor"]["isVerified"] is True
        assert {p["id"] for p in body["products"]} == {"jewelry-001", "clothing-001", "art-001"}

    async def test_vendor_not_found(self, client):
        response = await client.get("/api/vendors/vendor-999")
        assert response.status_code == 404
        assert response.json()["message"] == "Vendor not found"


class TestAdminEndpoints:
    """Tests for admin-only endpoints."""

    async def test_customer_is_forbidden(self, client, customer_headers):
        response = await client.get("/api/admin/dashboard", headers=customer_headers)

        assert response.status_code == 403
        assert response.json() == {
            "message": "Access denied. Admin role required.",
            "code": "FORBIDDEN",
        }

    async def test_dashboard(self, client, admin_headers):
        response = await client.get("/api/admin/dashboard", headers=admin_headers)

        assert response.status_code == 200
        stats = response.json()["stats"]
        assert stats["totalUsers"] == 2
        assert stats["totalVendors"] == 1
        assert stats["totalProducts"] == 4
        assert stats["verifiedVendors"] == 1
        assert stats["pendingVendorApprovals"] == 0

        recent = response.json()["recentActivity"]["users"]
        assert [u["id"] for u in recent] == ["2", "1"]
        assert all("passwordHash" not in u for u in recent)

    async def test_dashboard_counts_unverified_vendor_users(self, client, admin_headers):
        await client.put(
            "/api/admin/vendors/vendor-001/status",
            json={"isVerified": False},
            headers=admin_headers,
        )

        response = await client.get("/api/admin/dashboard", headers=admin_headers)

        stats = response.json()["stats"]
        assert stats["totalVendors"] == 1
        assert stats["verifiedVendors"] == 0
        assert stats["pendingVendorApprovals"] == 1

    async def test_list_users_by_role(self, client, admin_headers):
        response = await client.get(
            "/api/admin/users", params={"role": "vendor"}, headers=admin_headers
        )

        users = response.json()["users"]
        assert [u["email"] for u in users] == ["vendor@artisancrafts.com"]
        assert response.json()["pagination"]["totalUsers"] == 1

    async def test_list_users_by_status(self, client, admin_headers):
        await client.put(
            "/api/admin/users/2/status", json={"isActive": False}, headers=admin_headers
        )

        inactive = await client.get(
            "/api/admin/users", params={"status": "inactive"}, headers=admin_headers
        )
        active = await client.get(
            "/api/admin/users", params={"status": "active"}, headers=admin_headers
        )

        assert inactive.json()["pagination"]["totalUsers"] == 1
        assert [u["id"] for u in inactive.json()["users"]] == ["2"]
        assert active.json()["pagination"]["totalUsers"] == 3

    async def test_unknown_user_status_filter(self, client, admin_headers):
        response = await client.get(
            "/api/admin/users", params={"status": "banned"}, headers=admin_headers
        )
        assert response.status_code == 400

    async def test_deactivate_user_revokes_access(self, client, services, admin_headers):
        customer_token = services.token_codec.issue("2")

        response = await client.put(
            "/api/admin/users/2/status", json={"isActive": False}, headers=admin_headers
        )
        assert response.status_code == 200
        assert response.json()["user"]["isActive"] is False

        me = await client.get("/api/auth/me", headers=bearer(customer_token))
        assert me.status_code == 403

        login = await client.post(
            "/api/auth/login", json={"email": "testexample@gmail.com", "password": "123"}
        )
        assert login.status_code == 403

    async def test_admin_cannot_deactivate_self(self, client, admin_headers):
        response = await client.put(
            "/api/admin/users/3/status", json={"isActive": False}, headers=admin_headers
        )
        assert response.status_code == 400

    async def test_unknown_user_status(self, client, admin_headers):
        response = await client.put(
            "/api/admin/users/404/status", json={"isActive": True}, headers=admin_headers
        )
        assert response.status_code == 404

    async def test_verify_vendor(self, client, admin_headers):
        response = await client.put(
            "/api/admin/vendors/vendor-003/status",
            json={"isVerified": True},
            headers=admin_headers,
        )

        assert response.status_code == 200
        assert response.json()["vendor"]["isVerified"] is True

        listing = await client.get("/api/vendors", params={"verified": "true"})
        assert listing.json()["pagination"]["totalVendors"] == 3

    async def test_empty_vendor_status_update(self, client, admin_headers):
        response = await client.put(
            "/api/admin/vendors/vendor-003/status", json={}, headers=admin_headers
        )
        assert response.status_code == 400

    async def test_list_vendors_newest_first(self, client, admin_headers):
        response = await client.get("/api/admin/vendors", headers=admin_headers)

        assert response.status_code == 200
        assert [v["id"] for v in response.json()["vendors"]] == [
            "vendor-003",
            "vendor-002",
            "vendor-001",
        ]
        assert response.json()["pagination"]["totalVendors"] == 3

    async def test_list_vendors_by_status(self, client, admin_headers):
        unverified = await client.get(
            "/api/admin/vendors", params={"status": "unverified"}, headers=admin_headers
        )
        verified = await client.get(
            "/api/admin/vendors", params={"status": "verified"}, headers=admin_headers
        )

        assert [v["id"] for v in unverified.json()["vendors"]] == ["vendor-003"]
        assert verified.json()["pagination"]["totalVendors"] == 2

    async def test_list_vendors_search(self, client, admin_headers):
        response = await client.get(
            "/api/admin/vendors", params={"search": "block print"}, headers=admin_headers
        )
        assert [v["name"] for v in response.json()["vendors"]] == ["Jaipur Block Prints"]

    async def test_list_vendors_requires_admin(self, client, customer_headers):
        response = await client.get("/api/admin/vendors", headers=customer_headers)

        assert response.status_code == 403
        assert response.json()["code"] == "FORBIDDEN"


class TestVendorAnalyticsEndpoints:
    """Tests for vendor-only analytics."""

    async def test_dashboard_scoped_to_own_products(self, client, vendor_headers):
        response = await client.get("/api/vendor/analytics/dashboard", headers=vendor_headers)

        assert response.status_code == 200
        body = response.json()
        assert body["vendor"]["id"] == "vendor-001"
        assert body["stats"]["totalProducts"] == 3
        assert body["stats"]["lowStockProducts"] == 1
        assert all(p["vendor"] == "vendor-001" for p in body["recentProducts"])

    async def test_low_stock_filter(self, client, vendor_headers):
        response = await client.get(
            "/api/vendor/analytics/products",
            params={"status": "low_stock"},
            headers=vendor_headers,
        )
        assert [p["id"] for p in response.json()["products"]] == ["art-001"]

    async def test_admin_is_not_a_vendor(self, client, admin_headers):
        response = await client.get("/api/vendor/analytics/dashboard", headers=admin_headers)

        assert response.status_code == 403
        assert response.json()["message"] == "Access denied. Vendor role required."


class TestUploadEndpoints:
    """Tests for the upload placeholder."""

    async def test_image_upload(self, client, customer_headers):
        response = await client.post(
            "/api/uploads",
            files={"file": ("photo.png", b"\x89PNG\r\n\x1a\nfake", "image/png")},
            headers=customer_headers,
        )

        assert response.status_code == 201
        body = response.json()
        assert body["url"].startswith("/uploads/")
        assert body["url"].endswith("-photo.png")
        assert body["size"] == 12

    async def test_non_image_rejected(self, client, customer_headers):
        response = await client.post(
            "/api/uploads",
            files={"file": ("notes.txt", b"hello", "text/plain")},
            headers=customer_headers,
        )

        assert response.status_code == 400
        assert response.json()["message"] == "Only image files are allowed"


class TestErrorHandling:
    """Tests for the error envelope."""

    async def test_unknown_route(self, client):
        response = await client.get("/api/nowhere")

        assert response.status_code == 404
        assert response.json() == {"message": "Route not found", "code": "NOT_FOUND"}

    async def test_unhandled_exception(self, app):
        @app.get("/api/boom")
        async def boom():
            raise RuntimeError("kaboom")

        transport = ASGITransport(app=app, raise_app_exceptions=False)
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            response = await ac.get("/api/boom")

        assert response.status_code == 500
        assert response.json() == {
            "message": "Something went wrong!",
            "code": "INTERNAL_ERROR",
            "error": "Internal server error",
        }

    async def test_unhandled_exception_detail_in_development(self):
        app = create_app(get_test_settings(environment="development"))

        @app.get("/api/boom")
        async def boom():
            raise RuntimeError("kaboom")

        transport = ASGITransport(app=app, raise_app_exceptions=False)
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            response = await ac.get("/api/boom")

        assert response.status_code == 500
        assert response.json()["error"] == "kaboom"


class TestRateLimiting:
    """Tests for the rate limiting middleware."""

    async def test_limit_exceeded(self):
        app = create_app(get_test_settings(rate_limit_enabled=True, rate_limit_max_requests=2))

        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            first = await ac.get("/api/products")
            await ac.get("/api/products")
            blocked = await ac.get("/api/products")
            health = await ac.get("/api/health")

        assert first.headers["X-Rate-Limit-Remaining"] == "1"
        assert blocked.status_code == 429
        assert blocked.json()["code"] == "RATE_LIMIT_EXCEEDED"
        assert "Retry-After" in blocked.headers
        assert health.status_code == 200

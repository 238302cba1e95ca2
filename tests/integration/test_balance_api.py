"""Integration tests for balance and transaction endpoints"""

from datetime import timedelta
from decimal import Decimal
from unittest.mock import AsyncMock, patch
from uuid import uuid4

import pytest
from httpx import ASGITransport, AsyncClient

from settleease.core.exceptions import NotFoundError
from settleease.core.security import create_access_token
from settleease.main import app
from settleease.schemas.balance import PersonBalance, SettlementSnapshot
from settleease.schemas.settlement import CalculatedTransaction


class TestAuthentication:
    """Test bearer token handling"""

    @pytest.mark.asyncio
    async def test_missing_token(self, client: AsyncClient):
        response = await client.get("/api/v1/balances")

        assert response.status_code == 401
        assert response.headers["www-authenticate"] == "Bearer"

    @pytest.mark.asyncio
    async def test_garbage_token(self, client: AsyncClient):
        response = await client.get(
            "/api/v1/balances", headers={"Authorization": "Bearer not-a-jwt"}
        )

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_expired_token(self, client: AsyncClient):
        token = create_access_token({"sub": str(uuid4())}, expires_delta=timedelta(minutes=-5))

        response = await client.get(
            "/api/v1/balances", headers={"Authorization": f"Bearer {token}"}
        )

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_token_without_uuid_subject(self, client: AsyncClient):
        token = create_access_token({"sub": "someone"})

        response = await client.get(
            "/api/v1/balances", headers={"Authorization": f"Bearer {token}"}
        )

        assert response.status_code == 401

    @pytest.mark.asyncio
    @patch("settleease.api.v1.balances.BalanceService")
    async def test_valid_token(self, mock_service, client: AsyncClient, auth_headers):
        mock_service.get_net_balances = AsyncMock(return_value=[])

        response = await client.get("/api/v1/balances", headers=auth_headers)

        assert response.status_code == 200
        assert response.json() == {"balances": []}


class TestGetBalances:
    """Test balance endpoints"""

    @pytest.mark.asyncio
    @patch("settleease.api.v1.balances.BalanceService")
    async def test_get_balances(self, mock_service, authed_client: AsyncClient, alice, bob):
        mock_service.get_net_balances = AsyncMock(
            return_value=[
                PersonBalance(person=alice, balance=Decimal("30.00"), status="owed"),
                PersonBalance(person=bob, balance=Decimal("-30.00"), status="owes"),
            ]
        )

        response = await authed_client.get("/api/v1/balances")

        assert response.status_code == 200
        data = response.json()["balances"]
        assert data[0]["person"]["name"] == "Alice"
        assert Decimal(data[0]["balance"]) == Decimal("30.00")
        assert data[1]["status"] == "owes"

    @pytest.mark.asyncio
    @patch("settleease.api.v1.balances.BalanceService")
    async def test_summary_bypasses_cache(self, mock_service, authed_client: AsyncClient):
        mock_service.get_snapshot = AsyncMock(
            return_value=SettlementSnapshot(
                data_hash="a" * 64,
                balances=[],
                pairwise_transactions=[],
                simplified_transactions=[],
            )
        )

        response = await authed_client.get("/api/v1/balances/summary?use_cache=false")

        assert response.status_code == 200
        assert response.json()["data_hash"] == "a" * 64
        assert mock_service.get_snapshot.await_args.kwargs["use_cache"] is False

    @pytest.mark.asyncio
    @patch("settleease.api.v1.balances.BalanceService")
    async def test_person_not_found_envelope(self, mock_service, authed_client: AsyncClient):
        person_id = uuid4()
        mock_service.get_person_settlement = AsyncMock(
            side_effect=NotFoundError(f"Person with ID {person_id} not found")
        )

        response = await authed_client.get(f"/api/v1/balances/people/{person_id}")

        assert response.status_code == 404
        error = response.json()["error"]
        assert error["type"] == "NotFoundError"
        assert str(person_id) in error["message"]
        assert error["path"] == f"/api/v1/balances/people/{person_id}"

    @pytest.mark.asyncio
    async def test_person_invalid_id(self, authed_client: AsyncClient):
        response = await authed_client.get("/api/v1/balances/people/not-a-uuid")

        assert response.status_code == 422

    @pytest.mark.asyncio
    @patch("settleease.api.v1.balances.BalanceService")
    async def test_unexpected_error_envelope(self, mock_service, authed_client: AsyncClient):
        """Unhandled errors use the same envelope as application errors"""
        mock_service.get_net_balances = AsyncMock(side_effect=RuntimeError("boom"))
        transport = ASGITransport(app=app, raise_app_exceptions=False)

        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            response = await ac.get("/api/v1/balances")

        assert response.status_code == 500
        assert response.json() == {
            "error": {
                "message": "Internal server error",
                "type": "InternalServerError",
                "path": "/api/v1/balances",
            }
        }


class TestTransactions:
    """Test transaction endpoints"""

    @pytest.mark.asyncio
    @patch("settleease.api.v1.transactions.BalanceService")
    async def test_simplified_uses_wire_names(
        self, mock_service, authed_client: AsyncClient, alice, bob
    ):
        mock_service.get_simplified_transactions = AsyncMock(
            return_value=[
                CalculatedTransaction(from_id=bob.id, to_id=alice.id, amount=Decimal("30.00"))
            ]
        )

        response = await authed_client.get("/api/v1/transactions/simplified")

        assert response.status_code == 200
        transaction = response.json()["transactions"][0]
        assert transaction["from"] == str(bob.id)
        assert transaction["to"] == str(alice.id)
        assert Decimal(transaction["amount"]) == Decimal("30.00")

    @pytest.mark.asyncio
    @patch("settleease.api.v1.transactions.BalanceService")
    async def test_pairwise_includes_expense_ids(
        self, mock_service, authed_client: AsyncClient, alice, bob
    ):
        expense_id = uuid4()
        mock_service.get_pairwise_transactions = AsyncMock(
            return_value=[
                CalculatedTransaction(
                    from_id=bob.id,
                    to_id=alice.id,
                    amount=Decimal("15.00"),
                    contributing_expense_ids=[expense_id],
                )
            ]
        )

        response = await authed_client.get("/api/v1/transactions/pairwise")

        assert response.status_code == 200
        transaction = response.json()["transactions"][0]
        assert transaction["contributingExpenseIds"] == [str(expense_id)]


class TestServiceEndpoints:
    """Test root and health endpoints"""

    @pytest.mark.asyncio
    async def test_root(self, client: AsyncClient):
        response = await client.get("/")

        assert response.status_code == 200
        assert response.json()["docs_url"] == "/docs"

    @pytest.mark.asyncio
    @patch("settleease.main.CacheService")
    async def test_health_without_redis(self, mock_cache, client: AsyncClient):
        mock_cache.health_check = AsyncMock(return_value=False)

        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "cache": "unavailable"}

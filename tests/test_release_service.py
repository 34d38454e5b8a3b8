"""Tests for quarterly budget releases."""
import uuid
from datetime import date
from decimal import Decimal

import pytest
from fastapi import HTTPException

from budget_ledger.services.release_service import (
    create_release,
    delete_release,
    get_release,
    list_releases,
)
from tests.conftest import scalar_result, scalars_result
from tests.factories import make_allocation, make_release


class TestCreateRelease:
    @pytest.mark.asyncio
    async def test_defaults_from_allocation(self, mock_db):
        allocation = make_allocation(cost_center="CC-5", object_code="OC-1")
        mock_db.execute.return_value = scalar_result(allocation)

        release = await create_release(
            mock_db, {"allocation_id": allocation.id, "quarter": 2, "amount": Decimal("125.00")},
        )

        assert release.allocation_id == allocation.id
        assert release.financial_year == allocation.financial_year
        assert release.cost_center == "CC-5"
        assert release.object_code == "OC-1"
        assert release.type == "regular"
        assert release.date_released == date.today()
        mock_db.add.assert_called_once_with(release)
        mock_db.refresh.assert_awaited_once_with(release)

    @pytest.mark.asyncio
    async def test_does_not_touch_allocation_amounts(self, mock_db):
        allocation = make_allocation(total_allocation="1000")
        mock_db.execute.return_value = scalar_result(allocation)

        await create_release(
            mock_db, {"allocation_id": allocation.id, "quarter": 1, "amount": Decimal("400")},
        )

        assert allocation.total_allocation == Decimal("1000")

    @pytest.mark.asyncio
    async def test_unknown_allocation(self, mock_db):
        mock_db.execute.return_value = scalar_result(None)
        with pytest.raises(HTTPException) as exc_info:
            await create_release(
                mock_db, {"allocation_id": uuid.uuid4(), "quarter": 1, "amount": Decimal("1")},
            )
        assert exc_info.value.status_code == 400

    @pytest.mark.asyncio
    async def test_financial_year_mismatch(self, mock_db):
        allocation = make_allocation(financial_year="2024-25")
        mock_db.execute.return_value = scalar_result(allocation)
        with pytest.raises(HTTPException) as exc_info:
            await create_release(mock_db, {
                "allocation_id": allocation.id,
                "quarter": 1,
                "amount": Decimal("1"),
                "financial_year": "2023-24",
            })
        assert exc_info.value.status_code == 400
        mock_db.add.assert_not_called()


class TestReadAndDelete:
    @pytest.mark.asyncio
    async def test_list(self, mock_db):
        allocation = make_allocation()
        releases = [make_release(allocation=allocation), make_release(allocation=allocation, quarter=2)]
        mock_db.execute.return_value = scalars_result(releases)

        assert await list_releases(mock_db, allocation_id=allocation.id) == releases

    @pytest.mark.asyncio
    async def test_get_missing(self, mock_db):
        with pytest.raises(HTTPException) as exc_info:
            await get_release(mock_db, uuid.uuid4())
        assert exc_info.value.status_code == 404

    @pytest.mark.asyncio
    async def test_delete(self, mock_db):
        release = make_release(allocation=make_allocation())
        mock_db.get.return_value = release

        await delete_release(mock_db, release.id)

        mock_db.delete.assert_awaited_once_with(release)

from __future__ import annotations

import httpx
import pytest

from mowerdash.services import (
    AuthorizationExpired,
    AutomowerClient,
    Mower,
    MowerAction,
    OperationError,
)

from conftest import API_BASE, mower_resource


def test_mower_from_resource_reads_nested_attributes() -> None:
    mower = Mower.from_resource(mower_resource(battery=42, activity="MOWING"))

    assert mower == Mower(
        id="mower-1",
        name="Lawn Ranger",
        model="AUTOMOWER 430X",
        activity="MOWING",
        state="RESTRICTED",
        battery_percent=42,
    )


def test_mower_without_attributes_keeps_id() -> None:
    mower = Mower.from_resource({"id": "bare-mower"})

    assert mower.id == "bare-mower"
    assert mower.name is None and mower.battery_percent is None


def test_action_payloads() -> None:
    assert MowerAction.start(30).payload() == {
        "data": {"type": "Start", "attributes": {"duration": 30}}
    }
    assert MowerAction.park(90).payload() == {
        "data": {"type": "Park", "attributes": {"duration": 90}}
    }
    assert MowerAction.park().payload() == {"data": {"type": "ParkUntilFurtherNotice"}}


def test_action_durations_must_be_positive() -> None:
    with pytest.raises(ValueError):
        MowerAction.start(0)
    with pytest.raises(ValueError):
        MowerAction.park(-5)


def test_unknown_envelope_is_rejected() -> None:
    with pytest.raises(ValueError):
        AutomowerClient(httpx.AsyncClient(), api_base=API_BASE, api_key="k", envelope="xml")


@pytest.mark.asyncio
async def test_list_mowers_sends_provider_headers(amc, cloud) -> None:
    cloud.seed("A1", "R1")

    mowers = await amc.list_mowers("A1")

    assert [m.id for m in mowers] == ["mower-1"]
    request = cloud.api_requests[0]
    assert request.url == f"{API_BASE}/mowers"
    assert request.headers["Authorization"] == "Bearer A1"
    assert request.headers["Authorization-Provider"] == "husqvarna"
    assert request.headers["X-Api-Key"] == "test-client"


@pytest.mark.asyncio
async def test_bare_envelope_reads_top_level_array(http, cloud) -> None:
    cloud.seed("A1", "R1")
    cloud.envelope = "bare"
    client = AutomowerClient(http, api_base=API_BASE, api_key="test-client", envelope="bare")

    mowers = await client.list_mowers("A1")

    assert [m.name for m in mowers] == ["Lawn Ranger"]


@pytest.mark.asyncio
async def test_envelope_mismatch_is_an_operation_error(amc, cloud) -> None:
    cloud.seed("A1", "R1")
    cloud.envelope = "bare"

    with pytest.raises(OperationError) as excinfo:
        await amc.list_mowers("A1")

    assert excinfo.value.status_code == 200


@pytest.mark.asyncio
async def test_unauthorized_is_classified_separately(amc, cloud) -> None:
    cloud.seed("A2", "R2")

    with pytest.raises(AuthorizationExpired) as excinfo:
        await amc.list_mowers("A1")

    assert excinfo.value.status_code == 401


@pytest.mark.asyncio
async def test_send_action_posts_json_api_document(amc, cloud) -> None:
    cloud.seed("A1", "R1")

    await amc.send_action("A1", "mower-1", MowerAction.start(45))

    assert cloud.actions == [
        {
            "path": "/v1/mowers/mower-1/actions",
            "content_type": "application/vnd.api+json",
            "payload": {"data": {"type": "Start", "attributes": {"duration": 45}}},
        }
    ]


@pytest.mark.asyncio
async def test_timeout_becomes_operation_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
        client = AutomowerClient(http, api_base=API_BASE, api_key="test-client")
        with pytest.raises(OperationError) as excinfo:
            await client.list_mowers("A1")

    assert excinfo.value.status_code is None
    assert isinstance(excinfo.value.__cause__, httpx.ReadTimeout)

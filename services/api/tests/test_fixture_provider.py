import httpx
import pytest
from app.core.config import DEFAULT_FIXTURE_STORES_PATH, Settings
from app.services.pharmacy.errors import (
    AggregationError,
    UpstreamDecodeError,
    UpstreamNetworkError,
)
from app.services.pharmacy.factory import build_aggregator, get_clients
from app.services.pharmacy.fixture_provider import (
    FixtureData,
    FixtureSlotClient,
    FixtureStoreClient,
)
from app.services.pharmacy.store_client import RiteAidStoreClient


@pytest.mark.asyncio
async def test_fixture_clients_read_bundled_data():
    data = FixtureData(str(DEFAULT_FIXTURE_STORES_PATH))
    stores = FixtureStoreClient(data)
    slots = FixtureSlotClient(data)

    locations = await stores.lookup("10001")
    assert [loc.id for loc in locations] == [100, 200]
    assert await slots.check_availability(100) is True
    assert await slots.check_availability(200) is False
    assert await stores.lookup("99999") == []


@pytest.mark.asyncio
async def test_fixture_unknown_store_fails_probe(tmp_path):
    fixture = tmp_path / "f.json"
    fixture.write_text(
        '{"stores":{"1":[{"id":5,"address":"a","postal_code":"1","phone":"p"}]},"slots":{}}',
        encoding="utf-8",
    )
    data = FixtureData(str(fixture))

    with pytest.raises(UpstreamNetworkError):
        await FixtureSlotClient(data).check_availability(5)

    settings = Settings(PHARMACY_PROVIDER="fixture", FIXTURE_STORES_PATH=str(fixture))
    async with httpx.AsyncClient() as http:
        aggregator = build_aggregator(settings, http)
        with pytest.raises(AggregationError):
            await aggregator.aggregate("1")


def test_missing_fixture_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        FixtureData(str(tmp_path / "nope.json"))


@pytest.mark.asyncio
async def test_factory_selects_provider():
    async with httpx.AsyncClient() as http:
        stores, _ = get_clients(Settings(PHARMACY_PROVIDER="riteaid"), http)
        assert isinstance(stores, RiteAidStoreClient)
        assert stores.attr_filter == "PREF-112"
        assert stores.radius == 50

        with pytest.raises(ValueError):
            get_clients(Settings(PHARMACY_PROVIDER="walgreens"), http)


def test_concurrency_limit_setting():
    assert Settings(PROBE_CONCURRENCY_LIMIT="").probe_concurrency_limit is None
    assert Settings(PROBE_CONCURRENCY_LIMIT="0").probe_concurrency_limit is None
    assert Settings(PROBE_CONCURRENCY_LIMIT="8").probe_concurrency_limit == 8


@pytest.mark.asyncio
async def test_incomplete_fixture_store_fails_as_aggregation_error(tmp_path):
    fixture = tmp_path / "f.json"
    fixture.write_text(
        '{"stores":{"1":[{"id":5,"address":"a"}]},"slots":{"5":{"1":true,"2":true}}}',
        encoding="utf-8",
    )
    data = FixtureData(str(fixture))

    with pytest.raises(UpstreamDecodeError):
        await FixtureStoreClient(data).lookup("1")

    settings = Settings(PHARMACY_PROVIDER="fixture", FIXTURE_STORES_PATH=str(fixture))
    async with httpx.AsyncClient() as http:
        aggregator = build_aggregator(settings, http)
        with pytest.raises(AggregationError) as exc_info:
            await aggregator.aggregate("1")

    assert exc_info.value.stage == "resolve"
    assert isinstance(exc_info.value.cause, UpstreamDecodeError)
    assert "1" not in aggregator.cache

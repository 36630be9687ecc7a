from app.services.pharmacy.location_cache import LocationCache
from app.services.pharmacy.types import Location


def test_absent_until_put():
    cache = LocationCache()
    assert cache.get("10001") is None
    assert "10001" not in cache
    assert len(cache) == 0


def test_put_stores_immutable_sequence(main_st):
    cache = LocationCache()
    cache.put("10001", main_st)
    main_st.clear()

    cached = cache.get("10001")
    assert isinstance(cached, tuple)
    assert [loc.id for loc in cached] == [100, 200]


def test_last_write_wins(main_st):
    cache = LocationCache()
    cache.put("10001", main_st)
    replacement = [Location(id=999, address="9 Elm", postal_code="10001", phone="x")]
    cache.put("10001", replacement)

    assert [loc.id for loc in cache.get("10001")] == [999]
    assert len(cache) == 1


def test_keys_are_independent(main_st, beverly_hills):
    cache = LocationCache()
    cache.put("10001", main_st)
    assert cache.get("90210") is None

    cache.put("90210", beverly_hills)
    assert [loc.id for loc in cache.get("10001")] == [100, 200]
    assert [loc.id for loc in cache.get("90210")] == [300]

    cache.clear()
    assert len(cache) == 0

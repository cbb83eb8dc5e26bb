from app.models.system_setting import SystemSetting
from app.services.settings_cache import SettingsCache, load_settings_category


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


def test_defaults_are_returned_when_nothing_is_stored(db_session):
    settings = load_settings_category(db_session, "maintenance")
    assert settings["maintenance_mode"] is False


def test_cache_reads_through_until_ttl_or_invalidation(db_session):
    calls = []

    def loader(db, category):
        calls.append(category)
        return load_settings_category(db, category)

    clock = FakeClock()
    cache = SettingsCache(ttl_seconds=60, loader=loader, clock=clock)

    assert cache.get_value(db_session, "maintenance", "maintenance_mode") is False
    db_session.add(SystemSetting(category="maintenance", settings={"maintenance_mode": True}))
    db_session.commit()

    # Still served from the cache.
    assert cache.get_value(db_session, "maintenance", "maintenance_mode") is False
    assert calls == ["maintenance"]

    clock.now += 61
    assert cache.get_value(db_session, "maintenance", "maintenance_mode") is True
    assert len(calls) == 2

    db_session.get(SystemSetting, "maintenance").settings = {"maintenance_mode": False}
    db_session.commit()
    cache.invalidate("maintenance")
    assert cache.get_value(db_session, "maintenance", "maintenance_mode") is False
    assert len(calls) == 3


def test_returned_values_are_copies(db_session):
    cache = SettingsCache(ttl_seconds=60)
    first = cache.get(db_session, "academic")
    first["working_days"].append("Saturday")

    assert "Saturday" not in cache.get(db_session, "academic")["working_days"]


def test_invalidation_during_load_is_not_overwritten(db_session):
    calls = []

    def loader(db, category):
        calls.append(category)
        stale = load_settings_category(db, category)
        if len(calls) == 1:
            # A settings update commits and invalidates while this read is in flight.
            db.add(SystemSetting(category=category, settings={"maintenance_mode": True}))
            db.commit()
            cache.invalidate(category)
        return stale

    cache = SettingsCache(ttl_seconds=300, loader=loader, clock=FakeClock())

    assert cache.get_value(db_session, "maintenance", "maintenance_mode") is False
    assert cache.get_value(db_session, "maintenance", "maintenance_mode") is True
    assert len(calls) == 2


def test_clearing_everything_during_load_is_not_overwritten(db_session):
    calls = []

    def loader(db, category):
        calls.append(category)
        if len(calls) == 1:
            cache.invalidate()
        return load_settings_category(db, category)

    cache = SettingsCache(ttl_seconds=300, loader=loader, clock=FakeClock())

    cache.get(db_session, "general")
    cache.get(db_session, "general")
    assert len(calls) == 2

"""Tests for the persisted light/dark preference."""

import pytest

from cloudlocker.core.storage import MemoryStorage
from cloudlocker.core.theme import DARK, LIGHT, THEME_KEY, ThemeState


class TestInitialTheme:
    def test_defaults_to_light(self, storage):
        assert ThemeState(storage).theme == LIGHT

    def test_follows_system_when_nothing_saved(self, storage):
        assert ThemeState(storage, system_prefers_dark=lambda: True).theme == DARK

    def test_saved_value_wins_over_system(self):
        s = ThemeState(MemoryStorage({THEME_KEY: LIGHT}), system_prefers_dark=lambda: True)
        assert s.theme == LIGHT

    def test_invalid_saved_value_ignored(self):
        s = ThemeState(MemoryStorage({THEME_KEY: "purple"}), system_prefers_dark=lambda: True)
        assert s.theme == DARK


class TestChanges:
    def test_toggle_persists_and_notifies(self, storage):
        s = ThemeState(storage)
        seen = []
        s.subscribe(seen.append)
        assert s.toggle() == DARK
        assert s.is_dark
        assert storage.get(THEME_KEY) == DARK
        s.toggle()
        assert seen == [DARK, LIGHT]
        assert ThemeState(storage).theme == LIGHT

    def test_set_rejects_unknown(self, storage):
        with pytest.raises(ValueError):
            ThemeState(storage).set("sepia")
        assert storage.get(THEME_KEY) is None

    def test_listener_error_does_not_stop_others(self, storage):
        s = ThemeState(storage)
        seen = []

        def broken(_):
            raise RuntimeError("listener bug")
        s.subscribe(broken)
        s.subscribe(seen.append)
        s.set(DARK)
        assert seen == [DARK]
        assert storage.get(THEME_KEY) == DARK

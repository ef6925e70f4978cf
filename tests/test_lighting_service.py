"""Unit tests for the scheduled lighting toggle."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from unittest.mock import MagicMock
from datetime import datetime
from sqlalchemy.exc import OperationalError
from parking_gate.models.system_setting import SystemSetting, SYSTEM_SETTINGS_ID
from parking_gate.services.lighting_service import is_night, toggle_parking_lights


class TestLighting:
    @pytest.mark.parametrize("hour,expected", [(0, True), (5, True), (6, False), (12, False), (17, False), (18, True), (23, True)])
    def test_is_night(self, hour, expected):
        assert is_night(hour) is expected

    @pytest.mark.asyncio
    async def test_toggle_writes_flag(self, db):
        evening = datetime(2025, 5, 10, 19, 0, 0)
        assert await toggle_parking_lights(db, now=evening) is True

        setting = db.get(SystemSetting, SYSTEM_SETTINGS_ID)
        assert setting.lights_on is True
        assert setting.last_updated == evening

        assert await toggle_parking_lights(db, now=datetime(2025, 5, 11, 7, 0, 0)) is False
        db.expire_all()
        assert db.get(SystemSetting, SYSTEM_SETTINGS_ID).lights_on is False

    @pytest.mark.asyncio
    async def test_store_failure_is_logged_not_raised(self):
        db = MagicMock()
        db.commit.side_effect = OperationalError("UPDATE system_settings", {}, Exception("down"))

        assert await toggle_parking_lights(db, now=datetime(2025, 5, 10, 19, 0, 0)) is None
        db.rollback.assert_called_once()

"""
Tests for reading and profile schemas.
"""
from datetime import timezone

import pytest
from pydantic import ValidationError

from bp_svc.schemas import BodyPosition, Profile, Reading


class TestReading:

    def test_api_keys_accepted(self):
        reading = Reading.model_validate({
            "_id": "65a1",
            "systolic": 128,
            "diastolic": 82,
            "bodyPosition": "seated",
            "timestamp": "2025-01-01T08:30:00Z",
        })

        assert reading.id == "65a1"
        assert reading.body_position == BodyPosition.SEATED
        assert reading.pulse is None
        assert reading.timestamp.tzinfo == timezone.utc

    def test_frozen(self, make_reading):
        reading = make_reading()
        with pytest.raises(ValidationError):
            reading.systolic = 200

    @pytest.mark.parametrize("field,value", [
        ("systolic", 0),
        ("diastolic", -5),
        ("pulse", 0),
        ("body_position", "standing"),
        ("timestamp", "soon"),
    ])
    def test_invalid_values(self, make_reading, field, value):
        with pytest.raises(ValidationError):
            make_reading(**{field: value})

    def test_position_label(self):
        assert BodyPosition.LEANING.label == "Leaning"


class TestProfile:

    def test_profile(self):
        profile = Profile.model_validate({"_id": "p1", "name": "Asha", "relation": "self", "isDefault": True})
        assert profile.is_default
        assert profile.sex is None

    def test_invalid_sex(self):
        with pytest.raises(ValidationError):
            Profile(id="p1", name="Asha", relation="self", sex="unknown")

"""Storage schema mapping tests"""

from dataclasses import replace

import pytest
from sgrvias.adapters.schema import (
    request_to_row,
    row_to_request,
    row_to_user,
    row_to_zone,
    user_to_row,
    zone_to_row,
)
from sgrvias.domain.errors import PersistenceError
from sgrvias.domain.models import User, Zone, ZoneMetadata


class TestRequestRows:
    def test_field_names_are_underscore_case(self, sample_request):
        row = request_to_row(sample_request)

        assert row["sei_number"] == "00.123.456/2024"
        assert row["technician_id"] == "u2"
        assert row["visit_date"] == "2024-05-15"
        assert row["latitude"] == -23.5505
        assert row["status"] == "Em andamento"
        assert row["zonal"] == "NORTH"

    def test_optional_fields_sent_as_explicit_none(self, sample_request):
        row = request_to_row(replace(sample_request, photo_after=None, photo_before=""))

        assert "photo_after" in row and row["photo_after"] is None
        assert "photo_before" in row and row["photo_before"] is None

    def test_row_back_to_domain(self, sample_request):
        assert row_to_request(request_to_row(sample_request)) == sample_request

    def test_invalid_zone_raises_persistence_error(self, sample_request):
        row = {**request_to_row(sample_request), "zonal": "Zonal Centro"}
        with pytest.raises(PersistenceError):
            row_to_request(row)


class TestUserRows:
    def test_blank_optionals_become_none(self):
        row = user_to_row(
            User(id="u1", name="A", role="Manager", zonal=Zone.NORTH, email="")
        )
        assert row["email"] is None
        assert row["registration_number"] is None

    def test_missing_role_raises(self):
        with pytest.raises(PersistenceError):
            row_to_user({"id": "u1", "name": "A", "zonal": "NORTH"})


class TestZoneRows:
    def test_blank_manager_sent_as_none(self):
        row = zone_to_row(ZoneMetadata(id=Zone.EAST, name="Leste", manager_id=""))

        assert row["manager_id"] is None
        assert row["assistant_id"] is None
        assert row["description"] is None

    def test_missing_name_uses_default(self):
        zone = row_to_zone({"id": "EAST", "name": None})
        assert zone.name == "Zonal Leste"

"""Derived view tests"""

from dataclasses import replace

from sgrvias.domain.models import UNRESOLVED, RequestStatus, Zone
from sgrvias.services import views


class TestStatusCounts:
    def test_counts_every_status(self, sample_requests):
        counts = views.status_counts(sample_requests)

        assert counts.total == 2
        assert counts.by_status[RequestStatus.IN_PROGRESS] == 1
        assert counts.by_status[RequestStatus.COMPLETED] == 1
        assert counts.by_status[RequestStatus.OPEN] == 0
        assert counts.by_status[RequestStatus.CANCELED] == 0

    def test_repeated_reads_are_identical(self, store):
        snapshot = store.snapshot()
        assert views.status_counts(snapshot.requests) == views.status_counts(
            snapshot.requests
        )

    def test_empty(self):
        counts = views.status_counts([])
        assert counts.total == 0
        assert set(counts.by_status.values()) == {0}


class TestZoneCounts:
    def test_uses_resolved_names(self, sample_requests, sample_zones):
        zones = [replace(sample_zones[0], name="Norte Renomeada"), *sample_zones[1:]]

        rows = views.zone_counts(sample_requests, zones)

        assert [r.zone for r in rows] == list(Zone)
        assert rows[0].name == "Norte Renomeada"
        assert rows[0].total == 2
        assert sum(r.total for r in rows) == 2

    def test_missing_metadata_falls_back_to_id(self, sample_requests):
        rows = views.zone_counts(sample_requests, [])
        assert rows[0].name == "NORTH"


class TestZoneStats:
    def test_resolves_manager_and_assistant(self, sample_requests, sample_users, sample_zones):
        stats = views.zone_stats(Zone.NORTH, sample_requests, sample_users, sample_zones)

        assert stats.name == "Zonal Norte"
        assert stats.manager_name == "Eng. Ricardo Souza"
        assert stats.assistant_name == "Ana Oliveira"
        assert stats.team_size == 3
        assert stats.request_count == 2
        assert stats.open_request_count == 0

    def test_deleted_manager_resolves_to_placeholder(
        self, sample_requests, sample_users, sample_zones
    ):
        """Scenario E"""
        users = [u for u in sample_users if u.id != "u4"]

        stats = views.zone_stats(Zone.SOUTH, sample_requests, users, sample_zones)

        assert stats.manager_name == UNRESOLVED
        assert stats.assistant_name == UNRESOLVED
        assert stats.team_size == 0

    def test_open_requests_counted(self, sample_requests, sample_users, sample_zones):
        requests = [replace(sample_requests[0], status=RequestStatus.OPEN), sample_requests[1]]

        stats = views.zone_stats(Zone.NORTH, requests, sample_users, sample_zones)

        assert stats.open_request_count == 1


class TestRosterAndLookups:
    def test_zone_roster(self, sample_users):
        roster = views.zone_roster(sample_users, Zone.NORTH)
        assert [u.id for u in roster] == ["u1", "u2", "u3"]

    def test_user_name_fallback(self, sample_users):
        assert views.user_name(sample_users, "u2") == "Ana Oliveira"
        assert views.user_name(sample_users, "ghost") == UNRESOLVED
        assert views.user_name(sample_users, None) == UNRESOLVED

    def test_zone_name_fallback(self, sample_zones):
        assert views.zone_name(sample_zones, Zone.SOUTH) == "Zonal Sul"
        assert views.zone_name([], Zone.SOUTH) == "SOUTH"


class TestFilterRequests:
    def test_search_is_case_insensitive_over_protocol_address_description(
        self, sample_requests
    ):
        assert [r.id for r in views.filter_requests(sample_requests, search="AUGUSTA")] == [
            "req_002"
        ]
        assert [r.id for r in views.filter_requests(sample_requests, search="2024.123")] == [
            "req_001"
        ]
        assert [r.id for r in views.filter_requests(sample_requests, search="esgoto")] == [
            "req_001"
        ]

    def test_status_and_zone_filters(self, sample_requests):
        completed = views.filter_requests(sample_requests, status=RequestStatus.COMPLETED)
        assert [r.id for r in completed] == ["req_002"]
        assert views.filter_requests(sample_requests, zone=Zone.SOUTH) == []

    def test_no_filters_returns_everything_in_order(self, sample_requests):
        assert views.filter_requests(sample_requests) == sample_requests

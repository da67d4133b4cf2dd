"""Tests for the persistence payload models."""

import pytest
from pydantic import ValidationError

from flowbuilder.engine.compiler import compile_flow
from flowbuilder.engine.loader import load_flow_record
from flowbuilder.persistence import ClientEntry, FlowRecord, build_flow_record, is_publishable


class TestFlowRecord:
    def test_accepts_alias_and_field_name(self):
        by_alias = FlowRecord.model_validate({"name": "Onboarding", "clientId": "c1"})
        by_name = FlowRecord(name="Onboarding", client_id="c1")

        assert by_alias.client_id == by_name.client_id == "c1"

    def test_dump_by_alias(self):
        payload = FlowRecord(name="Onboarding", client_id="c1").model_dump(by_alias=True, exclude_none=True)

        assert payload == {"name": "Onboarding", "data": {}, "clientId": "c1", "is_active": True}

    def test_name_required(self):
        with pytest.raises(ValidationError):
            FlowRecord.model_validate({"data": {}})

    def test_build_flow_record(self, config, two_screen_flow):
        record = build_flow_record("Onboarding", "c1", two_screen_flow, config=config)

        assert record.data == compile_flow(two_screen_flow, config)
        assert record.builder_state[0]["id"] == "intro"
        assert record.id is None

    def test_built_record_loads_back(self, config, two_screen_flow):
        record = build_flow_record("Onboarding", "c1", two_screen_flow, config=config)

        assert load_flow_record(record) == two_screen_flow


class TestPublishing:
    @pytest.fixture
    def clients(self):
        return [
            ClientEntry.model_validate({"id": "c1", "name": "Acme", "hasAccessToken": True}),
            ClientEntry(id="c2", name="Globex"),
        ]

    def test_client_with_token(self, clients):
        assert is_publishable("c1", clients)

    def test_client_without_token(self, clients):
        assert not is_publishable("c2", clients)

    @pytest.mark.parametrize("client_id", ["unknown", "", None])
    def test_unknown_or_missing_client(self, clients, client_id):
        assert not is_publishable(client_id, clients)

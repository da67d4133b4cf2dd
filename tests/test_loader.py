"""Tests for loading persisted flow records and raw document text."""

import re

import pytest

from flowbuilder.engine.compiler import compile_flow
from flowbuilder.engine.loader import (
    FromBuilderState,
    FromDocument,
    classify_flow_record,
    load_flow_record,
    parse_document_text,
)
from flowbuilder.engine.types import screens_to_builder_state
from flowbuilder.validator import InvalidJsonError, StructuralError


class TestClassify:
    def test_builder_state_wins(self):
        source = classify_flow_record({"builder_state": [{"id": "a"}], "data": {"screens": []}})

        assert isinstance(source, FromBuilderState)

    @pytest.mark.parametrize("builder_state", [None, [], "junk"])
    def test_document_fallback(self, builder_state):
        source = classify_flow_record({"builder_state": builder_state, "data": {"version": "7.3"}})

        assert source == FromDocument(document={"version": "7.3"})

    def test_object_record(self):
        class Record:
            builder_state = None
            data = {"screens": []}

        assert isinstance(classify_flow_record(Record()), FromDocument)


class TestLoadFlowRecord:
    def test_builder_state_round_trips(self, two_screen_flow):
        record = {"builder_state": screens_to_builder_state(two_screen_flow), "data": {}}

        assert load_flow_record(record) == two_screen_flow

    def test_builder_state_preferred_over_document(self, config, two_screen_flow):
        record = {
            "builder_state": [{"id": "only", "title": "From state", "elements": []}],
            "data": compile_flow(two_screen_flow, config),
        }

        assert [s.title for s in load_flow_record(record)] == ["From state"]

    def test_missing_ids_backfilled(self):
        record = {
            "builder_state": [
                {
                    "title": "A",
                    "elements": [{"type": "RadioButtonsGroup", "properties": {"data-source": [{"title": "x"}]}}],
                }
            ]
        }

        screen = load_flow_record(record)[0]
        element = screen.elements[0]

        assert re.match(r"^screen_[a-z]{7}$", screen.id)
        assert element.id.startswith("element_")
        assert element.properties["data-source"][0]["id"].startswith("opt_")

    def test_document_fallback(self, config, two_screen_flow):
        record = {"builder_state": None, "data": compile_flow(two_screen_flow, config)}

        screens = load_flow_record(record)

        assert [s.id for s in screens] == ["intro", "contact"]
        assert [el.type for el in screens[1].elements] == ["TextHeading", "Form", "TextInput", "TextInput", "Footer"]

    def test_empty_record(self):
        assert load_flow_record({}) == ()


class TestParseDocumentText:
    def test_json(self):
        assert parse_document_text('{"version": "7.3", "screens": []}') == {"version": "7.3", "screens": []}

    def test_yaml(self):
        assert parse_document_text("version: '7.3'\nscreens: []\n") == {"version": "7.3", "screens": []}

    @pytest.mark.parametrize("text", ["[1, 2]", "just words", "{unclosed: [", ""])
    def test_rejects_non_objects(self, text):
        with pytest.raises(InvalidJsonError) as exc_info:
            parse_document_text(text)

        assert isinstance(exc_info.value, StructuralError)

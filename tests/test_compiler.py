"""Tests for the forward transform (internal screens -> external document)."""

import copy
import json

from flowbuilder.config.engine_config import EngineConfig
from flowbuilder.engine.compiler import compile_flow

from conftest import make_element, make_screen


class TestCompileFlow:
    def test_document_shape(self, config, two_screen_flow):
        document = compile_flow(two_screen_flow, config)

        assert document["version"] == "7.3"
        assert [s["id"] for s in document["screens"]] == ["intro", "contact"]
        assert [s["terminal"] for s in document["screens"]] == [False, True]

    def test_empty_flow(self, config):
        assert compile_flow((), config) == {"version": "7.3", "screens": []}

    def test_deterministic(self, config, two_screen_flow):
        assert compile_flow(two_screen_flow, config) == compile_flow(two_screen_flow, config)

    def test_inputs_untouched(self, config, two_screen_flow):
        snapshot = copy.deepcopy(two_screen_flow)

        document = compile_flow(two_screen_flow, config)
        document["screens"][0]["data"]["customer"]["type"] = "number"

        assert two_screen_flow == snapshot

    def test_hidden_elements_never_appear(self, config, contact_screen):
        rendered = json.dumps(compile_flow((contact_screen,), config))

        assert "Hidden" not in rendered
        assert "${form.secret}" not in rendered

    def test_version_from_config(self, two_screen_flow):
        assert compile_flow(two_screen_flow, EngineConfig(document_version="8.0"))["version"] == "8.0"

    def test_version_env_override(self, monkeypatch):
        monkeypatch.setenv("FLOWBUILDER_DOCUMENT_VERSION", "9.1")

        document = compile_flow((make_screen("s", make_element("h", "TextHeading", text="Hi")),))

        assert document["version"] == "9.1"

    def test_never_raises_on_odd_properties(self, config):
        screen = make_screen(
            "odd",
            make_element("r", "RadioButtonsGroup", data_source=[None, 3, {"title": "Only title"}]),
            make_element("f", "Footer", on_click_action="not a dict"),
            make_element("n", "NavigationList", data_source=[{"onSelectAction": None}]),
            make_element("x", "Mystery", whatever={"deep": [1]}),
        )

        document = compile_flow((screen,), config)
        children = document["screens"][0]["layout"]["children"]
        form = children[0]

        assert form["children"][0]["data-source"] == [{"id": "option_3", "title": "Only title"}]
        assert form["children"][1]["on-click-action"] == {"name": "complete", "payload": {}}
        assert children[1]["data-source"][0]["on-select-action"]["name"] == "navigate"
        assert children[2] == {"type": "Mystery", "whatever": {"deep": [1]}}

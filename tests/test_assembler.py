"""Tests for screen assembly: partitioning, Form synthesis and ordering."""

from flowbuilder.config.engine_config import EngineConfig
from flowbuilder.engine.assembler import SINGLE_COLUMN_LAYOUT, assemble_screen, partition_elements

from conftest import make_element, make_screen


def child_types(result):
    return [child["type"] for child in result["layout"]["children"]]


class TestPartition:
    def test_first_input_is_pivot_without_form(self):
        heading = make_element("h", "TextHeading", text="Hi")
        first = make_element("i", "TextInput", name="first")
        body = make_element("b", "TextBody", text="Body")
        nav = make_element("n", "NavigationList", data_source=[])

        partition = partition_elements((heading, first, body, nav))

        assert partition.before == (heading,)
        assert partition.inputs == (first,)
        assert partition.logic == (nav,)
        assert partition.after == (body,)
        assert partition.form is None
        assert partition.has_form

    def test_explicit_form_is_pivot(self):
        early_input = make_element("i", "TextInput", name="early")
        heading = make_element("h", "TextHeading", text="Hi")
        form = make_element("form", "Form", name="signup")
        body = make_element("b", "TextBody", text="Body")

        partition = partition_elements((early_input, heading, form, body))

        assert partition.before == (heading,)
        assert partition.after == (body,)
        assert partition.inputs == (early_input,)
        assert partition.form is form

    def test_no_pivot_puts_every_display_before(self):
        heading = make_element("h", "TextHeading", text="Hi")
        body = make_element("b", "TextBody", text="Body")

        partition = partition_elements((heading, body))

        assert partition.before == (heading, body)
        assert partition.after == ()
        assert not partition.has_form

    def test_extra_form_and_footer_ignored(self):
        form_a = make_element("fa", "Form", name="a")
        form_b = make_element("fb", "Form", name="b")
        footer_a = make_element("ta", "Footer", label="A")
        footer_b = make_element("tb", "Footer", label="B")

        partition = partition_elements((form_a, footer_a, form_b, footer_b))

        assert partition.form is form_a
        assert partition.footer is footer_a

    def test_unknown_kind_bucketed_like_display(self):
        first = make_element("i", "TextInput", name="first")
        chart = make_element("c", "Chart")

        assert partition_elements((first, chart)).after == (chart,)


class TestAssembleScreen:
    def test_contact_screen(self, config, contact_screen):
        result = assemble_screen(contact_screen, config)

        assert result == {
            "id": "contact",
            "title": "Contact",
            "terminal": True,
            "layout": {
                "type": SINGLE_COLUMN_LAYOUT,
                "children": [
                    {"type": "TextHeading", "text": "Contact details"},
                    {
                        "type": "Form",
                        "name": "flow_form",
                        "children": [
                            {
                                "type": "TextInput",
                                "name": "full_name",
                                "label": "Name",
                                "required": True,
                                "input-type": "text",
                            },
                            {"type": "TextInput", "name": "phone", "label": "Phone", "input-type": "phone"},
                            {
                                "type": "Footer",
                                "label": "Submit",
                                "on-click-action": {
                                    "name": "complete",
                                    "payload": {
                                        "full_name": "${form.full_name}",
                                        "phone": "${form.phone}",
                                        "source": "web",
                                    },
                                },
                            },
                        ],
                    },
                ],
            },
        }

    def test_ordering_before_form_logic_after(self, config):
        screen = make_screen(
            "order",
            make_element("h", "TextHeading", text="Top"),
            make_element("i", "TextInput", name="first"),
            make_element("b", "TextBody", text="Below"),
            make_element("c", "CTABtn", label="Go"),
            make_element("n", "NavigationList", data_source=[]),
            make_element("cap", "TextCaption", text="Fine print"),
            make_element("f", "Footer", label="Done"),
        )

        result = assemble_screen(screen, config)

        assert child_types(result) == ["TextHeading", "Form", "Button", "NavigationList", "TextBody", "TextCaption"]
        form = result["layout"]["children"][1]
        assert [c["type"] for c in form["children"]] == ["TextInput", "Footer"]

    def test_footer_is_last_sibling_without_form(self, config):
        screen = make_screen(
            "info",
            make_element("h", "TextHeading", text="Top"),
            make_element("f", "Footer", label="Done"),
            make_element("b", "TextBody", text="Body"),
        )

        assert child_types(assemble_screen(screen, config)) == ["TextHeading", "TextBody", "Footer"]

    def test_explicit_form_without_inputs_still_emitted(self, config):
        screen = make_screen(
            "empty_form",
            make_element("form", "Form", name="wrapper"),
            make_element("f", "Footer", label="Done"),
        )

        children = assemble_screen(screen, config)["layout"]["children"]

        assert children == [
            {
                "type": "Form",
                "name": "wrapper",
                "children": [{"type": "Footer", "label": "Done", "on-click-action": {"name": "complete", "payload": {}}}],
            }
        ]

    def test_explicit_form_properties_carried(self, config):
        screen = make_screen(
            "props",
            make_element(
                "form",
                "Form",
                conditional_visibility="${data.show_form}",
                name="sign up!",
                init_values={"email": "a@b.c"},
            ),
            make_element("i", "TextInput", name="email"),
        )

        form = assemble_screen(screen, config)["layout"]["children"][0]

        assert form["name"] == "signup"
        assert form["visible"] == "${data.show_form}"
        assert form["init-values"] == {"email": "a@b.c"}
        assert list(form)[-1] == "children"

    def test_configured_default_form_name(self):
        screen = make_screen("s", make_element("i", "TextInput", name="email"))

        form = assemble_screen(screen, EngineConfig(default_form_name="signup"))["layout"]["children"][0]

        assert form["name"] == "signup"

    def test_hidden_elements_are_absent(self, config):
        screen = make_screen(
            "s",
            make_element("h", "TextHeading", visibility=False, text="Gone"),
            make_element("i", "TextInput", visibility=False, name="gone"),
            make_element("b", "TextBody", text="Here"),
        )

        assert assemble_screen(screen, config)["layout"]["children"] == [{"type": "TextBody", "text": "Here"}]

    def test_terminal_from_footer(self, config):
        with_footer = make_screen("a", make_element("f", "Footer", label="Done"))
        without_footer = make_screen("b", make_element("h", "TextHeading", text="Hi"))
        hidden_footer = make_screen("c", make_element("f", "Footer", visibility=False, label="Done"))

        assert assemble_screen(with_footer, config)["terminal"] is True
        assert assemble_screen(without_footer, config)["terminal"] is False
        assert assemble_screen(hidden_footer, config)["terminal"] is False

    def test_explicit_terminal_wins(self, config):
        screen = make_screen("a", make_element("f", "Footer", label="Done"), terminal=False)

        assert assemble_screen(screen, config)["terminal"] is False

    def test_screen_id_sanitized(self, config):
        screen = make_screen("step 2-final", make_element("h", "TextHeading", text="Hi"))

        assert assemble_screen(screen, config)["id"] == "stepfinal"

    def test_screen_id_without_letters_falls_back_to_title(self, config):
        screen = make_screen("123", make_element("h", "TextHeading", text="Hi"), title="Step 2")

        assert assemble_screen(screen, config)["id"] == "Step"

    def test_screen_id_and_title_without_letters(self, config):
        screen = make_screen("123", make_element("h", "TextHeading", text="Hi"), title="456")

        assert assemble_screen(screen, config)["id"] == "screen"

    def test_form_name_without_letters_uses_default(self, config):
        screen = make_screen("s", make_element("form", "Form", name="2024"), make_element("i", "TextInput", name="email"))

        assert assemble_screen(screen, config)["layout"]["children"][0]["name"] == "flow_form"

    def test_data_omitted_when_empty_and_copied_when_present(self, config):
        data = {"customer": {"type": "string", "__example__": "Ada"}}
        declared = make_screen("a", make_element("h", "TextHeading", text="${data.customer}"), data=data)
        bare = make_screen("b", make_element("h", "TextHeading", text="Hi"))

        declared_result = assemble_screen(declared, config)
        declared_result["data"]["customer"]["type"] = "number"

        assert data["customer"]["type"] == "string"
        assert "data" not in assemble_screen(bare, config)

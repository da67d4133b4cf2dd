"""
Test fixtures for the flow transformation engine.

Provides a pinned engine config (so tests do not depend on the environment)
and small builders for elements and screens.
"""

from pathlib import Path
import sys
from typing import Any, Dict, Optional

import pytest

_REPO_ROOT = Path(__file__).resolve().parent.parent
if str(_REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(_REPO_ROOT))

from flowbuilder.config.engine_config import EngineConfig  # noqa: E402
from flowbuilder.engine.types import Element, Screen  # noqa: E402


def make_element(
    element_id: str,
    element_type: str,
    visibility: bool = True,
    conditional_visibility: Optional[str] = None,
    **properties: Any,
) -> Element:
    """Build an Element; keyword arguments become properties.

    Hyphenated property keys are passed with underscores
    (`input_type` -> `input-type`) except the few keys the engine reads
    with underscores itself (`alt_text`).
    """
    keep_underscore = {"alt_text"}
    props: Dict[str, Any] = {
        key if key in keep_underscore else key.replace("_", "-"): value
        for key, value in properties.items()
    }
    return Element(
        id=element_id,
        type=element_type,
        name=element_id,
        properties=props,
        visibility=visibility,
        conditional_visibility=conditional_visibility,
    )


def make_screen(screen_id: str, *elements: Element, title: Optional[str] = None, **kwargs: Any) -> Screen:
    return Screen(id=screen_id, title=title or screen_id.title(), elements=tuple(elements), **kwargs)


@pytest.fixture
def config() -> EngineConfig:
    """Built-in engine defaults."""
    return EngineConfig()


@pytest.fixture(autouse=True)
def _clean_engine_env(monkeypatch):
    """Keep env overrides from leaking into the cached engine config."""
    from flowbuilder.config import engine_config

    monkeypatch.delenv(engine_config.ENV_DOCUMENT_VERSION, raising=False)
    monkeypatch.delenv(engine_config.ENV_DEFAULT_FORM_NAME, raising=False)
    monkeypatch.setattr(engine_config, "_cached_config", None)


@pytest.fixture
def contact_screen() -> Screen:
    """Heading, two inputs, a hidden input and a footer submitting both."""
    return make_screen(
        "contact",
        make_element("heading", "TextHeading", text="Contact details"),
        make_element("name_input", "TextInput", name="full_name", label="Name", required=True),
        make_element("phone_input", "TextInput", name="phone", label="Phone", input_type="phone"),
        make_element("secret", "TextInput", visibility=False, name="secret", label="Hidden"),
        make_element(
            "footer",
            "Footer",
            label="Submit",
            on_click_action={
                "name": "complete",
                "payload": {
                    "full_name": "${form.full_name}",
                    "phone": "${form.phone}",
                    "secret": "${form.secret}",
                    "source": "web",
                },
            },
        ),
        title="Contact",
    )


@pytest.fixture
def two_screen_flow(contact_screen):
    """Intro screen with a navigation list, then the contact screen."""
    intro = make_screen(
        "intro",
        make_element("welcome", "TextBody", text="Welcome ${data.customer}"),
        make_element(
            "menu",
            "NavigationList",
            label="Menu",
            data_source=[
                {"id": "go_contact", "title": "Contact us", "onSelectAction": "navigate", "target": "contact"},
            ],
        ),
        title="Intro",
        data={"customer": {"type": "string", "__example__": "Ada"}},
    )
    return (intro, contact_screen)

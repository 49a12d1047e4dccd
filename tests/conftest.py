from __future__ import annotations

import itertools

import pytest

from autofill.collector import FIELD_SNAPSHOT_SCRIPT, FIELD_QUERY
from autofill.form_models import ElementKind, FieldDescriptor, OptionMetadata, Rect
from autofill.value_injector import SET_SELECT_SCRIPT, SET_TEXT_SCRIPT

_DEFAULT_RECT = object()


class FakeHandle:
    """In-memory stand-in for a Playwright ElementHandle."""

    def __init__(
        self,
        *,
        tag="input",
        input_type="text",
        attributes=None,
        value="",
        options=(),
        rect=None,
        selectors=(),
        label_for=None,
        wrapping_label=None,
        error=None,
    ):
        self.tag = tag
        self.input_type = input_type
        self.attributes = dict(attributes or {})
        self.value = value
        self.options = list(options)
        self.rect = rect or {"top": 10.0, "left": 10.0, "width": 240.0, "height": 32.0}
        self.selectors = set(selectors)
        self.label_for = label_for
        self.wrapping_label = wrapping_label
        self.error = error
        self.events = []
        self.writes = []

    def evaluate(self, script, arg=None):
        if self.error is not None:
            raise self.error
        if script == FIELD_SNAPSHOT_SCRIPT:
            _, selectors = arg
            return {
                "tag": self.tag,
                "type": self.input_type if self.tag == "input" else self.tag,
                "attributes": dict(self.attributes),
                "labelFor": self.label_for,
                "wrappingLabel": self.wrapping_label,
                "containerLabels": [],
                "rect": dict(self.rect),
                "cssVisible": True,
                "hiddenAttribute": False,
                "value": self.value,
                "options": [{"value": v, "text": t} for v, t in self.options],
                "matched": [s for s in selectors if s in self.selectors],
            }
        if script in (SET_TEXT_SCRIPT, SET_SELECT_SCRIPT):
            previous = self.value
            self.value = arg
            self.writes.append(arg)
            self.events.extend(["input", "change"])
            return {"from": previous, "to": self.value}
        raise AssertionError(f"unexpected script: {script[:40]!r}")


class FakeFrame:
    def __init__(self, handles=(), url="https://jobs.example.com/apply", error=None):
        self.handles = list(handles)
        self.url = url
        self.error = error

    def query_selector_all(self, selector):
        assert selector == FIELD_QUERY
        if self.error is not None:
            raise self.error
        return list(self.handles)


class FakePage:
    def __init__(self, frames=(), url="https://jobs.example.com/apply"):
        self.frames = list(frames)
        self.url = url


@pytest.fixture
def fake_handle():
    return FakeHandle


@pytest.fixture
def fake_frame():
    return FakeFrame


@pytest.fixture
def fake_page():
    return FakePage


@pytest.fixture
def make_descriptor():
    counter = itertools.count()

    def factory(
        tag="input",
        *,
        input_type=None,
        attributes=None,
        label_for=None,
        wrapping_label=None,
        container_labels=(),
        rect=_DEFAULT_RECT,
        value="",
        options=(),
        matched=(),
        css_visible=True,
        hidden=False,
        handle=None,
        order=None,
    ):
        index = next(counter) if order is None else order
        if rect is _DEFAULT_RECT:
            rect = Rect(top=20.0 + 50.0 * index, left=20.0, width=240.0, height=32.0)
        return FieldDescriptor(
            handle=handle or FakeHandle(tag=tag, value=value, options=options),
            kind=ElementKind.from_tag(tag),
            input_type=input_type or ("text" if tag == "input" else tag),
            attributes=dict(attributes or {}),
            label_for_text=label_for,
            wrapping_label_text=wrapping_label,
            container_labels=list(container_labels),
            rect=rect,
            css_visible=css_visible,
            hidden_attribute=hidden,
            value=value,
            options=[OptionMetadata(value=v, text=t) for v, t in options],
            matched_selectors=frozenset(matched),
            order=index,
        )

    return factory

from autofill.form_models import OptionMetadata
from autofill.value_injector import match_select_option, set_value

COUNTRIES = (
    ("", "Select..."),
    ("US", "United States"),
    ("TR", "Republic of Turkey"),
    ("DE", "Germany"),
)


def test_text_injection_sets_value_and_fires_events(make_descriptor):
    descriptor = make_descriptor(attributes={"name": "city"})
    result = set_value(descriptor, "Istanbul")
    assert result.ok
    assert result.previous == ""
    assert result.value == "Istanbul"
    assert descriptor.handle.value == "Istanbul"
    assert descriptor.handle.events == ["input", "change"]


def test_textarea_injection_keeps_newlines(make_descriptor):
    descriptor = make_descriptor("textarea")
    assert set_value(descriptor, "Line one\nLine two").ok
    assert descriptor.handle.value == "Line one\nLine two"


def test_select_matches_by_value_then_text_then_containment():
    options = [OptionMetadata(value=v, text=t) for v, t in COUNTRIES]
    assert match_select_option(options, "us") == (options[1], "value")
    assert match_select_option(options, "germany") == (options[3], "text")
    assert match_select_option(options, "Turkey") == (options[2], "fuzzy")
    assert match_select_option(options, "usa") is None
    assert match_select_option(options, "") is None


def test_select_injection_uses_option_value(make_descriptor):
    descriptor = make_descriptor("select", options=COUNTRIES)
    result = set_value(descriptor, "Turkey")
    assert result.ok
    assert result.matched == "fuzzy"
    assert descriptor.handle.value == "TR"
    assert descriptor.handle.events == ["input", "change"]


def test_select_without_match_is_not_touched(make_descriptor):
    descriptor = make_descriptor("select", options=COUNTRIES, value="DE")
    result = set_value(descriptor, "usa")
    assert not result.ok
    assert result.detail == "no option match"
    assert descriptor.handle.value == "DE"
    assert descriptor.handle.writes == []


def test_select_with_empty_value_fails(make_descriptor):
    descriptor = make_descriptor("select", options=COUNTRIES)
    result = set_value(descriptor, "  ")
    assert not result.ok
    assert result.detail == "empty desired value"


def test_host_failure_is_reported_not_raised(make_descriptor, fake_handle):
    handle = fake_handle(error=RuntimeError("element is detached"))
    descriptor = make_descriptor(handle=handle)
    result = set_value(descriptor, "Ada")
    assert not result.ok
    assert "detached" in result.detail

from autofill.config import bundle_from_dict
from autofill.coordinator import ping_frames, run_fill_pass, summarize_frame_results


def _report(filled=0, skipped=0, errors=0):
    return {
        "stats": {"filled": filled, "skipped": skipped, "errors": errors},
        "reports": [],
    }


def test_summary_adds_up_frames():
    summary = summarize_frame_results(
        [
            {"ok": True, "frameId": 0, "res": {"ok": True, "report": _report(2, 1, 0)}},
            {"ok": True, "frameId": 1, "res": {"ok": True, "report": _report(1, 0, 1)}},
            {"ok": False, "frameId": 2, "error": "No frame with given id"},
            {"ok": True, "frameId": 3, "res": {"ok": False}},
        ]
    )
    assert summary["framesResponded"] == 2
    assert summary["filled"] == 3
    assert summary["skipped"] == 1
    assert summary["errors"] == 3
    assert len(summary["reports"]) == 2


def test_summary_of_nothing():
    assert summarize_frame_results([]) == {
        "framesResponded": 0,
        "filled": 0,
        "skipped": 0,
        "errors": 0,
        "reports": [],
    }


def test_fill_pass_covers_every_frame(fake_handle, fake_frame, fake_page):
    main_email = fake_handle(attributes={"aria-label": "E-mail"})
    embedded_name = fake_handle(attributes={"name": "first_name"})
    page = fake_page(
        [fake_frame([main_email]), fake_frame([embedded_name], url="https://forms.example.net/x"), fake_frame()],
        url="https://www.example.com/jobs/1",
    )
    bundle = bundle_from_dict({"profile": {"fullName": "Ada Lovelace", "email": "ada@x.com"}})

    result = run_fill_pass(page, bundle)

    assert result["ok"] is True
    assert result["domain"] == "example.com"
    assert result["allow"] == "neutral"
    assert result["summary"]["framesResponded"] == 3
    assert result["summary"]["filled"] == 2
    assert main_email.value == "ada@x.com"
    assert embedded_name.value == "Ada"


def test_blocked_site_is_left_untouched(fake_handle, fake_frame, fake_page):
    handle = fake_handle(attributes={"aria-label": "E-mail"})
    page = fake_page([fake_frame([handle])], url="https://spam.test/apply")
    bundle = bundle_from_dict(
        {
            "profile": {"email": "ada@x.com"},
            "siteRules": {"domains": {"spam.test": {"rule": "blacklist"}}},
        }
    )

    result = run_fill_pass(page, bundle)

    assert result == {
        "ok": False,
        "blocked": True,
        "reason": "domain blacklisted",
        "domain": "spam.test",
    }
    assert handle.writes == []


def test_domain_overrides_reach_the_policy(fake_handle, fake_frame, fake_page):
    email = fake_handle(input_type="email")
    first = fake_handle(attributes={"name": "first_name"})
    page = fake_page([fake_frame([email, first])], url="https://jobs.example.com/")
    bundle = bundle_from_dict(
        {
            "profile": {"fullName": "Ada Lovelace", "email": "ada@x.com"},
            "settings": {"fillPolicy": {"dryRun": False}},
            "siteRules": {"domains": {"example.com": {"disabledTypes": ["firstName"]}}},
        }
    )

    summary = run_fill_pass(page, bundle)["summary"]

    assert summary["filled"] == 1
    assert summary["skipped"] == 1
    assert first.writes == []


def test_ping_frames(fake_frame, fake_page):
    page = fake_page([fake_frame(url="https://a.test/"), fake_frame(url="about:blank")])
    assert ping_frames(page) == [
        {"ok": True, "frameId": 0, "res": {"ok": True, "url": "https://a.test/"}},
        {"ok": True, "frameId": 1, "res": {"ok": True, "url": "about:blank"}},
    ]

import json
import logging
import re

import pytest

from autofill.cli import build_parser, main
from autofill.io_utils import generate_run_id, prepare_run_directories, write_json
from autofill.logging_utils import build_logger, sensitive_values


def test_fill_arguments():
    args = build_parser().parse_args(
        ["fill", "--url", "https://example.com", "--dry-run", "--headed", "--run-id", "r1"]
    )
    assert args.command == "fill"
    assert args.dry_run is True
    assert args.headed is True
    assert args.config is None
    assert args.run_id == "r1"


def test_command_is_required():
    with pytest.raises(SystemExit):
        build_parser().parse_args([])


def test_check_config_prints_merged_bundle(tmp_path, capsys):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"profile": {"email": "ada@x.com"}}), encoding="utf-8")

    main(["check-config", "--config", str(path)])

    printed = json.loads(capsys.readouterr().out)
    assert printed["profile"]["email"] == "ada@x.com"
    assert printed["settings"]["nameLock"]["mode"] == "IF_EMPTY"
    assert printed["siteRules"] == {"mode": "neutral", "domains": {}}


def test_check_config_rejects_bad_json(tmp_path, capsys):
    path = tmp_path / "settings.json"
    path.write_text("{oops", encoding="utf-8")
    with pytest.raises(SystemExit) as excinfo:
        main(["check-config", "--config", str(path)])
    assert excinfo.value.code == 2
    assert "Invalid JSON" in capsys.readouterr().err


def test_run_directories_and_logger(tmp_path):
    run_paths = prepare_run_directories("test-run", "fill", data_dir=tmp_path)
    assert run_paths.base_dir == tmp_path / "test-run"
    assert run_paths.base_dir.is_dir()

    logger = build_logger(run_paths, verbose=True)
    try:
        assert logger.name == "autofill.test-run"
        assert logger.level == logging.DEBUG
        logger.debug("hello")
        for handler in logger.handlers:
            handler.flush()
        assert "hello" in (run_paths.base_dir / "autofill.log").read_text(encoding="utf-8")
    finally:
        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)

    written = write_json(run_paths.build_path("fill.json"), {"ok": True})
    assert json.loads(written.read_text(encoding="utf-8")) == {"ok": True}


def test_generate_run_id_format():
    assert re.fullmatch(r"\d{8}-\d{6}-[0-9a-f]{4}", generate_run_id())


def test_logger_masks_sensitive_profile_values(tmp_path):
    run_paths = prepare_run_directories("masked-run", "fill", data_dir=tmp_path)
    redact = sensitive_values({"email": "ada@x.com", "phone": "+905551234567", "city": "London"})
    logger = build_logger(run_paths, verbose=True, redact=redact)
    try:
        logger.debug("Filled %s with %s", "email", "ada@x.com")
        logger.warning("Failed to fill phone: value +905551234567 rejected")
        logger.info("City is %s", "London")
        for handler in logger.handlers:
            handler.flush()
        text = (run_paths.base_dir / "autofill.log").read_text(encoding="utf-8")
    finally:
        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)

    assert "ada@x.com" not in text
    assert "+905551234567" not in text
    assert "Filled email with ***" in text
    assert "City is London" in text

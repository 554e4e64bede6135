import json
from pathlib import Path

import yaml

from config.settings import Settings


def test_defaults(monkeypatch):
    monkeypatch.delenv("COURSEWORK_UPCOMING_WINDOW_DAYS", raising=False)
    settings = Settings()
    assert settings.UPCOMING_WINDOW_DAYS == 7
    assert settings.ITEM_ANALYSIS_CUTOFFS == {"top": 0.27, "bottom": 0.27}
    assert settings.COURSE_DATA_PATH.name == "courses.json"


def test_json_config_file(tmp_path):
    config = tmp_path / "config.json"
    config.write_text(
        json.dumps({"UPCOMING_WINDOW_DAYS": 14, "OUTPUT_DIR": "/tmp/out", "BOGUS": 1}),
        encoding="utf-8",
    )
    settings = Settings(str(config))
    assert settings.UPCOMING_WINDOW_DAYS == 14
    assert settings.OUTPUT_DIR == Path("/tmp/out")
    assert not hasattr(settings, "BOGUS")


def test_yaml_config_file(tmp_path):
    config = tmp_path / "config.yaml"
    config.write_text(
        yaml.safe_dump({"ITEM_ANALYSIS_CUTOFFS": {"top": 0.3, "bottom": 0.3}}),
        encoding="utf-8",
    )
    assert Settings(str(config)).ITEM_ANALYSIS_CUTOFFS == {"top": 0.3, "bottom": 0.3}


def test_missing_config_file_keeps_defaults(tmp_path):
    assert Settings(str(tmp_path / "missing.json")).CACHE_ENABLED is True


def test_environment_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("COURSEWORK_UPCOMING_WINDOW_DAYS", "3")
    monkeypatch.setenv("COURSEWORK_CACHE_ENABLED", "false")
    monkeypatch.setenv("COURSEWORK_QUIZ_DATA", str(tmp_path / "q.json"))
    settings = Settings()
    assert settings.UPCOMING_WINDOW_DAYS == 3
    assert settings.CACHE_ENABLED is False
    assert settings.QUIZ_DATA_PATH == tmp_path / "q.json"


def test_set_data_dir(tmp_path):
    settings = Settings()
    settings.set_data_dir(str(tmp_path))
    assert settings.ASSIGNMENT_DATA_PATH == tmp_path / "assignments.json"
    assert settings.QUIZ_SUBMISSION_DATA_PATH == tmp_path / "quiz_submissions.json"


def test_save_and_reload(tmp_path, monkeypatch):
    monkeypatch.delenv("COURSEWORK_UPCOMING_WINDOW_DAYS", raising=False)
    settings = Settings()
    settings.UPCOMING_WINDOW_DAYS = 10
    settings.save_to_file(str(tmp_path / "saved.yaml"))

    reloaded = Settings(str(tmp_path / "saved.yaml"))
    assert reloaded.UPCOMING_WINDOW_DAYS == 10
    assert reloaded.get("MISSING", "fallback") == "fallback"

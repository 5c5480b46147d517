from pathlib import Path

from pdf_merger.config import REPO_ROOT, load_runtime_config


def test_defaults(monkeypatch):
    for name in (
        "UPLOAD_FOLDER", "OUTPUT_FOLDER", "MAX_FILE_SIZE_MB", "MAX_REQUEST_SIZE_MB",
        "SESSION_RETENTION_SECONDS", "ARTIFACT_RETENTION_SECONDS", "PRINT_PAGE_WIDTH",
        "PRINT_PAGE_HEIGHT", "ADOPT_ORPHANS_ON_START", "RETENTION_SWEEP_INTERVAL_SECONDS",
    ):
        monkeypatch.delenv(name, raising=False)

    config = load_runtime_config()

    assert config.upload_folder == REPO_ROOT / "uploads"
    assert config.output_folder == REPO_ROOT / "outputs"
    assert config.max_file_size == 50 * 1024 * 1024
    assert config.session_retention_seconds == 300
    assert config.artifact_retention_seconds == 3600
    assert config.print_envelope == (595.0, 842.0)
    assert config.adopt_orphans_on_start is True


def test_environment_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("UPLOAD_FOLDER", str(tmp_path / "in"))
    monkeypatch.setenv("OUTPUT_FOLDER", str(tmp_path / "out"))
    monkeypatch.setenv("MAX_FILE_SIZE_MB", "5")
    monkeypatch.setenv("SESSION_RETENTION_SECONDS", "10")
    monkeypatch.setenv("ADOPT_ORPHANS_ON_START", "false")

    config = load_runtime_config()

    assert config.upload_folder == Path(tmp_path / "in")
    assert config.output_folder == Path(tmp_path / "out")
    assert config.max_file_size == 5 * 1024 * 1024
    assert config.session_retention_seconds == 10
    assert config.adopt_orphans_on_start is False


def test_invalid_values_fall_back_to_defaults(monkeypatch):
    monkeypatch.setenv("MAX_REQUEST_SIZE_MB", "lots")
    monkeypatch.setenv("ARTIFACT_RETENTION_SECONDS", "soon")

    config = load_runtime_config()

    assert config.max_request_size == 200 * 1024 * 1024
    assert config.artifact_retention_seconds == 3600

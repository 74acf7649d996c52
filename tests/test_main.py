# tests/test_main.py
import responses

import main as mod
from config import Config
from tests.conftest import HOST, USERS_URL, MEMBERSHIPS_URL_RE, gitlab_user, memberships, read_lines


class FakeBlob:
    def __init__(self, name, uploads):
        self.name = name
        self._uploads = uploads

    def upload_from_filename(self, filename):
        self._uploads.append((self.name, filename))


class FakeBucket:
    def __init__(self, uploads):
        self._uploads = uploads

    def blob(self, name):
        return FakeBlob(name, self._uploads)


class FakeClient:
    uploads: list = []
    bucket_names: list = []

    def bucket(self, name):
        FakeClient.bucket_names.append(name)
        return FakeBucket(FakeClient.uploads)


def _fake_storage(monkeypatch):
    FakeClient.uploads = []
    FakeClient.bucket_names = []
    monkeypatch.setattr(mod.storage, "Client", FakeClient)
    return FakeClient


def _mock_gitlab():
    responses.add(responses.GET, USERS_URL, json=[
        gitlab_user(42, "alice", name="Alice A, B", email="a@x.com"),
        gitlab_user(43, "bob"),
        gitlab_user(44, "eve", state="blocked"),
    ])
    responses.add(responses.GET, USERS_URL, json=[])
    responses.add(responses.GET, f"{HOST}/api/v4/users/42/memberships", json=memberships("Project"))
    responses.add(responses.GET, f"{HOST}/api/v4/users/43/memberships", json=[])


@responses.activate
def test_run_writes_both_reports_and_validates(config, capsys):
    _mock_gitlab()

    summary, report = mod.run(config)

    assert read_lines(config.active_users_file) == ["id,username,name,email", '42,alice,"Alice A, B",a@x.com']
    assert read_lines(config.inactive_users_file) == ["id,username,name,email", '43,bob,"Bob",bob@example.com']
    assert summary.skipped == 1
    assert report.ok
    out = capsys.readouterr().out
    assert out.startswith(f"Starting user membership export from {HOST}")
    assert "  2 lines in active_users.csv" in out
    assert "✓ No users appear in both files" in out


@responses.activate
def test_main_exit_code_ignores_api_error_without_strict(capsys):
    responses.add(responses.GET, USERS_URL, json={"message": "401 Unauthorized"}, status=401)

    assert mod.main([]) == 0
    assert "results may be incomplete" in capsys.readouterr().err


@responses.activate
def test_main_strict_fails_when_pagination_stopped_on_error():
    responses.add(responses.GET, USERS_URL, json={"message": "401 Unauthorized"}, status=401)

    assert mod.main(["--strict"]) == 1


@responses.activate
def test_main_strict_passes_on_clean_run():
    _mock_gitlab()
    assert mod.main(["--strict"]) == 0


@responses.activate
def test_main_cli_overrides(tmp_path):
    other_host = "https://other.gitlab.local"
    responses.add(responses.GET, f"{other_host}/api/v4/users", json=[])

    code = mod.main([
        "--host", other_host + "/",
        "--page-size", "20",
        "--active-file", "a.csv",
        "--inactive-file", "i.csv",
    ])

    assert code == 0
    assert "per_page=20" in responses.calls[0].request.url
    assert (tmp_path / "a.csv").exists()
    assert (tmp_path / "i.csv").exists()
    assert not (tmp_path / "active_users.csv").exists()


def test_upload_skipped_without_bucket(config, monkeypatch, capsys):
    fake = _fake_storage(monkeypatch)

    assert mod.upload_files_to_bucket(config, config.output_files) == []
    assert fake.bucket_names == []
    assert "Skipping upload" in capsys.readouterr().out


def test_upload_files_to_bucket_skips_missing_files(monkeypatch, tmp_path):
    fake = _fake_storage(monkeypatch)
    monkeypatch.setenv("BUCKET_NAME", "audit-bucket")
    config = Config.from_env()
    (tmp_path / "active_users.csv").write_text("id,username,name,email\n", encoding="utf-8")

    uploaded = mod.upload_files_to_bucket(config, config.output_files)

    assert uploaded == ["active_users.csv"]
    assert fake.bucket_names == ["audit-bucket"]
    assert len(fake.uploads) == 1
    blob_name, filename = fake.uploads[0]
    assert blob_name.startswith("reports/") and blob_name.endswith("/active_users.csv")
    assert filename == "active_users.csv"


@responses.activate
def test_entry_point_runs_in_work_dir_and_uploads(monkeypatch, tmp_path):
    work_dir = tmp_path / "work"
    work_dir.mkdir()
    monkeypatch.setattr(mod, "WORK_DIR", str(work_dir))
    monkeypatch.setenv("BUCKET_NAME", "audit-bucket")
    fake = _fake_storage(monkeypatch)
    _mock_gitlab()

    body, status = mod.entry_point(request=None)

    assert (body, status) == ("Audit Success", 200)
    assert (work_dir / "active_users.csv").exists()
    assert sorted(f for _, f in fake.uploads) == ["active_users.csv", "inactive_users.csv"]


def test_entry_point_returns_500_on_failure(monkeypatch, tmp_path, capsys):
    monkeypatch.setattr(mod, "WORK_DIR", str(tmp_path))

    def boom(config):
        raise RuntimeError("disk full")

    monkeypatch.setattr(mod, "run", boom)

    body, status = mod.entry_point(request=None)

    assert status == 500
    assert body == "Error: disk full"
    assert "CRITICAL ERROR: disk full" in capsys.readouterr().out

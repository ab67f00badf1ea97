from pathlib import Path

from simbridge import doctor
from simbridge.settings import Settings


def test_doctor_collect_checks_ok(monkeypatch, tmp_path):
    monkeypatch.setattr(doctor.shutil, "which", lambda name: f"/usr/bin/{name}")

    payload = doctor.collect_checks(Settings(idb_path="idb", tmpdir=str(tmp_path)))

    assert payload["ok"] is True
    assert payload["problems"] == []
    assert payload["tools"]["xcrun"]["resolved"] == "/usr/bin/xcrun"
    assert payload["tools"]["idb"]["ok"] is True
    assert "ui_tap" in payload["enabled_tools"]


def test_doctor_reports_missing_tools(monkeypatch, tmp_path):
    monkeypatch.setattr(doctor.shutil, "which", lambda name: None)

    payload = doctor.collect_checks(Settings(idb_path="idb", tmpdir=str(tmp_path / "missing")))

    assert payload["ok"] is False
    assert any("xcrun not found" in p for p in payload["problems"])
    assert any("idb not found" in p for p in payload["problems"])
    assert any("temp dir not writable" in p for p in payload["problems"])


def test_doctor_lists_filtered_tools(monkeypatch, tmp_path):
    monkeypatch.setattr(doctor.shutil, "which", lambda name: name)

    payload = doctor.collect_checks(
        Settings(idb_path="idb", tmpdir=str(tmp_path), filtered_tools=frozenset({"ui_type"}))
    )

    assert payload["filtered_tools"] == ["ui_type"]
    assert "ui_type" not in payload["enabled_tools"]


def test_doctor_main_exit_code(monkeypatch, capsys):
    monkeypatch.setattr(doctor, "load_dotenv", lambda path: None)
    monkeypatch.setattr(doctor, "collect_checks", lambda: {"ok": False, "problems": ["x"]})

    assert doctor.main() == 1
    assert '"ok": false' in capsys.readouterr().out


def test_doctor_main_loads_env_from_cwd_and_home(monkeypatch, tmp_path, capsys):
    loaded = []
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(doctor, "load_dotenv", lambda path: loaded.append(path))
    monkeypatch.setattr(doctor, "collect_checks", lambda: {"ok": True, "problems": []})

    assert doctor.main() == 0
    assert loaded == [Path.cwd() / ".env", Path.home() / ".env"]


def test_package_import_does_not_load_env():
    import simbridge

    assert not hasattr(simbridge, "load_dotenv")

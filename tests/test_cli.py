import pytest

from table_manager.cli import main


@pytest.fixture()
def state_path(tmp_path, monkeypatch):
    monkeypatch.delenv("TABLE_PERSIST", raising=False)
    monkeypatch.delenv("TABLE_PAGE_SIZE", raising=False)
    monkeypatch.setattr("table_manager.cli.init_logging", lambda *args, **kwargs: None)
    return str(tmp_path / "table.json")


def test_import_then_view_and_export(state_path, tmp_path, capsys):
    source = tmp_path / "people.csv"
    source.write_text(
        "Name,Email,Age,Role,Team\nUma,uma@example.com,41,Admin,Core\nVic,vic@example.com,35,User,Sales\n",
        encoding="utf-8",
    )
    out = tmp_path / "out" / "export.csv"

    assert main(["--state", state_path, "import", str(source)]) == 0
    assert main(["--state", state_path, "view", "--search", "sales"]) == 0
    view_output = capsys.readouterr().out
    assert main(["--state", state_path, "export", "--out", str(out)]) == 0

    assert "New columns: team" in view_output
    assert "Vic" in view_output
    assert "Uma" not in view_output.split("New columns: team")[1]
    assert "Page 1 of 1 (1 matching rows)" in view_output
    assert out.read_text(encoding="utf-8").splitlines()[0] == "Name,Email,Age,Role,team"


def test_failed_import_returns_error_code(state_path, tmp_path, capsys):
    source = tmp_path / "bad.csv"
    source.write_text("Name\nUma\n", encoding="utf-8")

    assert main(["--state", state_path, "import", str(source)]) == 1
    assert "CSV is missing required columns: email, age, role" in capsys.readouterr().out


def test_column_commands(state_path, capsys):
    assert main(["--state", state_path, "add-column", "team", "Team"]) == 0
    assert main(["--state", state_path, "add-column", "team"]) == 0
    assert main(["--state", state_path, "toggle-column", "team"]) == 0
    assert main(["--state", state_path, "toggle-column", "missing"]) == 1

    output = capsys.readouterr().out

    assert "Added column 'team'" in output
    assert "Column 'team' already exists" in output
    assert "Column 'team' is now hidden" in output
    assert "Unknown column: missing" in output

import io

import pytest

from table_manager.backend import create_app
from table_manager.engine.state import TableState


@pytest.fixture()
def client():
    app = create_app(TableState(storage_path=None))
    app.config["TESTING"] = True
    return app.test_client()


def test_table_view_returns_first_page(client):
    response = client.get("/api/table")
    payload = response.get_json()

    assert response.status_code == 200
    assert payload["total"] == 20
    assert len(payload["rows"]) == 10
    assert payload["pageCount"] == 2
    assert payload["visibleColumns"] == ["name", "email", "age", "role"]


def test_search_resets_page(client):
    client.post("/api/table/page", json={"page": 1})

    payload = client.post("/api/table/search", json={"search": "ADMIN"}).get_json()

    assert payload["page"] == 0
    assert payload["total"] == 5


def test_sorting_endpoints(client):
    payload = client.post("/api/table/sorting", json={"columnId": "age", "direction": "desc"}).get_json()
    assert payload["rows"][0]["name"] == "Ivan"

    bad = client.post("/api/table/sorting", json={"columnId": "age", "direction": "up"})
    assert bad.status_code == 400

    cycled = client.post("/api/table/sorting/age/cycle").get_json()
    assert cycled["sorting"] == {"columnId": "", "direction": None}


def test_add_column_requires_id_and_label(client):
    missing = client.post("/api/columns", json={"id": "team"})
    added = client.post("/api/columns", json={"id": "team", "label": "Team"}).get_json()
    again = client.post("/api/columns", json={"id": "team", "label": "Other"}).get_json()

    assert missing.status_code == 400
    assert added["added"] is True
    assert again["added"] is False
    assert added["columns"][-1] == {"id": "team", "label": "Team", "visible": True}


def test_toggle_unknown_column_is_404(client):
    assert client.post("/api/columns/nope/toggle").status_code == 404
    assert client.post("/api/columns/email/toggle").status_code == 200


def test_import_multipart_file(client):
    data = {
        "file": (
            io.BytesIO(b"Name,Email,Age,Role,Department\nUma,uma@example.com,41,Admin,Finance\n"),
            "people.csv",
        )
    }

    response = client.post("/api/table/import", data=data, content_type="multipart/form-data")
    payload = response.get_json()

    assert response.status_code == 200
    assert payload["rowsImported"] == 1
    assert payload["addedColumns"] == ["department"]
    assert payload["table"]["rows"][0]["department"] == "Finance"


def test_import_failure_reports_missing_columns(client):
    response = client.post("/api/table/import", data=b"Name,Email\nUma,uma@example.com\n")
    payload = response.get_json()

    assert response.status_code == 400
    assert payload["kind"] == "missing_columns"
    assert payload["missing"] == ["age", "role"]
    assert client.get("/api/table").get_json()["total"] == 20


def test_export_returns_csv_attachment(client):
    client.post("/api/columns/email/toggle")

    response = client.get("/api/table/export")
    lines = response.get_data(as_text=True).splitlines()

    assert response.status_code == 200
    assert response.mimetype == "text/csv"
    assert 'filename="export_' in response.headers["Content-Disposition"]
    assert lines[0] == "Name,Age,Role"
    assert len(lines) == 21


def test_set_rows_validates_payload(client):
    bad = client.post("/api/table/rows", json={"rows": "nope"})
    good = client.post("/api/table/rows", json={"rows": [{"name": "Solo"}]}).get_json()

    assert bad.status_code == 400
    assert good["total"] == 1
    assert good["rows"] == [{"name": "Solo"}]

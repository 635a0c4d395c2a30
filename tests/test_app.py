import io

import pytest

from backend.file_ingestor import SUPPORTED_EXTENSIONS
from backend.vocabulary import DEFAULT_VOCABULARY
from frontend import app as webapp


@pytest.fixture
def client():
    webapp.app.config["TESTING"] = True
    with webapp.app.test_client() as c:
        yield c


def _upload(client, url, data, filename, content_type="text/plain"):
    return client.post(
        url,
        data={"file": (io.BytesIO(data), filename, content_type)},
        content_type="multipart/form-data",
    )


def test_index_restricts_file_picker(client):
    resp = client.get("/")
    assert resp.status_code == 200
    assert b'accept=".txt,.csv,.xlsx,.xls"' in resp.data


def test_allowed_extensions_config():
    assert webapp.app.config["ALLOWED_EXTENSIONS"] == {"txt", "csv", "xlsx", "xls"}
    assert webapp.app.config["ALLOWED_EXTENSIONS"] == set(SUPPORTED_EXTENSIONS)
    assert webapp.ACCEPT_ATTR == ".txt,.csv,.xlsx,.xls"


def test_json_keys_keep_insertion_order(client, sample_report):
    assert webapp.app.json.sort_keys is False
    resp = _upload(client, "/api/analyze", sample_report.encode("utf-8"), "jane.txt")
    assert list(resp.get_json()) == [
        "fileType", "fileSize", "keyInformations", "medicalTerms",
        "potentialConditions", "riskFactors", "recommendations",
    ]


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.get_json()["status"] == "ok"


def test_security_headers(client):
    resp = client.get("/")
    assert resp.headers["X-Content-Type-Options"] == "nosniff"
    assert resp.headers["X-Frame-Options"] == "DENY"


def test_upload_renders_four_sections(client, sample_report):
    resp = _upload(client, "/upload", sample_report.encode("utf-8"), "jane.txt")
    assert resp.status_code == 200
    body = resp.get_data(as_text=True)
    for heading in ("Key Information", "Potential Conditions", "Risk Factors", "Recommendations"):
        assert f"<h2>{heading}</h2>" in body
    assert "Jane Doe" in body
    assert "40% Confidence" in body
    assert "width: 40%" in body
    assert "sedentary lifestyle" in body


def test_upload_without_conditions(client):
    resp = _upload(client, "/upload", b"Routine follow up.", "note.txt")
    assert resp.status_code == 200
    assert b"No significant medical information found in the report." in resp.data


def test_upload_without_risk_factors(client):
    resp = _upload(client, "/upload", b"asthma review", "note.txt")
    assert b"No specific risk factors identified" in resp.data


def test_upload_unsupported_type_alerts(client):
    resp = _upload(client, "/upload", b"%PDF-1.4", "scan.pdf", "application/pdf")
    assert resp.status_code == 400
    body = resp.get_data(as_text=True)
    assert 'role="alert"' in body
    assert "Unsupported file type" in body
    assert "Potential Conditions" not in body


def test_upload_missing_file(client):
    resp = client.post("/upload", data={}, content_type="multipart/form-data")
    assert resp.status_code == 400
    assert b"No file provided." in resp.data


def test_api_analyze_returns_result(client, sample_report):
    resp = _upload(client, "/api/analyze", sample_report.encode("utf-8"), "jane.txt")
    assert resp.status_code == 200
    payload = resp.get_json()
    assert payload["fileType"] == "text/plain"
    assert payload["medicalTerms"] == ["diabetes", "hypertension"]
    assert payload["riskFactors"] == ["smoking", "sedentary lifestyle"]
    assert {"label": "Age", "value": "47"} in payload["keyInformations"]


def test_api_analyze_is_repeatable(client, sample_report):
    data = sample_report.encode("utf-8")
    first = _upload(client, "/api/analyze", data, "jane.txt").get_json()
    second = _upload(client, "/api/analyze", data, "jane.txt").get_json()
    assert first == second


def test_api_analyze_csv(client):
    data = b"Patient Name,Jane Doe\nDiagnosis,asthma\n"
    payload = _upload(client, "/api/analyze", data, "jane.csv", "text/csv").get_json()
    assert payload["medicalTerms"] == ["asthma"]
    assert payload["keyInformations"][0]["value"] == "Jane Doe"


def test_api_analyze_unsupported(client):
    resp = _upload(client, "/api/analyze", b"data", "scan.pdf", "application/pdf")
    assert resp.status_code == 400
    assert resp.get_json()["success"] is False


def test_api_analyze_requires_file(client):
    resp = client.post("/api/analyze", data={}, content_type="multipart/form-data")
    assert resp.status_code == 400
    assert resp.get_json() == {"success": False, "error": "No file provided."}


def test_unknown_route_is_json(client):
    resp = client.get("/nope")
    assert resp.status_code == 404
    assert resp.get_json() == {"error": "Not found"}


def test_load_vocabulary_from_env(tmp_path, monkeypatch):
    path = tmp_path / "vocab.json"
    path.write_text('{"conditions": ["gout"], "risk_factors": []}', encoding="utf-8")
    monkeypatch.setenv("REPORT_ANALYZER_VOCABULARY", str(path))
    assert webapp.load_vocabulary().conditions == ("gout",)
    monkeypatch.delenv("REPORT_ANALYZER_VOCABULARY")
    assert webapp.load_vocabulary() is DEFAULT_VOCABULARY

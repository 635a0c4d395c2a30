# --- ensure repo root is on sys.path when running this file directly ---
import sys
from pathlib import Path
ROOT = Path(__file__).resolve().parents[1]   # .../medical-report-analyzer
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))
# ----------------------------------------------------------------------

import os
import logging
from datetime import datetime, timezone
from typing import Optional

from flask import Flask, request, jsonify, render_template_string

from backend.file_ingestor import SUPPORTED_EXTENSIONS
from backend.logger import AuditLogger
from backend.processor import MedicalReportProcessor
from backend.vocabulary import DEFAULT_VOCABULARY, MedicalVocabulary

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
log = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# Flask setup
# -----------------------------------------------------------------------------
app = Flask(__name__)

app.config["MAX_CONTENT_LENGTH"] = 10 * 1024 * 1024  # 10 MB report cap
app.config["ALLOWED_EXTENSIONS"] = set(SUPPORTED_EXTENSIONS)
app.json.sort_keys = False


def load_vocabulary() -> MedicalVocabulary:
    path = os.getenv("REPORT_ANALYZER_VOCABULARY")
    if not path:
        return DEFAULT_VOCABULARY
    log.info("Loading vocabulary from %s", path)
    return MedicalVocabulary.from_json_file(path)


PROCESSOR = MedicalReportProcessor(
    vocabulary=load_vocabulary(),
    audit_logger=AuditLogger(os.getenv("REPORT_ANALYZER_AUDIT_DIR") or None),
    user_id=os.getenv("APP_USER_ID", "WEBAPP"),
)

# -----------------------------------------------------------------------------
# Helpers
# -----------------------------------------------------------------------------
ACCEPT_ATTR = ",".join(
    f".{ext}" for ext in SUPPORTED_EXTENSIONS if ext in app.config["ALLOWED_EXTENSIONS"]
)  # .txt,.csv,.xlsx,.xls

INDEX_HTML = """<!doctype html>
<html lang="en">
<head>
  <meta charset="utf-8" />
  <title>Medical Report Analyzer</title>
  <meta name="viewport" content="width=device-width, initial-scale=1" />
  <style>
    body { font-family: system-ui, -apple-system, Segoe UI, Roboto, Arial, sans-serif; margin: 2rem; line-height: 1.45; background: #f3f4f6; }
    .card { max-width: 960px; margin: 0 auto; background: #fff; border-radius: 12px; box-shadow: 0 4px 16px rgba(0,0,0,0.08); }
    .header { background: #2563eb; color: #fff; padding: 1rem 1.5rem; border-radius: 12px 12px 0 0; }
    .section { padding: 1.5rem; border-bottom: 1px solid #eee; }
    .grid { display: grid; grid-template-columns: 1fr 1fr; gap: 1.5rem; }
    .panel { background: #f9fafb; padding: 1rem; border-radius: 8px; }
    .bar { width: 100%; background: #e5e7eb; border-radius: 999px; height: 0.6rem; }
    .bar > div { background: #2563eb; height: 0.6rem; border-radius: 999px; }
    .alert { background: #fee2e2; color: #991b1b; border: 1px solid #fca5a5; padding: 1rem; border-radius: 8px; }
    .note { color: #6b7280; text-align: center; }
    .file { color: #059669; margin-left: 1rem; }
    button { padding: 0.6rem 1rem; border-radius: 8px; border: 0; background: #3b82f6; color: #fff; cursor: pointer; }
    @media (max-width: 720px) { .grid { grid-template-columns: 1fr; } }
  </style>
</head>
<body>
  <div class="card">
    <div class="header"><h1>Medical Report Analyzer</h1></div>
    <div class="section">
      <form action="/upload" method="post" enctype="multipart/form-data">
        <input type="file" id="file" name="file" accept="{{ accept }}" required />
        <button type="submit">Upload Medical Report</button>
        {% if filename %}<span class="file">{{ filename }}{% if result %} - {{ result.file_size }}{% endif %}</span>{% endif %}
      </form>
    </div>
    {% if error_msg %}
    <div class="section">
      <div class="alert" role="alert"><strong>Upload failed.</strong> {{ error_msg }}</div>
    </div>
    {% elif result and result.has_findings %}
    <div class="section">
      <p class="note">{{ result.file_type }} &middot; {{ result.file_size }}</p>
      <div class="grid">
        <div>
          <h2>Key Information</h2>
          <div class="panel">
            {% for info in result.key_informations %}
            <div><strong>{{ info.label }}:</strong> {{ info.value }}</div>
            {% endfor %}
          </div>
        </div>
        <div>
          <h2>Potential Conditions</h2>
          <div class="panel">
            {% for condition in result.potential_conditions %}
            <div>
              <strong>{{ condition.name }}</strong>
              <div class="bar"><div style="width: {{ condition.confidence }}%"></div></div>
              <small>{{ condition.confidence }}% Confidence</small>
            </div>
            {% endfor %}
          </div>
        </div>
        <div>
          <h2>Risk Factors</h2>
          <div class="panel">
            {% if result.risk_factors %}
            <ul>{% for factor in result.risk_factors %}<li>{{ factor }}</li>{% endfor %}</ul>
            {% else %}
            <p>No specific risk factors identified</p>
            {% endif %}
          </div>
        </div>
        <div>
          <h2>Recommendations</h2>
          <div class="panel">
            <ul>{% for rec in result.recommendations %}<li>{{ rec }}</li>{% endfor %}</ul>
          </div>
        </div>
      </div>
    </div>
    {% elif result %}
    <div class="section"><p class="note">No significant medical information found in the report.</p></div>
    {% endif %}
  </div>
</body>
</html>
"""


def render_page(result=None, filename: Optional[str] = None, error_msg: Optional[str] = None):
    return render_template_string(
        INDEX_HTML, accept=ACCEPT_ATTR, result=result, filename=filename, error_msg=error_msg
    )


def run_upload(file):
    """Push one uploaded FileStorage through the processor"""
    filename = file.filename or ""
    return filename, PROCESSOR.process_report(
        file.stream,
        filename=filename,
        content_type=file.mimetype or None,
    )

# -----------------------------------------------------------------------------
# Security headers
# -----------------------------------------------------------------------------
@app.after_request
def set_security_headers(resp):
    resp.headers["X-Content-Type-Options"] = "nosniff"
    resp.headers["X-Frame-Options"] = "DENY"
    resp.headers["Referrer-Policy"] = "no-referrer"
    resp.headers["Content-Security-Policy"] = "default-src 'self'; img-src 'self' data:; style-src 'self' 'unsafe-inline';"
    return resp

# -----------------------------------------------------------------------------
# Routes
# -----------------------------------------------------------------------------
@app.get("/")
def index():
    return render_page()


@app.get("/health")
def health():
    return jsonify({"status": "ok", "time": datetime.now(timezone.utc).isoformat()}), 200


@app.post("/upload")
def upload_form():
    file = request.files.get("file")
    if file is None or file.filename == "":
        return render_page(error_msg="No file provided."), 400

    try:
        filename, outcome = run_upload(file)
    except Exception:
        log.exception("Unhandled exception processing upload")
        return render_page(error_msg="An internal error occurred."), 500

    if not outcome.get("success"):
        return render_page(filename=filename, error_msg=outcome.get("error")), 400

    return render_page(result=outcome["result"], filename=filename), 200


@app.post("/api/analyze")
def api_analyze():
    """
    JSON API for programmatic clients.
    Returns the AnalysisResult with camelCase keys.
    """
    if "file" not in request.files or request.files["file"].filename == "":
        return jsonify({"success": False, "error": "No file provided."}), 400

    try:
        _, outcome = run_upload(request.files["file"])
    except Exception:
        log.exception("Unhandled exception processing API upload")
        return jsonify({"success": False, "error": "An internal error occurred."}), 500

    if not outcome.get("success"):
        return jsonify({"success": False, "error": outcome.get("error")}), 400

    return jsonify(outcome["result"].to_dict()), 200

# -----------------------------------------------------------------------------
# Error handlers
# -----------------------------------------------------------------------------
@app.errorhandler(413)
def too_large(_):
    return jsonify({"error": "File too large"}), 413


@app.errorhandler(404)
def not_found(_):
    return jsonify({"error": "Not found"}), 404


@app.errorhandler(405)
def method_not_allowed(_):
    return jsonify({"error": "Method not allowed"}), 405


@app.errorhandler(500)
def server_error(_):
    return jsonify({"error": "Internal server error"}), 500

# -----------------------------------------------------------------------------
# Entry point
# -----------------------------------------------------------------------------
if __name__ == "__main__":
    port = int(os.getenv("PORT", "5057"))
    app.run(host="127.0.0.1", port=port, debug=os.getenv("DEBUG", "false").lower() == "true")

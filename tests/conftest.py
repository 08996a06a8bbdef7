import io

import pytest
from openpyxl import Workbook

from config import StorageConfig
from db import dispose_db
from main import create_app


REFERENTIAL = """{
  "buyers": [
    {"personne": "Marie Dupont", "trigramme": "mdu"},
    {"personne": "Jean Martin", "trigramme": "JMA"},
    {"personne": "Sans Code", "trigramme": ""}
  ],
  "families": ["Informatique", "Travaux", "Formation"],
  "sub_families": ["Logiciels", "Conseil", "null"],
  "cpv": [
    {"code": "48000000", "titre": "Logiciels et systèmes d'information"},
    {"code": "80500000", "titre": "Services de formation"}
  ]
}"""


@pytest.fixture
def referential_file(tmp_path):
    path = tmp_path / "referential.json"
    path.write_text(REFERENTIAL, encoding="utf-8")
    return path


@pytest.fixture
def app(tmp_path, referential_file):
    """Flask app on a temporary SQLite file and storage directory."""
    application = create_app({
        "DB_URL": f"sqlite:///{tmp_path / 'test.sqlite'}",
        "REFERENTIAL_PATH": referential_file,
        "STORAGE": StorageConfig(root_dir=tmp_path / "storage"),
    })
    application.config["TESTING"] = True
    yield application
    dispose_db()


@pytest.fixture
def client(app):
    """Return a Flask test client."""
    return app.test_client()


def make_workbook(header, rows, sheet_title="Feuil1", extra_sheet=None) -> bytes:
    """Build an .xlsx in memory: first sheet = header + rows."""
    wb = Workbook()
    ws = wb.active
    ws.title = sheet_title
    ws.append(list(header))
    for row in rows:
        ws.append(list(row))
    if extra_sheet:
        other = wb.create_sheet("Autre")
        for row in extra_sheet:
            other.append(list(row))
    buf = io.BytesIO()
    wb.save(buf)
    return buf.getvalue()


@pytest.fixture
def workbook_factory():
    return make_workbook

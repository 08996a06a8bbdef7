import io
from datetime import date

import pytest
from openpyxl import load_workbook

from export_engine import EXPORT_COLUMNS

HEADER = [
    "ID", "Titre du dossier", "Acheteur", "Statut du Dossier", "Priorité",
    "Montant prévisionnel du marché (€ TTC)", "Objet court", "Type de procédure",
    "Montant prévisionnel du marché (€ HT)", "Date de lancement de la consultation",
]
ROWS = [
    ["42", "Parc informatique", "Marie Dupont", "En cours", "P1", "120 000 €",
     "Postes", "Appel d'offres", "50 000", "15/03/2024"],
    ["42", "Ignored title", "Jean Martin", "Clos", "P3", "1",
     "Écrans", "MAPA", "30 000", "2024-04-01"],
    ["7", "Formation", "Jean Martin", "Clos", "", "10 000",
     "Sessions", "MAPA", "8 000", ""],
]


@pytest.fixture
def loaded(client, workbook_factory):
    content = workbook_factory(HEADER, ROWS)
    resp = client.post("/api/v1/import",
                       data={"file": (io.BytesIO(content), "portefeuille.xlsx")},
                       content_type="multipart/form-data")
    assert resp.status_code == 200
    return resp.get_json()


# ── Import ────────────────────────────────────────────────────────────

def test_import_reports_counts(loaded):
    assert loaded["projects"] == 2
    assert loaded["procedures"] == 3
    assert loaded["skipped"] == 0
    assert loaded["persisted"] is True


def test_import_accepts_raw_body(client, workbook_factory):
    content = workbook_factory(HEADER, ROWS[:1])
    resp = client.post("/api/v1/import", data=content,
                       content_type="application/octet-stream")
    assert resp.status_code == 200
    assert resp.get_json()["projects"] == 1


def test_import_dry_run_returns_preview_and_stores_nothing(client, workbook_factory):
    content = workbook_factory(HEADER, ROWS)
    resp = client.post("/api/v1/import?persist=0",
                       data={"file": (io.BytesIO(content), "p.xlsx")},
                       content_type="multipart/form-data")
    body = resp.get_json()
    assert body["persisted"] is False
    assert [p["ID"] for p in body["preview"]] == ["42", "7"]
    assert client.get("/api/v1/projects").get_json()["total"] == 0


def test_import_rejects_unreadable_file(client):
    resp = client.post("/api/v1/import",
                       data={"file": (io.BytesIO(b"not a workbook"), "x.xlsx")},
                       content_type="multipart/form-data")
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "file empty or malformed"


def test_import_without_file(client):
    resp = client.post("/api/v1/import", data={},
                       content_type="multipart/form-data")
    assert resp.status_code == 400


# ── Projects ──────────────────────────────────────────────────────────

def test_list_projects_sorted_by_id_desc(client, loaded):
    body = client.get("/api/v1/projects").get_json()
    assert body["total"] == 2
    assert [p["ID"] for p in body["projects"]] == ["42", "7"]
    assert body["amounts"]["ttc"] == 130000.0
    assert body["amounts"]["ttc_display"] == "130 000 €"


def test_list_projects_filters(client, loaded):
    assert client.get("/api/v1/projects?q=parc").get_json()["total"] == 1
    assert client.get("/api/v1/projects?status=Clos").get_json()["total"] == 1
    body = client.get("/api/v1/projects", query_string=[
        ("status", "Clos"), ("status", "En cours")]).get_json()
    assert body["total"] == 2
    assert client.get("/api/v1/projects?buyer=Nobody").get_json()["total"] == 0


def test_get_project_first_row_wins(client, loaded):
    body = client.get("/api/v1/projects/42").get_json()
    project = body["project"]
    assert project["Titre du dossier"] == "Parc informatique"
    assert project["Acheteur"] == "Marie Dupont"
    assert [p["id"] for p in project["procedures"]] == ["42-P1", "42-P2"]
    assert project["procedures"][0]["Date de lancement de la consultation"] == "2024-03-15"
    assert body["totals"] == {"ttc": 120000.0, "procedures_ht": 80000.0,
                              "budget_issue": False}


def test_get_unknown_project(client, loaded):
    assert client.get("/api/v1/projects/999").status_code == 404


def test_put_project_path_id_wins(client, loaded):
    doc = client.get("/api/v1/projects/7").get_json()["project"]
    doc["ID"] = "other"
    doc["Statut du Dossier"] = "En cours"
    resp = client.put("/api/v1/projects/7", json=doc)
    assert resp.status_code == 200
    assert client.get("/api/v1/projects/7").get_json()["project"]["Statut du Dossier"] == "En cours"
    assert client.get("/api/v1/projects/other").status_code == 404


def test_put_requires_object(client, loaded):
    assert client.put("/api/v1/projects/7", json=["x"]).status_code == 400


def test_bulk_save(client):
    resp = client.post("/api/v1/projects/bulk",
                       json=[{"ID": "1"}, {"ID": ""}, {"ID": "2", "procedures": []}])
    assert resp.get_json() == {"saved": 2}
    assert client.get("/api/v1/projects").get_json()["total"] == 2


def test_delete_project(client, loaded):
    assert client.delete("/api/v1/projects/7").get_json() == {"deleted": "7"}
    assert client.get("/api/v1/projects/7").status_code == 404
    assert client.delete("/api/v1/projects/7").status_code == 404


def test_clear_projects(client, loaded):
    assert client.delete("/api/v1/projects").get_json() == {"deleted": 2}
    assert client.get("/api/v1/projects").get_json()["total"] == 0


# ── Procedures ────────────────────────────────────────────────────────

def test_create_procedure(client, loaded):
    resp = client.post("/api/v1/projects/42/procedures")
    assert resp.status_code == 201
    proc = resp.get_json()
    year = date.today().strftime("%y")
    assert proc["id"] == "42-P3"
    assert proc["Acheteur"] == "Marie Dupont"
    assert proc["Numéro de procédure (Afpa)"] == f"{year}500 -  - MDU"

    second = client.post("/api/v1/projects/7/procedures").get_json()
    assert second["Numéro de procédure (Afpa)"] == f"{year}501 -  - JMA"


def test_regenerate_number_uses_subject(client, loaded):
    resp = client.post("/api/v1/projects/7/procedures/7-P1/number")
    number = resp.get_json()["Numéro de procédure (Afpa)"]
    assert number.endswith(" - Sessions - JMA")
    assert client.post("/api/v1/projects/7/procedures/nope/number").status_code == 404


def test_list_procedures(client, loaded):
    body = client.get("/api/v1/procedures").get_json()
    assert body["stats"] == {"count": 3, "total": 88000.0,
                             "average": pytest.approx(88000.0 / 3)}
    assert body["types"] == ["Appel d'offres", "MAPA"]
    assert [r["procedure"]["id"] for r in body["procedures"]] == ["42-P2", "42-P1", "7-P1"]
    assert body["procedures"][-1]["projectTitle"] == "Formation"

    mapa = client.get("/api/v1/procedures?type=MAPA").get_json()
    assert mapa["stats"]["count"] == 2
    search = client.get("/api/v1/procedures?q=écrans").get_json()
    assert [r["procedure"]["id"] for r in search["procedures"]] == ["42-P2"]


def test_dashboard(client, loaded):
    body = client.get("/api/v1/stats").get_json()
    assert body["projects"] == 2
    assert body["procedures"] == 3
    assert {"name": "MAPA", "value": 2} in body["by_procedure_type"]
    assert {"name": "Non défini", "value": 1} in body["by_priority"]


# ── Export ────────────────────────────────────────────────────────────

def test_export_download(client, loaded):
    resp = client.get("/api/v1/export")
    assert resp.status_code == 200
    assert resp.mimetype.endswith("spreadsheetml.sheet")
    assert "Portefeuille_Procedures_Afpa.xlsx" in resp.headers["Content-Disposition"]

    wb = load_workbook(io.BytesIO(resp.data), read_only=True)
    rows = list(wb.active.iter_rows(values_only=True))
    assert list(rows[0]) == list(EXPORT_COLUMNS)
    assert len(rows) == 1 + 3


def test_export_custom_name(client, loaded):
    resp = client.get("/api/v1/export?filename=bilan")
    assert "bilan.xlsx" in resp.headers["Content-Disposition"]


# ── Referential ───────────────────────────────────────────────────────

def test_referential_endpoints(client):
    assert client.get("/api/v1/referential/buyers").get_json() == [
        "Jean Martin", "Marie Dupont", "Sans Code"]
    assert client.get("/api/v1/referential/trigram",
                      query_string={"name": "Jean Martin"}).get_json() == {
        "name": "Jean Martin", "trigram": "JMA"}
    assert client.get("/api/v1/referential/cpv?q=4").get_json() == []
    assert client.get("/api/v1/referential/sub-families").get_json() == ["Conseil", "Logiciels"]


def test_list_projects_with_overflowing_amount(client):
    client.post("/api/v1/projects/bulk", json=[
        {"ID": "1", "Montant prévisionnel du marché (€ TTC)": "1e999"}])
    resp = client.get("/api/v1/projects")
    assert resp.status_code == 200
    assert resp.get_json()["amounts"]["ttc_display"] == "0 €"

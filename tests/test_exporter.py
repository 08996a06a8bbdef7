import io

import pytest
from openpyxl import load_workbook

from export_engine import (
    DEFAULT_FILE_NAME, EXPORT_COLUMNS, SHEET_NAME, ExportError,
    export_procedures, flatten_procedures, workbook_bytes,
)
from import_engine import parse_rows
from schema.entities import Procedure, Project


@pytest.fixture
def projects():
    return [
        Project(
            id="42", titre_du_dossier="Parc informatique", statut_du_dossier="En cours",
            procedures=[
                Procedure(id="42-P1", numero_afpa="25500 - Postes - MDU",
                          objet_court="Postes", acheteur="Marie Dupont",
                          type_de_procedure="AO ouvert", montant_ht="10 000",
                          date_lancement="2025-01-10", statut_consultation="Attribué"),
                Procedure(id="P-X", objet_court="Écrans"),
            ],
        ),
        Project(id="43", titre_du_dossier="Sans procédure"),
        Project(id="44", statut_du_dossier="Clos",
                procedures=[Procedure(id="44-P1", date_des_rejets="2025-02-01")]),
    ]


def test_export_columns_are_fixed_and_ordered():
    assert EXPORT_COLUMNS == (
        "Numéro de procédure (Afpa)", "ID Procédure", "Objet de la procédure",
        "Acheteur Procédure", "Type de procédure", "Montant Procédure (€ HT)",
        "Date Lancement", "Date des Rejets", "Avis d'attribution",
        "Données essentielles", "Statut de la consultation", "ID Projet",
        "Projet", "Statut Projet",
    )


def test_one_row_per_procedure_in_project_then_list_order(projects):
    rows = flatten_procedures(projects)

    assert [r["ID Procédure"] for r in rows] == ["42-P1", "P-X", "44-P1"]
    assert all(tuple(r) == EXPORT_COLUMNS for r in rows)

    first = rows[0]
    assert first["Numéro de procédure (Afpa)"] == "25500 - Postes - MDU"
    assert first["Objet de la procédure"] == "Postes"
    assert first["Montant Procédure (€ HT)"] == "10 000"
    assert first["Date Lancement"] == "2025-01-10"
    assert first["ID Projet"] == "42"
    assert first["Projet"] == "Parc informatique"
    assert first["Statut Projet"] == "En cours"

    # Absent fields are present as empty strings
    assert rows[1]["Acheteur Procédure"] == ""
    assert rows[2]["Projet"] == ""
    assert rows[2]["Date des Rejets"] == "2025-02-01"


def test_projects_without_procedures_produce_no_rows():
    assert flatten_procedures([Project(id="1"), Project(id="2")]) == []


def test_row_count_matches_imported_procedures():
    rows = [{"ID": "1"}, {"ID": "2"}, {"ID": "1"}, {"ID": ""}, {"ID": "3"}]
    projects, report = parse_rows(rows)
    assert len(flatten_procedures(projects)) == report.procedures == 4


def test_workbook_has_single_named_sheet(projects):
    wb = load_workbook(io.BytesIO(workbook_bytes(flatten_procedures(projects))))
    assert wb.sheetnames == [SHEET_NAME]

    values = list(wb.active.iter_rows(values_only=True))
    assert values[0] == EXPORT_COLUMNS
    assert len(values) == 4
    assert values[1][1] == "42-P1"
    assert values[3][11] == "44"


def test_empty_export_still_has_header():
    wb = load_workbook(io.BytesIO(workbook_bytes([])))
    assert list(wb.active.iter_rows(values_only=True)) == [EXPORT_COLUMNS]


def test_leading_equals_sign_is_written_as_text():
    project = Project(id="5", titre_du_dossier="=Achat", procedures=[
        Procedure(id="5-P1", objet_court="=SUM(A1:A2)", montant_ht="=10 000"),
    ])
    wb = load_workbook(io.BytesIO(workbook_bytes(flatten_procedures([project]))))
    cells = {c.value: c.data_type for c in next(wb.active.iter_rows(min_row=2, max_row=2))}

    for value in ("=Achat", "=SUM(A1:A2)", "=10 000"):
        assert cells[value] == "s"
    assert "f" not in cells.values()


def test_export_procedures_writes_default_file(tmp_path, projects):
    path = export_procedures(projects, directory=tmp_path)

    assert path == tmp_path / DEFAULT_FILE_NAME
    assert path.is_file()
    assert [p.name for p in tmp_path.iterdir()] == [DEFAULT_FILE_NAME]


def test_export_procedures_honours_file_name(tmp_path, projects):
    path = export_procedures(projects, file_name="rapport.xlsx", directory=tmp_path)
    assert path.name == "rapport.xlsx"


def test_export_failure_is_raised(tmp_path, projects):
    not_a_dir = tmp_path / "occupied"
    not_a_dir.write_text("x")
    with pytest.raises(ExportError):
        export_procedures(projects, directory=not_a_dir)

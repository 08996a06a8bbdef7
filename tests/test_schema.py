from datetime import date

from schema import loader
from schema.entities import Attachment, Procedure, Project
from schema.numbering import (
    build_procedure_number, next_procedure_prefix, synthesize_procedure_id,
)


def test_document_round_trip_is_lossless():
    project = Project(
        id="42", titre_du_dossier="Parc", montant_ttc="12 000 €",
        no_attachments=[Attachment(name="note.pdf", url="/f/note.pdf", size=8,
                                   type="application/pdf",
                                   uploaded_at="2025-01-01T00:00:00+00:00",
                                   path="project_42/no/1_note.pdf")],
        procedures=[Procedure(id="42-P1", objet_court="Postes",
                              sous_familles=["Logiciels", "Conseil"])],
    )
    doc = project.to_dict()

    assert doc["ID"] == "42"
    assert doc["Montant prévisionnel du marché (€ TTC)"] == "12 000 €"
    assert doc["procedures"][0]["Sous-Familles"] == ["Logiciels", "Conseil"]
    assert doc["no_attachments"][0]["uploadedAt"] == "2025-01-01T00:00:00+00:00"
    assert Project.from_dict(doc) == project


def test_from_dict_fills_missing_fields_and_splits_sub_families():
    proc = Procedure.from_dict({"id": "P1", "Sous-Familles": "a, b,,", "unknown": "x"})
    assert proc.sous_familles == ["a", "b"]
    assert proc.objet_court == ""
    assert "unknown" not in proc.to_dict()


def test_synthesized_procedure_id():
    assert synthesize_procedure_id("42", 3) == "42-P3"


def test_next_prefix_starts_at_500_for_the_year():
    assert next_procedure_prefix([], today=date(2025, 6, 1)) == "25500"


def test_next_prefix_follows_highest_sequence_of_the_year():
    projects = [
        Project(id="1", procedures=[
            Procedure(numero_afpa="25512 - Postes - MDU"),
            Procedure(numero_afpa="24999 - Ancien - JMA"),
        ]),
        Project(id="2", procedures=[Procedure(numero_afpa="25abc"),
                                    Procedure(numero_afpa="25503 - x - ZZZ")]),
    ]
    assert next_procedure_prefix(projects, today=date(2025, 6, 1)) == "25513"


def test_build_procedure_number():
    assert build_procedure_number("25513", " Postes ", "MDU") == "25513 - Postes - MDU"
    assert build_procedure_number("2551399", "", "ZZZ") == "25513 -  - ZZZ"


def test_referential_lookups(referential_file):
    stats = loader.load(referential_file)
    assert stats["buyers"] == 3

    assert loader.get_buyers() == ["Jean Martin", "Marie Dupont", "Sans Code"]
    assert loader.trigram_for(" marie dupont ") == "MDU"
    assert loader.trigram_for("Sans Code") == "ZZZ"
    assert loader.trigram_for("Inconnu") == "ZZZ"
    assert loader.trigram_for("") == "ZZZ"

    assert loader.search_families("FORM") == ["Formation", "Informatique"]
    assert loader.search_sub_families("") == ["Conseil", "Logiciels"]
    assert loader.search_cpv("f") == []
    assert loader.search_cpv("services") == ["80500000 - Services de formation"]
    assert loader.search_cpv("4800") == ["48000000 - Logiciels et systèmes d'information"]


def test_missing_referential_degrades_to_unknown(tmp_path):
    stats = loader.load(tmp_path / "absent.json")
    assert stats == {"buyers": 0, "families": 0, "sub_families": 0, "cpv": 0}
    assert loader.trigram_for("Marie Dupont") == "ZZZ"

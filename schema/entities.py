"""
schema.entities - Project / Procedure / Attachment records.

Each record has one named string attribute per canonical column
(see schema.fields).  ``to_dict()`` produces the stored document shape,
keyed by the column names; ``from_dict()`` is its inverse.  Keys that
are not known columns are dropped.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable

from schema.fields import (
    PROJECT_FIELDS, PROCEDURE_FIELDS,
    PROJECT_ID, PROCEDURE_ID, SUB_FAMILIES,
    NO_ATTACHMENTS, RP_ATTACHMENTS, PROCEDURES,
)


def split_list(value: Any) -> list[str]:
    """'a, b,,c ' → ['a', 'b', 'c'].  Lists are trimmed the same way."""
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        tokens: Iterable[Any] = value
    else:
        tokens = str(value).split(",")
    return [str(t).strip() for t in tokens if t is not None and str(t).strip()]


def _text(value: Any) -> str:
    return "" if value is None else str(value)


@dataclass
class Attachment:
    name: str = ""
    url: str = ""
    size: int = 0
    type: str = ""
    uploaded_at: str = ""
    path: str = ""

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "url": self.url,
            "size": self.size,
            "type": self.type,
            "uploadedAt": self.uploaded_at,
            "path": self.path,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Attachment":
        try:
            size = int(data.get("size") or 0)
        except (TypeError, ValueError):
            size = 0
        return cls(
            name=_text(data.get("name")),
            url=_text(data.get("url")),
            size=size,
            type=_text(data.get("type")),
            uploaded_at=_text(data.get("uploadedAt")),
            path=_text(data.get("path")),
        )


def _attachments(raw: Any) -> list[Attachment]:
    if not isinstance(raw, list):
        return []
    return [Attachment.from_dict(a) for a in raw if isinstance(a, dict)]


@dataclass
class Procedure:
    id: str = ""
    numero_afpa: str = ""
    acheteur: str = ""
    type_de_procedure: str = ""
    code_cpv_principal: str = ""
    montant_ht: str = ""
    economie_12_mois: str = ""
    forme_du_marche: str = ""
    objet_court: str = ""
    date_lancement: str = ""
    date_remise_candidatures: str = ""
    date_remise_offres: str = ""
    execution_date_debut: str = ""
    execution_date_fin: str = ""
    date_notification: str = ""
    duree_du_marche: str = ""
    sous_familles: list[str] = field(default_factory=list)

    nombre_de_retraits: str = ""
    nombre_de_soumissionnaires: str = ""
    nombre_de_questions: str = ""
    dispo_sociales: str = ""
    dispo_environnementales: str = ""
    solutions_innovantes: str = ""
    acces_tpe_pme: str = ""
    date_ecriture_dce: str = ""
    date_ouverture_offres: str = ""

    rp_date_validation_msa: str = ""
    rp_date_envoi_signature: str = ""
    rp_date_validation_document: str = ""
    rp_date_validation_codir: str = ""
    rp_commentaire: str = ""
    rp_attachments: list[Attachment] = field(default_factory=list)

    date_des_rejets: str = ""
    avis_attribution: str = ""
    donnees_essentielles: str = ""
    finalite_consultation: str = ""
    statut_consultation: str = ""

    def get(self, column: str) -> str:
        """Read a field by its canonical column name ('' if unknown)."""
        if column == PROCEDURE_ID:
            return self.id
        attr = PROCEDURE_FIELDS.get(column)
        return getattr(self, attr) if attr else ""

    def to_dict(self) -> dict:
        d: dict[str, Any] = {PROCEDURE_ID: self.id}
        for col, attr in PROCEDURE_FIELDS.items():
            d[col] = getattr(self, attr)
        d[SUB_FAMILIES] = list(self.sous_familles)
        d[RP_ATTACHMENTS] = [a.to_dict() for a in self.rp_attachments]
        return d

    @classmethod
    def from_dict(cls, data: dict) -> "Procedure":
        proc = cls(id=_text(data.get(PROCEDURE_ID)).strip())
        for col, attr in PROCEDURE_FIELDS.items():
            setattr(proc, attr, _text(data.get(col)))
        proc.sous_familles = split_list(data.get(SUB_FAMILIES))
        proc.rp_attachments = _attachments(data.get(RP_ATTACHMENTS))
        return proc


@dataclass
class Project:
    id: str = ""
    acheteur: str = ""
    famille_achat_principale: str = ""
    titre_du_dossier: str = ""
    montant_ttc: str = ""
    prescripteur: str = ""
    client_interne: str = ""
    statut_du_dossier: str = ""
    programme: str = ""
    operation: str = ""
    date_limite_etude_strategie: str = ""
    levier_achat: str = ""
    renouvellement_de_marche: str = ""
    perf_achat_previsionnelle: str = ""
    origine_du_montant: str = ""
    priorite: str = ""
    commission_achat: str = ""

    no_date_previsionnelle: str = ""
    no_date_validation_codir: str = ""
    no_date_envoi_signature: str = ""
    no_date_validation_document: str = ""
    no_nom_des_valideurs: str = ""
    no_statut: str = ""
    no_commentaire: str = ""
    no_attachments: list[Attachment] = field(default_factory=list)

    nom_des_valideurs: str = ""
    commentaire_general: str = ""

    procedures: list[Procedure] = field(default_factory=list)

    def get(self, column: str) -> str:
        """Read a field by its canonical column name ('' if unknown)."""
        if column == PROJECT_ID:
            return self.id
        attr = PROJECT_FIELDS.get(column)
        return getattr(self, attr) if attr else ""

    def find_procedure(self, procedure_id: str) -> Procedure | None:
        for proc in self.procedures:
            if proc.id == procedure_id:
                return proc
        return None

    def to_dict(self) -> dict:
        d: dict[str, Any] = {PROJECT_ID: self.id}
        for col, attr in PROJECT_FIELDS.items():
            d[col] = getattr(self, attr)
        d[NO_ATTACHMENTS] = [a.to_dict() for a in self.no_attachments]
        d[PROCEDURES] = [p.to_dict() for p in self.procedures]
        return d

    @classmethod
    def from_dict(cls, data: dict) -> "Project":
        project = cls(id=_text(data.get(PROJECT_ID)).strip())
        for col, attr in PROJECT_FIELDS.items():
            setattr(project, attr, _text(data.get(col)))
        project.no_attachments = _attachments(data.get(NO_ATTACHMENTS))
        raw_procs = data.get(PROCEDURES)
        if isinstance(raw_procs, list):
            project.procedures = [
                Procedure.from_dict(p) for p in raw_procs if isinstance(p, dict)
            ]
        return project

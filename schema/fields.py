"""
schema.fields - Canonical column names ↔ record attributes.

The spreadsheet header names are the field keys everywhere (import,
stored documents, export).  They are kept verbatim, accents and
currency symbols included; only the Python attribute names differ.
"""

# Column name  →  Project attribute (order = form / document order)
PROJECT_FIELDS: dict[str, str] = {
    "Acheteur":                                         "acheteur",
    "Famille Achat Principale":                         "famille_achat_principale",
    "Titre du dossier":                                 "titre_du_dossier",
    "Montant prévisionnel du marché (€ TTC)":           "montant_ttc",
    "Prescripteur":                                     "prescripteur",
    "Client Interne":                                   "client_interne",
    "Statut du Dossier":                                "statut_du_dossier",
    "Programme":                                        "programme",
    "Opération":                                        "operation",
    "Date limite étude stratégie avec client interne":  "date_limite_etude_strategie",
    "Levier Achat":                                     "levier_achat",
    "Renouvellement de marché":                         "renouvellement_de_marche",
    "Perf achat prévisionnelle (en %)":                 "perf_achat_previsionnelle",
    "Origine du montant pour le calcul de l'économie":  "origine_du_montant",
    "Priorité":                                         "priorite",
    "Commission Achat":                                 "commission_achat",
    # Note d'Opportunité (NO)
    "NO - Date prévisionnelle":                         "no_date_previsionnelle",
    "NO - Date validation CODIR":                       "no_date_validation_codir",
    "NO - Date envoi signature":                        "no_date_envoi_signature",
    "NO - Date de validation du document":              "no_date_validation_document",
    "NO - Nom des valideurs":                           "no_nom_des_valideurs",
    "NO - Statut":                                      "no_statut",
    "NO - Commentaire":                                 "no_commentaire",
    # Legacy columns still present in older workbooks
    "Nom des valideurs":                                "nom_des_valideurs",
    "Commentaire général sur le projet":                "commentaire_general",
}

# Column name  →  Procedure attribute
PROCEDURE_FIELDS: dict[str, str] = {
    "Numéro de procédure (Afpa)":                       "numero_afpa",
    "Acheteur":                                         "acheteur",
    "Type de procédure":                                "type_de_procedure",
    "Code CPV Principal":                               "code_cpv_principal",
    "Montant prévisionnel du marché (€ HT)":            "montant_ht",
    "Sur 12 mois économie achat prévisionnelle (€)":    "economie_12_mois",
    "Forme du marché":                                  "forme_du_marche",
    "Objet court":                                      "objet_court",
    "Date de lancement de la consultation":             "date_lancement",
    "Date de remise des candidatures":                  "date_remise_candidatures",
    "Date de remise des offres":                        "date_remise_offres",
    "7 Exécution Date de début":                        "execution_date_debut",
    "7 Exécution Date de fin":                          "execution_date_fin",
    "Date de Notification":                             "date_notification",
    "Durée du marché (en mois)":                        "duree_du_marche",
    # Indicateurs & DAE
    "Nombre de retraits":                               "nombre_de_retraits",
    "Nombre de soumissionnaires":                       "nombre_de_soumissionnaires",
    "Nombre de questions":                              "nombre_de_questions",
    "Dispo sociales":                                   "dispo_sociales",
    "Dispo environnementales":                          "dispo_environnementales",
    "Projet ouvert à l'acquisition de solutions innovantes": "solutions_innovantes",
    "Projet facilitant l'accès aux TPE/PME":            "acces_tpe_pme",
    "Date d'écriture du DCE":                           "date_ecriture_dce",
    "Date d'ouverture des offres":                      "date_ouverture_offres",
    # Rapport de Présentation (RP)
    "RP - Date validation MSA":                         "rp_date_validation_msa",
    "RP - Date envoi signature élec":                   "rp_date_envoi_signature",
    "RP - Date de validation du document":              "rp_date_validation_document",
    "RP - Date validation CODIR":                       "rp_date_validation_codir",
    "RP - Commentaire":                                 "rp_commentaire",
    # Attribution
    "Date des Rejets":                                  "date_des_rejets",
    "Avis d'attribution":                               "avis_attribution",
    "Données essentielles":                             "donnees_essentielles",
    "Finalité de la consultation":                      "finalite_consultation",
    "Statut de la consultation":                        "statut_consultation",
}

# Keys that are not plain string columns
PROJECT_ID = "ID"
PROCEDURE_ID = "id"
SUB_FAMILIES = "Sous-Familles"
NO_ATTACHMENTS = "no_attachments"
RP_ATTACHMENTS = "rp_attachments"
PROCEDURES = "procedures"

# Attribution columns hold dates even though their names do not say so
_DATE_LIKE = frozenset({"Avis d'attribution", "Données essentielles"})

PROJECT_DATE_COLUMNS = frozenset(
    c for c in PROJECT_FIELDS if "Date" in c or c in _DATE_LIKE
)
PROCEDURE_DATE_COLUMNS = frozenset(
    c for c in PROCEDURE_FIELDS if "Date" in c or c in _DATE_LIKE
)

# Columns read by the amount helpers
AMOUNT_HT = "Montant prévisionnel du marché (€ HT)"
AMOUNT_TTC = "Montant prévisionnel du marché (€ TTC)"

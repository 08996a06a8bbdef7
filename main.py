#!/usr/bin/env python3
"""
Procurement portfolio - Project / procedure tracking service
=============================================================

Single-command run:  python main.py

See config.py for all environment-variable tunables.
"""

from __future__ import annotations

import logging
from typing import Optional

import click
from flask import Flask, jsonify

import config
from config import StorageConfig
import schema
from db import init_db, get_session, ProjectRecord
from api import api_bp
from services.attachment_service import AttachmentStore

logger = logging.getLogger(__name__)


def create_app(overrides: Optional[dict] = None) -> Flask:
    """
    Flask application factory.

    *overrides* may set DB_URL, REFERENTIAL_PATH, STORAGE (a
    StorageConfig) and MAX_UPLOAD_MB; anything absent comes from config.
    """
    settings = {
        "DB_URL": config.DB_URL,
        "REFERENTIAL_PATH": config.REFERENTIAL_PATH,
        "STORAGE": StorageConfig.from_env(),
        "MAX_UPLOAD_MB": config.MAX_UPLOAD_MB,
    }
    settings.update(overrides or {})

    app = Flask(__name__)
    app.secret_key = config.SECRET
    app.config["MAX_CONTENT_LENGTH"] = int(settings["MAX_UPLOAD_MB"]) * 1024 * 1024
    app.json.ensure_ascii = False
    app.json.sort_keys = False

    # ── Load buyer / segmentation referential ───────────────────────
    stats = schema.load(settings["REFERENTIAL_PATH"])
    logger.info(f"Referential: {stats['buyers']} buyers, {stats['families']} families, "
                f"{stats['sub_families']} sub-families, {stats['cpv']} CPV codes")

    # ── Initialise database ─────────────────────────────────────────
    init_db(settings["DB_URL"])
    logger.info(f"Database: {settings['DB_URL']}")

    # ── Attachment storage ──────────────────────────────────────────
    storage: StorageConfig = settings["STORAGE"]
    storage.bucket_dir.mkdir(parents=True, exist_ok=True)
    app.extensions["attachment_store"] = AttachmentStore(storage)
    logger.info(f"Attachments: {storage.bucket_dir}")

    # ── Register blueprints ─────────────────────────────────────────
    app.register_blueprint(api_bp)

    # ── CLI: flask --app main import-xlsx / export-xlsx ─────────────
    @app.cli.command("import-xlsx")
    @click.argument("workbook", type=click.Path(exists=True, dir_okay=False))
    @click.option("--dry-run", is_flag=True, help="Parse only, do not store.")
    def import_xlsx(workbook, dry_run):
        """Import a portfolio workbook."""
        from import_engine import ImportFailure, run_import

        with open(workbook, "rb") as fh:
            try:
                report = run_import(fh.read(), persist=not dry_run)
            except ImportFailure as exc:
                raise click.ClickException(f"{exc.user_message}: {exc}")
        click.echo(f"  Done: {report.summary()}")
        for err in report.errors[:10]:
            click.echo(f"    Row {err['row']}: {err['reason']}")

    @app.cli.command("export-xlsx")
    @click.option("--name", default=None, help="Output file name.")
    @click.option("--dir", "directory", default=str(config.EXPORT_DIR),
                  type=click.Path(file_okay=False), help="Output directory.")
    def export_xlsx(name, directory):
        """Write the procedures report workbook."""
        from export_engine import export_procedures
        from services.projects_service import ProjectsService

        session = get_session()
        try:
            projects = ProjectsService.get_all(session)
        finally:
            session.close()
        click.echo(f"  Wrote {export_procedures(projects, name, directory)}")

    # ── Error handlers ──────────────────────────────────────────────
    @app.errorhandler(404)
    def _404(e):
        return jsonify({"error": "not found"}), 404

    @app.errorhandler(500)
    def _500(e):
        return jsonify({"error": "internal server error"}), 500

    return app


def _report_contents():
    """Print how many projects are already stored."""
    session = get_session()
    try:
        count = session.query(ProjectRecord).count()
    finally:
        session.close()

    if count:
        print(f"\n  Database has {count} projects.")
    else:
        print("\n  Database empty - POST a workbook to /api/v1/import.")


def main():
    logging.basicConfig(
        level=config.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    print("=" * 56)
    print("  Procurement portfolio")
    print("=" * 56)

    app = create_app()
    _report_contents()

    print(f"\n  http://{config.HOST}:{config.PORT}/api/v1/projects")
    print("=" * 56)

    app.run(host=config.HOST, port=config.PORT, debug=config.DEBUG)


if __name__ == "__main__":
    main()

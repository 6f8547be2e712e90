# server/linkku/commands.py

import os

import click
from flask import Flask

from linkku.services.seed_service import SeedService
from linkku.services.storage_service import StorageCleanupService


def register_commands(app: Flask) -> None:

    @app.cli.command("seed")
    def seed():
        """Create default link categories and the bootstrap superadmin."""
        created = SeedService.seed_categories()
        click.echo(f"Categories created: {created}")

        admin = SeedService.seed_superadmin(
            os.environ.get("SEED_ADMIN_EMAIL"),
            os.environ.get("SEED_ADMIN_PASSWORD"),
        )
        if admin:
            click.echo(f"Superadmin ready: {admin.email}")
        else:
            click.echo("SEED_ADMIN_EMAIL/SEED_ADMIN_PASSWORD not set, skipping superadmin")

    @app.cli.command("cleanup-uploads")
    @click.option("--delete", "delete_files", is_flag=True, help="Remove the unused files instead of listing them.")
    def cleanup_uploads(delete_files: bool):
        """Report uploaded files no record points at."""
        stats = StorageCleanupService.get_stats()

        click.echo(f"Total files: {stats['totalFiles']} ({stats['totalSizeFormatted']})")
        click.echo(f"Unused files: {stats['unusedFiles']} ({stats['unusedSizeFormatted']})")
        for entry in stats["unusedFileList"]:
            click.echo(f"  {entry['path']}  {entry['sizeFormatted']}")

        if delete_files and stats["unusedFiles"]:
            result = StorageCleanupService.delete_all_unused()
            click.echo(f"Deleted {result['deletedCount']} file(s), freed {result['freedSpaceFormatted']}")
            for error in result["errors"]:
                click.echo(f"  failed: {error['path']}: {error['error']}", err=True)

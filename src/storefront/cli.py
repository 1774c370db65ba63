# cli.py
import logging
import shutil
from pathlib import Path

import click

from storefront.errors import FileServiceError
from storefront.file_service.service import FileService
from storefront.mail.html_text import html_to_plain
from storefront.settings import get_settings

# Configure logging
logger = logging.getLogger(__name__)

@click.group()
@click.option("--log-level", default=None, help="Override LOG_LEVEL from settings")
def cli(log_level):
    """CLI commands for storefront file storage and mail"""
    settings = get_settings()
    logging.basicConfig(
        level=(log_level or settings.log_level).upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

@cli.command()
def show_config():
    """Show current configuration"""
    settings = get_settings()

    print("Current Configuration:")
    print(f"  Deployment Mode: {settings.deployment_mode}")
    print(f"  Work Area Base Directory: {settings.temp_file_base_directory or '(platform temp dir)'}")
    print(f"  Max Generated Directory Depth: {settings.max_generated_directory_depth}")
    print(f"  Classpath Directory: {settings.classpath_directory or '(disabled)'}")
    print(f"  Storage Dir: {settings.storage_dir}")
    print(f"  S3 Bucket: {settings.s3_bucket_name}")
    print(f"  AWS Endpoint: {settings.aws_endpoint_url}")
    print(f"  SMTP Server: {settings.smtp_host}:{settings.smtp_port}")
    print(f"  Mail Enabled: {settings.mail_enabled}")

@cli.command()
@click.argument("source_dir", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option("--tenant-id", default=None, help="Stage the files in this tenant's work-area directory")
def publish(source_dir, tenant_id):
    """Stage SOURCE_DIR in a work area and promote every file to storage"""
    service = FileService()

    try:
        with service.work_area(tenant_id) as work_area:
            shutil.copytree(source_dir, work_area.root_path, dirs_exist_ok=True)
            service.add_or_update_resources(work_area)
    except FileServiceError as e:
        raise click.ClickException(str(e))

    print(f"✅ Published {source_dir}")

@cli.command()
@click.argument("name")
def remove(name):
    """Remove the stored resource NAME"""
    service = FileService()
    try:
        removed = service.remove_resource(name)
    except FileServiceError as e:
        raise click.ClickException(str(e))

    if removed:
        print(f"✅ Removed {name}")
    else:
        print(f"❌ No resource named {name}")
        raise SystemExit(1)

@cli.command()
@click.argument("html_file", type=click.File("r", encoding="utf-8"))
def html_to_text(html_file):
    """Print the plain-text rendering of HTML_FILE"""
    click.echo(html_to_plain(html_file.read()), nl=False)

if __name__ == "__main__":
    cli()

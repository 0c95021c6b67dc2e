"""
Command-line interface for SitePulse
"""
import asyncio
import json

import click

from core.config import settings
from core.exceptions import SitePulseError
from core.logging import get_logger
from d1_analysis.engine import analyze_website
from d1_analysis.urls import verify_domain

logger = get_logger(__name__)


@click.group()
@click.version_option(version=settings.app_version)
def cli():
    """SitePulse CLI - accessibility, SEO and design scoring for websites"""
    pass


@cli.command()
@click.argument("url")
@click.option(
    "--lang",
    type=click.Choice(["sv", "en"]),
    default=None,
    help="Language of the report (defaults to DEFAULT_LOCALE)",
)
@click.option(
    "--mode",
    type=click.Choice(["deep", "basic"]),
    default=None,
    help="deep blends PageSpeed Insights data into the scores",
)
@click.option("--pretty", is_flag=True, help="Indent the JSON output")
def analyze(url: str, lang: str, mode: str, pretty: bool):
    """Analyze a website and print the result as JSON"""
    try:
        result = asyncio.run(analyze_website(url, locale=lang, mode=mode))
    except SitePulseError as e:
        click.echo(f"✗ {e.message}", err=True)
        raise SystemExit(1)

    click.echo(json.dumps(result.to_dict(), indent=2 if pretty else None, ensure_ascii=False))


@cli.command("verify-domain")
@click.argument("url")
def verify_domain_command(url: str):
    """Check that a domain resolves in DNS and answers over HTTP"""
    try:
        verification = asyncio.run(verify_domain(url))
    except SitePulseError as e:
        click.echo(f"✗ {e.message}", err=True)
        raise SystemExit(1)

    if not verification.dns_resolved:
        click.echo(f"✗ {verification.hostname} could not be found in DNS", err=True)
        raise SystemExit(1)

    click.echo(f"✓ {verification.hostname} resolves to {', '.join(verification.addresses)}")
    if verification.http_reachable:
        click.echo("✓ Website reachable over HTTP")
    else:
        click.echo("✗ Website did not answer over HTTP")


@cli.command()
def env_info():
    """Display environment information"""
    click.echo(f"{settings.app_name} v{settings.app_version}")
    click.echo(f"Environment: {settings.environment}")
    click.echo(f"Analysis mode: {settings.default_analysis_mode}")
    click.echo(f"Locale: {settings.default_locale}")
    click.echo(f"PageSpeed enabled: {settings.enable_pagespeed}")
    click.echo(f"PageSpeed API key configured: {settings.google_api_key is not None}")


def main():
    """Main entry point"""
    cli()


if __name__ == "__main__":
    main()

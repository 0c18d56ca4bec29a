"""Command-line interface for folio.

Example:
    >>> # From terminal:
    >>> # folio --version
    >>> # folio serve --host 0.0.0.0 --port 8000
    >>> # folio profiles
    >>> # folio recommend anthropic anthropic-ceo [--json]
    >>> # folio check-catalog
"""

import json
from typing import Annotated

import typer

from folio import __version__
from folio.adaptive.catalog import uncovered_focus_tags
from folio.adaptive.profiles import get_company_profiles
from folio.adaptive.recommendations import get_recommendation_bundle, narrative_from_bundle

app = typer.Typer(help="folio adaptive portfolio CLI.")

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8000


def _version_callback(value: bool) -> None:
    """Print the version and exit when requested."""
    if value:
        typer.echo(__version__)
        raise typer.Exit()


VERSION_OPTION = typer.Option(
    False,
    "--version",
    help="Show folio version and exit.",
    callback=_version_callback,
    is_eager=True,
)


@app.callback()
def cli(version: bool = VERSION_OPTION) -> None:
    """folio CLI entrypoint."""


@app.command("serve")
def serve(
    host: Annotated[str, typer.Option("--host", help="Interface to bind.")] = DEFAULT_HOST,
    port: Annotated[int, typer.Option("--port", "-p", help="Port to bind.")] = DEFAULT_PORT,
    reload: Annotated[bool, typer.Option("--reload", help="Reload on code changes (development).")] = False,
) -> None:
    """Run the API server with uvicorn."""
    import uvicorn

    uvicorn.run("folio.server:create_app", factory=True, host=host, port=port, reload=reload)


@app.command("profiles")
def profiles() -> None:
    """List companies and their personas."""
    for company in get_company_profiles():
        typer.echo(f"{company.id}\t{company.name}")
        for persona in company.personas:
            marker = "*" if persona.id == company.default_persona.id else " "
            typer.echo(f"  {marker} {persona.id}\t{persona.name} ({persona.role})")


@app.command("recommend")
def recommend(
    company_id: Annotated[str, typer.Argument(help="Company id, e.g. anthropic.")],
    persona_id: Annotated[str, typer.Argument(help="Persona id belonging to the company.")],
    as_json: Annotated[bool, typer.Option("--json", help="Print the bundle as JSON.")] = False,
) -> None:
    """Print the ranked recommendations and deterministic narrative for a pair."""
    bundle = get_recommendation_bundle(company_id, persona_id)
    if bundle is None:
        typer.echo(f"Unknown company/persona: {company_id}/{persona_id}", err=True)
        raise typer.Exit(1)

    narrative = narrative_from_bundle(bundle)
    if as_json:
        payload = {
            "companyId": bundle.company.id,
            "personaId": bundle.persona.id,
            "narrative": narrative,
            "recommendations": [
                {
                    "id": entry.asset.id,
                    "title": entry.asset.title,
                    "score": entry.score,
                    "matchedTags": list(entry.matched_tags),
                }
                for entry in bundle.top_recommendations
            ],
            "supportingRecommendations": [entry.asset.id for entry in bundle.supporting_recommendations],
            "highlights": list(bundle.highlights),
        }
        typer.echo(json.dumps(payload, indent=2))
        return

    typer.echo(narrative)
    typer.echo("")
    for rank, entry in enumerate(bundle.top_recommendations, start=1):
        typer.echo(f"{rank}. [{entry.score}] {entry.asset.title} ({entry.asset.kind})")
        typer.echo(f"   {', '.join(entry.matched_tags)}")
    if bundle.supporting_recommendations:
        typer.echo("")
        typer.echo("Supporting:")
        for entry in bundle.supporting_recommendations:
            typer.echo(f"  - [{entry.score}] {entry.asset.title}")
    typer.echo("")
    for highlight in bundle.highlights:
        typer.echo(f"* {highlight}")


@app.command("check-catalog")
def check_catalog() -> None:
    """Report persona focus tags that no catalog asset covers."""
    gaps = 0
    for company in get_company_profiles():
        for persona in company.personas:
            missing = uncovered_focus_tags(persona)
            if missing:
                gaps += len(missing)
                typer.echo(f"{company.id}/{persona.id}: {', '.join(missing)}")
    if gaps:
        raise typer.Exit(1)
    typer.echo("All persona focus tags are covered by the catalog.")


def main() -> None:
    """Run the folio CLI."""
    app()


if __name__ == "__main__":
    main()

from typing import List

import typer
from rich import print
from rich.table import Table

from venturevoyage.factory import create_cache_manager, create_idea_service, create_settings_store
from venturevoyage.models.idea import BusinessIdea, UserAttributes
from venturevoyage.utils.config import config
from venturevoyage.utils.exceptions import TransportError

app = typer.Typer(help="VentureVoyage developer CLI")


def print_ideas(ideas: List[BusinessIdea]):
    table = Table(title=f"{len(ideas)} business ideas")
    table.add_column("Title", style="bold")
    table.add_column("Category")
    table.add_column("Difficulty")
    table.add_column("Revenue")
    table.add_column("Demand")
    for idea in ideas:
        table.add_row(
            idea.title,
            idea.category,
            idea.difficulty.value,
            idea.estimated_revenue,
            idea.market_demand.value,
        )
    print(table)


def transport_failed(e: TransportError):
    print(f"[bold red]Could not reach the AI service:[/bold red] {e.cause}")
    print("Check your network connection and API key, then try again.")
    raise typer.Exit(code=1)


@app.command()
def generate(
    skill: List[str] = typer.Option([], "--skill", "-s", help="Skill to include (repeatable)"),
    trait: List[str] = typer.Option([], "--trait", "-t", help="Personality trait to include (repeatable)"),
    interest: List[str] = typer.Option([], "--interest", "-i", help="Interest to include (repeatable)"),
    model: str = typer.Option("gemini", help="AI service to use: gemini or openai"),
    no_cache: bool = typer.Option(False, "--no-cache", help="Always call the AI service"),
    save: bool = typer.Option(False, "--save", help="Save every generated idea"),
):
    """
    Generate business ideas for the given skills, traits and interests.
    """
    attributes = UserAttributes(skills=skill, personality_traits=trait, interests=interest)
    with create_settings_store() as store:
        service = create_idea_service(model, settings=store)
        try:
            ideas = service.generate_ideas(attributes, use_cache=not no_cache)
        except TransportError as e:
            transport_failed(e)
        finally:
            service.ai_service.close()

        print_ideas(ideas)
        if save:
            for idea in ideas:
                service.save_idea(idea.id)
            print(f"Saved {len(ideas)} ideas.")


@app.command()
def suggest(
    title: str,
    description: str = typer.Option("", help="Short description of the idea"),
    model: str = typer.Option("gemini", help="AI service to use: gemini or openai"),
):
    """
    Ask for practical next steps on a business idea.
    """
    with create_settings_store() as store:
        service = create_idea_service(model, settings=store)
        try:
            advice = service.get_suggestions(BusinessIdea(title=title, description=description))
        except TransportError as e:
            transport_failed(e)
        finally:
            service.ai_service.close()
    print(advice)


@app.command("cache-stats")
def cache_stats():
    """
    Show how many entries the cache holds.
    """
    stats = create_cache_manager().statistics()
    print(f"Cache directory: [bold]{config.cache_dir}[/bold]")
    print(f"Memory items: {stats.memory_items}")
    print(f"Disk items: {stats.disk_items}")
    print(f"Total items: {stats.total_items}")


@app.command("cache-clear")
def cache_clear(
    settings: bool = typer.Option(False, "--settings", help="Also clear saved ideas, progress and onboarding"),
):
    """
    Remove every cached completion.
    """
    create_cache_manager().clear_all()
    print("[bold green]Cache cleared.[/bold green]")
    if settings:
        with create_settings_store() as store:
            store.clear_all()
        print("[bold green]App data cleared.[/bold green]")


@app.command("config")
def show_config():
    """
    Show where the Google AI key comes from and which model is used.
    """
    with create_settings_store() as store:
        source = config.google_ai_key_source(store)
        model = config.google_ai_model(store)
    color = "red" if source == "None" else "green"
    print(f"API key source: [bold {color}]{source}[/bold {color}]")
    print(f"Model: [bold]{model}[/bold]")
    print(f"Request timeout: {config.request_timeout:g}s")
    print(f"Settings database: {config.settings_db}")


if __name__ == "__main__":
    app()

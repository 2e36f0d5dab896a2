# pragma: no cover
from pathlib import Path

import typer
from dotenv import find_dotenv, load_dotenv

load_dotenv(find_dotenv(usecwd=True))

import logging  # noqa: E402

import httpx  # noqa: E402
from google.genai import errors as genai_errors  # noqa: E402
from pydantic import ValidationError  # noqa: E402
from rich.console import Console  # noqa: E402
from rich.logging import RichHandler  # noqa: E402
from rich.prompt import Confirm, Prompt  # noqa: E402
from rich.text import Text  # noqa: E402

from geminisearch.citations import (  # noqa: E402
    format_search_queries,
    format_sources,
    render_citations,
)
from geminisearch.client import (  # noqa: E402
    GeminiSearch,
    NoResponseError,
    build_search_result,
)
from geminisearch.config import (  # noqa: E402
    DEFAULT_MODEL,
    MODELS,
    configured_model,
    resolve_api_key,
    resolve_model,
    resolve_redirects_enabled,
    validate_api_key,
)
from geminisearch.models import GroundedResponse, SearchResult  # noqa: E402
from geminisearch.redirects import resolve_sources  # noqa: E402

cli = typer.Typer(help="geminisearch — Gemini answers grounded in Google Search")
console = Console(soft_wrap=True)
err_console = Console(stderr=True, soft_wrap=True)

QUESTION_ERRORS = (NoResponseError, genai_errors.APIError, httpx.HTTPError)
EXIT_WORDS = ("exit", "quit")
RULE = "=================="


@cli.callback()
def main(
    verbose: bool = typer.Option(
        False,
        "-v",
        "--verbose",
        help="Log debug output to stderr",
    ),
) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
    )
    # basicConfig is a no-op once the root logger has handlers
    logging.getLogger().setLevel(level)


def _print_error(message: str) -> None:
    err_console.print(Text(f"ERROR: {message}", style="red"))


def _finish(
    result: SearchResult,
    response: GroundedResponse,
    resolve_redirects: bool,
) -> tuple[SearchResult, Text]:
    if resolve_redirects and result.sources:
        result = result.model_copy(
            update={"sources": resolve_sources(result.sources)}
        )
    return result, render_citations(response)


def _render(result: SearchResult, annotated: Text) -> None:
    console.print(Text("RESPONSE:", style="green"))
    console.print(Text(RULE, style="bright_black"))
    console.print(Text(result.original_text))
    console.print(Text(RULE, style="bright_black"))

    if not result.grounded:
        console.print(
            Text(
                "\nThis response is not grounded with Google Search.",
                style="yellow",
            )
        )
        return

    console.print(Text("\nWITH CITATIONS:", style="cyan"))
    console.print(Text(RULE + "======", style="bright_black"))
    console.print(annotated)

    queries = format_search_queries(result.search_queries)
    if queries:
        console.print(Text("\n" + queries, style="blue"))

    sources = format_sources(result.sources)
    if sources:
        console.print(Text("\n" + sources, style="green"))


def _answer(
    search: GeminiSearch,
    question: str,
    model: str,
    resolve_redirects: bool,
) -> SearchResult:
    console.print(Text(f'\nQuestion: "{question}"', style="cyan"))
    console.print(Text(f"Model: {model}", style="blue"))
    console.print(Text("Searching and generating response...\n", style="yellow"))

    response = search.generate(question, model)
    result, annotated = _finish(
        build_search_result(question, model, response),
        response,
        resolve_redirects,
    )
    _render(result, annotated)
    return result


def _prompt_api_key() -> str:
    console.print(Text("No API key found in environment variables.", style="yellow"))
    if not Confirm.ask(
        "Would you like to enter your Google Gemini API key now?", default=True
    ):
        err_console.print(Text("No API key provided. Exiting.", style="red"))
        raise typer.Exit(1)
    while True:
        entered = Prompt.ask("Enter your Google Gemini API key", password=True)
        try:
            return validate_api_key(entered)
        except ValueError as e:
            err_console.print(Text(str(e), style="red"))


def _select_model() -> str:
    model_ids = list(MODELS)
    for n, model_id in enumerate(model_ids, start=1):
        console.print(f"  {n}. {MODELS[model_id]}", markup=False)
    choice = Prompt.ask(
        "Select Gemini model",
        choices=[str(n) for n in range(1, len(model_ids) + 1)],
        default=str(model_ids.index(DEFAULT_MODEL) + 1),
    )
    return model_ids[int(choice) - 1]


@cli.command("chat", help="Ask questions interactively")
def chat(
    model: str | None = typer.Option(
        None,
        "-m",
        "--model",
        help="Gemini model to use (e.g. 'gemini-2.5-flash')",
    ),
    resolve_redirects: bool = typer.Option(
        False,
        "--resolve-redirects",
        help="Resolve Google redirect links in the source list",
    ),
) -> None:
    console.print(
        Text("\nGeminiSearch - Google Gemini with Search Grounding\n", style="bold cyan")
    )

    api_key = resolve_api_key() or _prompt_api_key()
    model_name = configured_model(model) or _select_model()
    search = GeminiSearch(api_key, model=model_name)
    resolve = resolve_redirects_enabled(resolve_redirects)

    console.print(Text("\nReady to answer your questions!", style="green"))
    console.print(
        Text(
            'Type your question and press Enter. Type "exit" or "quit" to leave.\n',
            style="bright_black",
        )
    )

    while True:
        try:
            question = Prompt.ask("[blue]Your question[/blue]").strip()
        except (EOFError, KeyboardInterrupt):
            break
        if not question:
            console.print(Text("Please enter a question.", style="yellow"))
            continue
        if question.lower() in EXIT_WORDS:
            break
        try:
            _answer(search, question, model_name, resolve)
        except QUESTION_ERRORS as e:
            _print_error(str(e))

    console.print(Text("\nGoodbye!", style="green"))


@cli.command("ask", help="Ask a single question and exit")
def ask(
    question: str = typer.Argument(..., help="The question to ask"),
    model: str | None = typer.Option(
        None,
        "-m",
        "--model",
        help="Gemini model to use (e.g. 'gemini-2.5-flash')",
    ),
    resolve_redirects: bool = typer.Option(
        False,
        "--resolve-redirects",
        help="Resolve Google redirect links in the source list",
    ),
    as_json: bool = typer.Option(
        False,
        "--json",
        help="Print the result as JSON",
    ),
) -> None:
    api_key = resolve_api_key()
    if not api_key:
        _print_error("No API key found. Set GOOGLE_GENAI_API_KEY or add it to .env")
        raise typer.Exit(1)

    model_name = resolve_model(model)
    search = GeminiSearch(api_key, model=model_name)
    resolve = resolve_redirects_enabled(resolve_redirects)
    try:
        if as_json:
            response = search.generate(question, model_name)
            result, _ = _finish(
                build_search_result(question, model_name, response),
                response,
                resolve,
            )
            typer.echo(result.model_dump_json(indent=2))
        else:
            _answer(search, question, model_name, resolve)
    except QUESTION_ERRORS as e:
        _print_error(str(e))
        raise typer.Exit(1)


@cli.command("annotate", help="Annotate a saved JSON response with citations")
def annotate(
    path: Path = typer.Argument(
        ...,
        exists=True,
        dir_okay=False,
        help="Path to a generateContent response saved as JSON",
    ),
    resolve_redirects: bool = typer.Option(
        False,
        "--resolve-redirects",
        help="Resolve Google redirect links in the source list",
    ),
    as_json: bool = typer.Option(
        False,
        "--json",
        help="Print the result as JSON",
    ),
) -> None:
    try:
        response = GroundedResponse.model_validate_json(path.read_bytes())
    except ValidationError as e:
        _print_error(f"{path} is not a valid response: {e}")
        raise typer.Exit(1)

    result, annotated = _finish(
        build_search_result("", "", response),
        response,
        resolve_redirects_enabled(resolve_redirects),
    )
    if as_json:
        typer.echo(result.model_dump_json(indent=2))
    else:
        _render(result, annotated)


@cli.command("models", help="List available Gemini models")
def list_models() -> None:
    for model_id, name in MODELS.items():
        typer.echo(f"{model_id} — {name}")

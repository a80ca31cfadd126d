"""Command-line interface for the farm assistant."""

import asyncio
import json
from pathlib import Path

import typer
from pydantic import TypeAdapter, ValidationError

from farm_assistant.api.models import OptimizationRequestModel
from farm_assistant.app_logging import configure_logging
from farm_assistant.containers import build_container
from farm_assistant.domain.nutrition import Ration
from farm_assistant.services import feed_solver
from farm_assistant.services.errors import InvalidInputError

app = typer.Typer(help="Farm assistant maintenance and offline tools.")

_RATION_ADAPTER = TypeAdapter(Ration)


@app.command()
def seed(
    input_dir: Path = typer.Option(
        Path("knowledge-base"), "--input-dir", help="Directory of source documents."
    ),
    chunk_size: int = typer.Option(
        500, "--chunk-size", min=50, help="Approximate characters per chunk."
    ),
) -> None:
    """Chunk, embed and index the knowledge-base documents."""
    configure_logging()
    container = build_container()

    async def run() -> int:
        try:
            return await container.knowledge_service.seed_directory(
                input_dir, chunk_size=chunk_size
            )
        finally:
            await container.close_resources()

    count = asyncio.run(run())
    typer.echo(f"Indexed {count} chunks from {input_dir}")


@app.command()
def optimize(
    request_path: Path = typer.Argument(..., help="Optimization request JSON file."),
    pretty: bool = typer.Option(False, "--pretty", help="Pretty-print output JSON."),
) -> None:
    """Formulate a least-cost ration from a request file without storing it."""
    payload = json.loads(request_path.read_text(encoding="utf-8"))
    try:
        request = OptimizationRequestModel.model_validate(payload).to_domain()
        ration = feed_solver.solve(request)
    except (ValidationError, InvalidInputError) as exc:
        typer.secho(f"Invalid request: {exc}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc

    as_dict = _RATION_ADAPTER.dump_python(ration, mode="json")
    if pretty:
        typer.echo(json.dumps(as_dict, indent=2, sort_keys=True))
    else:
        typer.echo(json.dumps(as_dict))

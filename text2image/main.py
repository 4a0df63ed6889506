"""
text2image — Command-line front end

Usage:
  text2image generate "A lighthouse in a storm | a whale" --style Cinematic
  text2image generate --sample --model imagen-4.0-generate-001 --aspect 16:9
  text2image compile  "(neon:1.6) city at night" --steps 45 --negative "people"
  text2image models
  text2image history list
  text2image history remix 1a2b3c4d
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from datetime import datetime
from typing import List, Optional

from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.progress import BarColumn, Progress, SpinnerColumn, TextColumn
from rich.rule import Rule
from rich.table import Table

from .catalog import MODELS, AspectRatio, StylePreset, get_model, random_sample_prompt
from .compiler import compile_prompt
from .config import AppConfig, ConfigError
from .exporter import ExportError, save_image
from .generator import GenerationError, ImageGenerator, create_client
from .history import HistoryManager, JsonHistoryStore
from .models import DEFAULT_GUIDANCE_SCALE, DEFAULT_STEPS, GeneratedImage, GenerationSettings

console = Console()

LOG_FORMAT = "%(asctime)s — %(levelname)s — %(name)s — %(message)s"
HISTORY_ACTIONS = ["list", "show", "delete", "favorite", "export", "remix"]


# ── CLI ───────────────────────────────────────────────────────────────────────

def _add_settings_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("prompt", nargs="?", default=None, help="Prompt text; supports (word:1.3) and a | b")
    parser.add_argument("--negative", default="", help="What to exclude from the image")
    parser.add_argument(
        "--aspect",
        choices=[a.value for a in AspectRatio],
        default=AspectRatio.SQUARE.value,
        help="Aspect ratio (default: 1:1)",
    )
    parser.add_argument(
        "--style",
        choices=[s.value for s in StylePreset],
        default=StylePreset.NONE.value,
        help="Style preset (default: None)",
    )
    parser.add_argument("--model", default=None, help="Model id (default: from config)")
    parser.add_argument("--steps", type=int, default=DEFAULT_STEPS, help="Quality knob, 10–50")
    parser.add_argument("--guidance", type=float, default=DEFAULT_GUIDANCE_SCALE, help="Adherence knob, 1–20")
    parser.add_argument("--seed", type=int, default=None, help="Recorded with the result for remixing")
    parser.add_argument("--sample", action="store_true", help="Use a random sample prompt")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="text2image",
        description="Text-to-image studio — prompt weighting, blending and Gemini / Imagen models",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    gen = sub.add_parser("generate", help="Generate an image")
    _add_settings_args(gen)
    gen.add_argument("--output", default=None, help="Output directory (default: from config)")
    gen.add_argument("--no-history", action="store_true", help="Do not record the result in history")

    comp = sub.add_parser("compile", help="Show the prompt that would be sent, without generating")
    _add_settings_args(comp)

    sub.add_parser("models", help="List available models")

    hist = sub.add_parser("history", help="Browse and manage past generations")
    hist.add_argument("action", choices=HISTORY_ACTIONS, nargs="?", default="list")
    hist.add_argument("image_id", nargs="?", default=None, help="Image id or unique id prefix")
    hist.add_argument("--output", default=None, help="Export / remix output directory")
    hist.add_argument("--favorites", action="store_true", help="list: only favorites")

    return parser


def settings_from_args(args: argparse.Namespace, config: AppConfig) -> GenerationSettings:
    prompt = args.prompt
    if args.sample and not prompt:
        prompt = random_sample_prompt()
    if not prompt or not prompt.strip():
        raise ValueError("A prompt is required (or pass --sample)")
    return GenerationSettings(
        prompt=prompt,
        negative_prompt=args.negative,
        aspect_ratio=AspectRatio(args.aspect),
        style_preset=StylePreset(args.style),
        model_id=args.model or config.default_model,
        steps=args.steps,
        guidance_scale=args.guidance,
        seed=args.seed,
    )


# ── Generation ────────────────────────────────────────────────────────────────

async def run_generation(generator: ImageGenerator, settings: GenerationSettings) -> GeneratedImage:
    """Run one request with a live progress bar fed by the synthetic estimate."""
    model = get_model(settings.model_id)
    label = model.name if model else settings.model_id
    with Progress(
        SpinnerColumn(),
        TextColumn("[bold cyan]{task.description}"),
        BarColumn(),
        TextColumn("{task.percentage:>3.0f}%"),
        console=console,
        transient=True,
    ) as bar:
        task_id = bar.add_task(f"Generating with {label}", total=100)

        def on_progress(percent: int) -> None:
            bar.update(task_id, completed=percent)

        return await generator.generate(settings, on_progress=on_progress)


def _generate_and_record(
    settings: GenerationSettings,
    config: AppConfig,
    output_dir,
    history: Optional[HistoryManager],
) -> None:
    generator = ImageGenerator(
        create_client(config.require_api_key()),
        progress_interval=config.progress_interval,
    )
    console.print(f"  [dim]Prompt sent: {escape(compile_prompt(settings))}[/dim]", highlight=False)

    result = asyncio.run(run_generation(generator, settings))
    if history is not None:
        history.add(result)
    save_path = save_image(result, output_dir)

    console.print(
        Panel(
            f"Model: [bold]{result.model}[/bold]\n"
            f"Saved to: [bold]{save_path}[/bold]\n"
            f"Id: {result.id}",
            title="[bold green]✓ Image generated[/bold green]",
            border_style="green",
        )
    )


# ── Commands ──────────────────────────────────────────────────────────────────

def cmd_generate(args: argparse.Namespace, config: AppConfig) -> None:
    settings = settings_from_args(args, config)
    console.print(Rule("[bold magenta]Text to Image[/bold magenta]"))
    console.print(
        f"  Model: [bold]{settings.model_id}[/bold]  |  "
        f"Aspect: [bold]{settings.aspect_ratio.value}[/bold]  |  "
        f"Style: [bold]{settings.style_preset.value}[/bold]"
    )
    history = None
    if not args.no_history:
        history = HistoryManager(JsonHistoryStore(config.history_path))
        history.load()
    output_dir = args.output or config.output_dir
    _generate_and_record(settings, config, output_dir, history)


def cmd_compile(args: argparse.Namespace, config: AppConfig) -> None:
    settings = settings_from_args(args, config)
    console.print(compile_prompt(settings), markup=False, highlight=False, soft_wrap=True)


def cmd_models(args: argparse.Namespace, config: AppConfig) -> None:
    table = Table(title="Models")
    table.add_column("Id", style="bold", no_wrap=True)
    table.add_column("Name")
    table.add_column("Family")
    table.add_column("Description", style="dim")
    for m in MODELS:
        marker = " [green](default)[/green]" if m.id == config.default_model else ""
        table.add_row(m.id, m.name + marker, m.family.value, m.description)
    console.print(table)


def _history_table(items) -> Table:
    table = Table(title=f"History ({len(items)})")
    table.add_column("Id", style="bold", no_wrap=True)
    table.add_column("Time")
    table.add_column("Model")
    table.add_column("★")
    table.add_column("Prompt", overflow="ellipsis", no_wrap=True, max_width=60)
    for item in items:
        when = datetime.fromtimestamp(item.timestamp / 1000).strftime("%Y-%m-%d %H:%M:%S")
        table.add_row(item.id[:8], when, item.model, "★" if item.is_favorite else "", escape(item.settings.prompt))
    return table


def cmd_history(args: argparse.Namespace, config: AppConfig) -> None:
    history = HistoryManager(JsonHistoryStore(config.history_path))
    history.load()

    if args.action == "list":
        items = history.favorites() if args.favorites else history.items
        if not items:
            console.print("  [dim]No generations yet.[/dim]")
            return
        console.print(_history_table(items))
        return

    if not args.image_id:
        raise ValueError(f"history {args.action} needs an image id")
    item = history.find(args.image_id)

    if args.action == "show":
        s = item.settings
        console.print(
            Panel(
                f"Prompt: {escape(s.prompt)}\n"
                f"Negative: {escape(s.negative_prompt) or '—'}\n"
                f"Aspect: {s.aspect_ratio.value}  |  Style: {s.style_preset.value}  |  "
                f"Steps: {s.steps}  |  Guidance: {s.guidance_scale}\n"
                f"Model: {item.model}\n"
                f"Compiled: {escape(compile_prompt(s))}",
                title=f"[bold]{item.id}[/bold]" + (" ★" if item.is_favorite else ""),
                highlight=False,
            )
        )
    elif args.action == "delete":
        history.delete(item.id)
        console.print(f"  [green]✓[/green] Deleted {item.id[:8]} ({len(history)} left)")
    elif args.action == "favorite":
        updated = history.toggle_favorite(item.id)
        state = "added to" if updated.is_favorite else "removed from"
        console.print(f"  [green]✓[/green] {item.id[:8]} {state} favorites")
    elif args.action == "export":
        path = save_image(item, args.output or config.output_dir)
        console.print(f"  [green]✓[/green] Exported to {path}")
    elif args.action == "remix":
        settings = history.select(item.id)
        console.print(f"  [dim]Remixing {item.id[:8]}[/dim]")
        _generate_and_record(settings, config, args.output or config.output_dir, history)


COMMANDS = {
    "generate": cmd_generate,
    "compile": cmd_compile,
    "models": cmd_models,
    "history": cmd_history,
}


def main(argv: Optional[List[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        format=LOG_FORMAT,
        level=logging.DEBUG if args.verbose else logging.WARNING,
    )

    try:
        config = AppConfig.from_env()
        COMMANDS[args.command](args, config)
    except GenerationError as e:
        console.print(f"[bold red]Generation failed:[/bold red] {escape(e.message)}", highlight=False)
        sys.exit(1)
    except (ConfigError, ExportError, ValueError) as e:
        # ValidationError is a ValueError
        if isinstance(e, ValidationError):
            console.print(f"[bold red]Invalid settings:[/bold red] {escape(str(e))}", highlight=False)
        else:
            console.print(f"[bold red]Error:[/bold red] {escape(str(e))}", highlight=False)
        sys.exit(1)
    except KeyError as e:
        console.print(f"[bold red]Error:[/bold red] no history item matches {e.args[0]!r}")
        sys.exit(1)


if __name__ == "__main__":
    main()

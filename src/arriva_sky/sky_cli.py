"""CLI: compose one sky payload and print it, or serve the HTTP API."""

from __future__ import annotations

import argparse
import json
import random
import sys
import uuid
from datetime import datetime

from rich.console import Console
from rich.table import Table

from .composer import PayloadComposer
from .config import Settings, load_settings
from .exceptions import ConfigError, JournalError
from .journal import JournalWriter
from .log_setup import setup_logger
from .models import WeatherPayload


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse sky CLI arguments."""
    parser = argparse.ArgumentParser(
        description="Compose the sky/weather scene payload for the configured location."
    )
    parser.add_argument(
        "--at",
        type=datetime.fromisoformat,
        default=None,
        help="ISO-8601 instant to compose for (naive values are UTC). Defaults to now.",
    )
    parser.add_argument("--seed", type=int, default=None, help="Seed for scene randomness.")
    parser.add_argument("--json", action="store_true", help="Print the raw JSON payload.")
    parser.add_argument(
        "--journal",
        action="store_true",
        help="Append provider attempts and the payload summary to the JSONL journal.",
    )
    parser.add_argument("--serve", action="store_true", help="Run the HTTP API with uvicorn.")
    parser.add_argument("--host", default="0.0.0.0", help="Bind host for --serve.")
    parser.add_argument("--port", type=int, default=8000, help="Bind port for --serve.")
    return parser.parse_args(argv)


def _print_payload_summary(console: Console, payload: WeatherPayload) -> None:
    weather = payload.weather
    console.print(
        f"Phase={payload.sky_phase} source={weather.source} "
        f"gradient={payload.gradient.top}/{payload.gradient.mid}/{payload.gradient.bottom}"
    )

    bodies = Table(title="Celestial Bodies")
    bodies.add_column("Body")
    bodies.add_column("Visible")
    bodies.add_column("Position")
    bodies.add_column("Detail")
    sun = payload.celestial_objects.sun
    moon = payload.celestial_objects.moon
    for name, body, detail in (
        ("Sun", sun, f"brightness {sun.brightness:g}"),
        ("Moon", moon, f"phase {moon.phase:.3f}, {moon.illumination}% lit"),
    ):
        position = f"({body.position.x:.2f}, {body.position.y:.2f})" if body.position else "-"
        bodies.add_row(name, "yes" if body.visible else "no", position, detail)
    console.print(bodies)

    conditions = Table(title="Weather")
    conditions.add_column("Condition")
    conditions.add_column("Temp °C")
    conditions.add_column("Humidity %")
    conditions.add_column("Wind km/h")
    conditions.add_column("Precip mm")
    conditions.add_column("Clouds %")
    conditions.add_row(
        weather.condition,
        f"{weather.temperature:g}",
        f"{weather.humidity:g}",
        f"{weather.wind_speed:.1f} @ {weather.wind_direction:g}°",
        f"{weather.precipitation:g}",
        f"{weather.cloud_coverage:g}",
    )
    console.print(conditions)

    forecast = payload.forecast
    if forecast.change_time:
        console.print(
            f"{forecast.next_condition.capitalize()} at {forecast.change_time} "
            f"(in {forecast.time_to_change} min) | {forecast.chance_of_rain}% chance of rain"
        )
    else:
        console.print(f"No change expected | {forecast.chance_of_rain}% chance of rain")
    console.print(
        f"Scene: {len(payload.stars)} stars, {len(payload.clouds)} clouds, "
        f"rain={payload.rain.active} ({payload.rain.intensity:.2f}), "
        f"lightning={payload.lightning.active}"
    )


def _serve(settings: Settings, host: str, port: int) -> int:
    import uvicorn

    from .api import create_app

    uvicorn.run(create_app(settings), host=host, port=port, log_level="info")
    return 0


def main(argv: list[str] | None = None) -> int:
    """Compose once (or serve) and return a process exit code."""
    args = parse_args(argv)
    logger = setup_logger()
    console = Console()
    session_id = uuid.uuid4().hex[:12]

    try:
        settings = load_settings()
    except ConfigError as exc:
        logger.error("Configuration failure: %s", exc)
        return 2

    if args.serve:
        return _serve(settings, args.host, args.port)

    journal: JournalWriter | None = None
    if args.journal:
        try:
            journal = JournalWriter(journal_dir=settings.journal_dir, session_id=session_id)
            journal.write_event(
                "sky_startup",
                payload=settings.safe_summary(),
                metadata={"session_id": session_id},
            )
        except JournalError as exc:
            logger.error("Failed to initialize journal: %s", exc)
            return 3

    composer = PayloadComposer.from_settings(settings)
    if args.seed is not None:
        composer.scene.rng = random.Random(args.seed)
    try:
        payload = composer.get_payload(args.at)
    finally:
        composer.close()

    if journal is not None:
        try:
            journal.record_composition(payload, composer.last_chain_result)
        except JournalError as exc:
            logger.error("Failed to write payload_composed event: %s", exc)
            return 3

    if args.json:
        console.print_json(json.dumps(payload.to_response()))
    else:
        _print_payload_summary(console, payload)
    return 0


if __name__ == "__main__":
    sys.exit(main())

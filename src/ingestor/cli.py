import asyncio
import gzip
import json
import sys
from typing import Iterator, Optional

import nats
import typer
from loguru import logger
from pydantic import ValidationError

from ch_client import ClickHouseHttpClient
from wallet_ingest.emitter import AccountUpdateEmitter
from wallet_ingest.errors import IngestError
from wallet_ingest.filtering import address_filter
from wallet_ingest.records import parse_account_info

from .config import get_settings
from .logging_config import setup_logging
from .service import run_service

app = typer.Typer(help="NATS → ClickHouse wallet ingestor")


def iter_ndjson(path: str) -> Iterator[dict]:
    """Yield JSON objects from a file ('-' for stdin, .gz ok), skipping blank lines."""
    if path == "-":
        fh = sys.stdin
    elif path.endswith(".gz"):
        fh = gzip.open(path, "rt", encoding="utf-8")
    else:
        fh = open(path, "r", encoding="utf-8")
    try:
        for line in fh:
            line = line.strip()
            if line:
                yield json.loads(line)
    finally:
        if fh is not sys.stdin:
            fh.close()


@app.callback()
def main():
    """Configure logging once for every command."""
    try:
        settings = get_settings()
    except ValidationError as e:
        logger.error(f"Startup failed: invalid settings\n{e}")
        sys.exit(1)
    setup_logging(settings.LOG_LEVEL, serialize=settings.LOG_JSON)


@app.command()
def run():
    """Subscribe and forward batches until the subject closes."""
    settings = get_settings()
    try:
        lost = asyncio.run(run_service(settings))
    except (IngestError, ValueError) as e:
        logger.error(f"Startup failed: {e}")
        sys.exit(1)
    except KeyboardInterrupt:
        logger.info("Interrupted")
        return

    logger.error(f"Subscription closed; exiting ({lost} buffered records lost)")
    sys.exit(1)


@app.command()
def ping():
    """Check that the ClickHouse HTTP endpoint answers /ping."""
    settings = get_settings()

    async def _ping() -> bool:
        async with ClickHouseHttpClient(settings.clickhouse_config()) as ch:
            return await ch.ping()

    try:
        ok = asyncio.run(_ping())
    except ValueError as e:
        logger.error(f"Startup failed: {e}")
        sys.exit(1)
    typer.echo(json.dumps({"ok": ok}, indent=2))
    if not ok:
        sys.exit(1)


@app.command("show-config")
def show_config():
    """Print effective settings (password masked)."""
    typer.echo(json.dumps(get_settings().redacted(), indent=2))


@app.command()
def publish(
    path: str = typer.Argument(..., help="NDJSON of tagged account infos, or '-' for stdin (.gz ok)"),
    subject: Optional[str] = typer.Option(None, "--subject", help="Override NATS_SUBJECT"),
):
    """Normalize account notifications and publish them to the subject."""
    settings = get_settings()
    subject = subject or settings.NATS_SUBJECT

    async def _publish() -> dict:
        nc = await nats.connect(servers=settings.NATS_URL)
        try:
            emitter = AccountUpdateEmitter(
                nc, subject, accept=address_filter(settings.target_addresses)
            )
            for obj in iter_ndjson(path):
                info = parse_account_info(obj)
                await emitter.update_account(
                    info, int(obj["slot"]), is_startup=bool(obj.get("is_startup", False))
                )
            await nc.flush()
            return {"published": emitter.published, "skipped": emitter.skipped}
        finally:
            await nc.close()

    try:
        counts = asyncio.run(_publish())
    except Exception as e:
        logger.error(f"Publish failed: {e}")
        sys.exit(1)

    typer.echo(json.dumps(counts, indent=2))


if __name__ == "__main__":
    app()

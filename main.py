# ===== Part 1: Imports & Logging ============================================
import argparse
import asyncio
import dataclasses
import logging
import os
import sys

import httpx
from PySide6 import QtAsyncio
from PySide6.QtCore import QTimer
from PySide6.QtWidgets import QApplication, QMainWindow

from models.records import RecordKind
from modules.management import get_management_panel
from modules.management.context import EntityContext
from modules.management.kinds import profile_for
from services.remote_adapter import build_client
from utils.app_settings import ManagementSettings, load_settings

logger = logging.getLogger(__name__)

DEV_BACKEND_URL = "http://dev-backend/api"


def configure_logging(debug: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ===== Part 2: Service wiring ===============================================
def build_http_client(settings: ManagementSettings) -> httpx.AsyncClient:
    if settings.dev_backend:
        from modules.management.api import create_app

        logger.info("Using in-process development backend")
        transport = httpx.ASGITransport(app=create_app())
        return build_client(DEV_BACKEND_URL, timeout=settings.request_timeout, transport=transport)
    logger.info("Using records service at %s", settings.api_base_url)
    return build_client(settings.api_base_url, timeout=settings.request_timeout)


def build_context(settings: ManagementSettings, client: httpx.AsyncClient) -> EntityContext:
    return EntityContext(
        lambda kind: profile_for(kind).create_adapter(client),
        initial_kind=settings.initial_kind,
        enforce_required=settings.enforce_required,
    )


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Users/posts management window")
    parser.add_argument("--dev-backend", action="store_true", help="Serve records from the in-process development API")
    parser.add_argument("--kind", choices=[k.value for k in RecordKind], help="Record kind shown at start-up")
    parser.add_argument("--page-size", type=int, help="Rows per table page")
    parser.add_argument("--api-url", help="Base URL of the records service")
    parser.add_argument("--debug", action="store_true", help="Verbose logging")
    args, _ = parser.parse_known_args(argv)
    return args


def apply_overrides(settings: ManagementSettings, args: argparse.Namespace) -> ManagementSettings:
    changes = {}
    if args.dev_backend:
        changes["dev_backend"] = True
    if args.kind:
        changes["initial_kind"] = RecordKind(args.kind)
    if args.page_size and args.page_size > 0:
        changes["page_size"] = args.page_size
    if args.api_url:
        changes["api_base_url"] = args.api_url
    return dataclasses.replace(settings, **changes)


# ===== Part 3: Main =========================================================
def main(argv=None) -> int:
    args = parse_args(argv)
    configure_logging(args.debug or os.environ.get("ENTITY_ADMIN_DEBUG") == "1")
    settings = apply_overrides(load_settings(), args)

    app = QApplication.instance() or QApplication(sys.argv)
    client = build_http_client(settings)
    context = build_context(settings, client)

    window = QMainWindow()
    window.setWindowTitle("Entity Admin")
    panel = get_management_panel(context, page_size=settings.page_size, parent=window)
    window.setCentralWidget(panel)
    window.resize(1100, 720)
    window.show()

    app.aboutToQuit.connect(context.close)
    # The first load needs the asyncio loop that QtAsyncio starts below.
    QTimer.singleShot(0, panel.start)
    QtAsyncio.run()

    # QtAsyncio leaves its loop policy installed; close the client on a plain loop.
    asyncio.set_event_loop_policy(None)
    try:
        asyncio.run(client.aclose())
    except RuntimeError as exc:
        logger.debug("http client close skipped: %s", exc)
    return 0


if __name__ == "__main__":
    sys.exit(main())

from __future__ import annotations

import argparse
import logging
import os

import uvicorn
from dotenv import load_dotenv

from .config import load_config
from .logging_utils import configure_logging
from .server import create_app

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Flags for serving the analysis API; engine tuning lives in the JSON config."""
    parser = argparse.ArgumentParser(
        description="Serve PlasticMap pollution-severity verdicts over HTTP",
        epilog="Thresholds, jitter and the default scoring mode are read from the "
        "JSON config (PLASTICMAP_* variables override it). --host and --port win over both.",
    )
    parser.add_argument(
        "--config",
        type=str,
        default="config/plasticmap.json",
        help="Path to JSON configuration file (default: config/plasticmap.json)",
    )
    parser.add_argument(
        "--host",
        type=str,
        default=None,
        help="Override server host (default: from config file)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Override server port (default: from config file)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=os.environ.get("PLASTICMAP_LOG_LEVEL", "INFO"),
        help="Logging level (default: INFO)",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    load_dotenv()
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)

    cfg = load_config(args.config)
    if args.host:
        cfg.server.host = args.host
    if args.port:
        cfg.server.port = args.port

    logger.info("Server configuration: %s:%d", cfg.server.host, cfg.server.port)
    logger.info(
        "Engine configuration: mode=%s thresholds=%.2f/%.2f jitter=%s sample_size=%d",
        cfg.engine.default_mode.value,
        cfg.engine.medium_threshold,
        cfg.engine.high_threshold,
        cfg.engine.jitter_enabled,
        cfg.engine.sample_size,
    )

    app = create_app(config=cfg)
    uvicorn.run(app, host=cfg.server.host, port=cfg.server.port)


if __name__ == "__main__":
    main()

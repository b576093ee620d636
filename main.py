"""Demo service: generates log records through a rotating EasyLogger."""

import argparse
import logging
import random
import signal
import sys
import time

from easylogger.config import load_config
from easylogger.logger import new_rotating_logger

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [easylogger] %(levelname)s %(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)

_running = True


def _signal_handler(sig, _frame):
    global _running
    logger.info("Shutdown signal received (signal %d), stopping...", sig)
    _running = False


LEVELS = ["info", "info", "info", "info", "debug", "warn", "error"]
COMPONENTS = ["ingest", "thumbnailer", "indexer", "exporter"]
MESSAGES = {
    "info": [
        "Picked up batch %d from the inbox",
        "Wrote %d rows to the staging table",
        "Export of chunk %d finished",
        "Checkpoint %d saved",
    ],
    "debug": [
        "Worker slot %d is idle",
        "Retry budget at %d",
    ],
    "warn": [
        "Batch %d took longer than its deadline",
        "Skipped %d malformed rows",
    ],
    "error": [
        "Upload of chunk %d was rejected",
        "Lost the lease on partition %d",
    ],
}


def build_cli_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Rotating log writer demo")
    parser.add_argument("--config", default=None, help="Path to YAML config file")
    parser.add_argument("--count", type=int, default=0,
                        help="Stop after this many records (default: run until interrupted)")
    parser.add_argument("--interval", type=float, default=0.05,
                        help="Seconds between records (default: 0.05)")
    parser.add_argument("--prefix", default="", help="Prefix for every record")
    return parser


def main(argv=None):
    signal.signal(signal.SIGINT, _signal_handler)
    signal.signal(signal.SIGTERM, _signal_handler)

    args = build_cli_parser().parse_args(argv)
    config = load_config(args.config)
    logger.info(
        "Config: dir=%s, mode=%s, max_size=%d bytes, max_days=%d, max_backups=%d, compress=%s, console=%s",
        config.directory, config.mode, config.max_size_bytes, config.max_days,
        config.max_backups, config.compress, config.console,
    )

    log = new_rotating_logger(config, prefix=args.prefix)
    written = 0
    try:
        while _running and (args.count <= 0 or written < args.count):
            level = random.choice(LEVELS)
            component = random.choice(COMPONENTS)
            template = random.choice(MESSAGES[level])
            getattr(log, f"{level}f")("%s #%d: " + template, component, written,
                                      random.randint(1, 500))
            written += 1
            if args.interval > 0:
                time.sleep(args.interval)
    except KeyboardInterrupt:
        pass
    finally:
        log.close()

    # the rotating writer is always the first sink; let its cleanup finish
    writer = log.sink.writers[0]
    if not writer.mill.join(timeout=10):
        logger.warning("Background cleanup still running at exit")
    logger.info("Shut down cleanly. Total records written: %d", written)


if __name__ == "__main__":
    main()

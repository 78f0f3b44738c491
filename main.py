import argparse
import logging
from pathlib import Path
from typing import Optional

import uvicorn

from pumpfun_api.api import create_app_from_config
from pumpfun_api.config import load_config
from pumpfun_api.log import configure_logging
from pumpfun_api.models import TransactionMode


def main() -> None:
    parser = argparse.ArgumentParser(description="pump.fun bonding-curve trading API")
    parser.add_argument("--config", type=Path, default=None, help="Optional YAML config file")
    parser.add_argument("--host", default=None, help="Override the listen host")
    parser.add_argument("--port", type=int, default=None, help="Override the listen port")
    parser.add_argument("--simulate", action="store_true", help="Simulate transactions instead of sending them")
    args = parser.parse_args()

    config_path: Optional[Path] = args.config
    if config_path is None and Path("config/pumpfun.yaml").exists():
        config_path = Path("config/pumpfun.yaml")
    program_config, service_config = load_config(config_path)

    log = configure_logging(service_config.log_level, service_config.log_file)
    mode = TransactionMode.SIMULATE if args.simulate else service_config.transaction_mode
    app = create_app_from_config(program_config, service_config, mode=mode)

    host = args.host or service_config.host
    port = args.port or service_config.port
    log.info("server starting on %s:%d (mode=%s)", host, port, mode.value)
    uvicorn.run(app, host=host, port=port, log_level=logging.getLevelName(log.level).lower())


if __name__ == "__main__":
    main()

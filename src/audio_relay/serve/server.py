"""Run the relay under uvicorn using HOST/PORT from the environment."""
from __future__ import annotations
import logging

import uvicorn

from audio_relay.common.config import load_config

LOGGER = logging.getLogger("audio_relay.serve.server")

APP_TARGET = "audio_relay.serve.fastapi_app:app"

def main() -> None:
    # uvicorn imports the module-level app, which builds itself from the same environment.
    config = load_config()
    LOGGER.info("Server running on %s:%s", config.host, config.port)
    uvicorn.run(APP_TARGET, host=config.host, port=config.port, log_config=None)

if __name__ == "__main__":
    main()

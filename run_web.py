#!/usr/bin/env python
"""Web server startup script for local development."""

import os
import sys
from pathlib import Path

from formforge.config import Config
from formforge.consts import ENV_CONFIG_FILE


def main():
    """Start the web server."""
    config_path = sys.argv[1] if len(sys.argv) > 1 else "config.toml"

    if Path(config_path).exists():
        config = Config.load_from_file(config_path)
        os.environ[ENV_CONFIG_FILE] = config_path
    else:
        print(f"Configuration file not found: {config_path}, using defaults")
        config = Config()

    host = config.web.host
    port = config.web.port

    print(f"Starting web service on http://{host}:{port}")
    print("Press Ctrl+C to stop")

    import uvicorn

    uvicorn.run(
        "formforge.api:create_app",
        host=host,
        port=port,
        factory=True,
        reload=config.web.reload,
    )


if __name__ == "__main__":
    main()

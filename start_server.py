#!/usr/bin/env python3
"""
Adaptation Survival Server Startup Script

Starts uvicorn with the host and port from the server configuration,
using uvicorn.run() semantics through an explicit Config/Server pair.
"""

import argparse
import os
import sys
from pathlib import Path

import uvicorn

APP_MODULE = "adaptation_server.main:app"


def main():
    """Start the Adaptation Survival server with uvicorn."""
    parser = argparse.ArgumentParser(description="Run the Adaptation Survival API server")
    parser.add_argument("--reload", action="store_true", help="Restart on source changes (development only)")
    args = parser.parse_args()

    # Set working directory to project root so .env is found
    project_root = Path(__file__).parent
    os.chdir(project_root)

    from adaptation_server.config import get_config

    server_config = get_config().server
    host = server_config.host
    port = server_config.port

    print(f"Starting Adaptation Survival server on {host}:{port}")
    print(f"App module: {APP_MODULE}")

    try:
        config = uvicorn.Config(
            APP_MODULE,
            host=host,
            port=port,
            reload=args.reload,
            reload_excludes=["adaptation_server/tests/*"] if args.reload else None,
            log_level="info",
            access_log=True,
        )
        server = uvicorn.Server(config)
        server.run()
    except KeyboardInterrupt:
        print("\nServer shutdown requested by user")
        sys.exit(0)
    except Exception as e:  # pylint: disable=broad-exception-caught  # Reason: report any startup failure with a non-zero exit
        print(f"Error starting server: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()

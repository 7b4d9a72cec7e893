#!/usr/bin/env python3
"""
Family Intake - Development Server Runner
This script sets up the Python path, configures logging and starts the server
"""

import logging
import os
import sys

# Add the 'src' directory to Python path so imports work correctly
project_root = os.path.dirname(os.path.abspath(__file__))
src_path = os.path.join(project_root, 'src')

if src_path not in sys.path:
    sys.path.insert(0, src_path)


def main() -> None:
    import uvicorn
    from config.settings import get_settings

    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    print("=" * 50)
    print(f"{settings.name} - Development Server")
    print("=" * 50)
    print(f"Starting server on http://{settings.api_host}:{settings.api_port}")
    print("Press Ctrl+C to stop")
    print()

    uvicorn.run(
        "web.app:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug,
        reload_dirs=[src_path],
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()

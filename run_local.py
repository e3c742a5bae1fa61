#!/usr/bin/env python3
"""
Local development runner.

Set KV_BACKEND=memory to run without a Redis server; data is then lost on
restart.
"""

import uvicorn

from acwhisk.config import settings


def main():
    """Run the application locally"""
    print(f"Starting {settings.app_name} (store backend: {settings.kv_backend})")
    print("API docs are served at http://localhost:8000/docs when DEBUG=true")

    uvicorn.run(
        "acwhisk.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,  # Auto-reload on code changes
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()

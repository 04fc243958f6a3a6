#!/usr/bin/env python3
"""
Start the transcript proxy with uvicorn.

    python run_server.py

HOST / PORT / LOG_LEVEL come from the environment or .env.
"""

import uvicorn

from descript_proxy.config import HOST, LOG_LEVEL, PORT

if __name__ == "__main__":
    print(f"Descript proxy listening on http://{HOST}:{PORT}")
    print("  POST /                 forward a transcript to a webhook")
    print("  GET  /api/transcript   resolve a share URL (?u=...&expand=true)")

    uvicorn.run(
        "descript_proxy.main:app",
        host=HOST,
        port=PORT,
        log_level=LOG_LEVEL.lower(),
    )

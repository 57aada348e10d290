"""
Entry point for the GoTourney web backend.

    uv run python web_main.py       ← JSON API on :8000, hot-reload

The browser page is built and hosted separately and proxies /api here.
The tournament REST API itself also runs separately; point api.base_url in
config.yaml at it.
"""

import uvicorn

if __name__ == "__main__":
    uvicorn.run(
        "gotourney.web.app:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )

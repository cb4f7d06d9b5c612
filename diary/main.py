from __future__ import annotations

import os

import uvicorn

from diary.http import create_app
from diary.logging_setup import setup_logging

setup_logging()
app = create_app()


def run() -> None:
    host = os.getenv("HOST", "127.0.0.1")
    port = int(os.getenv("PORT", "8000"))
    uvicorn.run(app, host=host, port=port, log_config=None)


if __name__ == "__main__":
    run()

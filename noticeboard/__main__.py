"""Run the API with uvicorn: `python -m noticeboard`."""
from __future__ import annotations

import os

import uvicorn


def main() -> None:
    uvicorn.run(
        "noticeboard.app:create_app",
        factory=True,
        host=os.getenv("HOST", "127.0.0.1"),
        port=int(os.getenv("PORT", "5000")),
    )


if __name__ == "__main__":
    main()

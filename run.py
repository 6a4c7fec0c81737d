"""Convenience runner for the Billdora API."""

import uvicorn

from apps.billdora.settings import settings


def main():
    uvicorn.run(
        "apps.billdora.main:app",
        host=settings.APP_HOST,
        port=settings.APP_PORT,
        reload=True,
        reload_dirs=["apps"],
    )


if __name__ == "__main__":
    main()

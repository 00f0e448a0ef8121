#!/usr/bin/env python3
"""
Run script for the BookInsight backend
"""
import uvicorn

from bookinsight.config.settings import settings


def main() -> None:
    uvicorn.run("bookinsight.main:app", host=settings.host, port=settings.port, reload=settings.debug)


if __name__ == "__main__":
    main()

"""Run the API with uvicorn: ``python -m pairgate``."""

import uvicorn

from pairgate.config import settings


def main() -> None:
    uvicorn.run(
        "pairgate.main:app",
        host=settings.host,
        port=settings.port,
        log_config=None,
    )


if __name__ == "__main__":
    main()

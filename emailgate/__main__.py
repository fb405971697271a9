"""Run the API with uvicorn: python -m emailgate"""

import logging

import uvicorn

from emailgate.config.settings import get_settings


def main() -> None:
    settings = get_settings()
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run("emailgate.api.main:app", host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()

"""Entrypoint for running the press room application."""

from __future__ import annotations

import logging

import uvicorn

from .config import load_config
from .contentful import ContentfulClient
from .server import create_app


def main() -> None:
    config = load_config()
    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    if not config.is_configured:
        logging.warning(
            "CONTENTFUL_SPACE_ID or CONTENTFUL_ACCESS_TOKEN is missing; "
            "pages will show a configuration error"
        )
    else:
        logging.info(
            "Using Contentful space %s (environment %s)",
            config.contentful.space_id,
            config.contentful.environment,
        )

    client = ContentfulClient(config.contentful)
    app = create_app(client, config)

    logging.info("Starting press room on %s:%s", config.api_host, config.api_port)
    uvicorn.run(app, host=config.api_host, port=config.api_port, log_level=config.log_level.lower())


if __name__ == "__main__":  # pragma: no cover
    main()

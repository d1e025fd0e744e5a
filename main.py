from loguru import logger

from docshelf.cli import app


def main() -> None:
    logger.info("Application started")
    app()


if __name__ == "__main__":
    main()

import logging


def setup_logging(level: str = "INFO") -> None:
    # basicConfig is a no-op once the root logger has handlers
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(levelname)s %(name)s - %(message)s"
    )

import logging
from logging import Handler
from pathlib import Path
from typing import Union


def configure_logging(
    level: Union[int, str] = logging.INFO,
    log_to_file: bool = False,
    log_dir: str = "logs",
) -> None:
    """
    Configure root logging for the application.
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.WARNING)
    handlers: list[Handler] = [logging.StreamHandler()]
    if log_to_file:
        Path(log_dir).mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(str(Path(log_dir) / "chatstore.log"), encoding="utf-8")
        handlers.append(file_handler)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        handlers=handlers,
        force=True,
    )

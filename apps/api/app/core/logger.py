import logging


LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: str = "INFO") -> None:
    formatter = logging.Formatter(LOG_FORMAT)
    root_logger = logging.getLogger()
    root_logger.setLevel(level.upper())

    # Avoid stacking handlers when the app module is reloaded.
    if not any(getattr(h, "_mentor_handler", False) for h in root_logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(formatter)
        handler._mentor_handler = True
        root_logger.addHandler(handler)

    for logger_name in ("uvicorn", "uvicorn.error", "fastapi", "app"):
        logging.getLogger(logger_name).setLevel(level.upper())

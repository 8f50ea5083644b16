import logging

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

def configure_logging(level: str = "INFO") -> None:
    root = logging.getLogger()
    if not any(getattr(h, "_store_locator", False) for h in root.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._store_locator = True
        root.addHandler(handler)
    root.setLevel(level.upper())
    # sqlalchemy loguea cada query en DEBUG; lo dejamos en WARNING
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

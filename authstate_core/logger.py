import logging, json, sys, time, os


def get_logger(name="authstate", level=None, to_file=None):
    """
    Structured JSON-line logger shared by all authstate components.

    Level and optional log file default to AUTHSTATE_LOG_LEVEL and
    AUTHSTATE_LOG_FILE. Handlers are attached once per logger name.
    """
    logger = logging.getLogger(name)
    logger.setLevel(level or os.getenv("AUTHSTATE_LOG_LEVEL", "INFO").upper())
    to_file = to_file or os.getenv("AUTHSTATE_LOG_FILE")

    if not logger.handlers:
        formatter = logging.Formatter(
            fmt=json.dumps({
                "ts": "%(asctime)s",
                "level": "%(levelname)s",
                "name": "%(name)s",
                "msg": "%(message)s"
            }),
            datefmt="%Y-%m-%dT%H:%M:%SZ",
        )
        formatter.converter = time.gmtime  # UTC

        handlers = [logging.StreamHandler(sys.stdout)]
        if to_file:
            os.makedirs(os.path.dirname(to_file) or ".", exist_ok=True)
            handlers.append(logging.FileHandler(to_file))
        for h in handlers:
            h.setFormatter(formatter)
            logger.addHandler(h)

    return logger

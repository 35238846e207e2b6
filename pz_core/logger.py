import logging, json, sys, time, os

ROOT_LOGGER = "pz_core"


def get_logger(name=ROOT_LOGGER, level=None, to_file=None):
    """Unified structured logger for all pz_core components.

    Handlers live on the package root logger only; child loggers propagate to it.
    """
    root = logging.getLogger(ROOT_LOGGER)
    level = level or os.getenv("PZ_LOG_LEVEL", "INFO").upper()
    root.setLevel(level)

    if not root.handlers:
        handler = logging.StreamHandler(sys.stdout)
        formatter = logging.Formatter(
            fmt=json.dumps({
                "ts": "%(asctime)s",
                "level": "%(levelname)s",
                "name": "%(name)s",
                "msg": "%(message)s"
            }),
            datefmt="%Y-%m-%dT%H:%M:%SZ",
        )
        formatter.converter = time.gmtime  # Use UTC timestamps
        handler.setFormatter(formatter)
        root.addHandler(handler)

        if to_file:
            # Ensure the directory exists before writing
            os.makedirs(os.path.dirname(to_file) or ".", exist_ok=True)
            file_handler = logging.FileHandler(to_file)
            file_handler.setFormatter(formatter)
            root.addHandler(file_handler)

    if name == ROOT_LOGGER:
        return root
    return logging.getLogger(name)

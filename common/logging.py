import logging

DEFAULT_FMT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def setup_logging(project_cfg: dict) -> None:
    """
    Initialize logging from the `logging` block of project.yaml.
    Keys: level, fmt, optional datefmt and quiet_loggers (raised to WARNING).
    """
    log_cfg = project_cfg.get("logging") or {}
    level = getattr(logging, str(log_cfg.get("level", "INFO")).upper())
    fmt = log_cfg.get("fmt", DEFAULT_FMT)
    datefmt = log_cfg.get("datefmt", "%Y-%m-%d %H:%M:%S")

    logging.basicConfig(level=level, format=fmt, datefmt=datefmt)

    for name in log_cfg.get("quiet_loggers") or []:
        logging.getLogger(name).setLevel(logging.WARNING)

import logging, sys, pathlib

FORMAT = "%(asctime)s | %(levelname)s | %(message)s"


def get_logger(name="linbench", log_file=None, level=logging.INFO):
    logger = logging.getLogger(name)
    logger.propagate = False
    logger.setLevel(level)
    fmt = logging.Formatter(FORMAT)

    # repeated calls (tests, sweeps) must not stack handlers
    if not any(isinstance(h, logging.StreamHandler) and getattr(h, "stream", None) is sys.stdout for h in logger.handlers):
        sh = logging.StreamHandler(sys.stdout); sh.setFormatter(fmt); logger.addHandler(sh)
    if log_file:
        path = pathlib.Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        target = str(path.resolve())
        if not any(isinstance(h, logging.FileHandler) and h.baseFilename == target for h in logger.handlers):
            fh = logging.FileHandler(path); fh.setFormatter(fmt); logger.addHandler(fh)
    return logger

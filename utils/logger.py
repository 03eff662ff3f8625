# utils/logger.py
import logging
import sys


def setup_logging(level: str = "INFO") -> None:
    """
    Satu handler stdout di root logger:
    - level root dari konfigurasi
    - handler lama dibuang supaya tidak dobel
    """
    root = logging.getLogger()
    root.setLevel(level.upper())

    for h in list(root.handlers):
        root.removeHandler(h)

    handler = logging.StreamHandler(sys.stdout)
    fmt = "%(asctime)s %(levelname)s %(name)s %(message)s"
    handler.setFormatter(logging.Formatter(fmt))
    root.addHandler(handler)

    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if level.upper() == "DEBUG" else logging.WARNING
    )

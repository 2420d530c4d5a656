"""
Storefront admin logging.
Tek satır format, stdout. Katalog API istemcisi tekrar denemeleri warning, ulaşılamayan
sunucuyu error olarak yazar; orkestratör reddedilen doğrulamaları info seviyesinde loglar.
"""
import logging
import sys

DEFAULT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

# Seviyesi LOG_LEVEL ile birlikte değişen üçüncü parti logger'lar
_ALIGNED_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access", "slowapi")


def setup_logging(
    level: int | str = logging.INFO,
    format_string: str | None = None,
) -> None:
    """LOG_LEVEL metin ('debug', 'INFO') veya logging sabiti olabilir."""
    if isinstance(level, str):
        level = level.upper() or logging.INFO
    logging.basicConfig(
        level=level,
        format=format_string or DEFAULT_FORMAT,
        stream=sys.stdout,
        force=True,
    )
    for name in _ALIGNED_LOGGERS:
        logging.getLogger(name).setLevel(level)
    # storefront_admin.services.catalog_client, storefront_admin.services.voucher_crud ...
    logging.getLogger("storefront_admin").setLevel(level)

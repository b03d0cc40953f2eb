import logging

from cardapio.printer.base import PrinterTransport
from cardapio.settings import settings

logger = logging.getLogger(__name__)


def get_printer() -> PrinterTransport:
    backend = settings.printer_backend

    if backend == "file":
        from cardapio.printer.file import FilePrinter

        logger.info("Using printer backend: file path=%s", settings.printer_spool_path)
        return FilePrinter(settings.printer_spool_path)

    raise ValueError(f"Unsupported printer backend: {backend}")

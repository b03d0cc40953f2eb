import logging
from pathlib import Path

from cardapio.printer.base import PrinterTransport

logger = logging.getLogger(__name__)


class FilePrinter(PrinterTransport):
    """Spools ESC/POS output to a file, e.g. a device node or a capture for later replay."""

    def __init__(self, path: str) -> None:
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def write(self, data: bytes) -> None:
        with self.path.open("ab") as fh:
            fh.write(data)
        logger.debug("Wrote %d bytes to %s", len(data), self.path.resolve())

from abc import ABC, abstractmethod


class PrinterTransport(ABC):
    @abstractmethod
    def write(self, data: bytes) -> None:
        """Send raw ESC/POS bytes to the printer."""
        ...

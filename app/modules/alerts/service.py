"""
Superficie de avisos al usuario.

Los servicios reciben un Notifier inyectado y le envían un aviso por cada
resultado. El envío es fire-and-forget: nunca se consume un valor de retorno.
"""
from typing import List, Optional, Protocol
import logging

from app.modules.alerts.schemas import Alert, AlertKind

alerts_logger = logging.getLogger("app.alerts")

_LEVELS = {
    AlertKind.SUCCESS: logging.INFO,
    AlertKind.INFO: logging.INFO,
    AlertKind.WARNING: logging.WARNING,
    AlertKind.ERROR: logging.ERROR,
}


class Notifier(Protocol):
    def notify(self, kind: AlertKind, title: str, message: str) -> None: ...


class LoggingNotifier:
    """Escribe cada aviso en el logger app.alerts."""

    def notify(self, kind: AlertKind, title: str, message: str) -> None:
        alerts_logger.log(_LEVELS.get(kind, logging.INFO), f"[{kind.value}] {title}: {message}")


class RecordingNotifier:
    """
    Acumula los avisos en memoria, en orden de emisión.

    Con forward_to, cada aviso se reenvía además a otro notifier.
    """

    def __init__(self, forward_to: Optional[Notifier] = None):
        self.alerts: List[Alert] = []
        self.forward_to = forward_to

    def notify(self, kind: AlertKind, title: str, message: str) -> None:
        self.alerts.append(Alert(kind=kind, title=title, message=message))
        if self.forward_to is not None:
            self.forward_to.notify(kind, title, message)

    @property
    def last(self) -> Alert:
        return self.alerts[-1]

    def clear(self) -> None:
        self.alerts.clear()

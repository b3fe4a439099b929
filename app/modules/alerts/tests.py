"""
Tests para los notificadores de avisos
"""

import logging

from app.modules.alerts.schemas import AlertKind
from app.modules.alerts.service import LoggingNotifier, RecordingNotifier


def test_recording_notifier_keeps_order():
    notifier = RecordingNotifier()
    notifier.notify(AlertKind.WARNING, "Stock insuficiente", "Falta stock")
    notifier.notify(AlertKind.SUCCESS, "Éxito", "Venta registrada correctamente")

    assert [alert.kind for alert in notifier.alerts] == [AlertKind.WARNING, AlertKind.SUCCESS]
    assert notifier.last.message == "Venta registrada correctamente"

    notifier.clear()
    assert notifier.alerts == []


def test_recording_notifier_forwards():
    inner = RecordingNotifier()
    notifier = RecordingNotifier(forward_to=inner)

    notifier.notify(AlertKind.INFO, "Info", "Hola")

    assert inner.last.title == "Info"


def test_logging_notifier_uses_level_per_kind(caplog):
    with caplog.at_level(logging.INFO, logger="app.alerts"):
        LoggingNotifier().notify(AlertKind.ERROR, "Error", "No se pudo eliminar la venta")
        LoggingNotifier().notify(AlertKind.SUCCESS, "Éxito", "Venta eliminada correctamente")

    assert [record.levelno for record in caplog.records] == [logging.ERROR, logging.INFO]
    assert "[error] Error: No se pudo eliminar la venta" in caplog.text

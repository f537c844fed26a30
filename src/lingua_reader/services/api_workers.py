"""Async workers for non-blocking API calls using Qt threading."""

from PySide6.QtCore import QObject, QRunnable, Signal, Slot

from lingua_reader.core import ConfigurationError
from lingua_reader.services.translation import TranslationRequest, TranslationService


class WorkerSignals(QObject):
    """
    Signals for communicating results from worker threads.

    QRunnable doesn't inherit from QObject, so we need a separate
    QObject to hold the signals.
    """
    finished = Signal()
    error = Signal(str)
    configuration_error = Signal(str)
    translation_result = Signal(object)  # TranslationResult


class TranslationWorker(QRunnable):
    """
    Worker that runs one translation API call in a background thread.

    Emits translation_result for every provider answer, including error
    results; error is reserved for unexpected exceptions.
    """

    def __init__(
        self,
        translation_service: TranslationService,
        request: TranslationRequest,
        api_key: str,
    ):
        super().__init__()
        self.translation_service = translation_service
        self.request = request
        self.api_key = api_key
        self.signals = WorkerSignals()
        self.setAutoDelete(True)

    @Slot()
    def run(self):
        """Execute the translation API call in background thread."""
        try:
            result = self.translation_service.translate(
                request=self.request,
                api_key=self.api_key,
            )
            self.signals.translation_result.emit(result)
        except ConfigurationError as e:
            self.signals.configuration_error.emit(str(e))
        except Exception as e:
            # Anything the service did not classify itself
            self.signals.error.emit(f"Unexpected translation error: {e}")
        finally:
            self.signals.finished.emit()

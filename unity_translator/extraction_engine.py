"""Extraction engine - runs chunked term extraction on a Qt worker thread."""

import logging

from PyQt6.QtCore import QObject, QThread, pyqtSignal

from .errors import ExtractionCancelled, LocalizationError
from .project_model import Document
from .unity_text import CHUNK_SIZE, CancelToken, extract_terms

log = logging.getLogger(__name__)


class ExtractionWorker(QObject):
    """Worker that extracts terms for one language slot in a background thread."""

    progress = pyqtSignal(int)              # percent done
    done = pyqtSignal(list)                 # extracted terms
    error = pyqtSignal(str, str)            # title, message
    finished = pyqtSignal()

    def __init__(self, document: Document, language_slot: int,
                 chunk_size: int = CHUNK_SIZE):
        super().__init__()
        self.document = document
        self.language_slot = language_slot
        self.chunk_size = chunk_size
        self._cancel_token = CancelToken()

    def cancel(self):
        self._cancel_token.cancel()

    @property
    def cancelled(self) -> bool:
        return self._cancel_token.cancelled

    def run(self):
        try:
            terms = extract_terms(
                self.document, self.language_slot,
                on_progress=self.progress.emit,
                cancel_token=self._cancel_token,
                chunk_size=self.chunk_size,
            )
        except ExtractionCancelled:
            pass
        except (LocalizationError, ValueError) as e:
            log.warning("Extraction failed: %s", e)
            title = getattr(e, "title", "Extraction Failed")
            self.error.emit(title, str(e))
        else:
            if not self.cancelled:
                self.done.emit(terms)
        self.finished.emit()


class ExtractionEngine(QObject):
    """Owns the extraction thread and relays its signals.

    Only one extraction runs at a time; starting a new one cancels the
    previous run, whose results are then discarded.
    """

    progress = pyqtSignal(int)
    extracted = pyqtSignal(object, int, list)   # document, language slot, terms
    error = pyqtSignal(str, str)
    finished = pyqtSignal()

    def __init__(self, parent=None):
        super().__init__(parent)
        self.chunk_size = CHUNK_SIZE
        self._thread = None
        self._worker = None

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.isRunning()

    def extract(self, document: Document, language_slot: int):
        """Start extracting ``document`` for ``language_slot``."""
        if self.is_running:
            self.cancel()
            self._cleanup()

        thread = QThread()
        worker = ExtractionWorker(document, language_slot, self.chunk_size)
        worker.moveToThread(thread)

        thread.started.connect(worker.run)
        worker.progress.connect(self.progress.emit)
        def on_done(terms):
            if worker is self._worker:
                self.extracted.emit(document, language_slot, terms)

        worker.done.connect(on_done)
        worker.error.connect(self.error.emit)
        worker.finished.connect(self._on_worker_finished)

        self._thread = thread
        self._worker = worker
        log.debug("Starting extraction of %d lines (slot %d)", len(document), language_slot)
        thread.start()

    def cancel(self):
        """Ask the running worker to stop at the next chunk boundary."""
        if self._worker is not None:
            self._worker.cancel()

    def _cleanup(self):
        if self._thread is not None:
            self._thread.quit()
            self._thread.wait()
        self._thread = None
        self._worker = None

    def _on_worker_finished(self):
        # A cancelled run may finish after its replacement has started
        if self.sender() is not self._worker:
            return
        self._cleanup()
        self.finished.emit()

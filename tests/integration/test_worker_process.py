"""
Tests de integración para el proceso worker.
"""

import os
import signal
import queue
import pytest
from unittest.mock import Mock, patch
from ner_stanford.config.options import build_options
from ner_stanford.core import worker as worker_module
from ner_stanford.core.worker import (
    WorkerProcess, check_paths, build_command, install_exit_handlers, remove_exit_handler
)
from ner_stanford.core.errors import ClassifierNotFoundError, WorkerExitedError

class TestInstallation:
    """Tests para la validación de la instalación y el comando Java."""

    def test_check_paths_valid(self, stanford_install):
        """Test instalación completa."""
        check_paths(build_options(stanford_install))

    def test_check_paths_missing_classifier(self, stanford_install):
        """Test clasificador inexistente."""
        options = build_options(stanford_install, classifier="missing.ser.gz")
        with pytest.raises(ClassifierNotFoundError, match="Classifier could not be found"):
            check_paths(options)

    def test_check_paths_missing_jar(self, stanford_install):
        """Test jar inexistente."""
        options = build_options(stanford_install, jar="missing.jar")
        with pytest.raises(ClassifierNotFoundError, match="NER jar could not be found"):
            check_paths(options)

    def test_missing_file_is_file_not_found(self, tmp_path):
        """Test que el error es también un FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            check_paths(build_options(str(tmp_path)))

    def test_build_command(self, stanford_install):
        """Test construcción del comando del clasificador."""
        command = build_command(build_options(stanford_install))

        assert command[:2] == ["java", "-mx1500m"]
        assert command[2] == "-cp"
        jar_entry, lib_entry = command[3].split(os.pathsep)
        assert jar_entry.endswith("stanford-ner.jar")
        assert lib_entry.endswith(os.path.join("lib", "*"))
        assert command[4] == "edu.stanford.nlp.ie.crf.CRFClassifier"
        assert command[5] == "-loadClassifier"
        assert command[6].endswith(os.path.join("classifiers", "english.all.3class.distsim.crf.ser.gz"))
        assert command[7] == "-readStdin"

class TestExitHandlers:
    """Tests para la instalación de manejadores de salida."""

    @patch('ner_stanford.core.worker._signals_installed', False)
    @patch('ner_stanford.core.worker._exit_callbacks', [])
    @patch('ner_stanford.core.worker.signal.signal')
    @patch('ner_stanford.core.worker.atexit.register')
    def test_install_exit_handlers(self, mock_register, mock_signal):
        """Test registro en atexit y en SIGINT/SIGTERM."""
        def callback():
            pass

        install_exit_handlers(callback)

        mock_register.assert_called_once_with(callback)
        assert mock_signal.call_count == 2

    @patch('ner_stanford.core.worker._signals_installed', False)
    @patch('ner_stanford.core.worker._exit_callbacks', [])
    @patch('ner_stanford.core.worker.signal.signal')
    @patch('ner_stanford.core.worker.atexit.register')
    def test_signal_handlers_installed_once(self, mock_register, mock_signal):
        """Test que varias instancias comparten los mismos manejadores de señal."""
        install_exit_handlers(Mock())
        install_exit_handlers(Mock())

        assert mock_register.call_count == 2
        assert mock_signal.call_count == 2
        assert len(worker_module._exit_callbacks) == 2

    @patch('ner_stanford.core.worker._signals_installed', False)
    @patch('ner_stanford.core.worker._exit_callbacks', [])
    @patch('ner_stanford.core.worker.signal.getsignal')
    @patch('ner_stanford.core.worker.signal.signal')
    @patch('ner_stanford.core.worker.atexit.register')
    def test_signal_runs_callbacks_then_previous_handler(self, mock_register, mock_signal, mock_getsignal):
        """Test que la señal ejecuta los callbacks registrados y luego el manejador anterior."""
        previous = Mock()
        mock_getsignal.return_value = previous
        first, second = Mock(), Mock()

        install_exit_handlers(first)
        install_exit_handlers(second)
        handler = mock_signal.call_args_list[0][0][1]
        handler(signal.SIGINT, None)

        first.assert_called_once()
        second.assert_called_once()
        previous.assert_called_once_with(signal.SIGINT, None)

    @patch('ner_stanford.core.worker._signals_installed', True)
    @patch('ner_stanford.core.worker._exit_callbacks', [])
    @patch('ner_stanford.core.worker.atexit.unregister')
    @patch('ner_stanford.core.worker.atexit.register')
    def test_remove_exit_handler(self, mock_register, mock_unregister):
        """Test que un callback eliminado ya no se ejecuta ni retiene su instancia."""
        callback = Mock()
        install_exit_handlers(callback)

        remove_exit_handler(callback)
        remove_exit_handler(callback)

        mock_unregister.assert_called_with(callback)
        assert worker_module._exit_callbacks == []

class TestWorkerProcess:
    """Tests del worker con el etiquetador falso como subproceso."""

    def test_round_trip(self, fake_tagger_command):
        """Test que las líneas escritas vuelven etiquetadas, en orden y en un solo fragmento."""
        chunks = queue.Queue()
        worker = WorkerProcess(fake_tagger_command)
        worker.start(on_output=chunks.put)

        try:
            assert worker.is_running
            worker.write_line("Barack Obama visited Paris . Angela Merkel lives in Berlin .\n")

            assert chunks.get(timeout=10).splitlines() == [
                "Barack/PERSON Obama/PERSON visited/O Paris/LOCATION ./O",
                "Angela/PERSON Merkel/PERSON lives/O in/O Berlin/LOCATION ./O"
            ]
        finally:
            worker.stop()

        assert not worker.is_running

    def test_partial_line_is_held_back(self, fake_tagger_command):
        """Test que una línea que llega en dos lecturas se entrega completa."""
        chunks = queue.Queue()
        worker = WorkerProcess(fake_tagger_command)
        worker.start(on_output=chunks.put)

        try:
            worker.write_line("SPLIT Paris .")
            assert chunks.get(timeout=10) == "SPLIT/O Paris/LOCATION ./O\n"
        finally:
            worker.stop()

    def test_invalid_utf8_is_replaced(self, fake_tagger_command):
        """Test que los bytes no UTF-8 se sustituyen en lugar de detener la lectura."""
        chunks = queue.Queue()
        worker = WorkerProcess(fake_tagger_command)
        worker.start(on_output=chunks.put)

        try:
            worker.write_line("LATIN1 Zürich .")
            assert chunks.get(timeout=10) == "LATIN1/O Z\ufffdrich/LOCATION ./O\n"

            worker.write_line("Paris .")
            assert chunks.get(timeout=10) == "Paris/LOCATION ./O\n"
        finally:
            worker.stop()

    def test_output_callback_failure_stops_worker(self, fake_tagger_command):
        """Test que un fallo al procesar la salida termina el worker y notifica la salida."""
        exits = queue.Queue()
        worker = WorkerProcess(fake_tagger_command)
        worker.start(on_output=Mock(side_effect=RuntimeError("boom")), on_exit=exits.put)

        worker.write_line("Paris .")

        assert exits.get(timeout=10) != 0
        assert not worker.is_running
        worker.stop()

    def test_exit_callback(self, fake_tagger_command):
        """Test que se notifica la salida del proceso."""
        exits = queue.Queue()
        worker = WorkerProcess(fake_tagger_command)
        worker.start(on_output=lambda line: None, on_exit=exits.put)

        worker.write_line("EXIT now")
        assert exits.get(timeout=10) == 3
        worker.stop()

    def test_write_after_stop(self, fake_tagger_command):
        """Test que escribir a un worker parado falla."""
        worker = WorkerProcess(fake_tagger_command)
        worker.start(on_output=lambda line: None)
        worker.stop()

        with pytest.raises(WorkerExitedError):
            worker.write_line("Paris .")

    def test_stop_before_start(self):
        """Test que parar un worker sin arrancar no falla."""
        WorkerProcess(["true"]).stop()

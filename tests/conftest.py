"""
Configuración global para todos los tests del puente Stanford NER.

Este archivo se ejecuta automáticamente por pytest y contiene fixtures
compartidas entre todos los tests.
"""

import pytest
import os
import sys
import json
import queue
import threading
from typing import List

FIXTURES_DIR = os.path.join(os.path.dirname(__file__), "fixtures")


class FakeWorker:
    """Worker en memoria que solo registra las líneas recibidas."""

    def __init__(self):
        self.lines: List[str] = []

    def write_line(self, text: str):
        self.lines.append(text)


class EchoWorker:
    """Worker que responde desde otro hilo, etiquetando 'Paris' como LOCATION y el resto como O.

    Registra cuántas peticiones escritas seguían sin resolver en cada escritura.
    """

    def __init__(self):
        self.sequencer = None
        self.pending = queue.Queue()
        self.written_futures = []
        self.unresolved_at_write = []
        self.thread = threading.Thread(target=self._respond, daemon=True)
        self.thread.start()

    def write_line(self, text: str):
        self.written_futures.append(self.sequencer.current.future)
        self.unresolved_at_write.append(sum(1 for f in self.written_futures if not f.done()))
        self.pending.put(text)

    def _respond(self):
        while True:
            text = self.pending.get()
            if text is None:
                return
            tagged = " ".join(f"{w}/{'LOCATION' if w == 'Paris' else 'O'}" for w in text.split())
            self.sequencer.feed(tagged + "\n")

    def stop(self):
        self.pending.put(None)


@pytest.fixture
def fake_worker():
    """Worker en memoria para alimentar el secuenciador a mano."""
    return FakeWorker()


@pytest.fixture
def echo_worker():
    """Worker con respuesta automática en un hilo aparte."""
    worker = EchoWorker()
    yield worker
    worker.stop()


@pytest.fixture
def fake_tagger_command():
    """Comando que lanza el etiquetador falso como subproceso real."""
    return [sys.executable, "-u", os.path.join(FIXTURES_DIR, "fake_tagger.py")]


@pytest.fixture
def stanford_install(tmp_path):
    """Instalación mínima de Stanford NER con el jar y el clasificador por defecto."""
    (tmp_path / "classifiers").mkdir()
    (tmp_path / "lib").mkdir()
    (tmp_path / "classifiers" / "english.all.3class.distsim.crf.ser.gz").write_bytes(b"")
    (tmp_path / "stanford-ner.jar").write_bytes(b"")
    return str(tmp_path)


@pytest.fixture
def sample_tagged_lines():
    """Líneas etiquetadas de muestra con el resultado esperado."""
    return [
        (
            "Barack/PERSON Obama/PERSON visited/O Paris/LOCATION",
            {"PERSON": ["Barack Obama"], "LOCATION": ["Paris"]}
        ),
        (
            "New/ORGANIZATION York/ORGANIZATION Fed/ORGANIZATION",
            {"ORGANIZATION": ["New York Fed"]}
        ),
        (
            "Spain/LOCATION ./O",
            {"LOCATION": ["Spain"]}
        ),
        (
            "nothing/O to/O see/O here/O",
            {}
        )
    ]


@pytest.fixture
def sample_documents():
    """Documentos de prueba sintéticos para el runner por lotes."""
    return [
        {"id": "doc_001", "text": "Barack Obama visited Paris ."},
        {"id": "doc_002", "text": "Angela Merkel lives in Berlin .\nShe likes Spain ."},
        {"id": "doc_003", "text": "Nothing to see here ."}
    ]


@pytest.fixture
def temp_jsonl_file(tmp_path, sample_documents):
    """Crea un archivo JSONL temporal para testing."""
    path = tmp_path / "input.jsonl"
    with open(path, 'w', encoding='utf-8') as f:
        for doc in sample_documents:
            f.write(json.dumps(doc, ensure_ascii=False) + '\n')
    return str(path)

"""
General system settings and constants for the Stanford NER bridge.

Contains default installation paths, worker process settings and batch processing limits.
"""

import os

# Installation defaults (the Stanford NER distribution unpacked next to the project)
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
DEFAULT_INSTALL_PATH = os.path.join(PROJECT_ROOT, "stanford-ner-2015-12-09")
DEFAULT_JAR = "stanford-ner.jar"
DEFAULT_CLASSIFIER = "english.all.3class.distsim.crf.ser.gz"
CLASSIFIERS_DIR = "classifiers"
LIB_DIR = "lib"

# Worker process settings
JAVA_EXECUTABLE = "java"
JAVA_MAX_MEMORY = "-mx1500m"
CLASSIFIER_MAIN_CLASS = "edu.stanford.nlp.ie.crf.CRFClassifier"
WORKER_ENCODING = "utf-8"
WORKER_READ_SIZE = 65536  # bytes per read from the worker's stdout

# Request settings
DEFAULT_TIMEOUT = None  # seconds, None waits forever

# Batch processing settings
MAX_WORKERS = 4  # Concurrent callers submitting to the sequencer
DEFAULT_OUTPUT_FILE = "results_ner.jsonl"

def get_classifier_path(install_path: str, classifier: str) -> str:
    """Absolute path of the serialized classifier inside the installation."""
    return os.path.normpath(os.path.join(install_path, CLASSIFIERS_DIR, classifier))

def get_jar_path(install_path: str, jar: str) -> str:
    """Absolute path of the NER jar inside the installation."""
    return os.path.normpath(os.path.join(install_path, jar))

def get_lib_classpath(install_path: str) -> str:
    """Classpath wildcard entry for the bundled dependency jars."""
    return os.path.normpath(os.path.join(install_path, LIB_DIR)) + os.sep + "*"

"""
Command-line interface parser for the Stanford NER bridge.

Handles argument parsing, validation, and worker option configuration.
"""

import argparse
import os
from typing import Dict, List, Optional
from ..config.options import build_options
from ..config.settings import DEFAULT_OUTPUT_FILE, MAX_WORKERS

def parse_arguments(argv: Optional[List[str]] = None):
    """Parse command-line arguments for the batch tagger."""
    parser = argparse.ArgumentParser(description="Stanford NER batch entity extraction")

    # Required arguments
    parser.add_argument("--input", required=True,
                       help="Input file: JSONL with 'id' and 'text' fields, or plain text with one document per line")

    # Optional arguments
    parser.add_argument("--out_pred", default=DEFAULT_OUTPUT_FILE,
                       help="Output JSONL file")
    parser.add_argument("--limit", type=int, default=0,
                       help="Limit number of documents (0 = all)")
    parser.add_argument("--workers", type=int, default=MAX_WORKERS,
                       help="Number of threads submitting documents concurrently")
    parser.add_argument("--timeout", type=float, default=None,
                       help="Seconds to wait for each document (default: wait forever)")

    # Installation overrides
    parser.add_argument("--install_path", default=None,
                       help="Path to the Stanford NER directory")
    parser.add_argument("--jar", default=None,
                       help="Stanford NER jar file name")
    parser.add_argument("--classifier", default=None,
                       help="Classifier file name inside the classifiers directory")

    return parser.parse_args(argv)

def configure_options(args) -> Dict[str, str]:
    """Build worker options from command-line arguments."""
    return build_options(args.install_path, args.jar, args.classifier)

def print_configuration(args, options: Dict[str, str]):
    """Print the current configuration."""
    print(f"[CONFIG] Install path: {options['install_path']}")
    print(f"[CONFIG] Jar: {options['jar']} | classifier: {options['classifier']}")
    print(f"[CONFIG] Input file: {args.input}")
    print(f"[CONFIG] Output file: {args.out_pred}")
    print(f"[CONFIG] Workers: {args.workers} | timeout: {args.timeout if args.timeout is not None else 'none'}")

def validate_arguments(args) -> bool:
    """Validate command-line arguments."""
    if not os.path.exists(args.input):
        print(f"[ERROR] Input file not found: {args.input}")
        return False

    if args.limit < 0:
        print(f"[ERROR] Limit must be non-negative")
        return False

    if args.workers <= 0:
        print(f"[ERROR] Workers must be a positive number")
        return False

    if args.timeout is not None and args.timeout <= 0:
        print(f"[ERROR] Timeout must be positive")
        return False

    return True

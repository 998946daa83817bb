#!/usr/bin/env python3
"""
Stanford NER batch runner.

Main entry point that tags every document of an input file through a single
NER worker, submitting documents concurrently and writing one JSON line per
document.
"""

import json
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import List, Dict, Any, Optional

from tqdm.auto import tqdm

from .core.errors import NERError
from .core.text_processor import normalize_whitespace
from .ner import NER
from .utils.cli_parser import parse_arguments, configure_options, print_configuration, validate_arguments
from .utils.entity_aggregator import EntityAggregator

def process_document(ner: NER, doc: Dict[str, Any], timeout: Optional[float] = None) -> Dict[str, Any]:
    """Tag a single document and build its output record."""
    t0 = time.time()
    aggregator = EntityAggregator(deduplicate=True)

    output = {
        "id": doc["id"],
        "text": doc["text"],
        "entities": [],
        "merged": {}
    }

    try:
        entity_maps = ner.get_entities(doc["text"], timeout=timeout)
        output["entities"] = entity_maps
        output["merged"] = aggregator.merge(entity_maps)
    except NERError as e:
        print(f"[ERROR] Document {doc['id']} failed: {e}")
        output["error"] = str(e)

    output["_latency_sec"] = round(time.time() - t0, 3)
    return output

def load_documents(input_file: str, limit: int = 0) -> List[Dict[str, Any]]:
    """Load documents from a JSONL or plain text file with optional limit."""
    documents = []

    with open(input_file, 'r', encoding='utf-8') as f:
        for line_num, line in enumerate(f):
            if not line.strip():
                continue

            if limit > 0 and len(documents) >= limit:
                break

            if line.lstrip().startswith("{"):
                try:
                    doc = json.loads(line)
                except json.JSONDecodeError as e:
                    print(f"[ERROR] Failed to parse line {line_num+1}: {e}")
                    continue
                doc_id = str(doc.get("id", f"doc_{line_num}"))
                text = doc.get("text", "")
            else:
                doc_id = f"doc_{line_num}"
                text = line

            # New lines delimit requests on the worker's stdin
            text = normalize_whitespace(text)
            if not text:
                continue

            documents.append({
                "id": doc_id,
                "text": text,
                "line_num": line_num + 1
            })

    return documents

def process_documents(ner: NER, documents: List[Dict[str, Any]], workers: int,
                      timeout: Optional[float] = None) -> List[Dict[str, Any]]:
    """Submit all documents concurrently and return their records in input order."""
    results: List[Optional[Dict[str, Any]]] = [None] * len(documents)

    with ThreadPoolExecutor(max_workers=workers) as executor:
        future_to_index = {
            executor.submit(process_document, ner, doc, timeout): i
            for i, doc in enumerate(documents)
        }

        for future in tqdm(as_completed(future_to_index), total=len(documents), desc="[NER] Tagging"):
            results[future_to_index[future]] = future.result()

    return results

def save_results(results: List[Dict[str, Any]], output_file: str):
    """Save results to output file."""
    with open(output_file, 'w', encoding='utf-8') as f:
        for result in results:
            f.write(json.dumps(result, ensure_ascii=False) + '\n')

    print(f"[INFO] Results saved to {output_file}")

def print_summary(results: List[Dict[str, Any]]):
    """Print processing summary."""
    summary = EntityAggregator().get_summary([r["entities"] for r in results])
    failed = [r for r in results if "error" in r]

    print(f"\n[SUMMARY] Processed {summary['total_documents']} documents ({len(failed)} failed)")
    print(f"[SUMMARY] Sentences tagged: {summary['total_sentences']}")
    print(f"[SUMMARY] Total mentions: {summary['total_mentions']}")

    print(f"\n[ENTITY CATEGORIES]")
    for category, count in sorted(summary["by_category"].items(), key=lambda x: x[1], reverse=True):
        top = ", ".join(f"{mention} ({n})" for mention, n in summary["top_mentions"].get(category, []))
        print(f"  {category}: {count} mentions | top: {top}")

    if results:
        avg_latency = sum(r["_latency_sec"] for r in results) / len(results)
        print(f"\n[SUMMARY] Average latency: {avg_latency:.3f}s")

def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the batch tagger."""
    ner = None
    try:
        args = parse_arguments(argv)
        if not validate_arguments(args):
            print("[ERROR] Invalid arguments provided")
            return 1

        options = configure_options(args)
        print_configuration(args, options)

        print(f"[INFO] Loading documents from {args.input}...")
        documents = load_documents(args.input, args.limit)
        print(f"[INFO] Loaded {len(documents)} documents")

        if not documents:
            print("[ERROR] No valid documents found")
            return 1

        ner = NER(options["install_path"], options["jar"], options["classifier"], timeout=args.timeout)

        results = process_documents(ner, documents, args.workers, args.timeout)

        save_results(results, args.out_pred)
        print_summary(results)

        print(f"\n[SUCCESS] Processing completed successfully!")
        return 0

    except KeyboardInterrupt:
        print(f"\n[INTERRUPTED] Processing stopped by user")
        return 130

    except NERError as e:
        print(f"\n[ERROR] {e}")
        return 1

    finally:
        if ner is not None:
            ner.exit()

if __name__ == "__main__":
    exit(main())

"""
Entity aggregation utilities for the Stanford NER bridge.

Provides tools for combining the per-sentence entity maps returned by the
tagger into document level views and summary statistics.
"""

from collections import defaultdict
from typing import Dict, List, Any

EntityMap = Dict[str, List[str]]

class EntityAggregator:
    """Combines and summarizes per-sentence entity maps."""

    def __init__(self, deduplicate: bool = False):
        self.deduplicate = deduplicate

    def merge(self, entity_maps: List[EntityMap]) -> EntityMap:
        """Merge sentence level maps into one map, keeping first-appearance order."""
        merged: EntityMap = {}

        for entity_map in entity_maps:
            for category, mentions in entity_map.items():
                bucket = merged.setdefault(category, [])
                for mention in mentions:
                    if self.deduplicate and mention in bucket:
                        continue
                    bucket.append(mention)

        return merged

    def count_by_category(self, entity_maps: List[EntityMap]) -> Dict[str, int]:
        """Count mentions per entity category."""
        counts = defaultdict(int)
        for entity_map in entity_maps:
            for category, mentions in entity_map.items():
                counts[category] += len(mentions)
        return dict(counts)

    def get_summary(self, results: List[List[EntityMap]]) -> Dict[str, Any]:
        """Get summary statistics over the results of several documents."""
        if not results:
            return {
                "total_documents": 0,
                "total_sentences": 0,
                "total_mentions": 0,
                "by_category": {},
                "top_mentions": {}
            }

        by_category = defaultdict(int)
        mention_counts = defaultdict(lambda: defaultdict(int))
        total_sentences = 0

        for entity_maps in results:
            total_sentences += len(entity_maps)
            for category, count in self.count_by_category(entity_maps).items():
                by_category[category] += count
            for entity_map in entity_maps:
                for category, mentions in entity_map.items():
                    for mention in mentions:
                        mention_counts[category][mention] += 1

        top_mentions = {}
        for category, counts in mention_counts.items():
            ranked = sorted(counts.items(), key=lambda x: x[1], reverse=True)
            top_mentions[category] = ranked[:5]

        return {
            "total_documents": len(results),
            "total_sentences": total_sentences,
            "total_mentions": sum(by_category.values()),
            "by_category": dict(by_category),
            "top_mentions": top_mentions
        }

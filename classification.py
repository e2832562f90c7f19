"""
classification.py
-----------------

Card-bucket classification rules. Each rule is a bucket name plus a list of
keywords; a transaction belongs to the first rule whose keywords appear
(case-insensitive substring) in either its merchant or its category. Anything
left unmatched lands in the fallback bucket, ``"Other"`` by default.

Rules are evaluated strictly in declared order, so put the more specific
buckets first. ``CARD_MAP`` below is the default four-card layout; edit it or
load your own table with :func:`load_rule_table`.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Mapping, Tuple

from logging_setup import get_logger

logger = get_logger("flofi.classification")

OTHER_BUCKET = "Other"

# Map your four-card categories by merchant keywords.
CARD_MAP: Dict[str, List[str]] = {
    "Housing & Insurance": ["geico", "extra space storage"],
    "Connectivity & Utilities": ["starlink", "verizon", "at&t", "att"],
    "Digital & Lifestyle": [
        "prime video", "amazon digital", "dreamhost", "apple", "itunes", "icloud", "namecheap",
        "spotify", "netflix", "audible", "google one", "wikipedia", "new york times", "xbox", "niantic",
    ],
    "AI & Tools": ["cursor", "claude", "openai", "chatgpt", "anthropic"],
}


@dataclass(frozen=True)
class ClassificationRule:
    bucket: str
    keywords: Tuple[str, ...]
    _lowered: Tuple[str, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "keywords", tuple(self.keywords))
        object.__setattr__(self, "_lowered", tuple(k.lower() for k in self.keywords))

    def matches(self, merchant: str, category: str) -> bool:
        merchant = (merchant or "").lower()
        category = (category or "").lower()
        return any(k in category or k in merchant for k in self._lowered)


@dataclass(frozen=True)
class RuleTable:
    """Ordered (bucket, predicate) rules with a fallback bucket."""

    rules: Tuple[ClassificationRule, ...]
    fallback: str = OTHER_BUCKET

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, List[str]], fallback: str = OTHER_BUCKET) -> "RuleTable":
        return cls(tuple(ClassificationRule(bucket, tuple(kws)) for bucket, kws in mapping.items()), fallback)

    def classify(self, merchant: str, category: str) -> str:
        for rule in self.rules:
            if rule.matches(merchant, category):
                return rule.bucket
        return self.fallback

    def bucket_names(self) -> List[str]:
        """Distinct buckets in declared order, fallback last."""
        names = list(dict.fromkeys(rule.bucket for rule in self.rules if rule.bucket != self.fallback))
        names.append(self.fallback)
        return names


DEFAULT_RULES = RuleTable.from_mapping(CARD_MAP)


def load_rule_table(path: str | Path, fallback: str = OTHER_BUCKET) -> RuleTable:
    """Load a rule table from a JSON file.

    The file holds either an object mapping bucket -> keyword list (key order
    is rule order) or a list of ``{"bucket": ..., "keywords": [...]}`` objects.
    """
    with open(path, encoding="utf-8") as f:
        try:
            raw = json.load(f)
        except json.JSONDecodeError as exc:
            raise ValueError(f"Rules file {path} is not valid JSON: {exc}") from exc

    if isinstance(raw, dict):
        pairs = list(raw.items())
    elif isinstance(raw, list):
        try:
            pairs = [(entry["bucket"], entry["keywords"]) for entry in raw]
        except (KeyError, TypeError) as exc:
            raise ValueError(f"Rules file {path} entries need 'bucket' and 'keywords'") from exc
    else:
        raise ValueError(f"Rules file {path} must hold an object or a list")

    rules = []
    for bucket, keywords in pairs:
        if not isinstance(bucket, str) or not bucket.strip():
            raise ValueError(f"Rules file {path} has an empty bucket name")
        # A blank keyword would match every transaction.
        if not isinstance(keywords, list) or not all(isinstance(k, str) and k.strip() for k in keywords):
            raise ValueError(f"Bucket {bucket!r} in {path} needs a list of non-blank keyword strings")
        rules.append(ClassificationRule(bucket, tuple(keywords)))

    logger.info("Loaded %d classification rules from %s", len(rules), path)
    return RuleTable(tuple(rules), fallback)

"""
Campaign rule loading.

Rules are maintained by an external admin process and published as a JSON
array of rule records (AIRDROP_RULES_PATH). When that file is missing or
unreadable the engine falls back to the rules bundled with the package.
Inactive rules are dropped; the result is ordered by project name.
"""

from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from airdrop_scout.config.env import get_rules_path
from airdrop_scout.eligibility.models import AirdropRule
from airdrop_scout.scout_logging import get_logger

logger = get_logger(__name__)

BUILTIN_RULES_PATH = Path(__file__).resolve().parent / "data" / "builtin_airdrops.json"


def parse_rules(records: list[Any]) -> list[AirdropRule]:
    """Validate raw records; invalid ones are skipped with a warning."""
    rules: list[AirdropRule] = []
    seen: set[str] = set()
    for index, record in enumerate(records):
        try:
            rule = AirdropRule.model_validate(record)
        except ValidationError as e:
            logger.warning("rules_store_invalid_record", index=index, error=str(e))
            continue
        if rule.id in seen:
            logger.warning("rules_store_duplicate_id", index=index, rule_id=rule.id)
            continue
        seen.add(rule.id)
        rules.append(rule)
    return rules


def _read_records(path: Path) -> list[Any] | None:
    if not path.is_file():
        logger.debug("rules_store_file_missing", path=str(path))
        return None
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.warning("rules_store_load_failed", path=str(path), error=str(e))
        return None
    if not isinstance(data, list):
        logger.warning("rules_store_not_a_list", path=str(path))
        return None
    return data


def _active_sorted(rules: list[AirdropRule]) -> list[AirdropRule]:
    return sorted((r for r in rules if r.is_active), key=lambda r: r.project.lower())


@lru_cache(maxsize=1)
def builtin_airdrop_rules() -> tuple[AirdropRule, ...]:
    """Rules bundled with the package; the fallback when the store is unreachable."""
    records = _read_records(BUILTIN_RULES_PATH) or []
    return tuple(_active_sorted(parse_rules(records)))


def load_airdrop_rules(path: Path | None = None) -> list[AirdropRule]:
    """
    Load active campaign rules from path (default: AIRDROP_RULES_PATH).

    Falls back to builtin_airdrop_rules() when no store is configured, the
    file cannot be read, or it holds no valid rule.
    """
    path = path if path is not None else get_rules_path()
    if path is None:
        return list(builtin_airdrop_rules())

    records = _read_records(path)
    if records is None:
        logger.info("rules_store_fallback_builtin", path=str(path), reason="unreadable")
        return list(builtin_airdrop_rules())

    rules = parse_rules(records)
    if not rules and records:
        logger.info("rules_store_fallback_builtin", path=str(path), reason="no_valid_rules")
        return list(builtin_airdrop_rules())

    logger.debug("rules_store_loaded", path=str(path), count=len(rules))
    return _active_sorted(rules)

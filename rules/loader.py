"""Helpers for loading and caching rule sets from content files and records."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional

from pydantic import ValidationError

from .errors import RuleNotFoundError, RuleValidationError, RuleVersionMismatchError
from .ruleset import RuleSet, RuleSetCollection
from .schema import RuleSetKind
from .validator import ExistenceCatalog

LOGGER = logging.getLogger(__name__)


class RuleRepository:
    """In-memory registry of :class:`RuleSet` objects with simple caching.

    When a ``catalog`` is given, entity references in loaded content are
    checked against it.
    """

    def __init__(self, catalog: Optional[ExistenceCatalog] = None) -> None:
        self._catalog = catalog
        self._rules: Dict[str, RuleSet] = {}
        self._json_cache: Dict[Path, int] = {}

    # ------------------------------------------------------------------ loading
    def load_from_json(self, path: Path, *, force: bool = False) -> None:
        """Load rule sets from a JSON file on disk."""

        path = Path(path)
        current_timestamp = path.stat().st_mtime_ns
        if not force and path in self._json_cache and self._json_cache[path] >= current_timestamp:
            return
        payload = json.loads(path.read_text())
        self._store_collection(payload)
        self._json_cache[path] = current_timestamp
        LOGGER.info("Loaded rule sets from %s (%d total)", path, len(self._rules))

    def load_from_records(self, records: Iterable[Mapping[str, Any]]) -> None:
        """Load rule sets from database-like rows."""

        for record in records:
            payload = dict(record)
            data = payload.pop("payload", payload)
            if not isinstance(data, Mapping):
                raise RuleValidationError("Database record payload must be a mapping")
            rule = self._validate(RuleSet, data)
            if "version" in payload and rule.version != payload["version"]:
                raise RuleVersionMismatchError(rule.rule_id, payload["version"], rule.version)
            self._rules[rule.rule_id] = rule

    def add(self, rule: RuleSet) -> None:
        self._rules[rule.rule_id] = rule

    # ------------------------------------------------------------------- access
    def get(self, rule_id: str, *, version: Optional[str] = None) -> RuleSet:
        try:
            rule = self._rules[rule_id]
        except KeyError as exc:
            raise RuleNotFoundError(rule_id) from exc
        if version is not None and rule.version != version:
            raise RuleVersionMismatchError(rule_id, version, rule.version)
        return rule

    def by_kind(self, kind: RuleSetKind) -> List[RuleSet]:
        return [rule for rule in self._rules.values() if rule.kind == kind]

    def __len__(self) -> int:
        return len(self._rules)

    def __iter__(self):
        return iter(self._rules.values())

    def _store_collection(self, payload: Any) -> None:
        if isinstance(payload, Mapping) and "rules" in payload:
            payload = payload["rules"]
        collection = self._validate(RuleSetCollection, payload)
        for rule in collection.root:
            self._rules[rule.rule_id] = rule

    def _validate(self, model, data: Any):
        context = {"catalog": self._catalog} if self._catalog is not None else None
        try:
            return model.model_validate(data, context=context)
        except ValidationError as exc:
            raise RuleValidationError(str(exc)) from exc


__all__ = ["RuleRepository"]

"""JSON-file persistence for saved analyses, partitioned by owner."""

from __future__ import annotations

import hashlib
import json
import logging
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Mapping, Sequence

from ads_audit.application.analysis_service import AnalysisResult
from ads_audit.errors import AnalysisNotFoundError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SavedAnalysis:
    id: str
    owner_id: str
    name: str
    date: str
    target_acos: float
    data: list[dict[str, Any]]
    analysis: dict[str, Any]

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "SavedAnalysis":
        return cls(
            id=str(payload["id"]),
            owner_id=str(payload["owner_id"]),
            name=str(payload.get("name", "")),
            date=str(payload.get("date", "")),
            target_acos=float(payload.get("target_acos", 0.0)),
            data=list(payload.get("data", [])),
            analysis=dict(payload.get("analysis", {})),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "owner_id": self.owner_id,
            "name": self.name,
            "date": self.date,
            "target_acos": self.target_acos,
            "data": self.data,
            "analysis": self.analysis,
        }


def _owner_dir_name(owner_id: str) -> str:
    return hashlib.sha1(owner_id.encode("utf-8")).hexdigest()[:16]


class JsonAnalysisStore:
    def __init__(self, root: str | Path) -> None:
        self.root = Path(root)

    def _owner_dir(self, owner_id: str) -> Path:
        return self.root / _owner_dir_name(owner_id)

    def _record_path(self, owner_id: str, analysis_id: str) -> Path:
        if not analysis_id.isdigit():
            raise AnalysisNotFoundError(owner_id, analysis_id)
        return self._owner_dir(owner_id) / f"{analysis_id}.json"

    def _new_id(self, owner_id: str) -> str:
        analysis_id = str(time.time_ns() // 1_000_000)
        while self._record_path(owner_id, analysis_id).exists():
            analysis_id = str(int(analysis_id) + 1)
        return analysis_id

    def save(
        self,
        owner_id: str,
        name: str,
        rows: Sequence[Mapping[str, Any]],
        result: AnalysisResult,
        target_acos: float,
    ) -> str:
        analysis_id = self._new_id(owner_id)
        record = SavedAnalysis(
            id=analysis_id,
            owner_id=owner_id,
            name=name,
            date=datetime.now(timezone.utc).isoformat(),
            target_acos=float(target_acos),
            data=[dict(row) for row in rows],
            analysis=result.to_dict(),
        )
        path = self._record_path(owner_id, analysis_id)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(record.to_dict(), ensure_ascii=False, default=str), encoding="utf-8")
        logger.info("saved analysis id=%s owner=%s name=%s", analysis_id, owner_id, name)
        return analysis_id

    def list(self, owner_id: str) -> list[SavedAnalysis]:
        owner_dir = self._owner_dir(owner_id)
        if not owner_dir.exists():
            return []
        records: list[SavedAnalysis] = []
        for path in owner_dir.glob("*.json"):
            try:
                payload = json.loads(path.read_text(encoding="utf-8"))
            except (OSError, json.JSONDecodeError) as exc:
                logger.warning("skipping unreadable analysis file %s: %s", path, exc)
                continue
            if isinstance(payload, dict) and payload.get("owner_id") == owner_id:
                records.append(SavedAnalysis.from_dict(payload))
        records.sort(key=lambda record: (record.date, record.id), reverse=True)
        return records

    def load(self, owner_id: str, analysis_id: str) -> SavedAnalysis:
        path = self._record_path(owner_id, analysis_id)
        if not path.exists():
            raise AnalysisNotFoundError(owner_id, analysis_id)
        return SavedAnalysis.from_dict(json.loads(path.read_text(encoding="utf-8")))

    def delete(self, owner_id: str, analysis_id: str) -> None:
        path = self._record_path(owner_id, analysis_id)
        if not path.exists():
            raise AnalysisNotFoundError(owner_id, analysis_id)
        path.unlink()
        logger.info("deleted analysis id=%s owner=%s", analysis_id, owner_id)

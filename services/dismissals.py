from __future__ import annotations

from datetime import date
from typing import Protocol

from sqlalchemy import select

from db import models
from schemas.domain import RECO_ORDER, Recommendation, RecoType


class DismissalStore(Protocol):
    def get(self, key: str) -> list[str]: ...

    def set(self, key: str, values: list[str]) -> None: ...


class InMemoryDismissalStore:
    def __init__(self, initial: dict[str, list[str]] | None = None):
        self._data = {k: list(v) for k, v in (initial or {}).items()}

    def get(self, key: str) -> list[str]:
        return list(self._data.get(key, []))

    def set(self, key: str, values: list[str]) -> None:
        self._data[key] = list(values)


class SqlDismissalStore:
    def __init__(self, session):
        self.session = session

    def get(self, key: str) -> list[str]:
        row = self.session.scalar(select(models.KeyValueEntry).where(models.KeyValueEntry.key == key))
        return list(row.values or []) if row else []

    def set(self, key: str, values: list[str]) -> None:
        row = self.session.scalar(select(models.KeyValueEntry).where(models.KeyValueEntry.key == key))
        if row:
            row.values = list(values)
        else:
            self.session.add(models.KeyValueEntry(key=key, values=list(values)))
        self.session.commit()


def dismissal_key(day: date | None = None) -> str:
    day = day or date.today()
    return f"dismissed:{day.year}-{day.month:02d}"


def dismissed_types(store: DismissalStore, day: date | None = None) -> set[RecoType]:
    known = {t.value for t in RECO_ORDER}
    return {RecoType(v) for v in store.get(dismissal_key(day)) if v in known}


def dismiss(store: DismissalStore, reco_type: RecoType | str, day: date | None = None) -> list[str]:
    try:
        value = RecoType(reco_type).value
    except ValueError as exc:
        raise ValueError(f"Unknown recommendation type: {reco_type}") from exc

    key = dismissal_key(day)
    current = store.get(key)
    if value not in current:
        current.append(value)
        store.set(key, current)
    return current


def restore_all(store: DismissalStore, day: date | None = None) -> None:
    store.set(dismissal_key(day), [])


def filter_dismissed(
    recommendations: list[Recommendation],
    store: DismissalStore,
    day: date | None = None,
) -> list[Recommendation]:
    hidden = dismissed_types(store, day)
    return [r for r in recommendations if r.type not in hidden]

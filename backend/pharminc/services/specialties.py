"""
Specialty taxonomy helpers.

Specialties are matched by their lower-cased name, so tagging a user,
institute or job with "Cardiology" and "cardiology " links the same row.
"""

from typing import Iterable, Union

from sqlalchemy.orm import Session

from pharminc.models import Specialty
from pharminc.schemas.specialty import SpecialtyRef


def normalize_specialty_name(name: str) -> str:
    return name.strip().lower()


def upsert_specialties(
    db: Session, refs: Iterable[Union[SpecialtyRef, str]]
) -> list[Specialty]:
    """
    Connect-or-create specialties by natural key.

    Returns one row per distinct normalised name, in input order. New rows
    are added to the session but not committed; the caller owns the
    transaction.
    """
    names: list[str] = []
    for ref in refs:
        raw = ref if isinstance(ref, str) else ref.name
        name = normalize_specialty_name(raw)
        if name and name not in names:
            names.append(name)

    if not names:
        return []

    existing = {
        specialty.name: specialty
        for specialty in db.query(Specialty).filter(Specialty.name.in_(names)).all()
    }

    result: list[Specialty] = []
    for name in names:
        specialty = existing.get(name)
        if specialty is None:
            specialty = Specialty(name=name)
            db.add(specialty)
            existing[name] = specialty
        result.append(specialty)

    db.flush()
    return result

"""
Academic year management.
"""
import logging
from datetime import date
from typing import Dict, Any, Optional
from sqlalchemy.orm import Session

from database import AcademicYear, Grade
from .exceptions import ConflictError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)


def _get(db: Session, year_id: int) -> AcademicYear:
    year = db.get(AcademicYear, year_id)
    if not year:
        raise NotFoundError("Academic year", year_id)
    return year


def _check_dates(start_date: date, end_date: date) -> None:
    if end_date < start_date:
        raise ValidationError("end_date must not be before start_date", field="end_date")


def _check_name_free(db: Session, name: str, exclude_id: Optional[int] = None) -> None:
    query = db.query(AcademicYear).filter(AcademicYear.name == name)
    if exclude_id is not None:
        query = query.filter(AcademicYear.id != exclude_id)
    if query.first():
        raise ConflictError(f"Academic year '{name}' already exists", field="name")


def create_academic_year(
    db: Session,
    name: str,
    start_date: date,
    end_date: date,
    is_current: bool = False
) -> Dict[str, Any]:
    _check_dates(start_date, end_date)
    _check_name_free(db, name)

    year = AcademicYear(name=name, start_date=start_date, end_date=end_date, is_current=is_current)
    db.add(year)
    db.commit()
    db.refresh(year)
    logger.info("Created academic year %s", year.id)
    return year.to_dict()


def list_academic_years(db: Session) -> list[Dict[str, Any]]:
    """Most recent years first."""
    years = db.query(AcademicYear).order_by(AcademicYear.start_date.desc()).all()
    return [y.to_dict() for y in years]


def get_academic_year(db: Session, year_id: int) -> Dict[str, Any]:
    return _get(db, year_id).to_dict()


def update_academic_year(db: Session, year_id: int, **fields) -> Dict[str, Any]:
    year = _get(db, year_id)

    if fields.get("name") is not None:
        _check_name_free(db, fields["name"], exclude_id=year_id)

    start = fields.get("start_date") or year.start_date
    end = fields.get("end_date") or year.end_date
    _check_dates(start, end)

    for name in ("name", "start_date", "end_date", "is_current"):
        if fields.get(name) is not None:
            setattr(year, name, fields[name])

    db.commit()
    db.refresh(year)
    return year.to_dict()


def delete_academic_year(db: Session, year_id: int) -> None:
    """
    Delete an academic year.

    Raises:
        ValidationError: If grade records still reference the year
    """
    year = _get(db, year_id)
    if db.query(Grade).filter(Grade.academic_year_id == year_id).first():
        raise ValidationError(
            f"Academic year {year_id} still has grade records", field="academic_year_id"
        )
    db.delete(year)
    db.commit()
    logger.info("Deleted academic year %s", year_id)

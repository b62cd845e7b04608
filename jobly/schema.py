"""
Payload and filter validation.

Each validator returns a list of error messages; an empty list means valid.
ensure_valid() turns a non-empty list into a ValidationError.
"""

from typing import Any, Dict, List, Optional
from urllib.parse import urlparse

from .errors import ValidationError

COMPANY_FIELDS = ["handle", "name", "description", "numEmployees", "logoUrl"]
COMPANY_REQUIRED = ["handle", "name", "description"]
COMPANY_UPDATABLE = ["name", "description", "numEmployees", "logoUrl"]

JOB_FIELDS = ["title", "salary", "equity", "companyHandle"]
JOB_REQUIRED = ["title", "companyHandle"]
JOB_UPDATABLE = ["title", "salary", "equity"]

COMPANY_FILTERS = ["name", "minEmployees", "maxEmployees"]
JOB_FILTERS = ["title", "minSalary", "maxSalary", "hasEquity"]

MAX_HANDLE_LENGTH = 25


def _is_non_empty_str(v: Any) -> bool:
    return isinstance(v, str) and v.strip() != ""


def _is_int(v: Any) -> bool:
    return isinstance(v, int) and not isinstance(v, bool)


def _valid_url(v: str) -> bool:
    try:
        p = urlparse(v)
        return bool(p.scheme and p.netloc)
    except ValueError:
        return False


def _as_number(v: Any) -> Optional[float]:
    if isinstance(v, bool):
        return None
    if isinstance(v, (int, float)):
        return float(v)
    if isinstance(v, str):
        try:
            return float(v)
        except ValueError:
            return None
    return None


def _unknown_fields(data: Dict[str, Any], allowed: List[str]) -> List[str]:
    return [f"Field '{k}' is not allowed" for k in data if k not in allowed]


def _check_company_fields(data: Dict[str, Any]) -> List[str]:
    errors: List[str] = []
    if "handle" in data:
        if not _is_non_empty_str(data["handle"]):
            errors.append("Field 'handle' must be a non-empty string")
        elif len(data["handle"]) > MAX_HANDLE_LENGTH:
            errors.append(f"Field 'handle' length must be at most {MAX_HANDLE_LENGTH}")
    if "name" in data and not _is_non_empty_str(data["name"]):
        errors.append("Field 'name' must be a non-empty string")
    if "description" in data and not isinstance(data["description"], str):
        errors.append("Field 'description' must be a string")
    if "numEmployees" in data:
        v = data["numEmployees"]
        if not _is_int(v) or v < 0:
            errors.append("Field 'numEmployees' must be a non-negative integer")
    if "logoUrl" in data and data["logoUrl"] is not None:
        v = data["logoUrl"]
        if not isinstance(v, str) or not _valid_url(v):
            errors.append("Field 'logoUrl' must be a valid absolute URL (scheme + host)")
    return errors


def _check_job_fields(data: Dict[str, Any]) -> List[str]:
    errors: List[str] = []
    if "title" in data and not _is_non_empty_str(data["title"]):
        errors.append("Field 'title' must be a non-empty string")
    if "salary" in data and data["salary"] is not None:
        v = data["salary"]
        if not _is_int(v) or v < 0:
            errors.append("Field 'salary' must be a non-negative integer")
    if "equity" in data and data["equity"] is not None:
        v = _as_number(data["equity"])
        if v is None or not 0 <= v <= 1:
            errors.append("Field 'equity' must be a number between 0 and 1")
    if "companyHandle" in data and not _is_non_empty_str(data["companyHandle"]):
        errors.append("Field 'companyHandle' must be a non-empty string")
    return errors


def validate_company_new(data: Dict[str, Any]) -> List[str]:
    errors = [f"Missing required field: {f}" for f in COMPANY_REQUIRED if f not in data]
    errors.extend(_unknown_fields(data, COMPANY_FIELDS))
    errors.extend(_check_company_fields(data))
    return errors


def validate_company_update(data: Dict[str, Any]) -> List[str]:
    """Partial update: every field optional, handle is immutable."""
    errors = _unknown_fields(data, COMPANY_UPDATABLE)
    errors.extend(_check_company_fields(data))
    return errors


def validate_job_new(data: Dict[str, Any]) -> List[str]:
    errors = [f"Missing required field: {f}" for f in JOB_REQUIRED if f not in data]
    errors.extend(_unknown_fields(data, JOB_FIELDS))
    errors.extend(_check_job_fields(data))
    return errors


def validate_job_update(data: Dict[str, Any]) -> List[str]:
    """Partial update: id and companyHandle cannot change."""
    errors = _unknown_fields(data, JOB_UPDATABLE)
    errors.extend(_check_job_fields(data))
    return errors


def _to_int(v: Any) -> Optional[int]:
    if _is_int(v):
        return v
    if isinstance(v, str):
        try:
            return int(v.strip())
        except ValueError:
            return None
    return None


def _to_bool(v: Any) -> Optional[bool]:
    if isinstance(v, bool):
        return v
    if isinstance(v, str) and v.strip().lower() in ("true", "false"):
        return v.strip().lower() == "true"
    return None


def validate_company_filters(query: Dict[str, Any]) -> List[str]:
    errors = _unknown_fields(query, COMPANY_FILTERS)
    if "name" in query and not isinstance(query["name"], str):
        errors.append("Filter 'name' must be a string")
    for key in ("minEmployees", "maxEmployees"):
        if key in query and (_to_int(query[key]) is None or _to_int(query[key]) < 0):
            errors.append(f"Filter '{key}' must be a non-negative integer")
    return errors


def validate_job_filters(query: Dict[str, Any]) -> List[str]:
    errors = _unknown_fields(query, JOB_FILTERS)
    if "title" in query and not isinstance(query["title"], str):
        errors.append("Filter 'title' must be a string")
    for key in ("minSalary", "maxSalary"):
        if key in query and (_to_int(query[key]) is None or _to_int(query[key]) < 0):
            errors.append(f"Filter '{key}' must be a non-negative integer")
    if "hasEquity" in query and _to_bool(query["hasEquity"]) is None:
        errors.append("Filter 'hasEquity' must be true or false")
    return errors


def coerce_company_filters(query: Dict[str, Any]) -> Dict[str, Any]:
    """
    Validate a company search query and return keyword arguments for
    companies.find_all().

    Raises:
        ValidationError: If the query has unknown keys or bad values
    """
    ensure_valid(validate_company_filters(query))
    return {
        "name": query.get("name"),
        "min_employees": _to_int(query["minEmployees"]) if "minEmployees" in query else None,
        "max_employees": _to_int(query["maxEmployees"]) if "maxEmployees" in query else None,
    }


def coerce_job_filters(query: Dict[str, Any]) -> Dict[str, Any]:
    """Same as coerce_company_filters, for jobs.find_all()."""
    ensure_valid(validate_job_filters(query))
    return {
        "title": query.get("title"),
        "min_salary": _to_int(query["minSalary"]) if "minSalary" in query else None,
        "max_salary": _to_int(query["maxSalary"]) if "maxSalary" in query else None,
        "has_equity": _to_bool(query["hasEquity"]) if "hasEquity" in query else False,
    }


def ensure_valid(errors: List[str]) -> None:
    if errors:
        raise ValidationError("; ".join(errors), errors=errors)

"""
Companies Repository.

Responsibilities:
- CRUD operations for the companies table.
- Filtered listing by name and employee count.
- Transaction-safe writes.

Non-Responsibilities:
- No authorization.
- No HTTP concerns.

Invariant:
Every statement is parameterized; only column names from COMPANY_COLUMNS
or validated payload keys are interpolated into SQL.
"""

from typing import Any, Dict, List, Optional

from sqlalchemy import text
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..errors import DuplicateError, NotFoundError
from ..logger import get_logger
from ..schema import ensure_valid, validate_company_new, validate_company_update
from ..sql import FilterColumns, FilterSpec, bind_params, build_filter_clause, placeholder, sql_for_partial_update

ENTITY = "company"

# Domain field -> column. Fields not listed share their column name.
COMPANY_COLUMNS = {
    "numEmployees": "num_employees",
    "logoUrl": "logo_url",
}

COMPANY_FILTER_COLUMNS = FilterColumns(text="name", bound="num_employees")

COMPANY_SELECT = 'handle, name, description, num_employees AS "numEmployees", logo_url AS "logoUrl"'


def _exists(session: Session, handle: str) -> bool:
    row = session.execute(
        text("SELECT handle FROM companies WHERE handle = :p1"),
        bind_params([handle]),
    ).first()
    get_logger().record_query()
    return row is not None


def create(session: Session, data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Create a company and return it.

    Args:
        session: SQLAlchemy session
        data: {handle, name, description, numEmployees?, logoUrl?}

    Returns:
        {handle, name, description, numEmployees, logoUrl}

    Raises:
        ValidationError: If data is malformed
        DuplicateError: If the handle (or name) is already taken
    """
    logger = get_logger()
    ensure_valid(validate_company_new(data))
    handle = data["handle"]

    if _exists(session, handle):
        logger.warning("Duplicate company", handle=handle)
        logger.record_failure(ENTITY, "DuplicateError")
        raise DuplicateError(f"Duplicate company: {handle}")

    values = [
        handle,
        data["name"],
        data["description"],
        data.get("numEmployees"),
        data.get("logoUrl"),
    ]
    try:
        result = session.execute(
            text(
                f"""INSERT INTO companies
                    (handle, name, description, num_employees, logo_url)
                    VALUES (:p1, :p2, :p3, :p4, :p5)
                    RETURNING {COMPANY_SELECT}"""
            ),
            bind_params(values),
        )
        company = dict(result.mappings().one())
        session.commit()
    except IntegrityError as e:
        session.rollback()
        logger.record_failure(ENTITY, "DuplicateError")
        raise DuplicateError(f"Duplicate company: {handle}") from e

    logger.record_query()
    logger.record_operation(ENTITY, "create")
    logger.debug("Created company", handle=handle)
    return company


def find_all(
    session: Session,
    name: Optional[str] = None,
    min_employees: Optional[int] = None,
    max_employees: Optional[int] = None,
) -> List[Dict[str, Any]]:
    """
    List companies ordered by name.

    Args:
        session: SQLAlchemy session
        name: Case-insensitive substring of the company name
        min_employees: Inclusive lower bound on num_employees
        max_employees: Inclusive upper bound on num_employees

    Returns:
        List of {handle, name, description, numEmployees, logoUrl}

    Raises:
        ValidationError: If min_employees > max_employees
    """
    spec = FilterSpec(text_match=name, min_bound=min_employees, max_bound=max_employees)
    where, values = build_filter_clause(spec, COMPANY_FILTER_COLUMNS)
    where_sql = f"WHERE {where}" if where else ""

    result = session.execute(
        text(
            f"""SELECT {COMPANY_SELECT}
                FROM companies
                {where_sql}
                ORDER BY name"""
        ),
        bind_params(values),
    )
    companies = [dict(row) for row in result.mappings().all()]

    logger = get_logger()
    logger.record_query()
    logger.record_operation(ENTITY, "list")
    logger.debug("Listed companies", filters=where or None, count=len(companies))
    return companies


def get(session: Session, handle: str) -> Dict[str, Any]:
    """
    Return a company with its jobs.

    Returns:
        {handle, name, description, numEmployees, logoUrl, jobs}
        where jobs is [{id, title, salary, equity}, ...]

    Raises:
        NotFoundError: If no such company
    """
    logger = get_logger()
    row = session.execute(
        text(
            f"""SELECT {COMPANY_SELECT}
                FROM companies
                WHERE handle = :p1"""
        ),
        bind_params([handle]),
    ).mappings().first()
    logger.record_query()

    if row is None:
        logger.warning("Company not found", handle=handle)
        logger.record_failure(ENTITY, "NotFoundError")
        raise NotFoundError(f"No company: {handle}")

    company = dict(row)
    jobs = session.execute(
        text(
            """SELECT id, title, salary, equity
               FROM jobs
               WHERE company_handle = :p1
               ORDER BY id"""
        ),
        bind_params([handle]),
    ).mappings().all()
    logger.record_query()

    company["jobs"] = [dict(job) for job in jobs]
    logger.record_operation(ENTITY, "get")
    return company


def update(session: Session, handle: str, data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Partially update a company: only the supplied fields change.

    Args:
        session: SQLAlchemy session
        handle: Company handle
        data: Any of {name, description, numEmployees, logoUrl}

    Returns:
        {handle, name, description, numEmployees, logoUrl}

    Raises:
        ValidationError: If data is empty or malformed (raised before any query)
        NotFoundError: If no such company
    """
    logger = get_logger()
    ensure_valid(validate_company_update(data))
    set_cols, values = sql_for_partial_update(data, COMPANY_COLUMNS)
    handle_idx = placeholder(len(values) + 1)

    result = session.execute(
        text(
            f"""UPDATE companies
                SET {set_cols}
                WHERE handle = {handle_idx}
                RETURNING {COMPANY_SELECT}"""
        ),
        bind_params(values + [handle]),
    )
    row = result.mappings().first()
    logger.record_query()

    if row is None:
        session.rollback()
        logger.warning("Company not found for update", handle=handle)
        logger.record_failure(ENTITY, "NotFoundError")
        raise NotFoundError(f"No company: {handle}")

    company = dict(row)
    session.commit()
    logger.record_operation(ENTITY, "update")
    logger.debug("Updated company", handle=handle, fields=list(data.keys()))
    return company


def remove(session: Session, handle: str) -> None:
    """
    Delete a company (and, by cascade, its jobs).

    Raises:
        NotFoundError: If no such company
    """
    logger = get_logger()
    row = session.execute(
        text(
            """DELETE
               FROM companies
               WHERE handle = :p1
               RETURNING handle"""
        ),
        bind_params([handle]),
    ).first()
    logger.record_query()

    if row is None:
        session.rollback()
        logger.warning("Company not found for delete", handle=handle)
        logger.record_failure(ENTITY, "NotFoundError")
        raise NotFoundError(f"No company: {handle}")

    session.commit()
    logger.record_operation(ENTITY, "remove")
    logger.debug("Removed company", handle=handle)

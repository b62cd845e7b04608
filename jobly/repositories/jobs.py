"""
Jobs Repository.

Responsibilities:
- CRUD operations for the jobs table.
- Filtered listing by title, salary range and equity.
- Transaction-safe writes.

Non-Responsibilities:
- No authorization.
- No HTTP concerns.

Invariant:
Repositories must not encode domain decisions beyond field validation.
"""

from typing import Any, Dict, List, Optional

from sqlalchemy import text
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..errors import NotFoundError
from ..logger import get_logger
from ..schema import ensure_valid, validate_job_new, validate_job_update
from ..sql import FilterColumns, FilterSpec, bind_params, build_filter_clause, placeholder, sql_for_partial_update
from .companies import COMPANY_SELECT

ENTITY = "job"

JOB_COLUMNS = {
    "companyHandle": "company_handle",
}

JOB_FILTER_COLUMNS = FilterColumns(text="title", bound="salary", presence="equity")

JOB_SELECT = 'id, title, salary, equity, company_handle AS "companyHandle"'


def create(session: Session, data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Create a job and return it.

    Args:
        session: SQLAlchemy session
        data: {title, salary?, equity?, companyHandle}

    Returns:
        {id, title, salary, equity, companyHandle}

    Raises:
        ValidationError: If data is malformed
        IntegrityError: If companyHandle names no company
    """
    logger = get_logger()
    ensure_valid(validate_job_new(data))
    values = [
        data["title"],
        data.get("salary"),
        data.get("equity"),
        data["companyHandle"],
    ]
    try:
        result = session.execute(
            text(
                f"""INSERT INTO jobs
                    (title, salary, equity, company_handle)
                    VALUES (:p1, :p2, :p3, :p4)
                    RETURNING {JOB_SELECT}"""
            ),
            bind_params(values),
        )
        job = dict(result.mappings().one())
        session.commit()
    except IntegrityError:
        session.rollback()
        logger.warning("Job rejected by storage", company=data["companyHandle"])
        logger.record_failure(ENTITY, "IntegrityError")
        raise

    logger.record_query()
    logger.record_operation(ENTITY, "create")
    logger.debug("Created job", id=job["id"], company=job["companyHandle"])
    return job


def find_all(
    session: Session,
    title: Optional[str] = None,
    min_salary: Optional[int] = None,
    max_salary: Optional[int] = None,
    has_equity: bool = False,
) -> List[Dict[str, Any]]:
    """
    List jobs ordered by title.

    Args:
        session: SQLAlchemy session
        title: Case-insensitive substring of the job title
        min_salary: Inclusive lower bound on salary
        max_salary: Inclusive upper bound on salary
        has_equity: Only jobs with non-zero equity

    Returns:
        List of {id, title, salary, equity, companyHandle}

    Raises:
        ValidationError: If min_salary > max_salary
    """
    spec = FilterSpec(
        text_match=title,
        min_bound=min_salary,
        max_bound=max_salary,
        presence_flag=has_equity,
    )
    where, values = build_filter_clause(spec, JOB_FILTER_COLUMNS)
    where_sql = f"WHERE {where}" if where else ""

    result = session.execute(
        text(
            f"""SELECT {JOB_SELECT}
                FROM jobs
                {where_sql}
                ORDER BY title, id"""
        ),
        bind_params(values),
    )
    jobs = [dict(row) for row in result.mappings().all()]

    logger = get_logger()
    logger.record_query()
    logger.record_operation(ENTITY, "list")
    logger.debug("Listed jobs", filters=where or None, count=len(jobs))
    return jobs


def get(session: Session, job_id: int) -> Dict[str, Any]:
    """
    Return a job with its company.

    Returns:
        {id, title, salary, equity, companyHandle, company}
        where company is {handle, name, description, numEmployees, logoUrl}

    Raises:
        NotFoundError: If no such job
    """
    logger = get_logger()
    row = session.execute(
        text(
            f"""SELECT {JOB_SELECT}
                FROM jobs
                WHERE id = :p1"""
        ),
        bind_params([job_id]),
    ).mappings().first()
    logger.record_query()

    if row is None:
        logger.warning("Job not found", id=job_id)
        logger.record_failure(ENTITY, "NotFoundError")
        raise NotFoundError(f"No job: {job_id}")

    job = dict(row)
    company = session.execute(
        text(
            f"""SELECT {COMPANY_SELECT}
                FROM companies
                WHERE handle = :p1"""
        ),
        bind_params([job["companyHandle"]]),
    ).mappings().one()
    logger.record_query()

    job["company"] = dict(company)
    logger.record_operation(ENTITY, "get")
    return job


def update(session: Session, job_id: int, data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Partially update a job: only the supplied fields change.

    Data can include: {title, salary, equity}

    Raises:
        ValidationError: If data is empty or malformed (raised before any query)
        NotFoundError: If no such job
    """
    logger = get_logger()
    ensure_valid(validate_job_update(data))
    set_cols, values = sql_for_partial_update(data, JOB_COLUMNS)
    id_idx = placeholder(len(values) + 1)

    result = session.execute(
        text(
            f"""UPDATE jobs
                SET {set_cols}
                WHERE id = {id_idx}
                RETURNING {JOB_SELECT}"""
        ),
        bind_params(values + [job_id]),
    )
    row = result.mappings().first()
    logger.record_query()

    if row is None:
        session.rollback()
        logger.warning("Job not found for update", id=job_id)
        logger.record_failure(ENTITY, "NotFoundError")
        raise NotFoundError(f"No job: {job_id}")

    job = dict(row)
    session.commit()
    logger.record_operation(ENTITY, "update")
    logger.debug("Updated job", id=job_id, fields=list(data.keys()))
    return job


def remove(session: Session, job_id: int) -> None:
    """Delete a job. Raises NotFoundError if no such job."""
    logger = get_logger()
    row = session.execute(
        text(
            """DELETE
               FROM jobs
               WHERE id = :p1
               RETURNING id"""
        ),
        bind_params([job_id]),
    ).first()
    logger.record_query()

    if row is None:
        session.rollback()
        logger.warning("Job not found for delete", id=job_id)
        logger.record_failure(ENTITY, "NotFoundError")
        raise NotFoundError(f"No job: {job_id}")

    session.commit()
    logger.record_operation(ENTITY, "remove")
    logger.debug("Removed job", id=job_id)

"""
Tests for payload and filter validation.
"""

import pytest

from jobly.errors import ValidationError
from jobly.schema import (
    coerce_company_filters,
    coerce_job_filters,
    ensure_valid,
    validate_company_new,
    validate_company_update,
    validate_job_new,
    validate_job_update,
)


class TestCompanyPayloads:
    """Test company create/update validation."""

    def test_valid_new_company(self, new_company):
        assert validate_company_new(new_company) == []

    def test_missing_required_field(self):
        errors = validate_company_new({"handle": "acme", "name": "Acme"})
        assert any("description" in err for err in errors)

    def test_empty_name(self):
        errors = validate_company_new({"handle": "acme", "name": "   ", "description": ""})
        assert any("name" in err for err in errors)

    def test_handle_too_long(self):
        errors = validate_company_new({"handle": "x" * 26, "name": "X", "description": ""})
        assert any("handle" in err and "length" in err for err in errors)

    def test_negative_employees(self, new_company):
        errors = validate_company_new({**new_company, "numEmployees": -5})
        assert any("numEmployees" in err for err in errors)

    def test_bool_is_not_an_integer(self, new_company):
        errors = validate_company_new({**new_company, "numEmployees": True})
        assert any("numEmployees" in err for err in errors)

    def test_invalid_logo_url(self, new_company):
        errors = validate_company_new({**new_company, "logoUrl": "not-a-url"})
        assert any("logoUrl" in err for err in errors)

    def test_unknown_field(self, new_company):
        errors = validate_company_new({**new_company, "ceo": "someone"})
        assert any("ceo" in err for err in errors)

    def test_update_allows_partial(self):
        assert validate_company_update({"description": "only this"}) == []

    def test_update_rejects_handle(self):
        errors = validate_company_update({"handle": "new-handle"})
        assert any("handle" in err for err in errors)

    def test_update_empty_is_not_a_schema_error(self):
        """Emptiness is rejected by the update builder, not the schema."""
        assert validate_company_update({}) == []


class TestJobPayloads:
    """Test job create/update validation."""

    def test_valid_new_job(self, new_job):
        assert validate_job_new(new_job) == []

    def test_missing_company(self):
        errors = validate_job_new({"title": "new", "salary": 1})
        assert any("companyHandle" in err for err in errors)

    def test_salary_not_a_number(self, new_job):
        errors = validate_job_new({**new_job, "salary": "not-a-salary"})
        assert any("salary" in err for err in errors)

    @pytest.mark.parametrize("equity", ["0.9", 0, 1, 0.25])
    def test_equity_accepted(self, new_job, equity):
        assert validate_job_new({**new_job, "equity": equity}) == []

    @pytest.mark.parametrize("equity", ["1.5", -0.1, "lots", True])
    def test_equity_rejected(self, new_job, equity):
        errors = validate_job_new({**new_job, "equity": equity})
        assert any("equity" in err for err in errors)

    def test_update_rejects_id(self):
        errors = validate_job_update({"id": 989})
        assert any("id" in err for err in errors)

    def test_update_rejects_company_handle(self):
        errors = validate_job_update({"companyHandle": "c2"})
        assert any("companyHandle" in err for err in errors)


class TestFilterCoercion:
    """Test search query validation and coercion."""

    def test_company_filters_coerced(self):
        filters = coerce_company_filters({"name": "c", "minEmployees": "2", "maxEmployees": 3})
        assert filters == {"name": "c", "min_employees": 2, "max_employees": 3}

    def test_company_filters_default(self):
        assert coerce_company_filters({}) == {
            "name": None,
            "min_employees": None,
            "max_employees": None,
        }

    def test_company_unknown_filter(self):
        with pytest.raises(ValidationError):
            coerce_company_filters({"huh": "what"})

    def test_company_non_numeric_bound(self):
        with pytest.raises(ValidationError):
            coerce_company_filters({"minEmployees": "lots"})

    def test_job_filters_coerced(self):
        filters = coerce_job_filters({"title": "eng", "minSalary": "200", "hasEquity": "true"})
        assert filters == {
            "title": "eng",
            "min_salary": 200,
            "max_salary": None,
            "has_equity": True,
        }

    def test_job_has_equity_false(self):
        assert coerce_job_filters({"hasEquity": "false"})["has_equity"] is False

    def test_job_bad_has_equity(self):
        with pytest.raises(ValidationError):
            coerce_job_filters({"hasEquity": "maybe"})

    def test_job_unknown_filter(self):
        with pytest.raises(ValidationError):
            coerce_job_filters({"huh": "what"})


class TestEnsureValid:
    """Test error aggregation."""

    def test_no_errors(self):
        ensure_valid([])

    def test_errors_raise(self):
        with pytest.raises(ValidationError) as exc:
            ensure_valid(["a is bad", "b is bad"])
        assert exc.value.errors == ["a is bad", "b is bad"]
        assert exc.value.status_code == 400
        assert "a is bad" in exc.value.message

from __future__ import annotations

import pytest

from placement_portal.core.errors import NotFoundError, ValidationError
from placement_portal.schemas.schemas import CompanyCreate, UserRole


def test_create_defaults_arrays_and_attaches_creator(companies, tpo):
    company = companies.create(
        {"company_name": "Infosys", "role": "Systems Engineer", "package": 6.5, "min_cgpa": 6.5},
        created_by=tpo["id"],
    )

    assert company["eligible_branches"] == []
    assert company["required_skills"] == []
    assert company["rounds"] == []
    assert company["description"] == ""
    assert company["created_by"] == {"id": tpo["id"], "name": "Placement Officer", "email": "tpo@example.com"}


def test_create_from_schema_stores_plain_values(companies, tpo, store):
    data = CompanyCreate(
        company_name="Google",
        role="SWE",
        package=24,
        min_cgpa=8,
        eligible_branches=["CSE", "ECE"],
        rounds=[{"name": "OA", "type": "Coding"}, {"name": "GD", "type": "Group Discussion"}],
    )
    company = companies.create(data.model_dump(), created_by=tpo["id"])

    raw = store.companies.find_one()
    assert raw["eligible_branches"] == ["CSE", "ECE"]
    assert raw["rounds"] == [{"name": "OA", "type": "Coding"}, {"name": "GD", "type": "Group Discussion"}]
    assert company["rounds"][1]["type"] == "Group Discussion"


def test_create_requires_fields(companies, tpo):
    with pytest.raises(ValidationError):
        companies.create({"company_name": "X", "role": "Y", "package": 5}, created_by=tpo["id"])


def test_create_rejects_negative_package(companies, tpo):
    with pytest.raises(ValidationError):
        companies.create(
            {"company_name": "X", "role": "Y", "package": -1, "min_cgpa": 5}, created_by=tpo["id"]
        )


def test_create_requires_existing_creator(companies):
    with pytest.raises(ValidationError):
        companies.create(
            {"company_name": "X", "role": "Y", "package": 1, "min_cgpa": 5},
            created_by="64b7f0c2a1b2c3d4e5f60718",
        )


def test_student_sees_only_eligible_listings(companies, make_company, make_user):
    make_company(company_name="Open", min_cgpa=6.0, eligible_branches=["CSE", "ECE"])
    make_company(company_name="TooHigh", min_cgpa=9.0, eligible_branches=["CSE"])
    make_company(company_name="WrongBranch", min_cgpa=5.0, eligible_branches=["ME"])
    make_company(company_name="Exact", min_cgpa=7.5, eligible_branches=["CSE"])

    student = make_user(branch="CSE", cgpa=7.5)
    tpo_view = companies.list_for({"role": UserRole.tpo.value})

    assert {c["company_name"] for c in companies.list_for(student)} == {"Open", "Exact"}
    assert len(tpo_view) == 4


def test_listings_newest_first(companies, make_company, admin):
    make_company(company_name="First")
    make_company(company_name="Second")

    names = [c["company_name"] for c in companies.list_for(admin)]
    assert names == ["Second", "First"]


def test_partial_update_keeps_other_fields(companies, make_company):
    company = make_company(location="Pune", required_skills=["SQL"])

    updated = companies.update(company["id"], {"package": 15, "location": None})

    assert updated["package"] == 15
    assert updated["location"] == "Pune"
    assert updated["required_skills"] == ["SQL"]
    assert updated["company_name"] == "Acme"


def test_update_delete_and_eligibility_on_missing_company(companies):
    missing = "64b7f0c2a1b2c3d4e5f60718"
    with pytest.raises(NotFoundError):
        companies.get(missing)
    with pytest.raises(NotFoundError):
        companies.update(missing, {"package": 1})
    with pytest.raises(NotFoundError):
        companies.delete(missing)
    with pytest.raises(NotFoundError):
        companies.eligible_students(missing)


def test_delete_company(companies, make_company):
    company = make_company()
    companies.delete(company["id"])

    with pytest.raises(NotFoundError):
        companies.get(company["id"])


def test_eligible_students(companies, make_company, make_user, tpo):
    company = make_company(min_cgpa=8.0, eligible_branches=["CSE", "IT"])
    make_user(name="Ok CSE", branch="CSE", cgpa=8.0)
    make_user(name="Ok IT", branch="IT", cgpa=9.2)
    make_user(name="Low", branch="CSE", cgpa=7.9)
    make_user(name="ECE", branch="ECE", cgpa=9.9)

    eligible = companies.eligible_students(company["id"])

    assert {s["name"] for s in eligible} == {"Ok CSE", "Ok IT"}
    assert all("password" not in s for s in eligible)

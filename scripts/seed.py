#!/usr/bin/env python3
"""
Seed Script

Wipes the users/companies/applications collections and loads demo data:
an admin, a TPO, a demo student, more students across branches, a set of
company listings and a few applications.

Usage: python scripts/seed.py
"""
import sys
sys.path.insert(0, '.')

from datetime import datetime

from placement_portal.core.config import get_settings
from placement_portal.core.logging import configure_logging
from placement_portal.db.mongodb import MongoStore
from placement_portal.schemas.schemas import ApplicationStatus, UserRole
from placement_portal.services import AccountService, ApplicationService, CompanyService


DEMO_PASSWORD = "demo123"
STUDENT_PASSWORD = "Student@123"

STUDENTS = [
    {"name": "Alice Johnson", "email": "alice@student.com", "branch": "CSE", "cgpa": 8.5,
     "skills": ["JavaScript", "React", "Node.js", "MongoDB"]},
    {"name": "Bob Smith", "email": "bob@student.com", "branch": "ECE", "cgpa": 7.8,
     "skills": ["Python", "Machine Learning", "Arduino"]},
    {"name": "Charlie Brown", "email": "charlie@student.com", "branch": "CSE", "cgpa": 9.1,
     "skills": ["Java", "Spring Boot", "MySQL", "Docker"]},
    {"name": "Diana Prince", "email": "diana@student.com", "branch": "IT", "cgpa": 7.2,
     "skills": ["HTML", "CSS", "Angular", "TypeScript"]},
    {"name": "Ethan Hunt", "email": "ethan@student.com", "branch": "ME", "cgpa": 6.9,
     "skills": ["AutoCAD", "SolidWorks", "MATLAB"]},
    {"name": "Priya Sharma", "email": "priya@student.com", "branch": "IT", "cgpa": 8.8,
     "skills": ["Python", "Django", "PostgreSQL"]},
    {"name": "Rahul Verma", "email": "rahul@student.com", "branch": "ECE", "cgpa": 7.5,
     "skills": ["Embedded C", "VLSI", "MATLAB"]},
]

COMPANIES = [
    {
        "company_name": "Google India", "role": "Software Engineer", "package": 24,
        "description": "Join Google's engineering team to build products used by billions.",
        "location": "Bangalore", "min_cgpa": 8.0, "eligible_branches": ["CSE", "IT", "ECE"],
        "required_skills": ["Data Structures", "Algorithms", "JavaScript"],
        "rounds": [
            {"name": "Online Test", "type": "Aptitude"},
            {"name": "Technical Round 1", "type": "Technical"},
            {"name": "Technical Round 2", "type": "Technical"},
            {"name": "HR Round", "type": "HR"},
        ],
        "application_deadline": datetime(2026, 3, 31),
    },
    {
        "company_name": "Infosys", "role": "Systems Engineer", "package": 6.5,
        "description": "Entry-level engineering role with comprehensive training program.",
        "location": "Pune", "min_cgpa": 6.5, "eligible_branches": ["CSE", "IT", "ECE", "EEE", "ME"],
        "required_skills": ["Programming Basics", "Communication"],
        "rounds": [
            {"name": "Aptitude Test", "type": "Aptitude"},
            {"name": "Technical Interview", "type": "Technical"},
            {"name": "HR Interview", "type": "HR"},
        ],
    },
    {
        "company_name": "Texas Instruments", "role": "Analog Design Engineer", "package": 18,
        "description": "Design analog and mixed-signal circuits.",
        "location": "Bangalore", "min_cgpa": 7.5, "eligible_branches": ["ECE", "EEE"],
        "required_skills": ["VLSI", "Analog Circuits"],
        "rounds": [
            {"name": "Written Test", "type": "Aptitude"},
            {"name": "Technical Panel", "type": "Technical"},
        ],
    },
    {
        "company_name": "Tata Motors", "role": "Graduate Engineer Trainee", "package": 7,
        "description": "Rotational programme across manufacturing plants.",
        "location": "Pune", "min_cgpa": 6.0, "eligible_branches": ["ME", "EEE", "CE"],
        "required_skills": ["AutoCAD"],
        "rounds": [
            {"name": "Group Discussion", "type": "Group Discussion"},
            {"name": "Interview", "type": "HR"},
        ],
    },
    {
        "company_name": "Razorpay", "role": "Backend Engineer", "package": 16,
        "description": "Build payment infrastructure at scale.",
        "location": "Bangalore", "min_cgpa": 7.0, "eligible_branches": ["CSE", "IT"],
        "required_skills": ["Python", "SQL", "System Design"],
        "rounds": [
            {"name": "Coding Round", "type": "Coding"},
            {"name": "System Design", "type": "Technical"},
            {"name": "Culture Fit", "type": "HR"},
        ],
    },
]


def main():
    settings = get_settings()
    configure_logging(settings.log_level)
    store = MongoStore(settings.mongodb_uri, settings.mongodb_db).open()

    print("=" * 50)
    print("PLACEMENT PORTAL - SEED")
    print("=" * 50)

    store.drop_all()
    store.init_indexes()
    print("Cleared existing data")

    accounts = AccountService(store)
    companies = CompanyService(store)
    applications = ApplicationService(store)

    accounts.create("Admin User", "admin@demo.com", DEMO_PASSWORD, role=UserRole.admin, cgpa=10)
    tpo = accounts.create("Dr. Rajesh Kumar", "tpo@demo.com", DEMO_PASSWORD, role=UserRole.tpo, cgpa=10)
    demo = accounts.create(
        "Demo Student", "student@demo.com", DEMO_PASSWORD,
        branch="CSE", cgpa=8.2, skills=["JavaScript", "React", "Node.js"],
    )
    students = {s["email"]: accounts.create(password=STUDENT_PASSWORD, **s) for s in STUDENTS}
    print(f"Created {len(students) + 3} users (admin, tpo, {len(students) + 1} students)")

    created = {c["company_name"]: companies.create(c, created_by=tpo["id"]) for c in COMPANIES}
    print(f"Created {len(created)} companies")

    google, infosys, razorpay = created["Google India"], created["Infosys"], created["Razorpay"]
    applications.apply(demo, infosys["id"])
    applications.apply(students["alice@student.com"], google["id"])
    applications.apply(students["priya@student.com"], razorpay["id"])

    charlie_app = applications.apply(students["charlie@student.com"], google["id"])
    applications.update_status(charlie_app["id"], ApplicationStatus.selected, current_round="HR Round",
                               remarks="Offer extended")

    bob_app = applications.apply(students["bob@student.com"], infosys["id"])
    applications.update_status(bob_app["id"], ApplicationStatus.technical, current_round="Technical Interview")
    print("Created demo applications")

    print("\nLogin with:")
    print(f"  admin@demo.com / {DEMO_PASSWORD}")
    print(f"  tpo@demo.com / {DEMO_PASSWORD}")
    print(f"  student@demo.com / {DEMO_PASSWORD}")

    store.close()


if __name__ == "__main__":
    main()

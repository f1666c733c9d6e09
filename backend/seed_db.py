"""
TalentHub Database Seeder

Creates demo accounts and postings:
- One employer (Acme Labs) with three job postings
- Two job seekers, one of whom has applied to a posting
"""

import sys
sys.path.insert(0, ".")

from datetime import datetime, timedelta

from app.db.session import SessionLocal, engine
from app.db.base import Base
from app.models.user import User
from app.models.job import Job, Application


def seed_database():
    """Seed the database with demo data."""

    # Create all tables
    Base.metadata.create_all(bind=engine)

    db = SessionLocal()

    try:
        # Check if already seeded
        existing_employer = db.query(User).filter(User.email == "hiring@acmelabs.com").first()
        if existing_employer:
            print("Database already seeded. Skipping...")
            return

        print("Seeding database...")

        # 1. Create Employer User
        employer = User(
            name="Priya Sharma",
            email="hiring@acmelabs.com",
            role="employer",
            company={
                "name": "Acme Labs",
                "description": "Developer tooling for data teams",
                "website": "https://acmelabs.example.com",
                "location": "Bengaluru",
            },
        )
        employer.set_password("employer123")
        db.add(employer)

        # 2. Create Job Seekers
        arjun = User(
            name="Arjun Mehta",
            email="arjun.mehta@example.com",
            role="jobseeker",
            profile={
                "skills": ["Python", "FastAPI", "PostgreSQL"],
                "experience": "3 years",
                "education": "B.Tech Computer Science, IIT Delhi",
                "phone": "+91 98765 43210",
                "location": "Pune",
            },
        )
        arjun.set_password("jobseeker123")
        db.add(arjun)

        neha = User(
            name="Neha Kapoor",
            email="neha.kapoor@example.com",
            role="jobseeker",
            profile={
                "skills": ["React", "TypeScript"],
                "experience": "1 year",
                "location": "Mumbai",
            },
        )
        neha.set_password("jobseeker123")
        db.add(neha)
        db.flush()  # Get IDs

        # 3. Create Job Postings
        backend_job = Job(
            title="Backend Engineer",
            company="Acme Labs",
            description="Build and operate the REST APIs behind our data platform.",
            requirements="3+ years of Python, experience with SQL databases.",
            salary_min=1200000,
            salary_max=1800000,
            location="Remote",
            type="full-time",
            category="Technology",
            skills=["Python", "FastAPI", "SQL"],
            experience="mid",
            remote=True,
            employer_id=employer.id,
            deadline=datetime.utcnow() + timedelta(days=30),
        )
        frontend_job = Job(
            title="Frontend Developer",
            company="Acme Labs",
            description="Own the single-page app used by our customers.",
            requirements="Solid React and TypeScript skills.",
            salary_min=900000,
            salary_max=1400000,
            location="Bengaluru",
            type="full-time",
            category="Technology",
            skills=["React", "TypeScript", "CSS"],
            experience="entry",
            employer_id=employer.id,
        )
        marketing_job = Job(
            title="Marketing Intern",
            company="Acme Labs",
            description="Help us tell developers about our products.",
            requirements="Strong writing skills.",
            location="Bengaluru",
            type="internship",
            category="Marketing",
            employer_id=employer.id,
        )
        db.add_all([backend_job, frontend_job, marketing_job])
        db.flush()

        # 4. Arjun applies to the backend role
        backend_job.applications.append(
            Application(
                applicant_id=arjun.id,
                cover_letter="I have built FastAPI services in production for three years.",
                status="reviewed",
            )
        )

        # Commit all changes
        db.commit()

        print("✅ Database seeded successfully!")
        print("\n📋 Created Users:")
        print("   - hiring@acmelabs.com (password: employer123) [EMPLOYER]")
        print("   - arjun.mehta@example.com (password: jobseeker123)")
        print("   - neha.kapoor@example.com (password: jobseeker123)")
        print("\n💼 Created 3 job postings, 1 application")

    except Exception as e:
        db.rollback()
        print(f"❌ Error seeding database: {e}")
        raise
    finally:
        db.close()


if __name__ == "__main__":
    seed_database()

"""
Pharminc Database Seeder

Creates demo accounts and data:
- Institute "City General Hospital" with one active job
- User Dr. Jane Doe (DOCTOR, cardiology)
- A handful of specialties
"""

import sys
sys.path.insert(0, ".")

from pharminc.db.session import SessionLocal, engine
from pharminc.db.base import Base
from pharminc.models import Auth, Institute, Job, User
from pharminc.core.security import get_password_hash
from pharminc.services.specialties import upsert_specialties

SPECIALTIES = ["cardiology", "neurology", "pediatrics", "oncology", "emergency medicine"]


def seed_database():
    """Seed the database with demo data."""

    # Create all tables
    Base.metadata.create_all(bind=engine)

    db = SessionLocal()

    try:
        # Check if already seeded
        existing = db.query(Auth).filter(Auth.email == "hr@citygeneral.example").first()
        if existing:
            print("Database already seeded. Skipping...")
            return

        print("Seeding database...")

        specialties = upsert_specialties(db, SPECIALTIES)
        by_name = {s.name: s for s in specialties}

        # 1. Institute account + profile (same id)
        institute_auth = Auth(
            email="hr@citygeneral.example",
            password=get_password_hash("institute123"),
            role="INSTITUTE",
        )
        db.add(institute_auth)
        db.flush()  # Get IDs

        institute = Institute(
            id=institute_auth.id,
            name="City General Hospital",
            location="Mumbai",
            contact_email="hr@citygeneral.example",
            contact_number="+91-22-5550-1000",
            role="HOSPITAL",
            verified=True,
            headline="Multi-specialty tertiary care hospital",
            specialties=[by_name["cardiology"], by_name["emergency medicine"]],
        )
        db.add(institute)

        # 2. User account + profile
        user_auth = Auth(
            email="jane.doe@example.com",
            password=get_password_hash("doctor123"),
            role="USER",
        )
        db.add(user_auth)
        db.flush()

        user = User(
            id=user_auth.id,
            name="Jane Doe",
            location="Mumbai",
            specialty="cardiology",
            gender="Female",
            role="DOCTOR",
            headline="Interventional cardiologist",
            specialties=[by_name["cardiology"]],
        )
        db.add(user)

        # 3. One open job
        job = Job(
            institute_id=institute.id,
            title="Consultant Cardiologist",
            description="Lead the cardiac outpatient clinic and cath-lab rota.",
            short_description="Consultant role, cardiac sciences",
            job_type="Full-time",
            work_location="Onsite",
            experience_level="Senior",
            requirements="MD/DM Cardiology, 5+ years post-specialisation",
            salary_min=2400000,
            salary_max=3600000,
            salary_currency="INR",
            contact_person="HR Desk",
            contact_email="hr@citygeneral.example",
            specialties=[by_name["cardiology"]],
        )
        db.add(job)

        db.commit()

        print("Database seeded successfully!")
        print("  Institute: hr@citygeneral.example / institute123")
        print("  User:      jane.doe@example.com / doctor123")

    except Exception as e:
        print(f"Error seeding database: {e}")
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    seed_database()

"""
Seed script to populate database with test data for development/testing.
Run with: python scripts/seed_test_data.py
"""

import asyncio
import random
import sys
from datetime import date, datetime, timedelta, timezone
from pathlib import Path
from uuid import uuid4

# Add parent directory to path so we can import app
sys.path.insert(0, str(Path(__file__).parent.parent))

from faker import Faker
from sqlalchemy import func, select

from app.core.security import hash_password
from app.database import async_session_maker
from app.models.conversation import Conversation, ConversationParticipant
from app.models.like import Like
from app.models.match_preference import MatchPreference
from app.models.profile import Profile
from app.models.report import Report
from app.models.user import User
from app.schemas.report import ReportReason
from app.services.conversation_gate import ordered_pair
from app.services.profile_service import calculate_age, calculate_completeness, calculate_zodiac_sign

fake = Faker()

# Configuration
NUM_USERS = 100
NUM_LIKES = 250
NUM_REPORTS = 15
TEST_EMAIL_DOMAIN = "test.heartline.app"

STATES = ["Lagos", "Abuja", "Rivers", "Oyo", "Kano", "Enugu", "Kaduna", "Delta"]
RELIGIONS = ["Christian", "Muslim", "Traditional", "Other"]
EDUCATION = ["High School", "Bachelors", "Masters", "PhD"]
BODY_TYPES = ["Slim", "Average", "Athletic", "Curvy", "Heavy"]
GENOTYPES = ["AA", "AS", "SS", "AC"]
BLOOD_GROUPS = ["A+", "A-", "B+", "B-", "AB+", "O+", "O-"]
DRINKING = ["Never", "Socially", "Often"]
WORK_STATUSES = ["Employed", "Self-employed", "Student", "Unemployed"]


async def seed_users(db) -> list[User]:
    """Create test users with various statuses."""
    users = []

    # Password for all test users (for easy login during testing)
    test_password_hash = hash_password("Test1234!")
    statuses = ["active"] * 8 + ["suspended", "banned"]

    print(f"Creating {NUM_USERS} test users...")

    for i in range(NUM_USERS):
        user = User(
            id=uuid4(),
            email=f"user{i+1}@{TEST_EMAIL_DOMAIN}",
            password_hash=test_password_hash,
            status=random.choice(statuses),
            email_verified=random.choice([True, True, True, False]),
            is_online=random.random() < 0.2,
            last_active_at=datetime.now(timezone.utc) - timedelta(hours=random.randint(1, 720)),
        )
        db.add(user)
        users.append(user)

    await db.flush()
    print(f"  Created {len(users)} users")
    return users


async def seed_profiles(db, users: list[User]) -> list[Profile]:
    """Create profiles with alternating genders."""
    profiles = []

    print(f"Creating profiles for {len(users)} users...")

    for i, user in enumerate(users):
        gender = "male" if i % 2 == 0 else "female"
        first_name = fake.first_name_male() if gender == "male" else fake.first_name_female()
        birth_date = date.today() - timedelta(days=random.randint(18, 50) * 365 + random.randint(0, 364))

        profile = Profile(
            id=uuid4(),
            user_id=user.id,
            first_name=first_name,
            last_name=fake.last_name(),
            date_of_birth=birth_date,
            age=calculate_age(birth_date),
            gender=gender,
            zodiac_sign=calculate_zodiac_sign(birth_date),
            about_me=fake.paragraph(nb_sentences=3) if random.choice([True, False]) else None,
            city=fake.city(),
            state=random.choice(STATES),
            country="Nigeria",
            religion=random.choice(RELIGIONS),
            education=random.choice(EDUCATION),
            work_status=random.choice(WORK_STATUSES),
            height=f"{random.randint(150, 195)}cm",
            body_type=random.choice(BODY_TYPES),
            has_tattoos=random.random() < 0.2,
            has_piercings=random.random() < 0.3,
            genotype=random.choice(GENOTYPES),
            blood_group=random.choice(BLOOD_GROUPS),
            drinking_status=random.choice(DRINKING),
            is_active=random.choice([True, True, True, False]),
        )
        profile.profile_completeness = calculate_completeness(profile)
        db.add(profile)
        profiles.append(profile)

    await db.flush()
    print(f"  Created {len(profiles)} profiles")
    return profiles


async def seed_preferences(db, users: list[User]) -> int:
    """Give roughly half the users match preferences."""
    count = 0
    for user in random.sample(users, len(users) // 2):
        age_min = random.randint(18, 35)
        db.add(
            MatchPreference(
                user_id=user.id,
                age_min=age_min,
                age_max=age_min + random.randint(5, 20),
                age_is_deal_breaker=random.random() < 0.3,
                religion=random.sample(RELIGIONS, random.randint(0, 2)),
                religion_is_deal_breaker=random.random() < 0.3,
                genotype=random.sample(GENOTYPES, random.randint(0, 2)),
                genotype_is_deal_breaker=random.random() < 0.2,
                location_states=random.sample(STATES, random.randint(0, 3)),
            )
        )
        count += 1

    await db.flush()
    print(f"  Created {count} preference sets")
    return count


async def seed_likes(db, users: list[User]) -> tuple[int, int]:
    """Random likes; reciprocated pairs become mutual matches with a conversation."""
    edges: set[tuple] = set()
    while len(edges) < NUM_LIKES:
        liker, liked = random.sample(users, 2)
        edges.add((liker.id, liked.id))

    mutual_pairs = {ordered_pair(a, b) for a, b in edges if (b, a) in edges}
    for liker_id, liked_id in edges:
        db.add(
            Like(
                liker_id=liker_id,
                liked_user_id=liked_id,
                is_mutual=ordered_pair(liker_id, liked_id) in mutual_pairs,
            )
        )

    for user_a_id, user_b_id in mutual_pairs:
        conversation = Conversation(id=uuid4(), user_a_id=user_a_id, user_b_id=user_b_id)
        db.add(conversation)
        db.add(ConversationParticipant(conversation_id=conversation.id, user_id=user_a_id))
        db.add(ConversationParticipant(conversation_id=conversation.id, user_id=user_b_id))

    await db.flush()
    print(f"  Created {len(edges)} likes, {len(mutual_pairs)} mutual matches")
    return len(edges), len(mutual_pairs)


async def seed_reports(db, users: list[User]) -> list[Report]:
    """Create reports between active users."""
    reports = []
    active_users = [u for u in users if u.status == "active"]

    if len(active_users) < 2:
        print("  Not enough active users for reports")
        return reports

    reasons = [reason.value for reason in ReportReason]
    statuses = ["pending", "pending", "pending", "reviewed", "dismissed", "action_taken"]

    print(f"Creating {NUM_REPORTS} reports...")

    for _ in range(NUM_REPORTS):
        reporter, reported = random.sample(active_users, 2)
        report = Report(
            reporter_user_id=reporter.id,
            reported_user_id=reported.id,
            reason=random.choice(reasons),
            description=fake.paragraph(nb_sentences=2) if random.choice([True, False]) else None,
            status=random.choice(statuses),
        )
        db.add(report)
        reports.append(report)

    await db.flush()
    print(f"  Created {len(reports)} reports")
    return reports


async def main():
    print("=" * 50)
    print("Seeding test data for Heartline")
    print("=" * 50)

    async with async_session_maker() as db:
        count_result = await db.execute(
            select(func.count(User.id)).where(User.email.like(f"%@{TEST_EMAIL_DOMAIN}"))
        )
        existing_count = count_result.scalar() or 0

        if existing_count > 0:
            print(f"\nFound {existing_count} existing test users.")
            response = input("Do you want to add more test data? (y/n): ")
            if response.lower() != "y":
                print("Aborted.")
                return

        try:
            users = await seed_users(db)
            profiles = await seed_profiles(db, users)
            await seed_preferences(db, users)
            likes, matches = await seed_likes(db, users)
            reports = await seed_reports(db, users)
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        print("\n" + "=" * 50)
        print("Summary:")
        print("=" * 50)
        print(f"  Users created: {len(users)}")
        print(f"    - Active: {len([u for u in users if u.status == 'active'])}")
        print(f"    - Suspended: {len([u for u in users if u.status == 'suspended'])}")
        print(f"    - Banned: {len([u for u in users if u.status == 'banned'])}")
        print(f"  Profiles created: {len(profiles)}")
        print(f"  Likes created: {likes} ({matches} mutual matches)")
        print(f"  Reports created: {len(reports)}")
        print("\nTest user login:")
        print(f"  Email: user1@{TEST_EMAIL_DOMAIN}")
        print("  Password: Test1234!")
        print("=" * 50)


if __name__ == "__main__":
    asyncio.run(main())

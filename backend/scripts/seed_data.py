"""Seed the database with sample Lagos and Abuja shortlet data.

Bookings are created through ``booking_service`` so they are checked for
availability and priced by the booking engine exactly like API bookings,
then moved along their lifecycle.

Run inside Docker:
    docker compose exec backend python -m scripts.seed_data
"""

import asyncio
import sys
from datetime import date, timedelta
from decimal import Decimal
from pathlib import Path

# Add backend to path so imports work when run as a script
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from sqlalchemy import delete

from app.database import async_session_factory, create_tables, engine
from app.models.booking import Booking
from app.models.communication import GuestMessage, MessageAutomation, MessageTemplate
from app.models.guest import Guest
from app.models.maintenance import MaintenanceLog
from app.models.property import Property
from app.models.team import TeamMember, TeamTask
from app.schemas.booking import BookingCreate
from app.schemas.maintenance import MaintenanceLogCreate
from app.services import booking_service, maintenance_service

# ---------------------------------------------------------------------------
# Seed data definitions
# ---------------------------------------------------------------------------

PROPERTIES = [
    {
        "name": "Lekki Phase 1 Studio",
        "description": "Compact serviced studio a short walk from Admiralty Way. 24/7 power and fibre internet.",
        "property_type": "studio",
        "location": "Lekki Phase 1",
        "city": "Lagos",
        "state": "Lagos",
        "bedrooms": 1,
        "bathrooms": 1,
        "max_guests": 2,
        "base_rate": Decimal("45000.00"),
        "weekend_rate": Decimal("55000.00"),
        "weekly_rate": Decimal("280000.00"),
        "cleaning_fee": Decimal("5000.00"),
        "amenities": ["wifi", "ac", "inverter", "smart_tv"],
    },
    {
        "name": "Ikoyi Waterfront Apartment",
        "description": "Two-bedroom apartment overlooking the lagoon, with pool and gym access.",
        "property_type": "apartment",
        "location": "Ikoyi",
        "city": "Lagos",
        "state": "Lagos",
        "bedrooms": 2,
        "bathrooms": 2,
        "max_guests": 4,
        "base_rate": Decimal("65000.00"),
        "weekend_rate": Decimal("80000.00"),
        "weekly_rate": Decimal("400000.00"),
        "monthly_rate": Decimal("1500000.00"),
        "cleaning_fee": Decimal("5000.00"),
        "security_deposit": Decimal("50000.00"),
        "amenities": ["wifi", "ac", "pool", "gym", "parking"],
        "min_stay": 2,
    },
    {
        "name": "Victoria Island Penthouse",
        "description": "Three-bedroom penthouse with rooftop terrace for events and long stays.",
        "property_type": "penthouse",
        "location": "Victoria Island",
        "city": "Lagos",
        "state": "Lagos",
        "bedrooms": 3,
        "bathrooms": 4,
        "max_guests": 6,
        "base_rate": Decimal("150000.00"),
        "weekend_rate": Decimal("180000.00"),
        "monthly_rate": Decimal("3600000.00"),
        "cleaning_fee": Decimal("15000.00"),
        "security_deposit": Decimal("200000.00"),
        "amenities": ["wifi", "ac", "rooftop", "parking", "security"],
        "rules": "No parties without prior approval.",
    },
    {
        "name": "Maitama Family House",
        "description": "Quiet four-bedroom house with garden in Maitama, Abuja.",
        "property_type": "house",
        "location": "Maitama",
        "city": "Abuja",
        "state": "FCT",
        "bedrooms": 4,
        "bathrooms": 3,
        "max_guests": 8,
        "base_rate": Decimal("120000.00"),
        "weekly_rate": Decimal("750000.00"),
        "cleaning_fee": Decimal("10000.00"),
        "amenities": ["wifi", "ac", "garden", "parking", "generator"],
    },
]

GUESTS = [
    {"name": "Chidinma Okafor", "email": "chidinma.okafor@gmail.com", "phone": "+2348031234567"},
    {"name": "Tunde Bakare", "email": "tunde.bakare@yahoo.com", "phone": "+2348059876543"},
    {"name": "Aisha Bello", "email": "aisha.bello@outlook.com", "phone": "+2348091112233"},
    {"name": "Emeka Nwosu", "email": "emeka.nwosu@gmail.com", "phone": "+2347064445566"},
    {"name": "Funke Adeyemi", "email": "funke.adeyemi@gmail.com", "phone": "+2348127778899"},
    {"name": "Kwame Mensah", "email": "kwame.mensah@gmail.com", "phone": "+233244556677"},
]

TEAM = [
    {"name": "Blessing Udo", "email": "blessing.udo@shortletops.ng", "phone": "+2348034567890", "role": "Property Manager"},
    {"name": "Musa Ibrahim", "email": "musa.ibrahim@shortletops.ng", "phone": "+2348065432109", "role": "Maintenance"},
    {"name": "Grace Eze", "email": "grace.eze@shortletops.ng", "phone": "+2348087654321", "role": "Cleaner"},
]

TEMPLATES = [
    {
        "name": "Booking confirmed",
        "subject": "Your booking is confirmed",
        "message": "Hi {{guest_name}}, your stay from {{check_in}} to {{check_out}} is confirmed.",
        "category": "booking_confirmation",
        "trigger": "booking_confirmed",
    },
    {
        "name": "Check-in instructions",
        "subject": "Getting to your shortlet",
        "message": "Check-in is from 14:00. The caretaker will meet you at the gate.",
        "category": "check_in",
        "trigger": "check_in_24h",
    },
]


def _build_bookings(properties: dict[str, Property], today: date) -> list[dict]:
    """Bookings spread across past, present, and future.

    ``steps`` lists the lifecycle transitions applied after creation. Past
    stays are created first so they never collide with later ones.
    """
    return [
        {
            "property": properties["Lekki Phase 1 Studio"],
            "guest": GUESTS[0],
            "check_in": today - timedelta(days=20),
            "nights": 3,
            "guests": 2,
            "steps": ["confirm", "check_in", "check_out"],
        },
        {
            "property": properties["Lekki Phase 1 Studio"],
            "guest": GUESTS[1],
            "check_in": today + timedelta(days=7),
            "nights": 8,
            "guests": 1,
            "steps": ["confirm"],
        },
        {
            "property": properties["Ikoyi Waterfront Apartment"],
            "guest": GUESTS[2],
            "check_in": today - timedelta(days=2),
            "nights": 5,
            "guests": 3,
            "steps": ["confirm", "check_in"],
        },
        {
            "property": properties["Ikoyi Waterfront Apartment"],
            "guest": GUESTS[3],
            "check_in": today + timedelta(days=14),
            "nights": 35,
            "guests": 2,
            "steps": [],
        },
        {
            "property": properties["Victoria Island Penthouse"],
            "guest": GUESTS[4],
            "check_in": today + timedelta(days=3),
            "nights": 2,
            "guests": 6,
            "steps": ["cancel"],
        },
        {
            "property": properties["Maitama Family House"],
            "guest": GUESTS[5],
            "check_in": today + timedelta(days=1),
            "nights": 10,
            "guests": 5,
            "steps": ["confirm"],
        },
    ]


# ---------------------------------------------------------------------------
# Main seed function
# ---------------------------------------------------------------------------


async def seed() -> None:
    """Populate the database with sample shortlet data.

    Idempotent: wipes every table before re-seeding to ensure a clean state.
    """
    await create_tables()

    async with async_session_factory() as session:
        for model in (
            GuestMessage,
            MessageAutomation,
            MessageTemplate,
            TeamTask,
            MaintenanceLog,
            TeamMember,
            Booking,
            Guest,
            Property,
        ):
            await session.execute(delete(model))
        await session.flush()

        created: dict[str, Property] = {}
        for prop_data in PROPERTIES:
            prop = Property(**prop_data)
            session.add(prop)
            await session.flush()
            created[prop.name] = prop
            print(f"   🏠 {prop.name}, {prop.location}, {prop.city} (₦{prop.base_rate}/night)")

        transitions = {
            "confirm": booking_service.confirm_booking,
            "check_in": booking_service.check_in_booking,
            "check_out": booking_service.check_out_booking,
            "cancel": booking_service.cancel_booking,
        }
        booking_count = 0
        for bdata in _build_bookings(created, date.today()):
            guest = bdata["guest"]
            booking = await booking_service.create_booking(
                session,
                BookingCreate(
                    property_id=bdata["property"].id,
                    guest_name=guest["name"],
                    guest_email=guest["email"],
                    guest_phone=guest["phone"],
                    check_in=bdata["check_in"],
                    check_out=bdata["check_in"] + timedelta(days=bdata["nights"]),
                    number_of_guests=bdata["guests"],
                ),
            )
            for step in bdata["steps"]:
                booking = await transitions[step](session, booking.id)
            booking_count += 1
            print(f"   📅 {guest['name']}: {booking.number_of_nights} nights, ₦{booking.total_amount} ({booking.status})")

        members: dict[str, TeamMember] = {}
        for member_data in TEAM:
            member = TeamMember(**member_data, assigned_properties=[str(p.id) for p in created.values()])
            session.add(member)
            members[member.role] = member
        await session.flush()
        print(f"   👷 {len(members)} team members")

        first_property = next(iter(created.values()))
        await maintenance_service.create_log(
            session,
            MaintenanceLogCreate(
                property_id=first_property.id,
                title="Service the inverter batteries",
                category="electrical",
                priority="high",
                status="in_progress",
                assigned_to=members["Maintenance"].id,
                cost=Decimal("35000.00"),
            ),
        )
        session.add(
            TeamTask(
                title="Turnover clean",
                property_id=first_property.id,
                assigned_to=members["Cleaner"].id,
                priority="high",
                due_date=date.today() + timedelta(days=1),
            )
        )

        for template_data in TEMPLATES:
            template = MessageTemplate(**{k: v for k, v in template_data.items() if k != "trigger"})
            template.automations.append(MessageAutomation(name=template.name, trigger=template_data["trigger"]))
            session.add(template)
        print(f"   ✉️  {len(TEMPLATES)} message templates")

        await session.commit()

    await engine.dispose()

    print()
    print("=" * 60)
    print("📊 Seed Summary")
    print("=" * 60)
    print(f"   Properties:    {len(created)}")
    print(f"   Guests:        {len(GUESTS)}")
    print(f"   Bookings:      {booking_count}")
    print(f"   Team members:  {len(TEAM)}")
    print(f"   Templates:     {len(TEMPLATES)}")
    print("=" * 60)


if __name__ == "__main__":
    asyncio.run(seed())

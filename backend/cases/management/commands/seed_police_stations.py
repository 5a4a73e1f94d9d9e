"""
Management command: seed_police_stations
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

Seeds the police-station directory that cases are filed with and that
police reviewers reference through ``police_station_code``.

The command is **idempotent**: stations are matched on ``code``;
existing rows are updated to match the table below, missing rows are
created, and rows not listed are left alone.

Usage::

    python manage.py seed_police_stations
    python manage.py seed_police_stations --city delhi --city mumbai
"""

from django.core.management.base import BaseCommand
from django.db import transaction

from cases.models import PoliceStation

# ────────────────────────────────────────────────────────────────────
# (code, name, city, address, phone, email)
# ────────────────────────────────────────────────────────────────────

STATIONS: list[tuple[str, str, str, str, str, str]] = [
    # ── Delhi ───────────────────────────────────────────────────────
    ("DEL-001", "Connaught Place", "Delhi", "Connaught Place, New Delhi", "+91-11-23341234", "cp.delhi@police.gov.in"),
    ("DEL-002", "Karol Bagh", "Delhi", "Karol Bagh, New Delhi", "+91-11-25753456", "kb.delhi@police.gov.in"),
    ("DEL-003", "Rohini", "Delhi", "Sector 7, Rohini, Delhi", "+91-11-27051234", "rohini.delhi@police.gov.in"),
    ("DEL-004", "Dwarka", "Delhi", "Sector 10, Dwarka, Delhi", "+91-11-25081234", "dwarka.delhi@police.gov.in"),
    # ── Maharashtra ─────────────────────────────────────────────────
    ("MUM-001", "Bandra", "Mumbai", "Bandra West, Mumbai", "+91-22-26421234", "bandra.mumbai@police.gov.in"),
    ("MUM-002", "Andheri", "Mumbai", "Andheri East, Mumbai", "+91-22-26851234", "andheri.mumbai@police.gov.in"),
    ("MUM-003", "Colaba", "Mumbai", "Colaba, Mumbai", "+91-22-22151234", "colaba.mumbai@police.gov.in"),
    ("PUN-001", "Pune City", "Pune", "FC Road, Pune", "+91-20-26051234", "pune.maharashtra@police.gov.in"),
    ("NAS-001", "Nashik Road", "Nashik", "Nashik Road, Nashik", "+91-253-2451234", "nashik.maharashtra@police.gov.in"),
    # ── Karnataka ───────────────────────────────────────────────────
    ("BLR-001", "Koramangala", "Bangalore", "Koramangala, Bangalore", "+91-80-25531234", "koramangala.bangalore@police.gov.in"),
    ("BLR-002", "Whitefield", "Bangalore", "Whitefield, Bangalore", "+91-80-28451234", "whitefield.bangalore@police.gov.in"),
    ("BLR-003", "MG Road", "Bangalore", "MG Road, Bangalore", "+91-80-25581234", "mgroad.bangalore@police.gov.in"),
    ("MYS-001", "Mysore Palace", "Mysore", "Mysore Palace Road, Mysore", "+91-821-2421234", "mysore.karnataka@police.gov.in"),
    # ── Tamil Nadu ──────────────────────────────────────────────────
    ("CHN-001", "T Nagar", "Chennai", "T Nagar, Chennai", "+91-44-24331234", "tnagar.chennai@police.gov.in"),
    ("CHN-002", "Anna Nagar", "Chennai", "Anna Nagar, Chennai", "+91-44-26151234", "annanagar.chennai@police.gov.in"),
    ("COI-001", "Coimbatore Town", "Coimbatore", "RS Puram, Coimbatore", "+91-422-2441234", "coimbatore.tamilnadu@police.gov.in"),
    # ── Telangana ───────────────────────────────────────────────────
    ("HYD-001", "Cyberabad", "Hyderabad", "Gachibowli, Hyderabad", "+91-40-27731234", "cyberabad.hyderabad@police.gov.in"),
    ("HYD-002", "Secunderabad", "Hyderabad", "SP Road, Secunderabad", "+91-40-27801234", "secunderabad.hyderabad@police.gov.in"),
    # ── West Bengal ─────────────────────────────────────────────────
    ("KOL-001", "Park Street", "Kolkata", "Park Street, Kolkata", "+91-33-22651234", "parkstreet.kolkata@police.gov.in"),
    ("KOL-002", "Salt Lake", "Kolkata", "Salt Lake City, Kolkata", "+91-33-23351234", "saltlake.kolkata@police.gov.in"),
    # ── Gujarat ─────────────────────────────────────────────────────
    ("AHM-001", "Ellis Bridge", "Ahmedabad", "Ellis Bridge, Ahmedabad", "+91-79-26581234", "ellisbridge.ahmedabad@police.gov.in"),
    ("SUR-001", "Surat City", "Surat", "Ring Road, Surat", "+91-261-2651234", "surat.gujarat@police.gov.in"),
    # ── Rajasthan ───────────────────────────────────────────────────
    ("JAI-001", "Civil Lines", "Jaipur", "Civil Lines, Jaipur", "+91-141-2651234", "civillines.jaipur@police.gov.in"),
    ("JAI-002", "Malviya Nagar", "Jaipur", "Malviya Nagar, Jaipur", "+91-141-2751234", "malviyanagar.jaipur@police.gov.in"),
    # ── Uttar Pradesh ───────────────────────────────────────────────
    ("LUC-001", "Hazratganj", "Lucknow", "Hazratganj, Lucknow", "+91-522-2651234", "hazratganj.lucknow@police.gov.in"),
    ("LUC-002", "Gomti Nagar", "Lucknow", "Gomti Nagar, Lucknow", "+91-522-2751234", "gomtinagar.lucknow@police.gov.in"),
    # ── Punjab / Haryana ────────────────────────────────────────────
    ("CHD-001", "Sector 17", "Chandigarh", "Sector 17, Chandigarh", "+91-172-2651234", "sector17.chandigarh@police.gov.in"),
    ("GUR-001", "Gurgaon Cyber City", "Gurgaon", "Cyber City, Gurgaon", "+91-124-2651234", "gurgaon.haryana@police.gov.in"),
    # ── Kerala ──────────────────────────────────────────────────────
    ("KOC-001", "Ernakulam South", "Kochi", "MG Road, Ernakulam", "+91-484-2651234", "ernakulam.kochi@police.gov.in"),
    ("TVM-001", "Thiruvananthapuram Central", "Thiruvananthapuram", "Museum Road, Trivandrum", "+91-471-2651234", "trivandrum.kerala@police.gov.in"),
    # ── Goa ─────────────────────────────────────────────────────────
    ("GOA-001", "Panaji", "Panaji", "MG Road, Panaji", "+91-832-2651234", "panaji.goa@police.gov.in"),
]


class Command(BaseCommand):
    help = "Seed the police-station directory (idempotent)."

    def add_arguments(self, parser):
        parser.add_argument(
            "--city",
            action="append",
            default=[],
            help="Only seed stations in this city (repeatable, case-insensitive).",
        )

    def handle(self, *args, **options):
        cities = {city.lower() for city in options["city"]}
        rows = [row for row in STATIONS if not cities or row[2].lower() in cities]

        if not rows:
            self.stdout.write(self.style.WARNING("No stations match the given --city filter."))
            return

        created = 0
        updated = 0
        with transaction.atomic():
            for code, name, city, address, phone, email in rows:
                _, was_created = PoliceStation.objects.update_or_create(
                    code=code,
                    defaults={
                        "name": name,
                        "city": city,
                        "address": address,
                        "phone": phone,
                        "email": email,
                    },
                )
                if was_created:
                    created += 1
                else:
                    updated += 1

        self.stdout.write(self.style.SUCCESS(
            f"Police stations seeded: {created} created, {updated} updated."
        ))

from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction

from clinic.models import Doctor, Role, User
from clinic.services.auth import register

DOCTORS = [
    # first, last, email, phone, specialization, experience, license, fee
    ("Arjun", "Rao", "arjunrao@hospital.com", "9001110001", "Cardiology", 10, "DOC001", "500"),
    ("Neha", "Singh", "neha@hospital.com", "9001110002", "Neurology", 8, "DOC002", "450"),
    ("Rajesh", "Gupta", "rajesh@hospital.com", "9001110003", "Orthopedics", 12, "DOC003", "550"),
    ("Priya", "Sharma", "priya@hospital.com", "9001110004", "Pediatrics", 7, "DOC004", "400"),
]

PATIENTS = [
    ("Rohan", "Sharma", "rohan@gmail.com", "9876543210"),
    ("Anjali", "Verma", "anjali@gmail.com", "9897456321"),
]

STAFF = [
    ("Admin", "User", "admin@medicare.com", "1234567890", "Administration", "Administrator"),
    ("Reception", "Staff", "reception@medicare.com", "0987654321", "Front Desk", "Receptionist"),
]


class Command(BaseCommand):
    help = "Ensure the demo doctors, patients and staff exist (idempotent)."

    def add_arguments(self, parser):
        parser.add_argument("--password", default=None,
                            help="Password for every demo account (default: <role>123)")

    @transaction.atomic
    def handle(self, *args, **opts):
        for first, last, email, phone, specialty, years, license_no, fee in DOCTORS:
            user = self._ensure(Role.DOCTOR, opts["password"] or "doctor123", {
                "first_name": first, "last_name": last, "email": email, "phone": phone,
                "specialization": specialty, "experience": years, "license_number": license_no,
            })
            Doctor.objects.filter(user=user).update(consultation_fee=Decimal(fee), is_available=True)

        for first, last, email, phone in PATIENTS:
            self._ensure(Role.PATIENT, opts["password"] or "patient123", {
                "first_name": first, "last_name": last, "email": email, "phone": phone,
            })

        for first, last, email, phone, department, position in STAFF:
            self._ensure(Role.STAFF, opts["password"] or "staff123", {
                "first_name": first, "last_name": last, "email": email, "phone": phone,
                "department": department, "position": position,
            })
        self.stdout.write(self.style.SUCCESS("All demo accounts ensured."))

    def _ensure(self, role, password, data):
        user = User.objects.filter(email__iexact=data["email"]).first()
        if user is None:
            user = register({**data, "user_type": role, "password": password}, with_token=False).user
            self.stdout.write(self.style.SUCCESS(f"created: {user.email} ({role})"))
            return user
        user.set_password(password)
        user.is_active = True
        user.save(update_fields=["password", "is_active"])
        self.stdout.write(f"ok: {user.email} ({user.user_type})")
        return user

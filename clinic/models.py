"""
Database models for the MediCare+ backend.

A single :class:`User` table holds every account; the role specific
details live in one-to-one profile tables (:class:`Patient`,
:class:`Doctor`, :class:`Staff`).  Appointments and feedback reference the
profiles rather than the users so that a deactivated account keeps its
history intact.  Nested structures that the frontend treats as embedded
documents (addresses, contacts, prescriptions, shift timings) are stored
as JSON.
"""
from __future__ import annotations

from django.contrib.auth.models import AbstractUser, BaseUserManager
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.utils import timezone


class Role(models.TextChoices):
    PATIENT = 'patient', 'Patient'
    DOCTOR = 'doctor', 'Doctor'
    STAFF = 'staff', 'Staff'


def normalize_email(email: str | None) -> str:
    return (email or '').strip().lower()


class UserManager(BaseUserManager):
    """Manager for the email-keyed user model."""
    use_in_migrations = True

    def _create_user(self, email, password, **extra_fields):
        email = normalize_email(email)
        if not email:
            raise ValueError('The email must be set')
        user = self.model(email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_user(self, email, password=None, **extra_fields):
        extra_fields.setdefault('is_staff', False)
        extra_fields.setdefault('is_superuser', False)
        return self._create_user(email, password, **extra_fields)

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)
        extra_fields.setdefault('user_type', Role.STAFF)
        return self._create_user(email, password, **extra_fields)


class User(AbstractUser):
    """Account record shared by patients, doctors and staff.

    ``user_type`` decides which profile table holds the rest of the
    account's data.  ``specialization``, ``experience`` and
    ``license_number`` duplicate the doctor profile for older clients
    that only read the user object.
    """
    username = None
    email = models.EmailField(unique=True)
    user_type = models.CharField(max_length=10, choices=Role.choices, default=Role.PATIENT, db_index=True)
    phone = models.CharField(max_length=32, blank=True, default='')
    specialization = models.CharField(max_length=120, blank=True, default='')
    experience = models.PositiveIntegerField(default=0)
    license_number = models.CharField(max_length=64, blank=True, default='')
    created_at = models.DateTimeField(auto_now_add=True)

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS: list[str] = []

    objects = UserManager()

    class Meta:
        ordering = ['id']

    def save(self, *args, **kwargs):
        self.email = normalize_email(self.email)
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return f"{self.email} ({self.user_type})"


def default_address() -> dict:
    return {'street': '', 'city': '', 'state': '', 'zipCode': ''}


def default_emergency_contact() -> dict:
    return {'name': '', 'phone': '', 'relationship': ''}


def default_shift_timing() -> dict:
    return {
        'morning': {'start': '09:00', 'end': '12:00'},
        'evening': {'start': '17:00', 'end': '20:00'},
    }


def default_prescription() -> dict:
    return {'medicines': [], 'instructions': ''}


class Patient(models.Model):
    """Demographic and medical details of a patient account."""
    GENDER_CHOICES = [
        ('Male', 'Male'),
        ('Female', 'Female'),
        ('Other', 'Other'),
    ]
    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name='patient_profile')
    date_of_birth = models.DateField(null=True, blank=True)
    gender = models.CharField(max_length=10, choices=GENDER_CHOICES, blank=True, default='')
    blood_group = models.CharField(max_length=5, blank=True, default='')
    address = models.JSONField(default=default_address, blank=True)
    emergency_contact = models.JSONField(default=default_emergency_contact, blank=True)
    # [{condition, diagnosedDate, status}, ...] in insertion order
    medical_history = models.JSONField(default=list, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:
        return f"Patient {self.user.email}"


class Doctor(models.Model):
    """Professional profile of a doctor account.

    ``is_available`` gates new bookings; ``rating``, ``total_ratings`` and
    ``total_patients`` are aggregates maintained by the feedback and
    appointment services.
    """
    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name='doctor_profile')
    specialization = models.CharField(max_length=120)
    qualification = models.CharField(max_length=120, default='MD')
    license_number = models.CharField(max_length=64, unique=True)
    experience = models.PositiveIntegerField(validators=[MinValueValidator(0)])
    department = models.CharField(max_length=120)
    consultation_fee = models.DecimalField(
        max_digits=10, decimal_places=2, default=100, validators=[MinValueValidator(0)]
    )
    # Filtered on by the public doctor listing and checked on every booking
    is_available = models.BooleanField(default=True, db_index=True)
    rating = models.FloatField(default=0, validators=[MinValueValidator(0), MaxValueValidator(5)])
    total_ratings = models.PositiveIntegerField(default=0)
    total_patients = models.PositiveIntegerField(default=0)
    shift_timing = models.JSONField(default=default_shift_timing, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:
        return f"Dr. {self.user.get_full_name()} ({self.specialization})"


class Staff(models.Model):
    """Employment details of a staff account."""
    SHIFT_CHOICES = [
        ('Morning', 'Morning'),
        ('Evening', 'Evening'),
        ('Night', 'Night'),
    ]
    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name='staff_profile')
    department = models.CharField(max_length=120)
    position = models.CharField(max_length=120)
    employee_id = models.CharField(max_length=64, unique=True)
    shift = models.CharField(max_length=10, choices=SHIFT_CHOICES, blank=True, default='')
    salary = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    joining_date = models.DateField(default=timezone.localdate)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name_plural = 'staff'

    def __str__(self) -> str:
        return f"{self.employee_id} {self.position}"


class Appointment(models.Model):
    STATUS_SCHEDULED = 'Scheduled'
    STATUS_CONFIRMED = 'Confirmed'
    STATUS_IN_PROGRESS = 'In Progress'
    STATUS_COMPLETED = 'Completed'
    STATUS_CANCELLED = 'Cancelled'
    STATUS_CHOICES = [
        (STATUS_SCHEDULED, 'Scheduled'),
        (STATUS_CONFIRMED, 'Confirmed'),
        (STATUS_IN_PROGRESS, 'In Progress'),
        (STATUS_COMPLETED, 'Completed'),
        (STATUS_CANCELLED, 'Cancelled'),
    ]
    # the API only deactivates profiles; a profile removed through the admin leaves an empty reference
    patient = models.ForeignKey(Patient, null=True, blank=True, on_delete=models.SET_NULL, related_name='appointments')
    doctor = models.ForeignKey(Doctor, null=True, blank=True, on_delete=models.SET_NULL, related_name='appointments')
    appointment_date = models.DateTimeField(db_index=True)
    appointment_time = models.CharField(max_length=32)
    reason = models.TextField()
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_SCHEDULED, db_index=True)
    notes = models.TextField(blank=True, default='')
    prescription = models.JSONField(default=default_prescription, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        indexes = [
            models.Index(fields=['doctor', 'appointment_date'], name='appt_doctor_date_idx'),
            models.Index(fields=['patient', 'appointment_date'], name='appt_patient_date_idx'),
        ]

    def __str__(self) -> str:
        return f"Appointment {self.id} d={self.doctor_id} p={self.patient_id} {self.status}"


class Feedback(models.Model):
    CATEGORY_CHOICES = [
        ('Service', 'Service'),
        ('Doctor', 'Doctor'),
        ('Facility', 'Facility'),
        ('General', 'General'),
    ]
    STATUS_CHOICES = [
        ('Pending', 'Pending'),
        ('Reviewed', 'Reviewed'),
        ('Resolved', 'Resolved'),
    ]
    patient = models.ForeignKey(Patient, null=True, blank=True, on_delete=models.SET_NULL, related_name='feedback')
    doctor = models.ForeignKey(Doctor, null=True, blank=True, on_delete=models.SET_NULL, related_name='feedback')
    appointment = models.ForeignKey(
        Appointment, null=True, blank=True, on_delete=models.SET_NULL, related_name='feedback'
    )
    rating = models.PositiveSmallIntegerField(validators=[MinValueValidator(1), MaxValueValidator(5)])
    comment = models.TextField(blank=True, default='')
    category = models.CharField(max_length=10, choices=CATEGORY_CHOICES, default='General')
    is_anonymous = models.BooleanField(default=False)
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default='Pending')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name_plural = 'feedback'

    def save(self, *args, **kwargs):
        # ratings outside 1..5 never reach the table
        self.rating = max(1, min(5, int(self.rating)))
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return f"Feedback {self.id} ({self.rating}/5)"


class AuditEvent(models.Model):
    """Security relevant action (login, registration, deletion)."""
    user = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True)
    action = models.CharField(max_length=64)
    object_type = models.CharField(max_length=64, blank=True, null=True)
    object_id = models.BigIntegerField(blank=True, null=True)
    detail = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [
            models.Index(fields=['action', 'created_at'], name='audit_action_created_idx'),
            models.Index(fields=['object_type', 'object_id', 'created_at'], name='audit_object_created_idx'),
        ]

    def __str__(self):
        return f"{self.action}:{self.user_id}@{self.created_at:%F %T}"

"""
Django admin registrations for the clinic models.

Lets superusers inspect and correct accounts, profiles, appointments and
feedback through ``/admin/`` during development.
"""

from django.contrib import admin

from .models import Appointment, AuditEvent, Doctor, Feedback, Patient, Staff, User


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    list_display = ('email', 'first_name', 'last_name', 'user_type', 'is_active', 'created_at')
    list_filter = ('user_type', 'is_active')
    search_fields = ('email', 'first_name', 'last_name', 'phone')
    exclude = ('password',)


@admin.register(Patient)
class PatientAdmin(admin.ModelAdmin):
    list_display = ('user', 'gender', 'blood_group', 'date_of_birth')
    list_filter = ('gender', 'blood_group')
    search_fields = ('user__email', 'user__first_name', 'user__last_name')


@admin.register(Doctor)
class DoctorAdmin(admin.ModelAdmin):
    list_display = ('user', 'specialization', 'department', 'license_number', 'is_available', 'rating')
    list_filter = ('is_available', 'specialization', 'department')
    search_fields = ('user__email', 'user__last_name', 'license_number')


@admin.register(Staff)
class StaffAdmin(admin.ModelAdmin):
    list_display = ('employee_id', 'user', 'department', 'position', 'shift')
    list_filter = ('department', 'shift')
    search_fields = ('employee_id', 'user__email')


@admin.register(Appointment)
class AppointmentAdmin(admin.ModelAdmin):
    list_display = ('id', 'patient', 'doctor', 'appointment_date', 'appointment_time', 'status')
    list_filter = ('status',)
    date_hierarchy = 'appointment_date'


@admin.register(Feedback)
class FeedbackAdmin(admin.ModelAdmin):
    list_display = ('id', 'patient', 'doctor', 'rating', 'category', 'status', 'created_at')
    list_filter = ('category', 'status', 'rating')


@admin.register(AuditEvent)
class AuditEventAdmin(admin.ModelAdmin):
    list_display = ('action', 'user', 'object_type', 'object_id', 'created_at')
    list_filter = ('action', 'object_type')
    readonly_fields = ('user', 'action', 'object_type', 'object_id', 'detail', 'created_at')

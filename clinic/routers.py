"""
URL mappings for the MediCare+ API.

Paths mirror the frontend's API client and carry no trailing slash.
"""
from django.urls import include, path

from .auth_views import login_view, me_view, register_view
from .views import appointments, doctors, feedback, patients, payments, staff, users
from .views.dashboard import dashboard
from .views.health import healthz

api_patterns = [
    # auth
    path('register', register_view, name='register_view'),
    path('login', login_view, name='login_view'),
    path('auth/me', me_view, name='me_view'),

    # users
    path('users', users.users, name='users'),
    path('users/<int:user_id>', users.user_detail, name='user_detail'),
    path('users/<int:user_id>/dashboard', dashboard, name='user_dashboard'),

    # doctors
    path('doctors', doctors.doctors, name='doctors'),
    path('doctors-with-stats', doctors.doctors_stats, name='doctors_with_stats'),
    path('doctors/profile/me', doctors.my_doctor_profile, name='my_doctor_profile'),
    path('doctors/user/<int:user_id>', doctors.doctor_by_user, name='doctor_by_user'),
    path('doctors/<int:doctor_id>', doctors.doctor_detail, name='doctor_detail'),
    path('doctors/<int:doctor_id>/stats', doctors.doctor_stats_view, name='doctor_stats'),
    path('doctors/<int:doctor_id>/appointments', doctors.doctor_appointments, name='doctor_appointments'),

    # patients
    path('patients', patients.patients, name='patients'),
    path('patients/profile/me', patients.my_patient_profile, name='my_patient_profile'),
    path('patients/user/<int:user_id>', patients.patient_by_user, name='patient_by_user'),
    path('patients/<int:patient_id>', patients.patient_detail, name='patient_detail'),
    path('patients/<int:patient_id>/appointments', patients.patient_appointments, name='patient_appointments'),

    # staff
    path('staff', staff.staff_list, name='staff_list'),
    path('staff/profile/me', staff.my_staff_profile, name='my_staff_profile'),
    path('staff/<int:staff_id>', staff.staff_detail, name='staff_detail'),

    # appointments
    path('appointments', appointments.appointments, name='appointments'),
    path('appointments/export', appointments.export_appointments, name='export_appointments'),
    path('appointments/<int:appointment_id>', appointments.appointment_detail, name='appointment_detail'),

    # feedback
    path('feedback', feedback.feedback_list, name='feedback_list'),
    path('feedback/<int:feedback_id>', feedback.feedback_detail, name='feedback_detail'),

    # payments
    path('payment/create-order', payments.create_payment_order, name='create_payment_order'),
]

urlpatterns = [
    path('health', healthz, name='health'),
    path('api/', include(api_patterns)),
]

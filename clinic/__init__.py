"""Clinic application for the MediCare+ hospital backend.

This package contains the models, serializers, services, views and route
registrations behind the REST API consumed by the MediCare+ frontend.
"""

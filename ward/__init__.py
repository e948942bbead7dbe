"""Ward application for the HospFlow backend.

This package contains the models, services, serializers, views and route
registrations behind the ward client: staff accounts and lockout,
patient records with their transition bookkeeping, lean monitoring and
the badge/reminder counters.
"""

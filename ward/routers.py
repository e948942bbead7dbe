"""
URL mappings for the ward API.

Trailing slashes are deliberately omitted; the client calls these
paths verbatim.  Specific ``/api/patients/<action>`` routes are listed
before the ``<id>`` catch-all.
"""
from django.urls import path, include

from .auth_views import change_password_view, jwt_logout_view, jwt_refresh_view, login_view, session_view
from .views import collaborators, dashboard, health, lean_patients, menu, notifications, patients

urlpatterns = [
    path('', include('django_prometheus.urls')),
    path('healthz', health.healthz),
    # Authentication
    path('api/auth/login', login_view, name='login_view'),
    path('api/auth/change-password', change_password_view, name='change_password_view'),
    path('api/auth/refresh', jwt_refresh_view, name='jwt_refresh_view'),
    path('api/auth/logout', jwt_logout_view, name='jwt_logout_view'),
    path('api/auth/session', session_view, name='session_view'),
    # Patients
    path('api/patients', patients.patients),
    path('api/patients/bulk-delete', patients.bulk_delete),
    path('api/patients/bulk-update', patients.bulk_update),
    path('api/patients/bulk-discharge', patients.bulk_discharge),
    path('api/patients/mark-seen', patients.mark_seen),
    path('api/patients/<str:patient_id>/finish-transfer', patients.finish_transfer),
    path('api/patients/<str:patient_id>', patients.patient_detail),
    # Lean monitoring
    path('api/lean-patients', lean_patients.lean_patients),
    path('api/lean-patients/summary', lean_patients.lean_summary),
    path('api/lean-patients/<str:record_id>', lean_patients.lean_patient_detail),
    # Collaborators
    path('api/collaborators', collaborators.collaborators),
    path('api/collaborators/<str:collaborator_id>/reset-password', collaborators.reset_password),
    path('api/collaborators/<str:collaborator_id>', collaborators.collaborator_detail),
    # Badges, reminder and menu
    path('api/notifications/badges', notifications.badges),
    path('api/notifications/reminder', notifications.reminder),
    path('api/menu', menu.menu),
    # Dashboard
    path('api/dashboard/summary', dashboard.summary),
    path('api/reports/monthly', dashboard.monthly),
]

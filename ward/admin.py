"""
Django admin registrations for the ward models.

Collaborator passwords are hashes; reset them through the API (or
``ensure_collaborators`` for the master account), not by editing the
field here.
"""
from django.contrib import admin

from .models import AuditEvent, Collaborator, LeanPatient, Patient


@admin.register(Collaborator)
class CollaboratorAdmin(admin.ModelAdmin):
    list_display = ('login', 'name', 'role', 'failed_attempts', 'is_blocked', 'is_deleted')
    list_filter = ('role', 'is_blocked', 'is_deleted')
    search_fields = ('login', 'name')
    exclude = ('password', 'user_permissions', 'groups')
    readonly_fields = ('created_at', 'last_login')


@admin.register(Patient)
class PatientAdmin(admin.ModelAdmin):
    list_display = ('name', 'medical_record', 'status', 'pendencies', 'is_transfer_requested', 'is_transferred', 'version')
    list_filter = ('status', 'is_transferred', 'is_transfer_requested', 'specialty')
    search_fields = ('name', 'medical_record')
    readonly_fields = (
        'created_at', 'created_by', 'last_modified_by', 'pendencies_resolved_at', 'transfer_requested_at',
        'upa_transfer_requested_at', 'external_transfer_requested_at', 'transferred_at', 'updated_at', 'version',
    )


@admin.register(LeanPatient)
class LeanPatientAdmin(admin.ModelAdmin):
    list_display = ('name', 'specialty', 'reception_time', 'discharge_time')
    list_filter = ('specialty',)
    search_fields = ('name', 'medical_record')


@admin.register(AuditEvent)
class AuditEventAdmin(admin.ModelAdmin):
    list_display = ('action', 'object_type', 'object_id', 'user', 'created_at')
    list_filter = ('action', 'object_type')
    readonly_fields = ('user', 'action', 'object_type', 'object_id', 'detail', 'created_at')

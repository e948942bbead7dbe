"""
Database models for the HospFlow ward backend.

The ward keeps three kinds of records: staff accounts
(:class:`Collaborator`), patients on the unit (:class:`Patient`) and the
parallel lean time-in-process records (:class:`LeanPatient`).  Field
values mirror the Portuguese labels used by the ward client so that the
JSON exchanged with it needs no translation layer.
"""
from __future__ import annotations

import uuid

from django.conf import settings
from django.contrib.auth.base_user import AbstractBaseUser, BaseUserManager
from django.contrib.auth.models import PermissionsMixin
from django.db import models
from django.utils import timezone


def new_record_id() -> str:
    return str(uuid.uuid4())


class CollaboratorManager(BaseUserManager):
    use_in_migrations = True

    def create_user(self, login, password=None, **extra_fields):
        if not login:
            raise ValueError('login is required')
        user = self.model(login=str(login), **extra_fields)
        user.set_password(password or settings.HOSPFLOW_DEFAULT_PASSWORD)
        user.save(using=self._db)
        return user

    def create_superuser(self, login, password=None, **extra_fields):
        extra_fields.setdefault('role', Collaborator.ROLE_COORDENACAO)
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)
        return self.create_user(login, password, **extra_fields)

    def active(self):
        return self.filter(is_deleted=False)


class Collaborator(AbstractBaseUser, PermissionsMixin):
    """A staff account of the ward.

    Logins are numeric strings.  Accounts are never purged by the client:
    removing a collaborator sets ``is_deleted`` (and ``is_blocked``), so a
    login is only unique among non-deleted accounts.  The account with id
    ``"1"`` is the master developer account and cannot be deleted.
    """
    ROLE_TECNICO = 'tecnico'
    ROLE_ENFERMEIRO = 'enfermeiro'
    ROLE_COORDENACAO = 'coordenacao'
    ROLE_CHOICES = [
        (ROLE_TECNICO, 'Técnico'),
        (ROLE_ENFERMEIRO, 'Enfermeiro'),
        (ROLE_COORDENACAO, 'Coordenação'),
    ]
    MASTER_ID = '1'

    id = models.CharField(max_length=64, primary_key=True, default=new_record_id)
    name = models.CharField(max_length=255)
    login = models.CharField(max_length=20, db_index=True)
    role = models.CharField(max_length=16, choices=ROLE_CHOICES, default=ROLE_TECNICO)
    failed_attempts = models.PositiveIntegerField(default=0)
    is_blocked = models.BooleanField(default=False)
    # Exclusão lógica: a conta é mantida, mas não entra mais no sistema
    is_deleted = models.BooleanField(default=False, db_index=True)
    is_staff = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    objects = CollaboratorManager()

    USERNAME_FIELD = 'login'
    REQUIRED_FIELDS = ['name']

    @property
    def is_active(self) -> bool:  # type: ignore[override]
        return not (self.is_deleted or self.is_blocked)

    @property
    def is_developer(self) -> bool:
        return self.id == self.MASTER_ID or self.login == settings.HOSPFLOW_DEV_LOGIN

    @property
    def display_label(self) -> str:
        """``"<login> - <name>"``, the form stored in patient audit fields."""
        return f"{self.login} - {self.name}"

    def __str__(self) -> str:
        return f"{self.name} ({self.login}, {self.role})"


class Patient(models.Model):
    """A patient currently (or formerly) on the ward.

    ``is_transferred`` marks the record as archived: it disappears from
    the active views and shows up in the finalized history until it is
    deleted.  The ``*_at`` stamps are written by
    :mod:`ward.services.patients` when it observes the corresponding field
    transition and are never accepted from the client.
    """
    STATUS_INTERNADO = 'Internado'
    STATUS_OBSERVACAO = 'Observação'
    STATUS_REAVALIACAO = 'Reavaliação'
    STATUS_ALTA = 'Alta'
    STATUS_TRANSFER_UPA = 'Transferência UPA'
    STATUS_TRANSFER_EXTERNAL = 'Transferência Externa'
    STATUS_CHOICES = [
        (STATUS_INTERNADO, STATUS_INTERNADO),
        (STATUS_OBSERVACAO, STATUS_OBSERVACAO),
        (STATUS_REAVALIACAO, STATUS_REAVALIACAO),
        (STATUS_ALTA, STATUS_ALTA),
        (STATUS_TRANSFER_UPA, STATUS_TRANSFER_UPA),
        (STATUS_TRANSFER_EXTERNAL, STATUS_TRANSFER_EXTERNAL),
    ]
    TRANSFER_STATUSES = (STATUS_TRANSFER_UPA, STATUS_TRANSFER_EXTERNAL)

    PENDENCY_NONE = 'Nenhuma'
    PENDENCY_NO_PRESCRIPTION = 'Sem prescrição médica'
    PENDENCY_LAB_EXAMS = 'Aguardando exames laboratoriais'
    PENDENCY_SOCIAL_WORKER = 'Aguardando Assistente Social'
    PENDENCY_CHOICES = [
        (PENDENCY_NONE, PENDENCY_NONE),
        (PENDENCY_NO_PRESCRIPTION, PENDENCY_NO_PRESCRIPTION),
        ('Sem dieta', 'Sem dieta'),
        (PENDENCY_LAB_EXAMS, PENDENCY_LAB_EXAMS),
        ('Aguardando Tomografia', 'Aguardando Tomografia'),
        ('Aguardando Raio-X', 'Aguardando Raio-X'),
        ('Aguardando Ultrassom', 'Aguardando Ultrassom'),
        ('Exames realizados, aguardando resultado', 'Exames realizados, aguardando resultado'),
        (PENDENCY_SOCIAL_WORKER, PENDENCY_SOCIAL_WORKER),
    ]
    # Pendências que travam o fluxo da unidade (painel "gargalos")
    BOTTLENECK_PENDENCIES = (PENDENCY_NO_PRESCRIPTION, PENDENCY_LAB_EXAMS)

    CORRIDOR_CHOICES = [
        ('Corredor 1 | Principal', 'Corredor 1 | Principal'),
        ('Corredor 2 | Comanejo', 'Corredor 2 | Comanejo'),
        ('Corredor 3 | Raio-X', 'Corredor 3 | Raio-X'),
        ('Sala de Trauma', 'Sala de Trauma'),
    ]
    SPECIALTY_CHOICES = [
        ('Cirurgia Geral', 'Cirurgia Geral'),
        ('Neurologia', 'Neurologia'),
        ('Ortopedia', 'Ortopedia'),
        ('Urologia', 'Urologia'),
        ('Odontologia/Bucomaxilo', 'Odontologia/Bucomaxilo'),
        ('Vascular', 'Vascular'),
        ('Clínica Médica', 'Clínica Médica'),
        ('Outros', 'Outros'),
    ]
    SEX_CHOICES = [
        ('Masculino', 'Masculino'),
        ('Feminino', 'Feminino'),
        ('Outro', 'Outro'),
    ]
    MOBILITY_CHOICES = [
        ('Deambula', 'Deambula'),
        ('Deambula com auxilio', 'Deambula com auxilio'),
        ('Acamado', 'Acamado'),
        ('Restrito ao leito', 'Restrito ao leito'),
    ]
    SITUATION_STRETCHER = 'Maca'
    SITUATION_CHAIR = 'Cadeira'
    SITUATION_CHOICES = [
        (SITUATION_STRETCHER, SITUATION_STRETCHER),
        (SITUATION_CHAIR, SITUATION_CHAIR),
    ]
    DIET_CHOICES = [
        'Sem prescrição', 'Suspensa', 'Livre', 'Pastosa', 'Branda',
        'Líquida', 'Laxativa', 'DM', 'HAS',
    ]

    id = models.CharField(max_length=64, primary_key=True, default=new_record_id)
    name = models.CharField(max_length=255)
    social_name = models.CharField(max_length=255, blank=True)
    sex = models.CharField(max_length=16, choices=SEX_CHOICES, blank=True)
    age = models.PositiveIntegerField(null=True, blank=True)
    medical_record = models.CharField(max_length=64, blank=True, db_index=True)
    corridor = models.CharField(max_length=64, choices=CORRIDOR_CHOICES, blank=True)
    specialty = models.CharField(max_length=64, choices=SPECIALTY_CHOICES, blank=True)
    status = models.CharField(max_length=32, choices=STATUS_CHOICES, default=STATUS_INTERNADO, db_index=True)
    has_aih = models.BooleanField(default=False)
    pendencies = models.CharField(max_length=64, choices=PENDENCY_CHOICES, default=PENDENCY_NONE)
    diagnosis = models.TextField(blank=True)
    mobility = models.CharField(max_length=32, choices=MOBILITY_CHOICES, blank=True)
    has_allergy = models.BooleanField(default=False)
    allergy_details = models.TextField(blank=True)
    venous_access = models.CharField(max_length=255, blank=True)
    venous_access_date = models.CharField(max_length=32, blank=True)
    has_prescription = models.BooleanField(default=False)
    diet = models.JSONField(default=list, blank=True)
    disabilities = models.JSONField(default=list, blank=True)
    notes = models.TextField(blank=True)
    has_bracelet = models.BooleanField(default=False)
    has_bed_identification = models.BooleanField(default=False)
    situation = models.CharField(max_length=16, choices=SITUATION_CHOICES, blank=True)
    has_lesion = models.BooleanField(default=False)
    lesion_description = models.TextField(blank=True)
    is_transfer_requested = models.BooleanField(default=False, db_index=True)
    transfer_destination_sector = models.CharField(max_length=128, blank=True)
    transfer_destination_bed = models.CharField(max_length=128, blank=True)
    is_transferred = models.BooleanField(default=False, db_index=True)
    vitals = models.JSONField(default=dict, blank=True)
    is_new = models.BooleanField(default=False)

    created_at = models.DateTimeField(default=timezone.now, db_index=True)
    created_by = models.CharField(max_length=255, blank=True)
    last_modified_by = models.CharField(max_length=255, blank=True)
    pendencies_resolved_at = models.DateTimeField(null=True, blank=True)
    transfer_requested_at = models.DateTimeField(null=True, blank=True)
    upa_transfer_requested_at = models.DateTimeField(null=True, blank=True)
    external_transfer_requested_at = models.DateTimeField(null=True, blank=True)
    transferred_at = models.DateTimeField(null=True, blank=True)
    updated_at = models.DateTimeField(auto_now=True)
    version = models.PositiveIntegerField(default=1)

    class Meta:
        ordering = ['name']
        indexes = [
            models.Index(fields=['is_transferred', 'status'], name='ward_patien_is_tran_5a1c2e_idx'),
        ]

    @property
    def has_open_pendency(self) -> bool:
        """Pendency badge predicate: a pendency, a missing bracelet or a missing bed ID."""
        return (
            self.pendencies != self.PENDENCY_NONE
            or not self.has_bracelet
            or not self.has_bed_identification
        )

    def __str__(self) -> str:
        return f"{self.name} ({self.medical_record or self.id})"


class LeanPatient(models.Model):
    """Lean monitoring record: one timestamp per step of the emergency visit."""
    SPECIALTY_CHOICES = [
        ('Cirurgia Geral', 'Cirurgia Geral'),
        ('Neurologia', 'Neurologia'),
        ('Ortopedia', 'Ortopedia'),
        ('Dentista/Bucomaxilo', 'Dentista/Bucomaxilo'),
        ('Vascular', 'Vascular'),
    ]
    STAGE_FIELDS = (
        'triage_start_time',
        'md_start_time',
        'md_end_time',
        'lab_time',
        'ct_time',
        'xray_time',
        'medication_time',
        'reevaluation_time',
        'discharge_time',
        'hospitalization_time',
    )

    id = models.CharField(max_length=64, primary_key=True, default=new_record_id)
    name = models.CharField(max_length=255)
    age = models.PositiveIntegerField(null=True, blank=True)
    medical_record = models.CharField(max_length=64, blank=True)
    specialty = models.CharField(max_length=64, choices=SPECIALTY_CHOICES)
    reception_time = models.DateTimeField()
    triage_start_time = models.DateTimeField(null=True, blank=True)
    md_start_time = models.DateTimeField(null=True, blank=True)
    md_end_time = models.DateTimeField(null=True, blank=True)
    lab_time = models.DateTimeField(null=True, blank=True)
    ct_time = models.DateTimeField(null=True, blank=True)
    xray_time = models.DateTimeField(null=True, blank=True)
    medication_time = models.DateTimeField(null=True, blank=True)
    reevaluation_time = models.DateTimeField(null=True, blank=True)
    discharge_time = models.DateTimeField(null=True, blank=True)
    hospitalization_time = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ['-reception_time']

    def __str__(self) -> str:
        return f"lean {self.name} ({self.specialty})"


class AuditEvent(models.Model):
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True)
    action = models.CharField(max_length=64)
    object_type = models.CharField(max_length=64, blank=True, null=True)
    object_id = models.CharField(max_length=64, blank=True, null=True)
    detail = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [
            models.Index(fields=['action', 'created_at'], name='ward_audite_action_3f0d41_idx'),
            models.Index(fields=['object_type', 'object_id', 'created_at'], name='ward_audite_object__8c7e52_idx'),
        ]

    def __str__(self):
        return f"{self.action}:{self.user_id}@{self.created_at:%F %T}"

# ward/management/commands/ensure_collaborators.py
from django.conf import settings
from django.core.management.base import BaseCommand
from django.db import transaction

from ward.models import Collaborator

DEFAULT_SET = [
    # (id, name, login, role)
    ("2", "COORDENAÇÃO SETORIAL", "1010", Collaborator.ROLE_COORDENACAO),
    ("3", "TÉCNICO EXEMPLO", "456", Collaborator.ROLE_TECNICO),
]


class Command(BaseCommand):
    help = "Seed the default collaborators on an empty table and restore the master developer account (idempotent)."

    @transaction.atomic
    def handle(self, *args, **opts):
        dev_login = settings.HOSPFLOW_DEV_LOGIN
        if not Collaborator.objects.exists():
            for pk, name, login, role in DEFAULT_SET:
                Collaborator.objects.create_user(login, id=pk, name=name, role=role)
                self.stdout.write(self.style.SUCCESS(f"ok: {login} ({role})"))

        # Só pode existir uma conta com o login do desenvolvedor
        duplicates = Collaborator.objects.filter(login=dev_login).exclude(id=Collaborator.MASTER_ID)
        removed, _ = duplicates.delete()
        if removed:
            self.stdout.write(self.style.WARNING(f"removed {removed} duplicate developer account(s)"))

        dev = Collaborator.objects.filter(id=Collaborator.MASTER_ID).first()
        if dev is None:
            dev = Collaborator(id=Collaborator.MASTER_ID)
        dev.login = dev_login
        dev.name = dev.name or "MA DESENVOLVEDOR"
        dev.role = Collaborator.ROLE_COORDENACAO
        dev.is_blocked = False
        dev.is_deleted = False
        dev.failed_attempts = 0
        dev.is_staff = True
        dev.is_superuser = True
        dev.set_password(settings.HOSPFLOW_DEV_PASSWORD)
        dev.save()
        self.stdout.write(self.style.SUCCESS(f"ok: {dev_login} (developer)"))
        self.stdout.write(self.style.SUCCESS("Collaborators ensured."))

import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models

import ward.models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('auth', '0012_alter_user_first_name_max_length'),
    ]

    operations = [
        migrations.CreateModel(
            name='Collaborator',
            fields=[
                ('password', models.CharField(max_length=128, verbose_name='password')),
                ('last_login', models.DateTimeField(blank=True, null=True, verbose_name='last login')),
                ('is_superuser', models.BooleanField(default=False, help_text='Designates that this user has all permissions without explicitly assigning them.', verbose_name='superuser status')),
                ('id', models.CharField(default=ward.models.new_record_id, max_length=64, primary_key=True, serialize=False)),
                ('name', models.CharField(max_length=255)),
                ('login', models.CharField(db_index=True, max_length=20)),
                ('role', models.CharField(choices=[('tecnico', 'Técnico'), ('enfermeiro', 'Enfermeiro'), ('coordenacao', 'Coordenação')], default='tecnico', max_length=16)),
                ('failed_attempts', models.PositiveIntegerField(default=0)),
                ('is_blocked', models.BooleanField(default=False)),
                ('is_deleted', models.BooleanField(db_index=True, default=False)),
                ('is_staff', models.BooleanField(default=False)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('groups', models.ManyToManyField(blank=True, help_text='The groups this user belongs to. A user will get all permissions granted to each of their groups.', related_name='user_set', related_query_name='user', to='auth.group', verbose_name='groups')),
                ('user_permissions', models.ManyToManyField(blank=True, help_text='Specific permissions for this user.', related_name='user_set', related_query_name='user', to='auth.permission', verbose_name='user permissions')),
            ],
            options={
                'abstract': False,
            },
            managers=[
                ('objects', ward.models.CollaboratorManager()),
            ],
        ),
        migrations.CreateModel(
            name='LeanPatient',
            fields=[
                ('id', models.CharField(default=ward.models.new_record_id, max_length=64, primary_key=True, serialize=False)),
                ('name', models.CharField(max_length=255)),
                ('age', models.PositiveIntegerField(blank=True, null=True)),
                ('medical_record', models.CharField(blank=True, max_length=64)),
                ('specialty', models.CharField(choices=[('Cirurgia Geral', 'Cirurgia Geral'), ('Neurologia', 'Neurologia'), ('Ortopedia', 'Ortopedia'), ('Dentista/Bucomaxilo', 'Dentista/Bucomaxilo'), ('Vascular', 'Vascular')], max_length=64)),
                ('reception_time', models.DateTimeField()),
                ('triage_start_time', models.DateTimeField(blank=True, null=True)),
                ('md_start_time', models.DateTimeField(blank=True, null=True)),
                ('md_end_time', models.DateTimeField(blank=True, null=True)),
                ('lab_time', models.DateTimeField(blank=True, null=True)),
                ('ct_time', models.DateTimeField(blank=True, null=True)),
                ('xray_time', models.DateTimeField(blank=True, null=True)),
                ('medication_time', models.DateTimeField(blank=True, null=True)),
                ('reevaluation_time', models.DateTimeField(blank=True, null=True)),
                ('discharge_time', models.DateTimeField(blank=True, null=True)),
                ('hospitalization_time', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(default=django.utils.timezone.now)),
            ],
            options={
                'ordering': ['-reception_time'],
            },
        ),
        migrations.CreateModel(
            name='Patient',
            fields=[
                ('id', models.CharField(default=ward.models.new_record_id, max_length=64, primary_key=True, serialize=False)),
                ('name', models.CharField(max_length=255)),
                ('social_name', models.CharField(blank=True, max_length=255)),
                ('sex', models.CharField(blank=True, choices=[('Masculino', 'Masculino'), ('Feminino', 'Feminino'), ('Outro', 'Outro')], max_length=16)),
                ('age', models.PositiveIntegerField(blank=True, null=True)),
                ('medical_record', models.CharField(blank=True, db_index=True, max_length=64)),
                ('corridor', models.CharField(blank=True, choices=[('Corredor 1 | Principal', 'Corredor 1 | Principal'), ('Corredor 2 | Comanejo', 'Corredor 2 | Comanejo'), ('Corredor 3 | Raio-X', 'Corredor 3 | Raio-X'), ('Sala de Trauma', 'Sala de Trauma')], max_length=64)),
                ('specialty', models.CharField(blank=True, choices=[('Cirurgia Geral', 'Cirurgia Geral'), ('Neurologia', 'Neurologia'), ('Ortopedia', 'Ortopedia'), ('Urologia', 'Urologia'), ('Odontologia/Bucomaxilo', 'Odontologia/Bucomaxilo'), ('Vascular', 'Vascular'), ('Clínica Médica', 'Clínica Médica'), ('Outros', 'Outros')], max_length=64)),
                ('status', models.CharField(choices=[('Internado', 'Internado'), ('Observação', 'Observação'), ('Reavaliação', 'Reavaliação'), ('Alta', 'Alta'), ('Transferência UPA', 'Transferência UPA'), ('Transferência Externa', 'Transferência Externa')], db_index=True, default='Internado', max_length=32)),
                ('has_aih', models.BooleanField(default=False)),
                ('pendencies', models.CharField(choices=[('Nenhuma', 'Nenhuma'), ('Sem prescrição médica', 'Sem prescrição médica'), ('Sem dieta', 'Sem dieta'), ('Aguardando exames laboratoriais', 'Aguardando exames laboratoriais'), ('Aguardando Tomografia', 'Aguardando Tomografia'), ('Aguardando Raio-X', 'Aguardando Raio-X'), ('Aguardando Ultrassom', 'Aguardando Ultrassom'), ('Exames realizados, aguardando resultado', 'Exames realizados, aguardando resultado'), ('Aguardando Assistente Social', 'Aguardando Assistente Social')], default='Nenhuma', max_length=64)),
                ('diagnosis', models.TextField(blank=True)),
                ('mobility', models.CharField(blank=True, choices=[('Deambula', 'Deambula'), ('Deambula com auxilio', 'Deambula com auxilio'), ('Acamado', 'Acamado'), ('Restrito ao leito', 'Restrito ao leito')], max_length=32)),
                ('has_allergy', models.BooleanField(default=False)),
                ('allergy_details', models.TextField(blank=True)),
                ('venous_access', models.CharField(blank=True, max_length=255)),
                ('venous_access_date', models.CharField(blank=True, max_length=32)),
                ('has_prescription', models.BooleanField(default=False)),
                ('diet', models.JSONField(blank=True, default=list)),
                ('disabilities', models.JSONField(blank=True, default=list)),
                ('notes', models.TextField(blank=True)),
                ('has_bracelet', models.BooleanField(default=False)),
                ('has_bed_identification', models.BooleanField(default=False)),
                ('situation', models.CharField(blank=True, choices=[('Maca', 'Maca'), ('Cadeira', 'Cadeira')], max_length=16)),
                ('has_lesion', models.BooleanField(default=False)),
                ('lesion_description', models.TextField(blank=True)),
                ('is_transfer_requested', models.BooleanField(db_index=True, default=False)),
                ('transfer_destination_sector', models.CharField(blank=True, max_length=128)),
                ('transfer_destination_bed', models.CharField(blank=True, max_length=128)),
                ('is_transferred', models.BooleanField(db_index=True, default=False)),
                ('vitals', models.JSONField(blank=True, default=dict)),
                ('is_new', models.BooleanField(default=False)),
                ('created_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
                ('created_by', models.CharField(blank=True, max_length=255)),
                ('last_modified_by', models.CharField(blank=True, max_length=255)),
                ('pendencies_resolved_at', models.DateTimeField(blank=True, null=True)),
                ('transfer_requested_at', models.DateTimeField(blank=True, null=True)),
                ('upa_transfer_requested_at', models.DateTimeField(blank=True, null=True)),
                ('external_transfer_requested_at', models.DateTimeField(blank=True, null=True)),
                ('transferred_at', models.DateTimeField(blank=True, null=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('version', models.PositiveIntegerField(default=1)),
            ],
            options={
                'ordering': ['name'],
                'indexes': [models.Index(fields=['is_transferred', 'status'], name='ward_patien_is_tran_5a1c2e_idx')],
            },
        ),
        migrations.CreateModel(
            name='AuditEvent',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('action', models.CharField(max_length=64)),
                ('object_type', models.CharField(blank=True, max_length=64, null=True)),
                ('object_id', models.CharField(blank=True, max_length=64, null=True)),
                ('detail', models.JSONField(blank=True, default=dict)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('user', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'indexes': [
                    models.Index(fields=['action', 'created_at'], name='ward_audite_action_3f0d41_idx'),
                    models.Index(fields=['object_type', 'object_id', 'created_at'], name='ward_audite_object__8c7e52_idx'),
                ],
            },
        ),
    ]

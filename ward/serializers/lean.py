import bleach
from rest_framework import serializers

from ward.models import LeanPatient


class LeanPatientSerializer(serializers.Serializer):
    id = serializers.CharField(max_length=64, required=False)
    name = serializers.CharField(max_length=255)
    age = serializers.IntegerField(min_value=0, max_value=150, required=False, allow_null=True)
    medicalRecord = serializers.CharField(source='medical_record', max_length=64, required=False, allow_blank=True)
    specialty = serializers.ChoiceField(choices=LeanPatient.SPECIALTY_CHOICES)
    receptionTime = serializers.DateTimeField(source='reception_time')
    triageStartTime = serializers.DateTimeField(source='triage_start_time', required=False, allow_null=True)
    mdStartTime = serializers.DateTimeField(source='md_start_time', required=False, allow_null=True)
    mdEndTime = serializers.DateTimeField(source='md_end_time', required=False, allow_null=True)
    labTime = serializers.DateTimeField(source='lab_time', required=False, allow_null=True)
    ctTime = serializers.DateTimeField(source='ct_time', required=False, allow_null=True)
    xrayTime = serializers.DateTimeField(source='xray_time', required=False, allow_null=True)
    medicationTime = serializers.DateTimeField(source='medication_time', required=False, allow_null=True)
    reevaluationTime = serializers.DateTimeField(source='reevaluation_time', required=False, allow_null=True)
    dischargeTime = serializers.DateTimeField(source='discharge_time', required=False, allow_null=True)
    hospitalizationTime = serializers.DateTimeField(source='hospitalization_time', required=False, allow_null=True)

    def validate_name(self, v):
        v = bleach.clean((v or '').strip(), tags=set(), strip=True)
        if not v:
            raise serializers.ValidationError('Informe o nome do paciente.')
        return v

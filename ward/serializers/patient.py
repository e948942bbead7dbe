import bleach
from rest_framework import serializers

from ward.models import Patient


def clean_text(v):
    return bleach.clean((v or '').strip(), tags=set(), strip=True)


class VitalsSerializer(serializers.Serializer):
    pa = serializers.CharField(max_length=16, required=False, allow_blank=True)
    fc = serializers.IntegerField(min_value=0, max_value=300, required=False, allow_null=True)
    fr = serializers.IntegerField(min_value=0, max_value=100, required=False, allow_null=True)
    temp = serializers.FloatField(min_value=25, max_value=45, required=False, allow_null=True)
    spo2 = serializers.IntegerField(min_value=0, max_value=100, required=False, allow_null=True)
    measuredAt = serializers.CharField(max_length=32, required=False, allow_blank=True)


class PatientWriteSerializer(serializers.Serializer):
    """Client payload for a patient; camelCase keys map onto model fields."""
    id = serializers.CharField(max_length=64, required=False)
    version = serializers.IntegerField(min_value=1, required=False)
    name = serializers.CharField(max_length=255)
    socialName = serializers.CharField(source='social_name', max_length=255, required=False, allow_blank=True)
    sex = serializers.ChoiceField(choices=Patient.SEX_CHOICES, required=False, allow_blank=True)
    age = serializers.IntegerField(min_value=0, max_value=150, required=False, allow_null=True)
    medicalRecord = serializers.CharField(source='medical_record', max_length=64, required=False, allow_blank=True)
    corridor = serializers.ChoiceField(choices=Patient.CORRIDOR_CHOICES, required=False, allow_blank=True)
    specialty = serializers.ChoiceField(choices=Patient.SPECIALTY_CHOICES, required=False, allow_blank=True)
    status = serializers.ChoiceField(choices=Patient.STATUS_CHOICES, required=False)
    hasAih = serializers.BooleanField(source='has_aih', required=False)
    pendencies = serializers.ChoiceField(choices=Patient.PENDENCY_CHOICES, required=False)
    diagnosis = serializers.CharField(required=False, allow_blank=True)
    mobility = serializers.ChoiceField(choices=Patient.MOBILITY_CHOICES, required=False, allow_blank=True)
    hasAllergy = serializers.BooleanField(source='has_allergy', required=False)
    allergyDetails = serializers.CharField(source='allergy_details', required=False, allow_blank=True)
    venousAccess = serializers.CharField(source='venous_access', max_length=255, required=False, allow_blank=True)
    venousAccessDate = serializers.CharField(source='venous_access_date', max_length=32, required=False, allow_blank=True)
    hasPrescription = serializers.BooleanField(source='has_prescription', required=False)
    diet = serializers.ListField(child=serializers.ChoiceField(choices=Patient.DIET_CHOICES), required=False)
    disabilities = serializers.ListField(child=serializers.CharField(max_length=64), required=False)
    notes = serializers.CharField(required=False, allow_blank=True)
    hasBracelet = serializers.BooleanField(source='has_bracelet', required=False)
    hasBedIdentification = serializers.BooleanField(source='has_bed_identification', required=False)
    situation = serializers.ChoiceField(choices=Patient.SITUATION_CHOICES, required=False, allow_blank=True)
    hasLesion = serializers.BooleanField(source='has_lesion', required=False)
    lesionDescription = serializers.CharField(source='lesion_description', required=False, allow_blank=True)
    isTransferRequested = serializers.BooleanField(source='is_transfer_requested', required=False)
    transferDestinationSector = serializers.CharField(source='transfer_destination_sector', max_length=128, required=False, allow_blank=True)
    transferDestinationBed = serializers.CharField(source='transfer_destination_bed', max_length=128, required=False, allow_blank=True)
    isTransferred = serializers.BooleanField(source='is_transferred', required=False)
    vitals = VitalsSerializer(required=False)
    isNew = serializers.BooleanField(source='is_new', required=False)

    def validate_name(self, v):
        v = clean_text(v)
        if len(v) < 2:
            raise serializers.ValidationError('Informe o nome do paciente.')
        return v

    def validate_socialName(self, v):
        return clean_text(v)

    def validate_diagnosis(self, v):
        return clean_text(v)

    def validate_allergyDetails(self, v):
        return clean_text(v)

    def validate_notes(self, v):
        return clean_text(v)

    def validate_lesionDescription(self, v):
        return clean_text(v)

    def validate_disabilities(self, v):
        return [clean_text(item) for item in v]

    def validate_vitals(self, v):
        return dict(v)


class PatientListQuerySerializer(serializers.Serializer):
    scope = serializers.ChoiceField(choices=['all', 'active', 'pendencies', 'transfers', 'finalized', 'new'], required=False)
    q = serializers.CharField(max_length=64, required=False, allow_blank=True)


class IdsSerializer(serializers.Serializer):
    ids = serializers.ListField(child=serializers.CharField(max_length=64), allow_empty=False)


class BulkUpdateSerializer(IdsSerializer):
    updates = serializers.DictField()

    def validate_updates(self, v):
        s = PatientWriteSerializer(data=v, partial=True)
        s.is_valid(raise_exception=True)
        data = dict(s.validated_data)
        data.pop('id', None)
        data.pop('version', None)
        if not data:
            raise serializers.ValidationError('Nenhuma alteração informada.')
        return data


class FinishTransferSerializer(serializers.Serializer):
    destination = serializers.CharField(max_length=128, required=False, allow_blank=True)

    def validate_destination(self, v):
        return clean_text(v)


class MonthlyReportQuerySerializer(serializers.Serializer):
    month = serializers.RegexField(r'^\d{4}-(0[1-9]|1[0-2])$', required=False,
                                   error_messages={'invalid': 'Use o formato AAAA-MM.'})

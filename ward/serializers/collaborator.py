import bleach
from rest_framework import serializers

from ward.models import Collaborator


class CollaboratorWriteSerializer(serializers.Serializer):
    id = serializers.CharField(max_length=64, required=False)
    name = serializers.CharField(max_length=255)
    login = serializers.CharField(max_length=20)
    role = serializers.ChoiceField(choices=Collaborator.ROLE_CHOICES)
    isBlocked = serializers.BooleanField(source='is_blocked', required=False)
    isDeleted = serializers.BooleanField(source='is_deleted', required=False)

    def validate_name(self, v):
        v = bleach.clean((v or '').strip(), tags=set(), strip=True)
        if not v:
            raise serializers.ValidationError('Informe o nome do colaborador.')
        return v.upper()

    def validate_login(self, v):
        v = (v or '').strip()
        if not v.isdigit():
            raise serializers.ValidationError('O usuário deve conter apenas números.')
        return v


class CollaboratorListQuerySerializer(serializers.Serializer):
    q = serializers.CharField(max_length=64, required=False, allow_blank=True)

from rest_framework import serializers

from ward.models import Collaborator


class LoginSerializer(serializers.Serializer):
    login = serializers.CharField(max_length=20)
    role = serializers.ChoiceField(choices=Collaborator.ROLE_CHOICES)
    password = serializers.CharField(trim_whitespace=False)

    def validate_login(self, v):
        v = (v or '').strip()
        if not v:
            raise serializers.ValidationError('Informe o usuário.')
        return v

    def validate_password(self, v):
        if not v:
            raise serializers.ValidationError('Informe a senha.')
        return v


class ChangePasswordSerializer(LoginSerializer):
    newPassword = serializers.CharField(max_length=32)

from django.conf import settings
from rest_framework import serializers
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ward.navigation import AppView
from ward.services.notifications import badge_counts, should_remind


class ReminderQuerySerializer(serializers.Serializer):
    trigger = serializers.ChoiceField(choices=['login', 'interval'], required=False)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def badges(request):
    return Response({'ok': True, 'data': badge_counts(request.user.role)})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def reminder(request):
    """Whether the client should show the open-pendencies reminder now."""
    q = ReminderQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    on_login = (q.validated_data.get('trigger') or 'interval') == 'login'
    counts = badge_counts(request.user.role)
    return Response({
        'ok': True,
        'show': should_remind(request.user.role, on_login=on_login, count=counts['pendencies']),
        'pendencies': counts['pendencies'],
        'intervalMinutes': settings.HOSPFLOW_REMINDER_INTERVAL_MINUTES,
        'target': AppView.PENDENCIES.value,
    })

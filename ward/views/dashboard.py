"""
Dashboard endpoints.

``summary`` describes the patients currently on the ward; ``monthly``
covers every admission of a calendar month, archived records included.
Without ``month`` the monthly endpoint reports the latest month with data
and lists the months available.
"""
from __future__ import annotations

from datetime import date

from django.utils import timezone
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ward.serializers.patient import MonthlyReportQuerySerializer
from ward.services.reports import available_months, monthly_report, ward_summary


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def summary(request):
    return Response({'ok': True, 'data': ward_summary()})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def monthly(request):
    q = MonthlyReportQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    months = available_months()
    value = q.validated_data.get('month') or (months[0] if months else timezone.localdate().strftime('%Y-%m'))
    year, month = (int(part) for part in value.split('-'))
    return Response({'ok': True, 'months': months, 'data': monthly_report(date(year, month, 1))})

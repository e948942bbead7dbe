"""Lean monitoring endpoints (nurse and coordination menus only)."""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ward.models import LeanPatient
from ward.permissions import IsNursingRole
from ward.serializers.lean import LeanPatientSerializer
from ward.services import lean as svc


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsNursingRole])
def lean_patients(request):
    if request.method == 'GET':
        return Response([svc.serialize_lean(p) for p in LeanPatient.objects.all()])

    record_id = request.data.get('id') if hasattr(request.data, 'get') else None
    exists = bool(record_id) and LeanPatient.objects.filter(pk=record_id).exists()
    s = LeanPatientSerializer(data=request.data, partial=exists)
    s.is_valid(raise_exception=True)
    record, created = svc.save_lean_patient(request.user, s.validated_data)
    return Response(
        {'ok': True, 'created': created, 'data': svc.serialize_lean(record)},
        status=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
    )


@api_view(['DELETE'])
@permission_classes([IsAuthenticated, IsNursingRole])
def lean_patient_detail(request, record_id: str):
    deleted = svc.delete_lean_patient(request.user, record_id)
    return Response({'ok': True, 'deleted': deleted})


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsNursingRole])
def lean_summary(request):
    return Response({'ok': True, 'data': svc.stage_summary()})

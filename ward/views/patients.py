"""
Patient endpoints.

``POST /api/patients`` is an upsert keyed by ``id`` (the client sends the
whole record it edited).  Deletions, discharge and the "seen" action are
restricted to nurses and coordination; everything else is open to any
logged-in collaborator.
"""
from __future__ import annotations

import structlog
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import NotFound, PermissionDenied
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ward.models import Patient
from ward.permissions import IsNursingRole
from ward.serializers.patient import (
    BulkUpdateSerializer,
    FinishTransferSerializer,
    IdsSerializer,
    PatientListQuerySerializer,
    PatientWriteSerializer,
)
from ward.services import patients as svc

logger = structlog.get_logger(__name__)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def patients(request):
    if request.method == 'GET':
        q = PatientListQuerySerializer(data=request.query_params)
        q.is_valid(raise_exception=True)
        qs = svc.list_patients(q.validated_data.get('scope') or 'all', q.validated_data.get('q') or '')
        return Response([svc.serialize_patient(p) for p in qs])

    patient_id = request.data.get('id') if hasattr(request.data, 'get') else None
    exists = bool(patient_id) and Patient.objects.filter(pk=patient_id).exists()
    s = PatientWriteSerializer(data=request.data, partial=exists)
    s.is_valid(raise_exception=True)
    data = dict(s.validated_data)
    expected_version = data.pop('version', None)
    patient, created = svc.save_patient(request.user, data, expected_version=expected_version)
    return Response(
        {'ok': True, 'created': created, 'data': svc.serialize_patient(patient)},
        status=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
    )


@api_view(['GET', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def patient_detail(request, patient_id: str):
    if request.method == 'DELETE':
        if not IsNursingRole().has_permission(request, None):
            raise PermissionDenied(IsNursingRole.message)
        deleted = svc.delete_patients(request.user, [patient_id])
        return Response({'ok': True, 'deleted': deleted})

    if request.method == 'PATCH':
        s = PatientWriteSerializer(data=request.data, partial=True)
        s.is_valid(raise_exception=True)
        data = dict(s.validated_data)
        data.pop('id', None)
        expected_version = data.pop('version', None)
        patient = svc.update_patient(request.user, patient_id, data, expected_version=expected_version)
        return Response({'ok': True, 'data': svc.serialize_patient(patient)})

    patient = Patient.objects.filter(pk=patient_id).first()
    if patient is None:
        raise NotFound('Paciente não encontrado.')
    return Response(svc.serialize_patient(patient))


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsNursingRole])
def bulk_delete(request):
    s = IdsSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    deleted = svc.delete_patients(request.user, s.validated_data['ids'])
    logger.info('patients.bulk_delete', requested=len(s.validated_data['ids']), deleted=deleted)
    return Response({'ok': True, 'deleted': deleted})


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def bulk_update(request):
    s = BulkUpdateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    updated = svc.bulk_update(request.user, s.validated_data['ids'], s.validated_data['updates'])
    return Response({'ok': True, 'updated': len(updated), 'data': [svc.serialize_patient(p) for p in updated]})


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsNursingRole])
def bulk_discharge(request):
    s = IdsSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    updated = svc.bulk_discharge(request.user, s.validated_data['ids'])
    logger.info('patients.bulk_discharge', count=len(updated))
    return Response({'ok': True, 'discharged': len(updated), 'data': [svc.serialize_patient(p) for p in updated]})


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def finish_transfer(request, patient_id: str):
    s = FinishTransferSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    patient = svc.finish_transfer(request.user, patient_id, s.validated_data.get('destination', ''))
    return Response({'ok': True, 'data': svc.serialize_patient(patient)})


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsNursingRole])
def mark_seen(request):
    count = svc.mark_seen(request.user)
    return Response({'ok': True, 'updated': count})

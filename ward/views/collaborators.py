"""
Collaborator management.

Listing is open to nurses and coordination.  Creating, editing and
removing accounts is coordination work; password resets follow
:func:`ward.services.accounts.can_reset_password`.
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import NotFound, PermissionDenied
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ward.exceptions import ProtectedRecord
from ward.models import Collaborator
from ward.permissions import IsCoordination, IsNursingRole, is_coordination
from ward.serializers.collaborator import CollaboratorListQuerySerializer, CollaboratorWriteSerializer
from ward.services import accounts


def serialize_collaborator(c: Collaborator) -> dict:
    return {
        'id': c.id,
        'name': c.name,
        'login': c.login,
        'role': c.role,
        'failedAttempts': c.failed_attempts,
        'isBlocked': c.is_blocked,
        'isDeleted': c.is_deleted,
        'isDeveloper': c.is_developer,
        'createdAt': c.created_at.isoformat() if c.created_at else None,
    }


def _get_collaborator(collaborator_id: str) -> Collaborator:
    target = Collaborator.objects.filter(pk=collaborator_id).first()
    if target is None:
        raise NotFound('Colaborador não encontrado.')
    return target


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsNursingRole])
def collaborators(request):
    if request.method == 'GET':
        q = CollaboratorListQuerySerializer(data=request.query_params)
        q.is_valid(raise_exception=True)
        qs = accounts.list_collaborators(request.user, q.validated_data.get('q') or '')
        return Response([serialize_collaborator(c) for c in qs])

    if not is_coordination(request.user):
        raise PermissionDenied(IsCoordination.message)
    record_id = request.data.get('id') if hasattr(request.data, 'get') else None
    target = Collaborator.objects.filter(pk=record_id).first() if record_id else None
    s = CollaboratorWriteSerializer(data=request.data, partial=target is not None)
    s.is_valid(raise_exception=True)
    vd = s.validated_data
    if target is None:
        user = accounts.create_collaborator(request.user, name=vd['name'], login=vd['login'], role=vd['role'])
        return Response({'ok': True, 'created': True, 'data': serialize_collaborator(user)},
                        status=status.HTTP_201_CREATED)
    changes = {k: v for k, v in vd.items() if k in ('name', 'role', 'is_blocked', 'is_deleted')}
    user = accounts.update_collaborator(request.user, target, changes)
    return Response({'ok': True, 'created': False, 'data': serialize_collaborator(user)})


@api_view(['DELETE'])
@permission_classes([IsAuthenticated, IsCoordination])
def collaborator_detail(request, collaborator_id: str):
    if collaborator_id == Collaborator.MASTER_ID:
        raise ProtectedRecord()
    accounts.delete_collaborator(request.user, _get_collaborator(collaborator_id))
    return Response({'ok': True})


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsNursingRole])
def reset_password(request, collaborator_id: str):
    target = accounts.reset_password(request.user, _get_collaborator(collaborator_id))
    return Response({
        'ok': True,
        'message': f'Senha de {target.name} resetada para o padrão.',
        'data': serialize_collaborator(target),
    })

from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ward.navigation import UNITS, build_menu
from ward.services.notifications import badge_counts


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def menu(request):
    """Main-menu entries for the caller's role, with their badge counters."""
    role = request.user.role
    badges = badge_counts(role)
    return Response({'ok': True, 'role': role, 'units': UNITS, 'items': build_menu(role, badges), 'badges': badges})

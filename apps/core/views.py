"""
Core Views for Aureum Backend

Contains health check and other utility endpoints.
"""
from django.db import connection
from django.http import JsonResponse
from rest_framework.decorators import api_view, authentication_classes, permission_classes
from rest_framework.permissions import AllowAny


@api_view(['GET'])
@authentication_classes([])
@permission_classes([AllowAny])
def health_check(request):
    """
    Health check endpoint for deployment verification.

    Returns:
        - 200: Service is healthy
        - 503: Service is unhealthy (database connection failed)
    """
    response_data = {
        'status': 'healthy',
        'service': 'aureum-backend',
        'database': 'unknown',
    }

    # Check database connection
    try:
        with connection.cursor() as cursor:
            cursor.execute('SELECT 1')
            cursor.fetchone()
        response_data['database'] = 'connected'
    except Exception as e:
        response_data['status'] = 'unhealthy'
        response_data['database'] = f'error: {str(e)}'
        return JsonResponse(response_data, status=503)

    return JsonResponse(response_data)

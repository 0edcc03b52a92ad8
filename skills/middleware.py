from django.http import JsonResponse

from .services.store import is_configured


class StoreConfigurationMiddleware:
    """Return 503 for every API request while the store settings are missing."""
    GUARDED_PREFIXES = ('/api/', '/healthz')

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        path = request.path or ''
        if any(path.startswith(p) for p in self.GUARDED_PREFIXES) and not is_configured():
            return JsonResponse(
                {'ok': False, 'error': {'code': 'configuration_error',
                                        'message': 'The database connection is not configured. '
                                                   'Set SUPABASE_URL and SUPABASE_ANON_KEY.'}},
                status=503
            )
        return self.get_response(request)

from django.http import JsonResponse

from ..exceptions import PortalError
from ..services.store import get_store


def healthz(request):
    try:
        ok = get_store().ping()
        return JsonResponse({'ok': True, 'store': ok})
    except PortalError as e:
        return JsonResponse({'ok': False, 'error': str(e)}, status=e.status_code)

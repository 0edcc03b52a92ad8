from rest_framework.views import exception_handler as drf_exception_handler
from rest_framework.response import Response


class PortalError(Exception):
    """Base class for errors surfaced to the initiating user action."""
    code = 'portal_error'
    status_code = 400


class ConfigurationError(PortalError):
    """The hosted store connection settings are missing."""
    code = 'configuration_error'
    status_code = 503


class StoreError(PortalError):
    """A call to the hosted store or its object storage failed."""
    code = 'store_error'
    status_code = 502


class MutationError(PortalError):
    """A create/update/delete use case was aborted."""
    code = 'mutation_error'
    status_code = 400


class BackupError(PortalError):
    """A local backup file could not be parsed or has the wrong shape."""
    code = 'backup_error'
    status_code = 400


def api_exception_handler(exc, context):
    if isinstance(exc, PortalError):
        return Response({'ok': False, 'error': {'code': exc.code, 'message': str(exc)}}, status=exc.status_code)
    resp = drf_exception_handler(exc, context)
    if resp is None:
        return Response({'ok': False, 'error': {'code': 'server_error', 'message': str(exc)}}, status=500)
    # normalize response
    detail = None
    if isinstance(resp.data, dict):
        detail = resp.data.get('detail') or resp.data
    else:
        detail = str(resp.data)
    return Response({'ok': False, 'error': {'code': 'api_error', 'message': detail}}, status=resp.status_code)

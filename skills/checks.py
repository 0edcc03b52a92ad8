"""System checks for the hosted store configuration."""
from django.conf import settings
from django.core.checks import Error, register


@register()
def store_configuration_check(app_configs, **kwargs):
    errors = []
    if not getattr(settings, 'SUPABASE_URL', ''):
        errors.append(Error(
            'SUPABASE_URL is not set.',
            hint='Set SUPABASE_URL in the environment or the .env file.',
            id='skills.E001',
        ))
    if not getattr(settings, 'SUPABASE_ANON_KEY', ''):
        errors.append(Error(
            'SUPABASE_ANON_KEY is not set.',
            hint='Set SUPABASE_ANON_KEY in the environment or the .env file.',
            id='skills.E002',
        ))
    return errors

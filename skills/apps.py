from django.apps import AppConfig


class SkillsConfig(AppConfig):
    name = 'skills'
    verbose_name = 'Hospital skill portal'

    def ready(self) -> None:
        # Registers the store configuration system check.
        from . import checks  # noqa: F401

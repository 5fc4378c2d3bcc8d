from django.apps import AppConfig


class DiagramsConfig(AppConfig):
    name = 'diagrams'
    verbose_name = 'Diagram blocks'

    def ready(self):
        """Build the default block registry once the app is loaded."""
        from diagrams.markdown.extensions import get_default_registry

        get_default_registry()

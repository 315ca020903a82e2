from django.apps import AppConfig


class NotificationsConfig(AppConfig):
    name = 'apps.notifications'
    label = 'notifications'
    verbose_name = 'Notifications'

    dispatcher = None

    def ready(self):
        from django.conf import settings

        from apps.notifications.dispatcher import build_dispatcher

        NotificationsConfig.dispatcher = build_dispatcher(settings)

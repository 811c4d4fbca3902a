from django.apps import AppConfig


class AttendanceConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "attendance"
    verbose_name = "Attendance Credentials"

    def ready(self) -> None:
        from attendance import signals  # noqa: F401

# users/utils.py
from django.conf import settings
from django.core.mail import send_mail


def send_attendance_warning_email(user, year, attendance_rate, threshold):
    subject = f"Meeting attendance warning for {year}"
    message = (
        f"Hi {user.full_name},\n\n"
        f"Your attendance at association meetings in {year} is {attendance_rate:.0%}, "
        f"below the required {threshold:.0%}.\n"
        f"Members under this rate are charged a penalty on their annual dues. "
        f"Please attend the remaining meetings."
    )
    return send_mail(subject, message, settings.DEFAULT_FROM_EMAIL, [user.email])

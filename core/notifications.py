import logging
import re

from django.conf import settings
from django.core.mail import send_mail
from django.db import transaction
from twilio.base.exceptions import TwilioRestException
from twilio.rest import Client as TwilioClient

logger = logging.getLogger(__name__)

PHONE_NUMBER_PATTERN = re.compile(r'^\+\d{9,15}$')


def send_notification(user, subject, email_message, sms_message):
    """
    Send a notification to a user via email and SMS.

    Delivery is best-effort: failures are logged and never propagate to the
    caller, so a notification problem cannot undo a marketplace transition.
    """
    if user.email:
        try:
            send_mail(
                subject=subject,
                message=email_message,
                from_email=settings.DEFAULT_FROM_EMAIL,
                recipient_list=[user.email],
                fail_silently=False,
            )
        except Exception as e:
            logger.error(f"Failed to send email to {user.email}: {str(e)}")

    if not user.phone_number or not settings.TWILIO_ACCOUNT_SID:
        return
    if not PHONE_NUMBER_PATTERN.match(user.phone_number):
        logger.warning(f"Invalid phone number format for user {user.id}: {user.phone_number}")
        return
    try:
        twilio_client = TwilioClient(settings.TWILIO_ACCOUNT_SID, settings.TWILIO_AUTH_TOKEN)
        twilio_client.messages.create(
            body=sms_message,
            from_=settings.TWILIO_PHONE_NUMBER,
            to=user.phone_number
        )
    except TwilioRestException as e:
        logger.error(f"Failed to send SMS to {user.phone_number}: {str(e)}")


def notify_on_commit(user, subject, email_message, sms_message):
    """Queue a notification that is only sent if the surrounding transaction commits."""
    transaction.on_commit(
        lambda: send_notification(user, subject, email_message, sms_message)
    )


def notify_bid_accepted(bid, job):
    freelancer = bid.freelancer
    email_message = (
        f"Dear {freelancer.first_name or freelancer.username},\n\n"
        f"Your bid of {bid.amount} for job '{job.title}' has been accepted.\n"
        f"A chat with the job poster is now open in FreelanceHub.\n\n"
        f"Best regards,\nFreelanceHub Team"
    )
    sms_message = f"Your bid for '{job.title}' was accepted. Open FreelanceHub to chat with the poster."
    notify_on_commit(freelancer, f"Bid Accepted for {job.title}", email_message, sms_message)


def notify_bid_rejected(bid, job):
    freelancer = bid.freelancer
    email_message = (
        f"Dear {freelancer.first_name or freelancer.username},\n\n"
        f"Your bid for job '{job.title}' has been rejected by the job poster.\n\n"
        f"Best regards,\nFreelanceHub Team"
    )
    sms_message = f"Your bid for '{job.title}' was rejected."
    notify_on_commit(freelancer, f"Bid Rejected for {job.title}", email_message, sms_message)


def notify_payment_settled(payment, job):
    payee = payment.payee
    email_message = (
        f"Dear {payee.first_name or payee.username},\n\n"
        f"The job '{job.title}' has been marked as completed.\n"
        f"A payment of {payment.amount} has been credited to your account.\n\n"
        f"Best regards,\nFreelanceHub Team"
    )
    sms_message = f"Payment of {payment.amount} for job '{job.title}' received."
    notify_on_commit(payee, f"Payment Received for Job: {job.title}", email_message, sms_message)

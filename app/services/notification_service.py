"""
Appointment Notification Service
Turns scheduling events into in-app notifications for patients, dentists and assistants
All scheduling notifications are produced from this single source
"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from ..domain.notifications.repository import NotificationRepository
from ..models import Appointment, AppointmentRequest, Notification

logger = logging.getLogger(__name__)

URGENCY_NOTIFICATION_TYPES = {
    "emergency": "emergency_request",
    "urgent": "urgent_request",
    "routine": "appointment_request",
}

URGENCY_TITLES = {
    "emergency": "🚨 Emergency Appointment Request",
    "urgent": "⚡ Urgent Appointment Request",
    "routine": "📅 New Appointment Request",
}

STATUS_MESSAGES = {
    "in_progress": "Your appointment has started",
    "completed": "Your appointment has been completed",
    "cancelled": "Your appointment has been cancelled",
    "no_show": "Missed appointment recorded",
}


class NotificationDispatcher:
    """Notification sink for scheduling events"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = NotificationRepository()

    def create_notification(
        self,
        recipient_id: str,
        notification_type: str,
        title: str,
        message: str,
        related_id: Optional[str] = None,
    ) -> Notification:
        """
        Store one notification for a recipient

        Args:
            recipient_id: Patient, dentist or assistant id
            notification_type: Event tag (e.g. appointment_confirmed)
            title: Short title
            message: Body text
            related_id: Appointment or request the notification points back to

        Returns:
            The stored Notification
        """
        logger.info(f"🔔 Sending {notification_type} notification to {recipient_id}")
        notification = self.repo.create_notification(
            self.db,
            recipient_id=recipient_id,
            type=notification_type,
            title=title,
            message=message,
            related_id=related_id,
        )
        return notification

    def notify_staff_of_new_request(
        self, request: AppointmentRequest, urgency: str, assistant_ids: list[str]
    ) -> int:
        """Notify every assistant of a new request; wording depends on urgency"""
        notification_type = URGENCY_NOTIFICATION_TYPES.get(urgency, "appointment_request")
        title = URGENCY_TITLES.get(urgency, URGENCY_TITLES["routine"])

        for assistant_id in assistant_ids:
            self.create_notification(
                assistant_id,
                notification_type,
                title,
                f"New {urgency} appointment request needs attention",
                related_id=request.id,
            )

        if not assistant_ids:
            logger.warning(f"⚠️ No assistants to notify for request {request.id}")

        return len(assistant_ids)

    def notify_appointment_confirmed(self, appointment: Appointment) -> None:
        """Notify the patient and the dentist of a confirmed request"""
        self.create_notification(
            appointment.patient_id,
            "appointment_confirmed",
            "Appointment Confirmed",
            f"Your appointment has been scheduled for {appointment.scheduled_date} "
            f"at {appointment.scheduled_time}",
            related_id=appointment.id,
        )
        self.notify_dentist_of_new_appointment(appointment)

    def notify_dentist_of_new_appointment(self, appointment: Appointment) -> None:
        self.create_notification(
            appointment.dentist_id,
            "appointment_scheduled",
            "New Appointment Scheduled",
            f"New appointment scheduled for {appointment.scheduled_date} "
            f"at {appointment.scheduled_time}",
            related_id=appointment.id,
        )

    def notify_status_change(self, appointment: Appointment) -> bool:
        """Tell the patient about the appointment's new status; False if the status has no message"""
        message = STATUS_MESSAGES.get(appointment.status)
        if not message:
            return False

        self.create_notification(
            appointment.patient_id,
            f"appointment_{appointment.status}",
            "Appointment Update",
            message,
            related_id=appointment.id,
        )
        return True

    def notify_appointment_cancelled(
        self, appointment: Appointment, cancelled_by: str, reason: str
    ) -> None:
        """
        Staff cancellations go to the patient,
        patient cancellations go to the dentist
        """
        if cancelled_by != appointment.patient_id:
            self.create_notification(
                appointment.patient_id,
                "appointment_cancelled",
                "Appointment Cancelled",
                f"Your appointment scheduled for {appointment.scheduled_date} has been cancelled. "
                f"Reason: {reason}",
                related_id=appointment.id,
            )
        else:
            self.create_notification(
                appointment.dentist_id,
                "appointment_cancelled",
                "Patient Cancelled Appointment",
                f"Appointment for {appointment.scheduled_date} at {appointment.scheduled_time} "
                f"has been cancelled by patient",
                related_id=appointment.id,
            )

    def send_urgent_notification(
        self, user_id: str, title: str, message: str, related_id: Optional[str] = None
    ) -> Notification:
        return self.create_notification(user_id, "urgent_request", title, message, related_id)

    def notify_request_declined(self, request: AppointmentRequest, reason: Optional[str]) -> None:
        message = "Your appointment request could not be scheduled"
        if reason:
            message = f"{message}. Reason: {reason}"

        self.create_notification(
            request.patient_id,
            "appointment_request_declined",
            "Appointment Request Declined",
            message,
            related_id=request.id,
        )

from django.db import models
from django.conf import settings

# Create your models here.


class AppendOnlyError(Exception):
    """Raised on any attempt to change or remove a moderation log entry."""


class ModerationLogQuerySet(models.QuerySet):
    """Bulk writes are refused so entries cannot be altered through the queryset API either."""

    def update(self, **kwargs):
        raise AppendOnlyError("Moderation log entries cannot be updated.")

    def delete(self):
        raise AppendOnlyError("Moderation log entries cannot be deleted.")


class ModerationLog(models.Model):
    """
    An audit record of one admin moderation action.

    Every approve/reject decision on campsites and owner requests and every hide, unhide
    or dismiss on reviews writes exactly one entry, in the same transaction as the action
    itself. Entries are append-only: they are never edited or removed.

    Attributes:
        admin (ForeignKey): The admin who performed the action. Protected from deletion so
            the audit trail always names its actor.
        action_type (CharField): What was done, one of `ActionType`.
        entity_type (CharField): The kind of object acted on, one of `EntityType`.
        entity_id (CharField): The id of that object, stored as text so any kind of id fits.
        reason (TextField): Optional reason given by the admin.
        metadata (JSONField): Optional free-form details, e.g. a snapshot of the object.
        created_at (DateTimeField): Set by the server when the entry is written.
    """

    class ActionType(models.TextChoices):
        CAMPSITE_APPROVE = 'campsite_approve', 'Campsite approved'
        CAMPSITE_REJECT = 'campsite_reject', 'Campsite rejected'
        OWNER_APPROVE = 'owner_approve', 'Owner request approved'
        OWNER_REJECT = 'owner_reject', 'Owner request rejected'
        REVIEW_HIDE = 'review_hide', 'Review hidden'
        REVIEW_UNHIDE = 'review_unhide', 'Review unhidden'
        REVIEW_DELETE = 'review_delete', 'Review deleted'
        REVIEW_DISMISS = 'review_dismiss', 'Review reports dismissed'

    class EntityType(models.TextChoices):
        CAMPSITE = 'campsite', 'Campsite'
        OWNER_REQUEST = 'owner_request', 'Owner request'
        REVIEW = 'review', 'Review'

    admin = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        related_name='moderation_logs',
        on_delete=models.PROTECT,
        help_text="The admin who performed the action."
    )
    action_type = models.CharField(max_length=30, choices=ActionType.choices)
    entity_type = models.CharField(max_length=30, choices=EntityType.choices)
    entity_id = models.CharField(max_length=64)
    reason = models.TextField(blank=True, null=True)
    metadata = models.JSONField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    objects = ModerationLogQuerySet.as_manager()

    class Meta:
        ordering = ['-created_at', '-id']
        constraints = [
            # Empty strings would pass NOT NULL; the audit fields must carry a value.
            models.CheckConstraint(condition=~models.Q(action_type=''), name='moderation_log_action_type_required'),
            models.CheckConstraint(condition=~models.Q(entity_type=''), name='moderation_log_entity_type_required'),
            models.CheckConstraint(condition=~models.Q(entity_id=''), name='moderation_log_entity_id_required'),
        ]
        indexes = [
            models.Index(fields=['entity_type', 'entity_id'], name='modlog_entity_idx'),
            models.Index(fields=['action_type', '-created_at'], name='modlog_action_idx'),
            models.Index(fields=['admin', '-created_at'], name='modlog_admin_idx'),
        ]
        verbose_name = "Moderation log entry"
        verbose_name_plural = "Moderation log"

    def __str__(self):
        return f"{self.action_type} on {self.entity_type} {self.entity_id} by {self.admin_id}"

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise AppendOnlyError("Moderation log entries cannot be updated.")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise AppendOnlyError("Moderation log entries cannot be deleted.")

"""
Admin moderation workflows.

Each workflow applies its state change and writes its `ModerationLog` entry inside one
transaction: if the log entry cannot be written, the action is rolled back, so no
committed admin action is missing from the audit trail.
"""
import structlog
from django.core.exceptions import ValidationError
from django.db import DatabaseError, transaction
from django.utils import timezone

from campsites_app.models import Campsite
from profile_app.models import OwnerRequest, Profile
from reviews_app import services as review_services
from reviews_app.models import Review, ReviewReport
from reviews_app.results import ReviewErrorCode, ServiceResult

from .models import ModerationLog

logger = structlog.get_logger(__name__)

DISMISS_REASON = 'Reports dismissed by admin'


class _ActionFailed(Exception):
    """Carries a failed review service result out of the transaction so it rolls back."""

    def __init__(self, result):
        super().__init__(result.error_code)
        self.result = result


def record_moderation_action(*, admin_id, action_type, entity_type, entity_id,
                             reason=None, metadata=None) -> ModerationLog:
    """
    Writes one audit entry.

    Raises:
        ValidationError: If a required field is missing or not a known choice.
        DatabaseError: If the database rejects the insert.
    """
    entry = ModerationLog(
        admin_id=admin_id,
        action_type=action_type,
        entity_type=entity_type,
        entity_id='' if entity_id is None else str(entity_id),
        reason=reason,
        metadata=metadata,
    )
    entry.full_clean()
    entry.save()
    logger.info(
        'moderation_action_recorded',
        admin_id=admin_id,
        action_type=action_type,
        entity_type=entity_type,
        entity_id=entry.entity_id,
    )
    return entry


def _run_audited(action_name, context, action):
    """
    Runs `action` in a transaction and maps failures to typed results.

    `action` returns the success payload, or raises `_ActionFailed` to roll back with a
    specific result.
    """
    try:
        with transaction.atomic():
            data = action()
    except _ActionFailed as failure:
        return failure.result
    except (DatabaseError, ValidationError):
        logger.exception('moderation_action_failed', action=action_name, **context)
        return ServiceResult.fail(ReviewErrorCode.STORE_FAILURE)
    return ServiceResult.ok(data)


# --- Reviews ---

def moderate_hide_review(review_id, admin_id, reason) -> ServiceResult:
    """Hides a review and records `review_hide` with the admin's reason."""
    def action():
        result = review_services.hide_review(review_id, admin_id, reason)
        if not result.success:
            raise _ActionFailed(result)
        record_moderation_action(
            admin_id=admin_id,
            action_type=ModerationLog.ActionType.REVIEW_HIDE,
            entity_type=ModerationLog.EntityType.REVIEW,
            entity_id=review_id,
            reason=reason,
        )
        return result.data

    return _run_audited('review_hide', {'review_id': review_id, 'admin_id': admin_id}, action)


def moderate_unhide_review(review_id, admin_id) -> ServiceResult:
    """Restores a hidden review and records `review_unhide`."""
    def action():
        result = review_services.unhide_review(review_id)
        if not result.success:
            raise _ActionFailed(result)
        record_moderation_action(
            admin_id=admin_id,
            action_type=ModerationLog.ActionType.REVIEW_UNHIDE,
            entity_type=ModerationLog.EntityType.REVIEW,
            entity_id=review_id,
        )
        return result.data

    return _run_audited('review_unhide', {'review_id': review_id, 'admin_id': admin_id}, action)


def dismiss_reports(review_id, admin_id) -> ServiceResult:
    """
    Clears all reports of a review the admin considers fine, which takes it out of the
    moderation queue. Records `review_dismiss`.
    """
    def action():
        if not Review.objects.filter(pk=review_id).exists():
            raise _ActionFailed(ServiceResult.fail(ReviewErrorCode.REVIEW_NOT_FOUND))
        dismissed, _ = ReviewReport.objects.filter(review_id=review_id).delete()
        Review.objects.filter(pk=review_id).update(is_reported=False, report_count=0, updated_at=timezone.now())
        record_moderation_action(
            admin_id=admin_id,
            action_type=ModerationLog.ActionType.REVIEW_DISMISS,
            entity_type=ModerationLog.EntityType.REVIEW,
            entity_id=review_id,
            reason=DISMISS_REASON,
            metadata={'dismissed_reports': dismissed},
        )
        return {'review_id': review_id, 'dismissed_reports': dismissed}

    return _run_audited('review_dismiss', {'review_id': review_id, 'admin_id': admin_id}, action)


# --- Campsites ---

def _decide_campsite(campsite_id, admin_id, approve, reason=None):
    def action():
        campsite = (
            Campsite.objects.select_for_update()
            .filter(pk=campsite_id, status=Campsite.Status.PENDING)
            .first()
        )
        if campsite is None:
            raise _ActionFailed(ServiceResult.fail(
                ReviewErrorCode.NOT_PENDING, "Campsite not found or not pending"
            ))

        campsite.status = Campsite.Status.APPROVED if approve else Campsite.Status.REJECTED
        campsite.rejection_reason = None if approve else reason
        campsite.save(update_fields=['status', 'rejection_reason', 'updated_at'])

        record_moderation_action(
            admin_id=admin_id,
            action_type=(ModerationLog.ActionType.CAMPSITE_APPROVE if approve
                         else ModerationLog.ActionType.CAMPSITE_REJECT),
            entity_type=ModerationLog.EntityType.CAMPSITE,
            entity_id=campsite.pk,
            reason=reason,
        )
        return {'campsite_id': campsite.pk, 'new_status': campsite.status}

    name = 'campsite_approve' if approve else 'campsite_reject'
    return _run_audited(name, {'campsite_id': campsite_id, 'admin_id': admin_id}, action)


def approve_campsite(campsite_id, admin_id) -> ServiceResult:
    """Publishes a pending campsite. It accepts reviews from now on."""
    return _decide_campsite(campsite_id, admin_id, approve=True)


def reject_campsite(campsite_id, admin_id, reason) -> ServiceResult:
    return _decide_campsite(campsite_id, admin_id, approve=False, reason=reason)


# --- Owner requests ---

def _decide_owner_request(request_id, admin_id, approve, reason=None):
    def action():
        owner_request = (
            OwnerRequest.objects.select_for_update()
            .filter(pk=request_id, status=OwnerRequest.Status.PENDING)
            .first()
        )
        if owner_request is None:
            raise _ActionFailed(ServiceResult.fail(
                ReviewErrorCode.NOT_PENDING, "Owner request not found or not pending"
            ))

        owner_request.status = OwnerRequest.Status.APPROVED if approve else OwnerRequest.Status.REJECTED
        owner_request.rejection_reason = None if approve else reason
        owner_request.reviewed_at = timezone.now()
        owner_request.reviewed_by_id = admin_id
        owner_request.save(update_fields=['status', 'rejection_reason', 'reviewed_at', 'reviewed_by'])

        if approve:
            # Creates the profile for accounts that predate automatic profile creation.
            Profile.objects.update_or_create(
                user_id=owner_request.user_id,
                defaults={'role': Profile.Role.OWNER},
            )

        record_moderation_action(
            admin_id=admin_id,
            action_type=(ModerationLog.ActionType.OWNER_APPROVE if approve
                         else ModerationLog.ActionType.OWNER_REJECT),
            entity_type=ModerationLog.EntityType.OWNER_REQUEST,
            entity_id=owner_request.pk,
            reason=reason,
        )
        return {'request_id': owner_request.pk, 'new_status': owner_request.status}

    name = 'owner_approve' if approve else 'owner_reject'
    return _run_audited(name, {'request_id': request_id, 'admin_id': admin_id}, action)


def approve_owner_request(request_id, admin_id) -> ServiceResult:
    """Approves the request and upgrades the applicant's role to owner."""
    return _decide_owner_request(request_id, admin_id, approve=True)


def reject_owner_request(request_id, admin_id, reason) -> ServiceResult:
    return _decide_owner_request(request_id, admin_id, approve=False, reason=reason)

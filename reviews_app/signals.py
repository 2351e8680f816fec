"""
Counter maintenance for reviews.

`helpful_count`, `report_count` and `is_reported` are derived from the vote and report
rows. The receivers below keep them in step with single UPDATE statements, so they run in
the same transaction as the row insert or delete that triggered them.
"""
from django.db.models import F, PositiveIntegerField
from django.db.models.functions import Greatest
from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from .models import HelpfulVote, Review, ReviewReport


@receiver(post_save, sender=HelpfulVote)
def increment_helpful_count(sender, instance, created, **kwargs):
    if created:
        Review.objects.filter(pk=instance.review_id).update(helpful_count=F('helpful_count') + 1)


@receiver(post_delete, sender=HelpfulVote)
def decrement_helpful_count(sender, instance, **kwargs):
    Review.objects.filter(pk=instance.review_id).update(
        helpful_count=Greatest(F('helpful_count') - 1, 0, output_field=PositiveIntegerField())
    )


@receiver(post_save, sender=ReviewReport)
def increment_report_count(sender, instance, created, **kwargs):
    if created:
        Review.objects.filter(pk=instance.review_id).update(
            report_count=F('report_count') + 1,
            is_reported=True,
        )


@receiver(post_delete, sender=ReviewReport)
def decrement_report_count(sender, instance, **kwargs):
    reviews = Review.objects.filter(pk=instance.review_id)
    reviews.update(report_count=Greatest(F('report_count') - 1, 0, output_field=PositiveIntegerField()))
    # A review with no reports left leaves the moderation queue.
    reviews.filter(report_count=0).update(is_reported=False)

from django.db import models
from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator

from .summary import RATING_CATEGORIES  # noqa: F401

RATING_VALIDATORS = [MinValueValidator(1), MaxValueValidator(5)]


# Create your models here.
class Review(models.Model):
    """
    Represents a guest's review of a campsite.

    Reviews are published immediately on creation; there is no approval step. Visibility is
    controlled afterwards by admins through the `is_hidden` flag, which takes the review out
    of every listing and summary without deleting it. A specific user can only review a
    specific campsite once, enforced by a unique constraint on the database level.

    Attributes:
        campsite (ForeignKey): The campsite being reviewed.
        user (ForeignKey): The author of the review.
        rating_overall (PositiveSmallIntegerField): Required star rating from 1 to 5.
        rating_cleanliness, rating_staff, rating_facilities, rating_value,
        rating_location (PositiveSmallIntegerField): Optional aspect ratings from 1 to 5.
        reviewer_type (CharField): Who the guest travelled with, one of `ReviewerType`.
        title, content, pros, cons (text): The written part of the review.
        visited_at (DateField): Optional date of the stay.
        helpful_count (PositiveIntegerField): Number of helpful votes. Maintained by the
            vote signal receivers, never written by request code.
        is_reported, report_count: Report state, maintained by the report signal receivers.
        is_hidden, hidden_reason, hidden_at, hidden_by: Moderation state set by admins.
        owner_response, owner_response_at: The campsite owner's public answer.
    """

    class ReviewerType(models.TextChoices):
        FAMILY = 'family', 'Family'
        COUPLE = 'couple', 'Couple'
        SOLO = 'solo', 'Solo'
        GROUP = 'group', 'Group'

    campsite = models.ForeignKey(
        'campsites_app.Campsite',
        related_name='reviews',
        on_delete=models.CASCADE,
        help_text="The campsite being reviewed."
    )

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        related_name='campsite_reviews',
        on_delete=models.CASCADE,
        help_text="The user who wrote the review."
    )

    # --- Ratings ---
    rating_overall = models.PositiveSmallIntegerField(validators=RATING_VALIDATORS)
    rating_cleanliness = models.PositiveSmallIntegerField(validators=RATING_VALIDATORS, blank=True, null=True)
    rating_staff = models.PositiveSmallIntegerField(validators=RATING_VALIDATORS, blank=True, null=True)
    rating_facilities = models.PositiveSmallIntegerField(validators=RATING_VALIDATORS, blank=True, null=True)
    rating_value = models.PositiveSmallIntegerField(validators=RATING_VALIDATORS, blank=True, null=True)
    rating_location = models.PositiveSmallIntegerField(validators=RATING_VALIDATORS, blank=True, null=True)

    # --- Content ---
    reviewer_type = models.CharField(max_length=10, choices=ReviewerType.choices)
    title = models.CharField(max_length=100, blank=True, default='')
    content = models.TextField()
    pros = models.TextField(blank=True, null=True)
    cons = models.TextField(blank=True, null=True)
    visited_at = models.DateField(blank=True, null=True)

    helpful_count = models.PositiveIntegerField(default=0)

    # --- Reports ---
    is_reported = models.BooleanField(default=False)
    report_count = models.PositiveIntegerField(default=0)

    # --- Moderation ---
    is_hidden = models.BooleanField(default=False)
    hidden_reason = models.TextField(blank=True, null=True)
    hidden_at = models.DateTimeField(blank=True, null=True)
    hidden_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        related_name='+',
        on_delete=models.SET_NULL,
        blank=True,
        null=True
    )

    # --- Owner response ---
    owner_response = models.TextField(blank=True, null=True)
    owner_response_at = models.DateTimeField(blank=True, null=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        """Metadata options for the Review model."""

        # Default ordering for querysets: newest reviews first.
        ordering = ['-created_at']

        constraints = [
            # One review per user and campsite, also under concurrent submissions.
            models.UniqueConstraint(fields=['user', 'campsite'], name='unique_review_per_user_and_campsite'),
            models.CheckConstraint(
                condition=models.Q(rating_overall__gte=1) & models.Q(rating_overall__lte=5),
                name='review_rating_overall_between_1_and_5'
            ),
        ]
        indexes = [
            models.Index(fields=['campsite', 'is_hidden', '-created_at'], name='review_campsite_visible_idx'),
            models.Index(fields=['is_reported', 'is_hidden', '-report_count'], name='review_report_queue_idx'),
        ]

        verbose_name = "Review"
        verbose_name_plural = "Reviews"

    def __str__(self):
        return f"Review by {self.user_id} for campsite {self.campsite_id} ({self.rating_overall} stars)"


class ReviewPhoto(models.Model):
    """A photo attached to a review. Files are hosted elsewhere; only the URL is stored."""
    review = models.ForeignKey(Review, related_name='photos', on_delete=models.CASCADE)
    url = models.URLField(max_length=500)
    # Position in the list the author uploaded.
    sort_order = models.PositiveSmallIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['sort_order', 'id']

    def __str__(self):
        return f"Photo {self.sort_order} of review {self.review_id}"


class HelpfulVote(models.Model):
    """
    A user's "this review was helpful" vote. The row's existence is the vote; removing it
    withdraws the vote.
    """
    review = models.ForeignKey(Review, related_name='helpful_votes', on_delete=models.CASCADE)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        related_name='helpful_votes',
        on_delete=models.CASCADE
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=['review', 'user'], name='unique_helpful_vote_per_user'),
        ]

    def __str__(self):
        return f"Helpful vote by {self.user_id} on review {self.review_id}"


class ReviewReport(models.Model):
    """
    A user's report that a review breaks the content rules. Each user can report a review
    once; reports stay as the audit trail after an admin acts on them.
    """

    class Reason(models.TextChoices):
        SPAM = 'spam', 'Spam'
        INAPPROPRIATE = 'inappropriate', 'Inappropriate'
        FAKE = 'fake', 'Fake'
        OTHER = 'other', 'Other'

    review = models.ForeignKey(Review, related_name='reports', on_delete=models.CASCADE)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        related_name='review_reports',
        on_delete=models.CASCADE
    )
    reason = models.CharField(max_length=20, choices=Reason.choices)
    details = models.TextField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at']
        constraints = [
            models.UniqueConstraint(fields=['review', 'user'], name='unique_report_per_user'),
        ]

    def __str__(self):
        return f"Report ({self.reason}) by {self.user_id} on review {self.review_id}"

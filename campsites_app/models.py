from django.db import models
from django.conf import settings

# Create your models here.


class Campsite(models.Model):
    """
    A campsite listed on the marketplace by its owner.

    Only the parts of a listing that reviews and moderation depend on live here: the owner
    (who may answer reviews), the approval status (only approved campsites accept reviews)
    and the cached rating aggregates shown on listing cards.

    Attributes:
        owner (ForeignKey): The user who listed and manages the campsite.
        name (CharField): The public name of the campsite.
        description (TextField): Free-text description of the listing.
        status (CharField): Moderation status, one of `Status`.
        rejection_reason (TextField): Why an admin rejected the listing, if they did.
        average_rating (DecimalField): Mean overall rating of visible reviews, one decimal.
        review_count (PositiveIntegerField): Number of visible reviews.
    """

    class Status(models.TextChoices):
        PENDING = 'pending', 'Pending'
        APPROVED = 'approved', 'Approved'
        REJECTED = 'rejected', 'Rejected'

    # If the owner account is deleted, their listings go with it.
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="campsites")

    name = models.CharField(max_length=255)
    description = models.TextField(blank=True)

    # New listings wait for an admin decision before they are public.
    status = models.CharField(max_length=10, choices=Status.choices, default=Status.PENDING)
    rejection_reason = models.TextField(blank=True, null=True)

    # Cached aggregates, refreshed whenever the set of visible reviews changes.
    average_rating = models.DecimalField(max_digits=2, decimal_places=1, blank=True, null=True)
    review_count = models.PositiveIntegerField(default=0)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-updated_at']

        verbose_name = "Campsite"
        verbose_name_plural = "Campsites"

    def __str__(self):
        """Returns the string representation of the Campsite model."""
        return self.name

    @property
    def accepts_reviews(self):
        return self.status == self.Status.APPROVED

from django.db import models
from django.conf import settings

# Create your models here.


class Profile(models.Model):
    """
    Extends the built-in Django User model with the marketplace-specific identity data.

    The profile is the source of the reviewer's display name and avatar shown next to a
    review, and of the user's role (guest, campsite owner or admin) used by the moderation
    permissions.
    """
    # A one-to-one link to the user model; `user.profile` gives reverse access.
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='profile'
    )

    class Role(models.TextChoices):
        """The user's role within the marketplace."""
        USER = 'user', 'User'
        OWNER = 'owner', 'Owner'
        ADMIN = 'admin', 'Admin'

    # Public display name. Empty means the reviewer is shown as "Anonymous".
    full_name = models.CharField(max_length=150, blank=True, default='')

    # Externally hosted avatar image; storage is handled outside this service.
    avatar_url = models.URLField(max_length=500, blank=True, null=True)

    role = models.CharField(max_length=10, choices=Role.choices, default=Role.USER)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "Profile"
        verbose_name_plural = "Profiles"

    def __str__(self):
        return f"Profile of {self.user.username}"

    @property
    def display_name(self):
        """The name shown publicly next to the user's reviews."""
        return self.full_name or 'Anonymous'

    @property
    def is_admin(self):
        return self.role == self.Role.ADMIN


class OwnerRequest(models.Model):
    """
    A user's application to become a campsite owner.

    Requests start as `pending` and are decided by an admin. Approval upgrades the
    applicant's profile role to `owner`; both outcomes are recorded in the moderation log.
    """

    class Status(models.TextChoices):
        PENDING = 'pending', 'Pending'
        APPROVED = 'approved', 'Approved'
        REJECTED = 'rejected', 'Rejected'

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='owner_requests'
    )
    business_name = models.CharField(max_length=200)
    business_description = models.TextField(blank=True, default='')
    contact_phone = models.CharField(max_length=30, blank=True, default='')
    status = models.CharField(max_length=10, choices=Status.choices, default=Status.PENDING)
    rejection_reason = models.TextField(blank=True, null=True)

    # Who decided the request and when; empty while pending.
    reviewed_at = models.DateTimeField(blank=True, null=True)
    reviewed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        related_name='+',
        blank=True,
        null=True
    )

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at']
        verbose_name = "Owner request"
        verbose_name_plural = "Owner requests"

    def __str__(self):
        return f"{self.business_name} ({self.get_status_display()})"

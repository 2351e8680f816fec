"""
Review use cases: reading, creating, voting, reporting, hiding and owner responses.

Write operations return a `ServiceResult` / `HelpfulVoteResult` and never let database
errors escape. Review-page reads (summary, list, recent) fall back to the empty value when
the database fails; every such fallback is logged as `review_read_degraded`.
"""
from typing import Optional

import structlog
from django.conf import settings
from django.db import DatabaseError, IntegrityError, transaction
from django.db.models import Count, Prefetch, Sum
from django.utils import timezone

from campsites_app.models import Campsite
from .models import RATING_CATEGORIES, HelpfulVote, Review, ReviewPhoto, ReviewReport
from .results import HelpfulVoteResult, ReviewErrorCode, ReviewPage, ServiceError, ServiceResult
from .summary import ReviewSummary, round_half_up, summarize

logger = structlog.get_logger(__name__)

RATING_FIELDS = ('rating_overall',) + tuple(f'rating_{name}' for name in RATING_CATEGORIES)

# Fields a review author supplies; everything else starts at its model default.
REVIEW_INPUT_FIELDS = RATING_FIELDS + (
    'reviewer_type', 'title', 'content', 'pros', 'cons', 'visited_at',
)

SORT_ORDERINGS = {
    'newest': ('-created_at', '-id'),
    'rating_high': ('-rating_overall', '-created_at', '-id'),
    'rating_low': ('rating_overall', '-created_at', '-id'),
    'helpful': ('-helpful_count', '-created_at', '-id'),
}
DEFAULT_SORT = 'newest'

REPORTED_SORT_FIELDS = {
    'report_count': 'report_count',
    'created_at': 'created_at',
}


# --- Query helpers ---

def _visible_reviews(campsite_id):
    return Review.objects.filter(campsite_id=campsite_id, is_hidden=False)


def _hydrated(queryset):
    """Loads author profile, campsite and photos along with the reviews."""
    return queryset.select_related('user__profile', 'campsite').prefetch_related('photos')


def _annotate_helpful_votes(reviews, user_id):
    """Sets `user_helpful_vote` on every review with one query for the whole page."""
    voted_ids = set(
        HelpfulVote.objects
        .filter(user_id=user_id, review_id__in=[review.pk for review in reviews])
        .values_list('review_id', flat=True)
    )
    for review in reviews:
        review.user_helpful_vote = review.pk in voted_ids
    return reviews


def _log_degraded_read(operation, **context):
    logger.warning('review_read_degraded', operation=operation, exc_info=True, **context)


def _row_now_exists(model, **lookup):
    """Re-checks a unique row after an insert hit an IntegrityError. False if unreadable."""
    try:
        return model.objects.filter(**lookup).exists()
    except DatabaseError:
        logger.warning('unique_recheck_failed', model=model.__name__, exc_info=True)
        return False


def _page_bounds(page, page_size):
    page = max(int(page or 1), 1)
    offset = (page - 1) * page_size
    return offset, offset + page_size


def refresh_campsite_rating(campsite_id):
    """Recomputes the cached average rating and review count from the visible reviews."""
    stats = _visible_reviews(campsite_id).aggregate(total=Sum('rating_overall'), count=Count('id'))
    count = stats['count'] or 0
    average = round_half_up(stats['total'], count) if count else None
    Campsite.objects.filter(pk=campsite_id).update(average_rating=average, review_count=count)


# --- Reads ---

def get_review_summary(campsite_id) -> ReviewSummary:
    """
    Returns the rating summary of a campsite's visible reviews.

    A database failure yields the empty summary, which callers cannot tell apart from a
    campsite without reviews.
    """
    try:
        ratings = list(_visible_reviews(campsite_id).values(*RATING_FIELDS))
    except DatabaseError:
        _log_degraded_read('get_review_summary', campsite_id=campsite_id)
        return ReviewSummary.empty()
    return summarize(ratings)


def list_reviews(campsite_id, page=1, page_size=None, sort_by=DEFAULT_SORT,
                 reviewer_type=None, user_id=None) -> ReviewPage:
    """
    Returns one page of a campsite's visible reviews and the total number of matches.

    Args:
        campsite_id: The campsite whose reviews are listed.
        page (int): 1-based page number.
        page_size (int): Reviews per page, defaults to `REVIEWS_PAGE_SIZE`.
        sort_by (str): 'newest' (default), 'rating_high', 'rating_low' or 'helpful'.
            Unknown values fall back to 'newest'.
        reviewer_type (str, optional): Only reviews of this reviewer type.
        user_id (optional): When given, each review gets `user_helpful_vote`.

    Returns:
        ReviewPage: The hydrated reviews and the total, or an empty page on database failure.
    """
    page_size = page_size or settings.REVIEWS_PAGE_SIZE
    start, end = _page_bounds(page, page_size)

    ordering = SORT_ORDERINGS.get(sort_by, SORT_ORDERINGS[DEFAULT_SORT])
    try:
        queryset = _visible_reviews(campsite_id)
        if reviewer_type:
            queryset = queryset.filter(reviewer_type=reviewer_type)
        total = queryset.count()
        reviews = list(_hydrated(queryset.order_by(*ordering))[start:end])
        if user_id is not None:
            _annotate_helpful_votes(reviews, user_id)
    except DatabaseError:
        _log_degraded_read('list_reviews', campsite_id=campsite_id, page=page)
        return ReviewPage.empty()
    return ReviewPage(reviews=reviews, total=total)


def get_recent_reviews(campsite_id, limit=None) -> list:
    """Returns the newest visible reviews of a campsite, or [] on database failure."""
    limit = limit or settings.RECENT_REVIEWS_LIMIT
    try:
        return list(_hydrated(_visible_reviews(campsite_id).order_by(*SORT_ORDERINGS['newest']))[:limit])
    except DatabaseError:
        _log_degraded_read('get_recent_reviews', campsite_id=campsite_id)
        return []


def get_review(review_id, user_id=None) -> ServiceResult:
    """Returns a single visible, hydrated review."""
    try:
        review = _hydrated(Review.objects.filter(pk=review_id, is_hidden=False)).first()
        if review is not None and user_id is not None:
            _annotate_helpful_votes([review], user_id)
    except DatabaseError:
        logger.exception('review_fetch_failed', review_id=review_id)
        return ServiceResult.fail(ReviewErrorCode.STORE_FAILURE)
    if review is None:
        return ServiceResult.fail(ReviewErrorCode.REVIEW_NOT_FOUND)
    return ServiceResult.ok(review)


# --- Review lifecycle ---

def create_review(data, author_id) -> ServiceResult:
    """
    Publishes a new review. There is no approval step; the review is visible right away.

    Args:
        data (dict): `campsite_id`, the rating fields, `reviewer_type`, `title`, `content`,
            optional `pros`, `cons`, `visited_at` and `photo_urls`.
        author_id: The user writing the review.

    Returns:
        ServiceResult: The hydrated review on success, otherwise DUPLICATE_REVIEW,
        CAMPSITE_NOT_ELIGIBLE or STORE_FAILURE.
    """
    campsite_id = data['campsite_id']
    fields = {name: data[name] for name in REVIEW_INPUT_FIELDS if name in data}

    try:
        if Review.objects.filter(user_id=author_id, campsite_id=campsite_id).exists():
            return ServiceResult.fail(ReviewErrorCode.DUPLICATE_REVIEW)

        campsite = Campsite.objects.filter(pk=campsite_id).first()
        if campsite is None or not campsite.accepts_reviews:
            return ServiceResult.fail(ReviewErrorCode.CAMPSITE_NOT_ELIGIBLE)

        with transaction.atomic():
            review = Review.objects.create(campsite_id=campsite_id, user_id=author_id, **fields)
            refresh_campsite_rating(campsite_id)
    except IntegrityError:
        # A concurrent submission for the same campsite wins the unique constraint.
        if _row_now_exists(Review, user_id=author_id, campsite_id=campsite_id):
            return ServiceResult.fail(ReviewErrorCode.DUPLICATE_REVIEW)
        logger.exception('review_create_failed', campsite_id=campsite_id, author_id=author_id)
        return ServiceResult.fail(ReviewErrorCode.STORE_FAILURE)
    except DatabaseError:
        logger.exception('review_create_failed', campsite_id=campsite_id, author_id=author_id)
        return ServiceResult.fail(ReviewErrorCode.STORE_FAILURE)

    photo_urls = data.get('photo_urls') or []
    if photo_urls:
        _attach_photos(review, photo_urls)

    logger.info(
        'review_created',
        review_id=review.pk,
        campsite_id=campsite_id,
        author_id=author_id,
        photo_count=len(photo_urls),
    )

    try:
        hydrated = _hydrated(Review.objects.filter(pk=review.pk)).first()
    except DatabaseError:
        logger.warning('review_hydration_failed', review_id=review.pk, exc_info=True)
        hydrated = None
    return ServiceResult.ok(hydrated or review)


def _attach_photos(review, photo_urls):
    """
    Stores the photo URLs in the given order. A failure here keeps the review and only
    drops the photos.
    """
    photos = [
        ReviewPhoto(review=review, url=url, sort_order=index)
        for index, url in enumerate(photo_urls)
    ]
    try:
        with transaction.atomic():
            ReviewPhoto.objects.bulk_create(photos)
    except DatabaseError:
        logger.warning('review_photos_not_attached', review_id=review.pk, photo_count=len(photos), exc_info=True)


# --- Helpful votes ---

def toggle_helpful(review_id, user_id) -> HelpfulVoteResult:
    """
    Casts the user's helpful vote, or withdraws it if it already exists.

    `helpful_count` in the result is re-read after the change; the counter itself is kept
    by the vote signal receivers.
    """
    try:
        if not Review.objects.filter(pk=review_id).exists():
            return HelpfulVoteResult(
                success=False, voted=False, helpful_count=0,
                error=ServiceError.of(ReviewErrorCode.REVIEW_NOT_FOUND),
            )
        has_voted = HelpfulVote.objects.filter(review_id=review_id, user_id=user_id).exists()
    except DatabaseError:
        logger.exception('helpful_vote_toggle_failed', review_id=review_id, user_id=user_id)
        return HelpfulVoteResult(
            success=False, voted=False, helpful_count=0,
            error=ServiceError.of(ReviewErrorCode.STORE_FAILURE),
        )

    target = not has_voted
    try:
        with transaction.atomic():
            if target:
                HelpfulVote.objects.create(review_id=review_id, user_id=user_id)
            else:
                HelpfulVote.objects.filter(review_id=review_id, user_id=user_id).delete()
    except DatabaseError:
        # Includes a unique-constraint race with a parallel vote by the same user.
        logger.exception('helpful_vote_toggle_failed', review_id=review_id, user_id=user_id, voted=target)
        return HelpfulVoteResult(
            success=False, voted=target, helpful_count=0,
            error=ServiceError.of(ReviewErrorCode.STORE_FAILURE),
        )

    try:
        helpful_count = Review.objects.filter(pk=review_id).values_list('helpful_count', flat=True).first()
    except DatabaseError:
        logger.warning('helpful_count_unreadable', review_id=review_id, exc_info=True)
        helpful_count = None

    logger.info('helpful_vote_toggled', review_id=review_id, user_id=user_id, voted=target)
    return HelpfulVoteResult(success=True, voted=target, helpful_count=helpful_count or 0)


# --- Reports and moderation ---

def report_review(review_id, user_id, reason, details=None) -> ServiceResult:
    """
    Files a user's report against a review. Authors cannot report their own review and
    every user can report a review once. `report_count` and `is_reported` are updated by
    the report signal receivers.
    """
    try:
        author_id = Review.objects.filter(pk=review_id).values_list('user_id', flat=True).first()
        if author_id is None:
            return ServiceResult.fail(ReviewErrorCode.REVIEW_NOT_FOUND)
        if author_id == user_id:
            return ServiceResult.fail(ReviewErrorCode.SELF_REPORT)
        if ReviewReport.objects.filter(review_id=review_id, user_id=user_id).exists():
            return ServiceResult.fail(ReviewErrorCode.ALREADY_REPORTED)

        with transaction.atomic():
            report = ReviewReport.objects.create(
                review_id=review_id,
                user_id=user_id,
                reason=reason,
                details=details,
            )
    except IntegrityError:
        # A parallel report by the same user, or the review vanished in between.
        if _row_now_exists(ReviewReport, review_id=review_id, user_id=user_id):
            return ServiceResult.fail(ReviewErrorCode.ALREADY_REPORTED)
        logger.exception('review_report_failed', review_id=review_id, user_id=user_id)
        return ServiceResult.fail(ReviewErrorCode.STORE_FAILURE)
    except DatabaseError:
        logger.exception('review_report_failed', review_id=review_id, user_id=user_id)
        return ServiceResult.fail(ReviewErrorCode.STORE_FAILURE)

    logger.info('review_reported', review_id=review_id, user_id=user_id, reason=reason)
    return ServiceResult.ok(report)


def hide_review(review_id, admin_id, reason) -> ServiceResult:
    """Hides a review from all listings and summaries. Works on any review, reported or not."""
    now = timezone.now()
    try:
        campsite_id = Review.objects.filter(pk=review_id).values_list('campsite_id', flat=True).first()
        if campsite_id is None:
            return ServiceResult.fail(ReviewErrorCode.REVIEW_NOT_FOUND)
        with transaction.atomic():
            Review.objects.filter(pk=review_id).update(
                is_hidden=True,
                hidden_reason=reason,
                hidden_at=now,
                hidden_by_id=admin_id,
                updated_at=now,
            )
            refresh_campsite_rating(campsite_id)
    except DatabaseError:
        logger.exception('review_hide_failed', review_id=review_id, admin_id=admin_id)
        return ServiceResult.fail(ReviewErrorCode.STORE_FAILURE)

    logger.info('review_hidden', review_id=review_id, admin_id=admin_id)
    return ServiceResult.ok({'review_id': review_id, 'is_hidden': True, 'hidden_at': now})


def unhide_review(review_id) -> ServiceResult:
    """Makes a hidden review visible again and clears the moderation fields."""
    try:
        campsite_id = Review.objects.filter(pk=review_id).values_list('campsite_id', flat=True).first()
        if campsite_id is None:
            return ServiceResult.fail(ReviewErrorCode.REVIEW_NOT_FOUND)
        with transaction.atomic():
            Review.objects.filter(pk=review_id).update(
                is_hidden=False,
                hidden_reason=None,
                hidden_at=None,
                hidden_by=None,
                updated_at=timezone.now(),
            )
            refresh_campsite_rating(campsite_id)
    except DatabaseError:
        logger.exception('review_unhide_failed', review_id=review_id)
        return ServiceResult.fail(ReviewErrorCode.STORE_FAILURE)

    logger.info('review_unhidden', review_id=review_id)
    return ServiceResult.ok({'review_id': review_id, 'is_hidden': False})


def get_reported_reviews(page=1, page_size=None, min_reports: Optional[int] = None,
                         sort_by='report_count', sort_order='desc') -> ReviewPage:
    """
    Returns the moderation queue: reported reviews that are still visible, most reported
    first by default. Each review comes with its reports and their authors.
    """
    page_size = page_size or settings.REPORTED_REVIEWS_PAGE_SIZE
    start, end = _page_bounds(page, page_size)

    queryset = Review.objects.filter(is_reported=True, is_hidden=False)
    if min_reports:
        queryset = queryset.filter(report_count__gte=min_reports)

    field = REPORTED_SORT_FIELDS.get(sort_by, 'report_count')
    ordering = field if sort_order == 'asc' else f'-{field}'

    try:
        total = queryset.count()
        reviews = list(
            _hydrated(queryset.order_by(ordering, '-id'))
            .prefetch_related(Prefetch('reports', queryset=ReviewReport.objects.select_related('user__profile')))
            [start:end]
        )
    except DatabaseError:
        _log_degraded_read('get_reported_reviews', page=page)
        return ReviewPage.empty()
    return ReviewPage(reviews=reviews, total=total)


# --- Owner responses ---

def add_owner_response(review_id, owner_id, response_text) -> ServiceResult:
    """
    Stores the campsite owner's public answer to a review, replacing any earlier one.
    Only the owner of the reviewed campsite may respond.
    """
    try:
        review = Review.objects.select_related('campsite').filter(pk=review_id).first()
        if review is None:
            return ServiceResult.fail(ReviewErrorCode.REVIEW_NOT_FOUND)
        if review.campsite.owner_id != owner_id:
            return ServiceResult.fail(ReviewErrorCode.NOT_AUTHORIZED)

        now = timezone.now()
        Review.objects.filter(pk=review_id).update(
            owner_response=response_text,
            owner_response_at=now,
            updated_at=now,
        )
    except DatabaseError:
        logger.exception('owner_response_failed', review_id=review_id, owner_id=owner_id)
        return ServiceResult.fail(ReviewErrorCode.STORE_FAILURE)

    review.owner_response = response_text
    review.owner_response_at = now
    logger.info('owner_response_added', review_id=review_id, owner_id=owner_id)
    return ServiceResult.ok(review)

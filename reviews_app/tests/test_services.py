from decimal import Decimal
from unittest import mock

from django.contrib.auth.models import User
from django.db import DatabaseError, IntegrityError
from django.test import TestCase
from structlog.testing import capture_logs

from campsites_app.models import Campsite
from reviews_app import services
from reviews_app.models import HelpfulVote, Review, ReviewPhoto, ReviewReport
from reviews_app.results import ReviewErrorCode

REVIEW_TEXT = 'Quiet pitches, clean showers and a lovely lake view.'


def review_input(campsite, **overrides):
    data = {
        'campsite_id': campsite.pk,
        'rating_overall': 4,
        'reviewer_type': Review.ReviewerType.FAMILY,
        'title': 'Great weekend',
        'content': REVIEW_TEXT,
    }
    data.update(overrides)
    return data


def make_review(campsite, user, rating=4, **fields):
    return Review.objects.create(
        campsite=campsite,
        user=user,
        rating_overall=rating,
        reviewer_type=fields.pop('reviewer_type', Review.ReviewerType.COUPLE),
        content=REVIEW_TEXT,
        **fields
    )


class ReviewServiceTestCase(TestCase):
    """Common data: an owner with an approved and a pending campsite, and three guests."""

    def setUp(self):
        self.owner = User.objects.create_user(username='owner', password='password123')
        self.author = User.objects.create_user(username='author', password='password123')
        self.guest = User.objects.create_user(username='guest', password='password123')
        self.other_guest = User.objects.create_user(username='other_guest', password='password123')
        self.admin = User.objects.create_user(username='admin', password='password123', is_staff=True)

        self.campsite = Campsite.objects.create(
            owner=self.owner, name='Lakeside', status=Campsite.Status.APPROVED
        )
        self.pending_campsite = Campsite.objects.create(owner=self.owner, name='Not Yet Open')


# ====================================================================
# CLASS 1: Creating reviews
# ====================================================================
class CreateReviewTests(ReviewServiceTestCase):

    def test_create_review_publishes_immediately(self):
        self.author.profile.full_name = 'Anna Author'
        self.author.profile.save()

        result = services.create_review(review_input(self.campsite), self.author.pk)

        self.assertTrue(result.success)
        review = result.data
        self.assertFalse(review.is_hidden)
        self.assertFalse(review.is_reported)
        self.assertEqual(review.report_count, 0)
        self.assertEqual(review.helpful_count, 0)
        self.assertIsNone(review.owner_response)
        # Hydrated with the author's profile.
        self.assertEqual(review.user.profile.display_name, 'Anna Author')

    def test_second_review_for_same_campsite_is_rejected(self):
        first = services.create_review(review_input(self.campsite), self.author.pk)
        second = services.create_review(review_input(self.campsite, rating_overall=1), self.author.pk)

        self.assertTrue(first.success)
        self.assertFalse(second.success)
        self.assertEqual(second.error_code, ReviewErrorCode.DUPLICATE_REVIEW)
        self.assertEqual(second.error.message, 'You have already reviewed this campsite')
        self.assertEqual(Review.objects.filter(user=self.author).count(), 1)

    def test_pending_campsite_is_not_eligible(self):
        result = services.create_review(review_input(self.pending_campsite), self.author.pk)

        self.assertEqual(result.error_code, ReviewErrorCode.CAMPSITE_NOT_ELIGIBLE)
        self.assertFalse(Review.objects.exists())

    def test_unknown_campsite_is_not_eligible(self):
        result = services.create_review({**review_input(self.campsite), 'campsite_id': 999999}, self.author.pk)

        self.assertEqual(result.error_code, ReviewErrorCode.CAMPSITE_NOT_ELIGIBLE)

    def test_photos_keep_input_order(self):
        urls = ['https://img.example.com/b.jpg', 'https://img.example.com/a.jpg', 'https://img.example.com/c.jpg']

        result = services.create_review(review_input(self.campsite, photo_urls=urls), self.author.pk)

        photos = list(result.data.photos.all())
        self.assertEqual([photo.url for photo in photos], urls)
        self.assertEqual([photo.sort_order for photo in photos], [0, 1, 2])

    def test_photo_failure_keeps_the_review(self):
        """Photos are attached best-effort; the review itself stays published."""
        with mock.patch.object(ReviewPhoto.objects, 'bulk_create', side_effect=DatabaseError('storage down')):
            result = services.create_review(
                review_input(self.campsite, photo_urls=['https://img.example.com/a.jpg']),
                self.author.pk,
            )

        self.assertTrue(result.success)
        self.assertTrue(Review.objects.filter(pk=result.data.pk).exists())
        self.assertEqual(ReviewPhoto.objects.count(), 0)

    def test_store_failure_is_reported(self):
        with mock.patch.object(Review.objects, 'create', side_effect=DatabaseError('connection lost')):
            result = services.create_review(review_input(self.campsite), self.author.pk)

        self.assertFalse(result.success)
        self.assertEqual(result.error_code, ReviewErrorCode.STORE_FAILURE)

    def test_concurrent_duplicate_loses_on_the_unique_constraint(self):
        """A parallel submission lands between the duplicate check and the insert."""
        find_campsites = Campsite.objects.filter

        def campsite_lookup_with_parallel_insert(*args, **kwargs):
            make_review(self.campsite, self.author, rating=5)
            return find_campsites(*args, **kwargs)

        with mock.patch.object(Campsite.objects, 'filter', side_effect=campsite_lookup_with_parallel_insert):
            result = services.create_review(review_input(self.campsite), self.author.pk)

        self.assertEqual(result.error_code, ReviewErrorCode.DUPLICATE_REVIEW)
        self.assertEqual(Review.objects.filter(user=self.author, campsite=self.campsite).count(), 1)

    def test_unreadable_recheck_after_constraint_error_is_a_store_failure(self):
        find_reviews = Review.objects.filter
        lookups = []

        def review_lookup(*args, **kwargs):
            lookups.append(kwargs)
            if len(lookups) > 1:
                raise DatabaseError('connection lost')
            return find_reviews(*args, **kwargs)

        with mock.patch.object(Review.objects, 'create', side_effect=IntegrityError('constraint failed')):
            with mock.patch.object(Review.objects, 'filter', side_effect=review_lookup):
                result = services.create_review(review_input(self.campsite), self.author.pk)

        self.assertEqual(result.error_code, ReviewErrorCode.STORE_FAILURE)
        self.assertEqual(len(lookups), 2)

    def test_campsite_rating_cache_is_refreshed(self):
        services.create_review(review_input(self.campsite, rating_overall=5), self.author.pk)
        services.create_review(review_input(self.campsite, rating_overall=4), self.guest.pk)

        self.campsite.refresh_from_db()
        self.assertEqual(self.campsite.review_count, 2)
        self.assertEqual(self.campsite.average_rating, Decimal('4.5'))


# ====================================================================
# CLASS 2: Reading reviews
# ====================================================================
class ReadReviewTests(ReviewServiceTestCase):

    def setUp(self):
        super().setUp()
        self.low = make_review(self.campsite, self.author, rating=2, reviewer_type=Review.ReviewerType.SOLO)
        self.high = make_review(self.campsite, self.guest, rating=5)
        self.middle = make_review(self.campsite, self.other_guest, rating=4)
        Review.objects.filter(pk=self.middle.pk).update(helpful_count=7)

    def test_list_defaults_to_newest_first(self):
        page = services.list_reviews(self.campsite.pk)

        self.assertEqual(page.total, 3)
        self.assertEqual([review.pk for review in page.reviews], [self.middle.pk, self.high.pk, self.low.pk])

    def test_list_sort_options(self):
        by_high = services.list_reviews(self.campsite.pk, sort_by='rating_high')
        by_low = services.list_reviews(self.campsite.pk, sort_by='rating_low')
        by_helpful = services.list_reviews(self.campsite.pk, sort_by='helpful')

        self.assertEqual([r.rating_overall for r in by_high.reviews], [5, 4, 2])
        self.assertEqual([r.rating_overall for r in by_low.reviews], [2, 4, 5])
        self.assertEqual(by_helpful.reviews[0].pk, self.middle.pk)

    def test_list_pagination_is_offset_based(self):
        first = services.list_reviews(self.campsite.pk, page=1, page_size=2)
        second = services.list_reviews(self.campsite.pk, page=2, page_size=2)

        self.assertEqual(len(first.reviews), 2)
        self.assertEqual([review.pk for review in second.reviews], [self.low.pk])
        self.assertEqual(second.total, 3)

    def test_list_filters_by_reviewer_type(self):
        page = services.list_reviews(self.campsite.pk, reviewer_type=Review.ReviewerType.SOLO)

        self.assertEqual(page.total, 1)
        self.assertEqual(page.reviews[0].pk, self.low.pk)

    def test_list_excludes_hidden_reviews(self):
        Review.objects.filter(pk=self.high.pk).update(is_hidden=True)

        page = services.list_reviews(self.campsite.pk)

        self.assertEqual(page.total, 2)
        self.assertNotIn(self.high.pk, [review.pk for review in page.reviews])

    def test_helpful_votes_are_looked_up_in_one_batch(self):
        HelpfulVote.objects.create(review=self.high, user=self.author)

        # count, reviews with authors, photos, the user's votes
        with self.assertNumQueries(4):
            page = services.list_reviews(self.campsite.pk, user_id=self.author.pk)

        votes = {review.pk: review.user_helpful_vote for review in page.reviews}
        self.assertEqual(votes, {self.high.pk: True, self.low.pk: False, self.middle.pk: False})

    def test_recent_reviews_respects_limit(self):
        recent = services.get_recent_reviews(self.campsite.pk, limit=2)

        self.assertEqual([review.pk for review in recent], [self.middle.pk, self.high.pk])

    def test_summary_only_counts_visible_reviews(self):
        Review.objects.filter(pk=self.low.pk).update(is_hidden=True)

        summary = services.get_review_summary(self.campsite.pk)

        self.assertEqual(summary.total_count, 2)
        self.assertEqual(summary.average_rating, 4.5)
        self.assertEqual(summary.rating_distribution[2], 0)

    def test_summary_of_campsite_without_reviews(self):
        summary = services.get_review_summary(self.pending_campsite.pk)

        self.assertEqual(summary.total_count, 0)
        self.assertEqual(summary.average_rating, 0)

    def test_read_failures_degrade_to_empty_results_and_are_logged(self):
        with mock.patch.object(Review.objects, 'filter', side_effect=DatabaseError('timeout')):
            with capture_logs() as logs:
                summary = services.get_review_summary(self.campsite.pk)
                page = services.list_reviews(self.campsite.pk)
                recent = services.get_recent_reviews(self.campsite.pk)

        self.assertEqual(summary.total_count, 0)
        self.assertEqual(page, ([], 0))
        self.assertEqual(recent, [])

        degraded = [entry for entry in logs if entry['event'] == 'review_read_degraded']
        self.assertEqual(
            [entry['operation'] for entry in degraded],
            ['get_review_summary', 'list_reviews', 'get_recent_reviews'],
        )
        self.assertTrue(all(entry['log_level'] == 'warning' for entry in degraded))

    def test_get_review_hides_hidden_reviews(self):
        Review.objects.filter(pk=self.low.pk).update(is_hidden=True)

        self.assertEqual(services.get_review(self.low.pk).error_code, ReviewErrorCode.REVIEW_NOT_FOUND)
        self.assertTrue(services.get_review(self.high.pk).success)


# ====================================================================
# CLASS 3: Helpful votes
# ====================================================================
class ToggleHelpfulTests(ReviewServiceTestCase):

    def setUp(self):
        super().setUp()
        self.review = make_review(self.campsite, self.author)

    def test_toggle_votes_then_unvotes(self):
        first = services.toggle_helpful(self.review.pk, self.guest.pk)
        second = services.toggle_helpful(self.review.pk, self.guest.pk)

        self.assertTrue(first.success)
        self.assertTrue(first.voted)
        self.assertEqual(first.helpful_count, 1)
        self.assertTrue(second.success)
        self.assertFalse(second.voted)
        self.assertEqual(second.helpful_count, 0)
        self.assertFalse(HelpfulVote.objects.exists())

    def test_votes_from_different_users_add_up(self):
        services.toggle_helpful(self.review.pk, self.guest.pk)
        result = services.toggle_helpful(self.review.pk, self.other_guest.pk)

        self.assertEqual(result.helpful_count, 2)
        self.review.refresh_from_db()
        self.assertEqual(self.review.helpful_count, 2)

    def test_unknown_review(self):
        result = services.toggle_helpful(999999, self.guest.pk)

        self.assertFalse(result.success)
        self.assertEqual(result.error_code, ReviewErrorCode.REVIEW_NOT_FOUND)

    def test_insert_failure_reports_attempted_state(self):
        """A rejected insert (e.g. a parallel duplicate vote) is an error, never a success."""
        with mock.patch.object(HelpfulVote.objects, 'create', side_effect=IntegrityError('duplicate key')):
            result = services.toggle_helpful(self.review.pk, self.guest.pk)

        self.assertFalse(result.success)
        self.assertTrue(result.voted)
        self.assertEqual(result.helpful_count, 0)
        self.assertEqual(result.error_code, ReviewErrorCode.STORE_FAILURE)

    def test_counter_never_drops_below_zero(self):
        vote = HelpfulVote.objects.create(review=self.review, user=self.guest)
        Review.objects.filter(pk=self.review.pk).update(helpful_count=0)

        vote.delete()

        self.review.refresh_from_db()
        self.assertEqual(self.review.helpful_count, 0)


# ====================================================================
# CLASS 4: Reports, hiding and the moderation queue
# ====================================================================
class ReportAndHideTests(ReviewServiceTestCase):

    def setUp(self):
        super().setUp()
        self.review = make_review(self.campsite, self.author, rating=1)
        self.other_review = make_review(self.campsite, self.guest, rating=5)

    def test_author_cannot_report_own_review(self):
        result = services.report_review(self.review.pk, self.author.pk, ReviewReport.Reason.SPAM)

        self.assertEqual(result.error_code, ReviewErrorCode.SELF_REPORT)
        self.assertFalse(ReviewReport.objects.exists())

    def test_user_can_report_a_review_once(self):
        first = services.report_review(self.review.pk, self.guest.pk, ReviewReport.Reason.FAKE, 'Never stayed here')
        second = services.report_review(self.review.pk, self.guest.pk, ReviewReport.Reason.SPAM)

        self.assertTrue(first.success)
        self.assertEqual(second.error_code, ReviewErrorCode.ALREADY_REPORTED)

    def test_reports_from_different_users_accumulate(self):
        services.report_review(self.review.pk, self.guest.pk, ReviewReport.Reason.SPAM)
        result = services.report_review(self.review.pk, self.other_guest.pk, ReviewReport.Reason.OTHER)

        self.assertTrue(result.success)
        self.review.refresh_from_db()
        self.assertTrue(self.review.is_reported)
        self.assertEqual(self.review.report_count, 2)
        # Reports do not hide the review on their own.
        self.assertFalse(self.review.is_hidden)

    def test_report_unknown_review(self):
        result = services.report_review(999999, self.guest.pk, ReviewReport.Reason.SPAM)

        self.assertEqual(result.error_code, ReviewErrorCode.REVIEW_NOT_FOUND)

    def test_concurrent_report_loses_on_the_unique_constraint(self):
        find_reports = ReviewReport.objects.filter
        lookups = []

        def report_lookup_with_parallel_insert(*args, **kwargs):
            lookups.append(kwargs)
            if len(lookups) == 1:
                # The duplicate check sees nothing; the parallel report is stored right after.
                ReviewReport.objects.create(review=self.review, user=self.guest, reason=ReviewReport.Reason.FAKE)
                return ReviewReport.objects.none()
            return find_reports(*args, **kwargs)

        with mock.patch.object(ReviewReport.objects, 'filter', side_effect=report_lookup_with_parallel_insert):
            result = services.report_review(self.review.pk, self.guest.pk, ReviewReport.Reason.SPAM)

        self.assertEqual(result.error_code, ReviewErrorCode.ALREADY_REPORTED)
        self.assertEqual(ReviewReport.objects.filter(review=self.review, user=self.guest).count(), 1)
        self.review.refresh_from_db()
        self.assertEqual(self.review.report_count, 1)

    def test_constraint_error_without_existing_report_is_a_store_failure(self):
        """E.g. the review was deleted between the lookup and the insert."""
        with mock.patch.object(
            ReviewReport.objects, 'create', side_effect=IntegrityError('FOREIGN KEY constraint failed')
        ):
            result = services.report_review(self.review.pk, self.guest.pk, ReviewReport.Reason.SPAM)

        self.assertEqual(result.error_code, ReviewErrorCode.STORE_FAILURE)
        self.review.refresh_from_db()
        self.assertEqual(self.review.report_count, 0)
        self.assertFalse(self.review.is_reported)

    def test_hide_removes_review_from_summary_and_list_and_unhide_restores_it(self):
        result = services.hide_review(self.review.pk, self.admin.pk, 'Offensive language')

        self.assertTrue(result.success)
        self.review.refresh_from_db()
        self.assertTrue(self.review.is_hidden)
        self.assertEqual(self.review.hidden_reason, 'Offensive language')
        self.assertEqual(self.review.hidden_by, self.admin)
        self.assertIsNotNone(self.review.hidden_at)

        summary = services.get_review_summary(self.campsite.pk)
        self.assertEqual(summary.total_count, 1)
        self.assertEqual(summary.average_rating, 5.0)
        self.assertEqual(summary.rating_distribution[1], 0)
        self.assertEqual(services.list_reviews(self.campsite.pk).total, 1)

        services.unhide_review(self.review.pk)

        self.review.refresh_from_db()
        self.assertFalse(self.review.is_hidden)
        self.assertIsNone(self.review.hidden_reason)
        self.assertIsNone(self.review.hidden_at)
        self.assertIsNone(self.review.hidden_by)
        self.assertEqual(services.get_review_summary(self.campsite.pk).total_count, 2)
        self.assertEqual(services.get_review_summary(self.campsite.pk).average_rating, 3.0)

    def test_hide_updates_campsite_rating_cache(self):
        services.hide_review(self.review.pk, self.admin.pk, 'Spam')

        self.campsite.refresh_from_db()
        self.assertEqual(self.campsite.review_count, 1)
        self.assertEqual(self.campsite.average_rating, Decimal('5.0'))

    def test_hide_unknown_review(self):
        result = services.hide_review(999999, self.admin.pk, 'Spam')

        self.assertEqual(result.error_code, ReviewErrorCode.REVIEW_NOT_FOUND)

    def test_reported_queue_orders_by_report_count(self):
        services.report_review(self.review.pk, self.guest.pk, ReviewReport.Reason.SPAM)
        services.report_review(self.review.pk, self.other_guest.pk, ReviewReport.Reason.SPAM)
        services.report_review(self.other_review.pk, self.author.pk, ReviewReport.Reason.FAKE)

        page = services.get_reported_reviews()

        self.assertEqual(page.total, 2)
        self.assertEqual([review.pk for review in page.reviews], [self.review.pk, self.other_review.pk])

        only_frequent = services.get_reported_reviews(min_reports=2)
        self.assertEqual([review.pk for review in only_frequent.reviews], [self.review.pk])

    def test_reported_queue_skips_hidden_reviews(self):
        services.report_review(self.review.pk, self.guest.pk, ReviewReport.Reason.SPAM)
        services.hide_review(self.review.pk, self.admin.pk, 'Spam')

        self.assertEqual(services.get_reported_reviews().total, 0)


# ====================================================================
# CLASS 5: Owner responses
# ====================================================================
class OwnerResponseTests(ReviewServiceTestCase):

    def setUp(self):
        super().setUp()
        self.review = make_review(self.campsite, self.author)
        self.other_owner = User.objects.create_user(username='other_owner', password='password123')

    def test_only_the_campsite_owner_can_respond(self):
        result = services.add_owner_response(self.review.pk, self.other_owner.pk, 'Thanks for staying!')

        self.assertEqual(result.error_code, ReviewErrorCode.NOT_AUTHORIZED)
        self.review.refresh_from_db()
        self.assertIsNone(self.review.owner_response)

    def test_owner_response_is_stored_and_overwritten(self):
        services.add_owner_response(self.review.pk, self.owner.pk, 'Thanks for staying!')
        result = services.add_owner_response(self.review.pk, self.owner.pk, 'Thanks, see you next summer!')

        self.assertTrue(result.success)
        self.review.refresh_from_db()
        self.assertEqual(self.review.owner_response, 'Thanks, see you next summer!')
        self.assertIsNotNone(self.review.owner_response_at)

    def test_response_to_unknown_review(self):
        result = services.add_owner_response(999999, self.owner.pk, 'Thanks for staying!')

        self.assertEqual(result.error_code, ReviewErrorCode.REVIEW_NOT_FOUND)

from decimal import Decimal

from django.test import SimpleTestCase

from reviews_app.summary import ReviewSummary, round_half_up, summarize


def ratings(*overall):
    """Builds review rows that only carry an overall rating."""
    return [{'rating_overall': value} for value in overall]


class SummarizeTests(SimpleTestCase):
    """
    Tests for the pure rating summary computation. No database access is needed, the
    function works on already loaded rows.
    """

    def test_empty_input_gives_zero_summary(self):
        summary = summarize([])

        self.assertEqual(summary.average_rating, 0)
        self.assertEqual(summary.total_count, 0)
        self.assertEqual(summary.rating_distribution, {1: 0, 2: 0, 3: 0, 4: 0, 5: 0})
        self.assertEqual(summary.rating_percentages, {1: 0, 2: 0, 3: 0, 4: 0, 5: 0})
        self.assertEqual(
            summary.category_averages,
            {'cleanliness': None, 'staff': None, 'facilities': None, 'value': None, 'location': None},
        )
        self.assertEqual(summary, ReviewSummary.empty())

    def test_average_is_rounded_to_one_decimal(self):
        summary = summarize(ratings(5, 4, 4))

        self.assertEqual(summary.average_rating, 4.3)
        self.assertEqual(summary.total_count, 3)
        self.assertEqual(summary.rating_distribution, {1: 0, 2: 0, 3: 0, 4: 2, 5: 1})

    def test_exact_halves_round_up(self):
        # 17 / 4 = 4.25; banker's rounding would give 4.2.
        self.assertEqual(summarize(ratings(4, 4, 5, 4)).average_rating, 4.3)
        # 7 / 4 = 1.75
        self.assertEqual(summarize(ratings(1, 2, 2, 2)).average_rating, 1.8)
        self.assertEqual(summarize(ratings(4, 5)).average_rating, 4.5)

    def test_percentages_per_bucket(self):
        summary = summarize(ratings(5, 5, 4, 3))

        self.assertEqual(summary.rating_percentages, {1: 0, 2: 0, 3: 25, 4: 25, 5: 50})

    def test_percentages_are_not_corrected_to_one_hundred(self):
        """Three equal groups round to 33 each, summing to 99."""
        summary = summarize(ratings(5, 5, 4, 4, 3, 3))

        self.assertEqual(summary.rating_distribution, {1: 0, 2: 0, 3: 2, 4: 2, 5: 2})
        self.assertEqual(summary.rating_percentages, {1: 0, 2: 0, 3: 33, 4: 33, 5: 33})

    def test_distribution_sums_to_total_count(self):
        summary = summarize(ratings(1, 2, 3, 3, 4, 5, 5, 5))

        self.assertEqual(sum(summary.rating_distribution.values()), summary.total_count)
        self.assertEqual(summary.average_rating, 3.5)

    def test_category_averages_ignore_missing_values_per_category(self):
        summary = summarize([
            {'rating_overall': 4, 'rating_cleanliness': 5, 'rating_staff': None},
            {'rating_overall': 5, 'rating_cleanliness': 4, 'rating_staff': None},
        ])

        self.assertEqual(summary.category_averages['cleanliness'], 4.5)
        self.assertIsNone(summary.category_averages['staff'])
        self.assertIsNone(summary.category_averages['location'])

    def test_category_denominator_only_counts_rated_reviews(self):
        summary = summarize([
            {'rating_overall': 5, 'rating_value': 2},
            {'rating_overall': 5},
            {'rating_overall': 5},
        ])

        self.assertEqual(summary.category_averages['value'], 2.0)
        self.assertEqual(summary.total_count, 3)

    def test_out_of_range_ratings_are_ignored(self):
        summary = summarize([
            {'rating_overall': 5, 'rating_location': 0},
            {'rating_overall': 9, 'rating_location': 3},
        ])

        self.assertEqual(summary.total_count, 2)
        self.assertEqual(summary.rating_distribution, {1: 0, 2: 0, 3: 0, 4: 0, 5: 1})
        self.assertEqual(summary.average_rating, 5.0)
        self.assertEqual(summary.rating_percentages[5], 50)
        self.assertEqual(summary.category_averages['location'], 3.0)

    def test_non_finite_ratings_are_ignored(self):
        summary = summarize([
            {'rating_overall': float('nan'), 'rating_staff': float('inf')},
            {'rating_overall': 5, 'rating_staff': Decimal('NaN')},
            {'rating_overall': Decimal('Infinity'), 'rating_staff': 4},
            {'rating_overall': float('-inf'), 'rating_staff': Decimal('sNaN')},
        ])

        self.assertEqual(summary.total_count, 4)
        self.assertEqual(summary.rating_distribution, {1: 0, 2: 0, 3: 0, 4: 0, 5: 1})
        self.assertEqual(summary.average_rating, 5.0)
        self.assertEqual(summary.rating_percentages[5], 25)
        self.assertEqual(summary.category_averages['staff'], 4.0)

    def test_accepts_objects_with_rating_attributes(self):
        class Row:
            rating_overall = 3
            rating_staff = 4

        summary = summarize([Row()])

        self.assertEqual(summary.average_rating, 3.0)
        self.assertEqual(summary.category_averages['staff'], 4.0)

    def test_as_dict_shape(self):
        data = summarize(ratings(5)).as_dict()

        self.assertEqual(
            set(data),
            {'average_rating', 'total_count', 'rating_distribution', 'rating_percentages', 'category_averages'},
        )
        self.assertEqual(data['rating_percentages'][5], 100)


class RoundHalfUpTests(SimpleTestCase):

    def test_rounds_halves_away_from_zero(self):
        self.assertEqual(str(round_half_up(13, 3)), '4.3')
        self.assertEqual(str(round_half_up(85, 20)), '4.3')
